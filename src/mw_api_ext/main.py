"""
Application Entry Point

FastAPI application exposing the MediaWiki API extensions over HTTP.
`create_app()` builds an isolated instance for tests; `app` is the
default instance for Uvicorn.
"""

from __future__ import annotations

import logging
from fastapi import FastAPI

from .config import settings
from .core.errors import register_exception_handlers

from .api import (
    health_routes,
    page_routes,
    user_routes,
)


logger = logging.getLogger("mwext.app")


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns
    -------
    FastAPI
        Application with routers and exception handlers registered.
    """
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    app = FastAPI(
        title="mw-api-ext",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    register_exception_handlers(app)

    app.include_router(health_routes.router)
    app.include_router(page_routes.router)
    app.include_router(user_routes.router)

    @app.on_event("startup")
    async def _startup_validation() -> None:
        """Fail fast on configuration that would break the first request."""
        logger.info("Starting mw-api-ext against %s", settings.mw_api_base_url)

        if settings.jwt_client_to_ext_secret is None:
            logger.warning("jwt_client_to_ext_secret is unset; protected routes will fail")
        if settings.jwt_ttl_seconds <= 0:
            raise RuntimeError("jwt_ttl_seconds must be positive")

        logger.info("Configuration validated successfully")

    @app.on_event("shutdown")
    async def _shutdown() -> None:
        logger.info("Shutting down mw-api-ext")

    return app


app = create_app()
