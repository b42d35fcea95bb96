"""
Global Error Handling

Exception handlers translating MediaWiki client failures into HTTP
responses for the FastAPI facade.

- Upstream API errors keep their MediaWiki code and info
- Transport and shape failures report a fixed message
- Anything else becomes a generic 500 with the traceback logged only
"""

from __future__ import annotations

import logging
from typing import Dict, Any

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from ..wiki.api_client import (
    MediaWikiApiError,
    MediaWikiRequestError,
    MediaWikiResponseError,
)

logger = logging.getLogger("mwext.errors")


def _error(status_code: int, error: str, detail: str) -> JSONResponse:
    payload: Dict[str, Any] = {"error": error, "detail": detail}
    return JSONResponse(status_code=status_code, content=payload)


async def mediawiki_api_error_handler(request: Request, exc: MediaWikiApiError) -> JSONResponse:
    logger.warning("MediaWiki API error on %s: %s", request.url.path, exc.code)
    return _error(status.HTTP_502_BAD_GATEWAY, exc.code, exc.info)


async def mediawiki_request_error_handler(request: Request, exc: MediaWikiRequestError) -> JSONResponse:
    logger.warning("MediaWiki unreachable on %s: %s", request.url.path, exc)
    return _error(
        status.HTTP_503_SERVICE_UNAVAILABLE,
        "upstream_unavailable",
        "MediaWiki API request failed",
    )


async def mediawiki_response_error_handler(request: Request, exc: MediaWikiResponseError) -> JSONResponse:
    logger.warning("Unexpected MediaWiki response on %s: %s", request.url.path, exc)
    return _error(
        status.HTTP_502_BAD_GATEWAY,
        "unexpected_response",
        "MediaWiki API returned an unexpected response",
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all: log the traceback, return a minimal 500."""
    logger.exception(
        "Unhandled exception during request: %s %s",
        request.method,
        request.url.path,
        exc_info=exc,
    )
    return _error(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "internal_server_error",
        "Internal server error",
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(MediaWikiApiError, mediawiki_api_error_handler)
    app.add_exception_handler(MediaWikiRequestError, mediawiki_request_error_handler)
    app.add_exception_handler(MediaWikiResponseError, mediawiki_response_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
