"""
Wiki Context

Explicit replacement for the ambient state a browser-side API extension
would read from globals: the current page name, a way to obtain a fresh
CSRF token, and a sink for user-facing notifications.
"""

from __future__ import annotations

import logging
from typing import Awaitable, Callable, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..config import settings
from .api_client import MediaWikiClient

notify_logger = logging.getLogger("mwext.notify")

TokenProvider = Callable[[], Awaitable[str]]
Notifier = Callable[[str], None]


def log_notifier(message: str) -> None:
    """Default notifier: surface the message on the ``mwext.notify`` logger."""
    notify_logger.warning(message)


class WikiContext(BaseModel):
    """
    Per-adapter environment defaults.

    Immutable once built so that concurrent operations sharing an adapter
    never observe each other's changes.
    """

    page_name: str = Field(
        ...,
        min_length=1,
        description="Title used when an operation is not given one.",
    )

    token_provider: TokenProvider = Field(
        ...,
        description="Async callable returning a fresh CSRF token.",
    )

    notifier: Notifier = Field(
        default=log_notifier,
        description="Receives user-facing failure messages.",
    )

    model_config = ConfigDict(
        frozen=True,
        arbitrary_types_allowed=True,
        extra="forbid",
    )


def build_context(
    client: MediaWikiClient,
    page_name: Optional[str] = None,
    notifier: Optional[Notifier] = None,
) -> WikiContext:
    """Wire a context whose tokens come from ``client``."""
    return WikiContext(
        page_name=page_name or settings.default_page_name,
        token_provider=client.get_csrf_token,
        notifier=notifier or log_notifier,
    )
