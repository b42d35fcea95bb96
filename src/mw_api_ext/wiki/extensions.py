"""
MediaWiki API Extensions

Convenience operations layered on ``MediaWikiClient``:

- editing a page with an optional completion handler
- fetching the current wikitext of a page
- listing the members of a user group
- counting a user's edits over a time range

Each operation is a thin adapter: it builds one or more API requests,
maps the response onto a Python value, and raises one of the
``MediaWikiClientError`` subclasses on failure.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional

from .api_client import (
    MediaWikiApiError,
    MediaWikiClient,
    MediaWikiClientError,
    MediaWikiRequestError,
    MediaWikiResponseError,
)
from .context import WikiContext
from .handlers import (
    CompletionHandler,
    NoHandler,
    SimpleHandler,
    StructuredHandler,
    invoke,
    resolve_handler,
)

logger = logging.getLogger("mwext.extensions")

# Largest batch MediaWiki serves to ordinary users for list queries
QUERY_LIMIT = 500


class ApiExtensions:
    """
    Extension operations bound to a MediaWiki client and a wiki context.
    """

    def __init__(self, mw_client: MediaWikiClient, context: WikiContext) -> None:
        """
        Parameters
        ----------
        mw_client : MediaWikiClient
            Generic API client used for every request.

        context : WikiContext
            Default page name, CSRF token source and notification sink.
        """
        self._mw = mw_client
        self._context = context

    @property
    def context(self) -> WikiContext:
        return self._context

    # ------------------------------------------------------------------
    # Editing
    # ------------------------------------------------------------------

    async def edit_page(self, info: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
        """
        Edit a page.

        Parameters
        ----------
        info : Mapping[str, Any]
            Arbitrary ``action=edit`` parameters (``text``, ``summary``,
            ``appendtext`` ...). ``title`` defaults to the context page.
            ``done`` is a local completion handler and is never sent.

        Returns
        -------
        Optional[Dict[str, Any]]
            The ``edit`` member of the server response, unmodified.

        Raises
        ------
        MediaWikiClientError
            On any failure, after the completion handler has been told.
        """
        handler = resolve_handler(info.get("done"))

        params: Dict[str, Any] = {k: v for k, v in info.items() if k != "done"}
        params.update(
            format="json",
            action="edit",
            title=info.get("title") or self._context.page_name,
        )

        try:
            params["token"] = await self._context.token_provider()
            data = await self._mw.post(params)
        except MediaWikiClientError as exc:
            await self._edit_failed(handler, exc)
            raise

        result = data.get("edit")

        if isinstance(handler, SimpleHandler):
            await _run_hook(handler.callback, result)
        elif isinstance(handler, StructuredHandler):
            await _run_hook(handler.success, result)

        return result

    async def _edit_failed(self, handler: CompletionHandler, exc: MediaWikiClientError) -> None:
        if isinstance(handler, NoHandler):
            if isinstance(exc, MediaWikiApiError):
                code, info = exc.code, exc.info
            elif isinstance(exc, MediaWikiRequestError):
                code, info = "http", str(exc)
            else:
                code, info = "unknown", str(exc)
            logger.error('edit failed (code: "%s"; info: "%s")', code, info)
            return

        if isinstance(handler, SimpleHandler):
            return

        if isinstance(exc, MediaWikiApiError):
            await _run_hook(handler.api_error, exc.error)
        else:
            await _run_hook(handler.unknown_error)

    # ------------------------------------------------------------------
    # Reading
    # ------------------------------------------------------------------

    async def get_current_page_text(self, title: Optional[str] = None) -> Optional[str]:
        """
        Fetch the wikitext of the latest revision of a page.

        Uses an unauthenticated raw read, so API errors arrive in the
        payload and are handled here rather than by the client.

        Returns
        -------
        Optional[str]
            The wikitext, or None when the page has no revisions.
        """
        notify = self._context.notifier
        params = {
            "format": "json",
            "action": "query",
            "titles": title or self._context.page_name,
            "prop": "revisions",
            "rvprop": "content",
            "indexpageids": "1",
        }

        try:
            data = await self._mw.raw_get(params)
        except MediaWikiRequestError:
            notify("Request to the API failed while accessing the current page.")
            raise

        if isinstance(data, dict) and data.get("error") is not None:
            exc = MediaWikiApiError.from_response(data)
            notify(f"API error: {exc.code}. {exc.info}")
            raise exc

        query = data.get("query") if isinstance(data, dict) else None
        if isinstance(query, dict) and query.get("pages") and query.get("pageids"):
            page = query["pages"].get(str(query["pageids"][0])) or {}
            revisions = page.get("revisions")
            if not revisions:
                return None
            revision = revisions[0]
            return revision.get("*", revision.get("content"))

        notify("Unexpected error while using the API.")
        raise MediaWikiResponseError("Page revisions missing from response")

    async def get_users_in_group(self, group: str) -> List[str]:
        """Return the names of the first 500 members of ``group``."""
        data = await self._mw.get({
            "list": "allusers",
            "augroup": group,
            "aulimit": QUERY_LIMIT,
        })
        try:
            users = data["query"]["allusers"]
        except (KeyError, TypeError) as exc:
            raise MediaWikiResponseError("allusers missing from response") from exc
        return [user["name"] for user in users]

    async def get_total_edits_by_user(self, user_name: str, start: Any, end: Any) -> int:
        """
        Count the contributions of ``user_name`` between ``start`` and ``end``.

        Pages through ``list=usercontribs`` oldest first, one request at a
        time, until the server stops returning a continuation. ``start``
        and ``end`` are passed through to the API unmodified.
        """
        base = {
            "list": "usercontribs",
            "ucstart": start,
            "ucend": end,
            "ucuser": user_name,
            "ucdir": "newer",
            "ucprop": "sizediff",
            "uclimit": QUERY_LIMIT,
        }

        total = 0
        overrides: Optional[Dict[str, Any]] = {}
        while overrides is not None:
            data = await self._mw.get({**base, **overrides})
            try:
                contribs = data["query"]["usercontribs"]
            except (KeyError, TypeError) as exc:
                raise MediaWikiResponseError("usercontribs missing from response") from exc
            total += len(contribs)
            overrides = _continuation(data)

        return total


async def _run_hook(callback, *args: Any) -> None:
    """Run a caller hook, logging any exception it raises."""
    try:
        await invoke(callback, *args)
    except Exception:
        logger.exception("edit completion hook %r failed", callback)


def _continuation(data: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
    """
    Parameters resuming a ``usercontribs`` query, or None on the last page.

    Handles both the legacy ``query-continue`` block, whose members
    (``ucstart`` on old servers, ``uccontinue`` on newer ones) are merged
    into the next request, and the ``continue`` object emitted by current
    MediaWiki.
    """
    legacy = data.get("query-continue")
    if legacy:
        block = legacy.get("usercontribs") if isinstance(legacy, Mapping) else None
        if not isinstance(block, Mapping):
            raise MediaWikiResponseError("query-continue lacks a usercontribs block")
        return dict(block)
    modern = data.get("continue")
    if modern:
        if not isinstance(modern, Mapping):
            raise MediaWikiResponseError("continue is not an object")
        return dict(modern)
    return None
