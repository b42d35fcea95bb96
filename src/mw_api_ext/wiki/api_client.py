"""
MediaWiki API Client

Generic client for the MediaWiki action API. The convenience operations in
``wiki.extensions`` are layered on top of the three request primitives
defined here:

- ``get``      authenticated read, API errors normalized into exceptions
- ``post``     authenticated write, API errors normalized into exceptions
- ``raw_get``  unauthenticated read returning the parsed JSON untouched
"""

from __future__ import annotations

import logging
import time
from typing import Any, Dict, List, Mapping, Optional

import httpx
import jwt

from ..config import settings

logger = logging.getLogger("mwext.client")


# ---------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------

class MediaWikiClientError(RuntimeError):
    """Base exception for MediaWiki client failures."""


class MediaWikiRequestError(MediaWikiClientError):
    """The request never reached the server or no usable response came back."""


class MediaWikiApiError(MediaWikiClientError):
    """The server answered with a structured ``error`` object."""

    def __init__(self, code: str, info: str, error: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(f"{code}: {info}")
        self.code = code
        self.info = info
        self.error = error if error is not None else {"code": code, "info": info}

    @classmethod
    def from_response(cls, data: Mapping[str, Any]) -> "MediaWikiApiError":
        error = data.get("error") or {}
        return cls(
            code=str(error.get("code", "unknown")),
            info=str(error.get("info", "")),
            error=dict(error),
        )


class MediaWikiResponseError(MediaWikiClientError):
    """The response parsed but lacks the fields the caller expected."""


# ---------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------

def preprocess_params(params: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Convert Python values into MediaWiki request parameters.

    MediaWiki treats the mere presence of a boolean parameter as true, so
    ``False`` and ``None`` are dropped rather than sent. Lists are joined
    with ``|``.
    """
    prepared: Dict[str, Any] = {}
    for key, value in params.items():
        if value is None or value is False:
            continue
        if value is True:
            prepared[key] = "1"
        elif isinstance(value, (list, tuple)):
            prepared[key] = "|".join(str(v) for v in value)
        else:
            prepared[key] = value
    return prepared


# ---------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------

class MediaWikiClient:
    def __init__(
        self,
        base_url: Optional[str] = None,
        *,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """
        Parameters
        ----------
        base_url : Optional[str]
            Full URL of ``api.php``. Defaults to ``settings.mw_api_base_url``.

        timeout : Optional[float]
            Per-request timeout in seconds.

        transport : Optional[httpx.AsyncBaseTransport]
            Custom transport, mainly for tests.
        """
        self.base_url = str(base_url or settings.mw_api_base_url)
        self._timeout = timeout if timeout is not None else settings.http_timeout
        self._transport = transport

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    @property
    def signs_requests(self) -> bool:
        """Whether ``get``/``post`` carry a bearer JWT for MediaWiki."""
        return settings.jwt_ext_to_mw_secret is not None

    def _auth_headers(self, scopes: Optional[List[str]], action: Any) -> Dict[str, str]:
        """
        Short-lived bearer JWT scoped to the request.

        ``page_read`` for ``get``, ``page_write`` for ``post``, with the API
        action as an extra claim. Unsigned when no outbound secret is set.
        """
        if not scopes or not self.signs_requests:
            return {}
        if settings.jwt_ttl_seconds <= 0:
            raise MediaWikiClientError(
                f"jwt_ttl_seconds must be a positive integer; got {settings.jwt_ttl_seconds}"
            )

        now = int(time.time())
        payload: Dict[str, Any] = {
            "iss": "mw-api-ext",
            "aud": "MediaWiki",
            "iat": now,
            "exp": now + settings.jwt_ttl_seconds,
            "scope": scopes,
            "action": action,
        }
        try:
            token = jwt.encode(
                payload,
                settings.jwt_ext_to_mw_secret.get_secret_value(),
                algorithm=settings.jwt_algo,
            )
        except Exception as exc:
            raise MediaWikiClientError(
                f"Failed to sign MediaWiki request: {type(exc).__name__}"
            ) from exc
        return {"Authorization": f"Bearer {token}"}

    async def _send(
        self,
        method: str,
        params: Mapping[str, Any],
        scopes: Optional[List[str]] = None,
    ) -> Any:
        prepared = preprocess_params(params)
        headers = {"User-Agent": settings.mw_user_agent}
        headers.update(self._auth_headers(scopes, prepared.get("action")))

        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                if method == "POST":
                    resp = await client.post(self.base_url, data=prepared, headers=headers)
                else:
                    resp = await client.get(self.base_url, params=prepared, headers=headers)
            resp.raise_for_status()
            return resp.json()
        except httpx.HTTPError as exc:
            logger.warning(
                "MediaWiki %s request failed: %s (%s)",
                method,
                prepared.get("action"),
                type(exc).__name__,
            )
            raise MediaWikiRequestError(
                f"MediaWiki request failed: {type(exc).__name__}"
            ) from exc
        except ValueError as exc:
            logger.warning("MediaWiki returned a non-JSON body for %s", prepared.get("action"))
            raise MediaWikiRequestError("MediaWiki returned invalid JSON") from exc

    async def _request(
        self,
        method: str,
        params: Mapping[str, Any],
        scopes: List[str],
    ) -> Dict[str, Any]:
        merged: Dict[str, Any] = {"action": "query", "format": "json"}
        merged.update(params)

        data = await self._send(method, merged, scopes=scopes)
        if not isinstance(data, dict):
            raise MediaWikiResponseError("MediaWiki response is not a JSON object")
        if "error" in data:
            exc = MediaWikiApiError.from_response(data)
            logger.info("MediaWiki API error: %s (%s)", exc.code, exc.info)
            raise exc
        return data

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def get(self, params: Mapping[str, Any]) -> Dict[str, Any]:
        """Authenticated GET; ``action`` defaults to ``query``."""
        return await self._request("GET", params, scopes=["page_read"])

    async def post(self, params: Mapping[str, Any]) -> Dict[str, Any]:
        """Authenticated POST; ``action`` defaults to ``query``."""
        return await self._request("POST", params, scopes=["page_write"])

    async def raw_get(self, params: Mapping[str, Any]) -> Any:
        """
        Unauthenticated GET returning the decoded JSON as-is.

        API errors are *not* converted into exceptions here; only
        transport failures raise.
        """
        return await self._send("GET", params)

    async def get_csrf_token(self) -> str:
        """Fetch a fresh anti-forgery token for state-changing requests."""
        data = await self.get({"meta": "tokens", "type": "csrf"})
        try:
            return data["query"]["tokens"]["csrftoken"]
        except (KeyError, TypeError) as exc:
            raise MediaWikiResponseError("CSRF token missing from response") from exc
