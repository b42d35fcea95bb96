"""
Inbound JWT Verification & Scope Enforcement

Callers of the HTTP routes present a bearer JWT signed with
``jwt_client_to_ext_secret``. This module verifies it, builds a
``CallerContext`` and enforces per-route scopes.

Outbound tokens (extension -> MediaWiki) are signed by ``MediaWikiClient``
with a different secret.
"""

from __future__ import annotations

import jwt
from typing import Callable

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from ..config import settings
from .models import CallerContext


security = HTTPBearer(auto_error=True)

EXPECTED_ISSUER = "mw-api-client"
EXPECTED_AUDIENCE = "mw-api-ext"


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


def _decode_caller_token(token: str) -> dict:
    secret = settings.jwt_client_to_ext_secret
    if secret is None:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="JWT verification configuration error.",
        )

    return jwt.decode(
        token,
        secret.get_secret_value(),
        algorithms=[settings.jwt_algo],
        audience=EXPECTED_AUDIENCE,
        issuer=EXPECTED_ISSUER,
        options={"require": ["iss", "aud", "iat", "exp", "user", "scope"]},
    )


def verify_caller_jwt(
    creds: HTTPAuthorizationCredentials = Depends(security),
) -> CallerContext:
    """
    Verify a caller JWT and construct a CallerContext.

    Raises
    ------
    HTTPException(401) for invalid or expired tokens.
    """
    try:
        payload = _decode_caller_token(creds.credentials)
    except jwt.ExpiredSignatureError:
        raise _unauthorized("Token has expired.")
    except jwt.InvalidAudienceError:
        raise _unauthorized("Invalid token audience.")
    except jwt.InvalidIssuerError:
        raise _unauthorized("Invalid token issuer.")
    except jwt.InvalidTokenError:
        raise _unauthorized("Invalid or malformed token.")

    username = payload.get("user")
    scopes = payload.get("scope")

    if not username:
        raise _unauthorized("Token missing 'user' claim.")
    if not isinstance(scopes, list):
        raise _unauthorized("'scope' claim must be a list.")

    return CallerContext(
        username=username,
        scopes=scopes,
        client_id=payload.get("client_id", EXPECTED_ISSUER),
    )


def require_scopes(*required_scopes: str) -> Callable:
    """
    Create a FastAPI dependency that enforces scope-based access control.

    Example:
        @router.get("/pages/text")
        async def page_text(caller = Depends(require_scopes("page_read"))):
            ...
    """

    def check_scopes(
        caller: CallerContext = Depends(verify_caller_jwt),
    ) -> CallerContext:
        missing = caller.missing_scopes(required_scopes)
        if missing:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Missing required scope(s): {', '.join(missing)}",
            )
        return caller

    return check_scopes
