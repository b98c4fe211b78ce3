"""
auth/dependencies.py -- FastAPI Depends() helper that gates protected routes.

The token arrives as the raw value of the `authorization` header:
    authorization: <token>
A leading "Bearer " is tolerated and stripped so standard HTTP clients work
too. Verification is stateless: the token's signature and expiry are checked,
the database is not consulted.

On success the decoded userId is stored on request.state.user_id and returned.
On failure HTTP 401 is raised with the standard error envelope; api/main.py's
HTTPException handler renders it.

Layer rule: auth/dependencies.py may import from fastapi (for Request and
HTTPException) because it is part of the dependency injection system.
No imports from api/ or crm/.
"""

from __future__ import annotations

import logging

from fastapi import HTTPException, Request

from auth.tokens import InvalidToken, decode_access_token

logger = logging.getLogger("clientdesk.auth")

_BEARER_PREFIX = "bearer "


def _extract_token(header_value: str | None) -> str | None:
    if header_value is None:
        return None
    token = header_value.strip()
    if token.lower().startswith(_BEARER_PREFIX):
        token = token[len(_BEARER_PREFIX) :].strip()
    return token or None


def require_token(request: Request) -> int:
    """Require a valid bearer token. Raises HTTP 401 otherwise.

    Use as a FastAPI dependency, per route or per router:
        router = APIRouter(dependencies=[Depends(require_token)])
    """
    token = _extract_token(request.headers.get("authorization"))
    if token is None:
        raise HTTPException(
            status_code=401,
            detail={"code": "unauthorized", "message": "Access denied, token missing."},
        )
    secret_key = request.app.state.settings.secret_key
    try:
        user_id = decode_access_token(token, secret_key)
    except InvalidToken as exc:
        logger.info("Rejected token on %s %s: %s", request.method, request.url.path, exc)
        raise HTTPException(
            status_code=401,
            detail={"code": "unauthorized", "message": "Invalid token."},
        ) from exc
    request.state.user_id = user_id
    return user_id
