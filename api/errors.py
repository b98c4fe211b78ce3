"""
api/errors.py -- Single dispatch table from store error kinds to HTTP responses.

Route handlers call error_response() with the Err returned by a store and the
operation's fixed failure message. Every 5xx response carries the generic
"internal_error" code and that message; Err.detail is never sent to clients.

Unique-constraint violations (ErrorKind.conflict) are reported as the
operation's generic 500, the same as any other write failure.
"""

from __future__ import annotations

from fastapi.responses import JSONResponse

from api.models import ErrorDetail, ErrorResponse
from core.errors import Err, ErrorKind

_STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.not_found: 404,
    ErrorKind.bad_credential: 400,
    ErrorKind.unauthorized: 401,
    ErrorKind.conflict: 500,
    ErrorKind.internal: 500,
}

_CODE_BY_KIND: dict[ErrorKind, str] = {
    ErrorKind.not_found: "not_found",
    ErrorKind.bad_credential: "bad_credentials",
    ErrorKind.unauthorized: "unauthorized",
}

_MESSAGE_BY_KIND: dict[ErrorKind, str] = {
    ErrorKind.bad_credential: "Incorrect password.",
    ErrorKind.unauthorized: "Authentication required.",
}


def status_for(kind: ErrorKind) -> int:
    return _STATUS_BY_KIND.get(kind, 500)


def error_response(err: Err, failure: str, not_found: str = "Resource not found.") -> JSONResponse:
    """Render an Err as the standard {"error": {...}} envelope.

    Args:
        err:       The Err returned by a store or auth call.
        failure:   Fixed message used for every 5xx outcome of this operation.
        not_found: Message used when err.kind is not_found.
    """
    status = status_for(err.kind)
    if status >= 500:
        detail = ErrorDetail(code="internal_error", message=failure)
    elif err.kind is ErrorKind.not_found:
        detail = ErrorDetail(code="not_found", message=not_found)
    else:
        detail = ErrorDetail(code=_CODE_BY_KIND[err.kind], message=_MESSAGE_BY_KIND[err.kind])
    return JSONResponse(status_code=status, content=ErrorResponse(error=detail).model_dump(exclude_none=True))
