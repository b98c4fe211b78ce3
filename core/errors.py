"""
core/errors.py -- Result and error-kind types shared by the stores and the API.

Stores return Ok(value) or Err(kind) instead of raising for expected outcomes
(missing rows, unique-constraint violations, database failures). The API layer
maps ErrorKind to an HTTP status through the single table in api/errors.py,
so route handlers never repeat try/except blocks around store calls.

Usage:
    result = store.get_client(42)
    if isinstance(result, Err):
        return error_response(result, failure="Failed to fetch client.")
    client = result.value

Layer rule: core/ is the kernel. No imports from api/, auth/, or crm/.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar, Union

T = TypeVar("T")


class ErrorKind(str, Enum):
    not_found = "not_found"
    conflict = "conflict"
    unauthorized = "unauthorized"
    bad_credential = "bad_credential"
    internal = "internal"


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class Err:
    """A failed store or service call.

    detail is for logs only. It is never written to a response body.
    """

    kind: ErrorKind
    detail: str = ""


Result = Union[Ok[T], Err]
