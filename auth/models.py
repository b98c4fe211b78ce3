"""
auth/models.py -- Domain dataclass for the authentication entity.

Pattern: Data class (pure data container, zero logic). Mirrors crm/models.py --
dataclasses own domain shape; stores and routes do the work.

Layer rule: no imports from api/ or crm/.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class User:
    """A registered identity that can log in and receive bearer tokens.

    password holds the bcrypt hash, never plaintext. Users are created by
    registration and are never updated or deleted afterwards.
    """

    username: str
    password: str  # bcrypt hash
    id: int | None = None
    created_at: str = ""  # ISO 8601, set by store on insert
    updated_at: str = ""
