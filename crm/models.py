"""
crm/models.py -- Domain dataclass for client records.

Pure data container with zero logic. Persistence rules (email uniqueness,
timestamp maintenance) live in crm/store.py.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class Client:
    """A customer contact managed through the authenticated CRUD routes.

    email is unique across all clients. id is None before the record is
    written to the database.
    """

    name: str
    email: str
    phone: Optional[str] = None
    id: Optional[int] = None
    created_at: str = ""  # ISO 8601, set by store on insert
    updated_at: str = ""  # ISO 8601, refreshed by store on every update
