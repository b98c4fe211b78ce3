"""
crm/store.py -- SQLAlchemy-backed persistence layer for client records.

Uses SQLAlchemy Core (not ORM) so the dataclass in crm/models.py remains the
authoritative domain representation. Swapping SQLite for PostgreSQL or SQL
Server is a connection string change, not a rewrite.

Pattern: Repository + Data Mapper. ClientStore is the repository; _row_to_client
is the mapper. Route handlers never touch SQL directly.

Every public method returns a core.errors Result instead of raising:
  Err(ErrorKind.not_found)  -- no client with that id
  Err(ErrorKind.conflict)   -- UNIQUE(email) violated on create or update
  Err(ErrorKind.internal)   -- any other database failure (logged with traceback)

Security: all queries use bound parameters. No f-strings in SQL.

Usage:
    store = ClientStore(engine)
    result = store.create_client(Client(name="Ana", email="ana@example.com"))
    result = store.list_clients()
    result = store.update_client(1, name="Ana", email="ana@example.org", phone=None)
    result = store.delete_client(1)
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Column, Integer, String, Table
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from core.database import metadata
from core.errors import Err, ErrorKind, Ok, Result
from crm.models import Client

logger = logging.getLogger("clientdesk.crm.store")

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

_clients = Table(
    "clients",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String(255), nullable=False),
    Column("email", String(255), nullable=False, unique=True),
    Column("phone", String(50)),
    Column("created_at", String(32), nullable=False),
    Column("updated_at", String(32), nullable=False),
)


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _db_failure(action: str, exc: Exception) -> Err:
    if isinstance(exc, IntegrityError):
        logger.info("Client %s rejected by constraint: %s", action, exc.orig)
        return Err(ErrorKind.conflict, str(exc.orig))
    logger.exception("Client %s failed", action)
    return Err(ErrorKind.internal, str(exc))


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class ClientStore:
    def __init__(self, engine: Engine) -> None:
        self.engine = engine

    def create_client(self, client: Client) -> Result[Client]:
        """Insert a new client and return the stored record."""
        now = _now_iso()
        try:
            with self.engine.connect() as conn:
                result = conn.execute(
                    _clients.insert().values(
                        name=client.name,
                        email=client.email,
                        phone=client.phone,
                        created_at=now,
                        updated_at=now,
                    )
                )
                conn.commit()
                client_id = result.inserted_primary_key[0]
        except SQLAlchemyError as exc:
            return _db_failure("create", exc)
        return Ok(
            Client(
                id=client_id,
                name=client.name,
                email=client.email,
                phone=client.phone,
                created_at=now,
                updated_at=now,
            )
        )

    def list_clients(self) -> Result[list[Client]]:
        """Return every client ordered by id. No pagination."""
        try:
            with self.engine.connect() as conn:
                rows = conn.execute(_clients.select().order_by(_clients.c.id)).fetchall()
        except SQLAlchemyError as exc:
            return _db_failure("list", exc)
        return Ok([_row_to_client(r) for r in rows])

    def get_client(self, client_id: int) -> Result[Client]:
        """Fetch a single client by id."""
        try:
            with self.engine.connect() as conn:
                row = conn.execute(_clients.select().where(_clients.c.id == client_id)).fetchone()
        except SQLAlchemyError as exc:
            return _db_failure("lookup", exc)
        if row is None:
            return Err(ErrorKind.not_found)
        return Ok(_row_to_client(row))

    def update_client(self, client_id: int, name: str, email: str, phone: Optional[str]) -> Result[Client]:
        """Overwrite all mutable fields of an existing client.

        This is a full replacement: a phone of None clears the stored phone.
        The lookup and the write share one transaction.
        """
        now = _now_iso()
        try:
            with self.engine.begin() as conn:
                row = conn.execute(_clients.select().where(_clients.c.id == client_id)).fetchone()
                if row is None:
                    return Err(ErrorKind.not_found)
                conn.execute(
                    _clients.update()
                    .where(_clients.c.id == client_id)
                    .values(name=name, email=email, phone=phone, updated_at=now)
                )
        except SQLAlchemyError as exc:
            return _db_failure("update", exc)
        return Ok(
            Client(
                id=client_id,
                name=name,
                email=email,
                phone=phone,
                created_at=row.created_at,
                updated_at=now,
            )
        )

    def delete_client(self, client_id: int) -> Result[int]:
        """Permanently delete a client. Returns the deleted id."""
        try:
            with self.engine.begin() as conn:
                result = conn.execute(_clients.delete().where(_clients.c.id == client_id))
        except SQLAlchemyError as exc:
            return _db_failure("delete", exc)
        if result.rowcount == 0:
            return Err(ErrorKind.not_found)
        return Ok(client_id)


# ---------------------------------------------------------------------------
# Row mapper (Data Mapper pattern)
# ---------------------------------------------------------------------------


def _row_to_client(row) -> Client:
    return Client(
        id=row.id,
        name=row.name,
        email=row.email,
        phone=row.phone,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )
