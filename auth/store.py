"""
auth/store.py -- SQLAlchemy Core persistence layer for users.

Pattern: Repository + Data Mapper (same as crm/store.py).
UserStore is the repository; _row_to_user is the mapper.
Route and dependency code never touches SQL directly.

Every public method returns a core.errors Result:
  Ok(User)                  -- success
  Err(ErrorKind.not_found)  -- no matching row
  Err(ErrorKind.conflict)   -- UNIQUE(username) violated
  Err(ErrorKind.internal)   -- any other database failure (logged)

Security:
  All queries use bound parameters. No f-strings in SQL.
  The password column only ever receives a bcrypt hash (auth/tokens.py).

Layer rule: no imports from api/ or crm/.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, Table, Text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from auth.models import User
from core.database import metadata
from core.errors import Err, ErrorKind, Ok, Result

logger = logging.getLogger("clientdesk.auth.store")

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

_users = Table(
    "users",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("username", String(255), nullable=False, unique=True),
    Column("password", Text, nullable=False),  # bcrypt hash
    Column("created_at", String(32), nullable=False),
    Column("updated_at", String(32), nullable=False),
)


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class UserStore:
    """Repository for User entities.

    Usage:
        store = UserStore(engine)
        result = store.create_user(User(username="ana", password=hash_password("secret", rounds=10)))
        result = store.get_by_username("ana")
    """

    def __init__(self, engine: Engine) -> None:
        self.engine = engine

    def create_user(self, user: User) -> Result[User]:
        """Insert a new user and return the stored record (with id and timestamps)."""
        now = _now_iso()
        try:
            with self.engine.connect() as conn:
                result = conn.execute(
                    _users.insert().values(
                        username=user.username,
                        password=user.password,
                        created_at=now,
                        updated_at=now,
                    )
                )
                conn.commit()
                user_id = result.inserted_primary_key[0]
        except IntegrityError as exc:
            logger.info("Rejected duplicate username %r", user.username)
            return Err(ErrorKind.conflict, str(exc.orig))
        except SQLAlchemyError as exc:
            logger.exception("Failed to insert user")
            return Err(ErrorKind.internal, str(exc))
        return Ok(User(id=user_id, username=user.username, password=user.password, created_at=now, updated_at=now))

    def get_by_username(self, username: str) -> Result[User]:
        """Look up a user by exact username (case-sensitive)."""
        return self._fetch_one(_users.c.username == username)

    def _fetch_one(self, condition) -> Result[User]:
        try:
            with self.engine.connect() as conn:
                row = conn.execute(_users.select().where(condition)).fetchone()
        except SQLAlchemyError as exc:
            logger.exception("Failed to query users")
            return Err(ErrorKind.internal, str(exc))
        if row is None:
            return Err(ErrorKind.not_found)
        return Ok(_row_to_user(row))


# ---------------------------------------------------------------------------
# Row mapper (Data Mapper pattern)
# ---------------------------------------------------------------------------


def _row_to_user(row) -> User:
    return User(
        id=row.id,
        username=row.username,
        password=row.password,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )
