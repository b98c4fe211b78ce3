"""
core/database.py -- Engine construction and the schema step for ClientDesk.

One SQLAlchemy engine serves both stores (auth/store.py and crm/store.py).
Each store declares its Table on the shared `metadata` below; migrate() then
creates whatever is missing. create_all() is idempotent, so migrate() is safe
to run on every startup and from `python main.py migrate`.

Swapping SQLite for PostgreSQL or SQL Server is a DATABASE_URL change. For
network databases, DATABASE_REQUIRE_TLS=true (the default) asks the driver
for an encrypted connection.

Layer rule: core/ is the kernel. No imports from api/, auth/, or crm/.
Callers must import the store modules before calling migrate() so their
tables are registered on `metadata`.
"""

from __future__ import annotations

import logging

from sqlalchemy import MetaData, create_engine, event, text
from sqlalchemy.engine import Engine, make_url

from core.config import Settings

logger = logging.getLogger("clientdesk.database")

metadata = MetaData()


# ---------------------------------------------------------------------------
# Connection options
# ---------------------------------------------------------------------------


def _set_wal_mode(dbapi_conn, connection_record) -> None:
    """Enable WAL journal mode for concurrent read safety.

    Set per-connection because SQLite PRAGMAs are not inherited by new
    connections from the pool.
    """
    dbapi_conn.execute("PRAGMA journal_mode=WAL")


def connect_args_for(db_url: str, require_tls: bool) -> dict:
    """Return DBAPI connect() keyword arguments for the given database URL.

    SQLite: check_same_thread=False, because sync route handlers run in
    Starlette's thread pool and share pooled connections.
    PostgreSQL: sslmode=require when TLS is required.
    SQL Server (pyodbc): Encrypt=yes when TLS is required.
    """
    backend = make_url(db_url).get_backend_name()
    if backend == "sqlite":
        return {"check_same_thread": False}
    if not require_tls:
        return {}
    if backend == "postgresql":
        return {"sslmode": "require"}
    if backend == "mssql":
        return {"Encrypt": "yes"}
    logger.warning("DATABASE_REQUIRE_TLS is set but no TLS option is known for backend %r", backend)
    return {}


def create_db_engine(settings: Settings) -> Engine:
    """Build the shared engine from configuration."""
    db_url = settings.database_url
    engine = create_engine(
        db_url,
        connect_args=connect_args_for(db_url, settings.database_require_tls),
        pool_pre_ping=True,
    )
    if engine.dialect.name == "sqlite":
        event.listen(engine, "connect", _set_wal_mode)
    logger.info("Database engine created (%s)", engine.url.render_as_string(hide_password=True))
    return engine


# ---------------------------------------------------------------------------
# Schema step
# ---------------------------------------------------------------------------


def migrate(engine: Engine) -> list[str]:
    """Create any missing tables and return the names of all managed tables.

    Runs once before the service accepts connections. Existing tables and
    their rows are left untouched.
    """
    metadata.create_all(engine)
    tables = sorted(metadata.tables)
    logger.info("Schema ready (%s)", ", ".join(tables))
    return tables


def ping(engine: Engine) -> bool:
    """Return True if the database answers a trivial query."""
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    except Exception:
        logger.exception("Database health check failed")
        return False
    return True
