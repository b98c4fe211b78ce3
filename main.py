#!/usr/bin/env python3
"""
ClientDesk -- authenticated client record service.

Usage:
  python main.py serve
  python main.py serve --port 8080
  python main.py serve --reload
  python main.py migrate

Environment variables (see core/config.py for the full list):
  SECRET_KEY     Token signing key, at least 32 characters. Required unless DEBUG=true.
  DATABASE_URL   SQLAlchemy URL. Default: sqlite:///./clientdesk.db
  PORT           Listening port. Default: 3000
"""

import argparse
import logging
import sys

from core.config import get_settings

logger = logging.getLogger("clientdesk.cli")


def _migrate() -> int:
    """Create missing tables and exit. Safe to run repeatedly."""
    # Importing the stores registers their tables on core.database.metadata.
    import auth.store  # noqa: F401
    import crm.store  # noqa: F401
    from core.database import create_db_engine, migrate

    settings = get_settings()
    engine = create_db_engine(settings)
    try:
        tables = migrate(engine)
    finally:
        engine.dispose()
    print(f"Schema ready: {', '.join(tables)}")
    return 0


def _serve(host: str, port: int, reload: bool) -> int:
    import uvicorn

    uvicorn.run("api.main:app", host=host, port=port, reload=reload)
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(
        prog="clientdesk",
        description="Authenticated client record service.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  SECRET_KEY=... python main.py serve
  DEBUG=true python main.py serve --reload
  DATABASE_URL=postgresql://user:pw@db/clients python main.py migrate
        """,
    )
    sub = parser.add_subparsers(dest="command")

    serve = sub.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default=None, help="Bind address (default: HOST or 127.0.0.1)")
    serve.add_argument("--port", type=int, default=None, help="Listening port (default: PORT or 3000)")
    serve.add_argument("--reload", action="store_true", help="Restart on code changes (development only)")

    sub.add_parser("migrate", help="Create missing database tables and exit")

    args = parser.parse_args()

    if args.command is None:
        parser.print_help()
        return

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)-5s %(name)s %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    if args.command == "migrate":
        sys.exit(_migrate())

    settings = get_settings()
    host = args.host or settings.host
    port = args.port or settings.port
    logger.info("Serving on %s:%d", host, port)
    sys.exit(_serve(host, port, args.reload))


if __name__ == "__main__":
    main()
