from __future__ import annotations

import argparse
import logging

from .core.config import settings
from .core.database import Database, init_db

logger = logging.getLogger(__name__)


def cmd_init_db(args: argparse.Namespace) -> None:
    database = Database(args.database_url or settings.get_database_url)
    try:
        init_db(database)
    finally:
        database.dispose()
    print("Database initialized successfully!")


def cmd_serve(args: argparse.Namespace) -> None:
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=settings.LOG_LEVEL.lower(),
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="appointments-api", description="Appointment Management API")
    sub = parser.add_subparsers(dest="command", required=True)

    p_init = sub.add_parser("init-db", help="Create tables and seed sample patients")
    p_init.add_argument("--database-url", default=None, help="SQLAlchemy URL (default: from settings)")
    p_init.set_defaults(func=cmd_init_db)

    p_serve = sub.add_parser("serve", help="Run the HTTP server")
    p_serve.add_argument("--host", default=settings.HOST)
    p_serve.add_argument("--port", type=int, default=settings.PORT)
    p_serve.add_argument("--reload", action="store_true", default=settings.DEBUG)
    p_serve.set_defaults(func=cmd_serve)

    return parser


def main(argv: list[str] | None = None) -> None:
    logging.basicConfig(level=settings.LOG_LEVEL.upper())
    args = build_parser().parse_args(argv)
    args.func(args)


if __name__ == "__main__":
    main()
