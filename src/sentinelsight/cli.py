from __future__ import annotations

import argparse
import logging

from .config import Settings, settings as default_settings
from .logging import configure_logging
from .models.user import USER_ROLES

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="SentinelSight - management API server")
    parser.add_argument("--print-config", action="store_true", help="Print resolved configuration and exit.")
    parser.add_argument("--init-db", action="store_true", help="Create database tables and exit.")
    parser.add_argument("--serve", action="store_true", help="Start the HTTP API server.")
    parser.add_argument(
        "--issue-token",
        metavar="OPEN_ID",
        help="Create or update the user with this open id and print a bearer token.",
    )
    parser.add_argument("--role", choices=USER_ROLES, help="Role to assign with --issue-token.")
    parser.add_argument("--name", help="Display name to store with --issue-token.")
    return parser


def create_tables(cfg: Settings) -> None:
    from .db import init_db, make_engine

    engine = make_engine(cfg.database_url)
    try:
        init_db(bind=engine)
    finally:
        engine.dispose()


def issue_token(cfg: Settings, open_id: str, role: str | None = None, name: str | None = None) -> str:
    """Upsert a user in ``cfg.database_url`` and return a session token signed with ``cfg``."""
    from sqlalchemy.orm import Session

    from . import queries
    from .auth import create_access_token
    from .db import init_db, make_engine

    if role is None and cfg.owner_open_id and open_id == cfg.owner_open_id:
        role = "admin"

    fields = {"login_method": "cli"}
    if name is not None:
        fields["name"] = name

    engine = make_engine(cfg.database_url)
    try:
        init_db(bind=engine)
        with Session(bind=engine, autoflush=False) as db:
            user = queries.upsert_user(db, open_id, role=role, **fields)
            db.commit()
            logger.info("Issued token for user id=%s role=%s", user.id, user.role)
            return create_access_token(user.open_id, user.role, cfg=cfg)
    finally:
        engine.dispose()


def run(argv: list[str] | None = None, cfg: Settings | None = None) -> int:
    """
    SentinelSight entrypoint.
    """
    cfg = cfg or default_settings
    try:
        args = build_parser().parse_args(argv)

        configure_logging("DEBUG" if cfg.debug else cfg.log_level, sql_echo=cfg.sql_echo)

        logger.info("Resolved config: database=%s host=%s port=%s", cfg.database_url, cfg.host, cfg.port)

        if args.print_config:
            print(cfg.model_dump(exclude={"secret_key"}))
            return 0

        if args.init_db:
            create_tables(cfg)
            logger.info("Database tables created at %s", cfg.database_url)
            return 0

        if args.issue_token:
            print(issue_token(cfg, args.issue_token, role=args.role, name=args.name))
            return 0

        if args.serve:
            import uvicorn
            from .main import app

            logger.info("Starting SentinelSight API at http://%s:%s", cfg.host, cfg.port)
            uvicorn.run(
                app,
                host=cfg.host,
                port=cfg.port,
                log_level=cfg.log_level.lower(),
            )
            return 0

        logger.info("Nothing to do. Use --print-config, --init-db, --issue-token or --serve.")
        return 0

    except Exception:
        # Log unexpected exceptions so the service is diagnosable.
        logger.exception("SentinelSight crashed due to an unexpected error")
        if cfg.debug:
            raise
        return 1


if __name__ == "__main__":
    raise SystemExit(run())
