from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from typing import Iterator, Optional
import logging

from .config import settings
from .models.base import Base

logger = logging.getLogger(__name__)


def _enable_sqlite_foreign_keys(dbapi_con, connection_record):
    # SQLite only honours FK constraints (and ON DELETE cascades) when the
    # PRAGMA is set on every new connection.
    try:
        cursor = dbapi_con.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()
    except Exception as exc:
        logger.warning("Could not enable SQLite foreign_keys PRAGMA on connect: %s", exc)


def make_engine(database_url: str) -> Engine:
    """Create an engine for ``database_url`` with the per-dialect connection setup."""
    is_sqlite = database_url.startswith("sqlite")
    new_engine = create_engine(
        database_url,
        connect_args=({"check_same_thread": False} if is_sqlite else {}),
    )
    if is_sqlite:
        event.listen(new_engine, "connect", _enable_sqlite_foreign_keys)
    return new_engine


engine = make_engine(settings.database_url)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Iterator[Session]:
    """Database dependency for getting a session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db(bind: Optional[Engine] = None) -> None:
    """Initialize database tables."""
    # Importing the package registers every table on Base.metadata.
    from . import models  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)
