from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional
from urllib.parse import urlsplit, urlunsplit
import logging

from fastapi import HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .. import queries
from ..models.user import User

logger = logging.getLogger(__name__)


@contextmanager
def write_transaction(db: Session, failure_detail: str) -> Iterator[None]:
    """Commit the work done inside the block, mapping database errors to HTTP 500.

    HTTPExceptions raised inside the block propagate untouched and nothing is
    committed.
    """
    try:
        yield
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception(failure_detail)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=failure_detail,
        ) from e


def not_found(resource: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{resource} not found")


def record_audit(
    db: Session,
    user: Optional[User],
    action: str,
    resource_type: str,
    resource_id: Optional[int] = None,
    details: Optional[Dict[str, Any]] = None,
) -> None:
    """Add an audit row to the current transaction."""
    queries.create_audit_log(
        db,
        {
            "user_id": user.id if user is not None else None,
            "action": action,
            "resource_type": resource_type,
            "resource_id": resource_id,
            "details": details,
        },
    )


def strip_url_credentials(url: Optional[str]) -> Optional[str]:
    """Drop ``user:pass@`` from a stream URL so it can be logged or audited."""
    if not url:
        return url
    parts = urlsplit(url)
    if "@" not in parts.netloc:
        return url
    return urlunsplit(parts._replace(netloc=parts.netloc.rpartition("@")[2]))
