from typing import List
import logging

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from .. import queries
from ..auth import get_current_user
from ..db import get_db
from ..models.user import User
from ..schemas import MutationOut, NotificationOut, UnreadCount
from .utils import not_found, write_transaction

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/notifications", tags=["notifications"])


@router.get("", response_model=List[NotificationOut])
def list_notifications(
    unread_only: bool = False,
    limit: int = Query(50, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return queries.get_notifications(db, user.id, unread_only=unread_only, limit=limit, offset=offset)


@router.get("/unread-count", response_model=UnreadCount)
def unread_count(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return {"unread": queries.count_unread_notifications(db, user.id)}


@router.post("/read-all", response_model=MutationOut)
def mark_all_read(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    with write_transaction(db, "Failed to update notifications"):
        updated = queries.mark_all_notifications_read(db, user.id)
    logger.info("Marked %d notification(s) read for user id=%s", updated, user.id)
    return {"success": True}


@router.post("/{notification_id}/read", response_model=MutationOut)
def mark_read(
    notification_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    with write_transaction(db, "Failed to update notification"):
        notification = queries.get_notification_by_id(db, notification_id)
        if not notification or notification.user_id != user.id:
            raise not_found("Notification")
        queries.mark_notification_read(db, notification)
    logger.info("Notification %s marked read by user id=%s", notification_id, user.id)
    return {"success": True, "id": notification_id}
