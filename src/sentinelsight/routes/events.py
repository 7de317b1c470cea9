from datetime import datetime
from typing import List, Optional
import logging

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from .. import queries
from ..alerting import notify_subscribers
from ..auth import require_operator_or_admin
from ..db import get_db
from ..models.user import User
from ..schemas import EventCount, EventCreate, EventOut, MutationOut, to_naive_utc
from .utils import not_found, record_audit, write_transaction

logger = logging.getLogger(__name__)

# Events are rule triggers written by the detection service.
# Prefix: /api/events
router = APIRouter(prefix="/api/events", tags=["events"])


@router.get("", response_model=List[EventOut])
def list_events(
    camera_id: Optional[int] = None,
    rule_type: Optional[str] = None,
    from_: Optional[datetime] = Query(None, alias="from"),
    to: Optional[datetime] = None,
    limit: int = Query(50, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
):
    """
    List events, newest first.

    Filters are combined with AND; `from` and `to` bound the event timestamp
    inclusively.
    """
    return queries.get_events(
        db,
        camera_id=camera_id,
        rule_type=rule_type,
        from_=to_naive_utc(from_),
        to=to_naive_utc(to),
        limit=limit,
        offset=offset,
    )


@router.get("/count", response_model=EventCount)
def count_events(camera_id: Optional[int] = None, db: Session = Depends(get_db)):
    return {"count": queries.get_event_count(db, camera_id)}


@router.get("/{event_id}", response_model=EventOut)
def get_event(event_id: int, db: Session = Depends(get_db)):
    event = queries.get_event_by_id(db, event_id)
    if not event:
        raise not_found("Event")
    return event


@router.post("", response_model=MutationOut, status_code=status.HTTP_201_CREATED)
def ingest_event(
    payload: EventCreate,
    db: Session = Depends(get_db),
    user: User = Depends(require_operator_or_admin),
):
    """
    Store an event reported by the detection service.

    Users subscribed to the camera and rule type receive a notification.
    """
    with write_transaction(db, "Failed to save event"):
        camera = queries.get_camera_by_id(db, payload.camera_id)
        if not camera:
            raise not_found("Camera")
        if payload.zone_id is not None and not queries.get_zone_by_id(db, payload.zone_id):
            raise not_found("Zone")
        if payload.rule_id is not None and not queries.get_rule_by_id(db, payload.rule_id):
            raise not_found("Rule")
        event = queries.create_event(db, payload.model_dump())
        event_id = event.id
        notify_subscribers(db, event, camera)
        record_audit(
            db,
            user,
            "event.create",
            "event",
            event_id,
            {"camera_id": payload.camera_id, "rule_type": payload.rule_type},
        )
    logger.info(
        "Event %s (%s) stored for camera %s by user id=%s",
        event_id,
        payload.rule_type,
        payload.camera_id,
        user.id,
    )
    return {"success": True, "id": event_id}


@router.delete("/{event_id}", response_model=MutationOut)
def delete_event(
    event_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(require_operator_or_admin),
):
    with write_transaction(db, "Failed to delete event"):
        event = queries.get_event_by_id(db, event_id)
        if not event:
            raise not_found("Event")
        details = {"camera_id": event.camera_id, "rule_type": event.rule_type}
        queries.delete_event(db, event)
        record_audit(db, user, "event.delete", "event", event_id, details)
    logger.info("Event %s deleted by user id=%s", event_id, user.id)
    return {"success": True, "id": event_id}
