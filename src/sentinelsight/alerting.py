"""Turn ingested events into stored notifications for subscribed users.

Delivery (email, push) happens elsewhere; here we only write one
notification row per subscribed user.
"""

from typing import List
import logging

from sqlalchemy.orm import Session

from . import queries
from .models import Camera, Event, Notification

logger = logging.getLogger(__name__)

SEVERITY_BY_RULE_TYPE = {
    "intrusion": "critical",
    "loitering": "warning",
}
NOTIFICATION_RULE_TYPES = ("intrusion", "loitering", "counting")


def severity_for(rule_type: str) -> str:
    return SEVERITY_BY_RULE_TYPE.get(rule_type, "info")


def notification_type_for(rule_type: str) -> str:
    return rule_type if rule_type in NOTIFICATION_RULE_TYPES else "system"


def notify_subscribers(db: Session, event: Event, camera: Camera) -> List[Notification]:
    """Create notifications for every user whose enabled subscription matches ``event``.

    A user with several matching subscriptions still gets one notification.
    """
    subscriptions = queries.get_matching_subscriptions(db, event.camera_id, event.rule_type)
    user_ids = sorted({s.user_id for s in subscriptions})
    if not user_ids:
        return []

    title = f"{event.rule_type.capitalize()} detected on {camera.name}"
    message = (
        f"{event.object_type} detected with confidence {event.confidence:.2f} "
        f"at {event.timestamp.isoformat()}"
    )
    rows = [
        {
            "user_id": user_id,
            "event_id": event.id,
            "title": title,
            "message": message,
            "severity": severity_for(event.rule_type),
            "type": notification_type_for(event.rule_type),
            "camera_id": event.camera_id,
            "action_url": f"/events/{event.id}",
            "extra": {
                "rule_type": event.rule_type,
                "object_type": event.object_type,
                "confidence": event.confidence,
                "snapshot_url": event.snapshot_url,
            },
        }
        for user_id in user_ids
    ]
    created = queries.create_notifications(db, rows)
    logger.info("Event %s notified %d subscriber(s)", event.id, len(created))
    return created
