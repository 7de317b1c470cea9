"""Data-access functions.

Every function takes an open ``Session``. Read helpers never commit; write
helpers ``flush`` so generated ids are available and leave the commit to the
caller, which lets a route persist a change and its audit row together.
"""

from datetime import datetime, timedelta
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from .config import settings
from .models import (
    AlertSubscription,
    AuditLog,
    Camera,
    Detection,
    Event,
    Notification,
    Rule,
    Site,
    User,
    Zone,
)
from .models.base import utcnow

_USER_TEXT_FIELDS = ("name", "email", "login_method")


def _apply(obj, data: Dict[str, Any]):
    for key, value in data.items():
        setattr(obj, key, value)
    return obj


def _add(db: Session, obj):
    db.add(obj)
    db.flush()
    db.refresh(obj)
    return obj


def _page(stmt, limit: Optional[int], offset: Optional[int]):
    if limit:
        stmt = stmt.limit(limit)
    if offset:
        stmt = stmt.offset(offset)
    return stmt


# Users
def get_user_by_open_id(db: Session, open_id: str) -> Optional[User]:
    return db.scalars(select(User).where(User.open_id == open_id).limit(1)).first()


def upsert_user(db: Session, open_id: str, role: Optional[str] = None, **fields) -> User:
    """Insert or update a user keyed by ``open_id``.

    Only the text fields that are passed are written; ``last_signed_in`` is
    always refreshed. Without an explicit role the configured owner becomes
    an admin.
    """
    if not open_id:
        raise ValueError("User open_id is required for upsert")

    user = get_user_by_open_id(db, open_id)
    if user is None:
        user = User(open_id=open_id)
        db.add(user)

    for field in _USER_TEXT_FIELDS:
        if field in fields:
            setattr(user, field, fields[field])

    if role is not None:
        user.role = role
    elif settings.owner_open_id and open_id == settings.owner_open_id:
        user.role = "admin"

    user.last_signed_in = fields.get("last_signed_in") or utcnow()
    db.flush()
    db.refresh(user)
    return user


# Sites
def get_sites(db: Session) -> List[Site]:
    return list(db.scalars(select(Site).order_by(Site.name, Site.id)))


def get_site_by_id(db: Session, site_id: int) -> Optional[Site]:
    return db.get(Site, site_id)


def create_site(db: Session, data: Dict[str, Any]) -> Site:
    return _add(db, Site(**data))


def update_site(db: Session, site: Site, data: Dict[str, Any]) -> Site:
    _apply(site, data)
    db.flush()
    return site


def delete_site(db: Session, site: Site) -> None:
    db.delete(site)
    db.flush()


# Cameras
def get_cameras(db: Session, site_id: Optional[int] = None) -> List[Camera]:
    stmt = select(Camera)
    if site_id is not None:
        stmt = stmt.where(Camera.site_id == site_id)
    return list(db.scalars(stmt.order_by(Camera.name, Camera.id)))


def get_camera_by_id(db: Session, camera_id: int) -> Optional[Camera]:
    return db.get(Camera, camera_id)


def create_camera(db: Session, data: Dict[str, Any]) -> Camera:
    # New cameras stay offline until the detection service reports frames.
    return _add(db, Camera(**data, status="offline"))


def update_camera(db: Session, camera: Camera, data: Dict[str, Any]) -> Camera:
    _apply(camera, data)
    db.flush()
    return camera


def update_camera_status(
    db: Session,
    camera: Camera,
    status: str,
    last_frame_time: Optional[datetime] = None,
    fps: Optional[float] = None,
) -> Camera:
    camera.status = status
    if last_frame_time is not None:
        camera.last_frame_time = last_frame_time
    if fps is not None:
        camera.fps = fps
    db.flush()
    return camera


def delete_camera(db: Session, camera: Camera) -> None:
    db.delete(camera)
    db.flush()


# Zones
def get_zones(db: Session, camera_id: int) -> List[Zone]:
    stmt = select(Zone).where(Zone.camera_id == camera_id).order_by(Zone.name, Zone.id)
    return list(db.scalars(stmt))


def get_zone_by_id(db: Session, zone_id: int) -> Optional[Zone]:
    return db.get(Zone, zone_id)


def create_zone(db: Session, data: Dict[str, Any]) -> Zone:
    return _add(db, Zone(**data))


def update_zone(db: Session, zone: Zone, data: Dict[str, Any]) -> Zone:
    _apply(zone, data)
    db.flush()
    return zone


def delete_zone(db: Session, zone: Zone) -> None:
    db.delete(zone)
    db.flush()


# Rules
def get_rules(db: Session, zone_id: int) -> List[Rule]:
    stmt = select(Rule).where(Rule.zone_id == zone_id).order_by(Rule.rule_type, Rule.id)
    return list(db.scalars(stmt))


def get_rule_by_id(db: Session, rule_id: int) -> Optional[Rule]:
    return db.get(Rule, rule_id)


def create_rule(db: Session, data: Dict[str, Any]) -> Rule:
    return _add(db, Rule(**data))


def update_rule(db: Session, rule: Rule, data: Dict[str, Any]) -> Rule:
    _apply(rule, data)
    db.flush()
    return rule


def delete_rule(db: Session, rule: Rule) -> None:
    db.delete(rule)
    db.flush()


# Events
def get_events(
    db: Session,
    camera_id: Optional[int] = None,
    rule_type: Optional[str] = None,
    from_: Optional[datetime] = None,
    to: Optional[datetime] = None,
    limit: Optional[int] = None,
    offset: Optional[int] = None,
) -> List[Event]:
    """Return events matching every given filter, newest first.

    ``from_`` and ``to`` are inclusive bounds on ``Event.timestamp``.
    """
    conditions = []
    if camera_id is not None:
        conditions.append(Event.camera_id == camera_id)
    if rule_type:
        conditions.append(Event.rule_type == rule_type)
    if from_ is not None:
        conditions.append(Event.timestamp >= from_)
    if to is not None:
        conditions.append(Event.timestamp <= to)

    stmt = select(Event)
    if conditions:
        stmt = stmt.where(*conditions)
    stmt = stmt.order_by(Event.timestamp.desc(), Event.id.desc())
    return list(db.scalars(_page(stmt, limit, offset)))


def get_event_by_id(db: Session, event_id: int) -> Optional[Event]:
    return db.get(Event, event_id)


def create_event(db: Session, data: Dict[str, Any]) -> Event:
    if data.get("timestamp") is None:
        data = {**data, "timestamp": utcnow()}
    return _add(db, Event(**data))


def delete_event(db: Session, event: Event) -> None:
    db.delete(event)
    db.flush()


def get_event_count(db: Session, camera_id: Optional[int] = None) -> int:
    stmt = select(func.count()).select_from(Event)
    if camera_id is not None:
        stmt = stmt.where(Event.camera_id == camera_id)
    return db.scalar(stmt) or 0


# Detections
def create_detection(db: Session, data: Dict[str, Any]) -> Detection:
    if data.get("timestamp") is None:
        data = {**data, "timestamp": utcnow()}
    return _add(db, Detection(**data))


def get_recent_detections(db: Session, camera_id: int, limit: int = 100) -> List[Detection]:
    stmt = (
        select(Detection)
        .where(Detection.camera_id == camera_id)
        .order_by(Detection.timestamp.desc(), Detection.id.desc())
        .limit(limit)
    )
    return list(db.scalars(stmt))


# Alert subscriptions
def get_user_alert_subscriptions(db: Session, user_id: int) -> List[AlertSubscription]:
    stmt = select(AlertSubscription).where(AlertSubscription.user_id == user_id)
    return list(db.scalars(stmt.order_by(AlertSubscription.id)))


def get_alert_subscription_by_id(db: Session, subscription_id: int) -> Optional[AlertSubscription]:
    return db.get(AlertSubscription, subscription_id)


def create_alert_subscription(db: Session, data: Dict[str, Any]) -> AlertSubscription:
    return _add(db, AlertSubscription(**data))


def delete_alert_subscription(db: Session, subscription: AlertSubscription) -> None:
    db.delete(subscription)
    db.flush()


def get_matching_subscriptions(db: Session, camera_id: int, rule_type: str) -> List[AlertSubscription]:
    """Enabled subscriptions covering this camera (or all cameras) and rule type (or ``all``)."""
    stmt = select(AlertSubscription).where(
        AlertSubscription.enabled.is_(True),
        or_(AlertSubscription.camera_id.is_(None), AlertSubscription.camera_id == camera_id),
        or_(AlertSubscription.rule_type == "all", AlertSubscription.rule_type == rule_type),
    )
    return list(db.scalars(stmt.order_by(AlertSubscription.id)))


# Notifications
def create_notification(db: Session, data: Dict[str, Any]) -> Notification:
    return _add(db, Notification(**data))


def create_notifications(db: Session, rows: Iterable[Dict[str, Any]]) -> List[Notification]:
    created = [Notification(**row) for row in rows]
    db.add_all(created)
    db.flush()
    return created


def get_notifications(
    db: Session,
    user_id: int,
    unread_only: bool = False,
    limit: Optional[int] = None,
    offset: Optional[int] = None,
) -> List[Notification]:
    stmt = select(Notification).where(Notification.user_id == user_id)
    if unread_only:
        stmt = stmt.where(Notification.read.is_(False))
    stmt = stmt.order_by(Notification.created_at.desc(), Notification.id.desc())
    return list(db.scalars(_page(stmt, limit, offset)))


def get_notification_by_id(db: Session, notification_id: int) -> Optional[Notification]:
    return db.get(Notification, notification_id)


def count_unread_notifications(db: Session, user_id: int) -> int:
    stmt = (
        select(func.count())
        .select_from(Notification)
        .where(Notification.user_id == user_id, Notification.read.is_(False))
    )
    return db.scalar(stmt) or 0


def mark_notification_read(db: Session, notification: Notification) -> Notification:
    if not notification.read:
        notification.read = True
        notification.read_at = utcnow()
        db.flush()
    return notification


def mark_all_notifications_read(db: Session, user_id: int) -> int:
    unread = get_notifications(db, user_id, unread_only=True)
    now = utcnow()
    for notification in unread:
        notification.read = True
        notification.read_at = now
    db.flush()
    return len(unread)


# Audit logs
def create_audit_log(db: Session, data: Dict[str, Any]) -> AuditLog:
    return _add(db, AuditLog(**data))


def get_audit_logs(
    db: Session,
    user_id: Optional[int] = None,
    resource_type: Optional[str] = None,
    limit: Optional[int] = None,
    offset: Optional[int] = None,
) -> List[AuditLog]:
    conditions = []
    if user_id is not None:
        conditions.append(AuditLog.user_id == user_id)
    if resource_type:
        conditions.append(AuditLog.resource_type == resource_type)

    stmt = select(AuditLog)
    if conditions:
        stmt = stmt.where(*conditions)
    stmt = stmt.order_by(AuditLog.created_at.desc(), AuditLog.id.desc())
    return list(db.scalars(_page(stmt, limit, offset)))


# Dashboard
def get_dashboard_summary(db: Session, now: Optional[datetime] = None) -> Dict[str, int]:
    now = now or utcnow()
    online = select(func.count()).select_from(Camera).where(Camera.status == "online")
    recent = select(func.count()).select_from(Event).where(Event.timestamp >= now - timedelta(hours=1))
    return {
        "total_sites": db.scalar(select(func.count()).select_from(Site)) or 0,
        "total_cameras": db.scalar(select(func.count()).select_from(Camera)) or 0,
        "online_cameras": db.scalar(online) or 0,
        "total_events": get_event_count(db),
        "events_last_hour": db.scalar(recent) or 0,
    }
