from .base import Base
from .user import User
from .site import Site
from .camera import Camera
from .zone import Zone
from .rule import Rule
from .event import Event
from .detection import Detection
from .subscription import AlertSubscription
from .notification import Notification
from .audit_log import AuditLog

__all__ = [
    "AlertSubscription",
    "AuditLog",
    "Base",
    "Camera",
    "Detection",
    "Event",
    "Notification",
    "Rule",
    "Site",
    "User",
    "Zone",
]
