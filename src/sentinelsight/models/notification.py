from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    String,
    Text,
    func,
)

from .base import Base, utcnow

SEVERITIES = ("info", "warning", "critical")
NOTIFICATION_TYPES = ("intrusion", "loitering", "counting", "system")


class Notification(Base):
    __tablename__ = "notifications"
    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    event_id = Column(Integer, ForeignKey("events.id", ondelete="SET NULL"), nullable=True)
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=True)
    severity = Column(Enum(*SEVERITIES, name="notification_severity"), nullable=False, default="info")
    type = Column(Enum(*NOTIFICATION_TYPES, name="notification_type"), nullable=False)
    camera_id = Column(Integer, nullable=True)
    read = Column(Boolean, nullable=False, default=False)
    action_url = Column(String(512), nullable=True)
    # "metadata" is reserved on declarative classes
    extra = Column("metadata", JSON, nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow, server_default=func.now())
    read_at = Column(DateTime, nullable=True)
