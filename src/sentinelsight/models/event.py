from sqlalchemy import JSON, Column, DateTime, ForeignKey, Index, Integer, Numeric, String, func

from .base import Base, TimestampMixin, utcnow


class Event(TimestampMixin, Base):
    __tablename__ = "events"
    __table_args__ = (
        Index("ix_events_timestamp", "timestamp"),
        Index("ix_events_camera_id", "camera_id"),
        Index("ix_events_camera_timestamp", "camera_id", "timestamp"),
    )
    id = Column(Integer, primary_key=True, autoincrement=True)
    camera_id = Column(Integer, ForeignKey("cameras.id", ondelete="CASCADE"), nullable=False)
    zone_id = Column(Integer, ForeignKey("zones.id", ondelete="SET NULL"), nullable=True)
    rule_id = Column(Integer, ForeignKey("rules.id", ondelete="SET NULL"), nullable=True)
    timestamp = Column(DateTime, nullable=False, default=utcnow, server_default=func.now())
    rule_type = Column(String(64), nullable=False)
    object_type = Column(String(64), nullable=False)
    confidence = Column(Numeric(3, 2, asdecimal=False), nullable=False)
    bounding_box = Column(JSON, nullable=True)
    snapshot_url = Column(String(512), nullable=True)
    clip_url = Column(String(512), nullable=True)
