from sqlalchemy import JSON, Column, DateTime, ForeignKey, Index, Integer, Numeric, String, func

from .base import Base, utcnow


class Detection(Base):
    __tablename__ = "detections"
    __table_args__ = (Index("ix_detections_camera_timestamp", "camera_id", "timestamp"),)
    id = Column(Integer, primary_key=True, autoincrement=True)
    camera_id = Column(Integer, ForeignKey("cameras.id", ondelete="CASCADE"), nullable=False)
    frame_number = Column(Integer, nullable=True)
    timestamp = Column(DateTime, nullable=False, default=utcnow, server_default=func.now())
    object_type = Column(String(64), nullable=False)
    confidence = Column(Numeric(3, 2, asdecimal=False), nullable=False)
    bounding_box = Column(JSON, nullable=True)
    track_id = Column(String(128), nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow, server_default=func.now())
