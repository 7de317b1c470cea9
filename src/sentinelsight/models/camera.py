from sqlalchemy import Boolean, Column, DateTime, Enum, ForeignKey, Integer, Numeric, String

from .base import Base, TimestampMixin

CAMERA_STATUSES = ("online", "offline", "error")


class Camera(TimestampMixin, Base):
    __tablename__ = "cameras"
    id = Column(Integer, primary_key=True, autoincrement=True)
    site_id = Column(
        Integer,
        ForeignKey("sites.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name = Column(String(255), nullable=False)
    location_tag = Column(String(255), nullable=True)
    rtsp_url = Column(String(512), nullable=False)
    status = Column(Enum(*CAMERA_STATUSES, name="camera_status"), nullable=False, default="offline")
    # fps and last_frame_time are reported by the detection service
    fps = Column(Numeric(5, 2, asdecimal=False), nullable=True)
    last_frame_time = Column(DateTime, nullable=True)
    enabled = Column(Boolean, nullable=False, default=True)
