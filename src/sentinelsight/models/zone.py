from sqlalchemy import JSON, Boolean, Column, Enum, ForeignKey, Integer, String

from .base import Base, TimestampMixin

ZONE_TYPES = ("intrusion", "loitering", "counting", "general")


class Zone(TimestampMixin, Base):
    __tablename__ = "zones"
    id = Column(Integer, primary_key=True, autoincrement=True)
    camera_id = Column(
        Integer,
        ForeignKey("cameras.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name = Column(String(255), nullable=False)
    # List of {"x": float, "y": float} vertices in frame coordinates
    polygon_points = Column(JSON, nullable=True)
    zone_type = Column(Enum(*ZONE_TYPES, name="zone_type"), nullable=False)
    enabled = Column(Boolean, nullable=False, default=True)
