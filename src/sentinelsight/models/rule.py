from sqlalchemy import Boolean, Column, Enum, ForeignKey, Integer, Numeric

from .base import Base, TimestampMixin

RULE_TYPES = ("intrusion", "loitering", "counting", "custom")
OBJECT_TYPES = ("person", "vehicle", "any")


class Rule(TimestampMixin, Base):
    __tablename__ = "rules"
    id = Column(Integer, primary_key=True, autoincrement=True)
    zone_id = Column(
        Integer,
        ForeignKey("zones.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    rule_type = Column(Enum(*RULE_TYPES, name="rule_type"), nullable=False)
    object_type = Column(Enum(*OBJECT_TYPES, name="object_type"), nullable=False, default="any")
    # Dwell time for loitering rules
    threshold_seconds = Column(Integer, nullable=True, default=0)
    confidence_threshold = Column(Numeric(3, 2, asdecimal=False), nullable=True)
    enabled = Column(Boolean, nullable=False, default=True)
