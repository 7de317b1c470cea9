from sqlalchemy import Boolean, Column, ForeignKey, Integer, String

from .base import Base, TimestampMixin

SUBSCRIPTION_RULE_TYPES = ("intrusion", "loitering", "counting", "custom", "all")


class AlertSubscription(TimestampMixin, Base):
    __tablename__ = "alert_subscriptions"
    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    # NULL camera_id subscribes to every camera
    camera_id = Column(Integer, ForeignKey("cameras.id", ondelete="CASCADE"), nullable=True)
    rule_type = Column(String(64), nullable=False)
    enabled = Column(Boolean, nullable=False, default=True)
