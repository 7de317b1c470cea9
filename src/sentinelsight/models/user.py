from sqlalchemy import Column, DateTime, Enum, Integer, String, Text, func

from .base import Base, TimestampMixin, utcnow

USER_ROLES = ("user", "admin", "operator", "viewer")


class User(TimestampMixin, Base):
    __tablename__ = "users"
    id = Column(Integer, primary_key=True, autoincrement=True)
    # Identifier returned by the identity provider; unique per user.
    open_id = Column(String(64), nullable=False, unique=True)
    name = Column(Text, nullable=True)
    email = Column(String(320), nullable=True)
    login_method = Column(String(64), nullable=True)
    role = Column(Enum(*USER_ROLES, name="user_role"), nullable=False, default="user")
    last_signed_in = Column(DateTime, nullable=False, default=utcnow, server_default=func.now())
