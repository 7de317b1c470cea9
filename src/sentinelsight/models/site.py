from sqlalchemy import Column, Integer, String, Text

from .base import Base, TimestampMixin


class Site(TimestampMixin, Base):
    __tablename__ = "sites"
    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    location = Column(String(255), nullable=True)
    description = Column(Text, nullable=True)
