from sqlalchemy import Column, DateTime, String, func
from .base import Base


class Tag(Base):
    __tablename__ = "tag"

    id = Column(String(36), primary_key=True)
    name = Column(String(255), nullable=False, unique=True)
    slug = Column(String(255), nullable=False, unique=True)
    color = Column(String(16), nullable=True)
    created_at = Column(DateTime, nullable=False, server_default=func.now())
