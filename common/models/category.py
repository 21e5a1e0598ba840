from sqlalchemy import Column, DateTime, String, Text, func
from .base import Base


class Category(Base):
    __tablename__ = "category"

    id = Column(String(36), primary_key=True)
    name = Column(String(255), nullable=False, unique=True)
    slug = Column(String(255), nullable=False, unique=True)
    description = Column(Text, nullable=True)
    color = Column(String(16), nullable=True)
    created_at = Column(DateTime, nullable=False, server_default=func.now())
