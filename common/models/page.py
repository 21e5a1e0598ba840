from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text, func
from .base import Base


class Page(Base):
    __tablename__ = "page"

    id = Column(String(36), primary_key=True)
    title = Column(String(255), nullable=False)
    slug = Column(String(255), nullable=False, unique=True)
    content = Column(Text, nullable=True)
    excerpt = Column(Text, nullable=True)
    featured_image = Column(String(512), nullable=True)
    status = Column(String(16), nullable=False, default="DRAFT")
    template = Column(String(64), nullable=True)
    parent_id = Column(String(36), ForeignKey("page.id"), nullable=True)
    sort_order = Column(Integer, nullable=False, default=0)
    published_at = Column(DateTime, nullable=True)
    author_id = Column(String(36), ForeignKey("user.id"), nullable=False)
    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=False, server_default=func.now(), onupdate=func.now())
