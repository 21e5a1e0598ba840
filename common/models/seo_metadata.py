from sqlalchemy import Column, ForeignKey, JSON, String, Text
from .base import Base


class SeoMetadata(Base):
    """Search and social metadata attached to exactly one post or page."""

    __tablename__ = "seo_metadata"

    id = Column(String(36), primary_key=True)
    post_id = Column(String(36), ForeignKey("post.id", ondelete="CASCADE"), nullable=True, unique=True)
    page_id = Column(String(36), ForeignKey("page.id", ondelete="CASCADE"), nullable=True, unique=True)
    meta_title = Column(String(255), nullable=True)
    meta_description = Column(Text, nullable=True)
    keywords = Column(JSON, nullable=True)
    og_title = Column(String(255), nullable=True)
    og_description = Column(Text, nullable=True)
    og_image = Column(String(512), nullable=True)
    canonical_url = Column(String(512), nullable=True)
    robots = Column(String(64), nullable=True)
