from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String, Text, func
from .base import Base

CONTENT_STATUSES = ("DRAFT", "PUBLISHED", "PRIVATE", "ARCHIVED", "TRASH")
POST_FORMATS = ("STANDARD", "ASIDE", "GALLERY", "LINK", "IMAGE", "QUOTE", "STATUS", "VIDEO", "AUDIO", "CHAT")


class Post(Base):
    __tablename__ = "post"

    id = Column(String(36), primary_key=True)
    title = Column(String(255), nullable=False)
    slug = Column(String(255), nullable=False, unique=True)
    content = Column(Text, nullable=True)
    excerpt = Column(Text, nullable=True)
    featured_image = Column(String(512), nullable=True)
    status = Column(String(16), nullable=False, default="DRAFT")
    type = Column(String(32), nullable=False, default="POST")
    format = Column(String(16), nullable=False, default="STANDARD")
    published_at = Column(DateTime, nullable=True)
    author_id = Column(String(36), ForeignKey("user.id"), nullable=False)
    category_id = Column(String(36), ForeignKey("category.id"), nullable=True)
    allow_comments = Column(Boolean, nullable=False, default=True)
    sticky = Column(Boolean, nullable=False, default=False)
    password = Column(String(255), nullable=True)
    # format-specific fields
    video_url = Column(String(512), nullable=True)
    audio_url = Column(String(512), nullable=True)
    quote_text = Column(Text, nullable=True)
    quote_author = Column(String(255), nullable=True)
    link_url = Column(String(512), nullable=True)
    link_title = Column(String(255), nullable=True)
    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=False, server_default=func.now(), onupdate=func.now())
