from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text, func
from .base import Base

MEDIA_TYPES = ("IMAGE", "VIDEO", "AUDIO", "DOCUMENT", "OTHER")


class Media(Base):
    __tablename__ = "media"

    id = Column(String(36), primary_key=True)
    filename = Column(String(255), nullable=False)
    original_name = Column(String(255), nullable=False)
    file_path = Column(String(512), nullable=False)
    file_size = Column(Integer, nullable=False, default=0)
    mime_type = Column(String(128), nullable=False)
    type = Column(String(16), nullable=False, default="OTHER")
    alt_text = Column(String(255), nullable=True)
    title = Column(String(255), nullable=True)
    caption = Column(Text, nullable=True)
    description = Column(Text, nullable=True)
    uploaded_by = Column(String(36), ForeignKey("user.id"), nullable=True)
    created_at = Column(DateTime, nullable=False, server_default=func.now())
