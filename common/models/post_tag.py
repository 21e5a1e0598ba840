from sqlalchemy import Column, ForeignKey, String
from .base import Base


class PostTag(Base):
    __tablename__ = "post_tag"

    post_id = Column(String(36), ForeignKey("post.id", ondelete="CASCADE"), primary_key=True)
    tag_id = Column(String(36), ForeignKey("tag.id", ondelete="CASCADE"), primary_key=True)
