from .base import Base
from .category import Category
from .media import MEDIA_TYPES, Media
from .page import Page
from .post import CONTENT_STATUSES, POST_FORMATS, Post
from .post_tag import PostTag
from .seo_metadata import SeoMetadata
from .tag import Tag
from .user import USER_ROLES, User

__all__ = [
    "Base",
    "Category",
    "CONTENT_STATUSES",
    "Media",
    "MEDIA_TYPES",
    "Page",
    "Post",
    "POST_FORMATS",
    "PostTag",
    "SeoMetadata",
    "Tag",
    "User",
    "USER_ROLES",
]
