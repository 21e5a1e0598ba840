from typing import Dict

from sqlalchemy import func

from ..models.category import Category
from ..models.media import Media
from ..models.page import Page
from ..models.post import Post
from ..models.tag import Tag
from ..models.user import User


class DashboardService:
    def __init__(self, session_factory):
        self._session_factory = session_factory

    def overview(self) -> Dict:
        with self._session_factory() as session:
            posts_by_status = dict(
                session.query(Post.status, func.count(Post.id)).group_by(Post.status).all()
            )
            return {
                "posts": {
                    "total": sum(posts_by_status.values()),
                    "published": posts_by_status.get("PUBLISHED", 0),
                    "draft": posts_by_status.get("DRAFT", 0),
                },
                "pages": session.query(func.count(Page.id)).scalar() or 0,
                "categories": session.query(func.count(Category.id)).scalar() or 0,
                "tags": session.query(func.count(Tag.id)).scalar() or 0,
                "media": session.query(func.count(Media.id)).scalar() or 0,
                "users": session.query(func.count(User.id)).scalar() or 0,
                "recent_posts": [
                    {"id": p.id, "title": p.title, "slug": p.slug, "status": p.status}
                    for p in session.query(Post).order_by(Post.created_at.desc()).limit(5).all()
                ],
            }
