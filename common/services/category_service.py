from typing import Dict, List, Optional
from uuid import uuid4

from sqlalchemy import func, or_

from ..errors import ConflictError, NotFoundError, ValidationError
from ..models.category import Category
from ..models.post import Post
from ..schemas import TermPayload
from ..utils.dto import to_category_dto
from ..utils.slugs import is_valid_slug, normalize
from .logging import log_event


class CategoryService:
    """Category CRUD backed by DB. Each post belongs to at most one category."""

    def __init__(self, session_factory):
        self._session_factory = session_factory

    @staticmethod
    def _post_count(session, category_id: str) -> int:
        return session.query(func.count(Post.id)).filter(Post.category_id == category_id).scalar() or 0

    def list_categories(self, *, search: Optional[str] = None) -> List[Dict]:
        with self._session_factory() as session:
            counts = (
                session.query(Post.category_id, func.count(Post.id).label("n"))
                .group_by(Post.category_id)
                .subquery()
            )
            q = session.query(Category, func.coalesce(counts.c.n, 0)).outerjoin(
                counts, counts.c.category_id == Category.id
            )
            if search:
                like = f"%{search}%"
                q = q.filter(or_(Category.name.ilike(like), Category.slug.ilike(like)))
            return [to_category_dto(c, n) for c, n in q.order_by(Category.name.asc()).all()]

    def get_category(self, category_id: str) -> Dict:
        with self._session_factory() as session:
            category = self._load(session, category_id)
            return to_category_dto(category, self._post_count(session, category_id))

    def create_category(self, data: TermPayload) -> Dict:
        slug = self._slug_for(data)
        with self._session_factory() as session:
            self._ensure_free(session, data.name, slug)
            category = Category(
                id=str(uuid4()),
                name=data.name,
                slug=slug,
                description=data.description,
                color=data.color,
            )
            session.add(category)
            session.flush()
            log_event("info", "category.created", category_id=category.id, slug=slug)
            return to_category_dto(category, 0)

    def update_category(self, category_id: str, data: TermPayload) -> Dict:
        slug = self._slug_for(data)
        with self._session_factory() as session:
            category = self._load(session, category_id)
            self._ensure_free(session, data.name, slug, exclude_id=category_id)
            category.name = data.name
            category.slug = slug
            category.description = data.description
            category.color = data.color
            session.flush()
            return to_category_dto(category, self._post_count(session, category_id))

    def delete_category(self, category_id: str) -> None:
        with self._session_factory() as session:
            category = self._load(session, category_id)
            if self._post_count(session, category_id) > 0:
                raise ValidationError(
                    "Cannot delete category with associated posts. Please reassign or delete the posts first."
                )
            session.delete(category)
            session.flush()
            log_event("info", "category.deleted", category_id=category_id)

    @staticmethod
    def _load(session, category_id: str) -> Category:
        category = session.query(Category).filter(Category.id == category_id).first()
        if not category:
            raise NotFoundError("Category not found")
        return category

    @staticmethod
    def _slug_for(data: TermPayload) -> str:
        slug = data.slug or normalize(data.name)
        if not is_valid_slug(slug):
            raise ValidationError("slug may only contain lowercase letters, digits and single hyphens")
        return slug

    @staticmethod
    def _ensure_free(session, name: str, slug: str, exclude_id: Optional[str] = None) -> None:
        q = session.query(Category).filter(or_(Category.name == name, Category.slug == slug))
        if exclude_id:
            q = q.filter(Category.id != exclude_id)
        if q.first():
            raise ConflictError("Category with this name or slug already exists")
