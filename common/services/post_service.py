from datetime import datetime, timezone
from typing import Dict, List, Optional
from uuid import uuid4

from sqlalchemy import or_

from ..errors import NotFoundError, ValidationError
from ..models.category import Category
from ..models.post import Post
from ..models.post_tag import PostTag
from ..models.seo_metadata import SeoMetadata
from ..models.tag import Tag
from ..models.user import User
from ..schemas import PostPayload
from ..utils.dto import to_category_dto, to_post_dto, to_tag_dto
from ..utils.pagination import normalize_paging, pagination_meta
from ..utils.slugs import build_permalink, is_valid_slug
from .logging import log_event
from .seo_service import delete_seo, upsert_seo
from .slug_service import SlugService
from .tag_service import TagReconciler, tags_for_posts


class PostService:
    """Post CRUD backed by DB.

    A save writes the post row, reconciles its tags and upserts its SEO
    metadata in one transaction.
    """

    def __init__(self, session_factory, *, reconciler: TagReconciler, slug_service: SlugService, site_url: str = ""):
        self._session_factory = session_factory
        self._reconciler = reconciler
        self._slugs = slug_service
        self._site_url = site_url

    # -- reads -------------------------------------------------------------

    def list_posts(
        self,
        *,
        page: int = 1,
        limit: int = 10,
        status: Optional[str] = None,
        post_type: Optional[str] = None,
        category_id: Optional[str] = None,
        search: Optional[str] = None,
        max_limit: int = 100,
    ) -> Dict:
        p, ps = normalize_paging(page, limit, max_limit)
        with self._session_factory() as session:
            q = session.query(Post)
            if status and status.lower() != "all":
                q = q.filter(Post.status == status.upper())
            if post_type and post_type.lower() != "all":
                q = q.filter(Post.type == post_type.upper())
            if category_id:
                q = q.filter(Post.category_id == category_id)
            if search:
                like = f"%{search}%"
                q = q.filter(or_(Post.title.ilike(like), Post.content.ilike(like), Post.excerpt.ilike(like)))
            total = q.count()
            rows = self._ordered(q).offset((p - 1) * ps).limit(ps).all()
            return {"posts": self._hydrate(session, rows), "pagination": pagination_meta(p, ps, total)}

    def get_post(self, post_id: str) -> Dict:
        with self._session_factory() as session:
            return self._hydrate(session, [self._load(session, post_id)])[0]

    def get_published_by_slug(self, slug: str) -> Optional[Dict]:
        with self._session_factory() as session:
            row = session.query(Post).filter(Post.slug == slug, Post.status == "PUBLISHED").first()
            return self._hydrate(session, [row])[0] if row else None

    def list_published(self, *, limit: int = 10) -> List[Dict]:
        with self._session_factory() as session:
            q = session.query(Post).filter(Post.status == "PUBLISHED")
            rows = q.order_by(Post.published_at.desc(), Post.created_at.desc()).limit(limit).all()
            return self._hydrate(session, rows)

    def category_archive(self, slug: str) -> Dict:
        with self._session_factory() as session:
            category = session.query(Category).filter(Category.slug == slug).first()
            if not category:
                raise NotFoundError("Category not found")
            rows = (
                session.query(Post)
                .filter(Post.category_id == category.id, Post.status == "PUBLISHED")
                .order_by(Post.published_at.desc(), Post.created_at.desc())
                .all()
            )
            return {"category": to_category_dto(category), "posts": self._hydrate(session, rows)}

    def tag_archive(self, slug: str) -> Dict:
        with self._session_factory() as session:
            tag = session.query(Tag).filter(Tag.slug == slug).first()
            if not tag:
                raise NotFoundError("Tag not found")
            rows = (
                session.query(Post)
                .join(PostTag, PostTag.post_id == Post.id)
                .filter(PostTag.tag_id == tag.id, Post.status == "PUBLISHED")
                .order_by(Post.published_at.desc(), Post.created_at.desc())
                .all()
            )
            return {"tag": to_tag_dto(tag), "posts": self._hydrate(session, rows)}

    # -- writes ------------------------------------------------------------

    def create_post(self, data: PostPayload, *, author_id: Optional[str] = None) -> Dict:
        with self._session_factory() as session:
            post = Post(id=str(uuid4()), author_id=data.author_id or author_id)
            self._apply(session, post, data)
            session.add(post)
            session.flush()
            self._reconciler.reconcile_in(session, post.id, data.tags)
            if data.seo_metadata is not None:
                upsert_seo(session, data.seo_metadata, post_id=post.id)
            log_event("info", "post.created", post_id=post.id, slug=post.slug, tags=len(data.tags))
            return self._hydrate(session, [post])[0]

    def update_post(self, post_id: str, data: PostPayload) -> Dict:
        with self._session_factory() as session:
            post = self._load(session, post_id)
            if data.author_id:
                post.author_id = data.author_id
            self._apply(session, post, data)
            session.flush()
            self._reconciler.reconcile_in(session, post.id, data.tags)
            if data.seo_metadata is not None:
                upsert_seo(session, data.seo_metadata, post_id=post.id)
            log_event("info", "post.updated", post_id=post.id, slug=post.slug, tags=len(data.tags))
            return self._hydrate(session, [post])[0]

    def delete_post(self, post_id: str) -> None:
        with self._session_factory() as session:
            post = self._load(session, post_id)
            session.query(PostTag).filter(PostTag.post_id == post_id).delete(synchronize_session=False)
            delete_seo(session, post_id=post_id)
            session.delete(post)
            session.flush()
            log_event("info", "post.deleted", post_id=post_id)

    # -- helpers -----------------------------------------------------------

    @staticmethod
    def _load(session, post_id: str) -> Post:
        post = session.query(Post).filter(Post.id == post_id).first()
        if not post:
            raise NotFoundError("Post not found")
        return post

    @staticmethod
    def _ordered(q):
        return q.order_by(Post.sticky.desc(), Post.published_at.desc(), Post.created_at.desc())

    def _apply(self, session, post: Post, data: PostPayload) -> None:
        if not post.author_id or session.query(User.id).filter(User.id == post.author_id).first() is None:
            raise ValidationError("author_id must reference an existing user")
        if data.category_id and session.query(Category.id).filter(Category.id == data.category_id).first() is None:
            raise ValidationError("category_id must reference an existing category")

        # a client-supplied slug is trusted for uniqueness; the unique index is the backstop
        if data.slug:
            if not is_valid_slug(data.slug):
                raise ValidationError("slug may only contain lowercase letters, digits and single hyphens")
            post.slug = data.slug
        elif not post.slug:
            # derived once; later saves without a slug keep the stored one
            post.slug = self._slugs.unique_for(session, "post", data.title, current_id=post.id)

        for name, value in data.column_values().items():
            setattr(post, name, value)
        if data.published_at is not None:
            post.published_at = data.published_at
        elif data.status == "PUBLISHED" and post.published_at is None:
            post.published_at = datetime.now(timezone.utc).replace(tzinfo=None)

    def _hydrate(self, session, posts: List[Post]) -> List[Dict]:
        if not posts:
            return []
        ids = [p.id for p in posts]
        author_ids = {p.author_id for p in posts if p.author_id}
        category_ids = {p.category_id for p in posts if p.category_id}
        authors = {u.id: u for u in session.query(User).filter(User.id.in_(author_ids)).all()} if author_ids else {}
        categories = (
            {c.id: c for c in session.query(Category).filter(Category.id.in_(category_ids)).all()}
            if category_ids
            else {}
        )
        seo = {s.post_id: s for s in session.query(SeoMetadata).filter(SeoMetadata.post_id.in_(ids)).all()}
        tags = tags_for_posts(session, ids)
        return [
            to_post_dto(
                p,
                tags=tags.get(p.id, []),
                author=authors.get(p.author_id),
                category=categories.get(p.category_id),
                seo=seo.get(p.id),
                permalink=build_permalink(p.slug, self._site_url),
            )
            for p in posts
        ]
