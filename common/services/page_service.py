from datetime import datetime, timezone
from typing import Dict, List, Optional
from uuid import uuid4

from sqlalchemy import or_

from ..errors import NotFoundError, ValidationError
from ..models.page import Page
from ..models.seo_metadata import SeoMetadata
from ..models.user import User
from ..schemas import PagePayload
from ..utils.dto import to_page_dto
from ..utils.pagination import normalize_paging, pagination_meta
from ..utils.slugs import build_permalink, is_valid_slug
from .logging import log_event
from .seo_service import delete_seo, upsert_seo
from .slug_service import SlugService


class PageService:
    """Static page CRUD backed by DB. Pages nest through ``parent_id``."""

    def __init__(self, session_factory, *, slug_service: SlugService, site_url: str = ""):
        self._session_factory = session_factory
        self._slugs = slug_service
        self._site_url = site_url

    def list_pages(
        self,
        *,
        page: int = 1,
        limit: int = 10,
        status: Optional[str] = None,
        search: Optional[str] = None,
        max_limit: int = 100,
    ) -> Dict:
        p, ps = normalize_paging(page, limit, max_limit)
        with self._session_factory() as session:
            q = session.query(Page)
            if status and status.lower() != "all":
                q = q.filter(Page.status == status.upper())
            if search:
                like = f"%{search}%"
                q = q.filter(or_(Page.title.ilike(like), Page.content.ilike(like), Page.excerpt.ilike(like)))
            total = q.count()
            rows = q.order_by(Page.sort_order.asc(), Page.title.asc()).offset((p - 1) * ps).limit(ps).all()
            return {"pages": self._hydrate(session, rows), "pagination": pagination_meta(p, ps, total)}

    def get_page(self, page_id: str) -> Dict:
        with self._session_factory() as session:
            return self._hydrate(session, [self._load(session, page_id)])[0]

    def get_published_by_slug(self, slug: str) -> Optional[Dict]:
        with self._session_factory() as session:
            row = session.query(Page).filter(Page.slug == slug, Page.status == "PUBLISHED").first()
            return self._hydrate(session, [row])[0] if row else None

    def create_page(self, data: PagePayload, *, author_id: Optional[str] = None) -> Dict:
        with self._session_factory() as session:
            page = Page(id=str(uuid4()), author_id=data.author_id or author_id)
            self._apply(session, page, data)
            session.add(page)
            session.flush()
            if data.seo_metadata is not None:
                upsert_seo(session, data.seo_metadata, page_id=page.id)
            log_event("info", "page.created", page_id=page.id, slug=page.slug)
            return self._hydrate(session, [page])[0]

    def update_page(self, page_id: str, data: PagePayload) -> Dict:
        with self._session_factory() as session:
            page = self._load(session, page_id)
            if data.author_id:
                page.author_id = data.author_id
            self._apply(session, page, data)
            session.flush()
            if data.seo_metadata is not None:
                upsert_seo(session, data.seo_metadata, page_id=page.id)
            log_event("info", "page.updated", page_id=page.id, slug=page.slug)
            return self._hydrate(session, [page])[0]

    def delete_page(self, page_id: str) -> None:
        with self._session_factory() as session:
            page = self._load(session, page_id)
            if session.query(Page.id).filter(Page.parent_id == page_id).first() is not None:
                raise ValidationError("Cannot delete page with children. Please move or delete child pages first.")
            delete_seo(session, page_id=page_id)
            session.delete(page)
            session.flush()
            log_event("info", "page.deleted", page_id=page_id)

    @staticmethod
    def _load(session, page_id: str) -> Page:
        page = session.query(Page).filter(Page.id == page_id).first()
        if not page:
            raise NotFoundError("Page not found")
        return page

    def _apply(self, session, page: Page, data: PagePayload) -> None:
        if not page.author_id or session.query(User.id).filter(User.id == page.author_id).first() is None:
            raise ValidationError("author_id must reference an existing user")
        if data.parent_id:
            if data.parent_id == page.id:
                raise ValidationError("a page cannot be its own parent")
            if session.query(Page.id).filter(Page.id == data.parent_id).first() is None:
                raise ValidationError("parent_id must reference an existing page")

        if data.slug:
            if not is_valid_slug(data.slug):
                raise ValidationError("slug may only contain lowercase letters, digits and single hyphens")
            page.slug = data.slug
        elif not page.slug:
            page.slug = self._slugs.unique_for(session, "page", data.title, current_id=page.id)

        page.title = data.title
        page.content = data.content
        page.excerpt = data.excerpt
        page.featured_image = data.featured_image
        page.status = data.status
        page.template = data.template
        page.parent_id = data.parent_id
        page.sort_order = data.order
        if data.published_at is not None:
            page.published_at = data.published_at
        elif data.status == "PUBLISHED" and page.published_at is None:
            page.published_at = datetime.now(timezone.utc).replace(tzinfo=None)

    def _hydrate(self, session, pages: List[Page]) -> List[Dict]:
        if not pages:
            return []
        ids = [p.id for p in pages]
        author_ids = {p.author_id for p in pages if p.author_id}
        parent_ids = {p.parent_id for p in pages if p.parent_id}
        authors = {u.id: u for u in session.query(User).filter(User.id.in_(author_ids)).all()} if author_ids else {}
        parents = {p.id: p for p in session.query(Page).filter(Page.id.in_(parent_ids)).all()} if parent_ids else {}
        children: Dict[str, List[Page]] = {pid: [] for pid in ids}
        for child in session.query(Page).filter(Page.parent_id.in_(ids)).order_by(Page.sort_order.asc()).all():
            children[child.parent_id].append(child)
        seo = {s.page_id: s for s in session.query(SeoMetadata).filter(SeoMetadata.page_id.in_(ids)).all()}
        return [
            to_page_dto(
                p,
                author=authors.get(p.author_id),
                parent=parents.get(p.parent_id),
                children=children.get(p.id, []),
                seo=seo.get(p.id),
                permalink=build_permalink(p.slug, self._site_url),
            )
            for p in pages
        ]
