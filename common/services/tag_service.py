from typing import Dict, List, Optional, Sequence, Tuple
from uuid import uuid4

from sqlalchemy import func, or_

from ..errors import ConflictError, NotFoundError, ValidationError
from ..models.post import Post
from ..models.post_tag import PostTag
from ..models.tag import Tag
from ..utils.dto import to_tag_dto
from ..utils.slugs import is_valid_slug, normalize
from .logging import log_event


def dedupe_tag_names(names: Sequence[str]) -> List[Tuple[str, str]]:
    """Return ``(slug, name)`` pairs, one per distinct slug, first name wins."""
    seen = set()
    pairs: List[Tuple[str, str]] = []
    for name in names:
        slug = normalize(name)
        if not slug:
            raise ValidationError(f"tag name {name!r} must contain at least one letter or digit")
        if slug in seen:
            continue
        seen.add(slug)
        pairs.append((slug, name.strip()))
    return pairs


class TagReconciler:
    """Make a post's tag associations equal a submitted list of tag names.

    Existing associations are dropped and recreated in the same transaction,
    so readers never observe a half-applied tag set and a failure leaves the
    previous set in place.
    """

    def __init__(self, session_factory):
        self._session_factory = session_factory

    def reconcile(self, post_id: str, desired_tag_names: Sequence[str]) -> List[Dict]:
        with self._session_factory() as session:
            tags = self.reconcile_in(session, post_id, desired_tag_names)
            return [to_tag_dto(t) for t in tags]

    def reconcile_in(self, session, post_id: str, desired_tag_names: Sequence[str]) -> List[Tag]:
        """Same as :meth:`reconcile` on a caller-owned session."""
        pairs = dedupe_tag_names(desired_tag_names)
        if session.query(Post.id).filter(Post.id == post_id).first() is None:
            raise NotFoundError("Post not found")

        session.query(PostTag).filter(PostTag.post_id == post_id).delete()
        tags: List[Tag] = []
        linked = set()
        created = 0
        for slug, name in pairs:
            tag, is_new = self._resolve_tag(session, slug, name)
            created += int(is_new)
            if tag.id in linked:
                continue
            linked.add(tag.id)
            session.add(PostTag(post_id=post_id, tag_id=tag.id))
            tags.append(tag)
        session.flush()
        log_event("info", "tags.reconciled", post_id=post_id, tags=len(tags), created=created)
        return tags

    def _resolve_tag(self, session, slug: str, name: str) -> Tuple[Tag, bool]:
        tag = session.query(Tag).filter(Tag.slug == slug).first()
        if tag is None:
            # a tag renamed by an admin can keep its name under a custom slug
            tag = session.query(Tag).filter(Tag.name == name).first()
        if tag is not None:
            return tag, False
        tag = Tag(id=str(uuid4()), name=name, slug=slug)
        session.add(tag)
        session.flush()
        return tag, True


def tags_for_posts(session, post_ids: Sequence[str]) -> Dict[str, List[Tag]]:
    """Map each post id to its tags, ordered by tag name."""
    result: Dict[str, List[Tag]] = {pid: [] for pid in post_ids}
    if not post_ids:
        return result
    rows = (
        session.query(PostTag.post_id, Tag)
        .join(Tag, Tag.id == PostTag.tag_id)
        .filter(PostTag.post_id.in_(list(post_ids)))
        .order_by(Tag.name.asc())
        .all()
    )
    for post_id, tag in rows:
        result[post_id].append(tag)
    return result


class TagService:
    """Admin CRUD over tags."""

    def __init__(self, session_factory):
        self._session_factory = session_factory

    @staticmethod
    def _post_counts(session):
        return (
            session.query(PostTag.tag_id, func.count(PostTag.post_id).label("n"))
            .group_by(PostTag.tag_id)
            .subquery()
        )

    def list_tags(self, *, search: Optional[str] = None, limit: int = 50) -> List[Dict]:
        with self._session_factory() as session:
            counts = self._post_counts(session)
            q = session.query(Tag, func.coalesce(counts.c.n, 0)).outerjoin(counts, counts.c.tag_id == Tag.id)
            if search:
                like = f"%{search}%"
                q = q.filter(or_(Tag.name.ilike(like), Tag.slug.ilike(like)))
            rows = q.order_by(Tag.name.asc()).limit(limit).all()
            return [to_tag_dto(tag, n) for tag, n in rows]

    def get_tag(self, tag_id: str) -> Dict:
        with self._session_factory() as session:
            tag = session.query(Tag).filter(Tag.id == tag_id).first()
            if not tag:
                raise NotFoundError("Tag not found")
            n = session.query(func.count(PostTag.post_id)).filter(PostTag.tag_id == tag_id).scalar()
            return to_tag_dto(tag, n)

    def get_by_slug(self, session, slug: str) -> Optional[Tag]:
        return session.query(Tag).filter(Tag.slug == slug).first()

    @staticmethod
    def _slug_for(name: str, slug: Optional[str]) -> str:
        resolved = slug or normalize(name)
        if not is_valid_slug(resolved):
            raise ValidationError("slug may only contain lowercase letters, digits and single hyphens")
        return resolved

    @staticmethod
    def _ensure_free(session, name: str, slug: str, exclude_id: Optional[str] = None) -> None:
        q = session.query(Tag).filter(or_(Tag.name == name, Tag.slug == slug))
        if exclude_id:
            q = q.filter(Tag.id != exclude_id)
        if q.first():
            raise ConflictError("Tag with this name or slug already exists")

    def create_tag(self, *, name: str, slug: Optional[str] = None, color: Optional[str] = None) -> Dict:
        slug = self._slug_for(name, slug)
        with self._session_factory() as session:
            self._ensure_free(session, name, slug)
            tag = Tag(id=str(uuid4()), name=name, slug=slug, color=color)
            session.add(tag)
            session.flush()
            log_event("info", "tag.created", tag_id=tag.id, slug=slug)
            return to_tag_dto(tag, 0)

    def update_tag(self, tag_id: str, *, name: str, slug: Optional[str] = None, color: Optional[str] = None) -> Dict:
        slug = self._slug_for(name, slug)
        with self._session_factory() as session:
            tag = session.query(Tag).filter(Tag.id == tag_id).first()
            if not tag:
                raise NotFoundError("Tag not found")
            self._ensure_free(session, name, slug, exclude_id=tag_id)
            tag.name = name
            tag.slug = slug
            tag.color = color
            session.flush()
            n = session.query(func.count(PostTag.post_id)).filter(PostTag.tag_id == tag_id).scalar()
            return to_tag_dto(tag, n)

    def delete_tag(self, tag_id: str) -> None:
        with self._session_factory() as session:
            tag = session.query(Tag).filter(Tag.id == tag_id).first()
            if not tag:
                raise NotFoundError("Tag not found")
            removed = session.query(PostTag).filter(PostTag.tag_id == tag_id).delete(synchronize_session=False)
            session.delete(tag)
            session.flush()
            log_event("info", "tag.deleted", tag_id=tag_id, associations=removed)
