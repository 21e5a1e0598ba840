from dataclasses import dataclass, field
from typing import List, Optional, Set

from sqlalchemy import or_

from ..errors import ValidationError
from ..models.page import Page
from ..models.post import Post
from ..utils.slugs import ensure_unique, normalize
from .logging import log_event


@dataclass
class SlugCheck:
    slug: str
    is_unique: bool
    suggestions: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"slug": self.slug, "isUnique": self.is_unique, "suggestions": self.suggestions}


class SlugService:
    """Resolve unique slugs for posts and pages.

    The result is a suggestion only: nothing is reserved, so two concurrent
    saves can still collide and must be caught by the unique index.
    """

    _models = {"post": Post, "page": Page}

    def __init__(self, session_factory):
        self._session_factory = session_factory

    def existing_slugs(self, session, content_type: str, base_slug: str, current_id: Optional[str] = None) -> Set[str]:
        model = self._models.get(content_type)
        if model is None:
            raise ValidationError('Type must be either "post" or "page"')
        q = session.query(model.slug).filter(
            or_(model.slug == base_slug, model.slug.like(f"{base_slug}-%"))
        )
        if current_id:
            q = q.filter(model.id != current_id)
        return {row.slug for row in q.all()}

    def unique_for(self, session, content_type: str, text: str, current_id: Optional[str] = None) -> str:
        base = normalize(text)
        if not base:
            raise ValidationError("slug must contain at least one letter or digit")
        return ensure_unique(base, self.existing_slugs(session, content_type, base, current_id))

    def check(self, text: str, content_type: str, current_id: Optional[str] = None) -> SlugCheck:
        base = normalize(text)
        if not base:
            raise ValidationError("slug must contain at least one letter or digit")
        with self._session_factory() as session:
            existing = self.existing_slugs(session, content_type, base, current_id)
        slug = ensure_unique(base, existing)
        suggestions = list(dict.fromkeys([slug, f"{base}-2", f"{base}-alternative"])) if existing else []
        log_event("debug", "slug.checked", type=content_type, base=base, slug=slug, collisions=len(existing))
        return SlugCheck(slug=slug, is_unique=slug == base, suggestions=suggestions)
