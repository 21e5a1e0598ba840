"""Request payloads accepted by the API.

Every write endpoint parses its JSON body into one of these dataclasses
before any service code runs. Unknown fields, missing required fields and
values outside an allowed set raise ``ValidationError``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from .errors import ValidationError
from .models import CONTENT_STATUSES, MEDIA_TYPES, POST_FORMATS, USER_ROLES
from .utils.validators import ensure_positive_int

CONTENT_TYPES = ("post", "page")


def _ensure_mapping(payload: Any) -> Dict[str, Any]:
    if not isinstance(payload, dict):
        raise ValidationError("request body must be a JSON object")
    return payload


def _reject_unknown(payload: Dict[str, Any], allowed: Iterable[str]) -> None:
    unknown = sorted(set(payload) - set(allowed))
    if unknown:
        raise ValidationError(f"unrecognized fields: {', '.join(unknown)}")


def _text(payload: Dict[str, Any], key: str, *, required: bool = False) -> Optional[str]:
    value = payload.get(key)
    if value is None or (isinstance(value, str) and not value.strip()):
        if required:
            raise ValidationError(f"{key} is required")
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{key} must be a string")
    return value.strip()


def _choice(payload: Dict[str, Any], key: str, allowed: Iterable[str], default: str) -> str:
    value = payload.get(key)
    if value is None or value == "":
        return default
    if not isinstance(value, str) or value.upper() not in allowed:
        raise ValidationError(f"{key} must be one of: {', '.join(allowed)}")
    return value.upper()


def _flag(payload: Dict[str, Any], key: str, default: bool) -> bool:
    value = payload.get(key)
    if value is None:
        return default
    if not isinstance(value, bool):
        raise ValidationError(f"{key} must be a boolean")
    return value


def _when(payload: Dict[str, Any], key: str) -> Optional[datetime]:
    value = payload.get(key)
    if not value:
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{key} must be an ISO 8601 string")
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        raise ValidationError(f"{key} must be an ISO 8601 string") from None
    # stored naive, in UTC
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def parse_tag_names(value: Any) -> List[str]:
    """Accept ``["News", ...]`` or ``[{"name": "News", "slug": "news"}, ...]``."""
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValidationError("tags must be a list")
    names: List[str] = []
    for item in value:
        if isinstance(item, dict):
            item = item.get("name")
        if not isinstance(item, str) or not item.strip():
            raise ValidationError("each tag needs a non-empty name")
        names.append(item.strip())
    return names


@dataclass
class SlugCheckRequest:
    text: str
    content_type: str
    current_id: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: Any) -> "SlugCheckRequest":
        payload = _ensure_mapping(payload)
        _reject_unknown(payload, ("text", "type", "currentId"))
        text = _text(payload, "text")
        content_type = payload.get("type")
        if not text or not content_type:
            raise ValidationError("Text and type are required")
        if content_type not in CONTENT_TYPES:
            raise ValidationError('Type must be either "post" or "page"')
        return cls(text=text, content_type=content_type, current_id=_text(payload, "currentId"))


_SEO_FIELDS = (
    "meta_title",
    "meta_description",
    "keywords",
    "og_title",
    "og_description",
    "og_image",
    "canonical_url",
    "robots",
)


@dataclass
class SeoPayload:
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None
    keywords: List[str] = field(default_factory=list)
    og_title: Optional[str] = None
    og_description: Optional[str] = None
    og_image: Optional[str] = None
    canonical_url: Optional[str] = None
    robots: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: Any) -> Optional["SeoPayload"]:
        if payload is None:
            return None
        payload = _ensure_mapping(payload)
        _reject_unknown(payload, _SEO_FIELDS)
        keywords = payload.get("keywords") or []
        if not isinstance(keywords, list) or not all(isinstance(k, str) for k in keywords):
            raise ValidationError("keywords must be a list of strings")
        return cls(
            meta_title=_text(payload, "meta_title"),
            meta_description=_text(payload, "meta_description"),
            keywords=[k.strip() for k in keywords if k.strip()],
            og_title=_text(payload, "og_title"),
            og_description=_text(payload, "og_description"),
            og_image=_text(payload, "og_image"),
            canonical_url=_text(payload, "canonical_url"),
            robots=_text(payload, "robots"),
        )

    def as_columns(self) -> Dict[str, Any]:
        return {name: getattr(self, name) for name in _SEO_FIELDS}


_POST_FIELDS = (
    "title", "slug", "content", "excerpt", "featured_image", "status", "type", "format",
    "published_at", "author_id", "category_id", "allow_comments", "sticky", "password",
    "video_url", "audio_url", "quote_text", "quote_author", "link_url", "link_title",
    "tags", "seo_metadata",
)


@dataclass
class PostPayload:
    title: str
    slug: Optional[str] = None
    content: Optional[str] = None
    excerpt: Optional[str] = None
    featured_image: Optional[str] = None
    status: str = "DRAFT"
    type: str = "POST"
    format: str = "STANDARD"
    published_at: Optional[datetime] = None
    author_id: Optional[str] = None
    category_id: Optional[str] = None
    allow_comments: bool = True
    sticky: bool = False
    password: Optional[str] = None
    video_url: Optional[str] = None
    audio_url: Optional[str] = None
    quote_text: Optional[str] = None
    quote_author: Optional[str] = None
    link_url: Optional[str] = None
    link_title: Optional[str] = None
    tags: List[str] = field(default_factory=list)
    seo_metadata: Optional[SeoPayload] = None

    @classmethod
    def from_payload(cls, payload: Any) -> "PostPayload":
        payload = _ensure_mapping(payload)
        _reject_unknown(payload, _POST_FIELDS)
        return cls(
            title=_text(payload, "title", required=True),
            slug=_text(payload, "slug"),
            content=payload.get("content") or None,
            excerpt=_text(payload, "excerpt"),
            featured_image=_text(payload, "featured_image"),
            status=_choice(payload, "status", CONTENT_STATUSES, "DRAFT"),
            type=(_text(payload, "type") or "POST").upper(),
            format=_choice(payload, "format", POST_FORMATS, "STANDARD"),
            published_at=_when(payload, "published_at"),
            author_id=_text(payload, "author_id"),
            category_id=_text(payload, "category_id"),
            allow_comments=_flag(payload, "allow_comments", True),
            sticky=_flag(payload, "sticky", False),
            password=_text(payload, "password"),
            video_url=_text(payload, "video_url"),
            audio_url=_text(payload, "audio_url"),
            quote_text=_text(payload, "quote_text"),
            quote_author=_text(payload, "quote_author"),
            link_url=_text(payload, "link_url"),
            link_title=_text(payload, "link_title"),
            tags=parse_tag_names(payload.get("tags")),
            seo_metadata=SeoPayload.from_payload(payload.get("seo_metadata")),
        )

    def column_values(self) -> Dict[str, Any]:
        """Values copied straight onto the ``Post`` row."""
        return {
            name: getattr(self, name)
            for name in _POST_FIELDS
            if name not in ("slug", "author_id", "published_at", "tags", "seo_metadata")
        }


_PAGE_FIELDS = (
    "title", "slug", "content", "excerpt", "featured_image", "status", "template",
    "parent_id", "order", "published_at", "author_id", "seo_metadata",
)


@dataclass
class PagePayload:
    title: str
    slug: Optional[str] = None
    content: Optional[str] = None
    excerpt: Optional[str] = None
    featured_image: Optional[str] = None
    status: str = "DRAFT"
    template: Optional[str] = None
    parent_id: Optional[str] = None
    order: int = 0
    published_at: Optional[datetime] = None
    author_id: Optional[str] = None
    seo_metadata: Optional[SeoPayload] = None

    @classmethod
    def from_payload(cls, payload: Any) -> "PagePayload":
        payload = _ensure_mapping(payload)
        _reject_unknown(payload, _PAGE_FIELDS)
        order = payload.get("order")
        return cls(
            title=_text(payload, "title", required=True),
            slug=_text(payload, "slug"),
            content=payload.get("content") or None,
            excerpt=_text(payload, "excerpt"),
            featured_image=_text(payload, "featured_image"),
            status=_choice(payload, "status", CONTENT_STATUSES, "DRAFT"),
            template=_text(payload, "template"),
            parent_id=_text(payload, "parent_id"),
            order=ensure_positive_int(order, "order") if order is not None else 0,
            published_at=_when(payload, "published_at"),
            author_id=_text(payload, "author_id"),
            seo_metadata=SeoPayload.from_payload(payload.get("seo_metadata")),
        )


@dataclass
class TermPayload:
    """Body of a tag or category write."""

    name: str
    slug: Optional[str] = None
    color: Optional[str] = None
    description: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: Any, *, with_description: bool = False) -> "TermPayload":
        payload = _ensure_mapping(payload)
        allowed = ["name", "slug", "color"] + (["description"] if with_description else [])
        _reject_unknown(payload, allowed)
        return cls(
            name=_text(payload, "name", required=True),
            slug=_text(payload, "slug"),
            color=_text(payload, "color"),
            description=_text(payload, "description"),
        )


_USER_FIELDS = ("email", "username", "name", "password", "role", "avatar", "bio", "is_active")


@dataclass
class UserPayload:
    email: str
    username: Optional[str] = None
    name: Optional[str] = None
    password: Optional[str] = None
    role: str = "CONTRIBUTOR"
    avatar: Optional[str] = None
    bio: Optional[str] = None
    is_active: bool = True

    @classmethod
    def from_payload(cls, payload: Any, *, creating: bool) -> "UserPayload":
        payload = _ensure_mapping(payload)
        _reject_unknown(payload, _USER_FIELDS)
        email = _text(payload, "email", required=True)
        if "@" not in email:
            raise ValidationError("email is not valid")
        password = _text(payload, "password", required=creating)
        if password is not None and len(password) < 6:
            raise ValidationError("password must be at least 6 characters")
        return cls(
            email=email.lower(),
            username=_text(payload, "username") or email.split("@")[0].lower(),
            name=_text(payload, "name"),
            password=password,
            role=_choice(payload, "role", USER_ROLES, "CONTRIBUTOR"),
            avatar=_text(payload, "avatar"),
            bio=_text(payload, "bio"),
            is_active=_flag(payload, "is_active", True),
        )


_MEDIA_FIELDS = (
    "filename", "original_name", "file_path", "file_size", "mime_type", "type",
    "alt_text", "title", "caption", "description", "uploaded_by",
)
_MEDIA_EDITABLE = ("alt_text", "title", "caption", "description")


@dataclass
class MediaPayload:
    filename: str
    original_name: str
    file_path: str
    mime_type: str
    file_size: int = 0
    type: Optional[str] = None
    alt_text: Optional[str] = None
    title: Optional[str] = None
    caption: Optional[str] = None
    description: Optional[str] = None
    uploaded_by: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: Any) -> "MediaPayload":
        payload = _ensure_mapping(payload)
        _reject_unknown(payload, _MEDIA_FIELDS)
        return cls(
            filename=_text(payload, "filename", required=True),
            original_name=_text(payload, "original_name") or _text(payload, "filename", required=True),
            file_path=_text(payload, "file_path", required=True),
            mime_type=_text(payload, "mime_type", required=True).lower(),
            file_size=ensure_positive_int(payload.get("file_size", 0), "file_size"),
            type=_choice(payload, "type", MEDIA_TYPES, "") or None,
            alt_text=_text(payload, "alt_text"),
            title=_text(payload, "title"),
            caption=_text(payload, "caption"),
            description=_text(payload, "description"),
            uploaded_by=_text(payload, "uploaded_by"),
        )


@dataclass
class MediaUpdatePayload:
    alt_text: Optional[str] = None
    title: Optional[str] = None
    caption: Optional[str] = None
    description: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: Any) -> "MediaUpdatePayload":
        payload = _ensure_mapping(payload)
        _reject_unknown(payload, _MEDIA_EDITABLE)
        return cls(**{name: _text(payload, name) for name in _MEDIA_EDITABLE})
