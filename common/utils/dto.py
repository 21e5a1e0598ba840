from typing import Any, Dict, List, Optional


def _iso(value: Any) -> Optional[str]:
    return value.isoformat() if value is not None else None


def to_user_summary(row: Any) -> Optional[Dict]:
    if row is None:
        return None
    return {
        "id": getattr(row, "id", None),
        "name": getattr(row, "name", None),
        "email": getattr(row, "email", None),
        "avatar": getattr(row, "avatar", None),
    }


def to_user_dto(row: Any, counts: Optional[Dict] = None) -> Dict:
    data = {
        "id": getattr(row, "id", None),
        "email": getattr(row, "email", None),
        "username": getattr(row, "username", None),
        "name": getattr(row, "name", None),
        "role": getattr(row, "role", None),
        "avatar": getattr(row, "avatar", None),
        "bio": getattr(row, "bio", None),
        "is_active": bool(getattr(row, "is_active", True)),
        "last_login_at": _iso(getattr(row, "last_login_at", None)),
        "created_at": _iso(getattr(row, "created_at", None)),
        "updated_at": _iso(getattr(row, "updated_at", None)),
    }
    if counts is not None:
        data["counts"] = counts
    return data


def to_term_summary(row: Any) -> Optional[Dict]:
    if row is None:
        return None
    return {
        "id": getattr(row, "id", None),
        "name": getattr(row, "name", None),
        "slug": getattr(row, "slug", None),
    }


def to_tag_dto(row: Any, post_count: Optional[int] = None) -> Dict:
    data = {
        "id": getattr(row, "id", None),
        "name": getattr(row, "name", None),
        "slug": getattr(row, "slug", None),
        "color": getattr(row, "color", None),
    }
    if post_count is not None:
        data["post_count"] = int(post_count)
    return data


def to_category_dto(row: Any, post_count: Optional[int] = None) -> Dict:
    data = {
        "id": getattr(row, "id", None),
        "name": getattr(row, "name", None),
        "slug": getattr(row, "slug", None),
        "description": getattr(row, "description", None),
        "color": getattr(row, "color", None),
    }
    if post_count is not None:
        data["post_count"] = int(post_count)
    return data


def to_seo_dto(row: Any) -> Optional[Dict]:
    if row is None:
        return None
    return {
        "meta_title": getattr(row, "meta_title", None),
        "meta_description": getattr(row, "meta_description", None),
        "keywords": getattr(row, "keywords", None) or [],
        "og_title": getattr(row, "og_title", None),
        "og_description": getattr(row, "og_description", None),
        "og_image": getattr(row, "og_image", None),
        "canonical_url": getattr(row, "canonical_url", None),
        "robots": getattr(row, "robots", None),
    }


def to_post_dto(
    row: Any,
    *,
    tags: List[Any] = (),
    author: Any = None,
    category: Any = None,
    seo: Any = None,
    permalink: Optional[str] = None,
) -> Dict:
    return {
        "id": getattr(row, "id", None),
        "title": getattr(row, "title", None),
        "slug": getattr(row, "slug", None),
        "permalink": permalink,
        "content": getattr(row, "content", None),
        "excerpt": getattr(row, "excerpt", None),
        "featured_image": getattr(row, "featured_image", None),
        "status": getattr(row, "status", None),
        "type": getattr(row, "type", None),
        "format": getattr(row, "format", None),
        "published_at": _iso(getattr(row, "published_at", None)),
        "author_id": getattr(row, "author_id", None),
        "author": to_user_summary(author),
        "category_id": getattr(row, "category_id", None),
        "category": to_term_summary(category),
        "tags": [to_term_summary(t) for t in tags],
        "allow_comments": bool(getattr(row, "allow_comments", True)),
        "sticky": bool(getattr(row, "sticky", False)),
        "has_password": bool(getattr(row, "password", None)),
        "video_url": getattr(row, "video_url", None),
        "audio_url": getattr(row, "audio_url", None),
        "quote_text": getattr(row, "quote_text", None),
        "quote_author": getattr(row, "quote_author", None),
        "link_url": getattr(row, "link_url", None),
        "link_title": getattr(row, "link_title", None),
        "seo_metadata": to_seo_dto(seo),
        "created_at": _iso(getattr(row, "created_at", None)),
        "updated_at": _iso(getattr(row, "updated_at", None)),
    }


def to_page_dto(
    row: Any,
    *,
    author: Any = None,
    parent: Any = None,
    children: List[Any] = (),
    seo: Any = None,
    permalink: Optional[str] = None,
) -> Dict:
    return {
        "id": getattr(row, "id", None),
        "title": getattr(row, "title", None),
        "slug": getattr(row, "slug", None),
        "permalink": permalink,
        "content": getattr(row, "content", None),
        "excerpt": getattr(row, "excerpt", None),
        "featured_image": getattr(row, "featured_image", None),
        "status": getattr(row, "status", None),
        "template": getattr(row, "template", None),
        "parent_id": getattr(row, "parent_id", None),
        "parent": {"id": parent.id, "title": parent.title, "slug": parent.slug} if parent is not None else None,
        "children": [
            {"id": c.id, "title": c.title, "slug": c.slug, "order": c.sort_order} for c in children
        ],
        "order": getattr(row, "sort_order", 0) or 0,
        "published_at": _iso(getattr(row, "published_at", None)),
        "author_id": getattr(row, "author_id", None),
        "author": to_user_summary(author),
        "seo_metadata": to_seo_dto(seo),
        "created_at": _iso(getattr(row, "created_at", None)),
        "updated_at": _iso(getattr(row, "updated_at", None)),
    }


def to_media_dto(row: Any, uploader: Any = None) -> Dict:
    return {
        "id": getattr(row, "id", None),
        "filename": getattr(row, "filename", None),
        "original_name": getattr(row, "original_name", None),
        "file_path": getattr(row, "file_path", None),
        "file_size": getattr(row, "file_size", 0) or 0,
        "mime_type": getattr(row, "mime_type", None),
        "type": getattr(row, "type", None),
        "alt_text": getattr(row, "alt_text", None),
        "title": getattr(row, "title", None),
        "caption": getattr(row, "caption", None),
        "description": getattr(row, "description", None),
        "uploaded_by": getattr(row, "uploaded_by", None),
        "uploader": to_user_summary(uploader),
        "created_at": _iso(getattr(row, "created_at", None)),
    }
