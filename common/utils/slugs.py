"""Slug normalization and permalink helpers.

Slugs are the last path segment of a post or page URL. A valid slug is one
or more runs of ``[a-z0-9]`` joined by single hyphens.
"""

import re
import unicodedata
from typing import Iterable, Optional

SLUG_PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")

_STRIP_RE = re.compile(r"[^\w\s-]", re.ASCII)
_SEPARATOR_RE = re.compile(r"[\s_]+", re.ASCII)
_HYPHENS_RE = re.compile(r"-+")


def normalize(text: Optional[str]) -> str:
    """Turn free text into a slug, or ``""`` when nothing is retainable.

    >>> normalize("10 Business Growth Strategies!")
    '10-business-growth-strategies'
    >>> normalize("Café au lait")
    'cafe-au-lait'
    """
    if not text:
        return ""
    text = unicodedata.normalize("NFKD", text.lower())
    text = text.encode("ascii", "ignore").decode("ascii")
    text = _STRIP_RE.sub("", text)
    text = _SEPARATOR_RE.sub("-", text)
    text = _HYPHENS_RE.sub("-", text)
    return text.strip("-")


def ensure_unique(base_slug: str, existing_slugs: Iterable[str]) -> str:
    """Return ``base_slug`` or the first free ``base_slug-N`` (N >= 2)."""
    taken = set(existing_slugs)
    if base_slug not in taken:
        return base_slug
    counter = 2
    while f"{base_slug}-{counter}" in taken:
        counter += 1
    return f"{base_slug}-{counter}"


def is_valid_slug(slug: Optional[str]) -> bool:
    return bool(slug) and SLUG_PATTERN.match(slug) is not None


def build_permalink(slug: str, base_url: str = "") -> str:
    # posts and pages share the flat /<slug>/ scheme
    return f"{base_url.rstrip('/')}/{slug}/"


def parse_permalink(permalink: str, base_url: str = "") -> str:
    path = permalink
    base = base_url.rstrip("/")
    if base and path.startswith(base):
        path = path[len(base):]
    return path.strip("/")
