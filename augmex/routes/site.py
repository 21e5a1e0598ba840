"""Public read-only site routes."""

from __future__ import annotations

from flask import Blueprint, current_app, jsonify

from common.errors import NotFoundError
from common.utils.slugs import parse_permalink


site_bp = Blueprint("cms_site", __name__)


def _components() -> dict:
    return current_app.extensions["augmex_components"]


@site_bp.get("/")
def home():
    components = _components()
    return jsonify(
        {
            "site_url": current_app.config["CMS_CONFIG"].site_url,
            "posts": components["post_service"].list_published(limit=3),
            "categories": components["category_service"].list_categories(),
        }
    )


@site_bp.get("/blog")
def blog():
    return jsonify({"posts": _components()["post_service"].list_published(limit=10)})


@site_bp.get("/category/<slug>")
def category_archive(slug: str):
    return jsonify(_components()["post_service"].category_archive(slug))


@site_bp.get("/tag/<slug>")
def tag_archive(slug: str):
    return jsonify(_components()["post_service"].tag_archive(slug))


@site_bp.get("/<path:slug>")
def permalink(slug: str):
    """Resolve ``/<slug>/`` to a published post, else a published page."""
    slug = parse_permalink(slug)
    components = _components()
    post = components["post_service"].get_published_by_slug(slug)
    if post is not None:
        return jsonify({"type": "post", "post": post})
    page = components["page_service"].get_published_by_slug(slug)
    if page is not None:
        return jsonify({"type": "page", "page": page})
    raise NotFoundError("Page not found")
