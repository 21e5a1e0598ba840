"""JSON API used by the admin client."""

from __future__ import annotations

from typing import Any, Dict

from flask import Blueprint, current_app, g, jsonify, request

from common.errors import AuthError
from common.schemas import (
    MediaPayload,
    MediaUpdatePayload,
    PagePayload,
    PostPayload,
    SlugCheckRequest,
    TermPayload,
    UserPayload,
)

from ..services.auth import MANAGER_ROLES, current_user_id, require_role


api_bp = Blueprint("cms_api", __name__, url_prefix="/api")

_WRITE_METHODS = {"POST", "PUT", "PATCH", "DELETE"}
# slug checks are read-only despite being a POST
_PUBLIC_WRITES = {"cms_api.check_slug"}
_USER_ENDPOINTS = {
    "cms_api.list_users",
    "cms_api.create_user",
    "cms_api.get_user",
    "cms_api.update_user",
    "cms_api.delete_user",
}


def _components() -> Dict[str, Any]:
    return current_app.extensions["augmex_components"]


def _config():
    return current_app.config["CMS_CONFIG"]


def _body() -> Any:
    return request.get_json(silent=True)


def _paging() -> Dict[str, int]:
    cfg = _config()
    return {
        "page": request.args.get("page", 1, type=int),
        "limit": request.args.get("limit", type=int) or cfg.default_page_size,
        "max_limit": cfg.max_page_size,
    }


@api_bp.before_request
def guard_writes():
    if request.method in _WRITE_METHODS and request.endpoint not in _PUBLIC_WRITES:
        if not getattr(g, "user_id", None):
            raise AuthError("Authentication required")
    if request.endpoint in _USER_ENDPOINTS:
        require_role(*MANAGER_ROLES)
    return None


# -- slugs -------------------------------------------------------------------


@api_bp.post("/slugs/check")
def check_slug():
    req = SlugCheckRequest.from_payload(_body())
    result = _components()["slug_service"].check(req.text, req.content_type, req.current_id)
    return jsonify(result.to_dict())


# -- posts -------------------------------------------------------------------


@api_bp.get("/posts")
def list_posts():
    result = _components()["post_service"].list_posts(
        status=request.args.get("status"),
        post_type=request.args.get("type"),
        category_id=request.args.get("categoryId"),
        search=request.args.get("search"),
        **_paging(),
    )
    return jsonify(result)


@api_bp.post("/posts")
def create_post():
    data = PostPayload.from_payload(_body())
    post = _components()["post_service"].create_post(data, author_id=current_user_id())
    return jsonify(post), 201


@api_bp.get("/posts/<post_id>")
def get_post(post_id: str):
    return jsonify(_components()["post_service"].get_post(post_id))


@api_bp.put("/posts/<post_id>")
def update_post(post_id: str):
    data = PostPayload.from_payload(_body())
    return jsonify(_components()["post_service"].update_post(post_id, data))


@api_bp.delete("/posts/<post_id>")
def delete_post(post_id: str):
    _components()["post_service"].delete_post(post_id)
    return jsonify({"message": "Post deleted successfully"})


# -- pages -------------------------------------------------------------------


@api_bp.get("/pages")
def list_pages():
    result = _components()["page_service"].list_pages(
        status=request.args.get("status"),
        search=request.args.get("search"),
        **_paging(),
    )
    return jsonify(result)


@api_bp.post("/pages")
def create_page():
    data = PagePayload.from_payload(_body())
    page = _components()["page_service"].create_page(data, author_id=current_user_id())
    return jsonify(page), 201


@api_bp.get("/pages/<page_id>")
def get_page(page_id: str):
    return jsonify(_components()["page_service"].get_page(page_id))


@api_bp.put("/pages/<page_id>")
def update_page(page_id: str):
    data = PagePayload.from_payload(_body())
    return jsonify(_components()["page_service"].update_page(page_id, data))


@api_bp.delete("/pages/<page_id>")
def delete_page(page_id: str):
    _components()["page_service"].delete_page(page_id)
    return jsonify({"message": "Page deleted successfully"})


# -- tags --------------------------------------------------------------------


@api_bp.get("/tags")
def list_tags():
    tags = _components()["tag_service"].list_tags(
        search=request.args.get("search"),
        limit=request.args.get("limit", 50, type=int),
    )
    return jsonify({"tags": tags})


@api_bp.post("/tags")
def create_tag():
    data = TermPayload.from_payload(_body())
    tag = _components()["tag_service"].create_tag(name=data.name, slug=data.slug, color=data.color)
    return jsonify(tag), 201


@api_bp.get("/tags/<tag_id>")
def get_tag(tag_id: str):
    return jsonify(_components()["tag_service"].get_tag(tag_id))


@api_bp.put("/tags/<tag_id>")
def update_tag(tag_id: str):
    data = TermPayload.from_payload(_body())
    tag = _components()["tag_service"].update_tag(tag_id, name=data.name, slug=data.slug, color=data.color)
    return jsonify(tag)


@api_bp.delete("/tags/<tag_id>")
def delete_tag(tag_id: str):
    _components()["tag_service"].delete_tag(tag_id)
    return jsonify({"message": "Tag deleted successfully"})


# -- categories --------------------------------------------------------------


@api_bp.get("/categories")
def list_categories():
    categories = _components()["category_service"].list_categories(search=request.args.get("search"))
    return jsonify({"categories": categories})


@api_bp.post("/categories")
def create_category():
    data = TermPayload.from_payload(_body(), with_description=True)
    return jsonify(_components()["category_service"].create_category(data)), 201


@api_bp.get("/categories/<category_id>")
def get_category(category_id: str):
    return jsonify(_components()["category_service"].get_category(category_id))


@api_bp.put("/categories/<category_id>")
def update_category(category_id: str):
    data = TermPayload.from_payload(_body(), with_description=True)
    return jsonify(_components()["category_service"].update_category(category_id, data))


@api_bp.delete("/categories/<category_id>")
def delete_category(category_id: str):
    _components()["category_service"].delete_category(category_id)
    return jsonify({"message": "Category deleted successfully"})


# -- users -------------------------------------------------------------------


@api_bp.get("/users")
def list_users():
    result = _components()["user_service"].list_users(
        role=request.args.get("role"),
        is_active=request.args.get("isActive"),
        search=request.args.get("search"),
        **_paging(),
    )
    return jsonify(result)


@api_bp.post("/users")
def create_user():
    data = UserPayload.from_payload(_body(), creating=True)
    return jsonify(_components()["user_service"].create_user(data)), 201


@api_bp.get("/users/<user_id>")
def get_user(user_id: str):
    return jsonify(_components()["user_service"].get_user(user_id))


@api_bp.put("/users/<user_id>")
def update_user(user_id: str):
    data = UserPayload.from_payload(_body(), creating=False)
    return jsonify(_components()["user_service"].update_user(user_id, data))


@api_bp.delete("/users/<user_id>")
def delete_user(user_id: str):
    _components()["user_service"].delete_user(user_id)
    return jsonify({"message": "User deleted successfully"})


# -- media -------------------------------------------------------------------


@api_bp.get("/media")
def list_media():
    result = _components()["media_service"].list_media(
        media_type=request.args.get("type"),
        search=request.args.get("search"),
        **_paging(),
    )
    return jsonify(result)


@api_bp.post("/media")
def create_media():
    data = MediaPayload.from_payload(_body())
    media = _components()["media_service"].create_media(data, uploaded_by=current_user_id())
    return jsonify(media), 201


@api_bp.get("/media/<media_id>")
def get_media(media_id: str):
    return jsonify(_components()["media_service"].get_media(media_id))


@api_bp.put("/media/<media_id>")
def update_media(media_id: str):
    data = MediaUpdatePayload.from_payload(_body())
    return jsonify(_components()["media_service"].update_media(media_id, data))


@api_bp.delete("/media/<media_id>")
def delete_media(media_id: str):
    _components()["media_service"].delete_media(media_id)
    return jsonify({"message": "Media deleted successfully"})
