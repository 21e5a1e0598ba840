"""Admin area routes."""

from __future__ import annotations

from flask import Blueprint, current_app, g, jsonify, redirect, request, url_for

from ..services.auth import current_user_id


admin_bp = Blueprint("cms_admin", __name__, url_prefix="/admin")


def _components() -> dict:
    return current_app.extensions["augmex_components"]


def _is_authenticated() -> bool:
    return bool(getattr(g, "user_id", None))


def _require_login():
    if _is_authenticated():
        return None
    return redirect(url_for("cms_admin.login_form"))


@admin_bp.before_request
def guard_private_routes():
    if request.endpoint and request.endpoint.startswith("cms_admin."):
        public = {"cms_admin.login_form"}
        if request.endpoint not in public:
            redirect_response = _require_login()
            if redirect_response is not None:
                return redirect_response
    return None


@admin_bp.get("/login")
def login_form():
    cookie = current_app.config["CMS_CONFIG"].auth_cookie
    return jsonify(
        {
            "message": "Sign in to continue.",
            "authenticated": _is_authenticated(),
            "cookie": cookie,
        }
    )


@admin_bp.get("/")
def dashboard():
    return jsonify(_components()["dashboard_service"].overview())


@admin_bp.get("/me")
def me():
    return jsonify(_components()["user_service"].get_user(current_user_id()))
