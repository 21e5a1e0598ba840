"""Augmex CMS Flask application."""

from __future__ import annotations

import traceback
from typing import Optional

from flask import Flask, g, jsonify, request
from sqlalchemy.exc import IntegrityError
from werkzeug.exceptions import HTTPException

from common.db import create_db_engine, init_schema, make_session_factory
from common.errors import CmsError
from common.services.category_service import CategoryService
from common.services.dashboard_service import DashboardService
from common.services.logging import log_event, set_log_level
from common.services.media_service import MediaService
from common.services.page_service import PageService
from common.services.post_service import PostService
from common.services.slug_service import SlugService
from common.services.tag_service import TagReconciler, TagService
from common.services.user_service import UserService

from .config import CmsConfig
from .routes import admin, api, site
from .services import TokenVerifier, authenticate_request


def build_components(config: CmsConfig, session_factory) -> dict:
    slug_service = SlugService(session_factory)
    reconciler = TagReconciler(session_factory)
    return {
        "session_factory": session_factory,
        "token_verifier": TokenVerifier(config.jwt_secret),
        "slug_service": slug_service,
        "tag_reconciler": reconciler,
        "tag_service": TagService(session_factory),
        "category_service": CategoryService(session_factory),
        "post_service": PostService(
            session_factory, reconciler=reconciler, slug_service=slug_service, site_url=config.site_url
        ),
        "page_service": PageService(session_factory, slug_service=slug_service, site_url=config.site_url),
        "user_service": UserService(session_factory),
        "media_service": MediaService(session_factory),
        "dashboard_service": DashboardService(session_factory),
    }


def _register_error_handlers(app: Flask) -> None:
    @app.errorhandler(CmsError)
    def handle_cms_error(exc: CmsError):
        return jsonify({"error": exc.message}), exc.status_code

    @app.errorhandler(IntegrityError)
    def handle_integrity_error(exc: IntegrityError):
        log_event("warning", "request.conflict", path=request.path, detail=str(exc.orig))
        return jsonify({"error": "conflict: the record clashes with existing data"}), 409

    @app.errorhandler(Exception)
    def handle_unexpected(exc: Exception):
        if isinstance(exc, HTTPException):
            return exc
        log_event(
            "error",
            "request.failed",
            path=request.path,
            method=request.method,
            error=repr(exc),
            traceback=traceback.format_exc(),
        )
        return jsonify({"error": "Internal server error"}), 500


def create_app(config: Optional[CmsConfig] = None, session_factory=None) -> Flask:
    config = config or CmsConfig.load()
    set_log_level(config.log_level)

    if session_factory is None:
        engine = create_db_engine(config.database_url)
        init_schema(engine)
        session_factory = make_session_factory(engine)

    app = Flask(__name__)
    app.config["SECRET_KEY"] = config.secret_key
    app.config["CMS_CONFIG"] = config
    app.extensions["augmex_components"] = build_components(config, session_factory)

    @app.before_request
    def load_identity():
        authenticate_request(request, app.extensions["augmex_components"]["token_verifier"], config.auth_cookie)

    @app.after_request
    def log_write(response):
        if request.method in ("POST", "PUT", "DELETE"):
            log_event(
                "debug",
                "request.completed",
                method=request.method,
                path=request.path,
                status=response.status_code,
                user_id=getattr(g, "user_id", None),
            )
        return response

    _register_error_handlers(app)

    app.register_blueprint(api.api_bp)
    app.register_blueprint(admin.admin_bp)
    app.register_blueprint(site.site_bp)

    log_event("info", "app.started", database=config.database_url.split("://")[0], site_url=config.site_url)
    return app


def main() -> None:
    app = create_app()
    app.run(host="0.0.0.0", port=5000, debug=False)


if __name__ == "__main__":
    main()
