"""
tests/conftest.py
"""
from __future__ import annotations

import datetime as _dt
from typing import Callable, Dict, Generator

import jwt
import pytest
from flask import Flask
from flask.testing import FlaskClient

from augmex.app import create_app
from augmex.config import CmsConfig
from common.db import create_db_engine, init_schema, make_session_factory
from common.schemas import UserPayload
from common.services.user_service import UserService

JWT_SECRET = "test-jwt-secret-that-is-long-enough-for-hs256"


@pytest.fixture
def config(tmp_path) -> CmsConfig:
    return CmsConfig(
        database_url="sqlite://",
        secret_key="test-secret",
        jwt_secret=JWT_SECRET,
        site_url="https://blog.example.com",
        log_level="WARNING",
        data_dir=tmp_path,
    )


@pytest.fixture
def session_factory():
    """A fresh in-memory database per test."""
    engine = create_db_engine("sqlite://")
    init_schema(engine)
    yield make_session_factory(engine)
    engine.dispose()


@pytest.fixture
def app(config: CmsConfig, session_factory) -> Flask:
    flask_app = create_app(config, session_factory=session_factory)
    flask_app.config.update(TESTING=True)
    return flask_app


@pytest.fixture
def client(app: Flask) -> Generator[FlaskClient, None, None]:
    with app.test_client() as test_client:
        yield test_client


@pytest.fixture
def components(app: Flask) -> Dict:
    return app.extensions["augmex_components"]


@pytest.fixture
def make_user(session_factory) -> Callable[..., Dict]:
    service = UserService(session_factory)

    def _make(email: str = "admin@example.com", role: str = "SUPER_ADMIN", **extra) -> Dict:
        payload = {"email": email, "password": "secret123", "role": role, **extra}
        return service.create_user(UserPayload.from_payload(payload, creating=True))

    return _make


@pytest.fixture
def make_token() -> Callable[..., str]:
    def _token(user_id: str, role: str = "SUPER_ADMIN", *, expires_in: int = 3600, secret: str = JWT_SECRET) -> str:
        now = _dt.datetime.now(_dt.timezone.utc)
        claims = {"sub": user_id, "role": role, "exp": now + _dt.timedelta(seconds=expires_in)}
        return jwt.encode(claims, secret, algorithm="HS256")

    return _token


@pytest.fixture
def admin(make_user) -> Dict:
    return make_user()


@pytest.fixture
def auth_headers(admin: Dict, make_token) -> Dict[str, str]:
    return {"Authorization": f"Bearer {make_token(admin['id'], admin['role'])}"}


@pytest.fixture
def create_post(client: FlaskClient, auth_headers) -> Callable[..., Dict]:
    def _create(**fields) -> Dict:
        fields.setdefault("title", "My First Post")
        resp = client.post("/api/posts", json=fields, headers=auth_headers)
        assert resp.status_code == 201, resp.get_json()
        return resp.get_json()

    return _create
