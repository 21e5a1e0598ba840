"""JWT cookie authentication for incoming requests."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import jwt
from flask import Request, g

from common.errors import AuthError, ForbiddenError
from common.services.logging import log_event

MANAGER_ROLES = ("SUPER_ADMIN", "ADMIN")


@dataclass(frozen=True)
class AuthContext:
    user_id: str
    role: str


class TokenVerifier:
    """Verify HS256 tokens carrying ``sub`` (user id) and ``role`` claims."""

    algorithm = "HS256"

    def __init__(self, secret: str):
        self._secret = secret

    def verify(self, token: str) -> AuthContext:
        try:
            claims = jwt.decode(token, self._secret, algorithms=[self.algorithm])
        except jwt.ExpiredSignatureError:
            raise AuthError("Token has expired") from None
        except jwt.InvalidTokenError:
            raise AuthError("Invalid token") from None
        user_id = claims.get("sub")
        role = claims.get("role")
        if not user_id or not role:
            raise AuthError("Invalid token")
        return AuthContext(user_id=str(user_id), role=str(role).upper())


def token_from_request(request: Request, cookie_name: str) -> Optional[str]:
    token = request.cookies.get(cookie_name)
    if token:
        return token
    header = request.headers.get("Authorization", "")
    if header.lower().startswith("bearer "):
        return header[7:].strip() or None
    return None


def authenticate_request(request: Request, verifier: TokenVerifier, cookie_name: str) -> Optional[AuthContext]:
    """Attach the caller's identity to ``g`` and the request headers.

    Returns ``None`` when no token was sent or the token does not verify;
    callers decide whether that is a redirect, a 401 or fine.
    """
    g.user_id = None
    g.user_role = None
    token = token_from_request(request, cookie_name)
    if not token:
        return None
    try:
        context = verifier.verify(token)
    except AuthError as exc:
        log_event("warning", "auth.rejected", path=request.path, reason=exc.message)
        return None
    g.user_id = context.user_id
    g.user_role = context.role
    # downstream handlers read identity from X-User-Id / X-User-Role
    request.environ["HTTP_X_USER_ID"] = context.user_id
    request.environ["HTTP_X_USER_ROLE"] = context.role
    return context


def current_user_id() -> str:
    user_id = getattr(g, "user_id", None)
    if not user_id:
        raise AuthError("Authentication required")
    return user_id


def require_role(*roles: str) -> None:
    current_user_id()
    if g.user_role not in roles:
        raise ForbiddenError("Insufficient permissions")
