"""Request-level services for the CMS web app."""

from .auth import AuthContext, TokenVerifier, authenticate_request, current_user_id, require_role

__all__ = [
    "AuthContext",
    "TokenVerifier",
    "authenticate_request",
    "current_user_id",
    "require_role",
]
