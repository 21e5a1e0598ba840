"""Error types raised by the CMS services.

Each error carries the HTTP status the API layer answers with, so route
handlers can let them propagate to the application error handler.
"""


class CmsError(Exception):
    """Base class for expected, user-facing failures."""

    status_code = 500

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ValidationError(CmsError, ValueError):
    """Missing or malformed input."""

    status_code = 400


class AuthError(CmsError):
    """Missing, expired or otherwise unverifiable credentials."""

    status_code = 401


class ForbiddenError(CmsError):
    """Authenticated, but the role does not allow the action."""

    status_code = 403


class NotFoundError(CmsError):
    """A referenced record does not exist."""

    status_code = 404


class ConflictError(CmsError):
    """The write would violate a uniqueness rule."""

    status_code = 409
