"""Error types surfaced by the coaching API.

Each error carries the HTTP status it maps to; ``main.py`` registers a
handler that renders them as ``{"error": message}`` JSON bodies.
"""
from typing import Any, Dict, Optional


class CoachingAPIError(RuntimeError):
    """Base class for errors that map onto an HTTP response."""

    status_code = 500

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"error": self.message}
        if self.details:
            body["details"] = self.details
        return body


class ValidationError(CoachingAPIError):
    """A required field is missing or malformed. Raised before any write."""

    status_code = 400


class AuthError(CoachingAPIError):
    """No authenticated session."""

    status_code = 401


class ForbiddenError(AuthError):
    """Authenticated, but the caller does not own the target resource."""

    status_code = 403


class NotFoundError(CoachingAPIError):
    status_code = 404


class ConflictError(CoachingAPIError):
    """The resource is in a state that does not allow the operation."""

    status_code = 409


class BackendError(CoachingAPIError):
    """The persistence backend rejected an operation."""

    status_code = 500


class ExternalServiceError(CoachingAPIError):
    """A third-party API answered with a non-success response."""

    status_code = 502


def backend_error_message(exc: BaseException) -> str:
    """Best human-readable message for an exception raised by the Supabase client."""
    message = getattr(exc, "message", None)
    if isinstance(message, str) and message:
        return message
    return str(exc) or type(exc).__name__
