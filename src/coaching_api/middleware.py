"""Session cookie hardening middleware."""
import logging
from typing import Iterable, Tuple

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.types import ASGIApp

from coaching_api.auth import get_session_claims, is_auth_cookie
from coaching_api.config import settings

logger = logging.getLogger(__name__)

# Paths that never touch session cookies
DEFAULT_EXEMPT_PATHS: Tuple[str, ...] = ("/health", "/version", "/docs", "/redoc", "/openapi.json")


class SessionCookieMiddleware(BaseHTTPMiddleware):
    """
    Keep the session sentinel cookie in sync with the Supabase session.

    When the request carries a valid session:
    - set the sentinel cookie (HttpOnly, SameSite=strict, Secure in production)
    - re-emit every ``sb-*`` auth cookie with the same hardened attributes

    Otherwise the sentinel and any ``sb-*`` cookies are cleared.
    """

    def __init__(self, app: ASGIApp, exempt_paths: Iterable[str] = DEFAULT_EXEMPT_PATHS):
        super().__init__(app)
        self.exempt_paths = tuple(exempt_paths)

    def _is_exempt(self, path: str) -> bool:
        return any(path == p or path.startswith(p + "/") for p in self.exempt_paths)

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if self._is_exempt(request.url.path):
            return await call_next(request)

        response = await call_next(request)

        auth_cookies = {name: value for name, value in request.cookies.items() if is_auth_cookie(name)}
        if get_session_claims(request):
            _set_hardened_cookie(response, settings.SESSION_COOKIE_NAME, "1", settings.SESSION_MAX_AGE_SECONDS)
            for name, value in auth_cookies.items():
                _set_hardened_cookie(response, name, value, settings.SESSION_MAX_AGE_SECONDS)
        else:
            _set_hardened_cookie(response, settings.SESSION_COOKIE_NAME, "", 0)
            for name in auth_cookies:
                _set_hardened_cookie(response, name, "", 0)
            if auth_cookies:
                logger.debug(f"Cleared {len(auth_cookies)} stale auth cookie(s)")

        return response


def _set_hardened_cookie(response: Response, name: str, value: str, max_age: int) -> None:
    response.set_cookie(
        key=name,
        value=value,
        max_age=max_age,
        path="/",
        secure=settings.is_production,
        httponly=True,
        samesite="strict",
    )
