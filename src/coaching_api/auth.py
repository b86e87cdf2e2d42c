"""
Authentication module for Supabase session tokens and the session sentinel cookie.
Provides FastAPI dependencies for securing endpoints.
"""
import base64
import json
import logging
import re
from typing import Any, Dict, Optional

import jwt
from fastapi import Depends, Request

from coaching_api.config import settings
from coaching_api.errors import AuthError, ForbiddenError

logger = logging.getLogger(__name__)

LEGACY_ACCESS_TOKEN_COOKIE = "sb-access-token"
# sb-<project-ref>-auth-token, optionally split into .0, .1, ... chunks
_AUTH_TOKEN_COOKIE_RE = re.compile(r"^(sb-[\w-]+-auth-token)(?:\.(\d+))?$")


def is_auth_cookie(name: str) -> bool:
    """True for cookies written by the Supabase auth helpers."""
    return name.startswith("sb-") or name.startswith("sb:")


def _token_from_auth_cookie_value(value: str) -> Optional[str]:
    """Extract the access token from an ``sb-<ref>-auth-token`` cookie value."""
    if value.startswith("base64-"):
        encoded = value[len("base64-"):]
        try:
            value = base64.urlsafe_b64decode(encoded + "=" * (-len(encoded) % 4)).decode("utf-8")
        except ValueError:
            return None
    try:
        parsed = json.loads(value)
    except ValueError:
        # Older helpers stored the bare JWT
        return value or None
    if isinstance(parsed, list) and parsed:
        return parsed[0] if isinstance(parsed[0], str) else None
    if isinstance(parsed, dict):
        return parsed.get("access_token")
    return None


def extract_access_token(request: Request) -> Optional[str]:
    """
    Find the Supabase access token for a request.

    Checked in order:
    - ``Authorization: Bearer <jwt>`` header
    - ``sb-access-token`` cookie (auth-helpers)
    - ``sb-<ref>-auth-token`` cookie, reassembling chunked cookies
    """
    authorization = request.headers.get("authorization")
    if authorization and authorization.startswith("Bearer "):
        return authorization.split(" ", 1)[1].strip() or None

    cookies = request.cookies
    if cookies.get(LEGACY_ACCESS_TOKEN_COOKIE):
        return cookies[LEGACY_ACCESS_TOKEN_COOKIE]

    chunks: Dict[str, Dict[int, str]] = {}
    for name, value in cookies.items():
        match = _AUTH_TOKEN_COOKIE_RE.match(name)
        if not match:
            continue
        index = int(match.group(2)) if match.group(2) is not None else 0
        chunks.setdefault(match.group(1), {})[index] = value

    for parts in chunks.values():
        joined = "".join(parts[i] for i in sorted(parts))
        token = _token_from_auth_cookie_value(joined)
        if token:
            return token
    return None


def decode_access_token(token: str) -> Optional[Dict[str, Any]]:
    """Validate a Supabase JWT and return its claims, or None if invalid."""
    secret = settings.SUPABASE_JWT_SECRET
    if not secret:
        logger.warning("SUPABASE_JWT_SECRET not configured; sessions cannot be verified")
        return None
    try:
        return jwt.decode(
            token,
            secret,
            algorithms=["HS256"],
            audience=settings.SUPABASE_JWT_AUDIENCE,
        )
    except jwt.ExpiredSignatureError:
        logger.debug("Session token expired")
        return None
    except jwt.InvalidTokenError as e:
        logger.debug(f"Invalid session token: {e}")
        return None


def get_session_claims(request: Request) -> Optional[Dict[str, Any]]:
    """Claims of the authenticated Supabase session, or None."""
    token = extract_access_token(request)
    if not token:
        return None
    return decode_access_token(token)


async def require_session(request: Request) -> None:
    """
    Reject requests without both the session sentinel cookie and a valid
    Supabase session token.

    The sentinel is written by ``SessionCookieMiddleware`` whenever a valid
    backend session exists. Its value is constant, so it is never trusted
    on its own.
    """
    if not request.cookies.get(settings.SESSION_COOKIE_NAME):
        raise AuthError("Not authenticated")
    if not get_session_claims(request):
        logger.debug("Session sentinel present without a valid session token")
        raise AuthError("Not authenticated")


async def get_current_coach_id(
    request: Request,
    _session: None = Depends(require_session),
) -> str:
    """
    Coach identity derived from the authenticated session.

    Coaches are keyed by their auth user id, so the JWT ``sub`` is the coach id.

    Usage:
        @router.post("/client-goals")
        def create_goal(coach_id: str = Depends(get_current_coach_id)):
            ...
    """
    claims = get_session_claims(request)
    user_id = claims.get("sub") if claims else None
    if not user_id:
        raise AuthError("Not authenticated")
    return user_id


def resolve_coach_id(supplied_coach_id: Optional[Any], session_coach_id: str) -> str:
    """
    Reconcile a client-supplied coach_id with the session's coach.

    The session's coach always wins; a conflicting supplied id is rejected.
    """
    if supplied_coach_id and str(supplied_coach_id) != session_coach_id:
        raise ForbiddenError("coach_id does not match the authenticated coach")
    return session_coach_id
