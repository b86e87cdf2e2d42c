"""Supabase client access and query execution helpers."""
import logging
from typing import Any, Optional

from supabase import Client, create_client

from coaching_api.config import settings
from coaching_api.errors import BackendError, backend_error_message

logger = logging.getLogger(__name__)

_client: Optional[Client] = None


def get_supabase_client() -> Client:
    """Get the process-wide Supabase client, creating it on first use.

    Raises:
        BackendError: If credentials are missing or the client cannot be created.
    """
    global _client
    if _client is not None:
        return _client

    supabase_url = settings.SUPABASE_URL
    supabase_key = settings.supabase_key

    if not supabase_url or not supabase_key:
        logger.error("Supabase credentials not configured (SUPABASE_URL / SUPABASE_SERVICE_ROLE_KEY)")
        raise BackendError("Database connection unavailable")

    try:
        _client = create_client(supabase_url, supabase_key)
    except Exception as e:
        logger.error(f"Failed to create Supabase client: {e}")
        raise BackendError(f"Failed to create Supabase client: {e}") from e
    return _client


def get_db() -> Client:
    """FastAPI dependency returning the Supabase client.

    Usage:
        @router.post("/things")
        def create_thing(client: Client = Depends(get_db)):
            ...
    """
    return get_supabase_client()


def execute(query: Any, description: str) -> Any:
    """Run a PostgREST query builder, converting client errors into BackendError."""
    try:
        return query.execute()
    except Exception as e:
        message = backend_error_message(e)
        logger.error(f"{description} failed: {message}")
        raise BackendError(message) from e
