"""
Third-party exercise lookup (API Ninjas).

Proxies a muscle/name search to https://api.api-ninjas.com/v1/exercises
using the ``X-Api-Key`` header. Transport failures are retried; any
non-200 response is surfaced as an ExternalServiceError (HTTP 502).
"""
import logging
from typing import Any, Dict, List, Optional

import requests

from coaching_api.config import settings
from coaching_api.errors import ExternalServiceError
from coaching_api.retry import http_retry

logger = logging.getLogger(__name__)

API_NINJAS_EXERCISES_URL = "https://api.api-ninjas.com/v1/exercises"
REQUEST_TIMEOUT_SECONDS = 15


@http_retry
def _get(url: str, params: Dict[str, str], headers: Dict[str, str]) -> requests.Response:
    return requests.get(url, params=params, headers=headers, timeout=REQUEST_TIMEOUT_SECONDS)


class ExerciseLookupService:
    """Search exercises by muscle and/or name."""

    @staticmethod
    def search(muscle: Optional[str] = None, name: Optional[str] = None) -> List[Dict[str, Any]]:
        """
        Query the exercise API.

        Returns:
            List of exercise dicts (empty if the API returns a non-list body).

        Raises:
            ExternalServiceError: Non-200 response or unreachable API.
        """
        params: Dict[str, str] = {}
        if muscle:
            params["muscle"] = str(muscle)
        if name:
            params["name"] = str(name)

        api_key = settings.API_NINJAS_KEY
        if not api_key:
            logger.warning("[external-exercises] API_NINJAS_KEY is missing")

        try:
            response = _get(API_NINJAS_EXERCISES_URL, params, {"X-Api-Key": api_key or ""})
        except requests.RequestException as e:
            logger.error(f"[external-exercises] request failed: {e}")
            raise ExternalServiceError("External API error", details={"reason": str(e)}) from e

        if response.status_code != 200:
            logger.warning(f"[external-exercises] API returned {response.status_code}")
            raise ExternalServiceError("External API error", details={"body": response.text})

        try:
            data = response.json()
        except ValueError as e:
            raise ExternalServiceError("External API error", details={"reason": "invalid JSON"}) from e
        return data if isinstance(data, list) else []
