"""Retry utilities for third-party HTTP calls with exponential backoff."""
import logging
from typing import Callable, TypeVar

import requests
from tenacity import (
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
    before_sleep_log,
)


logger = logging.getLogger(__name__)

T = TypeVar("T")

# Default retry configuration
DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_MIN_WAIT_SECONDS = 0.5
DEFAULT_MAX_WAIT_SECONDS = 4


def is_retryable_error(exception: BaseException) -> bool:
    """
    Determine if an exception is retryable.

    Retryable errors are transport failures only:
    - Connection errors (refused, reset, DNS)
    - Timeouts

    Anything that produced an HTTP response is not retried here; the caller
    decides what a non-200 status means.
    """
    if isinstance(exception, (requests.ConnectionError, requests.Timeout)):
        return True

    error_str = str(exception).lower()
    exception_type = type(exception).__name__.lower()

    if "timeout" in exception_type or "timed out" in error_str:
        return True
    if "temporary failure in name resolution" in error_str:
        return True
    if "name or service not known" in error_str:
        return True

    return False


def create_retry_decorator(
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    min_wait_seconds: float = DEFAULT_MIN_WAIT_SECONDS,
    max_wait_seconds: float = DEFAULT_MAX_WAIT_SECONDS,
) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """
    Create a retry decorator with exponential backoff.

    Args:
        max_attempts: Maximum number of attempts, including the first
        min_wait_seconds: Minimum wait time between retries
        max_wait_seconds: Maximum wait time between retries

    Returns:
        A retry decorator configured with the specified parameters
    """
    return retry(
        retry=retry_if_exception(is_retryable_error),
        stop=stop_after_attempt(max_attempts),
        wait=wait_exponential(
            multiplier=min_wait_seconds or 1,
            min=min_wait_seconds,
            max=max_wait_seconds,
        ),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )


# Pre-configured retry decorator for third-party HTTP calls
http_retry = create_retry_decorator()
