"""
HTTP utilities for the entity discovery pipeline.

Provides the retry policy and error types shared by the HTTP connectors.
"""

import httpx
from tenacity import (
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from entity_discovery import EntityDiscoveryError


DEFAULT_HEADERS = {
    "User-Agent": "entity-discovery/1.0",
    "Accept": "application/json",
    "Accept-Encoding": "gzip",
}

# Status codes worth another attempt
RETRYABLE_STATUS_CODES = {429, 502, 503, 504}


class HTTPError(EntityDiscoveryError):
    """Custom HTTP error with status code."""

    def __init__(self, message: str, status_code: int = None, response: httpx.Response = None):
        super().__init__(message)
        self.status_code = status_code
        self.response = response


class RateLimitError(HTTPError):
    """Raised when rate limited by the service."""
    pass


class RetryableHTTPError(HTTPError):
    """Raised for gateway/availability errors that may succeed on retry."""
    pass


def raise_for_status(response: httpx.Response) -> None:
    """
    Map an error response onto our HTTP error types.

    Raises:
        RateLimitError: When rate limited (429)
        RetryableHTTPError: For 502/503/504
        HTTPError: For any other 4xx/5xx
    """
    if response.status_code < 400:
        return

    url = str(response.request.url) if response.request else ""

    if response.status_code == 429:
        retry_after = response.headers.get("Retry-After", "60")
        raise RateLimitError(
            f"Rate limited by {url}. Retry after {retry_after}s",
            status_code=429,
            response=response,
        )

    error_cls = RetryableHTTPError if response.status_code in RETRYABLE_STATUS_CODES else HTTPError
    raise error_cls(
        f"HTTP {response.status_code} for {url}: {response.text[:200]}",
        status_code=response.status_code,
        response=response,
    )


def build_retrying(max_retries: int, retry_delay: float) -> Retrying:
    """
    Build the retry policy for transient failures.

    Args:
        max_retries: Retries after the first attempt (0 disables retrying)
        retry_delay: Multiplier for the exponential backoff, in seconds

    Returns:
        tenacity.Retrying that re-raises the last error once exhausted
    """
    return Retrying(
        stop=stop_after_attempt(max(max_retries, 0) + 1),
        wait=wait_exponential(multiplier=retry_delay, min=retry_delay, max=60),
        retry=retry_if_exception_type(
            (httpx.TimeoutException, httpx.ConnectError, RateLimitError, RetryableHTTPError)
        ),
        reraise=True,
    )
