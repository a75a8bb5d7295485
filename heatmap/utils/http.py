"""
HTTP utilities for the heatmap pipeline.

Provides document fetching with retry logic, rate limiting awareness,
and proper error handling.
"""

from typing import Optional

import httpx
from loguru import logger
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from heatmap.config import settings

# Default headers for requests
DEFAULT_HEADERS = {
    "User-Agent": "ConcentrationHeatmap/1.0",
    "Accept": "application/json, text/plain, */*",
}


class HTTPError(Exception):
    """Custom HTTP error with status code."""

    def __init__(self, message: str, status_code: int = None, response: httpx.Response = None):
        super().__init__(message)
        self.status_code = status_code
        self.response = response


class RateLimitError(HTTPError):
    """Raised when rate limited by the document host."""
    pass


@retry(
    stop=stop_after_attempt(settings.pipeline.http_max_retries),
    wait=wait_exponential(multiplier=settings.pipeline.http_retry_delay, min=1, max=60),
    retry=retry_if_exception_type((httpx.TimeoutException, httpx.ConnectError)),
    reraise=True,
)
def fetch_with_retry(
    url: str,
    headers: Optional[dict] = None,
    params: Optional[dict] = None,
    timeout: Optional[int] = None,
) -> httpx.Response:
    """
    GET a URL with automatic retry on transient failures.

    Args:
        url: URL to fetch
        headers: Additional headers to include
        params: Query parameters
        timeout: Request timeout in seconds

    Returns:
        httpx.Response object

    Raises:
        HTTPError: For HTTP errors (4xx, 5xx)
        RateLimitError: When rate limited (429)
        httpx.TimeoutException: On timeout after retries
    """
    request_headers = {**DEFAULT_HEADERS, **(headers or {})}
    timeout = timeout or settings.pipeline.http_timeout

    logger.debug(f"Fetching GET {url}")

    with httpx.Client(timeout=timeout, follow_redirects=True) as client:
        response = client.get(url, headers=request_headers, params=params)

    if response.status_code == 429:
        retry_after = response.headers.get("Retry-After", "60")
        raise RateLimitError(
            f"Rate limited by {url}. Retry after {retry_after}s",
            status_code=429,
            response=response,
        )

    if response.status_code >= 400:
        raise HTTPError(
            f"HTTP {response.status_code} for {url}: {response.text[:200]}",
            status_code=response.status_code,
            response=response,
        )

    logger.debug(f"Fetched {url} ({response.status_code}, {len(response.content)} bytes)")
    return response
