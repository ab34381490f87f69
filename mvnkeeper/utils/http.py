"""
HTTP access to Maven repositories.

:class:`HTTPClient` wraps an HTTP/2 :class:`httpx.AsyncClient` and is the
only way repository metadata is fetched. Responses are handled by status:

- ``2xx`` and ``3xx`` after redirects are returned as is;
- ``404`` raises :class:`~mvnkeeper.exceptions.RepositoryError` at once,
  since an artifact missing from one repository is normal;
- ``429`` waits for ``Retry-After`` and asks again, without using up a
  retry attempt;
- any other ``4xx`` raises :class:`~mvnkeeper.exceptions.NetworkError`;
- ``5xx`` answers, timeouts and connection failures are retried with
  exponential backoff plus jitter.
"""

from __future__ import annotations

import time
import httpx
import random
import asyncio
from typing import Any, Optional

from mvnkeeper.utils.logger import get_logger
from mvnkeeper.__version__ import __version__
from mvnkeeper.exceptions import NetworkError, RepositoryError
from mvnkeeper.constants import (
    DEFAULT_TIMEOUT,
    METADATA_ACCEPT,
    MAX_RETRY_AFTER,
    DEFAULT_MAX_RETRIES,
    USER_AGENT_TEMPLATE,
    MAX_RATE_LIMIT_RETRIES,
    DEFAULT_MAX_CONCURRENCY,
)

logger = get_logger("http")

_TRANSIENT_ERRORS = (httpx.TimeoutException, httpx.NetworkError)


def _retry_after_seconds(response: httpx.Response) -> int:
    """Seconds to wait before repeating a rate-limited request.

    Only the delta-seconds form of ``Retry-After`` is understood; a missing
    or date-valued header waits one second.
    """
    value = response.headers.get("Retry-After", "").strip()
    if value.isdigit():
        return min(int(value), MAX_RETRY_AFTER)
    return 1


def _backoff_delay(failures: int) -> float:
    return (2 ** (failures - 1)) + random.uniform(0.0, 0.3)


class HTTPClient:
    """Asynchronous repository client with retries, pacing and a concurrency cap.

    Args:
        timeout: Request timeout in seconds.
        max_retries: Retries after the first attempt for transient failures.
        rate_limit_delay: Minimum spacing (seconds) between request starts.
        verify_ssl: Whether to verify TLS certificates.
        user_agent: Custom User-Agent header value.
        max_concurrency: Maximum number of requests in flight.

    Example:
        >>> async with HTTPClient() as client:
        ...     text = await client.get_text(
        ...         "https://repo.maven.apache.org/maven2/junit/junit/maven-metadata.xml"
        ...     )
    """

    def __init__(
        self,
        *,
        timeout: int = DEFAULT_TIMEOUT,
        max_retries: int = DEFAULT_MAX_RETRIES,
        rate_limit_delay: float = 0.0,
        verify_ssl: bool = True,
        user_agent: Optional[str] = None,
        max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
    ) -> None:
        self.timeout = timeout
        self.max_retries = max_retries
        self.rate_limit_delay = rate_limit_delay
        self.verify_ssl = verify_ssl
        self.user_agent = user_agent or USER_AGENT_TEMPLATE.format(version=__version__)
        self.max_concurrency = max_concurrency

        self._client: Optional[httpx.AsyncClient] = None
        self._next_request_at: float = 0.0
        self._pacing_lock = asyncio.Lock()
        self._semaphore = asyncio.Semaphore(max_concurrency)
        self._max_429_retries = MAX_RATE_LIMIT_RETRIES

    async def __aenter__(self) -> "HTTPClient":
        await self._ensure_client()
        return self

    async def __aexit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        await self.close()

    async def _ensure_client(self) -> None:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                http2=True,
                verify=self.verify_ssl,
                follow_redirects=True,
                headers={"User-Agent": self.user_agent, "Accept": METADATA_ACCEPT},
            )

    async def close(self) -> None:
        """Close the underlying connection pool."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _pace(self) -> None:
        """Reserve the next request slot and sleep until it opens."""
        if self.rate_limit_delay <= 0:
            return

        async with self._pacing_lock:
            now = time.monotonic()
            start_at = max(now, self._next_request_at)
            self._next_request_at = start_at + self.rate_limit_delay

        if start_at > now:
            await asyncio.sleep(start_at - now)

    async def _send(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        await self._pace()
        assert self._client is not None
        async with self._semaphore:
            return await self._client.request(method, url, **kwargs)

    async def _request_with_retry(
        self,
        method: str,
        url: str,
        **kwargs: Any,
    ) -> httpx.Response:
        """Send a request, retrying transient failures.

        Raises:
            RepositoryError: The repository answered ``404``.
            NetworkError: Any other client error, too many ``429`` answers,
                or every attempt failed.
        """
        await self._ensure_client()

        clean_url = url.strip().strip("\"'")
        attempts = self.max_retries + 1
        failures = 0
        rate_limited = 0
        last_exc: Optional[Exception] = None

        while failures < attempts:
            try:
                response = await self._send(method, clean_url, **kwargs)
            except _TRANSIENT_ERRORS as exc:
                last_exc = exc
                logger.warning(
                    "%s for %s (%d/%d)",
                    type(exc).__name__,
                    clean_url,
                    failures + 1,
                    attempts,
                )
            else:
                status = response.status_code

                if status == 429:
                    rate_limited += 1
                    if rate_limited > self._max_429_retries:
                        raise NetworkError(
                            f"Rate limit exceeded after {self._max_429_retries} retries",
                            url=clean_url,
                            status_code=429,
                        )
                    wait = _retry_after_seconds(response)
                    logger.warning(
                        "Rate limited by %s, retrying after %ds (%d/%d)",
                        response.url.host,
                        wait,
                        rate_limited,
                        self._max_429_retries,
                    )
                    await asyncio.sleep(wait)
                    continue

                if status < 400:
                    logger.debug("%s %s -> %d", method, clean_url, status)
                    return response

                if status == 404:
                    raise RepositoryError(
                        f"Resource not found: {clean_url}",
                        url=clean_url,
                        status_code=404,
                    )

                if status < 500:
                    raise NetworkError(
                        f"HTTP {status} error for {clean_url}",
                        url=clean_url,
                        status_code=status,
                        response_body=response.text,
                    )

                last_exc = httpx.HTTPStatusError(
                    f"HTTP {status}", request=response.request, response=response
                )
                logger.warning(
                    "HTTP %d from %s (%d/%d)", status, clean_url, failures + 1, attempts
                )

            failures += 1
            if failures < attempts:
                delay = _backoff_delay(failures)
                logger.debug("Retrying in %.2fs", delay)
                await asyncio.sleep(delay)

        raise NetworkError(
            f"Request failed after {attempts} attempts: {clean_url}",
            url=clean_url,
        ) from last_exc

    async def get(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self._request_with_retry("GET", url, **kwargs)

    async def get_text(self, url: str, **kwargs: Any) -> str:
        """Fetch ``url`` and return the decoded body."""
        response = await self.get(url, **kwargs)
        return response.text
