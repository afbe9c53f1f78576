"""
HTTP transport with retry and exponential backoff.

Every deck source and the card catalog go through `HttpTransport`. Failures
are never raised to callers: a non-2xx response or a network error that
survives the retries is logged and reported as `None`, which callers treat
exactly like "not found".
"""

import asyncio
import logging
import random
from dataclasses import dataclass
from types import TracebackType
from typing import Any

import httpx

from proxyprinter.config import settings

logger = logging.getLogger(__name__)

RETRYABLE_STATUS_CODES = frozenset({408, 429})


@dataclass
class RetryConfig:
    """Configuration for retry behavior."""

    max_retries: int = 3  # attempts after the first one
    base_delay: float = 2.0  # seconds
    max_delay: float = 30.0  # seconds
    exponential_base: float = 2.0
    jitter: bool = False

    def get_delay(self, attempt: int) -> float:
        """Delay before retry number `attempt` (0-based)."""
        delay = min(self.base_delay * (self.exponential_base**attempt), self.max_delay)

        if self.jitter:
            delay += random.uniform(0, delay * 0.5)

        return delay

    @classmethod
    def from_settings(cls) -> "RetryConfig":
        return cls(max_retries=settings.max_retries, base_delay=settings.retry_base_delay)


def is_retryable_status(status_code: int) -> bool:
    """5xx, request timeout and rate limiting are transient."""
    return status_code >= 500 or status_code in RETRYABLE_STATUS_CODES


class HttpTransport:
    """
    GET-only HTTP client shared by all deck sources and the catalog.

    Use as an async context manager, or call `aclose()` when done.
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        retry: RetryConfig | None = None,
    ) -> None:
        self._client = client or httpx.AsyncClient(
            headers={"User-Agent": settings.user_agent},
            follow_redirects=True,
            timeout=settings.request_timeout,
        )
        self.retry = retry or RetryConfig.from_settings()

    async def __aenter__(self) -> "HttpTransport":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def get(
        self,
        url: str,
        params: dict[str, str] | None = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response | None:
        """
        GET `url`, retrying transient failures.

        Returns:
            The successful response, or None if the request ultimately failed
        """
        attempts = self.retry.max_retries + 1

        for attempt in range(attempts):
            is_last = attempt == attempts - 1
            try:
                response = await self._client.get(url, params=params, headers=headers)
            except httpx.TransportError as e:
                if is_last:
                    logger.error("GET %s failed after %d attempts: %s", url, attempts, e)
                    return None
                logger.warning("GET %s network error (%s), retrying", url, e)
                await asyncio.sleep(self.retry.get_delay(attempt))
                continue
            except httpx.RequestError as e:
                # Redirect loops and undecodable bodies do not improve on retry
                logger.error("GET %s failed: %s", url, e)
                return None

            if response.is_success:
                return response

            if is_retryable_status(response.status_code) and not is_last:
                logger.warning("GET %s returned %d, retrying", url, response.status_code)
                await asyncio.sleep(self.retry.get_delay(attempt))
                continue

            logger.warning(
                "GET %s failed: %d %s", url, response.status_code, response.reason_phrase
            )
            return None

        return None

    async def get_text(self, url: str, params: dict[str, str] | None = None) -> str | None:
        response = await self.get(url, params=params)
        return response.text if response is not None else None

    async def get_bytes(self, url: str) -> bytes | None:
        response = await self.get(url)
        return response.content if response is not None else None

    async def get_json(self, url: str, params: dict[str, str] | None = None) -> Any | None:
        """GET and decode JSON; an undecodable body counts as a failure."""
        response = await self.get(url, params=params, headers={"Accept": "application/json"})
        if response is None:
            return None
        try:
            return response.json()
        except ValueError as e:
            logger.error("GET %s returned invalid JSON: %s", url, e)
            return None
