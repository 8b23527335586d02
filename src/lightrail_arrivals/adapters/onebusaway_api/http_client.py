"""HTTP client for the OneBusAway REST API.

Owns the retry policy: transient failures (network errors, timeouts, 429 and
5xx) are retried with exponential backoff, everything else surfaces at once.
"""

from __future__ import annotations

import asyncio
import logging
import random
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any

import aiohttp

from lightrail_arrivals.adapters.api_request_logger import log_api_request
from lightrail_arrivals.adapters.onebusaway_api.constants import OK_CODE
from lightrail_arrivals.domain.errors import TransientUpstreamError, UpstreamProtocolError

if TYPE_CHECKING:
    from aiohttp import ClientResponse, ClientSession

    from lightrail_arrivals.adapters.api_rate_limiter import ApiRateLimiter

logger = logging.getLogger(__name__)


def _is_transient_status(status: int) -> bool:
    return status == 429 or 500 <= status <= 599


def compute_backoff(attempt: int, base: float, maximum: float) -> float:
    """Exponential backoff with +/-30% jitter."""
    delay = min(maximum, base * (2**attempt))
    return delay * (0.7 + random.random() * 0.6)


class OneBusAwayHttpClient:
    """Issues GET requests against ``/api/where/*.json`` and unwraps the envelope."""

    def __init__(
        self,
        session: ClientSession,
        base_url: str,
        api_key: str,
        max_retries: int = 3,
        backoff_base_seconds: float = 0.5,
        backoff_max_seconds: float = 8.0,
        rate_limiter: ApiRateLimiter | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        """Initialize the client.

        Args:
            session: Shared aiohttp session.
            base_url: API root, e.g. https://api.pugetsound.onebusaway.org.
            api_key: Key sent as the ``key`` query parameter.
            max_retries: Retries after the first attempt for transient failures.
            backoff_base_seconds: Delay before the first retry (before jitter).
            backoff_max_seconds: Cap for any single retry delay.
            rate_limiter: Optional minimum-interval gate applied to every attempt.
            sleep: Coroutine used for backoff waits, replaceable in tests.
        """
        self._session = session
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key
        self.max_retries = max(0, max_retries)
        self.backoff_base_seconds = backoff_base_seconds
        self.backoff_max_seconds = backoff_max_seconds
        self._rate_limiter = rate_limiter
        self._sleep = sleep

    def _url(self, path: str) -> str:
        return f"{self._base_url}/api/where/{path}.json"

    async def get_data(self, path: str, params: dict[str, str | int] | None = None) -> Any:
        """Fetch ``path`` and return the ``data`` member of the response envelope.

        Args:
            path: Endpoint path without prefix or suffix, e.g. ``stops-for-route/40_100479``.
            params: Extra query parameters.

        Raises:
            TransientUpstreamError: Retries exhausted.
            UpstreamProtocolError: Non-retryable status or malformed response.
        """
        url = self._url(path)
        query: dict[str, str | int] = {**(params or {}), "key": self._api_key}

        attempt = 0
        while True:
            try:
                return await self._get_once(url, query, attempt)
            except TransientUpstreamError as e:
                if attempt >= self.max_retries:
                    logger.error(
                        f"OneBusAway request to {path} failed after {attempt + 1} attempt(s): {e}"
                    )
                    raise
                delay = compute_backoff(attempt, self.backoff_base_seconds, self.backoff_max_seconds)
                logger.warning(
                    f"OneBusAway request to {path} failed ({e}), "
                    f"retry {attempt + 1}/{self.max_retries} in {delay:.2f}s"
                )
                await self._sleep(delay)
                attempt += 1

    async def _get_once(self, url: str, query: dict[str, str | int], attempt: int) -> Any:
        if self._rate_limiter is not None:
            await self._rate_limiter.acquire()

        log_api_request("GET", url, params=query, attempt=attempt)
        try:
            async with self._session.get(url, params=query) as response:
                payload = await self._read_payload(response)
        except (aiohttp.ClientError, TimeoutError) as e:
            raise TransientUpstreamError(f"Request failed: {e.__class__.__name__}: {e}") from e

        return self._unwrap(payload)

    async def _read_payload(self, response: ClientResponse) -> Any:
        status = response.status
        if _is_transient_status(status):
            raise TransientUpstreamError(f"OneBusAway returned status {status}", status=status)
        if status >= 400:
            body = await response.text()
            raise UpstreamProtocolError(
                f"OneBusAway returned status {status}: {body[:200]}", status=status
            )
        try:
            return await response.json(content_type=None)
        except ValueError as e:
            raise UpstreamProtocolError("OneBusAway returned invalid JSON", status=status) from e

    @staticmethod
    def _unwrap(payload: Any) -> Any:
        """Check the envelope ``code`` and return its ``data`` member."""
        if not isinstance(payload, dict):
            raise UpstreamProtocolError("OneBusAway response is not a JSON object")

        code = payload.get("code", OK_CODE)
        if isinstance(code, int) and code != OK_CODE:
            text = payload.get("text", "")
            if _is_transient_status(code):
                raise TransientUpstreamError(f"OneBusAway reported code {code}: {text}", status=code)
            raise UpstreamProtocolError(f"OneBusAway reported code {code}: {text}", status=code)

        data = payload.get("data")
        if data is None:
            raise UpstreamProtocolError("OneBusAway response has no data")
        return data
