"""Rate limiter for outgoing upstream requests.

Enforces a minimum interval between two requests to the same API, on top of
the batch pacing done by the aggregator. Instances are shared per API name so
every client talking to the same upstream honours one budget.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from typing import ClassVar

logger = logging.getLogger(__name__)


class ApiRateLimiter:
    """Minimum-interval gate for requests to one upstream API.

    Async-safe: concurrent callers queue on an asyncio.Lock and are released
    one interval apart.
    """

    # Class-level registry of rate limiters by API name
    _instances: ClassVar[dict[str, ApiRateLimiter]] = {}

    def __init__(
        self,
        api_name: str,
        min_interval_seconds: float = 0.0,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        """Initialize the rate limiter.

        Args:
            api_name: Name of the API (for logging).
            min_interval_seconds: Minimum time between two requests. 0 disables waiting.
            clock: Monotonic clock, replaceable in tests.
            sleep: Coroutine used to wait, replaceable in tests.
        """
        self.api_name = api_name
        self.min_interval_seconds = min_interval_seconds
        self._clock = clock
        self._sleep = sleep
        self._last_request_time: float | None = None
        self._lock = asyncio.Lock()

    @classmethod
    def get_instance(cls, api_name: str, min_interval_seconds: float = 0.0) -> ApiRateLimiter:
        """Get or create the shared rate limiter for an API.

        The interval of the first caller wins for the lifetime of the process.
        """
        if api_name not in cls._instances:
            cls._instances[api_name] = cls(api_name, min_interval_seconds)
            if min_interval_seconds > 0:
                logger.info(
                    f"Created rate limiter for {api_name} with {min_interval_seconds}s minimum interval"
                )
        return cls._instances[api_name]

    async def acquire(self) -> None:
        """Wait until a request may be sent."""
        if self.min_interval_seconds <= 0:
            return

        async with self._lock:
            if self._last_request_time is not None:
                wait_time = self.min_interval_seconds - (self._clock() - self._last_request_time)
                if wait_time > 0:
                    logger.debug(f"{self.api_name}: waiting {wait_time:.2f}s before next request")
                    await self._sleep(wait_time)
            self._last_request_time = self._clock()

    async def __aenter__(self) -> ApiRateLimiter:
        await self.acquire()
        return self

    async def __aexit__(
        self, _exc_type: type | None, _exc_val: Exception | None, _exc_tb: object
    ) -> None:
        """Nothing to release."""
