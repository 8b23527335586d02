"""Batched execution of async upstream calls.

Runs a fixed number of calls concurrently, waits for the whole batch, then
pauses before the next one so the upstream API never sees more than
``batch_width`` requests in flight.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from typing import TYPE_CHECKING, TypeVar

if TYPE_CHECKING:
    from lightrail_arrivals.domain.contracts import BatchThrottleProtocol

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


class FixedIntervalThrottle:
    """Waits a fixed interval between batches."""

    def __init__(
        self,
        delay_seconds: float,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        """Initialize the throttle.

        Args:
            delay_seconds: Pause between two consecutive batches.
            sleep: Coroutine used to wait, replaceable in tests.
        """
        self.delay_seconds = delay_seconds
        self._sleep = sleep

    async def pause(self) -> None:
        """Suspend for the configured interval."""
        if self.delay_seconds > 0:
            logger.debug(f"Pausing {self.delay_seconds:.3f}s before next batch")
            await self._sleep(self.delay_seconds)


def _chunks(items: Sequence[T], size: int) -> list[Sequence[T]]:
    return [items[i : i + size] for i in range(0, len(items), size)]


async def run_batched(
    items: Sequence[T],
    batch_width: int,
    fn: Callable[[T], Awaitable[R]],
    throttle: BatchThrottleProtocol | None = None,
) -> list[R | None]:
    """Apply ``fn`` to every item, ``batch_width`` items at a time.

    A failing item yields None in its slot and never fails the batch. The
    throttle is awaited between batches (not after the last one), so N items
    incur ``ceil(N / batch_width) - 1`` pauses.

    Args:
        items: Items to process.
        batch_width: Maximum number of concurrent calls.
        fn: Coroutine function applied to each item.
        throttle: Pacing between batches. None means no pause.

    Returns:
        Results in the same order as ``items``.
    """
    if batch_width < 1:
        raise ValueError("batch_width must be at least 1")

    results: list[R | None] = []
    batches = _chunks(items, batch_width)

    for index, batch in enumerate(batches):
        outcomes = await asyncio.gather(*(fn(item) for item in batch), return_exceptions=True)
        for item, outcome in zip(batch, outcomes, strict=True):
            if isinstance(outcome, Exception):
                logger.warning(f"Batched call failed for {item!r}: {outcome}")
                results.append(None)
            elif isinstance(outcome, BaseException):
                raise outcome
            else:
                results.append(outcome)

        if throttle is not None and index < len(batches) - 1:
            await throttle.pause()

    return results
