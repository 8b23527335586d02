"""Protocol for pacing consecutive batches of upstream calls."""

from typing import Protocol


class BatchThrottleProtocol(Protocol):
    """Decides how long to wait between two batches."""

    async def pause(self) -> None:
        """Suspend until the next batch may start."""
        ...
