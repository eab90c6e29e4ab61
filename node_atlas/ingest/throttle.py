"""Request throttling for the remote node source."""
import asyncio
import time
from typing import Awaitable, Callable, Optional


class RateLimiter:
    """Enforces a minimum interval between consecutive requests.

    Sleep-based: ``wait()`` returns no earlier than ``min_interval`` seconds
    after the previous ``wait()`` returned.
    """

    def __init__(
        self,
        min_interval: float = 1.0,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        if min_interval < 0:
            raise ValueError("min_interval must be >= 0")
        self.min_interval = min_interval
        self._clock = clock
        self._sleep = sleep
        self._last: Optional[float] = None
        self._lock = asyncio.Lock()

    async def wait(self) -> None:
        async with self._lock:
            if self._last is not None:
                remaining = self.min_interval - (self._clock() - self._last)
                if remaining > 0:
                    await self._sleep(remaining)
            self._last = self._clock()
