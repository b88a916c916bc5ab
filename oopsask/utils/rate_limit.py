from __future__ import annotations

import asyncio
from types import TracebackType

from aiolimiter import AsyncLimiter


class RateLimiter:
    """Bound concurrent external calls and optionally space out their start times.

    ``async with limiter:`` waits for a concurrency slot, then for the spacing
    window, so at most ``max_concurrency`` calls run at once and consecutive
    calls start at least ``min_interval`` seconds apart.
    """

    def __init__(self, max_concurrency: int = 5, *, min_interval: float = 0.0):
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1.")
        self._max_concurrency = max_concurrency
        self._semaphore = asyncio.Semaphore(max_concurrency)
        self._spacing = AsyncLimiter(1, min_interval) if min_interval > 0 else None

    @property
    def max_concurrency(self) -> int:
        return self._max_concurrency

    async def __aenter__(self) -> RateLimiter:
        await self._semaphore.acquire()
        if self._spacing is not None:
            try:
                await self._spacing.acquire()
            except BaseException:
                self._semaphore.release()
                raise
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self._semaphore.release()
