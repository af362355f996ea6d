"""Admission control for outbound requests."""

import asyncio
import types
from collections import deque
from contextlib import suppress
from typing import Self


class ConcurrencyLimiter:
    """Bound the number of simultaneously active operations.

    Permits are granted strictly in arrival order: a caller that had to wait
    is admitted before any caller that arrives later, and a released permit
    is handed straight to the longest-waiting caller.

    Usage:
        limiter = ConcurrencyLimiter(max_concurrent=4)
        async with limiter:
            await do_request()
    """

    def __init__(self, max_concurrent: int = 4) -> None:
        if max_concurrent <= 0:
            raise ValueError(
                f"max_concurrent must be positive, got: {max_concurrent}"
            )
        self._max_concurrent = max_concurrent
        self._active = 0
        self._waiters: deque[asyncio.Future[None]] = deque()

    async def acquire(self) -> None:
        """Wait for a permit and take it."""
        if self._active < self._max_concurrent and not self._waiters:
            self._active += 1
            return

        waiter: asyncio.Future[None] = asyncio.get_running_loop().create_future()
        self._waiters.append(waiter)
        try:
            await waiter
        except asyncio.CancelledError:
            if waiter.done() and not waiter.cancelled():
                # The permit was handed over before the cancellation landed
                self.release()
            else:
                with suppress(ValueError):
                    self._waiters.remove(waiter)
            raise

    def release(self) -> None:
        """Return a permit, admitting the oldest waiter if there is one."""
        if self._active <= 0:
            raise RuntimeError("release() called without a held permit")
        while self._waiters:
            waiter = self._waiters.popleft()
            if not waiter.done():
                # Permit moves to the waiter; active count is unchanged
                waiter.set_result(None)
                return
        self._active -= 1

    def get_stats(self) -> dict[str, int]:
        return {
            "active": self._active,
            "queued": len(self._waiters),
            "max_concurrent": self._max_concurrent,
        }

    async def __aenter__(self) -> Self:
        await self.acquire()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: types.TracebackType | None,
    ) -> None:
        self.release()
