"""Single-flight coordination of identical in-flight requests."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RequestDeduplicator:
    """Run at most one producer per key at a time.

    Callers arriving while a producer for the same key is running wait on it
    and receive its value or its exception. Once the producer settles the key
    is forgotten, so failures are never cached and the next call starts fresh.
    """

    def __init__(self) -> None:
        self._in_flight: dict[str, asyncio.Task[Any]] = {}

    async def dedupe(self, key: str, factory: Callable[[], Awaitable[T]]) -> T:
        """Join the in-flight producer for ``key`` or start one with ``factory``."""
        task = self._in_flight.get(key)
        if task is None:
            task = asyncio.ensure_future(factory())
            self._in_flight[key] = task
            # Registered before any waiter, so the key is gone when they resume
            task.add_done_callback(lambda done: self._forget(key, done))
        else:
            logger.debug("Joining in-flight request for %s", key)

        # Shielded so one cancelled caller does not cancel the shared work
        result: T = await asyncio.shield(task)
        return result

    def _forget(self, key: str, task: asyncio.Task[Any]) -> None:
        if self._in_flight.get(key) is task:
            del self._in_flight[key]

    def is_in_flight(self, key: str) -> bool:
        return key in self._in_flight

    @property
    def in_flight_count(self) -> int:
        return len(self._in_flight)
