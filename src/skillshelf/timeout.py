"""Deadlines for awaitables that are left running when they miss them."""

import asyncio
import logging
from collections.abc import Awaitable
from typing import Any, TypeVar

from skillshelf.errors import RequestTimeoutError

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Operations that outlived their deadline; kept referenced until they finish
_abandoned: set[asyncio.Future[Any]] = set()


def _discard_late_outcome(future: asyncio.Future[Any]) -> None:
    _abandoned.discard(future)
    if future.cancelled():
        return
    exc = future.exception()
    if exc is not None:
        logger.debug("Timed-out operation failed later: %r", exc)


async def with_timeout(operation: Awaitable[T], ms: float, message: str) -> T:
    """Return the outcome of ``operation`` if it settles within ``ms``.

    On expiry raises :class:`RequestTimeoutError` with ``message``. The
    operation is not cancelled: it keeps running and whatever it eventually
    produces is thrown away.
    """
    future = asyncio.ensure_future(operation)
    try:
        done, _ = await asyncio.wait({future}, timeout=ms / 1000)
    finally:
        if not future.done():
            _abandoned.add(future)
            future.add_done_callback(_discard_late_outcome)

    if future in done:
        return future.result()
    raise RequestTimeoutError(message)
