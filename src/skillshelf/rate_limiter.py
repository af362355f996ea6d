"""Sliding-window rate limiting per logical request stream."""

import logging
from collections import deque

from skillshelf.cache import Clock, monotonic_ms
from skillshelf.duration import parse_duration
from skillshelf.types import Duration

logger = logging.getLogger(__name__)


class RateLimiter:
    """Admit at most ``max_requests`` per key within any trailing ``window``.

    Each key keeps the timestamps of its admitted requests. Timestamps older
    than the window are pruned on every check.
    """

    def __init__(
        self,
        max_requests: int = 10,
        window: Duration = "10s",
        *,
        clock: Clock = monotonic_ms,
    ) -> None:
        if max_requests <= 0:
            raise ValueError(f"max_requests must be positive, got: {max_requests}")
        self._max_requests = max_requests
        self._window = parse_duration(window)
        if self._window <= 0:
            raise ValueError("window must be positive")
        self._clock = clock
        self._requests: dict[str, deque[float]] = {}

    def _prune(self, key: str, now: float) -> deque[float]:
        timestamps = self._requests.setdefault(key, deque())
        while timestamps and now - timestamps[0] >= self._window:
            timestamps.popleft()
        return timestamps

    def can_request(self, key: str) -> bool:
        """Check whether one more request for ``key`` fits in the window."""
        allowed = len(self._prune(key, self._clock())) < self._max_requests
        if not allowed:
            logger.debug("Rate limit reached for %s", key)
        return allowed

    def record_request(self, key: str) -> None:
        """Record that a request for ``key`` was admitted now."""
        now = self._clock()
        self._prune(key, now).append(now)

    def reset(self, key: str | None = None) -> None:
        """Forget recorded requests for one key, or for all keys."""
        if key is None:
            self._requests.clear()
        else:
            self._requests.pop(key, None)

    def get_stats(self) -> dict[str, int]:
        """Requests currently counted against each key's window."""
        now = self._clock()
        return {key: len(self._prune(key, now)) for key in list(self._requests)}
