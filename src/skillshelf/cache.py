"""In-memory TTL cache with deterministic keys and pattern invalidation."""

import hashlib
import json
import logging
import time
from collections import OrderedDict
from collections.abc import Callable, Mapping
from typing import Any

from skillshelf.duration import parse_duration
from skillshelf.types import CacheEntry, Duration

logger = logging.getLogger(__name__)

Clock = Callable[[], float]
Params = Mapping[str, str | int | float | bool | None]


def monotonic_ms() -> float:
    """Default clock: monotonic time in milliseconds."""
    return time.monotonic() * 1000


class TTLCache:
    """Key/value store whose entries expire a fixed TTL after being set.

    Expired entries are evicted lazily, on the lookup that finds them stale.
    With ``max_items`` set, the least recently used entry is dropped once the
    cache grows past that size.
    """

    def __init__(
        self,
        ttl: Duration = "5m",
        *,
        max_items: int | None = None,
        clock: Clock = monotonic_ms,
    ) -> None:
        self._ttl = parse_duration(ttl)
        if self._ttl <= 0:
            raise ValueError("ttl must be positive")
        if max_items is not None and max_items <= 0:
            raise ValueError("max_items must be positive")
        self._entries: OrderedDict[str, CacheEntry[Any]] = OrderedDict()
        self._max_items = max_items
        self._clock = clock
        self._hits = 0
        self._misses = 0

    @staticmethod
    def generate_key(namespace: str, params: Params) -> str:
        """Build a cache key from a namespace and a flat parameter mapping.

        Parameters are serialised with sorted keys, so two mappings with the
        same items always produce the same key.
        """
        params_hash = hashlib.sha256(
            json.dumps(dict(params), sort_keys=True, default=str).encode()
        ).hexdigest()[:16]
        return f"{namespace}:{params_hash}"

    def _lookup(self, key: str) -> CacheEntry[Any] | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() >= entry.expires_at:
            del self._entries[key]
            return None
        self._entries.move_to_end(key)  # LRU touch
        return entry

    def get(self, key: str) -> Any | None:
        """Return the fresh value for ``key``, or None on a miss."""
        entry = self._lookup(key)
        if entry is None:
            self._misses += 1
            return None
        self._hits += 1
        return entry.value

    def has(self, key: str) -> bool:
        """Check for a fresh entry without counting a hit or miss."""
        return self._lookup(key) is not None

    def set(self, key: str, value: Any) -> None:
        """Store ``value`` under ``key`` for one TTL, replacing any entry."""
        expires_at = self._clock() + self._ttl
        self._entries[key] = CacheEntry(value=value, expires_at=expires_at)
        self._entries.move_to_end(key)
        if self._max_items and len(self._entries) > self._max_items:
            self._entries.popitem(last=False)

    def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    def invalidate_pattern(self, pattern: str) -> int:
        """Remove every entry whose key contains ``pattern``."""
        doomed = [key for key in self._entries if pattern in key]
        for key in doomed:
            del self._entries[key]
        if doomed:
            logger.debug("Invalidated %d entries matching %r", len(doomed), pattern)
        return len(doomed)

    def clear(self) -> None:
        self._entries.clear()

    def get_stats(self) -> dict[str, int]:
        """Size and hit/miss counters for diagnostics."""
        return {
            "size": len(self._entries),
            "ttl_ms": self._ttl,
            "hits": self._hits,
            "misses": self._misses,
        }

    def __len__(self) -> int:
        return len(self._entries)
