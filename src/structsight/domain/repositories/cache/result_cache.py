#!/usr/bin/env python3

"""LRU cache with per-entry expiry for analysis results."""

from collections import OrderedDict
from collections.abc import Callable, Hashable
from time import monotonic
from typing import Any


class ResultCache:
    """Least-recently-used cache whose entries expire after a fixed time-to-live.

    Args:
        max_size: Maximum number of entries kept
        ttl_seconds: Lifetime of an entry; None disables expiry
        clock: Monotonic time source, injectable for tests
    """

    def __init__(
        self,
        max_size: int = 128,
        ttl_seconds: float | None = 30.0,
        clock: Callable[[], float] = monotonic,
    ):
        self.max_size = max_size
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self.cache: OrderedDict[Hashable, tuple[float, Any]] = OrderedDict()
        self.hits = 0
        self.misses = 0
        self.expired = 0

    def get(self, key: Hashable) -> Any | None:
        """Return the cached value, or None if absent or expired."""
        entry = self.cache.get(key)
        if entry is not None:
            stored_at, value = entry
            if self.ttl_seconds is None or self._clock() - stored_at < self.ttl_seconds:
                self.cache.move_to_end(key)
                self.hits += 1
                return value
            del self.cache[key]
            self.expired += 1

        self.misses += 1
        return None

    def put(self, key: Hashable, value: Any) -> None:
        """Store ``value``, evicting the least recently used entry when full."""
        if self.max_size <= 0:
            return
        if key in self.cache:
            self.cache.pop(key)
        elif len(self.cache) >= self.max_size:
            self.cache.popitem(last=False)

        self.cache[key] = (self._clock(), value)

    def clear(self) -> None:
        """Drop every entry and reset the counters."""
        self.cache.clear()
        self.hits = 0
        self.misses = 0
        self.expired = 0

    def stats(self) -> dict[str, Any]:
        """Return size, hit/miss counts and the number of entries dropped on expiry."""
        lookups = self.hits + self.misses
        hit_rate = self.hits / lookups * 100 if lookups else 0.0
        return {
            "size": len(self.cache),
            "max_size": self.max_size,
            "ttl_seconds": self.ttl_seconds,
            "hits": self.hits,
            "misses": self.misses,
            "expired": self.expired,
            "hit_rate": f"{hit_rate:.1f}%",
        }

    def __len__(self) -> int:
        return len(self.cache)

    def __contains__(self, key: Hashable) -> bool:
        """Check if key exists in cache without affecting LRU order or expiry."""
        return key in self.cache
