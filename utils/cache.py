"""Bounded in-memory FIFO cache for the IPEDS comps API.

Provides a FIFOCache class that memoizes shaped query responses.  Datasets
are immutable for the life of the process, so entries never expire; the
only way out of the cache is eviction or a restart.
"""

import threading
from collections import OrderedDict
from typing import Any


class FIFOCache:
    """Thread-safe in-memory cache with strict first-in-first-out eviction.

    A maximum of ``maxsize`` entries are retained; when a new key would
    exceed it, the oldest-*inserted* entry is evicted.  Reads never reorder
    entries (this is not an LRU), and storing a key that is already
    resident is a no-op, so the first payload cached for a key is the one
    served until that key is evicted.

    Usage::

        cache = FIFOCache(maxsize=100)
        cache.set(("51.2001", 7), {"results": [...]})
        value = cache.get(("51.2001", 7))  # returns dict or None if missing
    """

    def __init__(self, maxsize: int = 100) -> None:
        """Initialise the cache.

        Args:
            maxsize: Maximum number of entries to store (default 100).

        Raises:
            ValueError: If ``maxsize`` is less than 1.
        """
        if maxsize < 1:
            raise ValueError(f"maxsize must be >= 1, got {maxsize}")
        self._maxsize = maxsize
        # Insertion order == eviction order
        self._store: OrderedDict[Any, Any] = OrderedDict()
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0
        self._evictions = 0

    def get(self, key: Any) -> Any | None:
        """Return cached value for *key*, or ``None`` if absent.

        Args:
            key: Cache key (must be hashable).

        Returns:
            Cached value, or ``None``.
        """
        with self._lock:
            if key not in self._store:
                self._misses += 1
                return None
            self._hits += 1
            return self._store[key]

    def set(self, key: Any, value: Any) -> bool:
        """Store *value* under *key* unless *key* is already cached.

        If the cache is full, the oldest-inserted entry is evicted before
        inserting the new one.

        Args:
            key: Cache key (must be hashable).
            value: Value to cache (any type).

        Returns:
            True if the value was inserted, False if *key* was already
            resident (the existing value is kept).
        """
        with self._lock:
            if key in self._store:
                return False
            if len(self._store) >= self._maxsize:
                self._store.popitem(last=False)
                self._evictions += 1
            self._store[key] = value
            return True

    def clear(self) -> None:
        """Remove all entries from the cache."""
        with self._lock:
            self._store.clear()
            self._hits = 0
            self._misses = 0
            self._evictions = 0

    def stats(self) -> dict[str, int]:
        """Return cache statistics.

        Returns:
            Dict with keys ``hits``, ``misses``, ``size``, ``maxsize``, and
            ``evictions``.
        """
        with self._lock:
            return {
                "hits": self._hits,
                "misses": self._misses,
                "size": len(self._store),
                "maxsize": self._maxsize,
                "evictions": self._evictions,
            }

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)

    def __contains__(self, key: Any) -> bool:
        with self._lock:
            return key in self._store
