"""Tests for utils/cache.py — bounded FIFO cache."""
import threading

import pytest

from utils.cache import FIFOCache


class TestFIFOCache:
    def test_basic_set_get(self):
        cache = FIFOCache()
        cache.set("key", "value")
        assert cache.get("key") == "value"

    def test_miss_returns_none(self):
        cache = FIFOCache()
        assert cache.get("nonexistent") is None

    def test_returns_same_object(self):
        cache = FIFOCache()
        payload = {"results": [1, 2]}
        cache.set("k", payload)
        assert cache.get("k") is payload

    def test_set_existing_key_is_noop(self):
        cache = FIFOCache()
        assert cache.set("k", "old") is True
        assert cache.set("k", "new") is False
        assert cache.get("k") == "old"

    def test_evicts_oldest_inserted(self):
        cache = FIFOCache(maxsize=2)
        cache.set("k1", "v1")
        cache.set("k2", "v2")
        cache.set("k3", "v3")
        assert cache.get("k1") is None
        assert cache.get("k2") == "v2"
        assert cache.get("k3") == "v3"

    def test_access_does_not_protect_from_eviction(self):
        """FIFO, not LRU: re-reading the oldest key does not keep it alive."""
        cache = FIFOCache(maxsize=3)
        cache.set("a", 1)
        cache.set("b", 2)
        cache.set("c", 3)
        assert cache.get("a") == 1
        cache.set("d", 4)
        assert "a" not in cache
        assert [k for k in "abcd" if k in cache] == ["b", "c", "d"]

    def test_reinsert_does_not_reorder(self):
        cache = FIFOCache(maxsize=2)
        cache.set("a", 1)
        cache.set("b", 2)
        cache.set("a", 99)  # no-op
        cache.set("c", 3)
        assert "a" not in cache
        assert [k for k in "abc" if k in cache] == ["b", "c"]
        assert cache.get("b") == 2

    def test_size_never_exceeds_maxsize(self):
        cache = FIFOCache(maxsize=5)
        for i in range(20):
            cache.set(i, i)
            assert len(cache) <= 5
        assert [i for i in range(20) if i in cache] == [15, 16, 17, 18, 19]

    def test_stats(self):
        cache = FIFOCache(maxsize=1)
        cache.set("k", "v")
        cache.get("k")    # hit
        cache.get("nope")  # miss
        cache.set("k2", "v2")  # evicts k
        assert cache.stats() == {
            "hits": 1, "misses": 1, "size": 1, "maxsize": 1, "evictions": 1,
        }

    def test_clear(self):
        cache = FIFOCache()
        cache.set("k1", "v1")
        cache.get("k1")
        cache.clear()
        assert cache.get("k1") is None
        stats = cache.stats()
        assert stats["hits"] == 0
        assert stats["size"] == 0

    def test_invalid_maxsize(self):
        with pytest.raises(ValueError):
            FIFOCache(maxsize=0)

    def test_thread_safety(self):
        cache = FIFOCache(maxsize=100)
        errors = []

        def worker(offset):
            try:
                for i in range(200):
                    cache.set((offset, i), i)
                    cache.get((offset, i))
            except Exception as e:
                errors.append(e)

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert not errors
        assert len(cache) == 100
