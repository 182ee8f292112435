#!/usr/bin/env python3

"""Unit tests for the expiring LRU result cache."""

import pytest

from structsight.domain.repositories.cache import ResultCache


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


class TestResultCache:
    """Test suite for ResultCache."""

    @pytest.fixture
    def clock(self):
        return FakeClock()

    @pytest.mark.unit
    def test_put_and_get(self):
        cache = ResultCache(max_size=2)
        cache.put("a", 1)

        assert cache.get("a") == 1
        assert "a" in cache
        assert len(cache) == 1

    @pytest.mark.unit
    def test_miss_returns_none(self):
        cache = ResultCache()

        assert cache.get("missing") is None
        assert cache.misses == 1

    @pytest.mark.unit
    def test_lru_eviction(self):
        cache = ResultCache(max_size=2)
        cache.put("a", 1)
        cache.put("b", 2)
        cache.get("a")
        cache.put("c", 3)

        assert "a" in cache
        assert "b" not in cache
        assert "c" in cache

    @pytest.mark.unit
    def test_put_existing_key_replaces_value(self):
        cache = ResultCache(max_size=2)
        cache.put("a", 1)
        cache.put("a", 2)

        assert cache.get("a") == 2
        assert len(cache) == 1

    @pytest.mark.unit
    def test_entries_expire(self, clock):
        cache = ResultCache(ttl_seconds=30.0, clock=clock)
        cache.put("a", 1)

        clock.now = 29.9
        assert cache.get("a") == 1

        clock.now = 30.0
        assert cache.get("a") is None
        assert "a" not in cache
        assert cache.stats()["expired"] == 1

    @pytest.mark.unit
    def test_refresh_on_put(self, clock):
        cache = ResultCache(ttl_seconds=10.0, clock=clock)
        cache.put("a", 1)
        clock.now = 8.0
        cache.put("a", 2)
        clock.now = 15.0

        assert cache.get("a") == 2

    @pytest.mark.unit
    def test_no_expiry(self, clock):
        cache = ResultCache(ttl_seconds=None, clock=clock)
        cache.put("a", 1)
        clock.now = 1e9

        assert cache.get("a") == 1

    @pytest.mark.unit
    def test_zero_size_stores_nothing(self):
        cache = ResultCache(max_size=0)
        cache.put("a", 1)

        assert len(cache) == 0

    @pytest.mark.unit
    def test_clear_and_stats(self):
        cache = ResultCache(max_size=4)
        cache.put("a", 1)
        cache.get("a")
        cache.get("b")

        stats = cache.stats()
        assert stats["hits"] == 1
        assert stats["misses"] == 1
        assert stats["hit_rate"] == "50.0%"
        assert stats["size"] == 1

        cache.clear()
        assert len(cache) == 0
        assert cache.stats()["hits"] == 0
