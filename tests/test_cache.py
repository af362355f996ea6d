"""Tests for the TTL cache."""

import pytest

from skillshelf import TTLCache

from conftest import FakeClock


class TestGenerateKey:
    """Tests for deterministic key generation."""

    def test_insertion_order_does_not_matter(self) -> None:
        first = TTLCache.generate_key("skills", {"offset": 20, "limit": 20, "q": ""})
        second = TTLCache.generate_key("skills", {"q": "", "limit": 20, "offset": 20})
        assert first == second

    def test_key_starts_with_namespace(self) -> None:
        key = TTLCache.generate_key("plugins", {"offset": 0})
        assert key.startswith("plugins:")

    def test_different_params_give_different_keys(self) -> None:
        page_one = TTLCache.generate_key("skills", {"offset": 0, "limit": 20})
        page_two = TTLCache.generate_key("skills", {"offset": 20, "limit": 20})
        assert page_one != page_two

    def test_different_namespaces_give_different_keys(self) -> None:
        params = {"offset": 0, "limit": 20}
        assert TTLCache.generate_key("skills", params) != TTLCache.generate_key(
            "plugins", params
        )

    def test_empty_query_differs_from_missing_query(self) -> None:
        with_query = TTLCache.generate_key("skills", {"offset": 0, "q": ""})
        without_query = TTLCache.generate_key("skills", {"offset": 0})
        assert with_query != without_query


class TestExpiry:
    """Tests for TTL semantics and lazy eviction."""

    def test_get_missing_returns_none(self, cache: TTLCache) -> None:
        assert cache.get("nonexistent") is None

    def test_value_is_fresh_before_ttl(self, cache: TTLCache, clock: FakeClock) -> None:
        cache.set("key", {"items": [1, 2]})
        clock.advance(9_999)
        assert cache.get("key") == {"items": [1, 2]}

    def test_value_expires_at_ttl(self, cache: TTLCache, clock: FakeClock) -> None:
        cache.set("key", "value")
        clock.advance(10_000)
        assert cache.get("key") is None

    def test_expired_entry_is_evicted_on_lookup(
        self, cache: TTLCache, clock: FakeClock
    ) -> None:
        cache.set("key", "value")
        clock.advance(20_000)
        assert len(cache) == 1
        assert cache.get("key") is None
        assert len(cache) == 0

    def test_has_follows_freshness(self, cache: TTLCache, clock: FakeClock) -> None:
        cache.set("key", "value")
        assert cache.has("key")
        clock.advance(10_000)
        assert not cache.has("key")
        assert len(cache) == 0

    def test_set_overwrites_and_restarts_ttl(
        self, cache: TTLCache, clock: FakeClock
    ) -> None:
        cache.set("key", "old")
        clock.advance(8_000)
        cache.set("key", "new")
        clock.advance(8_000)
        assert cache.get("key") == "new"

    def test_falsy_values_are_hits(self, cache: TTLCache) -> None:
        cache.set("key", "")
        assert cache.has("key")
        assert cache.get("key") == ""


class TestInvalidation:
    """Tests for pattern invalidation, delete and clear."""

    def test_invalidate_pattern_removes_matching_keys(self, cache: TTLCache) -> None:
        skills_key = TTLCache.generate_key("skills", {"offset": 0})
        more_skills_key = TTLCache.generate_key("skills", {"offset": 20})
        plugins_key = TTLCache.generate_key("plugins", {"offset": 0})
        for key in (skills_key, more_skills_key, plugins_key):
            cache.set(key, key)

        removed = cache.invalidate_pattern("skills")

        assert removed == 2
        assert cache.get(skills_key) is None
        assert cache.get(more_skills_key) is None
        assert cache.get(plugins_key) == plugins_key

    def test_invalidate_pattern_without_match(self, cache: TTLCache) -> None:
        cache.set("plugins:abc", 1)
        assert cache.invalidate_pattern("skills") == 0
        assert cache.has("plugins:abc")

    def test_delete(self, cache: TTLCache) -> None:
        cache.set("key", "value")
        cache.delete("key")
        cache.delete("never-set")
        assert cache.get("key") is None

    def test_clear(self, cache: TTLCache) -> None:
        cache.set("key1", 1)
        cache.set("key2", 2)
        cache.clear()
        assert len(cache) == 0


class TestLimitsAndStats:
    """Tests for LRU bound and diagnostics."""

    def test_lru_eviction(self, clock: FakeClock) -> None:
        cache = TTLCache("1m", max_items=2, clock=clock)
        cache.set("key1", 1)
        cache.set("key2", 2)
        cache.get("key1")  # touch
        cache.set("key3", 3)  # evicts key2

        assert cache.get("key1") == 1
        assert cache.get("key2") is None
        assert cache.get("key3") == 3

    def test_stats_count_hits_and_misses(self, cache: TTLCache) -> None:
        cache.set("key", "value")
        cache.get("key")
        cache.get("missing")
        cache.has("key")

        assert cache.get_stats() == {
            "size": 1,
            "ttl_ms": 10_000,
            "hits": 1,
            "misses": 1,
        }

    def test_invalid_arguments(self) -> None:
        with pytest.raises(ValueError, match="ttl"):
            TTLCache(0)
        with pytest.raises(ValueError, match="max_items"):
            TTLCache("1s", max_items=0)
