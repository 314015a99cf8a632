"""Tests for core/cache.py (TTL response cache)."""

from __future__ import annotations

from commitstreak.core.cache import CATEGORY_TTLS
from commitstreak.core.cache import CacheCategory
from commitstreak.core.cache import ResponseCache
from commitstreak.core.cache import generate_key
from commitstreak.core.cache import hash_token


class FakeClock:
    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class TestGenerateKey:
    """Tests for generate_key."""

    def test_joins_category_and_params(self):
        assert generate_key("user-events", "alice") == "user-events:alice"

    def test_deterministic_with_multiple_params(self):
        first = generate_key(CacheCategory.COMMITS, "alice", "repo1", 100)
        second = generate_key(CacheCategory.COMMITS, "alice", "repo1", 100)

        assert first == second == "commits:alice:repo1:100"


class TestHashToken:
    """Tests for hash_token."""

    def test_stable(self):
        assert hash_token("ghp_abcdef123") == hash_token("ghp_abcdef123")

    def test_does_not_contain_token(self):
        token = "ghp_secret_value"
        assert "secret" not in hash_token(token)

    def test_only_prefix_matters(self):
        """Only the first ten characters feed the hash."""
        assert hash_token("ghp_abcdefXXXX") == hash_token("ghp_abcdefYYYY")

    def test_different_prefixes_differ(self):
        assert hash_token("ghp_aaaaaa") != hash_token("ghp_bbbbbb")

    def test_empty_token(self):
        assert hash_token("") == "0"


class TestResponseCache:
    """Tests for ResponseCache."""

    def test_get_within_ttl(self):
        """set then get within TTL returns the data."""
        clock = FakeClock()
        cache = ResponseCache(clock=clock)

        cache.set("k", {"a": 1}, ttl=5)
        clock.advance(4)

        assert cache.get("k") == {"a": 1}

    def test_get_after_ttl_returns_none_and_deletes(self):
        """Expired entries read as absent and are removed lazily."""
        clock = FakeClock()
        cache = ResponseCache(clock=clock)

        cache.set("k", "v", ttl=5)
        clock.advance(6)

        assert cache.get("k") is None
        assert len(cache) == 0

    def test_missing_key(self):
        assert ResponseCache().get("nope") is None

    def test_default_ttl_used_when_none(self):
        clock = FakeClock()
        cache = ResponseCache(default_ttl=10, clock=clock)

        cache.set("k", "v")
        clock.advance(9)
        assert cache.has("k")
        clock.advance(2)
        assert not cache.has("k")

    def test_category_ttls(self):
        """Built-in per-category TTLs, overridable by name."""
        cache = ResponseCache(ttls={"search-commits": 5})

        assert cache.ttl_for(CacheCategory.USER_VALIDATION) == 600
        assert cache.ttl_for(CacheCategory.USER_EVENTS) == 120
        assert cache.ttl_for(CacheCategory.REPOSITORIES) == 300
        assert cache.ttl_for(CacheCategory.COMMITS) == 60
        assert cache.ttl_for(CacheCategory.SEARCH_COMMITS) == 5
        assert cache.ttl_for("something-else") == 300
        assert CATEGORY_TTLS[CacheCategory.SEARCH_COMMITS] == 30

    def test_delete_and_clear(self):
        cache = ResponseCache()
        cache.set("a", 1)
        cache.set("b", 2)

        assert cache.delete("a") is True
        assert cache.delete("a") is False
        cache.clear()
        assert len(cache) == 0

    def test_sweeps_expired_when_full(self):
        """Reaching max_entries sweeps expired entries before inserting."""
        clock = FakeClock()
        cache = ResponseCache(max_entries=2, clock=clock)
        cache.set("old", 1, ttl=1)
        cache.set("live", 2, ttl=100)
        clock.advance(5)

        cache.set("new", 3, ttl=100)

        assert len(cache) == 2
        assert cache.get("live") == 2
        assert cache.get("new") == 3

    def test_never_evicts_live_entries(self):
        """The size bound is best-effort: live entries are kept."""
        cache = ResponseCache(max_entries=2)
        cache.set("a", 1, ttl=100)
        cache.set("b", 2, ttl=100)
        cache.set("c", 3, ttl=100)

        assert len(cache) == 3

    def test_stats(self):
        clock = FakeClock()
        cache = ResponseCache(max_entries=4, clock=clock)
        cache.set("a", 1, ttl=1)
        cache.set("b", 2, ttl=100)
        clock.advance(2)

        stats = cache.stats()

        assert stats.total_entries == 2
        assert stats.active_entries == 1
        assert stats.expired_entries == 1
        assert stats.max_entries == 4
        assert stats.utilization_percent == 50

    def test_cleanup_returns_removed_count(self):
        clock = FakeClock()
        cache = ResponseCache(clock=clock)
        cache.set("a", 1, ttl=1)
        cache.set("b", 2, ttl=1)
        cache.set("c", 3, ttl=100)
        clock.advance(2)

        assert cache.cleanup() == 2
        assert len(cache) == 1
