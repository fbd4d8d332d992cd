"""Tests for the release TTL cache and the cached fetcher."""

import asyncio

import pytest

from nminus.versioning.cache import TTLCache, release_cache_key
from nminus.versioning.fetcher import ReleaseFetcher
from nminus.versioning.models import ReleaseResult


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    return TTLCache(default_ttl=900, clock=clock)


class TestTTLCache:
    def test_get_missing(self, cache):
        assert cache.get("missing") is None

    def test_hit_within_ttl(self, cache, clock):
        cache.set("k", [1, 2])
        clock.advance(899)
        assert cache.get("k") == [1, 2]

    def test_expires_after_ttl(self, cache, clock):
        cache.set("k", "v")
        clock.advance(900)
        assert cache.get("k") is None
        assert len(cache) == 0

    def test_ttl_override(self, cache, clock):
        cache.set("k", "v", ttl=10)
        clock.advance(11)
        assert cache.get("k") is None

    def test_set_refreshes_ttl(self, cache, clock):
        cache.set("k", "old")
        clock.advance(800)
        cache.set("k", "new")
        clock.advance(800)
        assert cache.get("k") == "new"

    def test_invalidate_and_clear(self, cache):
        cache.set("a", 1)
        cache.set("b", 2)
        cache.invalidate("a")
        assert cache.get("a") is None
        cache.clear()
        assert len(cache) == 0

    def test_evicts_oldest_over_limit(self, clock):
        small = TTLCache(default_ttl=900, max_entries=10, clock=clock)
        for i in range(11):
            small.set(i, i)
            clock.advance(1)
        assert small.get(0) is None
        assert small.get(10) == 10
        assert len(small) == 10

    def test_stats(self, cache, clock):
        cache.set("a", 1, ttl=5)
        cache.set("b", 2)
        clock.advance(6)
        stats = cache.stats()
        assert stats["total_entries"] == 2
        assert stats["expired_entries"] == 1
        assert stats["active_entries"] == 1
        assert stats["default_ttl"] == 900


class CountingLookup:
    def __init__(self, result):
        self.result = result
        self.calls = []

    async def __call__(self, datasource, package_name, scheme_id):
        self.calls.append((datasource, package_name, scheme_id))
        return self.result


class TestReleaseFetcherCache:
    def test_cache_key_includes_scheme(self, cache):
        lookup = CountingLookup(ReleaseResult.from_versions(["1.0.0"]))
        fetcher = ReleaseFetcher(lookup=lookup, cache=cache)
        asyncio.run(fetcher.fetch("npm", "left-pad", "semver"))
        asyncio.run(fetcher.fetch("npm", "left-pad", "semver"))
        asyncio.run(fetcher.fetch("npm", "left-pad", "loose"))
        assert len(lookup.calls) == 2
        assert cache.get(release_cache_key("npm", "left-pad", "semver")) is not None

    def test_cached_snapshot_returned(self, cache):
        result = ReleaseResult.from_versions(["1.0.0", "2.0.0"])
        fetcher = ReleaseFetcher(lookup=CountingLookup(result), cache=cache)
        first = asyncio.run(fetcher.fetch("npm", "pkg", "semver"))
        second = asyncio.run(fetcher.fetch("npm", "pkg", "semver"))
        assert first is second is result

    def test_refetch_after_expiry(self, cache, clock):
        lookup = CountingLookup(ReleaseResult.from_versions(["1.0.0"]))
        fetcher = ReleaseFetcher(lookup=lookup, cache=cache)
        asyncio.run(fetcher.fetch("npm", "pkg", "semver"))
        clock.advance(901)
        asyncio.run(fetcher.fetch("npm", "pkg", "semver"))
        assert len(lookup.calls) == 2

    def test_not_found_is_not_cached(self, cache):
        lookup = CountingLookup(None)
        fetcher = ReleaseFetcher(lookup=lookup, cache=cache)
        assert asyncio.run(fetcher.fetch("npm", "ghost", "semver")) is None
        asyncio.run(fetcher.fetch("npm", "ghost", "semver"))
        assert len(lookup.calls) == 2

    def test_missing_package_identity_bypasses_cache(self, cache):
        lookup = CountingLookup(ReleaseResult.from_versions(["1.0.0"]))
        fetcher = ReleaseFetcher(lookup=lookup, cache=cache)
        asyncio.run(fetcher.fetch(None, None, "semver"))
        asyncio.run(fetcher.fetch(None, None, "semver"))
        assert lookup.calls == [(None, None, "semver"), (None, None, "semver")]
        assert len(cache) == 0

    def test_failure_is_not_cached(self, cache):
        calls = []

        async def lookup(datasource, package_name, scheme_id):
            calls.append(package_name)
            if len(calls) == 1:
                raise ValueError("bad document")
            return ReleaseResult.from_versions(["1.0.0"])

        fetcher = ReleaseFetcher(lookup=lookup, cache=cache)
        with pytest.raises(ValueError):
            asyncio.run(fetcher.fetch("npm", "pkg", "semver"))
        assert asyncio.run(fetcher.fetch("npm", "pkg", "semver")).releases[0].version == "1.0.0"
