"""
Unit tests for the cache store, TTL policies and request coalescer.
"""
import asyncio

import pytest

from velo.cache import (
    CacheCategory,
    CacheStore,
    RequestCoalescer,
    TTL_CONFIG,
    get_ttl_for_category,
    make_cache_key,
)


# =============================================================================
# TTL policies & keys
# =============================================================================

def test_ttl_per_category():
    assert get_ttl_for_category(CacheCategory.NUTRITION) == 5 * 60
    assert get_ttl_for_category(CacheCategory.TRAINING) == 10 * 60
    assert get_ttl_for_category(CacheCategory.STRAVA) == 15 * 60
    assert get_ttl_for_category(CacheCategory.AI) == 30 * 60
    assert get_ttl_for_category(CacheCategory.DEFAULT) == 10 * 60
    assert set(TTL_CONFIG) == set(CacheCategory)


def test_cache_key_layout():
    assert make_cache_key(CacheCategory.NUTRITION, "plan", "active") == "nutrition:plan:active"
    assert make_cache_key(CacheCategory.NUTRITION, "log", "2025-04-01") == "nutrition:log:2025-04-01"
    assert make_cache_key(CacheCategory.STRAVA, "activities") == "strava:activities"
    assert make_cache_key(CacheCategory.TRAINING, "sessions", "upcoming") == "training:sessions:upcoming"


def test_cache_key_is_deterministic_regardless_of_param_order():
    a = make_cache_key(CacheCategory.NUTRITION, "trends", startDate="2025-04-01", endDate="2025-04-07")
    b = make_cache_key(CacheCategory.NUTRITION, "trends", endDate="2025-04-07", startDate="2025-04-01")
    assert a == b


def test_cache_key_drops_none_params():
    assert make_cache_key(CacheCategory.NUTRITION, "recommendations", planId=None) == \
        "nutrition:recommendations"
    assert make_cache_key(CacheCategory.NUTRITION, "recommendations", planId="p1") == \
        "nutrition:recommendations?planId=p1"


def test_cache_key_parts_cannot_collide():
    """A part containing ':' must not produce another request's key."""
    forged = make_cache_key(CacheCategory.NUTRITION, "plan", "id:active")
    genuine = make_cache_key(CacheCategory.NUTRITION, "plan", "id", "active")
    assert forged != genuine


def test_parse_category():
    assert CacheCategory.parse("nutrition") is CacheCategory.NUTRITION
    assert CacheCategory.parse("AI") is CacheCategory.AI
    assert CacheCategory.parse(CacheCategory.STRAVA) is CacheCategory.STRAVA
    with pytest.raises(ValueError):
        CacheCategory.parse("weather")


# =============================================================================
# CacheStore
# =============================================================================

def test_value_fresh_until_ttl_then_absent(cache, clock):
    cache.set("nutrition:plan:active", {"id": "p1"}, CacheCategory.NUTRITION)

    clock.advance(seconds=299)
    assert cache.get("nutrition:plan:active") == {"id": "p1"}

    clock.advance(seconds=1)  # exactly at TTL
    assert cache.get("nutrition:plan:active") is None


def test_expired_entry_is_deleted_on_read(cache, clock):
    cache.set("strava:activities", [1, 2], CacheCategory.STRAVA)
    clock.advance(minutes=15)

    assert len(cache) == 1
    assert cache.get_entry("strava:activities") is None
    assert len(cache) == 0
    assert cache.get_stats()["expired"] == 1


def test_ttl_follows_entry_category(cache, clock):
    cache.set("nutrition:log:2025-04-01", [], CacheCategory.NUTRITION)
    cache.set("ai:suggestions:fr", ["q"], CacheCategory.AI)

    clock.advance(minutes=10)
    assert cache.get("nutrition:log:2025-04-01") is None
    assert cache.get("ai:suggestions:fr") == ["q"]


def test_cached_none_is_distinct_from_miss(cache):
    cache.set("nutrition:plan:active", None, CacheCategory.NUTRITION)

    entry = cache.get_entry("nutrition:plan:active")
    assert entry is not None
    assert entry.data is None
    assert cache.get_entry("nutrition:plan:other") is None
    assert cache.get("nutrition:plan:other", default="missing") == "missing"


def test_set_overwrites_and_restarts_ttl(cache, clock):
    cache.set("training:sessions:upcoming", ["old"], CacheCategory.TRAINING)
    clock.advance(minutes=9)
    cache.set("training:sessions:upcoming", ["new"], CacheCategory.TRAINING)
    clock.advance(minutes=9)

    assert cache.get("training:sessions:upcoming") == ["new"]


def test_clear_category_uses_tag_not_key_prefix(cache):
    cache.set("nutrition:log:2025-04-01", [], CacheCategory.NUTRITION)
    cache.set("legacy-key-without-prefix", {"x": 1}, CacheCategory.NUTRITION)
    cache.set("training:sessions:upcoming", [], CacheCategory.TRAINING)

    assert cache.clear("nutrition") == 2
    assert "legacy-key-without-prefix" not in cache
    assert "training:sessions:upcoming" in cache


def test_clear_all(cache):
    for category in CacheCategory:
        cache.set(f"{category.value}:x", 1, category)

    assert cache.clear("all") == len(CacheCategory)
    assert len(cache) == 0


def test_clear_unknown_scope_raises(cache):
    with pytest.raises(ValueError):
        cache.clear("weather")


def test_lru_eviction(clock):
    cache = CacheStore(max_entries=2, clock=clock)
    cache.set("a", 1)
    cache.set("b", 2)
    cache.get("a")  # a becomes most recently used
    cache.set("c", 3)

    assert "a" in cache
    assert "b" not in cache
    assert "c" in cache
    assert cache.get_stats()["evictions"] == 1


def test_invalidate_single_key(cache):
    cache.set("strava:status", {"connected": True}, CacheCategory.STRAVA)
    assert cache.invalidate("strava:status") is True
    assert cache.invalidate("strava:status") is False


def test_stats_by_category(cache):
    cache.set("nutrition:a", 1, CacheCategory.NUTRITION)
    cache.set("ai:b", 2, CacheCategory.AI)

    stats = cache.get_stats()
    assert stats["entries"] == 2
    assert stats["by_category"]["nutrition"] == 1
    assert stats["by_category"]["ai"] == 1
    assert stats["by_category"]["strava"] == 0


# =============================================================================
# get_or_fetch & coalescing
# =============================================================================

@pytest.mark.asyncio
async def test_get_or_fetch_hits_after_first_fetch(cache):
    calls = []

    async def fetch():
        calls.append(1)
        return {"value": 1}

    first = await cache.get_or_fetch("default:k", CacheCategory.DEFAULT, fetch)
    second = await cache.get_or_fetch("default:k", CacheCategory.DEFAULT, fetch)

    assert first == second == {"value": 1}
    assert len(calls) == 1
    stats = cache.get_stats()
    assert stats["hits"] == 1
    assert stats["misses"] == 1


@pytest.mark.asyncio
async def test_concurrent_misses_share_one_fetch(cache):
    calls = []
    release = asyncio.Event()

    async def fetch():
        calls.append(1)
        await release.wait()
        return "shared"

    tasks = [
        asyncio.create_task(cache.get_or_fetch("default:k", CacheCategory.DEFAULT, fetch))
        for _ in range(5)
    ]
    await asyncio.sleep(0)
    release.set()
    results = await asyncio.gather(*tasks)

    assert results == ["shared"] * 5
    assert len(calls) == 1
    assert cache.get_stats()["coalescer"]["coalesced_total"] == 4


@pytest.mark.asyncio
async def test_fetch_failure_reaches_every_waiter_and_is_not_cached(cache):
    release = asyncio.Event()

    async def fetch():
        await release.wait()
        raise RuntimeError("backend down")

    tasks = [
        asyncio.create_task(cache.get_or_fetch("default:k", CacheCategory.DEFAULT, fetch))
        for _ in range(3)
    ]
    await asyncio.sleep(0)
    release.set()
    results = await asyncio.gather(*tasks, return_exceptions=True)

    assert all(isinstance(r, RuntimeError) for r in results)
    assert "default:k" not in cache


@pytest.mark.asyncio
async def test_result_invalidated_mid_flight_is_not_stored(cache):
    release = asyncio.Event()

    async def fetch():
        await release.wait()
        return "stale"

    task = asyncio.create_task(
        cache.get_or_fetch("nutrition:plan:active", CacheCategory.NUTRITION, fetch)
    )
    await asyncio.sleep(0)
    cache.clear(CacheCategory.NUTRITION)
    release.set()

    assert await task == "stale"
    assert "nutrition:plan:active" not in cache


@pytest.mark.asyncio
async def test_coalescer_waiter_timeout():
    coalescer = RequestCoalescer(timeout=0.01)
    release = asyncio.Event()

    async def slow():
        await release.wait()
        return 1

    initiator = asyncio.create_task(coalescer.get_or_fetch("k", slow))
    await asyncio.sleep(0)

    with pytest.raises(asyncio.TimeoutError):
        await coalescer.get_or_fetch("k", slow)

    release.set()
    assert await initiator == 1
    assert coalescer.active_requests == 0


@pytest.mark.asyncio
async def test_read_after_clear_does_not_join_stale_fetch(cache):
    versions = iter(["v1", "v2"])
    release = asyncio.Event()
    calls = []

    async def fetch():
        calls.append(1)
        version = next(versions)
        await release.wait()
        return version

    before = asyncio.create_task(
        cache.get_or_fetch("nutrition:plan:active", CacheCategory.NUTRITION, fetch)
    )
    await asyncio.sleep(0)
    cache.clear("nutrition")
    after = asyncio.create_task(
        cache.get_or_fetch("nutrition:plan:active", CacheCategory.NUTRITION, fetch)
    )
    await asyncio.sleep(0)
    release.set()

    assert await before == "v1"
    assert await after == "v2"
    assert len(calls) == 2
    assert cache.get("nutrition:plan:active") == "v2"


@pytest.mark.asyncio
async def test_returned_payload_is_isolated_from_cache(cache):
    async def fetch():
        return {"meals": [{"name": "Porridge"}]}

    first = await cache.get_or_fetch("nutrition:plan:active", CacheCategory.NUTRITION, fetch)
    first["meals"].append({"name": "Pizza"})

    second = await cache.get_or_fetch("nutrition:plan:active", CacheCategory.NUTRITION, fetch)
    second["meals"][0]["name"] = "Changed"

    assert cache.get("nutrition:plan:active") == {"meals": [{"name": "Porridge"}]}
