"""
Tests for the entity cache: states, TTL, global invalidation and write verification.
"""

from unittest.mock import MagicMock

import pytest

from school_backend.cache import CacheState, EntityCache, MemoryCacheStore
from school_backend.exceptions import CacheError


class DroppingStore(MemoryCacheStore):
    """Store that silently loses every write."""

    def put(self, entry, ttl):
        pass


def make_loader(records, calls):
    async def loader():
        calls.append(1)
        return [dict(record) for record in records]
    return loader


@pytest.mark.unit
class TestCacheStates:

    def test_unknown_key_is_absent(self, cache):
        assert cache.state("chats") == CacheState.ABSENT
        assert cache.get("chats") is None

    @pytest.mark.asyncio
    async def test_refresh_makes_key_fresh(self, cache):
        calls = []
        records = await cache.refresh("chats", make_loader([{"id": "a"}], calls), ttl=120)

        assert records == [{"id": "a"}]
        assert cache.state("chats") == CacheState.FRESH
        assert cache.get("chats") is records
        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_entry_goes_stale_strictly_after_expiry(self, cache, clock):
        calls = []
        await cache.refresh("chats", make_loader([{"id": "a"}], calls), ttl=120)

        clock.advance(120)
        assert cache.state("chats") == CacheState.FRESH

        clock.advance(0.001)
        assert cache.state("chats") == CacheState.STALE
        assert cache.get("chats") is None


@pytest.mark.unit
class TestReadThrough:

    @pytest.mark.asyncio
    async def test_read_before_expiry_does_not_reload(self, cache, clock):
        calls = []
        loader = make_loader([{"id": "a"}], calls)

        first = await cache.get_or_refresh("subjects", loader, ttl=600)
        clock.advance(599)
        second = await cache.get_or_refresh("subjects", loader, ttl=600)

        assert first is second
        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_read_after_expiry_reloads_exactly_once(self, cache, clock):
        calls = []
        loader = make_loader([{"id": "a"}], calls)

        await cache.get_or_refresh("subjects", loader, ttl=600)
        clock.advance(601)
        await cache.get_or_refresh("subjects", loader, ttl=600)
        await cache.get_or_refresh("subjects", loader, ttl=600)

        assert len(calls) == 2

    @pytest.mark.asyncio
    async def test_refresh_evicts_every_other_key(self, cache):
        await cache.refresh("chats", make_loader([], []), ttl=120)
        await cache.refresh("users", make_loader([], []), ttl=600)

        assert cache.state("chats") == CacheState.ABSENT
        assert cache.state("users") == CacheState.FRESH


@pytest.mark.unit
class TestInPlaceUpdates:

    @pytest.mark.asyncio
    async def test_append_pushes_onto_shared_list(self, cache):
        records = await cache.refresh("chats", make_loader([{"id": "a"}], []), ttl=120)

        assert cache.append("chats", {"id": "b"}, ttl=120) is True
        assert [r["id"] for r in records] == ["a", "b"]

    def test_append_without_entry_is_noop(self, cache):
        assert cache.append("chats", {"id": "b"}, ttl=120) is False
        assert cache.state("chats") == CacheState.ABSENT

    @pytest.mark.asyncio
    async def test_append_of_cached_id_replaces_it(self, cache):
        records = await cache.refresh("chats", make_loader([{"id": "a", "name": "raw"}, {"id": "b"}], []), ttl=120)

        assert cache.append("chats", {"id": "a", "name": "populated"}, ttl=120) is True
        assert [r["id"] for r in records] == ["a", "b"]
        assert records[0]["name"] == "populated"

    @pytest.mark.asyncio
    async def test_append_rearms_ttl(self, cache, clock):
        await cache.refresh("chats", make_loader([], []), ttl=120)
        clock.advance(100)
        cache.append("chats", {"id": "b"}, ttl=120)
        clock.advance(100)

        assert cache.state("chats") == CacheState.FRESH

    @pytest.mark.asyncio
    async def test_replace_substitutes_by_id(self, cache):
        loader = make_loader([{"id": "a", "name": "old"}, {"id": "b"}], [])
        records = await cache.refresh("chats", loader, ttl=120)

        assert cache.replace("chats", "a", {"id": "a", "name": "new"}, ttl=120) is True
        assert records[0] == {"id": "a", "name": "new"}
        assert len(records) == 2

    @pytest.mark.asyncio
    async def test_remove_drops_by_id(self, cache):
        records = await cache.refresh("chats", make_loader([{"id": "a"}, {"id": "b"}], []), ttl=120)

        assert cache.remove("chats", "a", ttl=120) is True
        assert cache.remove("chats", "a", ttl=120) is False
        assert records == [{"id": "b"}]

    @pytest.mark.asyncio
    async def test_invalidate_all_keeps_written_key(self, cache):
        store = cache.store
        # populate two keys without the global clear of refresh
        await cache.refresh("chats", make_loader([], []), ttl=120)
        cache._set("users", [], 600)

        evicted = cache.invalidate_all(keep="chats")

        assert evicted == 1
        assert store.keys() == ["chats"]


@pytest.mark.unit
class TestWriteVerification:

    @pytest.mark.asyncio
    async def test_present_record_verifies_without_waiting(self, cache, sleep):
        await cache.refresh("chats", make_loader([{"id": "a"}], []), ttl=120)

        assert await cache.verify_in_cache("chats", {"id": "a"}, make_loader([], []), ttl=120) is True
        assert sleep.delays == []

    @pytest.mark.asyncio
    async def test_membership_is_decided_by_id(self, cache):
        await cache.refresh("chats", make_loader([{"id": "a", "name": "x"}], []), ttl=120)

        # a different object with the same id counts as present
        assert await cache.verify_in_cache("chats", {"id": "a", "name": "x"}, make_loader([], []), ttl=120)

    @pytest.mark.asyncio
    async def test_missing_record_is_reappended(self, cache, sleep):
        await cache.refresh("chats", make_loader([], []), ttl=120)

        assert await cache.verify_in_cache("chats", {"id": "a"}, make_loader([], []), ttl=120) is True
        assert [r["id"] for r in cache.get("chats")] == ["a"]
        assert sleep.delays == [0.5]

    @pytest.mark.asyncio
    async def test_gives_up_after_three_retries(self, clock, sleep):
        cache = EntityCache(DroppingStore(), clock=clock, sleep=sleep)
        cache.append = MagicMock(wraps=cache.append)
        calls = []

        with pytest.raises(CacheError) as exc_info:
            await cache.verify_in_cache("chats", {"id": "a"}, make_loader([], calls), ttl=120)

        assert cache.append.call_count == 3
        assert sleep.delays == [0.5, 0.5, 0.5]
        assert exc_info.value.entity_id == "a"
        # one read per attempt, each one a reload since nothing sticks
        assert len(calls) == 4

    @pytest.mark.asyncio
    async def test_retry_policy_is_configurable(self, clock, sleep):
        cache = EntityCache(DroppingStore(), clock=clock, sleep=sleep, verify_retries=1, verify_delay=0.01)

        with pytest.raises(CacheError):
            await cache.verify_in_cache("chats", {"id": "a"}, make_loader([], []), ttl=120)

        assert sleep.delays == [0.01]


@pytest.mark.unit
class TestStats:

    @pytest.mark.asyncio
    async def test_counts_hits_misses_and_refreshes(self, cache):
        loader = make_loader([], [])
        await cache.get_or_refresh("chats", loader, ttl=120)
        await cache.get_or_refresh("chats", loader, ttl=120)

        stats = cache.get_stats()
        assert stats["hits"] == 1
        assert stats["misses"] == 1
        assert stats["refreshes"] == 1
        assert stats["hit_rate"] == 0.5
        assert stats["keys"] == {"chats": "fresh"}

    @pytest.mark.asyncio
    async def test_reset_stats(self, cache):
        await cache.get_or_refresh("chats", make_loader([], []), ttl=120)
        cache.reset_stats()

        assert cache.get_stats()["misses"] == 0
        assert cache.get_stats()["hit_rate"] == 0.0
