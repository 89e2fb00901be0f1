"""
Read-through entity cache.

One cache entry per entity collection key (``"chats"``, ``"subjects"``, ...)
holds the fully populated record list loaded from the record store. Entries
expire after a per-entity TTL; a refresh wipes the whole cache before it
reloads, and every write evicts all keys other than the one written, so no
read after a write can see data cached before it.

Writes are verified: after a create or update the written record must be
found (by id) in the cached list, otherwise it is re-appended and checked
again after a short non-blocking back-off.

Example:
    >>> cache = EntityCache(MemoryCacheStore())
    >>> chats = await cache.get_or_refresh("chats", load_chats, ttl=120)
    >>> cache.append("chats", new_chat, ttl=120)
    >>> await cache.verify_in_cache("chats", new_chat, load_chats, ttl=120)
"""

import asyncio
import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Optional

import orjson
import redis

from school_backend.exceptions.errors import CacheError

logger = logging.getLogger(__name__)

Loader = Callable[[], Awaitable[List[dict]]]


class CacheState(str, Enum):
    ABSENT = "absent"
    FRESH = "fresh"
    STALE = "stale"


@dataclass
class CacheEntry:
    key: str
    value: List[dict]
    expires_at: float

    def is_stale(self, now: float) -> bool:
        return now > self.expires_at


class CacheStore(ABC):
    """Storage backend for cache entries. Expiry is judged by ``EntityCache``."""

    @abstractmethod
    def get(self, key: str) -> Optional[CacheEntry]:
        ...

    @abstractmethod
    def put(self, entry: CacheEntry, ttl: float) -> None:
        ...

    @abstractmethod
    def delete(self, key: str) -> None:
        ...

    @abstractmethod
    def keys(self) -> List[str]:
        ...

    def clear(self) -> int:
        """Delete every entry, returning how many were removed."""
        keys = self.keys()
        for key in keys:
            self.delete(key)
        return len(keys)


class MemoryCacheStore(CacheStore):
    """
    In-process store.

    Entries hold the very list object the cache hands out, so appends and
    replacements are visible to every reader of that list.
    """

    def __init__(self):
        self._entries: Dict[str, CacheEntry] = {}

    def get(self, key: str) -> Optional[CacheEntry]:
        return self._entries.get(key)

    def put(self, entry: CacheEntry, ttl: float) -> None:
        self._entries[entry.key] = entry

    def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    def keys(self) -> List[str]:
        return list(self._entries.keys())

    def clear(self) -> int:
        count = len(self._entries)
        self._entries.clear()
        return count


class RedisCacheStore(CacheStore):
    """
    Redis-backed store.

    Entries live under ``{prefix}:entity:{key}`` as orjson documents and carry
    a redis TTL as well, so abandoned keys disappear on their own. Lists are
    read-modify-written. Redis failures are logged and treated as a miss; the
    record store stays the source of truth.
    """

    def __init__(self, client: redis.Redis, prefix: str = "school"):
        self.client = client
        self.prefix = prefix

    def k(self, key: str) -> str:
        return f"{self.prefix}:entity:{key}"

    def get(self, key: str) -> Optional[CacheEntry]:
        try:
            raw = self.client.get(self.k(key))
        except redis.RedisError as e:
            logger.warning(f"Cache GET error for key {key}: {e}")
            return None
        if raw is None:
            return None
        try:
            payload = orjson.loads(raw)
            return CacheEntry(key=key, value=payload["value"], expires_at=payload["expires_at"])
        except (orjson.JSONDecodeError, KeyError, TypeError) as e:
            logger.warning(f"Cache entry for key {key} is unreadable: {e}")
            return None

    def put(self, entry: CacheEntry, ttl: float) -> None:
        payload = orjson.dumps({"value": entry.value, "expires_at": entry.expires_at})
        try:
            self.client.set(self.k(entry.key), payload, px=max(1, int(ttl * 1000)))
        except redis.RedisError as e:
            logger.error(f"Cache SET error for key {entry.key}: {e}")

    def delete(self, key: str) -> None:
        try:
            self.client.delete(self.k(key))
        except redis.RedisError as e:
            logger.error(f"Cache DELETE error for key {key}: {e}")

    def keys(self) -> List[str]:
        marker = f"{self.prefix}:entity:"
        found = []
        try:
            for raw_key in self.client.scan_iter(match=f"{marker}*", count=100):
                name = raw_key.decode() if isinstance(raw_key, bytes) else raw_key
                found.append(name[len(marker):])
        except redis.RedisError as e:
            logger.error(f"Cache SCAN error for prefix {self.prefix}: {e}")
        return found

    def clear(self) -> int:
        keys = [self.k(key) for key in self.keys()]
        if keys:
            try:
                self.client.delete(*keys)
            except redis.RedisError as e:
                logger.error(f"Error clearing cache prefix {self.prefix}: {e}")
                return 0
        return len(keys)


class EntityCache:
    """
    Expiring cache of populated record lists, one entry per entity key.

    Args:
        store: Backend holding the entries
        clock: Returns the current time in seconds
        sleep: Awaitable back-off used between verification attempts
        verify_retries: Re-append attempts before ``CacheError``
        verify_delay: Seconds to wait after each re-append
    """

    def __init__(
        self,
        store: Optional[CacheStore] = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        verify_retries: int = 3,
        verify_delay: float = 0.5,
    ):
        self.store = store if store is not None else MemoryCacheStore()
        self.clock = clock
        self.sleep = sleep
        self.verify_retries = verify_retries
        self.verify_delay = verify_delay
        self.reset_stats()

    def state(self, key: str) -> CacheState:
        entry = self.store.get(key)
        if entry is None:
            return CacheState.ABSENT
        if entry.is_stale(self.clock()):
            return CacheState.STALE
        return CacheState.FRESH

    def get(self, key: str) -> Optional[List[dict]]:
        """Cached list for ``key`` if it is fresh, else ``None``."""
        entry = self.store.get(key)
        if entry is None or entry.is_stale(self.clock()):
            self._stats["misses"] += 1
            logger.debug(f"Cache MISS: {key}")
            return None
        self._stats["hits"] += 1
        logger.debug(f"Cache HIT: {key}")
        return entry.value

    async def refresh(self, key: str, loader: Loader, ttl: float) -> List[dict]:
        """
        Clear the whole cache, reload ``key`` through ``loader`` and store it.

        Every other key is evicted as a side effect and reloads on its next read.
        """
        evicted = self.store.clear()
        self._stats["invalidations"] += evicted
        records = await loader()
        self._set(key, records, ttl)
        self._stats["refreshes"] += 1
        logger.info(f"Cache REFRESH: {key} records={len(records)} evicted={evicted}")
        return records

    async def get_or_refresh(self, key: str, loader: Loader, ttl: float) -> List[dict]:
        records = self.get(key)
        if records is None:
            records = await self.refresh(key, loader, ttl)
        return records

    def append(self, key: str, record: dict, ttl: float) -> bool:
        """
        Push ``record`` onto the cached list if one is present. Returns whether it was.

        A cached element with the same id is replaced instead; ids stay unique.
        """
        records = self._fresh_value(key)
        if records is None:
            return False
        for index, existing in enumerate(records):
            if existing.get("id") == record.get("id"):
                records[index] = record
                break
        else:
            records.append(record)
        self._set(key, records, ttl)
        return True

    def replace(self, key: str, id_: str, record: dict, ttl: float) -> bool:
        """Substitute the cached element whose id is ``id_``. Returns whether one matched."""
        records = self._fresh_value(key)
        if records is None:
            return False
        matched = False
        for index, existing in enumerate(records):
            if existing.get("id") == id_:
                records[index] = record
                matched = True
                break
        self._set(key, records, ttl)
        return matched

    def remove(self, key: str, id_: str, ttl: float) -> bool:
        """Drop the cached element whose id is ``id_``. Returns whether one matched."""
        records = self._fresh_value(key)
        if records is None:
            return False
        remaining = [existing for existing in records if existing.get("id") != id_]
        matched = len(remaining) != len(records)
        # in place, readers may hold the list
        records[:] = remaining
        self._set(key, records, ttl)
        return matched

    def invalidate_all(self, keep: Optional[str] = None) -> int:
        """Evict every key except ``keep``. Returns the number evicted."""
        evicted = 0
        for key in self.store.keys():
            if key == keep:
                continue
            self.store.delete(key)
            evicted += 1
        self._stats["invalidations"] += evicted
        logger.info(f"Cache INVALIDATE: keys_deleted={evicted} kept={keep}")
        return evicted

    def clear(self) -> int:
        evicted = self.store.clear()
        self._stats["invalidations"] += evicted
        logger.warning(f"Cache CLEARED: keys_deleted={evicted}")
        return evicted

    async def verify_in_cache(self, key: str, record: dict, loader: Loader, ttl: float) -> bool:
        """
        Confirm that ``record`` is in the cached list for ``key``.

        Membership is decided by id. A missing record is re-appended and
        checked again after ``verify_delay`` seconds, at most
        ``verify_retries`` times.

        Raises:
            CacheError: the record could not be found after all retries
        """
        retries = self.verify_retries
        record_id = record.get("id")
        while True:
            records = await self.get_or_refresh(key, loader, ttl)
            if any(existing.get("id") == record_id for existing in records):
                return True
            if retries <= 0:
                logger.error(f"Cache verification failed: {key} id={record_id}")
                raise CacheError(
                    f"Record {record_id} could not be verified in cache '{key}'",
                    entity_type=key,
                    entity_id=record_id,
                )
            logger.warning(f"Cache verification retry: {key} id={record_id} retries_left={retries}")
            self.append(key, record, ttl)
            retries -= 1
            await self.sleep(self.verify_delay)

    def get_stats(self) -> Dict[str, Any]:
        """Hit/miss/refresh/set/invalidation counts plus hit rate and current key states."""
        lookups = self._stats["hits"] + self._stats["misses"]
        hit_rate = self._stats["hits"] / lookups if lookups else 0.0
        return {
            **self._stats,
            "hit_rate": hit_rate,
            "keys": {key: self.state(key).value for key in self.store.keys()},
        }

    def reset_stats(self):
        self._stats = {
            "hits": 0,
            "misses": 0,
            "refreshes": 0,
            "sets": 0,
            "invalidations": 0,
        }

    def _fresh_value(self, key: str) -> Optional[List[dict]]:
        entry = self.store.get(key)
        if entry is None or entry.is_stale(self.clock()):
            return None
        return entry.value

    def _set(self, key: str, records: List[dict], ttl: float) -> None:
        self.store.put(CacheEntry(key=key, value=records, expires_at=self.clock() + ttl), ttl)
        self._stats["sets"] += 1
        logger.debug(f"Cache SET: {key} (ttl={ttl}s)")
