"""
Redis client and cache dependency injection.

Builds the process ``EntityCache`` from settings, on either the in-process
store or redis, and exposes it to request handlers.
"""

import redis
from fastapi import Request

from school_backend.cache import EntityCache, MemoryCacheStore, RedisCacheStore
from school_backend.settings import BackendSettings, settings as default_settings


def build_redis_client(settings: BackendSettings) -> redis.Redis:
    """Sync redis client; the entity cache (de)serializes with orjson itself."""
    return redis.Redis(
        host=settings.REDIS_HOST,
        port=settings.REDIS_PORT,
        password=settings.REDIS_PASSWORD if settings.REDIS_PASSWORD else None,
        db=settings.REDIS_DB,
        decode_responses=False,
        socket_connect_timeout=5,
        socket_timeout=5,
        retry_on_timeout=True,
        health_check_interval=30,
    )


def build_cache(settings: BackendSettings = default_settings, client: redis.Redis = None) -> EntityCache:
    """
    Create the entity cache described by ``settings``.

    Args:
        settings: Backend settings (CACHE_BACKEND, CACHE_PREFIX, verification knobs)
        client: Optional redis client, built from settings when omitted

    Returns:
        EntityCache instance
    """
    if settings.CACHE_BACKEND == "redis":
        store = RedisCacheStore(client or build_redis_client(settings), prefix=settings.CACHE_PREFIX)
    else:
        store = MemoryCacheStore()

    return EntityCache(
        store=store,
        verify_retries=settings.CACHE_VERIFY_RETRIES,
        verify_delay=settings.CACHE_VERIFY_DELAY,
    )


def get_cache(request: Request) -> EntityCache:
    """
    FastAPI dependency returning the application's entity cache.

    Example:
        >>> @router.get("/system/cache")
        >>> def cache_stats(cache: EntityCache = Depends(get_cache)):
        ...     return cache.get_stats()
    """
    return request.app.state.cache
