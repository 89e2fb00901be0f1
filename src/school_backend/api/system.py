import logging
from typing import Annotated, Any, Dict
from fastapi import APIRouter, Depends, Response, status

from school_backend.cache import EntityCache
from school_backend.redis_cache import get_cache

system_router = APIRouter()
logger = logging.getLogger(__name__)


@system_router.get("/cache")
async def cache_stats(cache: Annotated[EntityCache, Depends(get_cache)]) -> Dict[str, Any]:
    """Hit/miss counters and the state of every cached collection."""
    return cache.get_stats()


@system_router.delete("/cache", status_code=status.HTTP_204_NO_CONTENT)
async def clear_cache(cache: Annotated[EntityCache, Depends(get_cache)]):
    """Drop every cached collection; the next read of each reloads it."""
    evicted = cache.clear()
    cache.reset_stats()
    logger.info(f"Cache cleared through API, {evicted} collection(s) evicted")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
