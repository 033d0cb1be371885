"""
Redis cache for reference-data listings (courts, equipment, coaches, pricing rules).

CACHING STRATEGY
================

  key:    "catalog:{name}"  ->  JSON list of plain dicts
  expiry: REDIS_CACHE_TTL (admin edits show up within one TTL)

Only reference data is cached. Slot grids, conflict checks and booking-time
pricing always read live rows: a stale cache may show an old list, but can
never sell a taken slot or store a wrong price.

Redis is optional. Disabled, unreachable or erroring Redis means every call
falls through to the loader; errors are logged, never raised.
"""

import json
from typing import Awaitable, Callable, Optional, Sequence, TypeVar

import redis.asyncio as redis
from pydantic import BaseModel

from courtside.core.config import get_settings
from courtside.core.logging import get_logger
from courtside.core.metrics import record_cache_operation, redis_connection_errors

logger = get_logger(__name__)
settings = get_settings()

T = TypeVar("T", bound=BaseModel)

_redis_client: Optional[redis.Redis] = None


async def get_redis() -> Optional[redis.Redis]:
    """Shared connection, created on first use. None when Redis is disabled or down."""
    global _redis_client

    if not settings.REDIS_ENABLED:
        return None

    if _redis_client is None:
        client = redis.from_url(
            settings.REDIS_URL,
            encoding="utf-8",
            decode_responses=True,
            socket_connect_timeout=5,
            socket_timeout=5,
        )
        try:
            await client.ping()
        except redis.RedisError as e:
            logger.error("redis_connection_failed", error=str(e))
            redis_connection_errors.inc()
            await client.aclose()
            return None
        logger.info("redis_connected", url=settings.REDIS_URL)
        _redis_client = client

    return _redis_client


async def close_redis() -> None:
    global _redis_client
    if _redis_client:
        await _redis_client.aclose()
        _redis_client = None


def _catalog_key(name: str) -> str:
    return f"catalog:{name}"


async def get_cached_catalog(name: str) -> Optional[list]:
    client = await get_redis()
    if not client:
        return None

    key = _catalog_key(name)
    try:
        data = await client.get(key)
    except redis.RedisError as e:
        logger.error("cache_get_error", key=key, error=str(e))
        return None

    record_cache_operation("get", hit=data is not None)
    return json.loads(data) if data is not None else None


async def set_cached_catalog(name: str, items: list) -> None:
    client = await get_redis()
    if not client:
        return

    key = _catalog_key(name)
    try:
        await client.setex(key, settings.REDIS_CACHE_TTL, json.dumps(items, default=str))
        logger.debug("cache_set", key=key, items=len(items), ttl=settings.REDIS_CACHE_TTL)
    except redis.RedisError as e:
        logger.error("cache_set_error", key=key, error=str(e))


async def cached_catalog(
    name: str,
    load: Callable[[], Awaitable[Sequence[BaseModel]]],
    parse: Callable[[dict], T],
) -> list[T]:
    """
    Cache-aside read of one listing: serve from Redis if present, otherwise
    call `load`, store the result and return it. `parse` rebuilds a schema
    from a cached dict.
    """
    cached = await get_cached_catalog(name)
    if cached is not None:
        logger.debug("catalog_cache_hit", catalog=name)
        return [parse(item) for item in cached]

    items = list(await load())
    await set_cached_catalog(name, [item.model_dump(mode="json") for item in items])
    return items


async def get_cache_stats() -> dict:
    """Redis keyspace stats for /health."""
    client = await get_redis()
    if not client:
        return {"status": "disabled"}

    try:
        info = await client.info("stats")
        hits = info.get("keyspace_hits", 0)
        misses = info.get("keyspace_misses", 0)
        return {
            "status": "connected",
            "hits": hits,
            "misses": misses,
            "hit_rate": round(hits / max(hits + misses, 1) * 100, 2),
            "catalog_keys": len([k async for k in client.scan_iter(match=_catalog_key("*"))]),
        }
    except redis.RedisError as e:
        return {"status": "error", "error": str(e)}
