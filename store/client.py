"""
Client code for Redis access, with in-memory fallback if Redis is unavailable.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Awaitable, List, Optional, TypeVar

from config import settings
from store.exceptions import StoreTimeout, StoreUnavailable

log = logging.getLogger(__name__)

_T = TypeVar("_T")

_redis_client: Any = None
_fallback: dict[str, str] = {}
_fallback_lists: dict[str, list[str]] = {}
_using_fallback = False
_init_lock = asyncio.Lock()
_retry_after_monotonic: float = 0.0


async def get_redis() -> Any:
    """Connected client, or None while redis is unreachable.

    A failed connect puts the store in fallback mode for
    ``store_redis_retry_cooldown_seconds`` before the next attempt.
    """
    global _redis_client, _using_fallback, _retry_after_monotonic

    if _redis_client is not None:
        return _redis_client
    if time.monotonic() < _retry_after_monotonic:
        _using_fallback = True
        return None

    async with _init_lock:
        if _redis_client is not None:
            return _redis_client
        if time.monotonic() < _retry_after_monotonic:
            _using_fallback = True
            return None
        try:
            import redis.asyncio as aioredis

            timeout = settings.store_op_timeout_seconds
            client = aioredis.from_url(
                settings.redis_url,
                decode_responses=True,
                socket_connect_timeout=timeout,
                socket_timeout=timeout,
            )
            await asyncio.wait_for(client.ping(), timeout=timeout)
            _redis_client = client
            _retry_after_monotonic = 0.0
            _using_fallback = False
            log.info("Redis connected: %s", settings.redis_url)
            return _redis_client
        except Exception as exc:
            _retry_after_monotonic = time.monotonic() + max(0.0, settings.store_redis_retry_cooldown_seconds)
            if not _using_fallback:
                log.warning("Redis unavailable (%s), using in-memory fallback", exc)
                _using_fallback = True
            return None


async def _run(op: str, key: str, awaitable: Awaitable[_T]) -> _T:
    # once connected, failures surface to the caller instead of silently
    # diverging into the fallback dicts
    try:
        return await asyncio.wait_for(awaitable, timeout=settings.store_op_timeout_seconds)
    except asyncio.TimeoutError as exc:
        log.warning("Redis %s timed out on %s", op, key)
        raise StoreTimeout(f"redis {op} timed out on {key}") from exc
    except Exception as exc:
        log.warning("Redis %s error on %s: %s", op, key, exc)
        raise StoreUnavailable(f"redis {op} failed on {key}: {exc}") from exc


def _fallback_items() -> int:
    return len(_fallback) + sum(len(v) for v in _fallback_lists.values())


def _reserve_fallback(key: str, extra: int) -> None:
    # records and index entries share one budget
    limit = settings.store_fallback_max_items
    if _fallback_items() + extra > limit:
        log.warning("In-memory fallback full (%d items), refusing %s", _fallback_items(), key)
        raise StoreUnavailable(f"in-memory fallback full ({limit} items), cannot write {key}")


async def redis_get(key: str) -> Optional[str]:
    client = await get_redis()
    if client is None:
        return _fallback.get(key)
    return await _run("GET", key, client.get(key))


async def redis_mget(keys: List[str]) -> List[Optional[str]]:
    if not keys:
        return []
    client = await get_redis()
    if client is None:
        return [_fallback.get(k) for k in keys]
    return await _run("MGET", keys[0], client.mget(keys))


async def redis_set(key: str, value: str, ttl: Optional[int] = None) -> None:
    client = await get_redis()
    if client is None:
        if key not in _fallback:
            _reserve_fallback(key, 1)
        _fallback[key] = value
        return
    if ttl:
        await _run("SETEX", key, client.setex(key, ttl, value))
    else:
        await _run("SET", key, client.set(key, value))


async def redis_delete(key: str) -> None:
    client = await get_redis()
    if client is None:
        _fallback.pop(key, None)
        _fallback_lists.pop(key, None)
        return
    await _run("DEL", key, client.delete(key))


async def redis_rpush(key: str, values: List[str], ttl: Optional[int] = None) -> None:
    if not values:
        return
    client = await get_redis()
    if client is None:
        _reserve_fallback(key, len(values))
        _fallback_lists.setdefault(key, []).extend(values)
        return
    pipe = client.pipeline()
    pipe.rpush(key, *values)
    if ttl:
        pipe.expire(key, ttl)
    await _run("RPUSH", key, pipe.execute())


async def redis_lrange(key: str) -> list[str]:
    client = await get_redis()
    if client is None:
        return list(_fallback_lists.get(key, []))
    return await _run("LRANGE", key, client.lrange(key, 0, -1))


def is_using_fallback() -> bool:
    return _using_fallback


def reset_fallback() -> None:
    _fallback.clear()
    _fallback_lists.clear()


async def close_redis() -> None:
    global _redis_client
    client, _redis_client = _redis_client, None
    if client is not None:
        await client.aclose()
