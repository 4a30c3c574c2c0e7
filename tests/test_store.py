"""
Test Suite for the Event and Episode Store

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

import pytest

from config import settings
from conftest import make_event
from engine.correlator import CorrelationEngine
from engine.enums import EventKind as K
from store import client as store_client
from store import keys
from store.client import _fallback, redis_delete, redis_get, redis_lrange, redis_set
from store.exceptions import StoreError, StoreUnavailable
from store.storage import KeyValueStorage


def _events():
    return [
        make_event("a", K.PR_MERGED, time="2024-01-15T10:00:00Z", actor_id="alice", commit_sha="abc", pr_number="42"),
        make_event("b", K.DEPLOYMENT, time="2024-01-15T10:05:00Z", actor_id="ci", commit_sha="abc", deployment_id="9"),
        make_event("c", K.FEATURE_FLAG, time="2024-01-15T12:00:00Z", actor_id="bob", target_id="flag", ticket_id="J-1"),
    ]


def test_key_layout():
    assert keys.event("x") == "nt:event:x"
    assert keys.episode("y") == "nt:episode:y"
    assert keys.event_index() != keys.episode_index()


@pytest.mark.asyncio
async def test_fallback_get_set():
    await redis_set("k1", "v1")
    assert await redis_get("k1") == "v1"
    assert "k1" in _fallback
    await redis_delete("k1")
    assert await redis_get("k1") is None


@pytest.mark.asyncio
async def test_save_and_get_event_round_trip():
    storage = KeyValueStorage()
    await storage.save_events(_events())
    event = await storage.get_event("b")
    assert event is not None
    assert event.kind == K.DEPLOYMENT
    assert event.correlation.deployment_id == "9"
    assert await storage.get_event("missing") is None


@pytest.mark.asyncio
async def test_query_events_filters_and_orders_by_time():
    storage = KeyValueStorage()
    events = _events()
    await storage.save_events([events[2], events[0], events[1]])

    assert [e.id for e in await storage.query_events()] == ["a", "b", "c"]
    assert [e.id for e in await storage.query_events(kind=["DEPLOYMENT"])] == ["b"]
    assert [e.id for e in await storage.query_events(start_time="2024-01-15T10:05:00Z")] == ["b", "c"]
    assert [e.id for e in await storage.query_events(end_time="2024-01-15T10:05:00Z")] == ["a", "b"]
    assert [e.id for e in await storage.query_events(commit_sha="abc", actor_id="ci")] == ["b"]
    assert [e.id for e in await storage.query_events(pr_number="42")] == ["a"]
    assert [e.id for e in await storage.query_events(limit=1, offset=1)] == ["b"]


@pytest.mark.asyncio
async def test_correlate_and_read_back_episodes():
    storage = KeyValueStorage()
    engine = CorrelationEngine(storage, closure=False)
    events = _events()
    await storage.save_events(events)
    created = await engine.correlate(events)

    assert len(created) == 2
    stored = await storage.get_episode(created[0].id)
    assert stored == created[0]
    assert [e.id for e in await storage.get_episode_events(created[0].id)] == ["a", "b"]

    newest_first = await storage.query_episodes()
    assert [e.type.value for e in newest_first] == ["FlagEpisode", "DeploymentEpisode"]
    assert [e.id for e in await storage.query_episodes(type=["FlagEpisode"])] == [created[1].id]
    assert await storage.query_episodes(end_time="2024-01-15T09:00:00Z") == []

    stats = await storage.stats()
    assert stats["events"] == 3
    assert stats["episodes"] == 2


@pytest.mark.asyncio
async def test_recompute_over_store_duplicates_episodes():
    storage = KeyValueStorage()
    engine = CorrelationEngine(storage, closure=False)
    await storage.save_events(_events())

    await engine.recompute()
    await engine.recompute()

    assert (await storage.stats())["episodes"] == 4


@pytest.mark.asyncio
async def test_get_episode_events_for_unknown_episode():
    assert await KeyValueStorage().get_episode_events("nope") == []


@pytest.mark.asyncio
async def test_connected_redis_failure_raises(monkeypatch):
    class BrokenRedis:
        async def get(self, key):
            raise ConnectionError("connection reset")

        async def setex(self, key, ttl, value):
            raise ConnectionError("connection reset")

    async def broken():
        return BrokenRedis()

    monkeypatch.setattr(store_client, "get_redis", broken)

    with pytest.raises(StoreUnavailable):
        await redis_get("k")
    with pytest.raises(StoreError):
        await KeyValueStorage().save_events(_events()[:1])


@pytest.mark.asyncio
async def test_full_fallback_refuses_writes_instead_of_dropping(monkeypatch):
    monkeypatch.setattr(settings, "store_fallback_max_items", 2)
    storage = KeyValueStorage()
    first, second, _ = _events()

    # one record plus one index entry fills the budget
    await storage.save_events([first])
    with pytest.raises(StoreUnavailable):
        await storage.save_events([second])

    assert await redis_lrange(keys.event_index()) == ["a"]
    assert [e.id for e in await storage.query_events()] == ["a"]
    # overwriting an existing record needs no extra room
    await redis_set(keys.event("a"), await redis_get(keys.event("a")))
