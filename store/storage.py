"""
Storage collaborator used by the correlation engine and the API.

:class:`Storage` is the interface the engine depends on; the engine only
calls ``query_events`` and ``save_episode``. :class:`KeyValueStorage` is the
shipped implementation on top of the Redis helpers in :mod:`store.client`,
which degrade to process memory when Redis is unreachable.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Protocol, Sequence

from engine.models import Episode, NormalizedEvent
from store import episodes as episode_store, events as event_store
from store.client import is_using_fallback


class Storage(Protocol):
    async def save_events(self, events: Sequence[NormalizedEvent]) -> None: ...

    async def get_event(self, event_id: str) -> Optional[NormalizedEvent]: ...

    async def query_events(
        self,
        start_time: Optional[str] = None,
        end_time: Optional[str] = None,
        kind: Optional[Sequence[str]] = None,
        actor_id: Optional[str] = None,
        target_id: Optional[str] = None,
        trace_id: Optional[str] = None,
        commit_sha: Optional[str] = None,
        pr_number: Optional[str] = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> List[NormalizedEvent]: ...

    async def save_episode(self, episode: Episode) -> None: ...

    async def get_episode(self, episode_id: str) -> Optional[Episode]: ...

    async def query_episodes(
        self,
        start_time: Optional[str] = None,
        end_time: Optional[str] = None,
        type: Optional[Sequence[str]] = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> List[Episode]: ...

    async def get_episode_events(self, episode_id: str) -> List[NormalizedEvent]: ...

    async def stats(self) -> Dict[str, Any]: ...


class KeyValueStorage:
    async def save_events(self, events: Sequence[NormalizedEvent]) -> None:
        await event_store.save_many(events)

    async def get_event(self, event_id: str) -> Optional[NormalizedEvent]:
        return await event_store.get(event_id)

    async def query_events(
        self,
        start_time: Optional[str] = None,
        end_time: Optional[str] = None,
        kind: Optional[Sequence[str]] = None,
        actor_id: Optional[str] = None,
        target_id: Optional[str] = None,
        trace_id: Optional[str] = None,
        commit_sha: Optional[str] = None,
        pr_number: Optional[str] = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> List[NormalizedEvent]:
        return await event_store.query(
            start_time=start_time,
            end_time=end_time,
            kind=kind,
            actor_id=actor_id,
            target_id=target_id,
            trace_id=trace_id,
            commit_sha=commit_sha,
            pr_number=pr_number,
            limit=limit,
            offset=offset,
        )

    async def save_episode(self, episode: Episode) -> None:
        await episode_store.save(episode)

    async def get_episode(self, episode_id: str) -> Optional[Episode]:
        return await episode_store.get(episode_id)

    async def query_episodes(
        self,
        start_time: Optional[str] = None,
        end_time: Optional[str] = None,
        type: Optional[Sequence[str]] = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> List[Episode]:
        return await episode_store.query(
            start_time=start_time, end_time=end_time, type=type, limit=limit, offset=offset,
        )

    async def get_episode_events(self, episode_id: str) -> List[NormalizedEvent]:
        episode = await episode_store.get(episode_id)
        if episode is None:
            return []
        found = {e.id: e for e in await event_store.get_many(episode.events)}
        return [found[i] for i in episode.events if i in found]

    async def stats(self) -> Dict[str, Any]:
        return {
            "events": len(await event_store.load_all()),
            "episodes": len(await episode_store.load_all()),
            "store": "fallback" if is_using_fallback() else "redis",
        }
