"""
Correlation engine: turns a batch of normalized events into persisted Episodes, and recomputes episodes over a stored time window.

One ``correlate`` call runs grouping, classification, causal graph building
and assembly to completion with no internal parallelism; the only awaits are
the storage calls. Episodes are saved one at a time as they are assembled, so
a storage failure part-way through leaves the episodes saved before it in
place and propagates the error unchanged. Nothing is deduplicated against
episodes from earlier calls: recomputing an overlapping window produces new,
overlapping episodes.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence

from config import settings
from engine.causal.graph import build_causal_graph
from engine.correlation.classifier import classify_events
from engine.correlation.grouping import group_events
from engine.episodes.assembler import assemble_episode
from engine.models import Episode, NormalizedEvent
from store.storage import Storage

log = logging.getLogger(__name__)


class CorrelationEngine:
    def __init__(
        self,
        storage: Storage,
        closure: Optional[bool] = None,
        recompute_cap: Optional[int] = None,
    ) -> None:
        self._storage = storage
        self._closure = settings.correlation_transitive_closure if closure is None else closure
        self._recompute_cap = settings.recompute_event_cap if recompute_cap is None else recompute_cap

    @property
    def storage(self) -> Storage:
        return self._storage

    def build_episodes(self, events: Sequence[NormalizedEvent]) -> List[Episode]:
        # a repeated id keeps its first occurrence; graph nodes are unique ids
        unique: Dict[str, NormalizedEvent] = {}
        for event in events:
            unique.setdefault(event.id, event)
        if len(unique) < len(events):
            log.warning("Dropped %d events with repeated ids", len(events) - len(unique))

        episodes: List[Episode] = []
        for group in group_events(list(unique.values()), closure=self._closure):
            graph = build_causal_graph(group.events)
            episode = assemble_episode(group.events, classify_events(group.events), graph.to_model())
            log.debug(
                "Episode %s (%s): %d events, %d edges, group key %s",
                episode.id, episode.type.value, len(episode.events), len(episode.graph.edges), group.key,
            )
            episodes.append(episode)
        return episodes

    async def correlate(self, events: Sequence[NormalizedEvent]) -> List[Episode]:
        episodes = self.build_episodes(events)
        for episode in episodes:
            await self._storage.save_episode(episode)
        log.info("Correlated %d events into %d episodes", len(events), len(episodes))
        return episodes

    async def recompute(
        self,
        start_time: Optional[str] = None,
        end_time: Optional[str] = None,
    ) -> List[Episode]:
        events = await self._storage.query_events(
            start_time=start_time,
            end_time=end_time,
            limit=self._recompute_cap,
        )
        if len(events) >= self._recompute_cap:
            log.warning(
                "Recompute window %s..%s hit the %d event cap; later events are not regrouped",
                start_time, end_time, self._recompute_cap,
            )
        return await self.correlate(events)
