"""
Grouping of a batch of normalized events into provisional episodes by shared correlation keys.

Two phases run per batch. Seed assignment walks the batch in order; for each
of an event's keys in priority order it looks for the first existing group
holding that key, so the outcome depends on batch order. The merge phase then makes ONE
pass over the seed groups and folds together groups whose key unions overlap.
A chain A-B-C where only neighbours share keys is not guaranteed to collapse
into a single group; ``closure=True`` swaps in a union-find over keys that
does guarantee it, at the price of departing from the legacy grouping.

Both phases compare every group against every other group and re-derive key
sets per comparison: cost is at least quadratic in the batch size. Callers
bound their batches (see ``settings.recompute_event_cap``).

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Set

from engine.correlation.keys import correlation_keys, primary_key, singleton_key
from engine.models import NormalizedEvent

log = logging.getLogger(__name__)


@dataclass
class EventGroup:
    key: str
    events: List[NormalizedEvent] = field(default_factory=list)

    def key_union(self) -> Set[str]:
        keys: Set[str] = set()
        for event in self.events:
            keys.update(correlation_keys(event))
        return keys

    def event_ids(self) -> List[str]:
        return [e.id for e in self.events]


def sort_by_time(events: Iterable[NormalizedEvent]) -> List[NormalizedEvent]:
    # timestamps are fixed-format strings; sorted() is stable for equal times
    return sorted(events, key=lambda e: e.time)


def _holds_key(group: EventGroup, key: str) -> bool:
    return any(key in correlation_keys(member) for member in group.events)


def seed_groups(events: List[NormalizedEvent]) -> Dict[str, EventGroup]:
    groups: Dict[str, EventGroup] = {}

    for event in events:
        keys = correlation_keys(event)

        # keys in priority order, groups in creation order: the highest
        # priority key that is already held anywhere decides the group
        target: EventGroup | None = None
        for key in keys:
            target = next((g for g in groups.values() if _holds_key(g, key)), None)
            if target is not None:
                break

        if target is None:
            group_key = primary_key(keys) or singleton_key(event)
            target = groups.get(group_key)
            if target is None:
                target = EventGroup(key=group_key)
                groups[group_key] = target

        target.events.append(event)

    return groups


def merge_groups(groups: Dict[str, EventGroup]) -> List[EventGroup]:
    ordered = list(groups.values())
    unions = [g.key_union() for g in ordered]
    processed: Set[int] = set()
    merged: List[EventGroup] = []

    for i, group in enumerate(ordered):
        if i in processed:
            continue
        processed.add(i)
        related = list(group.events)

        # compared against this group's own seed keys, not the accumulated set
        for j in range(len(ordered)):
            if j in processed:
                continue
            if unions[i] & unions[j]:
                related.extend(ordered[j].events)
                processed.add(j)

        merged.append(EventGroup(key=group.key, events=sort_by_time(related)))

    return merged


def close_groups(events: List[NormalizedEvent]) -> List[EventGroup]:
    """Union-find over correlation keys: every chain of shared keys ends up in one group."""
    parent: Dict[str, str] = {}

    def find(key: str) -> str:
        root = key
        while parent[root] != root:
            root = parent[root]
        while parent[key] != root:
            parent[key], key = root, parent[key]
        return root

    def union(a: str, b: str) -> None:
        ra, rb = find(a), find(b)
        if ra != rb:
            parent[rb] = ra

    event_keys: List[List[str]] = []
    for event in events:
        keys = correlation_keys(event) or [singleton_key(event)]
        event_keys.append(keys)
        for k in keys:
            parent.setdefault(k, k)
        for k in keys[1:]:
            union(keys[0], k)

    groups: Dict[str, EventGroup] = {}
    for event, keys in zip(events, event_keys):
        root = find(keys[0])
        group = groups.get(root)
        if group is None:
            group = EventGroup(key=keys[0])
            groups[root] = group
        group.events.append(event)

    return [EventGroup(key=g.key, events=sort_by_time(g.events)) for g in groups.values()]


def group_events(events: List[NormalizedEvent], closure: bool = False) -> List[EventGroup]:
    if not events:
        return []
    if closure:
        result = close_groups(events)
    else:
        result = merge_groups(seed_groups(events))
    log.debug("Grouped %d events into %d groups (closure=%s)", len(events), len(result), closure)
    return result
