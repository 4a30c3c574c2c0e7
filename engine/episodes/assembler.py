"""
Episode assembly: derives the primary actor and target of a group, its time bounds and ordered event list, and combines them with the episode type and causal graph into one Episode record.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from typing import Callable, Dict, List, Optional, Tuple, TypeVar

from engine.enums import EpisodeType
from engine.ids import generate_id
from engine.models import Actor, Episode, EpisodeGraph, NormalizedEvent, Target

T = TypeVar("T")


def primary_by_count(items: List[T], key: Callable[[T], str]) -> Optional[T]:
    """Most frequent item by ``key``; ties go to the key seen first."""
    counts: Dict[str, Tuple[T, int]] = {}
    for item in items:
        k = key(item)
        if k in counts:
            first, count = counts[k]
            counts[k] = (first, count + 1)
        else:
            counts[k] = (item, 1)

    best: Optional[T] = None
    best_count = 0
    # dicts keep insertion order, so strict > keeps the earliest on ties
    for first, count in counts.values():
        if count > best_count:
            best, best_count = first, count
    return best


def primary_actor(events: List[NormalizedEvent]) -> Optional[Actor]:
    found = primary_by_count(events, lambda e: e.actor.id)
    return found.actor if found is not None else None


def primary_target(events: List[NormalizedEvent]) -> Optional[Target]:
    found = primary_by_count(events, lambda e: e.target.id)
    return found.target if found is not None else None


def assemble_episode(
    events: List[NormalizedEvent],
    episode_type: EpisodeType,
    graph: EpisodeGraph,
    episode_id: Optional[str] = None,
) -> Episode:
    if not events:
        raise ValueError("cannot assemble an episode from an empty group")

    ordered = sorted(events, key=lambda e: e.time)
    return Episode(
        id=episode_id or generate_id(),
        type=episode_type,
        start_time=ordered[0].time,
        end_time=ordered[-1].time,
        primary_actor=primary_actor(events),
        primary_target=primary_target(events),
        events=[e.id for e in ordered],
        graph=graph,
    )
