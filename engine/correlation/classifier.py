"""
Episode type classification from the set of event kinds present in a group.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from typing import Iterable, Set, Tuple

from engine.enums import EpisodeType, EventKind
from engine.models import NormalizedEvent

# first match wins; a group may still hold kinds it was not classified on
_PRIORITY: Tuple[Tuple[Tuple[EventKind, ...], EpisodeType], ...] = (
    ((EventKind.DEPLOYMENT,), EpisodeType.deployment),
    ((EventKind.FEATURE_FLAG,), EpisodeType.flag),
    ((EventKind.ACCESS_GRANT, EventKind.ACCESS_REVOKE), EpisodeType.access),
    ((EventKind.INCIDENT,), EpisodeType.incident),
    ((EventKind.PR_MERGED,), EpisodeType.pr_merge),
)


def classify(kinds: Iterable[EventKind]) -> EpisodeType:
    present: Set[EventKind] = set(kinds)
    for triggers, episode_type in _PRIORITY:
        if any(k in present for k in triggers):
            return episode_type
    return EpisodeType.custom


def classify_events(events: Iterable[NormalizedEvent]) -> EpisodeType:
    return classify(e.kind for e in events)
