"""
Data model shared by the correlation engine, the store and the API: the
canonical NormalizedEvent produced by upstream adapters and the Episode
records the engine persists.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from engine.enums import (
    ActorType,
    EdgeType,
    EpisodeType,
    EventKind,
    Outcome,
    SourceSystem,
    TargetType,
)


class Source(BaseModel):
    model_config = ConfigDict(frozen=True)

    system: SourceSystem
    adapter: str
    instance: Optional[str] = None


class Actor(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: ActorType
    id: str
    display: str
    org: Optional[str] = None


class Target(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: TargetType
    id: str
    display: str
    env: Optional[str] = None
    region: Optional[str] = None


class Correlation(BaseModel):
    # webhook payloads carry PR numbers and deployment ids as integers
    model_config = ConfigDict(frozen=True, coerce_numbers_to_str=True)

    trace_id: Optional[str] = None
    commit_sha: Optional[str] = None
    pr_number: Optional[str] = None
    ticket_id: Optional[str] = None
    deployment_id: Optional[str] = None
    parent_event_id: Optional[str] = None


class Evidence(BaseModel):
    model_config = ConfigDict(frozen=True)

    raw_ref: str
    hash: str


class NormalizedEventBody(BaseModel):
    """Event as submitted by a caller, before an id is assigned."""

    model_config = ConfigDict(frozen=True)

    time: str
    source: Source
    kind: EventKind
    actor: Actor
    target: Target
    action: str
    outcome: Outcome
    correlation: Optional[Correlation] = None
    # opaque to the engine; only narrative renderers read it
    attributes: Optional[Dict[str, Any]] = None
    evidence: Optional[Evidence] = None


class NormalizedEvent(NormalizedEventBody):
    id: str


class GraphEdge(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    from_: str = Field(alias="from")
    to: str
    type: EdgeType


class EpisodeGraph(BaseModel):
    nodes: List[str] = Field(default_factory=list)
    edges: List[GraphEdge] = Field(default_factory=list)


class Episode(BaseModel):
    id: str
    type: EpisodeType
    start_time: str
    end_time: str
    primary_actor: Optional[Actor] = None
    primary_target: Optional[Target] = None
    events: List[str] = Field(default_factory=list)
    graph: EpisodeGraph = Field(default_factory=EpisodeGraph)


def to_payload(model: BaseModel) -> Dict[str, Any]:
    return model.model_dump(mode="json", by_alias=True)
