"""
Causal graph construction inside an episode: every ordered pair of events is run through a fixed list of rules and the first rule that matches becomes a typed, directed edge explaining why the two events are believed to be related.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from collections import defaultdict
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional, Set, Tuple

from config import settings
from engine.enums import EdgeType, EventKind
from engine.models import Correlation, EpisodeGraph, GraphEdge, NormalizedEvent

_EMPTY = Correlation()


def _corr(event: NormalizedEvent) -> Correlation:
    return event.correlation or _EMPTY


def _epoch_ms(value: str) -> Optional[float]:
    try:
        parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except (AttributeError, TypeError, ValueError):
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.timestamp() * 1000.0


def _merge_causes_deploy(earlier: NormalizedEvent, later: NormalizedEvent) -> Optional[EdgeType]:
    if earlier.kind == EventKind.PR_MERGED and later.kind == EventKind.DEPLOYMENT:
        # absent == absent counts as the same commit
        if _corr(earlier).commit_sha == _corr(later).commit_sha:
            return EdgeType.CAUSES
    return None


def _deploy_triggers_trace(earlier: NormalizedEvent, later: NormalizedEvent) -> Optional[EdgeType]:
    if earlier.kind == EventKind.DEPLOYMENT and later.kind == EventKind.TRACE:
        if _corr(earlier).deployment_id == _corr(later).deployment_id:
            return EdgeType.TRIGGERS
    return None


def _flag_triggers_trace(earlier: NormalizedEvent, later: NormalizedEvent) -> Optional[EdgeType]:
    if earlier.kind == EventKind.FEATURE_FLAG and later.kind == EventKind.TRACE:
        return EdgeType.TRIGGERS
    return None


def _pr_follows_pr(earlier: NormalizedEvent, later: NormalizedEvent) -> Optional[EdgeType]:
    if earlier.kind.is_pull_request and later.kind.is_pull_request:
        if _corr(earlier).pr_number == _corr(later).pr_number:
            return EdgeType.FOLLOWS
    return None


def _same_trace(earlier: NormalizedEvent, later: NormalizedEvent) -> Optional[EdgeType]:
    trace_id = _corr(earlier).trace_id
    if trace_id and trace_id == _corr(later).trace_id:
        return EdgeType.RELATES_TO
    return None


def _same_deployment(earlier: NormalizedEvent, later: NormalizedEvent) -> Optional[EdgeType]:
    deployment_id = _corr(earlier).deployment_id
    if deployment_id and deployment_id == _corr(later).deployment_id:
        return EdgeType.RELATES_TO
    return None


def _close_on_same_target(earlier: NormalizedEvent, later: NormalizedEvent) -> Optional[EdgeType]:
    if earlier.target.id != later.target.id:
        return None
    start = _epoch_ms(earlier.time)
    end = _epoch_ms(later.time)
    if start is None or end is None:
        return None
    if end - start < settings.follows_window_seconds * 1000.0:
        return EdgeType.FOLLOWS
    return None


Rule = Callable[[NormalizedEvent, NormalizedEvent], Optional[EdgeType]]

RULES: Tuple[Rule, ...] = (
    _merge_causes_deploy,
    _deploy_triggers_trace,
    _flag_triggers_trace,
    _pr_follows_pr,
    _same_trace,
    _same_deployment,
    _close_on_same_target,
)


def infer_relationship(earlier: NormalizedEvent, later: NormalizedEvent) -> Optional[EdgeType]:
    for rule in RULES:
        edge_type = rule(earlier, later)
        if edge_type is not None:
            return edge_type
    return None


class CausalGraph:
    def __init__(self, nodes: List[str]) -> None:
        self._nodes: List[str] = list(nodes)
        self._edges: List[GraphEdge] = []
        self._forward: Dict[str, List[GraphEdge]] = defaultdict(list)
        self._reverse: Dict[str, Set[str]] = defaultdict(set)

    def add_edge(self, cause: str, effect: str, edge_type: EdgeType) -> None:
        edge = GraphEdge(from_=cause, to=effect, type=edge_type)
        self._edges.append(edge)
        self._forward[cause].append(edge)
        self._reverse[effect].add(cause)

    @property
    def nodes(self) -> List[str]:
        return list(self._nodes)

    @property
    def edges(self) -> List[GraphEdge]:
        return list(self._edges)

    def root_causes(self) -> List[str]:
        """Connected nodes that nothing points at, in node order."""
        return [n for n in self._nodes if n in self._forward and n not in self._reverse]

    def effects_of(self, node: str) -> List[GraphEdge]:
        return list(self._forward.get(node, []))

    def to_model(self) -> EpisodeGraph:
        return EpisodeGraph(nodes=self.nodes, edges=self.edges)

    @classmethod
    def from_model(cls, graph: EpisodeGraph) -> CausalGraph:
        built = cls(graph.nodes)
        for edge in graph.edges:
            built.add_edge(edge.from_, edge.to, edge.type)
        return built


def build_causal_graph(events: List[NormalizedEvent]) -> CausalGraph:
    """Events must already be sorted ascending by time.

    Up to n*(n-1)/2 edges; redundant edges are kept.
    """
    graph = CausalGraph([e.id for e in events])
    for i, earlier in enumerate(events):
        for later in events[i + 1:]:
            edge_type = infer_relationship(earlier, later)
            if edge_type is not None:
                graph.add_edge(earlier.id, later.id, edge_type)
    return graph
