"""
Test cases for episode assembly: primary actor/target selection with stable tie-breaking, time bounds and event ordering.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

import pytest

from conftest import make_event
from engine.enums import EpisodeType
from engine.episodes.assembler import assemble_episode, primary_by_count
from engine.models import EpisodeGraph


def test_primary_by_count_prefers_highest_count():
    assert primary_by_count(["b", "a", "a", "c"], key=lambda v: v) == "a"


def test_primary_by_count_ties_break_to_first_seen_not_alphabetical():
    assert primary_by_count(["zed", "amy", "amy", "zed"], key=lambda v: v) == "zed"


def test_primary_by_count_empty():
    assert primary_by_count([], key=lambda v: v) is None


def test_assemble_episode_bounds_and_primaries():
    events = [
        make_event("e3", time="2024-01-15T10:10:00Z", actor_id="ci", target_id="api"),
        make_event("e1", time="2024-01-15T10:00:00Z", actor_id="bob", target_id="web"),
        make_event("e2", time="2024-01-15T10:05:00Z", actor_id="ci", target_id="web"),
    ]
    graph = EpisodeGraph(nodes=["e1", "e2", "e3"])
    episode = assemble_episode(events, EpisodeType.custom, graph)

    assert episode.start_time == "2024-01-15T10:00:00Z"
    assert episode.end_time == "2024-01-15T10:10:00Z"
    assert episode.events == ["e1", "e2", "e3"]
    assert episode.primary_actor.id == "ci"
    assert episode.primary_target.id == "web"
    assert episode.primary_actor.display == "Ci"
    assert len(episode.id) == 26


def test_assemble_episode_tie_uses_iteration_order_of_given_events():
    events = [
        make_event("x", time="2024-01-15T10:05:00Z", actor_id="late-actor"),
        make_event("y", time="2024-01-15T10:00:00Z", actor_id="early-actor"),
    ]
    episode = assemble_episode(events, EpisodeType.custom, EpisodeGraph(nodes=["y", "x"]))
    assert episode.primary_actor.id == "late-actor"


def test_assemble_episode_uses_given_id_and_rejects_empty_group():
    episode = assemble_episode([make_event("e")], EpisodeType.custom, EpisodeGraph(nodes=["e"]), episode_id="fixed")
    assert episode.id == "fixed"
    with pytest.raises(ValueError):
        assemble_episode([], EpisodeType.custom, EpisodeGraph())
