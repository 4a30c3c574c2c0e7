"""
Test Suite for Episode Type Classification

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

import pytest

from engine.correlation.classifier import classify
from engine.enums import EpisodeType, EventKind as K


@pytest.mark.parametrize(
    "kinds, expected",
    [
        ({K.DEPLOYMENT, K.ACCESS_GRANT}, EpisodeType.deployment),
        ({K.DEPLOYMENT, K.FEATURE_FLAG, K.INCIDENT, K.PR_MERGED}, EpisodeType.deployment),
        ({K.FEATURE_FLAG, K.TRACE}, EpisodeType.flag),
        ({K.ACCESS_REVOKE, K.INCIDENT}, EpisodeType.access),
        ({K.ACCESS_GRANT}, EpisodeType.access),
        ({K.INCIDENT, K.PR_MERGED}, EpisodeType.incident),
        ({K.PR_MERGED, K.PR_OPENED}, EpisodeType.pr_merge),
        ({K.PR_OPENED, K.PR_APPROVED}, EpisodeType.custom),
        ({K.TRACE, K.CONFIG_CHANGE, K.MODEL_DECISION, K.CUSTOM}, EpisodeType.custom),
        (set(), EpisodeType.custom),
    ],
)
def test_classify_priority(kinds, expected):
    assert classify(kinds) == expected


def test_episode_type_values_are_wire_names():
    assert [t.value for t in EpisodeType] == [
        "DeploymentEpisode",
        "FlagEpisode",
        "AccessEpisode",
        "IncidentEpisode",
        "PRMergeEpisode",
        "CustomEpisode",
    ]
