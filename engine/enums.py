"""
Enumerations for event kinds, outcomes, episode types and causal edge types.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from enum import Enum


class SourceSystem(str, Enum):
    github = "github"
    kubernetes = "kubernetes"
    otel = "otel"
    iam = "iam"
    feature_flag = "feature_flag"
    custom = "custom"


class ActorType(str, Enum):
    user = "user"
    service = "service"
    system = "system"


class TargetType(str, Enum):
    service = "service"
    env = "env"
    resource = "resource"
    model = "model"
    feature = "feature"
    user = "user"


class EventKind(str, Enum):
    DEPLOYMENT = "DEPLOYMENT"
    FEATURE_FLAG = "FEATURE_FLAG"
    MODEL_DECISION = "MODEL_DECISION"
    ACCESS_GRANT = "ACCESS_GRANT"
    ACCESS_REVOKE = "ACCESS_REVOKE"
    INCIDENT = "INCIDENT"
    PR_MERGED = "PR_MERGED"
    PR_OPENED = "PR_OPENED"
    PR_APPROVED = "PR_APPROVED"
    CONFIG_CHANGE = "CONFIG_CHANGE"
    TRACE = "TRACE"
    CUSTOM = "CUSTOM"

    @property
    def is_pull_request(self) -> bool:
        return self.value.startswith("PR_")


class Outcome(str, Enum):
    SUCCESS = "SUCCESS"
    FAILURE = "FAILURE"
    UNKNOWN = "UNKNOWN"
    PENDING = "PENDING"


class EpisodeType(str, Enum):
    deployment = "DeploymentEpisode"
    flag = "FlagEpisode"
    access = "AccessEpisode"
    incident = "IncidentEpisode"
    pr_merge = "PRMergeEpisode"
    custom = "CustomEpisode"


class EdgeType(str, Enum):
    CAUSES = "CAUSES"
    TRIGGERS = "TRIGGERS"
    RELATES_TO = "RELATES_TO"
    FOLLOWS = "FOLLOWS"
