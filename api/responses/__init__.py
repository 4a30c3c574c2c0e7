"""
Response models for API endpoints.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from typing import Any, Dict, List

from pydantic import BaseModel, Field


class IngestResponse(BaseModel):

    ingested: int
    events: List[str]
    episodes: List[str]


class RecomputeResponse(BaseModel):

    recomputed: int
    episodes: List[str]


class EvidenceBundle(BaseModel):

    episode: Dict[str, Any]
    events: List[Dict[str, Any]]
    evidence: Dict[str, Dict[str, str]] = Field(default_factory=dict)
    root_causes: List[str] = Field(default_factory=list)
    missing_events: List[str] = Field(default_factory=list)
    exported_at: str
