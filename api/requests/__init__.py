from __future__ import annotations

from typing import Optional
from pydantic import BaseModel

from engine.models import NormalizedEventBody


class IngestEvent(NormalizedEventBody):
    """A normalized event as posted by an adapter; the id is assigned on ingest."""


class RecomputeRequest(BaseModel):
    start_time: Optional[str] = None
    end_time: Optional[str] = None
