"""
Event ingestion and query routes. Ingested batches are stored and immediately correlated into episodes.

Copyright (c) 2026 Stefan Kumarasinghe
Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

import logging
from typing import Any, Dict, List, Optional, Union

from fastapi import APIRouter, Body, Depends, HTTPException

from api.requests import IngestEvent
from api.responses import IngestResponse
from api.routes.common import get_engine, get_storage, split_csv
from api.routes.exception import handle_exceptions
from config import settings
from engine.correlator import CorrelationEngine
from engine.ids import generate_id
from engine.models import NormalizedEvent, to_payload
from store.storage import Storage

log = logging.getLogger(__name__)

router = APIRouter(tags=["Events"])


def assign_ids(batch: List[IngestEvent]) -> List[NormalizedEvent]:
    return [
        NormalizedEvent.model_validate({**item.model_dump(), "id": generate_id()})
        for item in batch
    ]


@router.post("/events", status_code=201, summary="Ingest normalized events and correlate them into episodes")
@handle_exceptions
async def ingest_events(
    body: Union[List[IngestEvent], IngestEvent] = Body(...),
    storage: Storage = Depends(get_storage),
    engine: CorrelationEngine = Depends(get_engine),
) -> IngestResponse:
    batch = body if isinstance(body, list) else [body]
    if not batch:
        raise HTTPException(status_code=400, detail="No events in request body")
    if len(batch) > settings.ingest_max_batch:
        raise HTTPException(
            status_code=413,
            detail=f"Batch of {len(batch)} events exceeds the limit of {settings.ingest_max_batch}",
        )

    events = assign_ids(batch)
    await storage.save_events(events)
    episodes = await engine.correlate(events)
    log.info("Ingested %d events, %d episodes", len(events), len(episodes))
    return IngestResponse(
        ingested=len(events),
        events=[e.id for e in events],
        episodes=[e.id for e in episodes],
    )


@router.get("/events", summary="Query stored events")
@handle_exceptions
async def list_events(
    start_time: Optional[str] = None,
    end_time: Optional[str] = None,
    kind: Optional[str] = None,
    actor_id: Optional[str] = None,
    target_id: Optional[str] = None,
    trace_id: Optional[str] = None,
    commit_sha: Optional[str] = None,
    pr_number: Optional[str] = None,
    limit: Optional[int] = None,
    offset: int = 0,
    storage: Storage = Depends(get_storage),
) -> Dict[str, Any]:
    events = await storage.query_events(
        start_time=start_time,
        end_time=end_time,
        kind=split_csv(kind),
        actor_id=actor_id,
        target_id=target_id,
        trace_id=trace_id,
        commit_sha=commit_sha,
        pr_number=pr_number,
        limit=limit,
        offset=offset,
    )
    return {"events": [to_payload(e) for e in events], "count": len(events)}


@router.get("/events/{event_id}", summary="Fetch one event")
@handle_exceptions
async def get_event(event_id: str, storage: Storage = Depends(get_storage)) -> Dict[str, Any]:
    event = await storage.get_event(event_id)
    if event is None:
        raise HTTPException(status_code=404, detail="Event not found")
    return to_payload(event)
