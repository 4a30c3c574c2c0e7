"""
Episode query, evidence export and recompute routes.

Copyright (c) 2026 Stefan Kumarasinghe
Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, HTTPException

from api.requests import RecomputeRequest
from api.responses import EvidenceBundle, RecomputeResponse
from api.routes.common import get_engine, get_storage, split_csv, utc_now_iso
from api.routes.exception import handle_exceptions
from engine.causal.graph import CausalGraph
from engine.correlator import CorrelationEngine
from engine.models import Episode, to_payload
from store.storage import Storage

router = APIRouter(tags=["Episodes"])


async def _require_episode(storage: Storage, episode_id: str) -> Episode:
    episode = await storage.get_episode(episode_id)
    if episode is None:
        raise HTTPException(status_code=404, detail="Episode not found")
    return episode


@router.get("/episodes", summary="Query episodes, newest first")
@handle_exceptions
async def list_episodes(
    start_time: Optional[str] = None,
    end_time: Optional[str] = None,
    type: Optional[str] = None,
    limit: Optional[int] = None,
    offset: int = 0,
    storage: Storage = Depends(get_storage),
) -> Dict[str, Any]:
    episodes = await storage.query_episodes(
        start_time=start_time,
        end_time=end_time,
        type=split_csv(type),
        limit=limit,
        offset=offset,
    )
    return {"episodes": [to_payload(e) for e in episodes], "count": len(episodes)}


@router.post("/episodes/recompute", summary="Regroup stored events of a window into new episodes")
@handle_exceptions
async def recompute_episodes(
    req: Optional[RecomputeRequest] = Body(default=None),
    engine: CorrelationEngine = Depends(get_engine),
) -> RecomputeResponse:
    req = req or RecomputeRequest()
    episodes = await engine.recompute(start_time=req.start_time, end_time=req.end_time)
    return RecomputeResponse(recomputed=len(episodes), episodes=[e.id for e in episodes])


@router.get("/episodes/{episode_id}", summary="Fetch an episode with its events")
@handle_exceptions
async def get_episode(episode_id: str, storage: Storage = Depends(get_storage)) -> Dict[str, Any]:
    episode = await _require_episode(storage, episode_id)
    events = await storage.get_episode_events(episode.id)
    return {**to_payload(episode), "_events": [to_payload(e) for e in events]}


@router.get("/episodes/{episode_id}/evidence", summary="Export the evidence bundle backing an episode")
@handle_exceptions
async def export_evidence(episode_id: str, storage: Storage = Depends(get_storage)) -> EvidenceBundle:
    episode = await _require_episode(storage, episode_id)
    events = await storage.get_episode_events(episode.id)

    found = {e.id for e in events}
    evidence = {
        e.id: {"raw_ref": e.evidence.raw_ref, "hash": e.evidence.hash}
        for e in events
        if e.evidence is not None
    }
    return EvidenceBundle(
        episode=to_payload(episode),
        events=[to_payload(e) for e in events],
        evidence=evidence,
        root_causes=CausalGraph.from_model(episode.graph).root_causes(),
        missing_events=[i for i in episode.events if i not in found],
        exported_at=utc_now_iso(),
    )
