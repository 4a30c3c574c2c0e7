from __future__ import annotations

import json
import logging
from typing import Iterable, List, Optional, Sequence

from pydantic import ValidationError

from config import settings
from engine.models import NormalizedEvent, to_payload
from store import keys
from store.client import redis_get, redis_lrange, redis_mget, redis_rpush, redis_set

log = logging.getLogger(__name__)


def _deserialise(raw: Optional[str]) -> Optional[NormalizedEvent]:
    if not raw:
        return None
    try:
        return NormalizedEvent.model_validate(json.loads(raw))
    except (json.JSONDecodeError, ValidationError) as exc:
        log.debug("Skipping unreadable event payload: %s", exc)
        return None


async def save_many(events: Sequence[NormalizedEvent]) -> None:
    ttl = settings.events_ttl
    for event in events:
        await redis_set(keys.event(event.id), json.dumps(to_payload(event)), ttl=ttl)
    await redis_rpush(keys.event_index(), [e.id for e in events], ttl=ttl)


async def get(event_id: str) -> Optional[NormalizedEvent]:
    return _deserialise(await redis_get(keys.event(event_id)))


async def get_many(event_ids: Iterable[str]) -> List[NormalizedEvent]:
    ids = list(event_ids)
    raws = await redis_mget([keys.event(i) for i in ids])
    return [e for e in (_deserialise(raw) for raw in raws) if e is not None]


async def load_all() -> List[NormalizedEvent]:
    # the index may repeat an id when an event is re-ingested
    ids = list(dict.fromkeys(await redis_lrange(keys.event_index())))
    return await get_many(ids)


def matches(
    event: NormalizedEvent,
    start_time: Optional[str] = None,
    end_time: Optional[str] = None,
    kind: Optional[Sequence[str]] = None,
    actor_id: Optional[str] = None,
    target_id: Optional[str] = None,
    trace_id: Optional[str] = None,
    commit_sha: Optional[str] = None,
    pr_number: Optional[str] = None,
) -> bool:
    if start_time and event.time < start_time:
        return False
    if end_time and event.time > end_time:
        return False
    if kind and event.kind.value not in kind:
        return False
    if actor_id and event.actor.id != actor_id:
        return False
    if target_id and event.target.id != target_id:
        return False
    c = event.correlation
    if trace_id and (c is None or c.trace_id != trace_id):
        return False
    if commit_sha and (c is None or c.commit_sha != commit_sha):
        return False
    if pr_number and (c is None or c.pr_number != pr_number):
        return False
    return True


async def query(
    start_time: Optional[str] = None,
    end_time: Optional[str] = None,
    kind: Optional[Sequence[str]] = None,
    actor_id: Optional[str] = None,
    target_id: Optional[str] = None,
    trace_id: Optional[str] = None,
    commit_sha: Optional[str] = None,
    pr_number: Optional[str] = None,
    limit: Optional[int] = None,
    offset: int = 0,
) -> List[NormalizedEvent]:
    selected = [
        e for e in await load_all()
        if matches(e, start_time, end_time, kind, actor_id, target_id, trace_id, commit_sha, pr_number)
    ]
    selected.sort(key=lambda e: e.time)
    selected = selected[max(0, offset):]
    if limit is not None:
        selected = selected[:max(0, limit)]
    return selected
