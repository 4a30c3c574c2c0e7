from __future__ import annotations

import json
import logging
from typing import List, Optional, Sequence

from pydantic import ValidationError

from config import settings
from engine.models import Episode, to_payload
from store import keys
from store.client import redis_get, redis_lrange, redis_mget, redis_rpush, redis_set

log = logging.getLogger(__name__)


def _deserialise(raw: Optional[str]) -> Optional[Episode]:
    if not raw:
        return None
    try:
        return Episode.model_validate(json.loads(raw))
    except (json.JSONDecodeError, ValidationError) as exc:
        log.debug("Skipping unreadable episode payload: %s", exc)
        return None


async def save(episode: Episode) -> None:
    ttl = settings.episodes_ttl
    await redis_set(keys.episode(episode.id), json.dumps(to_payload(episode)), ttl=ttl)
    await redis_rpush(keys.episode_index(), [episode.id], ttl=ttl)


async def get(episode_id: str) -> Optional[Episode]:
    return _deserialise(await redis_get(keys.episode(episode_id)))


async def load_all() -> List[Episode]:
    ids = list(dict.fromkeys(await redis_lrange(keys.episode_index())))
    raws = await redis_mget([keys.episode(i) for i in ids])
    return [e for e in (_deserialise(raw) for raw in raws) if e is not None]


async def query(
    start_time: Optional[str] = None,
    end_time: Optional[str] = None,
    type: Optional[Sequence[str]] = None,
    limit: Optional[int] = None,
    offset: int = 0,
) -> List[Episode]:
    selected: List[Episode] = []
    for episode in await load_all():
        if start_time and episode.end_time < start_time:
            continue
        if end_time and episode.start_time > end_time:
            continue
        if type and episode.type.value not in type:
            continue
        selected.append(episode)

    selected.sort(key=lambda e: e.start_time, reverse=True)
    selected = selected[max(0, offset):]
    if limit is not None:
        selected = selected[:max(0, limit)]
    return selected
