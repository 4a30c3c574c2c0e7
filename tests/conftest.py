import os
import sys
import pytest

# ensure workspace root is on sys.path so our application packages can be imported
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from engine.enums import ActorType, EventKind, Outcome, SourceSystem, TargetType
from engine.models import Actor, Correlation, NormalizedEvent, Source, Target
from store.client import reset_fallback


@pytest.fixture(autouse=True)
def clear_fallback(monkeypatch):
    """Force the store onto the in-memory fallback and wipe it around each test."""
    reset_fallback()

    import store.client as client

    async def no_redis():
        return None

    monkeypatch.setattr(client, "get_redis", no_redis)

    yield

    reset_fallback()


def make_event(
    event_id,
    kind=EventKind.CUSTOM,
    time="2024-01-15T10:00:00Z",
    actor_id="alice",
    target_id="app",
    instance=None,
    **correlation,
):
    return NormalizedEvent(
        id=event_id,
        time=time,
        source=Source(system=SourceSystem.github, adapter="github", instance=instance),
        kind=kind,
        actor=Actor(type=ActorType.user, id=actor_id, display=actor_id.title()),
        target=Target(type=TargetType.service, id=target_id, display=target_id),
        action="test",
        outcome=Outcome.SUCCESS,
        correlation=Correlation(**correlation) if correlation else None,
    )


class MemoryStorage:
    """Records what the engine hands to storage; no persistence semantics."""

    def __init__(self, events=None, fail_on_save=None):
        self.events = list(events or [])
        self.saved = []
        self.queries = []
        self._fail_on_save = fail_on_save

    async def query_events(self, **kwargs):
        self.queries.append(kwargs)
        limit = kwargs.get("limit")
        return self.events[:limit] if limit is not None else list(self.events)

    async def save_episode(self, episode):
        if self._fail_on_save is not None and len(self.saved) == self._fail_on_save:
            raise RuntimeError("disk full")
        self.saved.append(episode)


@pytest.fixture
def event_factory():
    return make_event
