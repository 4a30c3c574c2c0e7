"""
Redis key layout for events and episodes.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from config import STORE_KEY_PREFIX


def event(event_id: str) -> str:
    return f"{STORE_KEY_PREFIX}:event:{event_id}"


def event_index() -> str:
    return f"{STORE_KEY_PREFIX}:events"


def episode(episode_id: str) -> str:
    return f"{STORE_KEY_PREFIX}:episode:{episode_id}"


def episode_index() -> str:
    return f"{STORE_KEY_PREFIX}:episodes"
