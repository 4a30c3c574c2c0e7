"""
Constants and configuration for Narratrace.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

import os

from pydantic_settings import BaseSettings


REDIS_URL: str = os.getenv("REDIS_URL", "redis://localhost:6379/0")
EVENTS_TTL: int = int(os.getenv("EVENTS_TTL", "2592000"))
EPISODES_TTL: int = int(os.getenv("EPISODES_TTL", "2592000"))

NARRATRACE_HOST = os.getenv("NARRATRACE_HOST", "0.0.0.0")
NARRATRACE_PORT = int(os.getenv("NARRATRACE_PORT", "3000"))

# hard upper bound on events pulled from storage by a single recompute; the
# grouping pass is quadratic in batch size so this is also the cost ceiling
RECOMPUTE_EVENT_CAP: int = int(os.getenv("NARRATRACE_RECOMPUTE_EVENT_CAP", "10000"))

# rule 7 of the causal graph: same target and strictly closer than this
FOLLOWS_WINDOW_SECONDS: float = float(os.getenv("NARRATRACE_FOLLOWS_WINDOW_SECONDS", "300"))

# key prefix for everything written to redis
STORE_KEY_PREFIX = "nt"

# correlation key prefixes, in extraction priority order
KEY_DEPLOYMENT = "deployment"
KEY_PR = "pr"
KEY_COMMIT = "commit"
KEY_TRACE = "trace"
KEY_TICKET = "ticket"
KEY_EVENT = "event"


class Settings(BaseSettings):
    redis_url: str = REDIS_URL
    events_ttl: int = EVENTS_TTL
    episodes_ttl: int = EPISODES_TTL

    host: str = NARRATRACE_HOST
    port: int = NARRATRACE_PORT

    # correlation
    recompute_event_cap: int = RECOMPUTE_EVENT_CAP
    follows_window_seconds: float = FOLLOWS_WINDOW_SECONDS
    # legacy grouping is a single merge pass; closure switches to union-find
    correlation_transitive_closure: bool = False

    # ingestion
    ingest_max_batch: int = 1000

    # store
    store_redis_retry_cooldown_seconds: float = 10.0
    store_op_timeout_seconds: float = 0.5
    store_fallback_max_items: int = 100_000

    model_config = {
        "env_prefix": "NARRATRACE_",
        "extra": "ignore",
    }


settings = Settings()
