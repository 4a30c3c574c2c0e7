"""
Shared dependencies and helpers for API route modules.

The storage backend and the correlation engine are built once in the
application lifespan and kept on ``app.state``; routes receive them through
FastAPI dependencies rather than module globals.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Optional

from fastapi import HTTPException, Request

from engine.correlator import CorrelationEngine
from store.storage import Storage


def get_storage(request: Request) -> Storage:
    storage = getattr(request.app.state, "storage", None)
    if storage is None:
        raise HTTPException(status_code=503, detail="Storage not initialised")
    return storage


def get_engine(request: Request) -> CorrelationEngine:
    engine = getattr(request.app.state, "engine", None)
    if engine is None:
        raise HTTPException(status_code=503, detail="Correlation engine not initialised")
    return engine


def split_csv(value: Optional[str]) -> Optional[List[str]]:
    if not value:
        return None
    parts = [v.strip() for v in value.split(",") if v.strip()]
    return parts or None


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
