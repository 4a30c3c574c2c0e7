"""
Entry point for the Narratrace correlation API server.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import uvicorn
from fastapi import FastAPI

from api.routes import router
from config import settings
from engine.correlator import CorrelationEngine
from store.client import close_redis, get_redis, is_using_fallback
from store.storage import KeyValueStorage, Storage

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    stream=sys.stdout,
)
log = logging.getLogger(__name__)


def build_components(app: FastAPI, storage: Optional[Storage] = None) -> CorrelationEngine:
    storage = storage or KeyValueStorage()
    engine = CorrelationEngine(storage)
    app.state.storage = storage
    app.state.engine = engine
    return engine


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    build_components(app)
    await get_redis()
    log.info(
        "Correlation engine ready (store=%s, recompute cap=%d, transitive closure=%s)",
        "fallback" if is_using_fallback() else "redis",
        settings.recompute_event_cap,
        settings.correlation_transitive_closure,
    )
    try:
        yield
    finally:
        app.state.engine = None
        app.state.storage = None
        await close_redis()


app = FastAPI(
    title="Narratrace",
    description="Correlates deployment, pull request, feature flag, trace and access events into explainable episodes.",
    version="1.0.0",
    lifespan=lifespan,
)

app.include_router(router, prefix="/api/v1")


if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
        log_level="info",
        access_log=True,
    )
