"""
Health check and store statistics routes.

Copyright (c) 2026 Stefan Kumarasinghe
Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends

from api.routes.common import get_storage, utc_now_iso
from api.routes.exception import handle_exceptions
from store import client as store_client
from store.storage import Storage

router = APIRouter(tags=["Health"])


@router.get("/health")
@handle_exceptions
async def health() -> Dict[str, Any]:
    await store_client.get_redis()
    return {
        "status": "ok",
        "store": "fallback" if store_client.is_using_fallback() else "redis",
        "timestamp": utc_now_iso(),
    }


@router.get("/stats", summary="Event and episode counts held by the store")
@handle_exceptions
async def stats(storage: Storage = Depends(get_storage)) -> Dict[str, Any]:
    return {**await storage.stats(), "timestamp": utc_now_iso()}
