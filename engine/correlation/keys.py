"""
Correlation key extraction: turns the correlation bag of a normalized event into the ordered list of string keys the grouping pass compares.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from typing import List, Optional

from config import KEY_COMMIT, KEY_DEPLOYMENT, KEY_EVENT, KEY_PR, KEY_TICKET, KEY_TRACE
from engine.models import NormalizedEvent


def correlation_keys(event: NormalizedEvent) -> List[str]:
    keys: List[str] = []
    c = event.correlation
    if c is None:
        return keys

    if c.deployment_id:
        keys.append(f"{KEY_DEPLOYMENT}:{c.deployment_id}")
    if c.pr_number:
        # PR numbers are only unique per repository
        instance = event.source.instance or ""
        keys.append(f"{KEY_PR}:{instance}:{c.pr_number}")
    if c.commit_sha:
        keys.append(f"{KEY_COMMIT}:{c.commit_sha}")
    if c.trace_id:
        keys.append(f"{KEY_TRACE}:{c.trace_id}")
    if c.ticket_id:
        keys.append(f"{KEY_TICKET}:{c.ticket_id}")

    return keys


def primary_key(keys: List[str]) -> Optional[str]:
    return keys[0] if keys else None


def singleton_key(event: NormalizedEvent) -> str:
    return f"{KEY_EVENT}:{event.id}"
