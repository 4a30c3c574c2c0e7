"""
Identifier generation for events and episodes.

Identifiers are 26-character Crockford base32 strings: a 48-bit millisecond
timestamp followed by 80 random bits, so they sort lexically by creation
time across processes.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import os
import time
from typing import Optional

_ALPHABET = "0123456789ABCDEFGHJKMNPQRSTVWXYZ"
_TIME_CHARS = 10
_RANDOM_CHARS = 16


def _encode(value: int, length: int) -> str:
    chars = []
    for _ in range(length):
        value, rem = divmod(value, 32)
        chars.append(_ALPHABET[rem])
    return "".join(reversed(chars))


def generate_id(timestamp_ms: Optional[int] = None) -> str:
    if timestamp_ms is None:
        timestamp_ms = time.time_ns() // 1_000_000
    randomness = int.from_bytes(os.urandom(10), "big")
    return _encode(timestamp_ms & ((1 << 48) - 1), _TIME_CHARS) + _encode(randomness, _RANDOM_CHARS)


def id_timestamp_ms(identifier: str) -> int:
    value = 0
    for ch in identifier[:_TIME_CHARS].upper():
        value = value * 32 + _ALPHABET.index(ch)
    return value
