"""
Test Suite for Identifier Generation

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from engine.ids import generate_id, id_timestamp_ms


def test_ids_are_unique_and_26_chars():
    ids = {generate_id() for _ in range(500)}
    assert len(ids) == 500
    assert all(len(i) == 26 for i in ids)


def test_ids_sort_by_creation_time():
    earlier = generate_id(timestamp_ms=1_705_312_800_000)
    later = generate_id(timestamp_ms=1_705_312_800_001)
    assert earlier < later


def test_timestamp_round_trips_through_id():
    assert id_timestamp_ms(generate_id(timestamp_ms=1_705_312_800_123)) == 1_705_312_800_123
