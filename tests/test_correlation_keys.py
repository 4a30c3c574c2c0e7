"""
Test cases for correlation key extraction.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from conftest import make_event
from engine.correlation.keys import correlation_keys, primary_key, singleton_key
from engine.enums import EventKind
from engine.models import Correlation


def test_keys_follow_fixed_priority_order():
    event = make_event(
        "e1",
        instance="org/app",
        ticket_id="JIRA-1",
        trace_id="t1",
        commit_sha="abc",
        pr_number="42",
        deployment_id="d9",
    )
    assert correlation_keys(event) == [
        "deployment:d9",
        "pr:org/app:42",
        "commit:abc",
        "trace:t1",
        "ticket:JIRA-1",
    ]


def test_absent_and_empty_fields_are_omitted():
    event = make_event("e1", commit_sha="abc", trace_id="")
    assert correlation_keys(event) == ["commit:abc"]


def test_event_without_correlation_has_no_keys():
    event = make_event("e1")
    assert event.correlation is None
    assert correlation_keys(event) == []
    assert primary_key([]) is None
    assert singleton_key(event) == "event:e1"


def test_pr_key_is_scoped_to_source_instance():
    a = make_event("a", EventKind.PR_OPENED, instance="org/one", pr_number="7")
    b = make_event("b", EventKind.PR_OPENED, instance="org/two", pr_number="7")
    assert correlation_keys(a) != correlation_keys(b)
    no_instance = make_event("c", EventKind.PR_OPENED, pr_number="7")
    assert correlation_keys(no_instance) == ["pr::7"]


def test_extraction_is_deterministic():
    event = make_event("e1", deployment_id="d1", trace_id="t1")
    assert correlation_keys(event) == correlation_keys(event)
    assert primary_key(correlation_keys(event)) == "deployment:d1"


def test_numeric_pr_numbers_are_coerced_to_strings():
    corr = Correlation(pr_number=123, deployment_id=456)
    assert corr.pr_number == "123"
    assert corr.deployment_id == "456"
