"""
Correlation logic for grouping normalized system events into episodes: key extraction, order-dependent grouping with a single merge pass, and episode type classification.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from engine.correlation.keys import correlation_keys
from engine.correlation.grouping import EventGroup, group_events
from engine.correlation.classifier import classify, classify_events

__all__ = ["correlation_keys", "EventGroup", "group_events", "classify", "classify_events"]
