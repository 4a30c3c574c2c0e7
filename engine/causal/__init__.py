"""
Causal analysis inside an episode: pairwise relationship rules and the directed graph they produce.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from engine.causal.graph import CausalGraph, build_causal_graph, infer_relationship

__all__ = ["CausalGraph", "build_causal_graph", "infer_relationship"]
