"""
Pytest configuration and shared fixtures.

This file provides:
- Small graph models used across the suite
- Fast SimulationConfig presets (few phases, few iterations)
"""

import sys
from pathlib import Path

import numpy as np
import pytest

# Prefer the local source tree over any installed copy
SRC_DIR = Path(__file__).resolve().parent.parent / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from graph_layout.config import SimulationConfig
from graph_layout.graph_model import GraphModel


PIPELINE_DOT = """
digraph pipeline {
    node [shape=ellipse];
    parse [shape=box, label="stages/parse"];
    lower [shape=box];
    emit;
    subgraph cluster_backend {
        codegen [shape=diamond];
        link;
    }
    parse -> lower -> codegen -> link;
    lower:out -> emit;
}
"""


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def fast_config():
    """Two phases (4 dims, then 3) with a handful of iterations each."""
    return SimulationConfig(max_dims=5, outer_iterations=4, inner_iterations=3, seed=11)


@pytest.fixture
def chain_model():
    return GraphModel.from_mapping(
        {"a": {"shape": "box"}, "b": {}, "c": {"shape": "box", "label": '"x/y/c_label"'}},
        [["a", "b", "c"], ["c", "c"]],
    )


@pytest.fixture
def pipeline_dot():
    return PIPELINE_DOT


@pytest.fixture
def dot_file(tmp_path):
    path = tmp_path / "pipeline.dot"
    path.write_text(PIPELINE_DOT, encoding="utf-8")
    return path
