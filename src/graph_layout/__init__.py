"""
graph_layout
~~~~~~~~~~~~

Dimension-annealed 3D force layout for directed graphs.

This package turns a graph (nodes, edges, attributes) into 3D coordinates by
relaxing spring, repulsion and hierarchy forces in many dimensions and
annealing down to three, streaming a frame per iteration to a sink.
"""

from ._version import __version__

# Public API
from .errors import MalformedGraphError, AttributeExtractionWarning, SinkTransportError
from .config import SimulationConfig, load_config
from .graph_model import GraphModel, GraphSource, NodeDecl, EdgeStmt, Node, normalize_identity
from .dot_source import parse_dot, load_dot
from .attributes import NodeStyle, PaletteCache, assign_styles, extract_label
from .frames import LayoutFrame, EdgeArrow, FrameMessage, NodeRecord, EdgeRecord, stretch_color, to_message
from .sinks import FrameSink, RecordingSink, JsonLinesSink, PlotlySink
from .solver import LayoutSolver, AnnealingPhase, SolverState, LayoutResult, run_layout
from .visualize import build_figure


__all__ = [
    "__version__",
    "MalformedGraphError",
    "AttributeExtractionWarning",
    "SinkTransportError",
    "SimulationConfig",
    "load_config",
    "GraphModel",
    "GraphSource",
    "NodeDecl",
    "EdgeStmt",
    "Node",
    "normalize_identity",
    "parse_dot",
    "load_dot",
    "NodeStyle",
    "PaletteCache",
    "assign_styles",
    "extract_label",
    "LayoutFrame",
    "EdgeArrow",
    "FrameMessage",
    "NodeRecord",
    "EdgeRecord",
    "stretch_color",
    "to_message",
    "FrameSink",
    "RecordingSink",
    "JsonLinesSink",
    "PlotlySink",
    "LayoutSolver",
    "AnnealingPhase",
    "SolverState",
    "LayoutResult",
    "run_layout",
    "build_figure",
]
