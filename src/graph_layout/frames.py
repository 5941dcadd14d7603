# -*- coding: utf-8 -*-
"""
graph_layout.frames
~~~~~~~~~~~~~~~~~~~

Frame snapshots produced by the solver and their conversion to the message
shape handed to sinks.

A :class:`LayoutFrame` holds the 3D positions of every node (index order),
the fixed node colours/labels and one :class:`EdgeArrow` per edge. Arrow
colours encode the edge's current stretch ratio ``distance / rest_length``:

* compressed edges blend green -> red as the ratio drops towards
  ``1 - compression_range``,
* stretched edges blend green -> purple as it rises towards
  ``1 + stretch_range``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Sequence, Tuple

import numpy as np

from .attributes import NodeStyle
from .utils import RGB, json_safe, lerp_rgb

Point3 = Tuple[float, float, float]

# --------------------------------------------------------------------------- #
# Edge colours
# --------------------------------------------------------------------------- #
RELAXED_COLOR: RGB = (0, 200, 0)
COMPRESSED_COLOR: RGB = (220, 0, 0)
STRETCHED_COLOR: RGB = (140, 0, 220)


def stretch_color(distance: float, rest_length: float, *,
                  compression_range: float = 0.5, stretch_range: float = 1.0) -> RGB:
    """Colour of an edge of length ``distance`` whose spring rests at ``rest_length``."""
    ratio = distance / rest_length
    if ratio < 1.0:
        return lerp_rgb(RELAXED_COLOR, COMPRESSED_COLOR, (1.0 - ratio) / compression_range)
    return lerp_rgb(RELAXED_COLOR, STRETCHED_COLOR, (ratio - 1.0) / stretch_range)


# --------------------------------------------------------------------------- #
# Frames
# --------------------------------------------------------------------------- #
@dataclass(frozen=True)
class EdgeArrow:
    source: int
    target: int
    origin: Point3
    vector: Point3
    color: RGB

    @property
    def length(self) -> float:
        return float(np.linalg.norm(self.vector))


@dataclass(frozen=True)
class LayoutFrame:
    """One snapshot; ``positions`` is an ``(n, 3)`` array owned by the frame."""
    sequence: int
    phase_dims: int
    iteration: int
    positions: np.ndarray
    colors: Tuple[RGB, ...]
    labels: Tuple[str, ...]
    arrows: Tuple[EdgeArrow, ...]

    @property
    def node_count(self) -> int:
        return int(self.positions.shape[0])


def build_frame(sequence: int, phase_dims: int, iteration: int, positions: np.ndarray,
                styles: Sequence[NodeStyle], edges: Sequence[Tuple[int, int]], *,
                rest_length: float, compression_range: float,
                stretch_range: float) -> LayoutFrame:
    """Snapshot the first three coordinates of ``positions`` into a frame."""
    pts = np.array(positions[:, :3], dtype=float, copy=True)
    arrows: List[EdgeArrow] = []
    for s, t in edges:
        vec = pts[t] - pts[s]
        dist = float(np.linalg.norm(vec))
        arrows.append(EdgeArrow(
            source=s,
            target=t,
            origin=tuple(float(c) for c in pts[s]),
            vector=tuple(float(c) for c in vec),
            color=stretch_color(dist, rest_length,
                                compression_range=compression_range,
                                stretch_range=stretch_range),
        ))
    return LayoutFrame(
        sequence=sequence,
        phase_dims=phase_dims,
        iteration=iteration,
        positions=pts,
        colors=tuple(s.color for s in styles),
        labels=tuple(s.label for s in styles),
        arrows=tuple(arrows),
    )


# --------------------------------------------------------------------------- #
# Sink message shape
# --------------------------------------------------------------------------- #
@dataclass(frozen=True)
class NodeRecord:
    index: int
    position: Point3
    color: RGB
    label: str


@dataclass(frozen=True)
class EdgeRecord:
    origin: Point3
    vector: Point3
    color: RGB


@dataclass(frozen=True)
class FrameMessage:
    """Everything a sink receives for one layout iteration."""
    sequence: int
    phase_dims: int
    iteration: int
    nodes: Tuple[NodeRecord, ...]
    edges: Tuple[EdgeRecord, ...]

    def to_dict(self) -> Dict[str, Any]:
        return json_safe(self)


def to_message(frame: LayoutFrame) -> FrameMessage:
    nodes = tuple(
        NodeRecord(i, tuple(float(c) for c in frame.positions[i]), frame.colors[i], frame.labels[i])
        for i in range(frame.node_count)
    )
    edges = tuple(EdgeRecord(a.origin, a.vector, a.color) for a in frame.arrows)
    return FrameMessage(frame.sequence, frame.phase_dims, frame.iteration, nodes, edges)
