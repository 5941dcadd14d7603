# -*- coding: utf-8 -*-
"""
graph_layout.forces
~~~~~~~~~~~~~~~~~~~

The three displacement rules of the layout, each in two flavours:

* pairwise helpers (:func:`repulsion_step`, :func:`spring_step`) returning the
  displacement of the first point; the second point always receives the
  negation, so every pair interaction is antisymmetric,
* in-place passes over a position array. ``apply_*`` updates pairs one after
  another, each seeing the previous updates; ``batched_*`` evaluates every
  pair against one snapshot with NumPy broadcasting and sums the results.

Only the first ``dims`` columns of a position array are read or written.
"""

from __future__ import annotations

import math
from typing import Sequence, Tuple

import numpy as np

HIERARCHY_AXIS = 2


# --------------------------------------------------------------------------- #
# Pairwise rules
# --------------------------------------------------------------------------- #
def repulsion_step(a: np.ndarray, b: np.ndarray, repel_distance: float,
                   repel_strength: float, epsilon: float) -> np.ndarray:
    """Displacement of ``a`` away from ``b``; zero once they are ``repel_distance`` apart."""
    delta = a - b
    dist = math.sqrt(float(np.dot(delta, delta)))
    if dist >= repel_distance:
        return np.zeros_like(delta)
    m = min(repel_distance - dist, repel_strength) * 0.5 / max(dist, epsilon)
    return delta * m


def spring_step(a: np.ndarray, b: np.ndarray, edge_strength: float,
                rest_length: float, epsilon: float) -> np.ndarray:
    """Displacement of ``a`` pulling it towards (or pushing it from) ``b``."""
    delta = a - b
    dist = math.sqrt(float(np.dot(delta, delta)))
    m = edge_strength * (dist - rest_length) * -0.5 / max(dist, epsilon)
    return delta * m


def hierarchy_nudge(parent_z: float, child_z: float, hierarchy_distance: float,
                    hierarchy_strength: float) -> float:
    """Upward nudge of the parent (the child moves down by the same amount)."""
    if parent_z - child_z < hierarchy_distance:
        return hierarchy_strength
    return 0.0


# --------------------------------------------------------------------------- #
# Sequential passes
# --------------------------------------------------------------------------- #
def apply_hierarchy(pos: np.ndarray, edges: Sequence[Tuple[int, int]],
                    hierarchy_distance: float, hierarchy_strength: float) -> None:
    if hierarchy_strength == 0:
        return
    z = HIERARCHY_AXIS
    for p, c in edges:
        if p == c:
            continue
        nudge = hierarchy_nudge(pos[p, z], pos[c, z], hierarchy_distance, hierarchy_strength)
        pos[p, z] += nudge
        pos[c, z] -= nudge


def apply_repulsion(pos: np.ndarray, dims: int, repel_distance: float,
                    repel_strength: float, epsilon: float) -> None:
    if repel_strength == 0 or repel_distance == 0:
        return
    n = pos.shape[0]
    for i in range(n):
        for j in range(i + 1, n):
            step = repulsion_step(pos[i, :dims], pos[j, :dims], repel_distance, repel_strength, epsilon)
            pos[i, :dims] += step
            pos[j, :dims] -= step


def apply_springs(pos: np.ndarray, dims: int, edges: Sequence[Tuple[int, int]],
                  edge_strength: float, rest_length: float, epsilon: float) -> None:
    if edge_strength == 0:
        return
    for s, t in edges:
        if s == t:
            continue
        step = spring_step(pos[s, :dims], pos[t, :dims], edge_strength, rest_length, epsilon)
        pos[s, :dims] += step
        pos[t, :dims] -= step


# --------------------------------------------------------------------------- #
# Batched passes
# --------------------------------------------------------------------------- #
def _edge_arrays(edges: Sequence[Tuple[int, int]]) -> Tuple[np.ndarray, np.ndarray]:
    arr = np.asarray(edges, dtype=np.intp).reshape(-1, 2)
    arr = arr[arr[:, 0] != arr[:, 1]]
    return arr[:, 0], arr[:, 1]


def batched_hierarchy(pos: np.ndarray, edges: Sequence[Tuple[int, int]],
                      hierarchy_distance: float, hierarchy_strength: float) -> None:
    if hierarchy_strength == 0:
        return
    src, dst = _edge_arrays(edges)
    z = pos[:, HIERARCHY_AXIS]
    nudge = np.where(z[src] - z[dst] < hierarchy_distance, hierarchy_strength, 0.0)
    dz = np.zeros_like(z)
    np.add.at(dz, src, nudge)
    np.add.at(dz, dst, -nudge)
    pos[:, HIERARCHY_AXIS] += dz


def batched_repulsion(pos: np.ndarray, dims: int, repel_distance: float,
                      repel_strength: float, epsilon: float) -> None:
    if repel_strength == 0 or repel_distance == 0:
        return
    x = pos[:, :dims]
    diff = x[:, None, :] - x[None, :, :]
    dist = np.sqrt(np.einsum("ijk,ijk->ij", diff, diff))
    close = dist < repel_distance
    np.fill_diagonal(close, False)
    m = np.where(
        close,
        np.minimum(repel_distance - dist, repel_strength) * 0.5 / np.maximum(dist, epsilon),
        0.0,
    )
    pos[:, :dims] += np.einsum("ij,ijk->ik", m, diff)


def batched_springs(pos: np.ndarray, dims: int, edges: Sequence[Tuple[int, int]],
                    edge_strength: float, rest_length: float, epsilon: float) -> None:
    if edge_strength == 0:
        return
    src, dst = _edge_arrays(edges)
    if src.size == 0:
        return
    x = pos[:, :dims]
    delta = x[src] - x[dst]
    dist = np.linalg.norm(delta, axis=1)
    m = edge_strength * (dist - rest_length) * -0.5 / np.maximum(dist, epsilon)
    step = delta * m[:, None]
    disp = np.zeros_like(x)
    np.add.at(disp, src, step)
    np.add.at(disp, dst, -step)
    pos[:, :dims] += disp
