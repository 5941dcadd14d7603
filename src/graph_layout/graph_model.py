# -*- coding: utf-8 -*-
"""
graph_layout.graph_model
~~~~~~~~~~~~~~~~~~~~~~~~

Normalized, read-only representation of a directed graph.

The ingestion side hands over a :class:`GraphSource` (node declarations with
ordered attributes, plus edge statements that may be chains). A
:class:`GraphModel` is built from it exactly once:

* nodes are indexed densely in **first-seen order**; repeated declarations of
  the same identity merge their attributes into the first entry,
* every edge statement of ``k`` endpoints becomes ``k - 1`` index pairs
  (multi-edges and self-loops are kept),
* every endpoint must resolve to a declared node, otherwise
  :class:`~graph_layout.errors.MalformedGraphError` is raised and no model is
  returned.

Example
-------
>>> from graph_layout.graph_model import GraphSource, NodeDecl, EdgeStmt, GraphModel
>>> src = GraphSource(
...     nodes=[NodeDecl("a"), NodeDecl("b", [("shape", "box")]), NodeDecl("c")],
...     edges=[EdgeStmt(["a", "b", "c"])],
... )
>>> model = GraphModel.from_source(src)
>>> model.edges
((0, 1), (1, 2))
>>> model.index_of("b:port")
1
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Sequence, Tuple

from .errors import MalformedGraphError

logger = logging.getLogger(__name__)

Attributes = Tuple[Tuple[str, str], ...]


def normalize_identity(raw: str) -> str:
    """
    Fold a DOT-style node reference onto its canonical key.

    Surrounding double quotes are stripped and a ``:port`` or
    ``:port:compass`` suffix is dropped (``"a":p1:n`` -> ``a``).
    """
    s = str(raw).strip()
    if s.startswith('"'):
        close = s.find('"', 1)
        if close != -1:
            # quoted id, port (if any) follows the closing quote
            return s[1:close]
    return s.split(":", 1)[0].strip()


# --------------------------------------------------------------------------- #
# Ingestion contract
# --------------------------------------------------------------------------- #
@dataclass(frozen=True)
class NodeDecl:
    """One node declaration: identity plus ordered ``(name, value)`` attributes."""
    identity: str
    attributes: Sequence[Tuple[str, str]] = ()


@dataclass(frozen=True)
class EdgeStmt:
    """An edge statement; ``a -> b -> c`` is ``EdgeStmt(["a", "b", "c"])``."""
    endpoints: Sequence[str]


@dataclass
class GraphSource:
    nodes: List[NodeDecl] = field(default_factory=list)
    edges: List[EdgeStmt] = field(default_factory=list)


# --------------------------------------------------------------------------- #
# Model
# --------------------------------------------------------------------------- #
@dataclass(frozen=True)
class Node:
    index: int
    identity: str
    attributes: Attributes = ()

    def attribute(self, name: str, default=None):
        for key, value in self.attributes:
            if key == name:
                return value
        return default

    def has_attribute(self, name: str) -> bool:
        return any(key == name for key, _ in self.attributes)


class GraphModel:
    """
    Immutable node/edge model with dense integer indices.

    Parameters
    ----------
    nodes : Sequence[Node]
        Nodes whose ``index`` fields form ``range(len(nodes))`` in order.
    edges : Sequence[Tuple[int, int]]
        ``(source, target)`` index pairs.

    Use :meth:`from_source` rather than the constructor for untrusted input.
    """

    def __init__(self, nodes: Sequence[Node], edges: Sequence[Tuple[int, int]]):
        self._nodes: Tuple[Node, ...] = tuple(nodes)
        for i, node in enumerate(self._nodes):
            if node.index != i:
                raise ValueError(f"node '{node.identity}' has index {node.index}, expected {i}")
        n = len(self._nodes)
        for s, t in edges:
            if not (0 <= s < n and 0 <= t < n):
                raise MalformedGraphError(f"edge ({s}, {t}) is outside node range [0, {n})")
        self._edges: Tuple[Tuple[int, int], ...] = tuple((int(s), int(t)) for s, t in edges)
        self._index: Dict[str, int] = {node.identity: node.index for node in self._nodes}

    # --- construction -------------------------------------------------------
    @classmethod
    def from_source(cls, source: GraphSource) -> "GraphModel":
        """Validate and index a :class:`GraphSource`; raise on unknown endpoints."""
        order: List[str] = []
        merged: Dict[str, Dict[str, str]] = {}
        for decl in source.nodes:
            key = normalize_identity(decl.identity)
            if not key:
                raise MalformedGraphError("node declaration with empty identity", identity=decl.identity)
            if key not in merged:
                merged[key] = {}
                order.append(key)
            for name, value in decl.attributes:
                merged[key][str(name)] = str(value)

        index = {key: i for i, key in enumerate(order)}
        edges: List[Tuple[int, int]] = []
        for stmt in source.edges:
            endpoints = [normalize_identity(e) for e in stmt.endpoints]
            if len(endpoints) < 2:
                raise MalformedGraphError(
                    f"edge statement needs at least 2 endpoints, got {list(stmt.endpoints)}",
                    endpoints=stmt.endpoints,
                )
            for key, raw in zip(endpoints, stmt.endpoints):
                if key not in index:
                    raise MalformedGraphError(
                        f"edge {' -> '.join(map(str, stmt.endpoints))} references "
                        f"undeclared node '{raw}'",
                        identity=str(raw),
                        endpoints=stmt.endpoints,
                    )
            chain = [index[k] for k in endpoints]
            edges.extend(zip(chain[:-1], chain[1:]))

        nodes = [Node(i, key, tuple(merged[key].items())) for i, key in enumerate(order)]
        model = cls(nodes, edges)
        logger.info("Built graph model: %d nodes, %d edges", model.node_count, model.edge_count)
        return model

    @classmethod
    def from_mapping(cls, nodes: Mapping[str, Mapping[str, str]],
                     edges: Sequence[Sequence[str]]) -> "GraphModel":
        """Shortcut: ``{"a": {"shape": "box"}, "b": {}}`` plus endpoint lists."""
        source = GraphSource(
            nodes=[NodeDecl(k, tuple(attrs.items())) for k, attrs in nodes.items()],
            edges=[EdgeStmt(list(e)) for e in edges],
        )
        return cls.from_source(source)

    # --- accessors ----------------------------------------------------------
    @property
    def nodes(self) -> Tuple[Node, ...]:
        return self._nodes

    @property
    def edges(self) -> Tuple[Tuple[int, int], ...]:
        return self._edges

    @property
    def node_count(self) -> int:
        return len(self._nodes)

    @property
    def edge_count(self) -> int:
        return len(self._edges)

    def index_of(self, identity: str) -> int:
        """Index of a node by (un-normalized) identity; ``KeyError`` if unknown."""
        return self._index[normalize_identity(identity)]

    def __contains__(self, identity: object) -> bool:
        return isinstance(identity, str) and normalize_identity(identity) in self._index

    def __len__(self) -> int:
        return len(self._nodes)

    def __repr__(self) -> str:
        return f"GraphModel(nodes={self.node_count}, edges={self.edge_count})"
