# -*- coding: utf-8 -*-
"""
graph_layout.dot_source
~~~~~~~~~~~~~~~~~~~~~~~

Read Graphviz DOT text into a :class:`~graph_layout.graph_model.GraphSource`.

Parsing is delegated to :mod:`pydot`; this module only walks the parsed tree:

* nodes of the top-level graph first, then nested subgraphs depth first,
  then edge statements (pydot already splits ``a -> b -> c`` into pairs),
* the ``node`` / ``edge`` / ``graph`` default-attribute statements are skipped,
* attribute values are passed through raw (quotes included); the attribute
  policy decides how to read them.

Usage
-----
>>> from graph_layout.dot_source import parse_dot
>>> src = parse_dot('digraph { a [shape=box]; a -> b -> c }')
>>> [n.identity for n in src.nodes]
['a', 'b', 'c']
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Union

import pydot

from .errors import MalformedGraphError
from .graph_model import EdgeStmt, GraphModel, GraphSource, NodeDecl, normalize_identity

logger = logging.getLogger(__name__)

# Statements pydot reports as nodes but which only carry defaults.
_DEFAULT_STATEMENTS = frozenset({"node", "edge", "graph"})


def _is_real_node(name: str) -> bool:
    key = normalize_identity(name)
    return bool(key) and key not in _DEFAULT_STATEMENTS and key != "\\n"


def _endpoint(raw, edge_repr: str) -> str:
    if isinstance(raw, str):
        return raw
    raise MalformedGraphError(f"subgraph endpoints are not supported (edge {edge_repr})")


def _walk(graph, nodes: List[NodeDecl], edges: List[EdgeStmt]) -> None:
    for node in graph.get_nodes():
        name = node.get_name()
        if not _is_real_node(name):
            continue
        attrs = tuple((str(k), str(v)) for k, v in node.get_attributes().items())
        nodes.append(NodeDecl(name, attrs))
    for sub in graph.get_subgraphs():
        _walk(sub, nodes, edges)
    for edge in graph.get_edges():
        edge_repr = f"{edge.get_source()} -> {edge.get_destination()}"
        src = _endpoint(edge.get_source(), edge_repr)
        dst = _endpoint(edge.get_destination(), edge_repr)
        edges.append(EdgeStmt((src, dst)))


def parse_dot(text: str, *, implicit_nodes: bool = True) -> GraphSource:
    """
    Parse DOT text into the ingestion contract.

    Parameters
    ----------
    text : str
        DOT source holding one graph (extra graphs are ignored with a warning).
    implicit_nodes : bool
        DOT declares nodes implicitly when an edge mentions them. When True,
        such endpoints are appended as attribute-less declarations. When
        False they are left undeclared and model construction rejects them.

    Raises
    ------
    MalformedGraphError
        On a DOT syntax error or a subgraph used as an edge endpoint.
    """
    try:
        graphs = pydot.graph_from_dot_data(text)
    except Exception as e:  # pyparsing reports syntax errors with its own types
        raise MalformedGraphError(f"cannot parse DOT input: {e}") from e
    if not graphs:
        raise MalformedGraphError("cannot parse DOT input: no graph found")
    if len(graphs) > 1:
        logger.warning("DOT input holds %d graphs; only the first is laid out", len(graphs))

    nodes: List[NodeDecl] = []
    edges: List[EdgeStmt] = []
    _walk(graphs[0], nodes, edges)

    if implicit_nodes:
        seen: Dict[str, None] = {normalize_identity(n.identity): None for n in nodes}
        for stmt in edges:
            for endpoint in stmt.endpoints:
                key = normalize_identity(endpoint)
                if key not in seen:
                    seen[key] = None
                    nodes.append(NodeDecl(endpoint))

    logger.debug("Parsed DOT: %d node declarations, %d edge statements", len(nodes), len(edges))
    return GraphSource(nodes=nodes, edges=edges)


def load_dot(path: Union[str, Path], *, implicit_nodes: bool = True) -> GraphModel:
    """Read a DOT file and build its :class:`GraphModel`."""
    text = Path(path).read_text(encoding="utf-8")
    return GraphModel.from_source(parse_dot(text, implicit_nodes=implicit_nodes))
