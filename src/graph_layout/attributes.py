# -*- coding: utf-8 -*-
"""
graph_layout.attributes
~~~~~~~~~~~~~~~~~~~~~~~

Display colour and label for every node, computed once before layout.

Colour
    Nodes sharing a ``shape`` attribute value share a colour: the first node
    seen with a shape draws a random colour and records it in the
    :class:`PaletteCache`; later nodes with that shape reuse it. Nodes with no
    ``shape`` get an independent random colour.

Label
    Taken from the ``label`` attribute with :func:`extract_label`, which strips
    the path prefix and quoting that graph tools put around labels
    (``"path/to/node"`` -> ``node``). Nodes without a label use their identity.

Malformed attribute text falls back and never aborts a run. The problem is
reported as an :class:`~graph_layout.errors.AttributeExtractionWarning`, or,
when the caller passes a ``collector`` list, appended to that list instead so
concurrent runs do not share the process-wide warning filters.

Example
-------
>>> import numpy as np
>>> from graph_layout.graph_model import GraphModel
>>> from graph_layout.attributes import assign_styles
>>> model = GraphModel.from_mapping({"a": {"shape": "box"}, "b": {"shape": "box"}}, [])
>>> a, b = assign_styles(model, np.random.default_rng(0))
>>> a.color == b.color
True
"""

from __future__ import annotations

import logging
import warnings
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import numpy as np

from .errors import AttributeExtractionWarning
from .graph_model import GraphModel, Node
from .utils import RGB, rgb_to_hex

logger = logging.getLogger(__name__)

SHAPE_ATTRIBUTE = "shape"
LABEL_ATTRIBUTE = "label"


@dataclass(frozen=True)
class NodeStyle:
    color: RGB
    label: str

    @property
    def hex_color(self) -> str:
        return rgb_to_hex(self.color)


@dataclass
class PaletteCache:
    """Per-run mapping ``shape value -> colour``; pass a fresh one per run."""
    colors: Dict[str, RGB] = field(default_factory=dict)

    def __contains__(self, shape: str) -> bool:
        return shape in self.colors

    def __len__(self) -> int:
        return len(self.colors)


def random_color(rng: np.random.Generator) -> RGB:
    r, g, b = rng.integers(0, 256, size=3)
    return int(r), int(g), int(b)


def _warn(message: str, collector: Optional[List[str]] = None) -> None:
    logger.warning(message)
    if collector is not None:
        collector.append(message)
    else:
        warnings.warn(message, AttributeExtractionWarning, stacklevel=3)


# --------------------------------------------------------------------------- #
# Label extraction
# --------------------------------------------------------------------------- #
def extract_label(text: str) -> str:
    """
    Cut the display label out of raw ``label`` attribute text.

    start: one past the last ``/``; failing that one past the first ``"``;
    failing that 0. end: the last ``"``, or the end of the text. After a
    ``/``, an opening ``"`` left strictly between start and end moves start
    past it.

    >>> extract_label('"path/to/node"')
    'node'
    >>> extract_label('foo/bar"baz"')
    'baz'
    >>> extract_label('"onlyquotes"')
    'onlyquotes'
    >>> extract_label('"a"b"')
    'a"b'
    >>> extract_label('plain')
    'plain'

    Raises
    ------
    ValueError
        If the end index falls before the start index (e.g. ``'a"b/c'``).
    """
    slash = text.rfind("/")
    if slash != -1:
        start = slash + 1
    else:
        quote = text.find('"')
        start = quote + 1 if quote != -1 else 0

    last_quote = text.rfind('"')
    end = last_quote if last_quote != -1 else len(text)
    if end < start:
        raise ValueError(f"label end {end} precedes start {start} in {text!r}")

    if slash != -1:
        inner = text.find('"', start, end)
        if inner != -1:
            start = inner + 1
    return text[start:end]


def _shape_key(node: Node, collector: Optional[List[str]] = None) -> Optional[str]:
    if not node.has_attribute(SHAPE_ATTRIBUTE):
        return None
    raw = node.attribute(SHAPE_ATTRIBUTE)
    s = raw.strip()
    if len(s) >= 2 and s[0] == '"' and s[-1] == '"':
        return s[1:-1]
    if s.count('"') % 2:
        _warn(f"Node '{node.identity}': unbalanced quoting in shape {raw!r}, using raw text", collector)
    return s


def node_label(node: Node, collector: Optional[List[str]] = None) -> str:
    if not node.has_attribute(LABEL_ATTRIBUTE):
        return node.identity
    raw = node.attribute(LABEL_ATTRIBUTE)
    try:
        return extract_label(raw)
    except ValueError as e:
        _warn(f"Node '{node.identity}': malformed label ({e}), using identity", collector)
        return node.identity


def node_color(node: Node, rng: np.random.Generator, cache: PaletteCache,
               collector: Optional[List[str]] = None) -> RGB:
    shape = _shape_key(node, collector)
    if shape is None:
        return random_color(rng)
    if shape not in cache.colors:
        cache.colors[shape] = random_color(rng)
    return cache.colors[shape]


def assign_styles(model: GraphModel, rng: np.random.Generator,
                  cache: Optional[PaletteCache] = None,
                  collector: Optional[List[str]] = None) -> List[NodeStyle]:
    """
    Compute one :class:`NodeStyle` per node, in index order.

    Parameters
    ----------
    model : GraphModel
    rng : numpy.random.Generator
        Source of random colours; seed it for reproducible palettes.
    cache : PaletteCache, optional
        Shape palette; a fresh one is created when omitted.
    collector : list of str, optional
        Receives attribute problems instead of ``warnings.warn``.
    """
    cache = PaletteCache() if cache is None else cache
    styles = [NodeStyle(node_color(n, rng, cache, collector), node_label(n, collector))
              for n in model.nodes]
    logger.debug("Assigned styles to %d nodes (%d shape colours)", len(styles), len(cache))
    return styles
