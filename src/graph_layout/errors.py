# -*- coding: utf-8 -*-
"""
graph_layout.errors
~~~~~~~~~~~~~~~~~~~

Error and warning types raised across the package.

* :class:`MalformedGraphError` - the input graph cannot be turned into a model
  (unknown edge endpoint, short edge statement, DOT syntax error). Fatal, raised
  before any layout work starts.
* :class:`AttributeExtractionWarning` - a node attribute could not be read as
  expected; a documented fallback is used and the run continues.
* :class:`SinkTransportError` - a frame could not be delivered to a sink. Fatal
  for the run, never retried here.
"""

from __future__ import annotations

from typing import Optional, Sequence


class MalformedGraphError(ValueError):
    """Raised when a graph description references nodes it never declares."""

    def __init__(self, message: str, *, identity: Optional[str] = None,
                 endpoints: Optional[Sequence[str]] = None):
        super().__init__(message)
        self.identity = identity
        self.endpoints = tuple(endpoints) if endpoints is not None else None


class AttributeExtractionWarning(UserWarning):
    """Emitted when a label or shape attribute is malformed."""


class SinkTransportError(RuntimeError):
    """Raised when a frame sink fails to accept a frame."""
