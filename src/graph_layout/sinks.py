# -*- coding: utf-8 -*-
"""
graph_layout.sinks
~~~~~~~~~~~~~~~~~~

Frame sinks: where the solver delivers one :class:`~graph_layout.frames.FrameMessage`
per layout iteration. Delivery is fire-and-forget; a sink that cannot accept a
frame raises :class:`~graph_layout.errors.SinkTransportError`.
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import IO, List, Optional, Union

import plotly.graph_objects as go

from .errors import SinkTransportError
from .frames import FrameMessage
from .visualize import build_figure

logger = logging.getLogger(__name__)


class FrameSink(ABC):
    """Abstract base for frame consumers."""

    @abstractmethod
    def send(self, message: FrameMessage) -> None:
        """Accept one frame."""
        pass

    def close(self) -> None:
        """Flush/release resources once the run is over."""
        pass

    def __enter__(self) -> "FrameSink":
        return self

    def __exit__(self, *exc) -> None:
        self.close()


class RecordingSink(FrameSink):
    """Keep every message in memory."""

    def __init__(self):
        self.messages: List[FrameMessage] = []
        self.closed = False

    def send(self, message: FrameMessage) -> None:
        self.messages.append(message)

    def close(self) -> None:
        self.closed = True

    def __len__(self) -> int:
        return len(self.messages)


class JsonLinesSink(FrameSink):
    """
    Write each frame as one JSON object per line.

    Parameters
    ----------
    target : str | Path | text stream
        A path is opened (and closed by :meth:`close`); a stream is used as-is.

    Raises
    ------
    SinkTransportError
        If the path cannot be opened for writing.
    """

    def __init__(self, target: Union[str, Path, IO[str]]):
        if isinstance(target, (str, Path)):
            try:
                self._stream: IO[str] = open(target, "w", encoding="utf-8")
            except OSError as e:
                raise SinkTransportError(f"cannot open {target} for frames: {e}") from e
            self._owns_stream = True
        else:
            self._stream = target
            self._owns_stream = False
        self.sent = 0

    def send(self, message: FrameMessage) -> None:
        try:
            self._stream.write(json.dumps(message.to_dict()) + "\n")
        except (OSError, ValueError) as e:
            raise SinkTransportError(f"failed to write frame {message.sequence}: {e}") from e
        self.sent += 1

    def close(self) -> None:
        try:
            self._stream.flush()
            if self._owns_stream:
                self._stream.close()
        except (OSError, ValueError) as e:
            raise SinkTransportError(f"failed to close frame stream: {e}") from e


class PlotlySink(FrameSink):
    """Collect frames and render them as an animated 3D Plotly figure."""

    def __init__(self, title: str = "Graph layout", html_path: Optional[Union[str, Path]] = None):
        self.title = title
        self.html_path = html_path
        self.messages: List[FrameMessage] = []

    def send(self, message: FrameMessage) -> None:
        self.messages.append(message)

    def figure(self) -> go.Figure:
        return build_figure(self.messages, title=self.title)

    def close(self) -> None:
        if self.html_path is None or not self.messages:
            return
        try:
            self.figure().write_html(str(self.html_path))
        except OSError as e:
            raise SinkTransportError(f"failed to write {self.html_path}: {e}") from e
        logger.info("Wrote %d frames to %s", len(self.messages), self.html_path)
