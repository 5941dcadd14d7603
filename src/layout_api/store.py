from __future__ import annotations

import json
import logging
import threading
import uuid
from typing import Any, Dict, List

from .schemas import (
    FigureOut,
    FrameOut,
    FramePageOut,
    LayoutListItem,
    LayoutRunIn,
    LayoutSummaryOut,
)

from graph_layout.dot_source import parse_dot
from graph_layout.graph_model import GraphModel
from graph_layout.sinks import RecordingSink
from graph_layout.solver import LayoutSolver
from graph_layout.visualize import build_figure

logger = logging.getLogger(__name__)


class InMemoryStore:
    """Finished layout runs kept for the lifetime of the process."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._layouts: Dict[str, Dict[str, Any]] = {}

    # ---------------- Helpers ---------------- #
    def _get_rec(self, layout_id: str) -> Dict[str, Any]:
        with self._lock:
            rec = self._layouts.get(layout_id)
        if rec is None:
            raise KeyError("layout not found")
        return rec

    @staticmethod
    def _summary(layout_id: str, rec: Dict[str, Any]) -> LayoutSummaryOut:
        model: GraphModel = rec["model"]
        return LayoutSummaryOut(
            id=layout_id,
            name=rec["name"],
            state=rec["result"].state.value,
            node_count=model.node_count,
            edge_count=model.edge_count,
            frame_count=len(rec["messages"]),
            phase_dims=list(rec["result"].phase_dims),
            labels=list(rec["labels"]),
            warnings=list(rec["warnings"]),
        )

    # Layout runs
    def run_layout(self, payload: LayoutRunIn) -> LayoutSummaryOut:
        """Parse, lay out and store a graph; MalformedGraphError propagates."""
        model = GraphModel.from_source(parse_dot(payload.dot, implicit_nodes=not payload.strict))
        problems: List[str] = []
        solver = LayoutSolver.from_model(model, payload.config, collector=problems)
        sink = RecordingSink()
        result = solver.run(sink)
        sink.close()

        layout_id = uuid.uuid4().hex
        rec = {
            "name": payload.name,
            "model": model,
            "labels": [s.label for s in solver.styles],
            "messages": sink.messages,
            "result": result,
            "warnings": problems,
        }
        with self._lock:
            self._layouts[layout_id] = rec
        logger.info("Stored layout %s (%s): %d frames", layout_id, payload.name, len(sink.messages))
        return self._summary(layout_id, rec)

    def list_layouts(self) -> List[LayoutListItem]:
        with self._lock:
            items = list(self._layouts.items())
        return [LayoutListItem(id=k, name=v["name"], state=v["result"].state.value) for k, v in items]

    def get_layout(self, layout_id: str) -> LayoutSummaryOut:
        return self._summary(layout_id, self._get_rec(layout_id))

    def get_frames(self, layout_id: str, start: int = 0, limit: int = 50) -> FramePageOut:
        messages = self._get_rec(layout_id)["messages"]
        page = messages[start:start + limit]
        return FramePageOut(
            id=layout_id,
            total=len(messages),
            start=start,
            frames=[FrameOut.model_validate(m.to_dict()) for m in page],
        )

    def get_figure(self, layout_id: str) -> FigureOut:
        rec = self._get_rec(layout_id)
        messages = rec["messages"]
        if not messages:
            raise ValueError("layout produced no frames")
        fig = build_figure(messages, title=rec["name"])
        return FigureOut(id=layout_id, figure=json.loads(fig.to_json()), frame=messages[-1].sequence)

    def delete_layout(self, layout_id: str) -> bool:
        with self._lock:
            return self._layouts.pop(layout_id, None) is not None


store = InMemoryStore()
