from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from graph_layout.config import SimulationConfig


class LayoutRunIn(BaseModel):
    name: str = Field("layout", min_length=1, max_length=128)
    dot: str = Field(..., min_length=1, description="Graphviz DOT source")
    config: SimulationConfig = Field(default_factory=SimulationConfig)
    strict: bool = Field(False, description="Reject edges to undeclared nodes")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = (v or "").strip()
        if not v:
            raise ValueError("name is required")
        return v


class LayoutSummaryOut(BaseModel):
    id: str
    name: str
    state: str
    node_count: int
    edge_count: int
    frame_count: int
    phase_dims: List[int] = Field(default_factory=list)
    labels: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)


class LayoutListItem(BaseModel):
    id: str
    name: str
    state: str


class NodeRecordOut(BaseModel):
    index: int
    position: List[float]
    color: List[int]
    label: str


class EdgeRecordOut(BaseModel):
    origin: List[float]
    vector: List[float]
    color: List[int]


class FrameOut(BaseModel):
    sequence: int
    phase_dims: int
    iteration: int
    nodes: List[NodeRecordOut] = Field(default_factory=list)
    edges: List[EdgeRecordOut] = Field(default_factory=list)


class FramePageOut(BaseModel):
    id: str
    total: int
    start: int
    frames: List[FrameOut] = Field(default_factory=list)


class FigureOut(BaseModel):
    id: str
    figure: Dict[str, Any] = Field(default_factory=dict)
    frame: Optional[int] = None
