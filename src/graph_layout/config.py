from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Literal, Optional, Union
import json

import yaml
from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


MAX_DIMS = 10
MIN_ACTIVE_DIMS = 3


class SimulationConfig(BaseModel):
    """Tunable scalars of one layout run.

    Instances are frozen; use ``model_copy(update=...)`` to derive variants.
    Fields accept both ``snake_case`` and the camelCase spelling
    (``edgeRestLength``) so configs written for other front ends load as-is.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    edge_strength: float = Field(0.1, ge=0)
    edge_rest_length: float = Field(1.0, gt=0)
    repel_strength: float = Field(0.1, ge=0)
    repel_distance: float = Field(2.0, ge=0)
    hierarchy_strength: float = Field(0.01, ge=0)
    hierarchy_distance: float = Field(1.0, ge=0)
    max_dims: int = Field(MAX_DIMS, ge=MIN_ACTIVE_DIMS + 1, le=MAX_DIMS)
    outer_iterations: int = Field(50, ge=1)
    inner_iterations: int = Field(10, ge=1)
    # Outer iterations for the final 3D phase; None reuses outer_iterations.
    final_outer_iterations: Optional[int] = Field(None, ge=1)
    seed: Optional[int] = None
    epsilon: float = Field(1e-3, gt=0)
    # Stretch ratio span over which edge colours saturate.
    compression_range: float = Field(0.5, gt=0, le=1.0)
    stretch_range: float = Field(1.0, gt=0)
    force_mode: Literal["sequential", "batched"] = "sequential"

    @model_validator(mode="after")
    def _cross_checks(self) -> "SimulationConfig":
        if self.repel_strength > 0 and self.repel_distance == 0:
            raise ValueError("repel_distance must be > 0 when repel_strength is set")
        return self

    @property
    def phase_dims(self) -> range:
        """Active dimension counts of the annealing schedule, highest first."""
        return range(self.max_dims - 1, MIN_ACTIVE_DIMS - 1, -1)

    def outer_iterations_for(self, dims: int) -> int:
        if dims == MIN_ACTIVE_DIMS and self.final_outer_iterations is not None:
            return self.final_outer_iterations
        return self.outer_iterations

    def total_frames(self) -> int:
        return sum(self.outer_iterations_for(d) for d in self.phase_dims)


def load_config(path: Union[str, Path, None], **overrides: Any) -> SimulationConfig:
    """
    Read a SimulationConfig from a JSON or YAML file.

    ``overrides`` (snake_case names, ``None`` values ignored) win over the
    file contents. With ``path=None`` only defaults and overrides apply.
    """
    data: Dict[str, Any] = {}
    if path is not None:
        p = Path(path)
        text = p.read_text(encoding="utf-8")
        if p.suffix.lower() in (".yaml", ".yml"):
            data = yaml.safe_load(text) or {}
        else:
            data = json.loads(text)
        if not isinstance(data, dict):
            raise ValueError(f"config file {p} must contain a mapping, got {type(data).__name__}")
    cfg = SimulationConfig.model_validate(data)
    updates = {k: v for k, v in overrides.items() if v is not None}
    if updates:
        cfg = SimulationConfig.model_validate({**cfg.model_dump(), **updates})
    return cfg
