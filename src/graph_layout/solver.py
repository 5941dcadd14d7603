# -*- coding: utf-8 -*-
"""
graph_layout.solver
~~~~~~~~~~~~~~~~~~~

Dimension-annealed force relaxation.

A LayoutSolver instance

* gives every node ``max_dims`` random coordinates in [-1, 1],
* runs one :class:`AnnealingPhase` per active dimension count, from
  ``max_dims - 1`` down to 3; during a phase only the first ``dims``
  coordinates move, the rest stay frozen where they were,
* within a phase runs ``outer_iterations`` outer iterations of
  ``inner_iterations`` relaxation steps (hierarchy -> repulsion -> spring)
  and yields one :class:`~graph_layout.frames.LayoutFrame` per outer iteration,
* stops for good after the 3D phase (state ``DONE``) or when the caller's
  cancel event is set before an outer iteration (state ``CANCELLED``).

Relaxing in many dimensions first and handing the layout down one dimension at
a time keeps it from locking into tangled local optima before it reaches 3D.

Example
-------
>>> from graph_layout import GraphModel, LayoutSolver, SimulationConfig
>>> model = GraphModel.from_mapping({"a": {}, "b": {"shape": "box"}}, [["a", "b"]])
>>> solver = LayoutSolver.from_model(model, SimulationConfig(seed=7, outer_iterations=5))
>>> for phase in solver.phases():
...     for frame in phase.frames():
...         pass                        # frame.positions -> (2, 3)
>>> solver.state
<SolverState.DONE: 'done'>
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List, Optional, Sequence, Tuple

import numpy as np

from . import forces
from .attributes import NodeStyle, PaletteCache, assign_styles
from .config import SimulationConfig
from .errors import SinkTransportError
from .frames import LayoutFrame, build_frame, to_message
from .graph_model import GraphModel, GraphSource
from .sinks import FrameSink

logger = logging.getLogger(__name__)


class SolverState(str, Enum):
    INITIALIZING = "initializing"
    ANNEALING = "annealing"
    DONE = "done"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class LayoutResult:
    state: SolverState
    frames_emitted: int
    phase_dims: Tuple[int, ...]
    positions: np.ndarray


class AnnealingPhase:
    """
    One ``AnnealingAtDims(dims)`` stage of a run.

    :meth:`frames` returns a lazy generator and may be called only once.
    """

    def __init__(self, solver: "LayoutSolver", dims: int, outer_iterations: int,
                 cancel: Optional[threading.Event] = None):
        self.solver = solver
        self.dims = dims
        self.outer_iterations = outer_iterations
        self._cancel = cancel
        self._started = False
        self.completed = 0
        self.exhausted = False

    def frames(self) -> Iterator[LayoutFrame]:
        if self._started:
            raise RuntimeError(f"phase at {self.dims} dims has already been iterated")
        self._started = True
        return self._run()

    def _run(self) -> Iterator[LayoutFrame]:
        solver = self.solver
        solver._enter_phase(self.dims)
        for iteration in range(self.outer_iterations):
            if self._cancel is not None and self._cancel.is_set():
                solver._mark_cancelled()
                break
            for _ in range(solver.config.inner_iterations):
                solver.step(self.dims)
            self.completed += 1
            yield solver._snapshot(self.dims, iteration)
        self.exhausted = True

    def __repr__(self) -> str:
        return f"AnnealingPhase(dims={self.dims}, outer_iterations={self.outer_iterations})"


class LayoutSolver:
    """
    Owns the position array of one layout run.

    Parameters
    ----------
    model : GraphModel
    styles : Sequence[NodeStyle]
        One style per node (see :func:`~graph_layout.attributes.assign_styles`).
    config : SimulationConfig
    rng : numpy.random.Generator, optional
        Source of the initial positions. Defaults to
        ``np.random.default_rng(config.seed)``; with ``seed=None`` every run
        starts, and therefore ends, differently.
    """

    def __init__(self, model: GraphModel, styles: Sequence[NodeStyle],
                 config: SimulationConfig, rng: Optional[np.random.Generator] = None):
        if len(styles) != model.node_count:
            raise ValueError(f"expected {model.node_count} node styles, got {len(styles)}")
        self.model = model
        self.styles: Tuple[NodeStyle, ...] = tuple(styles)
        self.config = config
        self.rng = rng if rng is not None else np.random.default_rng(config.seed)

        self._state = SolverState.INITIALIZING
        self._active_dims: Optional[int] = None
        self._dims_history: List[int] = []
        self._sequence = 0
        self._started = False
        self._positions = self.rng.uniform(-1.0, 1.0, size=(model.node_count, config.max_dims))

        if config.force_mode == "batched":
            self._hierarchy = forces.batched_hierarchy
            self._repulsion = forces.batched_repulsion
            self._springs = forces.batched_springs
        else:
            self._hierarchy = forces.apply_hierarchy
            self._repulsion = forces.apply_repulsion
            self._springs = forces.apply_springs

    @classmethod
    def from_model(cls, model: GraphModel, config: SimulationConfig,
                   rng: Optional[np.random.Generator] = None,
                   cache: Optional[PaletteCache] = None,
                   collector: Optional[List[str]] = None) -> "LayoutSolver":
        """
        Assign node styles, then build a solver sharing the same RNG.

        ``collector`` receives attribute problems in place of warnings
        (see :func:`~graph_layout.attributes.assign_styles`).
        """
        rng = rng if rng is not None else np.random.default_rng(config.seed)
        styles = assign_styles(model, rng, cache, collector)
        return cls(model, styles, config, rng)

    # --- properties ---------------------------------------------------------
    @property
    def state(self) -> SolverState:
        return self._state

    @property
    def active_dims(self) -> Optional[int]:
        """Dimensions currently relaxed; ``None`` before the first phase."""
        return self._active_dims

    @property
    def dims_history(self) -> Tuple[int, ...]:
        return tuple(self._dims_history)

    @property
    def positions(self) -> np.ndarray:
        """Read-only view of the full ``(n, max_dims)`` position array."""
        view = self._positions.view()
        view.flags.writeable = False
        return view

    # --- relaxation ---------------------------------------------------------
    def step(self, dims: int) -> None:
        """One inner iteration: hierarchy, repulsion, then springs."""
        cfg = self.config
        pos = self._positions
        edges = self.model.edges
        self._hierarchy(pos, edges, cfg.hierarchy_distance, cfg.hierarchy_strength)
        self._repulsion(pos, dims, cfg.repel_distance, cfg.repel_strength, cfg.epsilon)
        self._springs(pos, dims, edges, cfg.edge_strength, cfg.edge_rest_length, cfg.epsilon)

    # --- schedule -----------------------------------------------------------
    def phases(self, cancel: Optional[threading.Event] = None) -> Iterator[AnnealingPhase]:
        """
        Yield the annealing phases in order.

        A phase whose frames the caller did not consume is run to completion
        (frames discarded) before the next one starts, so the dimension count
        never goes back up. The solver can be driven only once.
        """
        if self._started:
            raise RuntimeError("solver has already been run; build a new one")
        self._started = True
        for dims in self.config.phase_dims:
            if self._state is SolverState.CANCELLED:
                return
            phase = AnnealingPhase(self, dims, self.config.outer_iterations_for(dims), cancel)
            yield phase
            if not phase._started:
                for _ in phase.frames():
                    pass
            elif not phase.exhausted and self._state is not SolverState.CANCELLED:
                raise RuntimeError(f"phase at {dims} dims was abandoned before completion")
            logger.info("Finished phase at %d dims (%d outer iterations)", dims, phase.completed)
        if self._state is not SolverState.CANCELLED:
            self._state = SolverState.DONE
            logger.info("Layout done after %d frames", self._sequence)

    def frames(self, cancel: Optional[threading.Event] = None) -> Iterator[LayoutFrame]:
        """All frames of the run, phase after phase."""
        for phase in self.phases(cancel):
            yield from phase.frames()

    def run(self, sink: FrameSink, cancel: Optional[threading.Event] = None) -> LayoutResult:
        """
        Drive the whole schedule, sending every frame to ``sink``.

        Raises
        ------
        SinkTransportError
            If the sink fails; any other exception from ``sink.send`` is
            wrapped. The run stops at that frame.
        """
        for frame in self.frames(cancel):
            message = to_message(frame)
            try:
                sink.send(message)
            except SinkTransportError:
                raise
            except Exception as e:
                raise SinkTransportError(f"sink rejected frame {frame.sequence}: {e}") from e
        return self.result()

    def result(self) -> LayoutResult:
        return LayoutResult(
            state=self._state,
            frames_emitted=self._sequence,
            phase_dims=self.dims_history,
            positions=np.array(self._positions[:, :3], copy=True),
        )

    # --- internals ----------------------------------------------------------
    def _enter_phase(self, dims: int) -> None:
        if self._active_dims is not None and dims > self._active_dims:
            raise RuntimeError(f"active dims cannot grow ({self._active_dims} -> {dims})")
        self._state = SolverState.ANNEALING
        self._active_dims = dims
        self._dims_history.append(dims)
        logger.info("Annealing at %d dims", dims)

    def _mark_cancelled(self) -> None:
        self._state = SolverState.CANCELLED
        logger.info("Layout cancelled after %d frames", self._sequence)

    def _snapshot(self, dims: int, iteration: int) -> LayoutFrame:
        cfg = self.config
        frame = build_frame(
            self._sequence, dims, iteration, self._positions, self.styles, self.model.edges,
            rest_length=cfg.edge_rest_length,
            compression_range=cfg.compression_range,
            stretch_range=cfg.stretch_range,
        )
        self._sequence += 1
        logger.debug("Frame %d (dims=%d, iteration=%d)", frame.sequence, dims, iteration)
        return frame

    def __repr__(self) -> str:
        return (f"LayoutSolver(nodes={self.model.node_count}, edges={self.model.edge_count}, "
                f"state={self._state.value}, active_dims={self._active_dims})")


def run_layout(source: GraphSource, config: SimulationConfig, sink: FrameSink,
               cancel: Optional[threading.Event] = None,
               rng: Optional[np.random.Generator] = None) -> LayoutResult:
    """
    Model, style and lay out ``source`` in one call.

    Model construction happens first, so a
    :class:`~graph_layout.errors.MalformedGraphError` reaches the caller
    before the sink sees a single frame.
    """
    model = GraphModel.from_source(source)
    return LayoutSolver.from_model(model, config, rng=rng).run(sink, cancel)
