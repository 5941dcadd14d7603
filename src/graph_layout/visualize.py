# -*- coding: utf-8 -*-
"""
graph_layout.visualize
~~~~~~~~~~~~~~~~~~~~~~

Animated Plotly rendering of a layout run.

Quickstart
----------
>>> from graph_layout import GraphModel, LayoutSolver, SimulationConfig, PlotlySink
>>> model = GraphModel.from_mapping({"a": {}, "b": {}}, [["a", "b"]])
>>> sink = PlotlySink()
>>> LayoutSolver.from_model(model, SimulationConfig(seed=1, outer_iterations=2)).run(sink)
>>> fig = sink.figure()          # fig.write_html("layout.html")
"""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

import plotly.graph_objects as go

from .frames import FrameMessage
from .utils import rgb_to_hex

NODE_SIZE = 6
EDGE_WIDTH = 4
FRAME_DURATION_MS = 80


def _node_trace(message: FrameMessage) -> go.Scatter3d:
    xs, ys, zs = zip(*(n.position for n in message.nodes)) if message.nodes else ((), (), ())
    return go.Scatter3d(
        x=list(xs),
        y=list(ys),
        z=list(zs),
        mode="markers+text",
        text=[n.label for n in message.nodes],
        textposition="top center",
        marker=dict(size=NODE_SIZE, color=[rgb_to_hex(n.color) for n in message.nodes]),
        name="nodes",
        hoverinfo="text",
    )


def _edge_traces(message: FrameMessage) -> List[go.Scatter3d]:
    traces = []
    for i, e in enumerate(message.edges):
        end = tuple(o + v for o, v in zip(e.origin, e.vector))
        traces.append(go.Scatter3d(
            x=[e.origin[0], end[0]],
            y=[e.origin[1], end[1]],
            z=[e.origin[2], end[2]],
            mode="lines+markers",
            line=dict(color=rgb_to_hex(e.color), width=EDGE_WIDTH),
            # marker only on the head end to show direction
            marker=dict(size=[0, 3], color=rgb_to_hex(e.color), symbol="diamond"),
            name=f"edge {i}",
            showlegend=False,
            hoverinfo="skip",
        ))
    return traces


def _frame_data(message: FrameMessage) -> list:
    return [_node_trace(message), *_edge_traces(message)]


def _axis_range(messages: Sequence[FrameMessage], axis: int) -> Tuple[float, float]:
    values = [n.position[axis] for m in messages for n in m.nodes]
    if not values:
        return (-1.0, 1.0)
    lo, hi = min(values), max(values)
    pad = max((hi - lo) * 0.05, 0.5)
    return (lo - pad, hi + pad)


def build_figure(messages: Sequence[FrameMessage], title: str = "Graph layout",
                 path: Optional[str] = None) -> go.Figure:
    """
    Build an animated 3D figure, one animation frame per message.

    Parameters
    ----------
    messages : Sequence[FrameMessage]
        Frames in emission order; the last one is shown initially.
    title : str
    path : Optional[str]
        If given, the figure is also written as HTML.

    Returns
    -------
    go.Figure
    """
    if not messages:
        raise ValueError("at least one frame is required to build a figure")

    frames = [go.Frame(data=_frame_data(m), name=str(m.sequence)) for m in messages]
    fig = go.Figure(data=_frame_data(messages[-1]), frames=frames)

    steps = [
        dict(
            method="animate",
            args=[[str(m.sequence)], dict(mode="immediate", frame=dict(duration=0, redraw=True))],
            label=f"{m.phase_dims}d:{m.iteration}",
        )
        for m in messages
    ]
    fig.update_layout(
        title=title,
        height=800,
        showlegend=False,
        scene=dict(
            xaxis=dict(range=_axis_range(messages, 0), autorange=False),
            yaxis=dict(range=_axis_range(messages, 1), autorange=False),
            zaxis=dict(range=_axis_range(messages, 2), autorange=False),
            aspectmode="cube",
        ),
        updatemenus=[dict(
            type="buttons",
            showactive=False,
            buttons=[dict(
                label="Play",
                method="animate",
                args=[None, dict(frame=dict(duration=FRAME_DURATION_MS, redraw=True), fromcurrent=True)],
            )],
        )],
        sliders=[dict(active=len(messages) - 1, steps=steps, currentvalue=dict(prefix="frame "))],
    )

    if path is not None:
        fig.write_html(path)

    return fig
