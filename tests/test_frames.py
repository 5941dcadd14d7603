import json

import numpy as np
import pytest

from graph_layout.attributes import NodeStyle
from graph_layout.frames import (
    COMPRESSED_COLOR,
    RELAXED_COLOR,
    STRETCHED_COLOR,
    build_frame,
    stretch_color,
    to_message,
)


@pytest.mark.parametrize(
    "distance, expected",
    [
        (1.0, RELAXED_COLOR),
        (0.5, COMPRESSED_COLOR),
        (0.0, COMPRESSED_COLOR),
        (2.0, STRETCHED_COLOR),
        (10.0, STRETCHED_COLOR),
        (1.5, (70, 100, 110)),
        (0.75, (110, 100, 0)),
    ],
)
def test_stretch_color(distance, expected):
    assert stretch_color(distance, 1.0, compression_range=0.5, stretch_range=1.0) == expected


def test_stretch_color_scales_with_rest_length():
    assert stretch_color(4.0, 2.0) == STRETCHED_COLOR
    assert stretch_color(2.0, 2.0) == RELAXED_COLOR


def _frame():
    positions = np.array([[0.0, 0.0, 0.0, 9.0], [3.0, 4.0, 0.0, -9.0]])
    styles = [NodeStyle((255, 0, 0), "first"), NodeStyle((0, 0, 255), "second")]
    return build_frame(0, 4, 2, positions, styles, [(0, 1), (1, 0)],
                       rest_length=5.0, compression_range=0.5, stretch_range=1.0)


def test_build_frame_drops_extra_dimensions():
    frame = _frame()
    assert frame.positions.shape == (2, 3)
    assert frame.phase_dims == 4 and frame.iteration == 2
    arrow = frame.arrows[0]
    assert arrow.origin == (0.0, 0.0, 0.0)
    assert arrow.vector == (3.0, 4.0, 0.0)
    assert arrow.length == pytest.approx(5.0)
    assert arrow.color == RELAXED_COLOR
    assert frame.arrows[1].vector == (-3.0, -4.0, 0.0)


def test_frame_owns_its_positions():
    positions = np.zeros((1, 4))
    frame = build_frame(0, 3, 0, positions, [NodeStyle((1, 2, 3), "n")], [],
                        rest_length=1.0, compression_range=0.5, stretch_range=1.0)
    positions[0, 0] = 7.0
    assert frame.positions[0, 0] == 0.0


def test_message_shape_is_json_ready():
    message = to_message(_frame())
    assert [n.index for n in message.nodes] == [0, 1]
    assert message.nodes[1].position == (3.0, 4.0, 0.0)
    assert message.nodes[1].label == "second"
    assert len(message.edges) == 2
    payload = json.loads(json.dumps(message.to_dict()))
    assert payload["nodes"][0]["color"] == [255, 0, 0]
    assert payload["edges"][0]["vector"] == [3.0, 4.0, 0.0]
    assert payload["phase_dims"] == 4
