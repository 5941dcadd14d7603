# -*- coding: utf-8 -*-
"""
graph_layout.utils
~~~~~~~~~~~~~~~~~~

Utilities shared across the package.
"""

from __future__ import annotations
from typing import Any, Mapping, Tuple
import dataclasses
import math
import numpy as np

RGB = Tuple[int, int, int]


def json_safe(obj: Any, *, max_depth: int = 20) -> Any:
    """Recursively convert objects to JSON-serializable forms.

    - NumPy scalars/arrays become Python numbers/lists.
    - Dataclasses become dicts, tuples become lists.
    - NaN/inf become None.
    - Anything else falls back to str(...) after max_depth.
    """
    if max_depth < 0:
        return str(obj)

    # primitives
    if obj is None or isinstance(obj, (bool, int, str)):
        return obj
    if isinstance(obj, float):
        return None if (math.isnan(obj) or math.isinf(obj)) else obj

    # numpy numbers/arrays
    if isinstance(obj, (np.integer,)):
        return int(obj)
    if isinstance(obj, (np.floating,)):
        f = float(obj)
        return None if (math.isnan(f) or math.isinf(f)) else f
    if isinstance(obj, np.ndarray):
        return json_safe(obj.tolist(), max_depth=max_depth - 1)

    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return {f.name: json_safe(getattr(obj, f.name), max_depth=max_depth - 1)
                for f in dataclasses.fields(obj)}

    # mappings / sequences
    if isinstance(obj, Mapping):
        return {str(k): json_safe(v, max_depth=max_depth - 1) for k, v in obj.items()}
    if isinstance(obj, (list, tuple, set)):
        return [json_safe(v, max_depth=max_depth - 1) for v in obj]

    # last resort
    return str(obj)


def rgb_to_hex(color: RGB) -> str:
    """``(255, 0, 16)`` -> ``"#ff0010"``."""
    r, g, b = (int(c) for c in color)
    return f"#{r:02x}{g:02x}{b:02x}"


def lerp_rgb(start: RGB, end: RGB, t: float) -> RGB:
    """Per-channel linear blend between two 8-bit colours, ``t`` clamped to [0, 1]."""
    t = min(max(float(t), 0.0), 1.0)
    return tuple(int(round(a + (b - a) * t)) for a, b in zip(start, end))  # type: ignore[return-value]
