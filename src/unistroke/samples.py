"""Built-in sample gestures.

Each sample is a plain function returning raw points; ``SAMPLE_GESTURES``
lists them explicitly, and its order is the library order (and so the
tie-break order) of ``RecognitionEngine.with_defaults()``.
"""

from __future__ import annotations

import math
from typing import Callable

import numpy as np


def _polyline(*vertices: tuple[float, float]) -> np.ndarray:
    return np.array(vertices, dtype=np.float64)


def circle(num_points: int = 64) -> np.ndarray:
    """Closed counter-clockwise circle starting at angle 0."""
    angles = np.linspace(0.0, 2.0 * math.pi, num_points)
    return np.column_stack([np.cos(angles), np.sin(angles)])


def triangle() -> np.ndarray:
    return _polyline((0.0, 1.0), (0.5, 0.0), (1.0, 1.0), (0.0, 1.0))


def rectangle() -> np.ndarray:
    return _polyline((0.0, 0.0), (0.0, 1.0), (1.5, 1.0), (1.5, 0.0), (0.0, 0.0))


def check() -> np.ndarray:
    return _polyline((0.0, 0.6), (0.35, 1.0), (1.0, 0.0))


def caret() -> np.ndarray:
    return _polyline((0.0, 1.0), (0.5, 0.0), (1.0, 1.0))


def v() -> np.ndarray:
    return _polyline((0.0, 0.0), (0.5, 1.0), (1.0, 0.0))


def zig_zag() -> np.ndarray:
    return _polyline(
        (0.0, 0.5), (0.2, 0.0), (0.4, 1.0), (0.6, 0.0), (0.8, 1.0), (1.0, 0.5)
    )


def star() -> np.ndarray:
    """Five-pointed star drawn as one closed pentagram stroke."""
    angles = [math.radians(-90.0 + 144.0 * k) for k in range(6)]
    return np.array([(math.cos(a), math.sin(a)) for a in angles])


def arrow() -> np.ndarray:
    """Diagonal shaft, then the head drawn by retracing to the tip."""
    return _polyline((0.0, 1.0), (1.0, 0.0), (0.6, 0.05), (1.0, 0.0), (0.95, 0.4))


def left_square_bracket() -> np.ndarray:
    return _polyline((0.4, 0.0), (0.0, 0.0), (0.0, 1.0), (0.4, 1.0))


def right_square_bracket() -> np.ndarray:
    return _polyline((0.0, 0.0), (0.4, 0.0), (0.4, 1.0), (0.0, 1.0))


def pigtail(num_points: int = 48) -> np.ndarray:
    """A stroke with a single loop (prolate cycloid)."""
    theta = np.linspace(0.0, 2.0 * math.pi, num_points)
    return np.column_stack([theta - 2.2 * np.sin(theta), 2.2 * (1.0 - np.cos(theta))])


SAMPLE_GESTURES: dict[str, Callable[[], np.ndarray]] = {
    "circle": circle,
    "triangle": triangle,
    "rectangle": rectangle,
    "check": check,
    "caret": caret,
    "v": v,
    "zig_zag": zig_zag,
    "star": star,
    "arrow": arrow,
    "left_square_bracket": left_square_bracket,
    "right_square_bracket": right_square_bracket,
    "pigtail": pigtail,
}


def sample_templates() -> list[tuple[str, np.ndarray]]:
    """Ordered (name, raw points) pairs for every built-in sample."""
    return [(name, make()) for name, make in SAMPLE_GESTURES.items()]
