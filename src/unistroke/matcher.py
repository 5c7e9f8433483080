"""Distance between normalized paths, minimized over a bounded rotation.

Normalization aligns the first point of every path, but hand-drawn strokes
still carry some orientation noise. ``DistanceMatcher`` rotates the candidate
within ``[-angle_range, +angle_range]`` and keeps the best distance found.
"""

from __future__ import annotations

import math

import numpy as np

from unistroke.errors import InvalidConfigurationError
from unistroke.normalize import rotate_by

# Golden ratio conjugate, ~0.618: bracket shrink factor per iteration
PHI = 0.5 * (math.sqrt(5.0) - 1.0)

SEARCH_MODES = ("golden", "sweep")


def path_distance(a: np.ndarray, b: np.ndarray) -> float:
    """Mean Euclidean distance between index-corresponding points.

    Point ``i`` of ``a`` is only ever compared to point ``i`` of ``b``.
    """
    if len(a) != len(b):
        raise ValueError(f"paths differ in length: {len(a)} vs {len(b)}")
    return float(np.mean(np.linalg.norm(a - b, axis=1)))


def distance_at_angle(points: np.ndarray, template: np.ndarray, theta: float) -> float:
    """Distance after rotating ``points`` by ``theta`` radians."""
    return path_distance(rotate_by(points, theta), template)


def search_iterations(angle_range: float, angle_precision: float) -> int:
    """Number of golden-section narrowing steps for a search window.

    The bracket starts ``2 * angle_range`` wide and shrinks by PHI per step
    until it is narrower than ``angle_precision``.
    """
    if angle_range <= 0 or angle_precision <= 0:
        raise InvalidConfigurationError("angle_range and angle_precision must be > 0")
    ratio = angle_precision / (2.0 * angle_range)
    if ratio > 1.0:
        return 0
    return max(0, math.ceil(math.log(ratio) / math.log(PHI)))


class DistanceMatcher:
    """Finds the rotation of a candidate that best fits a template.

    Args:
        angle_range: Half-width of the search window, in degrees.
        angle_precision: Stop once the bracket is narrower than this, in degrees.
        search: ``"golden"`` for golden-section search (assumes the distance
            is unimodal in the window) or ``"sweep"`` for an exhaustive scan
            at ``angle_precision`` steps.
    """

    def __init__(
        self,
        angle_range: float = 15.0,
        angle_precision: float = 2.0,
        search: str = "golden",
    ):
        for label, value in (("angle_range", angle_range), ("angle_precision", angle_precision)):
            if not (isinstance(value, (int, float)) and math.isfinite(value) and value > 0):
                raise InvalidConfigurationError(f"{label} must be a finite number > 0, got {value!r}")
        if search not in SEARCH_MODES:
            raise InvalidConfigurationError(
                f"search must be one of {SEARCH_MODES}, got {search!r}"
            )

        self.angle_range = float(angle_range)
        self.angle_precision = float(angle_precision)
        self.search = search
        self._range_rad = math.radians(self.angle_range)
        self._precision_rad = math.radians(self.angle_precision)

    @property
    def iterations(self) -> int:
        """Golden-section narrowing steps per search."""
        return search_iterations(self.angle_range, self.angle_precision)

    @property
    def evaluations(self) -> int:
        """Path-distance evaluations performed by one best-angle search."""
        if self.search == "sweep":
            return len(self._sweep_angles()) + 1
        return self.iterations + 2

    def distance_at_best_angle(self, points: np.ndarray, template: np.ndarray) -> float:
        """Smallest distance between ``points`` and ``template`` over the window."""
        if self.search == "sweep":
            return self._sweep(points, template)
        return self._golden_section(points, template)

    def _golden_section(self, points: np.ndarray, template: np.ndarray) -> float:
        lo, hi = -self._range_rad, self._range_rad

        x1 = PHI * lo + (1.0 - PHI) * hi
        f1 = distance_at_angle(points, template, x1)
        x2 = (1.0 - PHI) * lo + PHI * hi
        f2 = distance_at_angle(points, template, x2)

        for _ in range(self.iterations):
            if f1 < f2:
                hi = x2
                x2, f2 = x1, f1
                x1 = PHI * lo + (1.0 - PHI) * hi
                f1 = distance_at_angle(points, template, x1)
            else:
                lo = x1
                x1, f1 = x2, f2
                x2 = (1.0 - PHI) * lo + PHI * hi
                f2 = distance_at_angle(points, template, x2)

        return min(f1, f2)

    def _sweep_angles(self) -> np.ndarray:
        steps = max(1, math.ceil(2.0 * self._range_rad / self._precision_rad))
        return np.linspace(-self._range_rad, self._range_rad, steps + 1)

    def _sweep(self, points: np.ndarray, template: np.ndarray) -> float:
        angles = self._sweep_angles()
        best = distance_at_angle(points, template, 0.0)
        for theta in angles:
            best = min(best, distance_at_angle(points, template, float(theta)))
        return best

    def __repr__(self) -> str:
        return (
            f"DistanceMatcher(angle_range={self.angle_range}, "
            f"angle_precision={self.angle_precision}, search={self.search!r})"
        )
