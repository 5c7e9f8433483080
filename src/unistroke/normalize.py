"""Path normalization: resample, rotate, scale and center a raw stroke.

Two drawings of the same symbol only become comparable point-by-point once
both are in canonical form:

    1. resample to a fixed number of evenly spaced points
    2. rotate about the centroid so the first point sits at angle 0
    3. scale the bounding box (per axis) to a reference square
    4. translate the centroid to the origin

Usage:
    normalizer = PathNormalizer(num_points=128, square_size=250.0)
    canonical = normalizer.normalize([(10, 10), (40, 12), (70, 60)])
"""

from __future__ import annotations

import math
from typing import Any, Iterable

import numpy as np

from unistroke.errors import DegenerateInputError

# Extent below this fraction of the other axis counts as zero. Rotating a
# straight line leaves float noise on the perpendicular axis that would
# otherwise be blown up to the full square size.
_FLAT_AXIS_TOLERANCE = 1e-9


def as_path(points: Iterable[Any]) -> np.ndarray:
    """Coerce points into a float64 array of shape (N, 2).

    Accepts arrays, sequences of (x, y) pairs and sequences of dicts with
    ``x``/``y`` keys (extra keys such as timestamps are ignored).
    """
    try:
        if isinstance(points, np.ndarray):
            pts = np.asarray(points, dtype=np.float64)
        else:
            rows = []
            for p in points:
                if isinstance(p, dict):
                    rows.append((p["x"], p["y"]))
                else:
                    rows.append(tuple(p)[:2])
            pts = np.array(rows, dtype=np.float64)
    except (KeyError, TypeError, ValueError) as e:
        raise DegenerateInputError(f"could not read points: {e}") from e

    if pts.ndim != 2 or pts.shape[1] < 2:
        if pts.size == 0:
            raise DegenerateInputError("path has no points")
        raise DegenerateInputError(f"expected (N, 2) points, got shape {pts.shape}")
    pts = pts[:, :2]

    if len(pts) < 2:
        raise DegenerateInputError(f"path needs at least 2 points, got {len(pts)}")
    if not np.all(np.isfinite(pts)):
        raise DegenerateInputError("path contains non-finite coordinates")
    return pts


def centroid(points: np.ndarray) -> np.ndarray:
    """Mean of all points."""
    return points.mean(axis=0)


def path_length(points: np.ndarray) -> float:
    """Sum of distances between consecutive points."""
    d = np.diff(points, axis=0)
    return float(np.sum(np.hypot(d[:, 0], d[:, 1])))


def bounding_box(points: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    """Return (min_xy, max_xy) of the axis-aligned bounding box."""
    return points.min(axis=0), points.max(axis=0)


def resample(points: np.ndarray, n: int) -> np.ndarray:
    """Resample a path to exactly ``n`` points evenly spaced by arc length.

    The first and last points are preserved; intermediate points are
    linearly interpolated along the polyline.
    """
    if n < 2:
        raise ValueError(f"resample needs n >= 2, got {n}")

    # hypot: no under- or overflow from squaring tiny or huge steps
    with np.errstate(over="ignore"):
        d = np.diff(points, axis=0)
        seg_lengths = np.hypot(d[:, 0], d[:, 1])
        total = float(seg_lengths.sum())
    if not math.isfinite(total):
        raise DegenerateInputError("path length is not finite; coordinates are too large")
    if total <= 0.0:
        raise DegenerateInputError("path has zero arc length; all points coincide")

    # Drop repeated points so cumulative length is strictly increasing
    keep = np.concatenate([[True], seg_lengths > 0])
    pts = points[keep]
    cum_length = np.concatenate([[0.0], np.cumsum(seg_lengths[seg_lengths > 0])])

    targets = np.linspace(0.0, cum_length[-1], n)
    resampled = np.column_stack([
        np.interp(targets, cum_length, pts[:, 0]),
        np.interp(targets, cum_length, pts[:, 1]),
    ])
    resampled[-1] = pts[-1]
    return resampled


def indicative_angle(points: np.ndarray) -> float:
    """Angle (radians) from the centroid to the first point."""
    c = centroid(points)
    return math.atan2(points[0, 1] - c[1], points[0, 0] - c[0])


def rotate_by(points: np.ndarray, theta: float) -> np.ndarray:
    """Rotate every point by ``theta`` radians about the centroid."""
    c = centroid(points)
    cos_t, sin_t = math.cos(theta), math.sin(theta)
    d = points - c
    rotated = np.empty_like(d)
    rotated[:, 0] = d[:, 0] * cos_t - d[:, 1] * sin_t
    rotated[:, 1] = d[:, 0] * sin_t + d[:, 1] * cos_t
    return rotated + c


def scale_to_square(points: np.ndarray, size: float) -> np.ndarray:
    """Scale x and y independently so the bounding box becomes size x size.

    An axis with no extent (a straight stroke) is left unscaled.
    """
    lo, hi = bounding_box(points)
    extent = hi - lo
    largest = float(extent.max())
    if largest <= 0.0:
        raise DegenerateInputError("bounding box has zero extent on both axes")

    flat = extent <= largest * _FLAT_AXIS_TOLERANCE
    scale = np.where(flat, 1.0, size / np.where(flat, 1.0, extent))
    return points * scale


def translate_to_origin(points: np.ndarray) -> np.ndarray:
    """Shift the path so its centroid is at (0, 0)."""
    return points - centroid(points)


class PathNormalizer:
    """Produces the canonical form shared by candidates and templates."""

    def __init__(self, num_points: int = 128, square_size: float = 250.0):
        if num_points < 2:
            raise ValueError(f"num_points must be >= 2, got {num_points}")
        if not square_size > 0:
            raise ValueError(f"square_size must be > 0, got {square_size}")
        self.num_points = num_points
        self.square_size = float(square_size)

    def normalize(self, points: Iterable[Any]) -> np.ndarray:
        """Run the full pipeline on a raw path. Raises DegenerateInputError."""
        pts = resample(as_path(points), self.num_points)
        pts = rotate_by(pts, -indicative_angle(pts))
        pts = scale_to_square(pts, self.square_size)
        return translate_to_origin(pts)

    def __repr__(self) -> str:
        return f"PathNormalizer(num_points={self.num_points}, square_size={self.square_size})"
