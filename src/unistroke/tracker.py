"""Touch tracking: give detected blobs stable identities across frames.

Independent of recognition. Each frame, every existing touch claims the
nearest unclaimed blob within ``max_distance``; touches with no blob nearby
are dropped. When a frame brings more blobs than there were touches, the
unclaimed blobs become new touches.

Usage:
    tracker = TouchTracker(max_distance=10.0)
    for frame_blobs in frames:
        touches = tracker.track(frame_blobs)
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Optional

import numpy as np

from unistroke.errors import InvalidConfigurationError

logger = logging.getLogger("unistroke.tracker")

# Positions kept per touch; older ones fall off the front
DEFAULT_PATH_LENGTH = 256


@dataclass(eq=False)
class Blob:
    """A contact detected in a single frame."""
    position: np.ndarray  # (x, y)

    def __post_init__(self):
        self.position = np.asarray(self.position, dtype=np.float64)[:2]


@dataclass(eq=False)
class Touch:
    """A contact followed across frames."""
    touch_id: int
    position: np.ndarray
    previous: Optional[np.ndarray] = None
    frames_tracked: int = 1
    path: deque = field(default_factory=lambda: deque(maxlen=DEFAULT_PATH_LENGTH))

    def move_to(self, position: np.ndarray):
        self.previous = self.position
        self.position = position
        self.frames_tracked += 1
        self.path.append(position)

    @property
    def displacement(self) -> float:
        """Distance moved since the previous frame."""
        if self.previous is None:
            return 0.0
        return float(np.linalg.norm(self.position - self.previous))


class TouchTracker:
    """Owns the set of active touches; create one per input surface."""

    def __init__(self, max_distance: float = 10.0, path_length: int = DEFAULT_PATH_LENGTH):
        if not max_distance > 0:
            raise InvalidConfigurationError(f"max_distance must be > 0, got {max_distance}")
        if isinstance(path_length, bool) or not isinstance(path_length, int) or path_length < 1:
            raise InvalidConfigurationError(f"path_length must be an int >= 1, got {path_length!r}")
        self._max_distance = float(max_distance)
        self._path_length = path_length
        self._touches: list[Touch] = []
        self._next_id = 0

    def track(self, blobs: list[Blob]) -> list[Touch]:
        """Update touches from this frame's blobs and return the active ones.

        Plain (x, y) pairs are accepted in place of Blob objects.
        """
        remaining = [b if isinstance(b, Blob) else Blob(b) for b in blobs]
        add_new = len(remaining) > len(self._touches)

        survivors = []
        for touch in self._touches:
            blob = self._claim_nearest(touch, remaining)
            if blob is None:
                logger.debug("Touch %d lost", touch.touch_id)
                continue
            touch.move_to(blob.position)
            survivors.append(touch)
        self._touches = survivors

        if add_new:
            for blob in remaining:
                touch = Touch(
                    touch_id=self._next_id,
                    position=blob.position,
                    path=deque([blob.position], maxlen=self._path_length),
                )
                self._next_id += 1
                self._touches.append(touch)
                logger.debug("Touch %d started at %s", touch.touch_id, blob.position)

        return list(self._touches)

    def _claim_nearest(self, touch: Touch, blobs: list[Blob]) -> Optional[Blob]:
        best_idx = -1
        best_dist = float("inf")
        for idx, blob in enumerate(blobs):
            dist = float(np.linalg.norm(touch.position - blob.position))
            if dist < self._max_distance and dist < best_dist:
                best_idx, best_dist = idx, dist
        if best_idx < 0:
            return None
        return blobs.pop(best_idx)

    def reset(self):
        """Forget all touches and restart identities at 0."""
        self._touches.clear()
        self._next_id = 0

    @property
    def touches(self) -> list[Touch]:
        return list(self._touches)

    @property
    def active_count(self) -> int:
        return len(self._touches)

    @property
    def max_distance(self) -> float:
        return self._max_distance

    @property
    def path_length(self) -> int:
        return self._path_length
