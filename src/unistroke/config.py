"""Recognizer configuration.

Values can be set in code or loaded from YAML:

    num_points: 64
    square_size: 250
    angle_precision: 2.0
    rotation_invariance: true
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Optional

import yaml

from unistroke.errors import InvalidConfigurationError
from unistroke.matcher import SEARCH_MODES

# Search window half-widths, in degrees
BROAD_ANGLE_RANGE = 45.0
NARROW_ANGLE_RANGE = 15.0


@dataclass(frozen=True)
class RecognizerConfig:
    """Construction-time settings for a RecognitionEngine.

    ``num_points`` sets the resample resolution (and per-comparison cost).
    ``square_size`` is an arbitrary reference scale; only ratios matter.
    ``angle_precision`` is the search convergence threshold in degrees.
    ``rotation_invariance`` widens the rotation search window from 15 to 45
    degrees unless ``angle_range`` is given explicitly.
    """

    num_points: int = 128
    square_size: float = 250.0
    angle_precision: float = 2.0
    rotation_invariance: bool = False
    angle_range: Optional[float] = None
    search: str = "golden"

    def __post_init__(self):
        if isinstance(self.num_points, bool) or not isinstance(self.num_points, int):
            raise InvalidConfigurationError(f"num_points must be an int, got {self.num_points!r}")
        if self.num_points < 2:
            raise InvalidConfigurationError(f"num_points must be >= 2, got {self.num_points}")
        _require_positive("square_size", self.square_size)
        _require_positive("angle_precision", self.angle_precision)
        if self.angle_range is not None:
            _require_positive("angle_range", self.angle_range)
        if self.search not in SEARCH_MODES:
            raise InvalidConfigurationError(
                f"search must be one of {SEARCH_MODES}, got {self.search!r}"
            )

    @property
    def effective_angle_range(self) -> float:
        """Half-width of the rotation search window, in degrees."""
        if self.angle_range is not None:
            return float(self.angle_range)
        return BROAD_ANGLE_RANGE if self.rotation_invariance else NARROW_ANGLE_RANGE

    @property
    def half_diagonal(self) -> float:
        """Half the diagonal of the reference square; the score normalizer."""
        return 0.5 * math.sqrt(2.0 * self.square_size ** 2)

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RecognizerConfig:
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise InvalidConfigurationError(f"unknown config keys: {', '.join(unknown)}")
        return cls(**data)

    @classmethod
    def from_yaml(cls, path: str | Path) -> RecognizerConfig:
        """Load a config file. An empty file yields the defaults."""
        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (UnicodeDecodeError, yaml.YAMLError) as e:
            raise InvalidConfigurationError(f"could not parse {path}: {e}") from e
        if not isinstance(data, dict):
            raise InvalidConfigurationError(f"{path}: expected a mapping at top level")
        return cls.from_dict(data)

    def to_yaml(self, path: str | Path):
        with open(path, "w", encoding="utf-8") as f:
            yaml.safe_dump(self.to_dict(), f, default_flow_style=False, sort_keys=False)


def _require_positive(name: str, value: Any):
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidConfigurationError(f"{name} must be a number, got {value!r}")
    if not math.isfinite(value) or value <= 0:
        raise InvalidConfigurationError(f"{name} must be a finite number > 0, got {value}")
