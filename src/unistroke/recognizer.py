"""Single-stroke recognition against a fixed template library.

Usage:
    engine = RecognitionEngine({"circle": circle_pts, "check": check_pts})
    result = engine.recognize(stroke)
    if result.matched:
        print(f"{result.name} (score={result.score:.2f})")
"""

from __future__ import annotations

import logging
from contextlib import nullcontext
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Optional

from unistroke.config import RecognizerConfig
from unistroke.errors import DegenerateInputError
from unistroke.matcher import DistanceMatcher
from unistroke.normalize import PathNormalizer
from unistroke.profiler import StageProfiler
from unistroke.templates import TemplateLibrary, TemplateSource

logger = logging.getLogger("unistroke.recognizer")


class RecognitionStatus(Enum):
    MATCHED = "matched"
    NO_TEMPLATES = "no_templates"
    DEGENERATE_INPUT = "degenerate_input"


@dataclass(frozen=True)
class RecognitionResult:
    """Outcome of one recognize() call.

    ``score`` is ``1 - distance / half_diagonal`` and is not clamped: very
    poor matches go negative. Only MATCHED results carry a name and score.
    """
    status: RecognitionStatus
    name: Optional[str] = None
    score: Optional[float] = None
    distance: Optional[float] = None
    reason: str = ""

    @property
    def matched(self) -> bool:
        return self.status is RecognitionStatus.MATCHED

    @classmethod
    def no_templates(cls) -> RecognitionResult:
        return cls(RecognitionStatus.NO_TEMPLATES, reason="no templates loaded")

    @classmethod
    def degenerate(cls, reason: str) -> RecognitionResult:
        return cls(RecognitionStatus.DEGENERATE_INPUT, reason=reason)

    def to_dict(self) -> dict:
        return {
            "status": self.status.value,
            "name": self.name,
            "score": self.score,
            "distance": self.distance,
            "reason": self.reason,
        }


class RecognitionEngine:
    """Matches strokes against a library that is frozen at construction.

    Templates are normalized once here, never per call. After construction
    ``recognize`` only reads shared state, so one engine may serve several
    threads as long as no profiler is attached.

    Args:
        templates: Name -> points mapping or ordered (name, points) pairs.
            Order decides ties. ``None`` or empty gives an engine that
            reports NO_TEMPLATES.
        config: Recognizer settings; defaults to ``RecognizerConfig()``.
        profiler: Optional stage timer.
    """

    def __init__(
        self,
        templates: Optional[TemplateSource] = None,
        config: Optional[RecognizerConfig] = None,
        profiler: Optional[StageProfiler] = None,
    ):
        self.config = config or RecognizerConfig()
        self._normalizer = PathNormalizer(self.config.num_points, self.config.square_size)
        self._matcher = DistanceMatcher(
            angle_range=self.config.effective_angle_range,
            angle_precision=self.config.angle_precision,
            search=self.config.search,
        )
        self._half_diagonal = self.config.half_diagonal
        self._profiler = profiler

        self._library = TemplateLibrary.from_source(templates or (), self._normalizer)
        self._library.freeze()

        if self._library.is_empty:
            logger.warning("Recognition engine created with no templates")
        else:
            logger.info(
                "Loaded %d templates (%d points, window ±%.1f°, %s search)",
                len(self._library),
                self.config.num_points,
                self._matcher.angle_range,
                self._matcher.search,
            )

    @classmethod
    def with_defaults(
        cls,
        config: Optional[RecognizerConfig] = None,
        profiler: Optional[StageProfiler] = None,
    ) -> RecognitionEngine:
        """Create an engine over the built-in sample gestures."""
        from unistroke.samples import sample_templates

        return cls(sample_templates(), config=config, profiler=profiler)

    def recognize(self, path: Iterable[Any]) -> RecognitionResult:
        """Return the closest template for a raw stroke."""
        if self._library.is_empty:
            logger.debug("No templates loaded, nothing to match against")
            return RecognitionResult.no_templates()

        with self._stage("total"):
            try:
                with self._stage("normalization"):
                    candidate = self._normalizer.normalize(path)
            except DegenerateInputError as e:
                logger.debug("Rejected degenerate input: %s", e)
                return RecognitionResult.degenerate(str(e))

            with self._stage("matching"):
                best_distance = float("inf")
                best_template = None
                for template in self._library:
                    with self._template_timer(template.name):
                        distance = self._matcher.distance_at_best_angle(candidate, template.points)
                    if distance < best_distance:
                        best_distance = distance
                        best_template = template

            if self._profiler is not None:
                compared = len(self._library)
                self._profiler.record_scan(compared, compared * self._matcher.evaluations)

        if best_template is None:
            raise RuntimeError(
                f"scan of {len(self._library)} templates produced no match"
            )

        score = self._score(best_distance)
        logger.debug("Best match %s: distance=%.3f score=%.3f", best_template.name, best_distance, score)
        return RecognitionResult(
            status=RecognitionStatus.MATCHED,
            name=best_template.name,
            score=score,
            distance=best_distance,
        )

    def score_all(self, path: Iterable[Any]) -> list[tuple[str, float]]:
        """Score a stroke against every template, in library order.

        Raises DegenerateInputError for paths that cannot be normalized.
        """
        if self._library.is_empty:
            return []
        candidate = self._normalizer.normalize(path)
        return [
            (t.name, self._score(self._matcher.distance_at_best_angle(candidate, t.points)))
            for t in self._library
        ]

    def _score(self, distance: float) -> float:
        return 1.0 - distance / self._half_diagonal

    def _stage(self, name: str):
        if self._profiler is None:
            return nullcontext()
        return self._profiler.stage(name)

    def _template_timer(self, name: str):
        if self._profiler is None:
            return nullcontext()
        return self._profiler.template(name)

    @property
    def library(self) -> TemplateLibrary:
        return self._library

    @property
    def matcher(self) -> DistanceMatcher:
        return self._matcher

    @property
    def normalizer(self) -> PathNormalizer:
        return self._normalizer

    @property
    def is_empty(self) -> bool:
        return self._library.is_empty

    @property
    def template_names(self) -> list[str]:
        return self._library.names
