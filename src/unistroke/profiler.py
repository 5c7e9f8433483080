"""Where recognition spends its time.

A recognize() call normalizes the candidate once and then compares it with
every template, each comparison costing ``DistanceMatcher.evaluations``
path distances. ``StageProfiler`` records the stage timings, the per-call
comparison and evaluation counts, and the time spent on each template, so
the cost of a larger library or a finer angle precision shows up directly.

A profiler keeps mutable state, so an engine with one attached should not be
shared between threads.
"""

from __future__ import annotations

import time
from collections import defaultdict, deque
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator

import numpy as np


@dataclass
class StageStats:
    """Timing statistics for one stage over the recent window."""
    name: str
    avg_ms: float
    min_ms: float
    max_ms: float
    p95_ms: float
    call_count: int

    @classmethod
    def from_window(cls, name: str, window: deque, call_count: int) -> StageStats:
        ms = np.fromiter(window, dtype=np.float64, count=len(window))
        return cls(
            name=name,
            avg_ms=float(ms.mean()),
            min_ms=float(ms.min()),
            max_ms=float(ms.max()),
            p95_ms=float(np.percentile(ms, 95)),
            call_count=call_count,
        )


@dataclass
class ScanStats:
    """Library scans recorded so far, averaged per recognize() call."""
    calls: int
    templates_per_call: float
    evaluations_per_call: float


class StageProfiler:
    """Stage timings plus per-template cost of library scans.

    Usage:
        profiler = StageProfiler()
        engine = RecognitionEngine(templates, profiler=profiler)
        engine.recognize(path)
        print(profiler.summary())
        print(profiler.slowest_templates(3))
    """

    STAGES = ("normalization", "matching", "total")

    def __init__(self, window_size: int = 500):
        self._window_size = window_size
        self.enabled = True
        self.reset()

    def _window(self) -> deque:
        return deque(maxlen=self._window_size)

    @contextmanager
    def stage(self, name: str) -> Iterator[None]:
        """Time the enclosed block under ``name``."""
        if not self.enabled:
            yield
            return
        t0 = time.perf_counter()
        try:
            yield
        finally:
            self._stages[name].append((time.perf_counter() - t0) * 1000.0)
            self._stage_calls[name] += 1

    @contextmanager
    def template(self, name: str) -> Iterator[None]:
        """Time one candidate-vs-template comparison."""
        if not self.enabled:
            yield
            return
        t0 = time.perf_counter()
        try:
            yield
        finally:
            self._templates[name].append((time.perf_counter() - t0) * 1000.0)

    def record_scan(self, templates: int, evaluations: int):
        """Count one library scan: templates compared and distances computed."""
        if not self.enabled:
            return
        self._scans.append((templates, evaluations))
        self._scan_calls += 1

    def get_stage_stats(self, name: str) -> StageStats | None:
        window = self._stages.get(name)
        if not window:
            return None
        return StageStats.from_window(name, window, self._stage_calls[name])

    def get_scan_stats(self) -> ScanStats | None:
        if not self._scans:
            return None
        counts = np.asarray(self._scans, dtype=np.float64)
        templates, evaluations = counts.mean(axis=0)
        return ScanStats(
            calls=self._scan_calls,
            templates_per_call=float(templates),
            evaluations_per_call=float(evaluations),
        )

    def slowest_templates(self, k: int = 5) -> list[tuple[str, float]]:
        """Templates with the highest average comparison time, in ms."""
        averages = [(name, float(np.mean(w))) for name, w in self._templates.items() if w]
        averages.sort(key=lambda item: item[1], reverse=True)
        return averages[:k]

    def summary(self) -> dict:
        """Stage timings (only stages timed at least once) and scan counts."""
        stages = {}
        for name in self._stages:
            stats = self.get_stage_stats(name)
            if stats is None:
                continue
            stages[name] = {
                "avg_ms": round(stats.avg_ms, 3),
                "p95_ms": round(stats.p95_ms, 3),
                "max_ms": round(stats.max_ms, 3),
                "calls": stats.call_count,
            }
        result = {"stages": stages}
        scan = self.get_scan_stats()
        if scan is not None:
            result["scan"] = {
                "calls": scan.calls,
                "templates_per_call": scan.templates_per_call,
                "evaluations_per_call": scan.evaluations_per_call,
            }
        return result

    def reset(self):
        self._stages: defaultdict[str, deque] = defaultdict(self._window)
        self._stage_calls: defaultdict[str, int] = defaultdict(int)
        self._templates: defaultdict[str, deque] = defaultdict(self._window)
        self._scans: deque = self._window()
        self._scan_calls = 0
