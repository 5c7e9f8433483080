"""Tests for path distance and the rotation search."""

import math

import numpy as np
import pytest

import unistroke.matcher as matcher_module
from unistroke.errors import InvalidConfigurationError
from unistroke.matcher import DistanceMatcher, path_distance, search_iterations
from unistroke.normalize import PathNormalizer, rotate_by
from unistroke.samples import check, zig_zag


@pytest.fixture
def template():
    return PathNormalizer().normalize(check())


def count_evaluations(monkeypatch):
    calls = []
    original = matcher_module.distance_at_angle

    def counting(points, tmpl, theta):
        calls.append(theta)
        return original(points, tmpl, theta)

    monkeypatch.setattr(matcher_module, "distance_at_angle", counting)
    return calls


class TestPathDistance:
    def test_identical(self, template):
        assert path_distance(template, template) == pytest.approx(0.0)

    def test_constant_offset(self):
        a = np.zeros((10, 2))
        b = a + np.array([3.0, 4.0])
        assert path_distance(a, b) == pytest.approx(5.0)

    def test_index_correspondence(self):
        # Same point set in reverse order is not a zero-distance match
        a = np.array([[0, 0], [10, 0]], dtype=np.float64)
        assert path_distance(a, a[::-1]) == pytest.approx(10.0)

    def test_unequal_lengths(self):
        with pytest.raises(ValueError):
            path_distance(np.zeros((3, 2)), np.zeros((4, 2)))


class TestSearchIterations:
    def test_narrow_window(self):
        assert search_iterations(15.0, 2.0) == 6

    def test_broad_window(self):
        assert search_iterations(45.0, 2.0) == 8

    def test_fine_precision(self):
        assert search_iterations(45.0, 0.01) == 19

    def test_precision_wider_than_window(self):
        assert search_iterations(1.0, 5.0) == 0

    def test_rejects_non_positive(self):
        with pytest.raises(InvalidConfigurationError):
            search_iterations(0.0, 2.0)
        with pytest.raises(InvalidConfigurationError):
            search_iterations(15.0, 0.0)


class TestDistanceMatcher:
    @pytest.mark.parametrize("angle_range,precision", [
        (15.0, 2.0), (45.0, 2.0), (45.0, 0.01), (1.0, 5.0), (90.0, 0.5),
    ])
    def test_evaluation_count_is_predictable(self, monkeypatch, template, angle_range, precision):
        matcher = DistanceMatcher(angle_range, precision)
        calls = count_evaluations(monkeypatch)
        matcher.distance_at_best_angle(template, template)
        assert len(calls) == matcher.evaluations == search_iterations(angle_range, precision) + 2

    def test_probes_stay_in_window(self, monkeypatch, template):
        matcher = DistanceMatcher(15.0, 2.0)
        calls = count_evaluations(monkeypatch)
        matcher.distance_at_best_angle(template, template)
        limit = math.radians(15.0)
        assert all(-limit <= theta <= limit for theta in calls)

    def test_self_distance_near_zero(self, template):
        matcher = DistanceMatcher(15.0, 2.0)
        assert matcher.distance_at_best_angle(template, template) < 2.0

    @pytest.mark.parametrize("degrees", [-12.0, -5.0, 3.0, 10.0])
    def test_search_recovers_rotation(self, template, degrees):
        matcher = DistanceMatcher(15.0, 2.0)
        rotated = rotate_by(template, math.radians(degrees))
        baseline = path_distance(rotated, template)
        best = matcher.distance_at_best_angle(rotated, template)
        assert best <= baseline
        assert best < 2.0

    def test_broad_window_recovers_larger_rotation(self):
        tmpl = PathNormalizer().normalize(zig_zag())
        matcher = DistanceMatcher(45.0, 2.0)
        rotated = rotate_by(tmpl, math.radians(35.0))
        assert matcher.distance_at_best_angle(rotated, tmpl) < 0.2 * path_distance(rotated, tmpl)

    def test_sweep_mode(self, monkeypatch, template):
        matcher = DistanceMatcher(15.0, 2.0, search="sweep")
        rotated = rotate_by(template, math.radians(8.0))
        calls = count_evaluations(monkeypatch)
        best = matcher.distance_at_best_angle(rotated, template)
        assert len(calls) == matcher.evaluations == 17
        assert best <= path_distance(rotated, template)
        assert best < 3.0

    @pytest.mark.parametrize("kwargs", [
        {"angle_range": 0.0},
        {"angle_range": -15.0},
        {"angle_precision": 0.0},
        {"angle_precision": float("nan")},
        {"angle_range": float("inf")},
        {"search": "bogus"},
    ])
    def test_rejects_bad_configuration(self, kwargs):
        with pytest.raises(InvalidConfigurationError):
            DistanceMatcher(**kwargs)
