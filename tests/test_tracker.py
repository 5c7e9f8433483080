"""Tests for touch tracking."""

import numpy as np
import pytest

from unistroke.errors import InvalidConfigurationError
from unistroke.tracker import DEFAULT_PATH_LENGTH, Blob, TouchTracker


def ids(touches):
    return [t.touch_id for t in touches]


class TestTouchTracker:
    def test_new_touches_get_sequential_ids(self):
        tracker = TouchTracker()
        touches = tracker.track([Blob((0, 0)), Blob((100, 100))])
        assert ids(touches) == [0, 1]
        assert tracker.active_count == 2

    def test_small_moves_keep_identity(self):
        tracker = TouchTracker(max_distance=10.0)
        tracker.track([Blob((0, 0)), Blob((100, 100))])
        touches = tracker.track([Blob((103, 98)), Blob((2, 1))])
        assert ids(touches) == [0, 1]
        np.testing.assert_allclose(touches[0].position, [2, 1])
        np.testing.assert_allclose(touches[1].position, [103, 98])
        assert touches[0].frames_tracked == 2
        assert touches[0].displacement == pytest.approx(np.hypot(2, 1))

    def test_nearest_blob_wins(self):
        tracker = TouchTracker(max_distance=10.0)
        tracker.track([Blob((0, 0))])
        tracker.track([Blob((0, 0)), Blob((50, 50))])  # adds touch 1 at (50, 50)
        touches = tracker.track([Blob((6, 0)), Blob((2, 0))])
        assert ids(touches) == [0]
        np.testing.assert_allclose(touches[0].position, [2, 0])

    def test_lost_touch_dropped(self):
        tracker = TouchTracker(max_distance=10.0)
        tracker.track([Blob((0, 0)), Blob((100, 100))])
        touches = tracker.track([Blob((1, 1))])
        assert ids(touches) == [0]

    def test_extra_blob_starts_touch(self):
        tracker = TouchTracker(max_distance=10.0)
        tracker.track([Blob((0, 0))])
        touches = tracker.track([Blob((1, 0)), Blob((200, 200))])
        assert ids(touches) == [0, 1]
        np.testing.assert_allclose(touches[1].position, [200, 200])

    def test_unmatched_blob_ignored_without_surplus(self):
        # Same number of blobs as touches: a far blob replaces nothing
        tracker = TouchTracker(max_distance=10.0)
        tracker.track([Blob((0, 0)), Blob((100, 100))])
        touches = tracker.track([Blob((1, 1)), Blob((500, 500))])
        assert ids(touches) == [0]

    def test_threshold_is_strict(self):
        tracker = TouchTracker(max_distance=10.0)
        tracker.track([Blob((0, 0))])
        assert tracker.track([Blob((10, 0))]) == []

    def test_empty_frame_clears(self):
        tracker = TouchTracker()
        tracker.track([Blob((0, 0))])
        assert tracker.track([]) == []
        assert tracker.active_count == 0

    def test_plain_pairs(self):
        tracker = TouchTracker()
        touches = tracker.track([(5, 5), (50, 50)])
        assert ids(touches) == [0, 1]

    def test_path_history(self):
        tracker = TouchTracker()
        for x in range(5):
            touches = tracker.track([(x * 2.0, 0.0)])
        assert len(touches[0].path) == 5

    def test_path_history_is_bounded(self):
        tracker = TouchTracker(path_length=8)
        for x in range(50):
            touches = tracker.track([(x * 2.0, 0.0)])
        touch = touches[0]
        assert touch.frames_tracked == 50
        assert len(touch.path) == 8
        np.testing.assert_allclose(touch.path[0], [84.0, 0.0])
        np.testing.assert_allclose(touch.path[-1], [98.0, 0.0])

    def test_default_path_length(self):
        tracker = TouchTracker()
        for x in range(DEFAULT_PATH_LENGTH + 20):
            touches = tracker.track([(x * 0.5, 0.0)])
        assert len(touches[0].path) == tracker.path_length == DEFAULT_PATH_LENGTH

    @pytest.mark.parametrize("path_length", [0, -3, 2.5, True])
    def test_invalid_path_length(self, path_length):
        with pytest.raises(InvalidConfigurationError):
            TouchTracker(path_length=path_length)

    def test_reset(self):
        tracker = TouchTracker()
        tracker.track([Blob((0, 0)), Blob((50, 50))])
        tracker.reset()
        assert tracker.active_count == 0
        assert ids(tracker.track([Blob((0, 0))])) == [0]

    def test_independent_instances(self):
        a = TouchTracker()
        b = TouchTracker()
        a.track([(0, 0)])
        assert b.active_count == 0

    @pytest.mark.parametrize("max_distance", [0, -1.0])
    def test_invalid_threshold(self, max_distance):
        with pytest.raises(InvalidConfigurationError):
            TouchTracker(max_distance=max_distance)
