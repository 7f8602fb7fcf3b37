"""Unit tests for joint trajectory smoothing and capture."""

from __future__ import annotations

from typing import Any

import pytest

from sportai.core.models import JointSample, TrajectoryPoint
from sportai.tracking.joint_trajectory import (
    JointTrajectoryTracker,
    TrajectoryTrackerConfig,
    catmull_rom,
    cubic_bezier,
    point_velocity,
    segment_count,
    smooth_trajectory,
)

LEFT_WRIST = 9
RIGHT_WRIST = 10


def _sample(x: float, y: float, frame: int) -> JointSample:
    return JointSample(x=x, y=y, frame_index=frame)


def _keypoints(**joints: tuple[float, float, float]) -> list[dict[str, Any]]:
    """17 COCO keypoints, all low-confidence except the given ones.

    Keyword names are ``j<index>``, values ``(x, y, score)``.
    """
    keypoints = [{"x": 0.0, "y": 0.0, "score": 0.0} for _ in range(17)]
    for name, (x, y, score) in joints.items():
        keypoints[int(name[1:])] = {"x": x, "y": y, "score": score}
    return keypoints


class TestCurvePrimitives:
    """Tests for Catmull-Rom and Bezier helpers."""

    def test_catmull_rom_endpoints(self) -> None:
        p0, p1, p2, p3 = (TrajectoryPoint(x, x * 2) for x in (0.0, 1.0, 3.0, 4.0))
        start = catmull_rom(p0, p1, p2, p3, 0.0)
        end = catmull_rom(p0, p1, p2, p3, 1.0)
        assert (start.x, start.y) == pytest.approx((1.0, 2.0))
        assert (end.x, end.y) == pytest.approx((3.0, 6.0))

    def test_bezier_point_count_and_endpoints(self) -> None:
        points = cubic_bezier(TrajectoryPoint(0, 0), TrajectoryPoint(10, 20))
        assert len(points) == 11
        assert (points[0].x, points[0].y) == pytest.approx((0.0, 0.0))
        assert (points[-1].x, points[-1].y) == pytest.approx((10.0, 20.0))

    def test_bezier_stays_on_chord(self) -> None:
        points = cubic_bezier(TrajectoryPoint(0, 0), TrajectoryPoint(10, 20))
        for p in points:
            assert p.y == pytest.approx(2 * p.x)

    def test_point_velocity_zero_frame_delta(self) -> None:
        assert point_velocity(_sample(0, 0, 5), _sample(3, 4, 5)) == pytest.approx(5.0)

    def test_point_velocity_per_frame(self) -> None:
        assert point_velocity(_sample(0, 0, 0), _sample(6, 8, 2)) == pytest.approx(5.0)


class TestSegmentCount:
    """Tests for velocity-adaptive segment counts."""

    def test_ratio_capped_at_three(self) -> None:
        assert segment_count(30.0, 10.0) == 20
        assert segment_count(1000.0, 10.0) == 20

    def test_zero_velocity(self) -> None:
        assert segment_count(0.0, 10.0) == 8

    def test_average_velocity(self) -> None:
        assert segment_count(10.0, 10.0) == 12

    def test_zero_average_treated_as_one(self) -> None:
        assert segment_count(0.0, 0.0) == 8
        assert segment_count(5.0, 0.0) == 20

    def test_half_rounds_up(self) -> None:
        # 8 * (1 + 0.125 * 0.5) = 8.5
        assert segment_count(1.25, 10.0) == 9


class TestSmoothTrajectory:
    """Tests for trajectory smoothing boundaries and density."""

    def test_empty(self) -> None:
        assert smooth_trajectory([]) == []

    def test_single_sample_unchanged(self) -> None:
        assert smooth_trajectory([_sample(12.5, 40.0, 3)]) == [TrajectoryPoint(12.5, 40.0)]

    def test_two_samples_give_eleven_points(self) -> None:
        points = smooth_trajectory([_sample(0, 0, 0), _sample(10, 10, 1)])
        assert len(points) == 11

    def test_uniform_three_samples(self) -> None:
        samples = [_sample(0, 0, 0), _sample(10, 0, 1), _sample(20, 0, 2)]
        points = smooth_trajectory(samples)

        # Equal velocities: ratio 1, 12 segments per gap, plus the start point
        assert len(points) == 1 + 12 + 12
        assert points[0] == TrajectoryPoint(0, 0)
        assert (points[12].x, points[12].y) == pytest.approx((10.0, 0.0))
        assert (points[-1].x, points[-1].y) == pytest.approx((20.0, 0.0))

    def test_fast_gap_gets_more_segments(self) -> None:
        samples = [_sample(0, 0, 0), _sample(1, 0, 1), _sample(100, 0, 2)]
        points = smooth_trajectory(samples)
        # avg 50: slow gap ratio 0.02 -> 8, fast gap ratio 1.98 -> 16
        assert len(points) == 1 + 8 + 16

    def test_passes_through_every_sample(self) -> None:
        samples = [_sample(0, 0, 0), _sample(5, 8, 1), _sample(9, 3, 3), _sample(15, 6, 4)]
        points = smooth_trajectory(samples)
        for s in samples:
            assert any(p.x == pytest.approx(s.x) and p.y == pytest.approx(s.y) for p in points)


class TestJointTrajectoryTracker:
    """Tests for keypoint capture into ring buffers."""

    def test_records_selected_confident_joints(self) -> None:
        tracker = JointTrajectoryTracker()
        added = tracker.record(_keypoints(j9=(1.0, 2.0, 0.9), j10=(3.0, 4.0, 0.8), j0=(5.0, 5.0, 0.9)), 0)
        assert added == 2
        assert tracker.samples(LEFT_WRIST) == [_sample(1.0, 2.0, 0)]
        assert tracker.samples(0) == []

    def test_confidence_floor_is_exclusive(self) -> None:
        tracker = JointTrajectoryTracker()
        tracker.record(_keypoints(j9=(1.0, 1.0, 0.3), j10=(1.0, 1.0, 0.31)), 0)
        assert tracker.samples(LEFT_WRIST) == []
        assert len(tracker.samples(RIGHT_WRIST)) == 1

    def test_scale_applied(self) -> None:
        tracker = JointTrajectoryTracker()
        tracker.record(_keypoints(j9=(10.0, 20.0, 0.9)), 4, scale_x=2.0, scale_y=0.5)
        assert tracker.samples(LEFT_WRIST) == [_sample(20.0, 10.0, 4)]

    def test_ring_buffer_keeps_latest(self) -> None:
        tracker = JointTrajectoryTracker(TrajectoryTrackerConfig(max_samples=300))
        for frame in range(350):
            tracker.record(_keypoints(j9=(float(frame), 0.0, 0.9)), frame)
        samples = tracker.samples(LEFT_WRIST)
        assert len(samples) == 300
        assert samples[0].frame_index == 50
        assert samples[-1].frame_index == 349

    def test_inactive_tracker_ignores_and_clears(self) -> None:
        tracker = JointTrajectoryTracker()
        tracker.record(_keypoints(j9=(1.0, 1.0, 0.9)), 0)
        tracker.set_active(False)
        assert tracker.samples(LEFT_WRIST) == []
        assert tracker.record(_keypoints(j9=(1.0, 1.0, 0.9)), 1) == 0

    def test_select_joints_drops_others(self) -> None:
        tracker = JointTrajectoryTracker()
        tracker.record(_keypoints(j9=(1.0, 1.0, 0.9), j10=(2.0, 2.0, 0.9)), 0)
        tracker.select_joints([RIGHT_WRIST])
        assert tracker.samples(LEFT_WRIST) == []
        assert len(tracker.samples(RIGHT_WRIST)) == 1

    def test_short_keypoint_list_ignored(self) -> None:
        tracker = JointTrajectoryTracker()
        assert tracker.record([{"x": 1.0, "y": 1.0, "score": 0.9}], 0) == 0

    def test_overlay_markers_every_fifth_sample(self) -> None:
        tracker = JointTrajectoryTracker()
        for frame in range(12):
            tracker.record(_keypoints(j9=(float(frame), 0.0, 0.9)), frame)
        overlay = tracker.overlay(LEFT_WRIST)
        assert [m.frame_index for m in overlay.markers] == [0, 5, 10]
        assert len(overlay.path) > 12

    def test_raw_overlay(self) -> None:
        tracker = JointTrajectoryTracker()
        for frame in range(3):
            tracker.record(_keypoints(j9=(float(frame), 0.0, 0.9)), frame)
        overlay = tracker.overlay(LEFT_WRIST, smooth=False)
        assert len(overlay.path) == 3

    def test_overlays_need_two_samples(self) -> None:
        tracker = JointTrajectoryTracker()
        tracker.record(_keypoints(j9=(1.0, 1.0, 0.9), j10=(1.0, 1.0, 0.9)), 0)
        tracker.record(_keypoints(j9=(2.0, 2.0, 0.9)), 1)
        overlays = tracker.overlays()
        assert [o.joint_index for o in overlays] == [LEFT_WRIST]
        assert overlays[0].to_dict()["joint"] == LEFT_WRIST
