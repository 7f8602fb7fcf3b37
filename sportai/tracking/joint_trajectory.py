"""Joint trajectory capture and smoothing for pose overlays.

Samples of a tracked joint arrive from the pose detector either on every
animation frame during playback or on discrete seeks while scrubbing, so
the sampling rate is not fixed. Local timing is derived from each
sample's frame index only.

The smoothed path is drawn as a stroke and the raw samples are drawn as
sparse markers, so viewers can tell measured positions from interpolated
ones.
"""

from __future__ import annotations

import logging
import math
from collections import deque
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from sportai.core.models import JointSample, TrajectoryPoint

logger = logging.getLogger(__name__)

BEZIER_SEGMENTS = 10
BEZIER_CONTROL_RATIO = 0.3
BASE_SEGMENTS = 8
MIN_SEGMENTS = 5
MAX_VELOCITY_RATIO = 3.0


# =============================================================================
# Curve primitives
# =============================================================================


def catmull_rom(
    p0: JointSample | TrajectoryPoint,
    p1: JointSample | TrajectoryPoint,
    p2: JointSample | TrajectoryPoint,
    p3: JointSample | TrajectoryPoint,
    t: float,
) -> TrajectoryPoint:
    """Uniform Catmull-Rom point between p1 (t=0) and p2 (t=1)."""
    t2 = t * t
    t3 = t2 * t

    def axis(a: float, b: float, c: float, d: float) -> float:
        return 0.5 * (
            2 * b
            + (-a + c) * t
            + (2 * a - 5 * b + 4 * c - d) * t2
            + (-a + 3 * b - 3 * c + d) * t3
        )

    return TrajectoryPoint(
        x=axis(p0.x, p1.x, p2.x, p3.x),
        y=axis(p0.y, p1.y, p2.y, p3.y),
    )


def cubic_bezier(
    start: JointSample | TrajectoryPoint,
    end: JointSample | TrajectoryPoint,
    segments: int = BEZIER_SEGMENTS,
    control_ratio: float = BEZIER_CONTROL_RATIO,
) -> list[TrajectoryPoint]:
    """Cubic Bezier between two points with control points on the chord.

    Returns ``segments + 1`` points including both endpoints.
    """
    dx = end.x - start.x
    dy = end.y - start.y
    c1x, c1y = start.x + dx * control_ratio, start.y + dy * control_ratio
    c2x, c2y = end.x - dx * control_ratio, end.y - dy * control_ratio

    points = []
    for i in range(segments + 1):
        t = i / segments
        mt = 1 - t
        points.append(TrajectoryPoint(
            x=mt**3 * start.x + 3 * mt**2 * t * c1x + 3 * mt * t**2 * c2x + t**3 * end.x,
            y=mt**3 * start.y + 3 * mt**2 * t * c1y + 3 * mt * t**2 * c2y + t**3 * end.y,
        ))
    return points


def point_velocity(a: JointSample, b: JointSample) -> float:
    """Pixels per frame between two samples (zero frame delta counts as 1)."""
    distance = math.hypot(b.x - a.x, b.y - a.y)
    frame_delta = (b.frame_index - a.frame_index) or 1
    return distance / frame_delta


def segment_count(velocity: float, avg_velocity: float) -> int:
    """Interpolated segments for a gap, scaled by its relative speed."""
    ratio = min(velocity / (avg_velocity or 1.0), MAX_VELOCITY_RATIO)
    # Half-up rounding; round() would send 8.5 to 8
    return max(MIN_SEGMENTS, math.floor(BASE_SEGMENTS * (1 + ratio * 0.5) + 0.5))


# =============================================================================
# Smoothing
# =============================================================================


def smooth_trajectory(samples: Sequence[JointSample]) -> list[TrajectoryPoint]:
    """Smooth a joint's samples into a dense polyline.

    - 0-1 samples: returned as points, no curve.
    - 2 samples: 10-segment cubic Bezier (11 points).
    - 3+ samples: Catmull-Rom through every sample with velocity-adaptive
      segment counts, starting at the first sample.
    """
    if len(samples) < 2:
        return [TrajectoryPoint(x=s.x, y=s.y) for s in samples]

    if len(samples) == 2:
        return cubic_bezier(samples[0], samples[1])

    velocities = [point_velocity(a, b) for a, b in zip(samples, samples[1:])]
    avg_velocity = sum(velocities) / len(velocities)

    smoothed = [TrajectoryPoint(x=samples[0].x, y=samples[0].y)]
    last = len(samples) - 1

    for i in range(last):
        p0 = samples[max(i - 1, 0)]
        p1 = samples[i]
        p2 = samples[i + 1]
        p3 = samples[min(i + 2, last)]

        segments = segment_count(velocities[i], avg_velocity)
        for j in range(1, segments + 1):
            smoothed.append(catmull_rom(p0, p1, p2, p3, j / segments))

    return smoothed


# =============================================================================
# Sample capture
# =============================================================================


@dataclass
class TrajectoryTrackerConfig:
    """Configuration for joint trajectory capture."""

    max_samples: int = 300  # Ring buffer capacity per joint
    min_keypoint_score: float = 0.3  # Keypoints at or below are ignored
    marker_every: int = 5  # Draw every Nth raw sample as a marker
    joints: tuple[int, ...] = (9, 10)  # COCO left/right wrist


@dataclass
class TrajectoryOverlay:
    """Renderer input for one joint."""

    joint_index: int
    path: list[TrajectoryPoint] = field(default_factory=list)
    markers: list[JointSample] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "joint": self.joint_index,
            "path": [p.to_dict() for p in self.path],
            "markers": [
                {"x": m.x, "y": m.y, "frame": m.frame_index} for m in self.markers
            ],
        }


class JointTrajectoryTracker:
    """Collects confident keypoints of selected joints into bounded buffers."""

    def __init__(self, config: TrajectoryTrackerConfig | None = None):
        self.config = config or TrajectoryTrackerConfig()
        self.active = True
        self._buffers: dict[int, deque[JointSample]] = {}

    @property
    def joints(self) -> tuple[int, ...]:
        return self.config.joints

    def set_active(self, active: bool) -> None:
        """Start or stop tracking. Stopping discards collected samples."""
        self.active = active
        if not active:
            self.clear()

    def select_joints(self, joints: Iterable[int]) -> None:
        """Change the tracked joints; samples of dropped joints are discarded."""
        self.config.joints = tuple(joints)
        for joint in list(self._buffers):
            if joint not in self.config.joints:
                del self._buffers[joint]

    def clear(self) -> None:
        self._buffers.clear()

    def record(
        self,
        keypoints: Sequence[Mapping[str, Any]],
        frame_index: int,
        scale_x: float = 1.0,
        scale_y: float = 1.0,
    ) -> int:
        """Append this frame's keypoints for the tracked joints.

        Args:
            keypoints: Pose keypoints indexed by joint, each ``{x, y, score}``.
            frame_index: Video frame the pose was detected on.
            scale_x: Model-to-canvas horizontal scale.
            scale_y: Model-to-canvas vertical scale.

        Returns:
            Number of samples appended.
        """
        if not self.active:
            return 0

        appended = 0
        for joint in self.config.joints:
            if joint >= len(keypoints):
                continue
            keypoint = keypoints[joint]
            if keypoint is None:
                continue
            score = keypoint.get("score")
            if (score or 0.0) <= self.config.min_keypoint_score:
                continue

            buffer = self._buffers.get(joint)
            if buffer is None:
                buffer = deque(maxlen=self.config.max_samples)
                self._buffers[joint] = buffer
            buffer.append(JointSample(
                x=float(keypoint["x"]) * scale_x,
                y=float(keypoint["y"]) * scale_y,
                frame_index=frame_index,
            ))
            appended += 1

        return appended

    def samples(self, joint: int) -> list[JointSample]:
        return list(self._buffers.get(joint, ()))

    def overlay(self, joint: int, smooth: bool = True) -> TrajectoryOverlay:
        """Smoothed path plus raw-sample markers for a joint."""
        samples = self.samples(joint)
        if smooth:
            path = smooth_trajectory(samples)
        else:
            path = [TrajectoryPoint(x=s.x, y=s.y) for s in samples]
        markers = samples[:: max(1, self.config.marker_every)]
        return TrajectoryOverlay(joint_index=joint, path=path, markers=markers)

    def overlays(self, smooth: bool = True) -> list[TrajectoryOverlay]:
        """Overlays for every joint with at least two samples."""
        return [
            self.overlay(joint, smooth)
            for joint in self.config.joints
            if len(self._buffers.get(joint, ())) >= 2
        ]
