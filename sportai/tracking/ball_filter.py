"""
Cleanup of the ball position series for overlay drawing.

Three optional stages, applied in order:
1. Outlier removal (teleportation detection)
2. Gap interpolation with Catmull-Rom splines
3. Temporal smoothing (weighted moving average or Savitzky-Golay)

Bounce inference runs on the raw series; this filter only feeds the ball
trail overlay.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np

from sportai.core.models import BallPositionSample
from sportai.tracking.bounce_inference import angle_between_vectors
from sportai.tracking.joint_trajectory import catmull_rom

logger = logging.getLogger(__name__)


@dataclass
class BallFilterConfig:
    """Configuration for ball trail filtering."""

    # Outlier removal
    remove_outliers: bool = True
    max_velocity: float = 0.6  # Normalized units per second (aggressive)
    sharp_angle_deg: float = 90.0  # Direction change treated as suspicious
    min_leg_distance: float = 0.02  # Both legs of a sharp turn must exceed this
    jump_distance: float = 0.15  # Sustained jump distance...
    jump_duration: float = 0.15  # ...within this many seconds
    min_step_distance: float = 0.03  # Velocity-adaptive per-step limit (slow ball)
    max_step_distance: float = 0.12  # Velocity-adaptive per-step limit (fast ball)
    step_velocity_scale: float = 0.08

    # Gap interpolation
    interpolate_gaps: bool = True
    max_gap_duration: float = 0.5  # Seconds; longer gaps are left empty
    fps: float = 30.0

    # Smoothing
    smooth_trajectory: bool = True
    smoothing_window: int = 3
    smoothing_method: str = "weighted"  # "weighted" or "savgol"
    savgol_order: int = 2


@dataclass(frozen=True)
class FilteredBallPosition:
    """Ball sample after filtering."""

    timestamp: float
    x: float
    y: float
    interpolated: bool = False
    original_index: int | None = None

    def to_dict(self) -> dict:
        result = {"timestamp": self.timestamp, "X": self.x, "Y": self.y}
        if self.interpolated:
            result["interpolated"] = True
        return result


@dataclass
class FilterStats:
    """Counts from one filter run."""

    original_count: int = 0
    removed_outliers: int = 0
    interpolated_points: int = 0
    final_count: int = 0

    def to_dict(self) -> dict:
        return {
            "originalCount": self.original_count,
            "removedOutliers": self.removed_outliers,
            "interpolatedPoints": self.interpolated_points,
            "finalCount": self.final_count,
        }


def _distance(a: BallPositionSample, b: BallPositionSample) -> float:
    return math.hypot(b.x - a.x, b.y - a.y)


def _velocity(a: BallPositionSample, b: BallPositionSample) -> float:
    dt = b.timestamp - a.timestamp
    if dt <= 0:
        return 0.0
    return _distance(a, b) / dt


def _turn_angle(prev: BallPositionSample, curr: BallPositionSample, nxt: BallPositionSample) -> float:
    return angle_between_vectors(
        curr.x - prev.x, curr.y - prev.y, nxt.x - curr.x, nxt.y - curr.y
    )


class BallPositionFilter:
    """Removes tracker outliers, fills short gaps and smooths the ball trail."""

    def __init__(self, config: BallFilterConfig | None = None):
        self.config = config or BallFilterConfig()

    def filter(
        self, positions: Sequence[BallPositionSample]
    ) -> tuple[list[FilteredBallPosition], FilterStats]:
        """Apply all enabled stages.

        Returns:
            (filtered positions, stats).
        """
        if not positions:
            return [], FilterStats()

        current = sorted(positions, key=lambda p: p.timestamp)
        stats = FilterStats(original_count=len(positions))

        if self.config.remove_outliers:
            current, stats.removed_outliers = self.remove_outliers(current)

        if self.config.interpolate_gaps:
            filtered, stats.interpolated_points = self.interpolate_gaps(current)
        else:
            filtered = [
                FilteredBallPosition(p.timestamp, p.x, p.y, original_index=i)
                for i, p in enumerate(current)
            ]

        if self.config.smooth_trajectory:
            filtered = self.smooth(filtered)

        stats.final_count = len(filtered)
        logger.info(
            f"Ball filter: {stats.original_count} -> {stats.final_count} positions "
            f"({stats.removed_outliers} outliers removed, "
            f"{stats.interpolated_points} interpolated)"
        )
        return filtered, stats

    # -------------------------------------------------------------------------
    # Stage 1: outlier removal
    # -------------------------------------------------------------------------

    def _suspicious_indices(self, positions: Sequence[BallPositionSample]) -> set[int]:
        cfg = self.config
        max_vel = cfg.max_velocity
        n = len(positions)
        suspicious: set[int] = set()

        # Frame-to-frame velocity
        for i in range(1, n):
            if _velocity(positions[i - 1], positions[i]) > max_vel:
                suspicious.update((i - 1, i))

        # 3-frame window catches gradual drift onto a false positive
        for i in range(2, n):
            if _velocity(positions[i - 2], positions[i]) > max_vel * 1.2:
                suspicious.update((i - 1, i))

        # 5-frame window
        for i in range(4, n):
            if _velocity(positions[i - 4], positions[i]) > max_vel * 1.5:
                suspicious.update(range(i - 3, i + 1))

        # Sharp turns over significant distances
        for i in range(1, n - 1):
            prev, curr, nxt = positions[i - 1], positions[i], positions[i + 1]
            if (
                _turn_angle(prev, curr, nxt) > cfg.sharp_angle_deg
                and _distance(prev, curr) > cfg.min_leg_distance
                and _distance(curr, nxt) > cfg.min_leg_distance
            ):
                suspicious.add(i)

        # Ping-pong: closer to two frames ago than to the previous frame
        for i in range(2, n - 1):
            to_prev1 = _distance(positions[i], positions[i - 1])
            to_prev2 = _distance(positions[i], positions[i - 2])
            if to_prev2 < to_prev1 * 0.3 and to_prev1 > 0.05:
                suspicious.add(i - 1)

        # Sustained jump away from where the window started
        if n >= 6:
            for start in range(n - 4):
                cx = (positions[start].x + positions[start + 1].x) / 2
                cy = (positions[start].y + positions[start + 1].y) / 2
                for j in range(start + 2, min(start + 5, n)):
                    dist = math.hypot(positions[j].x - cx, positions[j].y - cy)
                    dt = positions[j].timestamp - positions[start].timestamp
                    if dist > cfg.jump_distance and dt < cfg.jump_duration:
                        suspicious.update(range(start + 1, j + 1))

        # Velocity-adaptive step distance
        for i in range(1, n):
            local_velocity = 0.0
            if i >= 2:
                lookback = min(3, i)
                total = sum(
                    _velocity(positions[j], positions[j + 1])
                    for j in range(i - lookback, i)
                )
                local_velocity = total / lookback
            threshold = min(
                cfg.max_step_distance,
                cfg.min_step_distance + local_velocity * cfg.step_velocity_scale,
            )
            if _distance(positions[i - 1], positions[i]) > threshold:
                suspicious.update((i - 1, i))

        return suspicious

    def remove_outliers(
        self, positions: Sequence[BallPositionSample]
    ) -> tuple[list[BallPositionSample], int]:
        """Drop suspicious samples that do not fit their good neighbours."""
        if len(positions) < 3:
            return list(positions), 0

        suspicious = self._suspicious_indices(positions)
        max_vel = self.config.max_velocity
        kept: list[BallPositionSample] = []
        removed = 0

        for i, pos in enumerate(positions):
            if i not in suspicious:
                kept.append(pos)
                continue

            prev = positions[i - 1] if i > 0 else None
            nxt = positions[i + 1] if i < len(positions) - 1 else None
            prev_ok = prev is not None and (i - 1) not in suspicious
            next_ok = nxt is not None and (i + 1) not in suspicious

            if prev_ok and next_ok:
                mid_x = (prev.x + nxt.x) / 2
                mid_y = (prev.y + nxt.y) / 2
                deviation = math.hypot(pos.x - mid_x, pos.y - mid_y)
                consistent = deviation < _distance(prev, nxt) * 0.4
            elif prev_ok:
                consistent = _velocity(prev, pos) < max_vel * 0.5
            elif next_ok:
                consistent = _velocity(pos, nxt) < max_vel * 0.5
            else:
                consistent = False

            if consistent:
                kept.append(pos)
            else:
                removed += 1

        if removed:
            logger.debug(f"Outlier removal: dropped {removed}/{len(positions)} positions")
        return kept, removed

    # -------------------------------------------------------------------------
    # Stage 2: gap interpolation
    # -------------------------------------------------------------------------

    def interpolate_gaps(
        self, positions: Sequence[BallPositionSample]
    ) -> tuple[list[FilteredBallPosition], int]:
        """Fill gaps longer than 2.5 frame intervals and at most max_gap_duration."""
        frame_interval = 1.0 / self.config.fps
        gap_threshold = frame_interval * 2.5
        result: list[FilteredBallPosition] = []
        added = 0
        last = len(positions) - 1

        for i, curr in enumerate(positions):
            result.append(FilteredBallPosition(curr.timestamp, curr.x, curr.y, original_index=i))
            if i == last:
                break

            nxt = positions[i + 1]
            dt = nxt.timestamp - curr.timestamp
            if not (gap_threshold < dt <= self.config.max_gap_duration):
                continue

            p0 = positions[i - 1] if i > 0 else curr
            p3 = positions[i + 2] if i + 2 <= last else nxt
            num_points = round(dt / frame_interval) - 1
            for j in range(1, num_points + 1):
                t = j / (num_points + 1)
                point = catmull_rom(p0, curr, nxt, p3, t)
                result.append(FilteredBallPosition(
                    timestamp=curr.timestamp + dt * t,
                    x=point.x,
                    y=point.y,
                    interpolated=True,
                ))
                added += 1

        return result, added

    # -------------------------------------------------------------------------
    # Stage 3: smoothing
    # -------------------------------------------------------------------------

    def smooth(self, positions: Sequence[FilteredBallPosition]) -> list[FilteredBallPosition]:
        if self.config.smoothing_method == "savgol":
            return self.smooth_savgol(positions)
        return self.smooth_weighted(positions)

    def smooth_weighted(
        self, positions: Sequence[FilteredBallPosition]
    ) -> list[FilteredBallPosition]:
        """Weighted moving average; the centre sample has the most weight."""
        window = self.config.smoothing_window
        if len(positions) < window:
            return list(positions)

        half = window // 2
        xs = np.array([p.x for p in positions])
        ys = np.array([p.y for p in positions])
        smoothed = []

        for i, pos in enumerate(positions):
            start = max(0, i - half)
            end = min(len(positions), i + half + 1)
            weights = 1.0 / (1.0 + np.abs(np.arange(start, end) - i) * 0.5)
            smoothed.append(FilteredBallPosition(
                timestamp=pos.timestamp,
                x=float(np.dot(xs[start:end], weights) / weights.sum()),
                y=float(np.dot(ys[start:end], weights) / weights.sum()),
                interpolated=pos.interpolated,
                original_index=pos.original_index,
            ))

        return smoothed

    def smooth_savgol(
        self, positions: Sequence[FilteredBallPosition]
    ) -> list[FilteredBallPosition]:
        """Savitzky-Golay smoothing; keeps sharp bounces better than averaging."""
        from scipy.signal import savgol_filter

        window = min(self.config.smoothing_window, len(positions))
        if window % 2 == 0:
            window -= 1
        if window < 3:
            return list(positions)
        order = min(self.config.savgol_order, window - 1)

        try:
            xs = savgol_filter(np.array([p.x for p in positions]), window, order)
            ys = savgol_filter(np.array([p.y for p in positions]), window, order)
        except ValueError as e:
            logger.warning(f"Savitzky-Golay filter failed: {e}")
            return list(positions)

        xs = np.clip(xs, 0.0, 1.0)
        ys = np.clip(ys, 0.0, 1.0)
        return [
            FilteredBallPosition(
                timestamp=pos.timestamp,
                x=float(xs[i]),
                y=float(ys[i]),
                interpolated=pos.interpolated,
                original_index=pos.original_index,
            )
            for i, pos in enumerate(positions)
        ]
