"""Bounce inference from swings and the ball trajectory.

The upstream bounce detector is sparse. This module adds two kinds of
synthetic events on top of the detected ones:

- Swing-derived bounces: every shot with a measured ball speed is a ball
  contact, placed at the ball sample closest to the hit time.
- Trajectory-derived bounces: floor and wall contacts found in the dense
  ball position series, either from a velocity reversal or, failing that,
  from a sharp change of direction.

All functions are pure: the output depends only on the arguments.
"""

from __future__ import annotations

import logging
import math
from collections import Counter
from collections.abc import Sequence
from dataclasses import dataclass

from sportai.core.models import (
    BallPositionSample,
    BounceEvent,
    BounceKind,
    SwingEvent,
)

logger = logging.getLogger(__name__)


@dataclass
class BounceInferenceConfig:
    """Configuration for synthetic bounce inference."""

    # Step toggles
    infer_swing_bounces: bool = True
    infer_trajectory_bounces: bool = True

    # Swing-derived bounces
    swing_match_window: float = 0.15  # Max |sample - hit| and dedup window (s)
    swing_search_horizon: float = 0.2  # Stop scanning samples this far past the hit

    # Trajectory-derived bounces
    trajectory_dedup_window: float = 0.2  # Min distance to any accepted event (s)
    edge_margin: int = 2  # Samples skipped at both ends of the series
    skip_after_accept: int = 3  # Extra samples skipped after an accepted bounce

    # Velocity reversal (normalized units / second)
    y_velocity_threshold: float = 0.5
    y_reversal_ratio: float = 0.3  # Rising speed must exceed ratio * threshold
    x_velocity_threshold: float = 0.3
    x_reversal_ratio: float = 0.5

    # Court geometry (normalized)
    floor_min_y: float = 0.1
    floor_max_y: float = 0.95
    wall_edge_margin: float = 0.15  # x < margin or x > 1 - margin

    # Sharp-angle fallback
    sharp_angle_deg: float = 55.0


@dataclass
class TrajectoryKinematics:
    """Local motion around a candidate sample."""

    vel_x_before: float
    vel_x_after: float
    vel_y_before: float
    vel_y_after: float
    angle_deg: float


def angle_between_vectors(v1x: float, v1y: float, v2x: float, v2y: float) -> float:
    """Angle between two vectors in degrees (0 if either has zero length)."""
    mag1 = math.sqrt(v1x * v1x + v1y * v1y)
    mag2 = math.sqrt(v2x * v2x + v2y * v2y)
    if mag1 == 0 or mag2 == 0:
        return 0.0
    dot = v1x * v2x + v1y * v2y
    cos_angle = max(-1.0, min(1.0, dot / (mag1 * mag2)))
    return math.degrees(math.acos(cos_angle))


def _is_near_side_edge(x: float, config: BounceInferenceConfig) -> bool:
    return x < config.wall_edge_margin or x > 1.0 - config.wall_edge_margin


def _is_near_existing(timestamp: float, accepted: Sequence[float], window: float) -> bool:
    return any(abs(t - timestamp) < window for t in accepted)


# =============================================================================
# Step A: swing-derived bounces
# =============================================================================


def find_closest_sample(
    positions: Sequence[BallPositionSample],
    timestamp: float,
    search_horizon: float = 0.2,
) -> tuple[BallPositionSample | None, float]:
    """Find the ball sample closest in time to ``timestamp``.

    Positions must be sorted by timestamp. Samples more than
    ``search_horizon`` past the target are never reached.

    Returns:
        (sample, |sample.timestamp - timestamp|); (None, inf) if no positions.
    """
    if not positions:
        return None, math.inf

    closest = positions[0]
    closest_diff = abs(closest.timestamp - timestamp)
    for pos in positions:
        diff = abs(pos.timestamp - timestamp)
        if diff < closest_diff:
            closest_diff = diff
            closest = pos
        if pos.timestamp > timestamp + search_horizon:
            break

    return closest, closest_diff


def infer_swing_bounces(
    positions: Sequence[BallPositionSample],
    swings: Sequence[SwingEvent],
    detected: Sequence[BounceEvent],
    config: BounceInferenceConfig | None = None,
) -> list[BounceEvent]:
    """Synthesize a bounce at the hit moment of each shot.

    Swings without a ball speed are ignored. A swing is skipped when a
    detected bounce, or a swing bounce already synthesized here, lies
    within ``swing_match_window`` of its hit time.
    """
    config = config or BounceInferenceConfig()
    if not positions:
        return []

    window = config.swing_match_window
    detected_times = [
        b.timestamp for b in detected if b.kind == BounceKind.ORIGINAL_DETECTED
    ]
    derived: list[BounceEvent] = []

    for swing in sorted(swings, key=lambda s: s.hit_timestamp):
        if swing.ball_speed <= 0:
            continue

        hit_time = swing.hit_timestamp
        if _is_near_existing(hit_time, detected_times, window):
            continue
        if _is_near_existing(hit_time, [b.timestamp for b in derived], window):
            logger.debug(f"Swing at {hit_time:.2f}s: duplicate of earlier swing bounce")
            continue

        closest, diff = find_closest_sample(
            positions, hit_time, config.swing_search_horizon
        )
        if closest is None or diff >= window:
            logger.debug(
                f"Swing at {hit_time:.2f}s: no ball sample within {window:.2f}s"
            )
            continue

        derived.append(BounceEvent(
            timestamp=hit_time,
            court_pos=(closest.x, closest.y),
            player_id=swing.player_id,
            kind=BounceKind.SWING_DERIVED,
        ))

    return derived


# =============================================================================
# Step B: trajectory-derived bounces
# =============================================================================


def compute_kinematics(
    prev: BallPositionSample,
    curr: BallPositionSample,
    nxt: BallPositionSample,
) -> TrajectoryKinematics | None:
    """Velocities and turn angle at ``curr``.

    Returns None when either time step is not positive.
    """
    dt_in = curr.timestamp - prev.timestamp
    dt_out = nxt.timestamp - curr.timestamp
    if not (dt_in > 0 and dt_out > 0):
        return None

    incoming_x = curr.x - prev.x
    incoming_y = curr.y - prev.y
    outgoing_x = nxt.x - curr.x
    outgoing_y = nxt.y - curr.y

    return TrajectoryKinematics(
        vel_x_before=incoming_x / dt_in,
        vel_x_after=outgoing_x / dt_out,
        vel_y_before=incoming_y / dt_in,
        vel_y_after=outgoing_y / dt_out,
        angle_deg=angle_between_vectors(incoming_x, incoming_y, outgoing_x, outgoing_y),
    )


def classify_bounce(
    sample: BallPositionSample,
    kin: TrajectoryKinematics,
    config: BounceInferenceConfig | None = None,
) -> BounceKind | None:
    """Classify a candidate sample as floor/wall bounce, or None.

    Velocity reversal is tried first. The sharp-angle fallback only runs
    when it did not classify the sample, and defaults to a floor bounce
    anywhere away from the side edges.
    """
    config = config or BounceInferenceConfig()
    y_thr = config.y_velocity_threshold
    x_thr = config.x_velocity_threshold
    kind: BounceKind | None = None

    # Method 1: velocity reversal. NaN values fail every comparison.
    if kin.vel_y_before > y_thr and kin.vel_y_after < -y_thr * config.y_reversal_ratio:
        if config.floor_min_y < sample.y < config.floor_max_y:
            kind = BounceKind.FLOOR_INFERRED
    elif (
        (kin.vel_x_before > x_thr and kin.vel_x_after < -x_thr * config.x_reversal_ratio)
        or (kin.vel_x_before < -x_thr and kin.vel_x_after > x_thr * config.x_reversal_ratio)
    ):
        if _is_near_side_edge(sample.x, config):
            kind = BounceKind.WALL_INFERRED

    # Method 2: sharp change of direction
    if kind is None and kin.angle_deg > config.sharp_angle_deg:
        if _is_near_side_edge(sample.x, config):
            kind = BounceKind.WALL_INFERRED
        else:
            kind = BounceKind.FLOOR_INFERRED

    return kind


def infer_trajectory_bounces(
    positions: Sequence[BallPositionSample],
    existing: Sequence[BounceEvent],
    config: BounceInferenceConfig | None = None,
) -> list[BounceEvent]:
    """Find floor/wall bounces in the dense ball position series.

    Args:
        positions: Ball samples sorted by timestamp.
        existing: Events already accepted (detected and swing-derived).
        config: Thresholds.

    Returns:
        New FLOOR_INFERRED / WALL_INFERRED events in time order.
    """
    config = config or BounceInferenceConfig()
    margin = max(1, config.edge_margin)
    window = config.trajectory_dedup_window

    accepted_times = [b.timestamp for b in existing]
    inferred: list[BounceEvent] = []

    i = margin
    while i < len(positions) - margin:
        curr = positions[i]

        if _is_near_existing(curr.timestamp, accepted_times, window):
            i += 1
            continue

        kin = compute_kinematics(positions[i - 1], curr, positions[i + 1])
        kind = classify_bounce(curr, kin, config) if kin is not None else None

        if kind is None:
            i += 1
            continue

        logger.debug(
            f"Inferred {kind.value} at {curr.timestamp:.2f}s "
            f"(vy {kin.vel_y_before:.2f}->{kin.vel_y_after:.2f}, "
            f"angle {kin.angle_deg:.0f} deg)"
        )
        inferred.append(BounceEvent(
            timestamp=curr.timestamp,
            court_pos=(curr.x, curr.y),
            player_id=-1,
            kind=kind,
        ))
        accepted_times.append(curr.timestamp)
        i += 1 + config.skip_after_accept

    return inferred


# =============================================================================
# Public entry point
# =============================================================================


def infer_bounces(
    positions: Sequence[BallPositionSample],
    swings: Sequence[SwingEvent],
    bounces: Sequence[BounceEvent],
    config: BounceInferenceConfig | None = None,
) -> list[BounceEvent]:
    """Extend detected bounces with swing- and trajectory-derived events.

    Returns detected events followed by synthetic ones. Without ball
    positions the detected events are returned unchanged.
    """
    config = config or BounceInferenceConfig()
    detected = list(bounces)

    if not positions:
        return detected

    synthetic: list[BounceEvent] = []

    if config.infer_swing_bounces:
        synthetic.extend(infer_swing_bounces(positions, swings, detected, config))

    if config.infer_trajectory_bounces:
        synthetic.extend(
            infer_trajectory_bounces(positions, detected + synthetic, config)
        )

    if synthetic:
        counts = Counter(b.kind.value for b in synthetic)
        summary = ", ".join(f"{k}={n}" for k, n in sorted(counts.items()))
        logger.info(f"Inferred {len(synthetic)} synthetic bounces ({summary})")

    return detected + synthetic
