"""Core domain models for SportAI."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any


class BounceKind(str, Enum):
    """Provenance/classification of a bounce event."""

    ORIGINAL_DETECTED = "original"
    SWING_DERIVED = "swing"
    FLOOR_INFERRED = "inferred"
    WALL_INFERRED = "inferred_wall"
    SWING_INFERRED = "inferred_swing"

    @property
    def is_inferred_passive(self) -> bool:
        """Floor/wall events synthesized from the ball trajectory."""
        return self in (BounceKind.FLOOR_INFERRED, BounceKind.WALL_INFERRED)


class CourtSide(str, Enum):
    """Court half relative to the net line."""

    NEAR = "near"
    FAR = "far"


@dataclass(frozen=True)
class BallPositionSample:
    """Ball position at a point in time (normalized 0-1 coordinates)."""

    timestamp: float
    x: float
    y: float

    def to_dict(self) -> dict[str, float]:
        return {"timestamp": self.timestamp, "X": self.x, "Y": self.y}


@dataclass(frozen=True)
class SwingEvent:
    """A shot detected by the technique-analysis model."""

    hit_timestamp: float
    player_id: int
    ball_speed: float = 0.0
    swing_type: str = "unknown"
    hit_frame: int | None = None
    is_serve: bool = False
    is_volley: bool = False
    is_in_rally: bool = True


@dataclass(frozen=True)
class BounceEvent:
    """A detected or inferred ball contact with a surface or racket.

    Only ``kind`` may change over an event's life, and only by producing a
    new record through :meth:`with_kind`.
    """

    timestamp: float
    court_pos: tuple[float, float]
    player_id: int = -1
    kind: BounceKind = BounceKind.ORIGINAL_DETECTED
    label: str | None = None  # Upstream "type" string for detected events

    @property
    def x(self) -> float:
        return self.court_pos[0]

    @property
    def y(self) -> float:
        return self.court_pos[1]

    @property
    def type_tag(self) -> str:
        """Tag handed to the renderer (upstream label for detected events)."""
        if self.kind == BounceKind.ORIGINAL_DETECTED and self.label:
            return self.label
        return self.kind.value

    def court_side(self, center_y: float = 0.5) -> CourtSide:
        return CourtSide.NEAR if self.y > center_y else CourtSide.FAR

    def with_kind(self, kind: BounceKind) -> BounceEvent:
        return replace(self, kind=kind)

    def to_dict(self) -> dict[str, Any]:
        return {
            "timestamp": self.timestamp,
            "court_pos": [self.court_pos[0], self.court_pos[1]],
            "player_id": self.player_id,
            "type": self.type_tag,
            "kind": self.kind.value,
        }


@dataclass(frozen=True)
class RallyInterval:
    """A rally as supplied by upstream analysis."""

    start_time: float
    end_time: float

    @property
    def duration(self) -> float:
        return self.end_time - self.start_time

    def contains(self, time: float) -> bool:
        return self.start_time <= time <= self.end_time

    def buffered_start(self, buffer: float) -> float:
        """Start of the lead-in window shown before the rally."""
        return max(0.0, self.start_time - buffer)

    def to_list(self) -> list[float]:
        return [self.start_time, self.end_time]


@dataclass(frozen=True)
class JointSample:
    """A pose keypoint captured for a tracked joint (canvas pixels)."""

    x: float
    y: float
    frame_index: int


@dataclass(frozen=True)
class TrajectoryPoint:
    """A vertex of a smoothed trajectory polyline."""

    x: float
    y: float

    def to_dict(self) -> dict[str, float]:
        return {"x": self.x, "y": self.y}


@dataclass(frozen=True)
class PlayerMetricSet:
    """Per-player aggregates computed upstream."""

    player_id: int
    swing_count: int = 0
    covered_distance: float = 0.0
    fastest_sprint: float = 0.0
    swings: tuple[SwingEvent, ...] = ()

    @property
    def max_ball_speed(self) -> float:
        if not self.swings:
            return 0.0
        return max(s.ball_speed for s in self.swings)

    @property
    def shot_count(self) -> int:
        return len(self.swings)


@dataclass
class AnalysisResult:
    """One upstream analysis result after ingestion."""

    ball_positions: list[BallPositionSample] = field(default_factory=list)
    bounces: list[BounceEvent] = field(default_factory=list)
    swings: list[SwingEvent] = field(default_factory=list)
    rallies: list[RallyInterval] = field(default_factory=list)
    players: list[PlayerMetricSet] = field(default_factory=list)

    @property
    def duration(self) -> float:
        """Latest timestamp seen in positions or rallies."""
        candidates = [0.0]
        if self.ball_positions:
            candidates.append(self.ball_positions[-1].timestamp)
        if self.rallies:
            candidates.append(self.rallies[-1].end_time)
        return max(candidates)
