"""Match summary statistics.

Aggregates rally timing, player movement, shot speeds and the enriched
bounce list into the figures shown on the summary tab. Only players with
enough swings to be shown on the cards contribute.
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

import numpy as np

from sportai.core.models import AnalysisResult, BounceEvent, SwingEvent
from sportai.statistics.rankings import MIN_SWINGS_THRESHOLD

logger = logging.getLogger(__name__)

SWING_TAGS = frozenset({"swing", "inferred_swing"})
WALL_TAGS = frozenset({"inferred_wall", "inferred_back"})
FLOOR_TAGS = frozenset({"inferred", "floor"})


@dataclass
class BounceCounts:
    """Enriched bounces grouped by surface."""

    floor: int = 0
    wall: int = 0
    swing: int = 0
    other: int = 0

    @property
    def total(self) -> int:
        return self.floor + self.wall + self.swing + self.other

    def to_dict(self) -> dict[str, int]:
        return {"floor": self.floor, "wall": self.wall, "swing": self.swing, "other": self.other}


@dataclass
class SwingTypeShare:
    """Share of one swing type among all counted swings."""

    swing_type: str
    count: int
    percent: int

    @property
    def label(self) -> str:
        return self.swing_type.replace("_", " ").title()

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.swing_type, "label": self.label, "value": self.percent, "count": self.count}


@dataclass
class SpeedStats:
    """Max/average over positive speeds only."""

    max: float = 0.0
    avg: float = 0.0
    count: int = 0

    @classmethod
    def from_values(cls, values: Sequence[float]) -> SpeedStats:
        positive = [v for v in values if v > 0]
        if not positive:
            return cls()
        return cls(max=float(max(positive)), avg=float(np.mean(positive)), count=len(positive))

    def to_dict(self) -> dict[str, float]:
        return {"max": round(self.max, 2), "avg": round(self.avg, 2)}


@dataclass
class SummaryStats:
    """Everything on the match summary tab."""

    rallies_count: int = 0
    total_swings: int = 0
    total_rally_duration: float = 0.0
    avg_rally_duration: float = 0.0
    avg_shots_per_rally: float = 0.0
    avg_rally_intensity: float = 0.0  # Shots per second of rally time
    max_rally_intensity: float = 0.0
    total_distance_covered: float = 0.0
    avg_distance_per_player: float = 0.0
    sprint: SpeedStats = field(default_factory=SpeedStats)
    ball_speed: SpeedStats = field(default_factory=SpeedStats)
    serve_speed: SpeedStats = field(default_factory=SpeedStats)
    volley_speed: SpeedStats = field(default_factory=SpeedStats)
    ground_stroke_speed: SpeedStats = field(default_factory=SpeedStats)
    serve_count: int = 0
    volley_count: int = 0
    ground_stroke_count: int = 0
    total_swing_count: int = 0
    swing_types: list[SwingTypeShare] = field(default_factory=list)
    bounce_counts: BounceCounts = field(default_factory=BounceCounts)

    def to_dict(self) -> dict[str, Any]:
        return {
            "ralliesCount": self.rallies_count,
            "totalSwings": self.total_swings,
            "totalRallyDuration": round(self.total_rally_duration, 2),
            "avgRallyDuration": round(self.avg_rally_duration, 2),
            "avgShotsPerRally": round(self.avg_shots_per_rally, 2),
            "avgRallyIntensity": round(self.avg_rally_intensity, 3),
            "maxRallyIntensity": round(self.max_rally_intensity, 3),
            "totalDistanceCovered": round(self.total_distance_covered, 1),
            "avgDistancePerPlayer": round(self.avg_distance_per_player, 1),
            "sprintSpeed": self.sprint.to_dict(),
            "ballSpeed": self.ball_speed.to_dict(),
            "serveSpeed": self.serve_speed.to_dict(),
            "volleySpeed": self.volley_speed.to_dict(),
            "groundStrokeSpeed": self.ground_stroke_speed.to_dict(),
            "serveCount": self.serve_count,
            "volleyCount": self.volley_count,
            "groundStrokeCount": self.ground_stroke_count,
            "totalSwingCount": self.total_swing_count,
            "swingTypes": [s.to_dict() for s in self.swing_types],
            "bounceCounts": self.bounce_counts.to_dict(),
            "bounceCount": self.bounce_counts.total,
        }


def count_bounces(bounces: Sequence[BounceEvent]) -> BounceCounts:
    """Group bounces by their renderer tag."""
    counts = BounceCounts()
    for bounce in bounces:
        tag = bounce.type_tag
        if tag in SWING_TAGS:
            counts.swing += 1
        elif tag in WALL_TAGS:
            counts.wall += 1
        elif tag in FLOOR_TAGS:
            counts.floor += 1
        else:
            counts.other += 1
    return counts


def swing_type_distribution(swings: Sequence[SwingEvent]) -> list[SwingTypeShare]:
    """Rounded percentage per swing type, largest first."""
    if not swings:
        return []
    counts = Counter(s.swing_type or "unknown" for s in swings)
    total = len(swings)
    shares = [
        SwingTypeShare(swing_type=t, count=n, percent=int(np.floor(n / total * 100 + 0.5)))
        for t, n in counts.items()
    ]
    return sorted(shares, key=lambda s: s.percent, reverse=True)


def calculate_summary(
    result: AnalysisResult,
    bounces: Sequence[BounceEvent] | None = None,
    min_swings: int = MIN_SWINGS_THRESHOLD,
) -> SummaryStats:
    """
    Calculate summary statistics for one analysis result.

    Args:
        result: Ingested analysis result
        bounces: Enriched bounce list; defaults to the detected bounces
        min_swings: Players below this swing count are excluded

    Returns:
        SummaryStats
    """
    if bounces is None:
        bounces = result.bounces

    players = [p for p in result.players if p.swing_count >= min_swings]
    swings = [s for p in players for s in p.swings]
    rallies = result.rallies

    total_swings = sum(p.swing_count for p in players)
    total_duration = sum(r.duration for r in rallies)

    max_intensity = 0.0
    for rally in rallies:
        if rally.duration <= 0:
            continue
        shots = sum(1 for s in swings if rally.contains(s.hit_timestamp))
        max_intensity = max(max_intensity, shots / rally.duration)

    total_distance = sum(p.covered_distance for p in players)

    serves = [s for s in swings if s.is_serve]
    volleys = [s for s in swings if s.is_volley]
    ground_strokes = [s for s in swings if not s.is_serve and not s.is_volley]

    stats = SummaryStats(
        rallies_count=len(rallies),
        total_swings=total_swings,
        total_rally_duration=total_duration,
        avg_rally_duration=total_duration / len(rallies) if rallies else 0.0,
        avg_shots_per_rally=total_swings / len(rallies) if rallies else 0.0,
        avg_rally_intensity=total_swings / total_duration if total_duration > 0 else 0.0,
        max_rally_intensity=max_intensity,
        total_distance_covered=total_distance,
        avg_distance_per_player=total_distance / len(players) if players else 0.0,
        sprint=SpeedStats.from_values([p.fastest_sprint for p in players]),
        ball_speed=SpeedStats.from_values([s.ball_speed for s in swings]),
        serve_speed=SpeedStats.from_values([s.ball_speed for s in serves]),
        volley_speed=SpeedStats.from_values([s.ball_speed for s in volleys]),
        ground_stroke_speed=SpeedStats.from_values([s.ball_speed for s in ground_strokes]),
        serve_count=len(serves),
        volley_count=len(volleys),
        # A swing flagged both serve and volley is subtracted twice
        ground_stroke_count=len(swings) - len(serves) - len(volleys),
        total_swing_count=len(swings),
        swing_types=swing_type_distribution(swings),
        bounce_counts=count_bounces(bounces),
    )

    logger.debug(
        f"Summary: {stats.rallies_count} rallies, {stats.total_swings} swings, "
        f"{stats.bounce_counts.total} bounces"
    )
    return stats
