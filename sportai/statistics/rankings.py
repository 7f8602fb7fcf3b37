"""Per-metric medal rankings for player cards."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from sportai.core.models import PlayerMetricSet

MIN_SWINGS_THRESHOLD = 10
MEDAL_COUNT = 3


def rank_values(values: Iterable[tuple[int, float]]) -> dict[int, int]:
    """Rank players 1-3 by value, highest first.

    Only strictly positive values are ranked. Ties keep input order.

    Args:
        values: (player_id, value) pairs.

    Returns:
        player_id -> rank for at most three players.
    """
    positive = [(pid, value) for pid, value in values if value > 0]
    positive.sort(key=lambda item: item[1], reverse=True)
    return {pid: rank for rank, (pid, _) in enumerate(positive[:MEDAL_COUNT], start=1)}


@dataclass
class RankedPlayer:
    """A player shown on the cards, with display metadata."""

    metrics: PlayerMetricSet
    display_index: int
    display_name: str
    overall_rank: int | None = None

    @property
    def player_id(self) -> int:
        return self.metrics.player_id

    def to_dict(self) -> dict[str, Any]:
        result = {
            "player_id": self.player_id,
            "display_index": self.display_index,
            "display_name": self.display_name,
            "swing_count": self.metrics.swing_count,
            "covered_distance": self.metrics.covered_distance,
            "fastest_sprint": self.metrics.fastest_sprint,
            "max_ball_speed": self.metrics.max_ball_speed,
        }
        if self.overall_rank is not None:
            result["overall_rank"] = self.overall_rank
        return result


@dataclass
class PlayerRankings:
    """Rank maps and maxima across the displayed players."""

    players: list[RankedPlayer] = field(default_factory=list)
    max_distance_covered: float = 0.0
    distance_rankings: dict[int, int] = field(default_factory=dict)
    max_ball_speed: float = 0.0
    ball_speed_rankings: dict[int, int] = field(default_factory=dict)
    max_sprint_speed: float = 0.0
    sprint_rankings: dict[int, int] = field(default_factory=dict)
    max_swings: int = 0
    swings_rankings: dict[int, int] = field(default_factory=dict)

    @property
    def display_names(self) -> dict[int, str]:
        return {p.player_id: p.display_name for p in self.players}

    def ranks_for(self, player_id: int) -> list[int]:
        """The player's medal ranks across all four metrics."""
        maps = (
            self.distance_rankings,
            self.sprint_rankings,
            self.ball_speed_rankings,
            self.swings_rankings,
        )
        return [m[player_id] for m in maps if player_id in m]

    def overall_rank_points(self, player_id: int) -> int:
        """Sum of (4 - rank) over every medal the player holds."""
        return sum(4 - rank for rank in self.ranks_for(player_id) if rank <= MEDAL_COUNT)

    def gold_count(self, player_id: int) -> int:
        return sum(1 for rank in self.ranks_for(player_id) if rank == 1)

    def sorted_with_overall_rank(self) -> list[RankedPlayer]:
        """Players ordered by rank points, then gold medals; ranks assigned 1..n."""
        ordered = sorted(
            self.players,
            key=lambda p: (self.overall_rank_points(p.player_id), self.gold_count(p.player_id)),
            reverse=True,
        )
        return [
            RankedPlayer(
                metrics=p.metrics,
                display_index=p.display_index,
                display_name=p.display_name,
                overall_rank=rank,
            )
            for rank, p in enumerate(ordered, start=1)
        ]

    def to_dict(self) -> dict[str, Any]:
        return {
            "players": [p.to_dict() for p in self.sorted_with_overall_rank()],
            "max_distance_covered": self.max_distance_covered,
            "distance_rankings": self.distance_rankings,
            "max_ball_speed": self.max_ball_speed,
            "ball_speed_rankings": self.ball_speed_rankings,
            "max_sprint_speed": self.max_sprint_speed,
            "sprint_rankings": self.sprint_rankings,
            "max_swings": self.max_swings,
            "swings_rankings": self.swings_rankings,
        }


def compute_player_rankings(
    players: Sequence[PlayerMetricSet],
    min_swings: int = MIN_SWINGS_THRESHOLD,
    player_names: Mapping[int, str] | None = None,
) -> PlayerRankings:
    """
    Rank players with at least ``min_swings`` swings on each card metric.

    Args:
        players: Per-player aggregates from the analysis result
        min_swings: Players below this swing count are not displayed
        player_names: Optional user-assigned names by player_id

    Returns:
        PlayerRankings for the displayed players
    """
    names = player_names or {}
    eligible = sorted(
        (p for p in players if p.swing_count >= min_swings),
        key=lambda p: p.swing_count,
        reverse=True,
    )
    ranked = [
        RankedPlayer(
            metrics=p,
            display_index=index,
            display_name=names.get(p.player_id) or f"Player {index}",
        )
        for index, p in enumerate(eligible, start=1)
    ]

    if not eligible:
        return PlayerRankings(players=ranked)

    return PlayerRankings(
        players=ranked,
        max_distance_covered=max(p.covered_distance for p in eligible),
        distance_rankings=rank_values((p.player_id, p.covered_distance) for p in eligible),
        max_ball_speed=max(p.max_ball_speed for p in eligible),
        ball_speed_rankings=rank_values((p.player_id, p.max_ball_speed) for p in eligible),
        max_sprint_speed=max(p.fastest_sprint for p in eligible),
        sprint_rankings=rank_values((p.player_id, p.fastest_sprint) for p in eligible),
        max_swings=max(p.shot_count for p in eligible),
        swings_rankings=rank_values((p.player_id, p.shot_count) for p in eligible),
    )
