"""Player rankings and match summary statistics."""

from sportai.statistics.rankings import (
    PlayerRankings,
    RankedPlayer,
    compute_player_rankings,
    rank_values,
)
from sportai.statistics.summary import BounceCounts, SummaryStats, calculate_summary

__all__ = [
    "BounceCounts",
    "PlayerRankings",
    "RankedPlayer",
    "SummaryStats",
    "calculate_summary",
    "compute_player_rankings",
    "rank_values",
]
