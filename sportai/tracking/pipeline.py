"""End-to-end enrichment of an analysis result.

Runs bounce inference, court-crossing reclassification, player rankings
and the match summary, and optionally cleans the ball trail for overlays.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from sportai.core.config import SportAIConfig, get_config
from sportai.core.models import AnalysisResult, BounceEvent
from sportai.statistics.rankings import PlayerRankings, compute_player_rankings
from sportai.statistics.summary import SummaryStats, calculate_summary
from sportai.tracking.ball_filter import BallPositionFilter, FilteredBallPosition, FilterStats
from sportai.tracking.bounce_inference import infer_bounces
from sportai.tracking.reclassifier import reclassify_bounces

logger = logging.getLogger(__name__)


@dataclass
class EnrichedResult:
    """Analysis result with inferred events and derived statistics."""

    result: AnalysisResult
    bounces: list[BounceEvent] = field(default_factory=list)
    rankings: PlayerRankings = field(default_factory=PlayerRankings)
    summary: SummaryStats = field(default_factory=SummaryStats)
    filtered_positions: list[FilteredBallPosition] | None = None
    filter_stats: FilterStats | None = None

    @property
    def synthetic_count(self) -> int:
        return len(self.bounces) - len(self.result.bounces)

    def to_dict(self) -> dict[str, Any]:
        if self.filtered_positions is not None:
            positions = [p.to_dict() for p in self.filtered_positions]
        else:
            positions = [p.to_dict() for p in self.result.ball_positions]

        data: dict[str, Any] = {
            "ball_positions": positions,
            "ball_bounces": [b.to_dict() for b in self.bounces],
            "rallies": [r.to_list() for r in self.result.rallies],
            "rankings": self.rankings.to_dict(),
            "summary": self.summary.to_dict(),
        }
        if self.filter_stats is not None:
            data["ball_filter"] = self.filter_stats.to_dict()
        return data


def enrich_result(
    result: AnalysisResult,
    config: SportAIConfig | None = None,
) -> EnrichedResult:
    """
    Enrich an ingested analysis result.

    Args:
        result: Ingested analysis result
        config: Settings; defaults to the global configuration

    Returns:
        EnrichedResult with the reclassified bounce list, rankings and summary
    """
    config = config or get_config()

    bounces = infer_bounces(
        result.ball_positions,
        result.swings,
        result.bounces,
        config.inference.to_inference_config(),
    )
    bounces = reclassify_bounces(bounces, result.swings, config.inference.court_center_y)

    enriched = EnrichedResult(
        result=result,
        bounces=bounces,
        rankings=compute_player_rankings(result.players, config.ranking.min_swings),
        summary=calculate_summary(result, bounces, config.ranking.min_swings),
    )

    if config.ball_filter.enabled:
        ball_filter = BallPositionFilter(config.ball_filter.to_filter_config())
        enriched.filtered_positions, enriched.filter_stats = ball_filter.filter(
            result.ball_positions
        )

    logger.info(
        f"Enriched result: {len(result.bounces)} detected + "
        f"{enriched.synthetic_count} synthetic bounces"
    )
    return enriched
