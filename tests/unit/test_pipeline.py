"""Unit tests for end-to-end result enrichment."""

from __future__ import annotations

import json
from typing import Any

from sportai.core.config import SportAIConfig
from sportai.core.models import BounceKind
from sportai.tracking.ingest import parse_result
from sportai.tracking.pipeline import enrich_result


class TestEnrichResult:
    """Tests for inference, reclassification and statistics together."""

    def test_bounce_sequence(self, sample_result_data: dict[str, Any]) -> None:
        enriched = enrich_result(parse_result(sample_result_data), SportAIConfig())

        # Swing at 0.1s, trajectory floor at 0.5s (near side) followed by the
        # detected far-side bounce at 0.9s with no swing between
        assert [(b.timestamp, b.kind) for b in enriched.bounces] == [
            (0.1, BounceKind.SWING_DERIVED),
            (0.5, BounceKind.SWING_INFERRED),
            (0.9, BounceKind.ORIGINAL_DETECTED),
        ]
        assert enriched.synthetic_count == 2

    def test_swing_bounce_attributed(self, sample_result_data: dict[str, Any]) -> None:
        enriched = enrich_result(parse_result(sample_result_data), SportAIConfig())
        swing_bounce = enriched.bounces[0]
        assert swing_bounce.player_id == 1
        assert swing_bounce.court_pos == (0.5, 0.3)

    def test_statistics(self, sample_result_data: dict[str, Any]) -> None:
        enriched = enrich_result(parse_result(sample_result_data), SportAIConfig())
        assert enriched.summary.bounce_counts.to_dict() == {"floor": 1, "wall": 0, "swing": 2, "other": 0}
        assert enriched.rankings.distance_rankings == {1: 1, 2: 2}
        assert enriched.rankings.sprint_rankings == {2: 1, 1: 2}

    def test_inference_disabled(self, sample_result_data: dict[str, Any]) -> None:
        config = SportAIConfig()
        config.inference.infer_swing_bounces = False
        config.inference.infer_trajectory_bounces = False

        enriched = enrich_result(parse_result(sample_result_data), config)

        assert [b.kind for b in enriched.bounces] == [BounceKind.ORIGINAL_DETECTED]

    def test_to_dict_is_json_ready(self, sample_result_data: dict[str, Any]) -> None:
        data = enrich_result(parse_result(sample_result_data), SportAIConfig()).to_dict()

        assert set(data) == {"ball_positions", "ball_bounces", "rallies", "rankings", "summary"}
        assert [b["type"] for b in data["ball_bounces"]] == ["swing", "inferred_swing", "floor"]
        assert data["rallies"] == [[0.0, 1.0], [3.0, 5.0]]
        json.dumps(data)

    def test_ball_filter_enabled(self, sample_result_data: dict[str, Any]) -> None:
        config = SportAIConfig()
        config.ball_filter.enabled = True

        enriched = enrich_result(parse_result(sample_result_data), config)

        assert enriched.filtered_positions is not None
        assert enriched.filter_stats is not None
        assert enriched.filter_stats.original_count == 11
        assert "ball_filter" in enriched.to_dict()
        # Inference still runs on the raw series
        assert len(enriched.bounces) == 3
