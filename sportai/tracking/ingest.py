"""Ingestion of upstream analysis results.

Converts the JSON-shaped result produced by the external analysis service
into typed series. Series are kept in the order they arrive; callers are
expected to supply ball positions sorted by timestamp.
"""

from __future__ import annotations

import json
import logging
import math
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

from sportai.core.errors import ResultFormatError
from sportai.core.models import (
    AnalysisResult,
    BallPositionSample,
    BounceEvent,
    BounceKind,
    PlayerMetricSet,
    RallyInterval,
    SwingEvent,
)

logger = logging.getLogger(__name__)


def load_result(path: Path) -> AnalysisResult:
    """Read and parse an analysis result JSON file."""
    try:
        with open(path) as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ResultFormatError(
            f"Invalid JSON in {path}: {e.msg} (line {e.lineno})",
            hint="Pass the raw result file exported by the analysis service",
        ) from e

    if not isinstance(data, dict):
        raise ResultFormatError(
            f"Expected a JSON object in {path}, got {type(data).__name__}",
            hint="The result must contain ball_positions, ball_bounces, players and rallies",
        )

    return parse_result(data)


def parse_result(data: Mapping[str, Any]) -> AnalysisResult:
    """Build an AnalysisResult from a result mapping.

    Missing or null arrays produce empty series.
    """
    players = parse_players(data.get("players") or [])
    result = AnalysisResult(
        ball_positions=parse_ball_positions(data.get("ball_positions") or []),
        bounces=parse_bounces(data.get("ball_bounces") or []),
        swings=collect_swings(players),
        rallies=parse_rallies(data.get("rallies") or []),
        players=players,
    )
    logger.info(
        f"Ingested {len(result.ball_positions)} ball positions, "
        f"{len(result.bounces)} bounces, {len(result.swings)} swings, "
        f"{len(result.rallies)} rallies"
    )
    return result


def _as_float(value: Any) -> float:
    """Coerce a JSON scalar to float; missing values become NaN."""
    if value is None:
        return math.nan
    try:
        return float(value)
    except (TypeError, ValueError):
        return math.nan


def parse_ball_positions(items: Iterable[Mapping[str, Any]]) -> list[BallPositionSample]:
    """Parse ``{timestamp, X, Y}`` samples, dropping non-finite ones."""
    samples: list[BallPositionSample] = []
    dropped = 0
    for item in items:
        timestamp = _as_float(item.get("timestamp"))
        x = _as_float(item.get("X", item.get("x")))
        y = _as_float(item.get("Y", item.get("y")))
        if not (math.isfinite(timestamp) and math.isfinite(x) and math.isfinite(y)):
            dropped += 1
            continue
        samples.append(BallPositionSample(timestamp=timestamp, x=x, y=y))

    if dropped:
        logger.warning(f"Dropped {dropped} ball positions with non-finite values")
    return samples


def parse_bounces(items: Iterable[Mapping[str, Any]]) -> list[BounceEvent]:
    """Parse model-detected bounces. All of them are ORIGINAL_DETECTED."""
    bounces = []
    for item in items:
        court_pos = item.get("court_pos") or (0.0, 0.0)
        bounces.append(BounceEvent(
            timestamp=float(item.get("timestamp", 0.0)),
            court_pos=(float(court_pos[0]), float(court_pos[1])),
            player_id=int(item.get("player_id", -1)),
            kind=BounceKind.ORIGINAL_DETECTED,
            label=item.get("type"),
        ))
    return bounces


def parse_rallies(items: Iterable[Any]) -> list[RallyInterval]:
    """Parse ``[start, end]`` pairs (or ``{start_time, end_time}`` objects)."""
    rallies = []
    for item in items:
        if isinstance(item, Mapping):
            start, end = item["start_time"], item["end_time"]
        else:
            start, end = item[0], item[1]
        rallies.append(RallyInterval(start_time=float(start), end_time=float(end)))
    return rallies


def _parse_swing(item: Mapping[str, Any], player_id: int) -> SwingEvent:
    ball_hit = item.get("ball_hit") or {}
    hit_timestamp = ball_hit.get("timestamp")
    if hit_timestamp is None:
        # Fall back to swing start when the hit moment is missing
        hit_timestamp = (item.get("start") or {}).get("timestamp", 0.0)
    return SwingEvent(
        hit_timestamp=float(hit_timestamp),
        player_id=player_id,
        ball_speed=max(0.0, float(item.get("ball_speed") or 0.0)),
        swing_type=item.get("swing_type") or "unknown",
        hit_frame=ball_hit.get("frame_nr"),
        is_serve=bool(item.get("serve", False)),
        is_volley=bool(item.get("volley", False)),
        is_in_rally=item.get("is_in_rally") is not False,
    )


def parse_players(items: Iterable[Mapping[str, Any]]) -> list[PlayerMetricSet]:
    """Parse per-player aggregates and all of their swings."""
    players = []
    for item in items:
        player_id = int(item.get("player_id", -1))
        swings = tuple(_parse_swing(s, player_id) for s in item.get("swings") or [])
        players.append(PlayerMetricSet(
            player_id=player_id,
            swing_count=int(item.get("swing_count", len(swings))),
            covered_distance=float(item.get("covered_distance") or 0.0),
            fastest_sprint=float(item.get("fastest_sprint") or 0.0),
            swings=swings,
        ))
    return players


def collect_swings(players: Iterable[PlayerMetricSet]) -> list[SwingEvent]:
    """Flatten the in-rally swings of all players (player order kept).

    Swings explicitly flagged as outside a rally are left out; player
    aggregates still count them.
    """
    return [
        swing for player in players for swing in player.swings if swing.is_in_rally
    ]
