"""Rankings command - per-metric medals for the player cards."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from sportai.cli.utils import handle_errors, validate_result_file
from sportai.core.config import get_config

console = Console()

MEDALS = {1: "[yellow]1st[/yellow]", 2: "[white]2nd[/white]", 3: "[red]3rd[/red]"}


def _medal(rankings: dict[int, int], player_id: int) -> str:
    return MEDALS.get(rankings.get(player_id, 0), "")


@handle_errors
def rankings(
    result_file: Path = typer.Argument(
        ...,
        help="Path to the analysis result JSON",
        dir_okay=False,
    ),
    min_swings: Optional[int] = typer.Option(
        None,
        "--min-swings",
        help="Hide players with fewer swings (default from config)",
    ),
) -> None:
    """
    Rank players by distance, sprint speed, ball speed and swing count.

    Example:
        sportai rankings result.json --min-swings 5
    """
    from sportai.statistics.rankings import compute_player_rankings
    from sportai.tracking.ingest import load_result

    validate_result_file(result_file)
    threshold = min_swings if min_swings is not None else get_config().ranking.min_swings

    result = load_result(result_file)
    ranking = compute_player_rankings(result.players, threshold)

    if not ranking.players:
        console.print(f"[yellow]No players with at least {threshold} swings[/yellow]")
        return

    table = Table(title="Player Rankings")
    table.add_column("#", justify="right")
    table.add_column("Player", style="cyan")
    table.add_column("Distance", justify="right")
    table.add_column("Sprint", justify="right")
    table.add_column("Ball speed", justify="right")
    table.add_column("Swings", justify="right")
    table.add_column("Points", style="green", justify="right")

    for player in ranking.sorted_with_overall_rank():
        pid = player.player_id
        metrics = player.metrics
        table.add_row(
            str(player.overall_rank),
            player.display_name,
            f"{metrics.covered_distance:.1f} {_medal(ranking.distance_rankings, pid)}",
            f"{metrics.fastest_sprint:.1f} {_medal(ranking.sprint_rankings, pid)}",
            f"{metrics.max_ball_speed:.1f} {_medal(ranking.ball_speed_rankings, pid)}",
            f"{metrics.shot_count} {_medal(ranking.swings_rankings, pid)}",
            str(ranking.overall_rank_points(pid)),
        )

    console.print(table)
