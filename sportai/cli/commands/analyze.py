"""Analyze command - enrich an analysis result with inferred bounces and stats."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from sportai.cli.utils import format_time, handle_errors, validate_output_path, validate_result_file
from sportai.core.config import get_config

console = Console()


@handle_errors
def analyze(
    result_file: Path = typer.Argument(
        ...,
        help="Path to the analysis result JSON",
        dir_okay=False,
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output", "-o",
        help="Output JSON file path (prints to stdout if omitted)",
    ),
    no_swing_bounces: bool = typer.Option(
        False,
        "--no-swing-bounces",
        help="Do not synthesize bounces from swings",
    ),
    no_trajectory_bounces: bool = typer.Option(
        False,
        "--no-trajectory-bounces",
        help="Do not infer floor/wall bounces from the ball trajectory",
    ),
    filter_positions: bool = typer.Option(
        False,
        "--filter-positions",
        help="Clean the ball trail (outliers, gaps, smoothing) in the output",
    ),
    save: bool = typer.Option(
        False,
        "--save", "-s",
        help="Save to the configured output directory when no --output is given",
    ),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress summary output"),
) -> None:
    """
    Enrich an analysis result with synthetic bounces, rankings and a summary.

    Examples:
        sportai analyze result.json
        sportai analyze result.json -o enriched.json
        sportai analyze result.json --save
        sportai analyze result.json --no-trajectory-bounces --filter-positions
    """
    from sportai.tracking.ingest import load_result
    from sportai.tracking.pipeline import enrich_result

    validate_result_file(result_file)

    config = get_config().model_copy(deep=True)
    if output is None and save:
        config.output_dir.mkdir(parents=True, exist_ok=True)
        output = config.output_dir / f"{result_file.stem}.enriched.json"
    if output:
        validate_output_path(output)

    if no_swing_bounces:
        config.inference.infer_swing_bounces = False
    if no_trajectory_bounces:
        config.inference.infer_trajectory_bounces = False
    if filter_positions:
        config.ball_filter.enabled = True

    if not quiet:
        console.print(f"\n[bold]SportAI Analyze[/bold] - {result_file.name}")

    result = load_result(result_file)
    enriched = enrich_result(result, config)
    data = enriched.to_dict()

    if output:
        with open(output, "w") as f:
            json.dump(data, f, indent=2)
        if not quiet:
            console.print(f"[green]Enriched result saved to {output}[/green]")
    else:
        print(json.dumps(data))

    if quiet:
        return

    counts = enriched.summary.bounce_counts
    table = Table(title="Bounces")
    table.add_column("Category", style="cyan")
    table.add_column("Count", style="green", justify="right")
    table.add_row("Floor", str(counts.floor))
    table.add_row("Wall", str(counts.wall))
    table.add_row("Swing", str(counts.swing))
    table.add_row("Other", str(counts.other))
    table.add_row("─" * 10, "─" * 5)
    table.add_row("Total", str(counts.total), style="bold")
    table.add_row("Synthetic", str(enriched.synthetic_count), style="dim")
    console.print(table)

    summary = enriched.summary
    console.print("\n[bold]Summary:[/bold]")
    console.print(f"  Rallies:          {summary.rallies_count}")
    console.print(f"  Rally time:       {format_time(summary.total_rally_duration)}")
    if summary.rallies_count > 0:
        console.print(f"  Avg rally:        {summary.avg_rally_duration:.1f}s")
        console.print(f"  Shots/rally:      {summary.avg_shots_per_rally:.1f}")
    if summary.ball_speed.count:
        console.print(
            f"  Ball speed:       max {summary.ball_speed.max:.1f}, "
            f"avg {summary.ball_speed.avg:.1f} km/h"
        )
    if enriched.filter_stats is not None:
        stats = enriched.filter_stats
        console.print(
            f"  Ball filter:      {stats.removed_outliers} outliers removed, "
            f"{stats.interpolated_points} points interpolated"
        )
