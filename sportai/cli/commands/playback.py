"""Playback command - preview rallies-only playback as a seek schedule."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from sportai.cli.utils import format_time, handle_errors, validate_result_file
from sportai.core.config import get_config

console = Console()
logger = logging.getLogger(__name__)


class SimulatedClock:
    """Playback clock that advances in fixed steps and obeys seeks."""

    def __init__(self, start: float = 0.0):
        self.time = start
        self.paused = False
        self.seeks: list[tuple[float, float]] = []

    def seek(self, time: float) -> None:
        self.seeks.append((self.time, time))
        self.time = time

    def advance(self, step: float) -> None:
        self.time += step


@handle_errors
def playback(
    result_file: Path = typer.Argument(
        ...,
        help="Path to the analysis result JSON",
        dir_okay=False,
    ),
    step: float = typer.Option(
        1 / 30, "--step", help="Seconds between time updates (default one frame at 30 fps)"
    ),
    buffer: Optional[float] = typer.Option(
        None, "--buffer", "-b", help="Lead-in seconds before each rally (default from config)"
    ),
) -> None:
    """
    Simulate rallies-only playback and print where the player would seek.

    Example:
        sportai playback result.json --buffer 2
    """
    from sportai.tracking.ingest import load_result
    from sportai.tracking.rally_navigator import RallyNavigator

    validate_result_file(result_file)
    if step <= 0:
        raise typer.BadParameter("--step must be positive")

    nav_config = get_config().navigation.to_navigator_config()
    nav_config.rallies_only = True
    if buffer is not None:
        nav_config.buffer = max(0.0, buffer)

    result = load_result(result_file)
    if not result.rallies:
        console.print("[yellow]No rallies in result; nothing to skip[/yellow]")
        return

    navigator = RallyNavigator(result.rallies, nav_config)
    clock = SimulatedClock()
    end_time = result.duration

    ticks = 0
    while clock.time <= end_time:
        update = navigator.tick(clock.time, clock)
        if update.seek_to is None:
            clock.advance(step)
        ticks += 1

    logger.debug(f"Simulated {ticks} time updates over {end_time:.1f}s")

    table = Table(title="Rallies-only seek schedule")
    table.add_column("From", style="cyan", justify="right")
    table.add_column("To", style="green", justify="right")
    table.add_column("Skipped", justify="right")
    skipped = 0.0
    for src, dst in clock.seeks:
        skipped += max(0.0, dst - src)
        table.add_row(format_time(src), format_time(dst), f"{dst - src:.1f}s")
    console.print(table)
    console.print(
        f"\n  {len(result.rallies)} rallies, {len(clock.seeks)} seeks, "
        f"{format_time(skipped)} of dead time skipped"
    )
