"""Main CLI entry point for SportAI."""

import logging

import typer
from rich.console import Console

from sportai.cli.commands.analyze import analyze as analyze_command
from sportai.cli.commands.playback import playback as playback_command
from sportai.cli.commands.rankings import rankings as rankings_command
from sportai.cli.commands.trajectory import trajectory as trajectory_command

app = typer.Typer(
    name="sportai",
    help="Racket sports result enrichment - bounce inference, rankings and overlays",
    no_args_is_help=True,
)

console = Console()

# Register commands
app.command(name="analyze")(analyze_command)
app.command(name="rankings")(rankings_command)
app.command(name="trajectory")(trajectory_command)
app.command(name="playback")(playback_command)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose output"),
) -> None:
    """SportAI - Racket sports analysis CLI."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    if verbose:
        console.print("[dim]Verbose mode enabled[/dim]")


if __name__ == "__main__":
    app()
