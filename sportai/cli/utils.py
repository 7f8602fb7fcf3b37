"""CLI utilities for SportAI."""

import functools
from collections.abc import Callable
from pathlib import Path
from typing import Any, TypeVar

import typer
from rich.console import Console

from sportai.core.errors import ResultFormatError, SportAIError

console = Console()


F = TypeVar("F", bound=Callable[..., Any])


def handle_errors(func: F) -> F:
    """Decorator to handle common errors in CLI commands."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except SportAIError as e:
            console.print(f"\n[red]Error:[/red] {e.message}")
            if e.hint:
                console.print(f"[dim]Hint: {e.hint}[/dim]")
            raise typer.Exit(1)
        except FileNotFoundError as e:
            console.print(f"\n[red]Error:[/red] File not found: {e.filename}")
            raise typer.Exit(1)
        except PermissionError as e:
            console.print(f"\n[red]Error:[/red] Permission denied: {e.filename}")
            console.print("[dim]Hint: Check file permissions or try a different output path[/dim]")
            raise typer.Exit(1)
        except KeyboardInterrupt:
            console.print("\n[yellow]Interrupted by user[/yellow]")
            raise typer.Exit(130)

    return wrapper  # type: ignore[return-value]


def validate_result_file(path: Path) -> None:
    """Validate that a result file exists and looks like JSON."""
    if not path.exists():
        raise ResultFormatError(
            f"Result file not found: {path}",
            hint="Check the file path and try again",
        )

    if not path.is_file():
        raise ResultFormatError(
            f"Not a file: {path}",
            hint="Provide a path to a result JSON file, not a directory",
        )

    if path.suffix.lower() != ".json":
        raise ResultFormatError(
            f"Unsupported result format: {path.suffix}",
            hint="Result files are JSON (.json)",
        )


def validate_output_path(path: Path) -> None:
    """Validate that the output directory exists."""
    if not path.parent.exists():
        raise SportAIError(
            f"Output directory does not exist: {path.parent}",
            hint="Create the directory first or use a different path",
        )


def format_time(seconds: float) -> str:
    """Format seconds as MM:SS or HH:MM:SS."""
    hours = int(seconds // 3600)
    minutes = int((seconds % 3600) // 60)
    secs = seconds % 60
    if hours > 0:
        return f"{hours}:{minutes:02d}:{secs:05.2f}"
    return f"{minutes}:{secs:05.2f}"
