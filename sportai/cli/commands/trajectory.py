"""Trajectory command - smooth recorded pose keypoints into overlay paths."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

import typer
from rich.console import Console

from sportai.cli.utils import handle_errors, validate_output_path, validate_result_file
from sportai.core.config import get_config
from sportai.core.errors import ResultFormatError

console = Console()


def _load_frames(path: Path) -> list[dict[str, Any]]:
    """Read pose frames: a list, or an object with a ``frames`` list."""
    try:
        with open(path) as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ResultFormatError(
            f"Invalid JSON in {path}: {e.msg} (line {e.lineno})",
        ) from e

    frames = data.get("frames") if isinstance(data, dict) else data
    if not isinstance(frames, list):
        raise ResultFormatError(
            f"No pose frames found in {path}",
            hint='Expected [{"frame_index": 0, "keypoints": [{"x", "y", "score"}, ...]}, ...]',
        )
    return frames


@handle_errors
def trajectory(
    samples_file: Path = typer.Argument(
        ...,
        help="Path to recorded pose frames JSON",
        dir_okay=False,
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output", "-o",
        help="Output overlay JSON path (prints to stdout if omitted)",
    ),
    joints: Optional[list[int]] = typer.Option(
        None,
        "--joint", "-j",
        help="Joint index to track (repeatable; default from config)",
    ),
    scale_x: float = typer.Option(1.0, "--scale-x", help="Model-to-canvas horizontal scale"),
    scale_y: float = typer.Option(1.0, "--scale-y", help="Model-to-canvas vertical scale"),
    raw: bool = typer.Option(False, "--raw", help="Emit raw samples without smoothing"),
) -> None:
    """
    Build smoothed joint trajectories from recorded pose frames.

    Examples:
        sportai trajectory poses.json
        sportai trajectory poses.json --joint 10 -o wrist.json
    """
    from sportai.tracking.joint_trajectory import JointTrajectoryTracker

    validate_result_file(samples_file)
    if output:
        validate_output_path(output)

    tracker_config = get_config().trajectory.to_tracker_config()
    if joints:
        tracker_config.joints = tuple(joints)
    tracker = JointTrajectoryTracker(tracker_config)

    frames = _load_frames(samples_file)
    recorded = 0
    for index, frame in enumerate(frames):
        frame_index = int(frame.get("frame_index", index))
        recorded += tracker.record(frame.get("keypoints") or [], frame_index, scale_x, scale_y)

    overlays = tracker.overlays(smooth=not raw)
    data = {"overlays": [o.to_dict() for o in overlays]}

    if output:
        with open(output, "w") as f:
            json.dump(data, f, indent=2)
        console.print(
            f"[green]{len(overlays)} trajectories ({recorded} samples) saved to {output}[/green]"
        )
    else:
        print(json.dumps(data))
