"""Pytest configuration and fixtures."""

from typing import Any

import pytest

from sportai.core.config import reset_config


def pytest_addoption(parser):
    """Add custom command line options."""
    parser.addoption(
        "--run-slow",
        action="store_true",
        default=False,
        help="Run slow tests (long simulated playback)",
    )


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "slow: marks tests as slow (run with --run-slow)")


def pytest_collection_modifyitems(config, items):
    """Skip slow tests unless --run-slow is specified."""
    if config.getoption("--run-slow"):
        return

    skip_slow = pytest.mark.skip(reason="Need --run-slow option to run")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_slow)


@pytest.fixture(autouse=True)
def _fresh_config():
    """Each test starts without a cached global config."""
    reset_config()
    yield
    reset_config()


@pytest.fixture
def sample_result_data() -> dict[str, Any]:
    """Upstream result with one floor bounce in the trajectory.

    The ball falls from y=0.2 to y=0.7 and rises back over one second.
    Player 1 hits at t=0.1; a detected floor bounce sits at t=0.9.
    """
    ys = [0.2, 0.3, 0.4, 0.5, 0.6, 0.7, 0.6, 0.5, 0.4, 0.3, 0.2]
    return {
        "ball_positions": [
            {"timestamp": i / 10, "X": 0.5, "Y": y} for i, y in enumerate(ys)
        ],
        "ball_bounces": [
            {"timestamp": 0.9, "court_pos": [0.5, 0.3], "player_id": 1, "type": "floor"},
        ],
        "players": [
            {
                "player_id": 1,
                "swing_count": 12,
                "covered_distance": 120.5,
                "fastest_sprint": 5.5,
                "swings": [
                    {
                        "ball_hit": {"timestamp": 0.1, "frame_nr": 3},
                        "ball_speed": 60.0,
                        "swing_type": "forehand",
                        "serve": False,
                        "volley": False,
                        "is_in_rally": True,
                    },
                    {
                        "ball_hit": {"timestamp": 7.0, "frame_nr": 210},
                        "ball_speed": 90.0,
                        "swing_type": "smash",
                        "is_in_rally": False,
                    },
                ],
            },
            {
                "player_id": 2,
                "swing_count": 10,
                "covered_distance": 80.0,
                "fastest_sprint": 6.1,
                "swings": [
                    {
                        "ball_hit": {"timestamp": 3.5, "frame_nr": 105},
                        "ball_speed": 45.0,
                        "swing_type": "backhand",
                        "volley": True,
                        "is_in_rally": True,
                    },
                ],
            },
        ],
        "rallies": [[0.0, 1.0], [3.0, 5.0]],
    }
