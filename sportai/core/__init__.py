"""Core domain models and configuration."""

from sportai.core.config import SportAIConfig, get_config
from sportai.core.errors import ConfigError, ResultFormatError, SportAIError
from sportai.core.models import (
    AnalysisResult,
    BallPositionSample,
    BounceEvent,
    BounceKind,
    CourtSide,
    JointSample,
    PlayerMetricSet,
    RallyInterval,
    SwingEvent,
    TrajectoryPoint,
)

__all__ = [
    "AnalysisResult",
    "BallPositionSample",
    "BounceEvent",
    "BounceKind",
    "ConfigError",
    "CourtSide",
    "JointSample",
    "PlayerMetricSet",
    "RallyInterval",
    "ResultFormatError",
    "SportAIConfig",
    "SportAIError",
    "SwingEvent",
    "TrajectoryPoint",
    "get_config",
]
