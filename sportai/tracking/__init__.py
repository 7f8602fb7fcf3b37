"""Ball event inference, rally navigation and joint trajectory smoothing."""

from sportai.tracking.ball_filter import (
    BallFilterConfig,
    BallPositionFilter,
    FilteredBallPosition,
    FilterStats,
)
from sportai.tracking.bounce_inference import (
    BounceInferenceConfig,
    infer_bounces,
    infer_swing_bounces,
    infer_trajectory_bounces,
)
from sportai.tracking.ingest import load_result, parse_result
from sportai.tracking.joint_trajectory import (
    JointTrajectoryTracker,
    TrajectoryOverlay,
    TrajectoryTrackerConfig,
    smooth_trajectory,
)
from sportai.tracking.pipeline import EnrichedResult, enrich_result
from sportai.tracking.rally_navigator import (
    NavigationUpdate,
    PlaybackClock,
    RallyNavigator,
    RallyNavigatorConfig,
)
from sportai.tracking.reclassifier import reclassify_bounces

__all__ = [
    "BallFilterConfig",
    "BallPositionFilter",
    "BounceInferenceConfig",
    "EnrichedResult",
    "FilterStats",
    "FilteredBallPosition",
    "JointTrajectoryTracker",
    "NavigationUpdate",
    "PlaybackClock",
    "RallyNavigator",
    "RallyNavigatorConfig",
    "TrajectoryOverlay",
    "TrajectoryTrackerConfig",
    "enrich_result",
    "infer_bounces",
    "infer_swing_bounces",
    "infer_trajectory_bounces",
    "load_result",
    "parse_result",
    "reclassify_bounces",
    "smooth_trajectory",
]
