"""Configuration management for SportAI."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import yaml
from platformdirs import user_cache_dir
from pydantic import BaseModel, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from sportai.core.errors import ConfigError

if TYPE_CHECKING:
    from sportai.tracking.ball_filter import BallFilterConfig
    from sportai.tracking.bounce_inference import BounceInferenceConfig
    from sportai.tracking.joint_trajectory import TrajectoryTrackerConfig
    from sportai.tracking.rally_navigator import RallyNavigatorConfig


# =============================================================================
# Nested Configuration Classes
# =============================================================================


class InferenceSettings(BaseModel):
    """Bounce inference toggles and thresholds."""

    infer_swing_bounces: bool = True
    infer_trajectory_bounces: bool = True
    # Window for matching a swing to the nearest ball sample / existing bounce
    swing_match_window: float = 0.15
    # Synthetic trajectory events closer than this to an accepted event are dropped
    trajectory_dedup_window: float = 0.2
    y_velocity_threshold: float = 0.5
    x_velocity_threshold: float = 0.3
    sharp_angle_deg: float = 55.0
    # Fixed net line used by the reclassification pass
    court_center_y: float = 0.5

    def to_inference_config(self) -> BounceInferenceConfig:
        from sportai.tracking.bounce_inference import BounceInferenceConfig

        return BounceInferenceConfig(
            infer_swing_bounces=self.infer_swing_bounces,
            infer_trajectory_bounces=self.infer_trajectory_bounces,
            swing_match_window=self.swing_match_window,
            trajectory_dedup_window=self.trajectory_dedup_window,
            y_velocity_threshold=self.y_velocity_threshold,
            x_velocity_threshold=self.x_velocity_threshold,
            sharp_angle_deg=self.sharp_angle_deg,
        )


class NavigationSettings(BaseModel):
    """Rally playback navigation."""

    rallies_only: bool = False
    # Seconds of lead-in shown before each rally start
    rally_buffer: float = 1.0
    end_skip_window: float = 0.1

    def to_navigator_config(self) -> RallyNavigatorConfig:
        from sportai.tracking.rally_navigator import RallyNavigatorConfig

        return RallyNavigatorConfig(
            rallies_only=self.rallies_only,
            buffer=self.rally_buffer,
            end_skip_window=self.end_skip_window,
        )


class TrajectorySettings(BaseModel):
    """Joint trajectory capture for pose overlays."""

    max_samples: int = 300
    min_keypoint_score: float = 0.3
    marker_every: int = 5
    # Default: wrists (COCO keypoint indices)
    joints: list[int] = Field(default_factory=lambda: [9, 10])

    def to_tracker_config(self) -> TrajectoryTrackerConfig:
        from sportai.tracking.joint_trajectory import TrajectoryTrackerConfig

        return TrajectoryTrackerConfig(
            max_samples=self.max_samples,
            min_keypoint_score=self.min_keypoint_score,
            marker_every=self.marker_every,
            joints=tuple(self.joints),
        )


class RankingSettings(BaseModel):
    """Player card rankings."""

    # Players with fewer swings are not shown on cards
    min_swings: int = 10


class BallFilterSettings(BaseModel):
    """Overlay cleanup of the ball position series."""

    enabled: bool = False
    max_velocity: float = 0.6
    max_gap_duration: float = 0.5
    smoothing_window: int = 3
    smoothing_method: str = "weighted"  # "weighted" or "savgol"
    fps: float = 30.0

    def to_filter_config(self) -> BallFilterConfig:
        from sportai.tracking.ball_filter import BallFilterConfig

        return BallFilterConfig(
            max_velocity=self.max_velocity,
            max_gap_duration=self.max_gap_duration,
            smoothing_window=self.smoothing_window,
            smoothing_method=self.smoothing_method,
            fps=self.fps,
        )


# =============================================================================
# Main Configuration Class
# =============================================================================


class SportAIConfig(BaseSettings):
    """Configuration settings for SportAI."""

    inference: InferenceSettings = Field(default_factory=InferenceSettings)
    navigation: NavigationSettings = Field(default_factory=NavigationSettings)
    trajectory: TrajectorySettings = Field(default_factory=TrajectorySettings)
    ranking: RankingSettings = Field(default_factory=RankingSettings)
    ball_filter: BallFilterSettings = Field(default_factory=BallFilterSettings)

    # Output directory for enriched results when no explicit path is given
    output_dir: Path = Field(
        default_factory=lambda: Path(user_cache_dir("sportai")) / "results"
    )

    model_config = SettingsConfigDict(
        env_prefix="SPORTAI_",
        env_nested_delimiter="__",  # Allows SPORTAI_NAVIGATION__RALLY_BUFFER
    )

    # -------------------------------------------------------------------------
    # YAML Loading
    # -------------------------------------------------------------------------

    @classmethod
    def from_yaml(cls, path: Path) -> SportAIConfig:
        """Load configuration from YAML file."""
        try:
            with open(path) as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(
                f"Could not parse config file {path}: {e}",
                hint="Check the YAML syntax",
            ) from e
        try:
            return cls(**data) if data else cls()
        except ValidationError as e:
            raise ConfigError(
                f"Invalid configuration in {path}: {e.error_count()} error(s)",
                hint=str(e.errors()[0]["loc"]),
            ) from e

    @classmethod
    def find_and_load(cls) -> SportAIConfig:
        """Find and load config from standard locations."""
        locations = [
            Path.cwd() / "sportai.yaml",
            Path.home() / ".config" / "sportai" / "sportai.yaml",
        ]

        for path in locations:
            if path.exists():
                return cls.from_yaml(path)

        # Fall back to defaults + environment variables
        return cls()


# =============================================================================
# Global Config Instance
# =============================================================================

_config: SportAIConfig | None = None


def get_config() -> SportAIConfig:
    """Get global configuration instance."""
    global _config
    if _config is None:
        _config = SportAIConfig.find_and_load()
    return _config


def set_config(config: SportAIConfig) -> None:
    """Set global configuration instance."""
    global _config
    _config = config


def reset_config() -> None:
    """Reset global configuration instance (useful for testing)."""
    global _config
    _config = None
