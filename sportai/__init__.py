"""SportAI - bounce inference, rally navigation and pose overlays for racket sports."""

__version__ = "0.1.0"

# Core exports for library usage
from sportai.core.config import SportAIConfig, get_config
from sportai.core.models import AnalysisResult, BounceEvent, BounceKind
from sportai.tracking.ingest import load_result, parse_result
from sportai.tracking.pipeline import EnrichedResult, enrich_result

__all__ = [
    "AnalysisResult",
    "BounceEvent",
    "BounceKind",
    "EnrichedResult",
    "SportAIConfig",
    "enrich_result",
    "get_config",
    "load_result",
    "parse_result",
]
