"""Score reconciliation for frame usability assessments."""

from .aggregators import (
    HEURISTIC_CATEGORY_MAP,
    BiasOverlayReader,
    CategoryAggregator,
    HeuristicAggregator,
)
from .engine import FrameScoreComputer, VersionScoreAggregator, interpret_score
from .models import (
    BiasOverlay,
    DebugTrace,
    FrameEvaluationRecord,
    FrameScore,
    HeuristicEntry,
    ScoreBand,
    ScoreSource,
    VersionRecord,
    VersionScore,
)
from .progression import BlendResult, ProgressionTargetCalculator, ScoreBlender
from .resolver import FallbackResolver, IterationContext, Resolution

__all__ = [
    "HEURISTIC_CATEGORY_MAP",
    "BiasOverlay",
    "BiasOverlayReader",
    "BlendResult",
    "CategoryAggregator",
    "DebugTrace",
    "FallbackResolver",
    "FrameEvaluationRecord",
    "FrameScore",
    "FrameScoreComputer",
    "HeuristicAggregator",
    "HeuristicEntry",
    "IterationContext",
    "ProgressionTargetCalculator",
    "Resolution",
    "ScoreBand",
    "ScoreBlender",
    "ScoreSource",
    "VersionRecord",
    "VersionScore",
    "VersionScoreAggregator",
    "interpret_score",
]
