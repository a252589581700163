"""Data models for score reconciliation.

Records arrive from an external assessment/persistence layer and are not
trusted: construction is tolerant, dropping malformed pieces instead of
failing, so that the engine always has something to score.
"""

import logging
import math
from enum import Enum
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
)

logger = logging.getLogger(__name__)

MIN_TOTAL_ITERATIONS = 3
MAX_TOTAL_ITERATIONS = 5


Number = int | float


def _finite_or_none(value: Any) -> Number | None:
    """Return value unchanged if it is a finite real number, else None."""
    if isinstance(value, bool) or not isinstance(value, int | float):
        return None
    try:
        # ints beyond float range overflow here
        if not math.isfinite(value):
            return None
    except OverflowError:
        return None
    return value


class ScoreSource(str, Enum):
    """Precedence step that produced a final score."""

    PRODUCER_TRACE = "producer_trace"
    BLENDED = "blended"
    COMBINED = "combined"
    HEURISTICS_ONLY = "heuristics_only"
    CATEGORIES_ONLY = "categories_only"
    OVERALL_SCORE = "overall_score"
    PERSISTED = "persisted"
    RECOMPUTED = "recomputed"
    DEFAULT = "default"


class ScoreBand(str, Enum):
    """Qualitative interpretation of a 0-100 score."""

    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"
    CRITICAL = "critical"


class HeuristicEntry(BaseModel):
    """One usability criterion with its assigned score."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    code: str = Field("", description="Heuristic code, e.g. H1")
    principle: str = Field("", description="Heuristic principle name")
    max_points: float = Field(..., description="Maximum points", gt=0)
    score: float = Field(..., description="Assigned points")
    justification: str | None = Field(None, description="Reviewer justification")
    evaluation_focus: str | None = Field(None, description="What was assessed")

    @field_validator("max_points", "score", mode="before")
    @classmethod
    def reject_oversized(cls, v: Any) -> Any:
        """Reject integers too large to represent as a float."""
        if isinstance(v, int) and not isinstance(v, bool):
            try:
                float(v)
            except OverflowError as e:
                raise ValueError("must be a finite number") from e
        return v

    @field_validator("max_points", "score")
    @classmethod
    def validate_finite(cls, v: float) -> float:
        """Reject NaN and infinities."""
        if not math.isfinite(v):
            raise ValueError("must be a finite number")
        return v

    @property
    def effective_score(self) -> float:
        """Score clamped into [0, max_points]."""
        return max(0.0, min(self.score, self.max_points))


class BiasOverlay(BaseModel):
    """Externally computed bias-adjusted overall score."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    weighted_overall: float | None = Field(
        None, description="Bias-weighted overall score (0-100)"
    )

    @field_validator("weighted_overall", mode="before")
    @classmethod
    def drop_invalid(cls, v: Any) -> float | None:
        return _finite_or_none(v)


class DebugTrace(BaseModel):
    """Auditable numeric trace of one frame's score calculation.

    Fields are None when the corresponding input was unavailable and are
    omitted from serialized output.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    # int | float keeps producer values as given; computed fields are ints
    heuristics_avg: Number | None = None
    categories_avg: Number | None = None
    combined: Number | None = None
    target: Number | None = None
    alpha: float | None = None
    blended: Number | None = None
    extra_pull_applied: bool | None = None
    final: Number | None = None
    iteration: Number | None = None
    total_iterations: Number | None = None
    bias_weighted_overall: Number | None = None

    @field_validator(
        "heuristics_avg",
        "categories_avg",
        "combined",
        "target",
        "alpha",
        "blended",
        "final",
        "iteration",
        "total_iterations",
        "bias_weighted_overall",
        mode="before",
    )
    @classmethod
    def drop_invalid_numbers(cls, v: Any) -> Number | None:
        return _finite_or_none(v)

    @field_validator("extra_pull_applied", mode="before")
    @classmethod
    def drop_invalid_flag(cls, v: Any) -> bool | None:
        return v if isinstance(v, bool) else None

    def to_dict(self) -> dict[str, Any]:
        """Serialize, omitting absent fields."""
        return self.model_dump(exclude_none=True)


class FrameEvaluationRecord(BaseModel):
    """Raw assessment data for one frame."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str | None = Field(None, description="Frame identifier")
    name: str | None = Field(None, description="Frame display name")
    heuristic_breakdown: list[HeuristicEntry] = Field(default_factory=list)
    category_scores: dict[str, float] = Field(default_factory=dict)
    bias: BiasOverlay | None = None
    overall_score: float | None = Field(
        None, description="Producer-asserted overall score"
    )
    debug_calc: DebugTrace | None = Field(
        None, description="Producer-computed trace, authoritative when present"
    )

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: Any) -> str | None:
        return None if v is None else str(v)

    @field_validator("heuristic_breakdown", mode="before")
    @classmethod
    def drop_invalid_heuristics(cls, v: Any) -> list[Any]:
        """Keep only entries that validate; a non-list becomes empty."""
        if not isinstance(v, list | tuple):
            return []
        entries: list[HeuristicEntry] = []
        for item in v:
            if isinstance(item, HeuristicEntry):
                entries.append(item)
                continue
            try:
                entries.append(HeuristicEntry.model_validate(item))
            except ValidationError as e:
                logger.debug(
                    "Skipping invalid heuristic entry: %s", e.errors()[0]["msg"]
                )
        return entries

    @field_validator("category_scores", mode="before")
    @classmethod
    def drop_non_numeric_categories(cls, v: Any) -> dict[str, float]:
        """Keep finite numeric values only; range is checked at use."""
        if not isinstance(v, dict):
            return {}
        return {
            str(name): float(number)
            for name, number in (
                (name, _finite_or_none(value)) for name, value in v.items()
            )
            if number is not None
        }

    @field_validator("bias", mode="before")
    @classmethod
    def drop_malformed_bias(cls, v: Any) -> Any:
        if v is None or isinstance(v, BiasOverlay | dict):
            return v
        return None

    @field_validator("debug_calc", mode="before")
    @classmethod
    def drop_malformed_trace(cls, v: Any) -> Any:
        if v is None or isinstance(v, DebugTrace):
            return v
        if not isinstance(v, dict):
            return None
        try:
            return DebugTrace.model_validate(v)
        except ValidationError:
            logger.debug("Ignoring malformed producer debug_calc")
            return None

    @field_validator("overall_score", mode="before")
    @classmethod
    def drop_invalid_overall(cls, v: Any) -> float | None:
        return _finite_or_none(v)


class VersionRecord(BaseModel):
    """One iteration of a design and its evaluated frames."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str | None = Field(None, description="Version identifier")
    iteration: int = Field(..., description="1-based iteration number")
    total_iterations: int = Field(
        MIN_TOTAL_ITERATIONS,
        description="Length of the iteration sequence, clamped into [3, 5]",
    )
    frames: list[FrameEvaluationRecord] = Field(default_factory=list)
    total_score: float | None = Field(None, description="Persisted version score")

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: Any) -> str | None:
        return None if v is None else str(v)

    @field_validator("total_iterations")
    @classmethod
    def clamp_total_iterations(cls, v: int) -> int:
        return max(MIN_TOTAL_ITERATIONS, min(MAX_TOTAL_ITERATIONS, v))

    @field_validator("frames", mode="before")
    @classmethod
    def coerce_frames(cls, v: Any) -> list[Any]:
        if not isinstance(v, list | tuple):
            return []
        return [f for f in v if isinstance(f, FrameEvaluationRecord | dict)]

    @field_validator("total_score", mode="before")
    @classmethod
    def drop_invalid_total(cls, v: Any) -> float | None:
        return _finite_or_none(v)


class FrameScore(BaseModel):
    """Final score of one frame with its calculation trace."""

    model_config = ConfigDict(frozen=True)

    frame_id: str | None = None
    score: int = Field(..., description="Final frame score (0-100)", ge=0, le=100)
    trace: DebugTrace = Field(default_factory=DebugTrace)
    source: ScoreSource = Field(..., description="Precedence step used")

    def to_dict(self) -> dict[str, Any]:
        """Convert to the display/persistence contract."""
        result: dict[str, Any] = {
            "score": self.score,
            "trace": self.trace.to_dict(),
            "source": self.source.value,
        }
        if self.frame_id is not None:
            result["frame_id"] = self.frame_id
        return result


class VersionScore(BaseModel):
    """Final score of one version."""

    model_config = ConfigDict(frozen=True)

    version_id: str | None = None
    iteration: int
    total_iterations: int
    score: int = Field(..., description="Final version score (0-100)", ge=0, le=100)
    recomputed: int | None = Field(None, description="Mean of frame scores")
    persisted: float | None = Field(None, description="Persisted total_score")
    source: ScoreSource
    frames: list[FrameScore] = Field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for reporting."""
        result: dict[str, Any] = {
            "score": self.score,
            "source": self.source.value,
            "iteration": self.iteration,
            "total_iterations": self.total_iterations,
            "frames": [frame.to_dict() for frame in self.frames],
        }
        if self.version_id is not None:
            result["version_id"] = self.version_id
        if self.recomputed is not None:
            result["recomputed"] = self.recomputed
        if self.persisted is not None:
            result["persisted"] = self.persisted
        return result
