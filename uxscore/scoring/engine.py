"""Frame and version score computation."""

import logging
from collections.abc import Iterable

from uxscore.core.logging import scoring_context
from uxscore.core.settings import ScoringSettings

from .aggregators import BiasOverlayReader, CategoryAggregator, HeuristicAggregator
from .models import (
    FrameEvaluationRecord,
    FrameScore,
    ScoreBand,
    ScoreSource,
    VersionRecord,
    VersionScore,
)
from .numeric import clamp_score, mean, round_half_up
from .progression import ScoreBlender
from .resolver import FallbackResolver, IterationContext, Resolution

logger = logging.getLogger(__name__)

# Lower bound of each band, checked from the top
SCORE_BANDS: list[tuple[int, ScoreBand]] = [
    (85, ScoreBand.EXCELLENT),
    (70, ScoreBand.GOOD),
    (50, ScoreBand.FAIR),
    (30, ScoreBand.POOR),
]


def interpret_score(score: float) -> ScoreBand:
    """Map a 0-100 score to its qualitative band."""
    for lower_bound, band in SCORE_BANDS:
        if score >= lower_bound:
            return band
    return ScoreBand.CRITICAL


class FrameScoreComputer:
    """
    Computes one frame's final score and its calculation trace.

    Pure function of its input: identical records yield identical results,
    and instances hold no per-call state, so one instance can score many
    frames concurrently.
    """

    def __init__(
        self,
        settings: ScoringSettings | None = None,
        heuristic_aggregator: HeuristicAggregator | None = None,
        category_aggregator: CategoryAggregator | None = None,
        bias_reader: BiasOverlayReader | None = None,
        resolver: FallbackResolver | None = None,
    ) -> None:
        """
        Initialize the computer.

        Args:
            settings: Scoring settings. If None, uses canonical defaults.
                      Ignored when ``resolver`` is given.
            heuristic_aggregator: Heuristic aggregator.
            category_aggregator: Category aggregator.
            bias_reader: Bias overlay reader.
            resolver: Fallback resolver.
        """
        self.settings = settings or ScoringSettings()
        self.heuristic_aggregator = heuristic_aggregator or HeuristicAggregator()
        self.category_aggregator = category_aggregator or CategoryAggregator()
        self.bias_reader = bias_reader or BiasOverlayReader()
        self.resolver = resolver or FallbackResolver(ScoreBlender(self.settings))

    def compute(
        self,
        record: FrameEvaluationRecord,
        context: IterationContext | None = None,
    ) -> FrameScore:
        """
        Score one frame.

        Args:
            record: Raw frame assessment data.
            context: Iteration context of the frame's version. Without it
                     the combined score is final (no blending).

        Returns:
            FrameScore with score, trace and the precedence step used.
        """
        with scoring_context(frame_id=record.id):
            resolution = self._resolve(record, context)

        return FrameScore(
            frame_id=record.id,
            score=resolution.score,
            trace=resolution.trace,
            source=resolution.source,
        )

    def _resolve(
        self,
        record: FrameEvaluationRecord,
        context: IterationContext | None,
    ) -> Resolution:
        heuristics_avg = self.heuristic_aggregator.aggregate(
            record.heuristic_breakdown
        )
        categories_avg = self.category_aggregator.aggregate(record.category_scores)
        bias_weighted = self.bias_reader.read(record.bias)

        if heuristics_avg is None:
            logger.debug("Frame has no heuristics")
        if categories_avg is None:
            logger.debug("Frame has no usable category scores")

        resolution = self.resolver.resolve(
            heuristics_avg=heuristics_avg,
            categories_avg=categories_avg,
            bias_weighted_overall=bias_weighted,
            overall_score=record.overall_score,
            producer_trace=record.debug_calc,
            context=context,
        )
        logger.debug(
            "Scored frame: %d (%s)", resolution.score, resolution.source.value
        )
        return resolution

    def category_breakdown(self, record: FrameEvaluationRecord) -> dict[str, int]:
        """Per-category heuristic averages for reporting."""
        return self.heuristic_aggregator.by_category(record.heuristic_breakdown)


class VersionScoreAggregator:
    """
    Reduces a version's frame scores to one version score.

    The persisted ``total_score`` wins when it is present and positive;
    otherwise the rounded mean of the frame scores; otherwise 0.
    """

    def __init__(
        self,
        settings: ScoringSettings | None = None,
        frame_computer: FrameScoreComputer | None = None,
    ) -> None:
        """
        Initialize the aggregator.

        Args:
            settings: Scoring settings. If None, uses canonical defaults.
            frame_computer: Frame score computer. If None, one is built
                            from ``settings``.
        """
        self.frame_computer = frame_computer or FrameScoreComputer(settings)

    def score(self, version: VersionRecord) -> VersionScore:
        """
        Score every frame of a version and reduce to a version score.

        Args:
            version: Version record.

        Returns:
            VersionScore with the per-frame results.
        """
        context = IterationContext(
            iteration=version.iteration,
            total_iterations=version.total_iterations,
        )
        with scoring_context(version_id=version.id, iteration=version.iteration):
            frames = [
                self.frame_computer.compute(frame, context)
                for frame in version.frames
            ]

        scores = [frame.score for frame in frames]
        recomputed = round_half_up(mean(scores)) if scores else None

        persisted = version.total_score
        if persisted is not None and persisted > 0:
            score = clamp_score(persisted)
            source = ScoreSource.PERSISTED
        elif recomputed is not None:
            score = clamp_score(recomputed)
            source = ScoreSource.RECOMPUTED
        else:
            score = 0
            source = ScoreSource.DEFAULT

        logger.debug(
            "Scored version %s: %d (%s, %d frames)",
            version.id or version.iteration,
            score,
            source.value,
            len(frames),
        )

        return VersionScore(
            version_id=version.id,
            iteration=version.iteration,
            total_iterations=version.total_iterations,
            score=score,
            recomputed=recomputed,
            persisted=persisted,
            source=source,
            frames=frames,
        )

    def score_versions(self, versions: Iterable[VersionRecord]) -> list[VersionScore]:
        """Score several versions, ordered by iteration."""
        ordered = sorted(versions, key=lambda version: version.iteration)
        return [self.score(version) for version in ordered]
