"""Fallback resolution of a frame's final score.

Precedence, first available wins:
1. A producer-supplied trace's ``final`` (verbatim).
2. ``combined`` from heuristics, categories and bias (tri-source), or from
   heuristics and categories (two-source).
3. ``combined`` blended toward the progression target when the iteration
   context is known; otherwise ``combined`` itself.
4. The single available one of heuristics/categories.
5. The producer-asserted ``overall_score``.
6. 0.
"""

import logging
import math
from dataclasses import dataclass
from typing import Any

from .models import DebugTrace, ScoreSource
from .numeric import clamp_score, in_score_range, mean, round_half_up
from .progression import ScoreBlender

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IterationContext:
    """Where a frame's version sits in its iteration sequence."""

    iteration: int
    total_iterations: int


@dataclass(frozen=True)
class Resolution:
    """Resolved final score with the trace that explains it."""

    score: int
    trace: DebugTrace
    source: ScoreSource


def _finite(value: Any) -> float | None:
    if isinstance(value, bool) or not isinstance(value, int | float):
        return None
    try:
        return value if math.isfinite(value) else None
    except OverflowError:
        return None


def _score_input(value: Any) -> float | None:
    finite = _finite(value)
    return finite if finite is not None and in_score_range(finite) else None


class FallbackResolver:
    """Chooses the best available final score; never raises."""

    def __init__(self, blender: ScoreBlender | None = None) -> None:
        """
        Initialize the resolver.

        Args:
            blender: Blender used when an iteration context is known.
                     Defaults to a ScoreBlender with default settings.
        """
        self.blender = blender or ScoreBlender()

    def resolve(
        self,
        heuristics_avg: int | None = None,
        categories_avg: int | None = None,
        bias_weighted_overall: float | None = None,
        overall_score: float | None = None,
        producer_trace: DebugTrace | None = None,
        context: IterationContext | None = None,
    ) -> Resolution:
        """
        Resolve the final score from whatever inputs are available.

        Args:
            heuristics_avg: Output of the heuristic aggregator.
            categories_avg: Output of the category aggregator.
            bias_weighted_overall: Output of the bias overlay reader.
            overall_score: Producer-asserted overall score.
            producer_trace: Producer-computed trace, authoritative if its
                            ``final`` is a finite number.
            context: Iteration context; enables blending.

        Returns:
            Resolution with an integer score in [0, 100].
        """
        if producer_trace is not None:
            producer_final = _finite(producer_trace.final)
            if producer_final is not None:
                return Resolution(
                    score=clamp_score(producer_final),
                    trace=producer_trace,
                    source=ScoreSource.PRODUCER_TRACE,
                )

        heuristics = _score_input(heuristics_avg)
        categories = _score_input(categories_avg)
        bias = _score_input(bias_weighted_overall)

        fields: dict[str, Any] = {}
        if heuristics is not None:
            fields["heuristics_avg"] = heuristics_avg
        if categories is not None:
            fields["categories_avg"] = categories_avg
        if bias is not None:
            fields["bias_weighted_overall"] = bias_weighted_overall
        if context is not None:
            fields["iteration"] = context.iteration
            fields["total_iterations"] = context.total_iterations

        if heuristics is not None and categories is not None:
            sources = [heuristics, categories]
            if bias is not None:
                sources.append(bias)
            combined = round_half_up(mean(sources))
            fields["combined"] = combined

            if context is None:
                final = clamp_score(combined)
                fields["final"] = final
                return Resolution(
                    score=final,
                    trace=DebugTrace(**fields),
                    source=ScoreSource.COMBINED,
                )

            result = self.blender.blend(
                combined, context.iteration, context.total_iterations
            )
            fields.update(
                target=result.target,
                alpha=result.alpha,
                blended=result.blended,
                extra_pull_applied=result.extra_pull_applied,
                final=result.final,
            )
            return Resolution(
                score=result.final,
                trace=DebugTrace(**fields),
                source=ScoreSource.BLENDED,
            )

        if context is not None:
            fields["target"] = self.blender.target_calculator.target(
                context.iteration, context.total_iterations
            )

        if heuristics is not None:
            return self._final(fields, heuristics, ScoreSource.HEURISTICS_ONLY)
        if categories is not None:
            return self._final(fields, categories, ScoreSource.CATEGORIES_ONLY)

        overall = _finite(overall_score)
        if overall is not None:
            logger.debug("No heuristics or categories; using overall_score")
            return self._final(fields, overall, ScoreSource.OVERALL_SCORE)

        logger.debug("No usable score inputs; defaulting to 0")
        return self._final(fields, 0, ScoreSource.DEFAULT)

    @staticmethod
    def _final(
        fields: dict[str, Any], value: float, source: ScoreSource
    ) -> Resolution:
        final = clamp_score(value)
        fields["final"] = final
        return Resolution(score=final, trace=DebugTrace(**fields), source=source)
