"""Progression target and score blending."""

from dataclasses import dataclass

from uxscore.core.settings import ScoringMode, ScoringSettings

from .numeric import clamp, clamp_score, round_half_up

TARGET_START = 50
TARGET_END = 100


class ProgressionTargetCalculator:
    """
    Expected score for a point in a bounded iteration sequence.

    Early iterations are graded on a lower curve; the target rises linearly
    from 50 at iteration 1 to 100 at the last iteration.
    """

    def target(self, iteration: int, total_iterations: int) -> int:
        """
        Calculate the progression target.

        Args:
            iteration: 1-based iteration number.
            total_iterations: Length of the iteration sequence.

        Returns:
            Target score in [50, 100].
        """
        if iteration >= total_iterations:
            return TARGET_END
        if total_iterations <= 1:
            return TARGET_END

        t = (clamp(iteration, 1, total_iterations) - 1) / (total_iterations - 1)
        return round_half_up(TARGET_START + t * (TARGET_END - TARGET_START))


@dataclass(frozen=True)
class BlendResult:
    """Outcome of blending a combined score toward its target."""

    target: int
    alpha: float
    blended: int
    extra_pull_applied: bool
    final: int


class ScoreBlender:
    """
    Blends a combined score toward the progression target.

    The blend is calculated as:
        blended = round((1 - alpha) * combined + alpha * target)

    Mid-sequence, a blended score further than ``extra_pull_threshold``
    points from the target is pulled halfway toward it once more.
    In raw mode no blending happens and the combined score is final.
    """

    def __init__(
        self,
        settings: ScoringSettings | None = None,
        target_calculator: ProgressionTargetCalculator | None = None,
    ) -> None:
        """
        Initialize the blender.

        Args:
            settings: Scoring settings. If None, uses the canonical
                      defaults (progressive, alpha 0.35, threshold 15).
            target_calculator: Progression target calculator.
        """
        self.settings = settings or ScoringSettings()
        self.target_calculator = target_calculator or ProgressionTargetCalculator()

    def blend(
        self,
        combined: int,
        iteration: int,
        total_iterations: int,
    ) -> BlendResult:
        """
        Blend ``combined`` toward the target for this iteration.

        Args:
            combined: Combined current score (0-100).
            iteration: 1-based iteration number.
            total_iterations: Length of the iteration sequence.

        Returns:
            BlendResult with every intermediate value.
        """
        target = self.target_calculator.target(iteration, total_iterations)

        if self.settings.mode == ScoringMode.RAW:
            final = clamp_score(combined)
            return BlendResult(
                target=target,
                alpha=0.0,
                blended=final,
                extra_pull_applied=False,
                final=final,
            )

        alpha = self.settings.alpha
        blended = round_half_up((1 - alpha) * combined + alpha * target)

        extra_pull_applied = False
        if (
            iteration < total_iterations
            and abs(blended - target) > self.settings.extra_pull_threshold
        ):
            blended = round_half_up((blended + target) / 2)
            extra_pull_applied = True

        blended = clamp_score(blended)
        return BlendResult(
            target=target,
            alpha=alpha,
            blended=blended,
            extra_pull_applied=extra_pull_applied,
            final=blended,
        )
