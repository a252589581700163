"""Unit tests for the progression target and score blending."""

import pytest

from uxscore.core.settings import ScoringMode, ScoringSettings
from uxscore.scoring.progression import ProgressionTargetCalculator, ScoreBlender


class TestProgressionTarget:
    """Tests for ProgressionTargetCalculator."""

    @pytest.mark.parametrize(
        ("iteration", "total", "expected"),
        [
            (1, 3, 50),
            (2, 3, 75),
            (3, 3, 100),
            (1, 5, 50),
            (2, 5, 63),
            (3, 5, 75),
            (4, 5, 88),
            (5, 5, 100),
            (2, 4, 67),
        ],
    )
    def test_linear_interpolation(
        self, iteration: int, total: int, expected: int
    ) -> None:
        """Test targets rise linearly from 50 to 100."""
        assert ProgressionTargetCalculator().target(iteration, total) == expected

    @pytest.mark.parametrize("total", [1, 2, 3, 4, 5, 10])
    def test_last_iteration_is_full_score(self, total: int) -> None:
        """Test target(total, total) is 100."""
        assert ProgressionTargetCalculator().target(total, total) == 100

    def test_beyond_last_iteration(self) -> None:
        """Test iterations past the end still target 100."""
        assert ProgressionTargetCalculator().target(7, 3) == 100

    def test_single_iteration_sequence(self) -> None:
        """Test a sequence of one always targets 100."""
        assert ProgressionTargetCalculator().target(0, 1) == 100

    def test_iteration_below_one_clamped(self) -> None:
        """Test iteration 0 is treated as iteration 1."""
        assert ProgressionTargetCalculator().target(0, 3) == 50


class TestScoreBlender:
    """Tests for ScoreBlender."""

    def test_blend_mid_sequence(self) -> None:
        """Test combined 73 at iteration 2 of 3 blends to 74."""
        result = ScoreBlender().blend(73, iteration=2, total_iterations=3)
        assert result.target == 75
        assert result.alpha == 0.35
        assert result.blended == 74
        assert result.extra_pull_applied is False
        assert result.final == 74

    def test_divergence_of_exactly_threshold_not_pulled(self) -> None:
        """Test |65 - 50| = 15 does not trigger the extra pull."""
        result = ScoreBlender().blend(73, iteration=1, total_iterations=3)
        assert result.target == 50
        assert result.blended == 65
        assert result.extra_pull_applied is False
        assert result.final == 65

    def test_extra_pull_applied(self) -> None:
        """Test a large divergence is pulled halfway to the target."""
        # round(0.65 * 100 + 0.35 * 50) = 83; |83 - 50| > 15 -> round(66.5) = 67
        result = ScoreBlender().blend(100, iteration=1, total_iterations=3)
        assert result.extra_pull_applied is True
        assert result.blended == 67
        assert result.final == 67

    def test_extra_pull_downward(self) -> None:
        """Test a low combined score is pulled up toward the target."""
        # round(0.35 * 75) = 26; |26 - 75| > 15 -> round(50.5) = 51
        result = ScoreBlender().blend(0, iteration=2, total_iterations=3)
        assert result.extra_pull_applied is True
        assert result.final == 51

    def test_no_extra_pull_on_last_iteration(self) -> None:
        """Test the final iteration is never pulled."""
        # round(0.65 * 20 + 0.35 * 100) = 48
        result = ScoreBlender().blend(20, iteration=3, total_iterations=3)
        assert result.target == 100
        assert result.extra_pull_applied is False
        assert result.final == 48

    @pytest.mark.parametrize("combined", [0, 1, 37, 50, 99, 100])
    @pytest.mark.parametrize("iteration", [1, 2, 3, 4, 5])
    def test_final_within_bounds(self, combined: int, iteration: int) -> None:
        """Test blended and final always lie in [0, 100]."""
        result = ScoreBlender().blend(combined, iteration, total_iterations=5)
        assert 0 <= result.blended <= 100
        assert 0 <= result.final <= 100

    def test_raw_mode_skips_blending(self) -> None:
        """Test raw mode keeps the combined score."""
        blender = ScoreBlender(ScoringSettings(mode=ScoringMode.RAW))
        result = blender.blend(100, iteration=1, total_iterations=3)
        assert result.target == 50
        assert result.alpha == 0.0
        assert result.blended == 100
        assert result.extra_pull_applied is False
        assert result.final == 100

    def test_custom_threshold(self) -> None:
        """Test a wider threshold disables the pull."""
        blender = ScoreBlender(ScoringSettings(extra_pull_threshold=40))
        result = blender.blend(100, iteration=1, total_iterations=3)
        assert result.extra_pull_applied is False
        assert result.final == 83
