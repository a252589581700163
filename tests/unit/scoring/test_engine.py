"""Unit tests for FrameScoreComputer and VersionScoreAggregator."""

from typing import Any

import pytest

from uxscore.core.settings import ScoringMode, ScoringSettings
from uxscore.scoring.engine import (
    FrameScoreComputer,
    VersionScoreAggregator,
    interpret_score,
)
from uxscore.scoring.models import (
    FrameEvaluationRecord,
    ScoreBand,
    ScoreSource,
    VersionRecord,
)
from uxscore.scoring.resolver import IterationContext


def _version(frames: list[dict[str, Any]], **kwargs: Any) -> VersionRecord:
    data: dict[str, Any] = {"iteration": 2, "total_iterations": 3, "frames": frames}
    data.update(kwargs)
    return VersionRecord.model_validate(data)


class TestFrameScoreComputer:
    """Tests for FrameScoreComputer."""

    def test_blended_scenario(self, frame_data: dict[str, Any]) -> None:
        """Test heuristics 75 and categories 70 at iteration 2 of 3."""
        record = FrameEvaluationRecord.model_validate(frame_data)
        result = FrameScoreComputer().compute(record, IterationContext(2, 3))
        assert result.score == 74
        assert result.frame_id == "frame-1"
        assert result.source == ScoreSource.BLENDED
        trace = result.trace
        assert trace.heuristics_avg == 75
        assert trace.categories_avg == 70
        assert trace.combined == 73
        assert trace.target == 75
        assert trace.blended == 74
        assert trace.extra_pull_applied is False
        assert trace.final == 74
        assert trace.bias_weighted_overall is None

    def test_first_iteration_scenario(self, frame_data: dict[str, Any]) -> None:
        """Test the same frame at iteration 1 of 3 scores 65."""
        record = FrameEvaluationRecord.model_validate(frame_data)
        result = FrameScoreComputer().compute(record, IterationContext(1, 3))
        assert result.trace.target == 50
        assert result.trace.extra_pull_applied is False
        assert result.score == 65

    def test_without_context(self, frame_data: dict[str, Any]) -> None:
        """Test no iteration context means no blending."""
        record = FrameEvaluationRecord.model_validate(frame_data)
        result = FrameScoreComputer().compute(record)
        assert result.score == 73
        assert result.trace.target is None
        assert result.trace.alpha is None

    def test_producer_trace_wins(self, frame_data: dict[str, Any]) -> None:
        """Test a producer final of 88 is returned verbatim."""
        record = FrameEvaluationRecord.model_validate(
            {**frame_data, "debug_calc": {"final": 88}}
        )
        result = FrameScoreComputer().compute(record, IterationContext(2, 3))
        assert result.score == 88
        assert result.trace.to_dict() == {"final": 88}

    def test_bias_overlay(self, frame_data: dict[str, Any]) -> None:
        """Test the bias overlay joins the combined score."""
        record = FrameEvaluationRecord.model_validate(
            {**frame_data, "bias": {"weighted_overall": 90}}
        )
        result = FrameScoreComputer().compute(record)
        assert result.trace.bias_weighted_overall == 90
        assert result.score == 78

    def test_out_of_range_inputs_keep_trace_in_bounds(
        self, frame_data: dict[str, Any]
    ) -> None:
        """Test out-of-range categories and bias are left out of the trace."""
        record = FrameEvaluationRecord.model_validate(
            {
                **frame_data,
                "category_scores": {"color": 400, "layout": 300},
                "bias": {"weighted_overall": 900},
            }
        )
        result = FrameScoreComputer().compute(record, IterationContext(2, 3))
        trace = result.trace
        assert trace.categories_avg is None
        assert trace.bias_weighted_overall is None
        assert trace.combined is None
        assert result.source == ScoreSource.HEURISTICS_ONLY
        assert result.score == 75
        for value in trace.to_dict().values():
            if not isinstance(value, bool):
                assert 0 <= value <= 100

    def test_empty_record(self) -> None:
        """Test a fully empty record scores 0."""
        result = FrameScoreComputer().compute(FrameEvaluationRecord())
        assert result.score == 0
        assert result.source == ScoreSource.DEFAULT

    def test_idempotent(self, frame_data: dict[str, Any]) -> None:
        """Test identical input yields identical output."""
        record = FrameEvaluationRecord.model_validate(frame_data)
        computer = FrameScoreComputer()
        first = computer.compute(record, IterationContext(2, 3))
        second = computer.compute(record, IterationContext(2, 3))
        assert first == second
        assert first.to_dict() == second.to_dict()

    def test_raw_mode(self, frame_data: dict[str, Any]) -> None:
        """Test raw mode reports the combined score as final."""
        computer = FrameScoreComputer(ScoringSettings(mode=ScoringMode.RAW))
        record = FrameEvaluationRecord.model_validate(frame_data)
        result = computer.compute(record, IterationContext(1, 3))
        assert result.score == 73
        assert result.trace.alpha == 0.0
        assert result.trace.target == 50

    def test_category_breakdown(self, frame_data: dict[str, Any]) -> None:
        """Test heuristic codes are grouped into categories."""
        record = FrameEvaluationRecord.model_validate(frame_data)
        assert FrameScoreComputer().category_breakdown(record) == {
            "accessibility": 50,
            "layout": 100,
        }


class TestVersionScoreAggregator:
    """Tests for VersionScoreAggregator."""

    def test_mean_of_frame_scores(self) -> None:
        """Test frames scoring 80 and 60 give a version score of 70."""
        version = _version([{"overall_score": 80}, {"overall_score": 60}])
        result = VersionScoreAggregator().score(version)
        assert [frame.score for frame in result.frames] == [80, 60]
        assert result.recomputed == 70
        assert result.score == 70
        assert result.source == ScoreSource.RECOMPUTED

    def test_mean_rounds_half_up(self) -> None:
        """Test a .5 mean rounds up."""
        version = _version([{"overall_score": 81}, {"overall_score": 60}])
        assert VersionScoreAggregator().score(version).score == 71

    def test_persisted_total_wins(self) -> None:
        """Test a positive persisted total_score is preferred."""
        version = _version([{"overall_score": 80}], total_score=64)
        result = VersionScoreAggregator().score(version)
        assert result.score == 64
        assert result.recomputed == 80
        assert result.source == ScoreSource.PERSISTED

    def test_zero_persisted_total_ignored(self) -> None:
        """Test a persisted total of 0 falls back to recomputation."""
        version = _version([{"overall_score": 80}], total_score=0)
        result = VersionScoreAggregator().score(version)
        assert result.score == 80
        assert result.source == ScoreSource.RECOMPUTED

    def test_no_frames(self) -> None:
        """Test a version without frames or persisted total scores 0."""
        result = VersionScoreAggregator().score(_version([]))
        assert result.score == 0
        assert result.recomputed is None
        assert result.source == ScoreSource.DEFAULT

    def test_frames_use_version_context(self, frame_data: dict[str, Any]) -> None:
        """Test each frame is blended with the version's iteration context."""
        result = VersionScoreAggregator().score(_version([frame_data], iteration=1))
        frame = result.frames[0]
        assert frame.trace.iteration == 1
        assert frame.trace.total_iterations == 3
        assert frame.score == 65

    def test_score_versions_ordered_by_iteration(self) -> None:
        """Test versions are returned in iteration order."""
        versions = [
            _version([{"overall_score": 90}], id="b", iteration=3),
            _version([{"overall_score": 50}], id="a", iteration=1),
        ]
        results = VersionScoreAggregator().score_versions(versions)
        assert [result.version_id for result in results] == ["a", "b"]

    def test_to_dict(self) -> None:
        """Test version serialization."""
        version = _version([{"id": "f", "overall_score": 80}], id="v2")
        data = VersionScoreAggregator().score(version).to_dict()
        assert data["version_id"] == "v2"
        assert data["score"] == 80
        assert data["source"] == "recomputed"
        assert data["frames"][0]["frame_id"] == "f"
        assert "persisted" not in data


class TestInterpretScore:
    """Tests for score band interpretation."""

    @pytest.mark.parametrize(
        ("score", "band"),
        [
            (100, ScoreBand.EXCELLENT),
            (85, ScoreBand.EXCELLENT),
            (84, ScoreBand.GOOD),
            (70, ScoreBand.GOOD),
            (69, ScoreBand.FAIR),
            (50, ScoreBand.FAIR),
            (49, ScoreBand.POOR),
            (30, ScoreBand.POOR),
            (29, ScoreBand.CRITICAL),
            (0, ScoreBand.CRITICAL),
        ],
    )
    def test_bands(self, score: int, band: ScoreBand) -> None:
        """Test band thresholds."""
        assert interpret_score(score) == band
