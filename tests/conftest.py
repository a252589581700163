"""Shared pytest fixtures for uxscore tests."""

from pathlib import Path
from typing import Any

import pytest


@pytest.fixture
def fixtures_dir() -> Path:
    """Return path to the fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def records_dir(fixtures_dir: Path) -> Path:
    """Return path to the record fixtures directory."""
    return fixtures_dir / "records"


@pytest.fixture
def heuristic_pair() -> list[dict[str, Any]]:
    """Two heuristics scoring 50% and 100%."""
    return [
        {"code": "H1", "principle": "Visibility", "max_points": 4, "score": 2},
        {"code": "H3", "principle": "User Control", "max_points": 4, "score": 4},
    ]


@pytest.fixture
def frame_data(heuristic_pair: list[dict[str, Any]]) -> dict[str, Any]:
    """Frame whose heuristics average 75 and categories average 70."""
    return {
        "id": "frame-1",
        "heuristic_breakdown": heuristic_pair,
        "category_scores": {"color": 80, "layout": 60},
    }
