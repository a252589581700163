"""Per-source aggregation of raw frame assessment data.

Each aggregator reduces one independent input of a frame record to a
single 0-100 value, or None when that input carries nothing usable.
"""

from collections.abc import Iterable, Mapping

from .models import BiasOverlay, HeuristicEntry
from .numeric import in_score_range, mean, round_half_up

# Nielsen heuristic code -> category dimension
HEURISTIC_CATEGORY_MAP: dict[str, str] = {
    "H1": "accessibility",
    "H9": "accessibility",
    "H2": "usability",
    "H4": "usability",
    "H5": "usability",
    "H7": "usability",
    "H8": "usability",
    "H3": "layout",
    "H6": "layout",
    "H10": "hierarchy",
}


class HeuristicAggregator:
    """
    Percentage-normalizes heuristic entries and averages them.

    Each entry contributes:
        pct = round(clamp(score, 0, max_points) / max_points * 100)
    """

    def __init__(self, category_map: Mapping[str, str] | None = None) -> None:
        """
        Initialize the aggregator.

        Args:
            category_map: Heuristic code to category mapping used by
                          by_category(). Defaults to HEURISTIC_CATEGORY_MAP.
        """
        self.category_map = dict(
            HEURISTIC_CATEGORY_MAP if category_map is None else category_map
        )

    @staticmethod
    def entry_percent(entry: HeuristicEntry) -> int:
        """Percentage score of a single entry (0-100)."""
        return round_half_up(entry.effective_score / entry.max_points * 100)

    def aggregate(self, entries: Iterable[HeuristicEntry]) -> int | None:
        """
        Average the entry percentages.

        Args:
            entries: Heuristic entries, possibly empty.

        Returns:
            Rounded mean percentage, or None for an empty list.
        """
        percents = [self.entry_percent(entry) for entry in entries]
        if not percents:
            return None
        return round_half_up(mean(percents))

    def by_category(self, entries: Iterable[HeuristicEntry]) -> dict[str, int]:
        """
        Average entry percentages per category.

        Entries whose code has no category are skipped. Used for reporting;
        never part of the final score.
        """
        grouped: dict[str, list[int]] = {}
        for entry in entries:
            category = self.category_map.get(entry.code.strip().upper())
            if category is None:
                continue
            grouped.setdefault(category, []).append(self.entry_percent(entry))
        return {
            category: round_half_up(mean(percents))
            for category, percents in grouped.items()
        }


class CategoryAggregator:
    """Averages category scores that are already expressed 0-100."""

    def aggregate(self, category_scores: Mapping[str, float]) -> int | None:
        """
        Average the category values that lie within [0, 100].

        Non-finite and out-of-range values are excluded, not clamped or
        coerced to 0.

        Returns:
            Rounded mean, or None when no valid value remains.
        """
        values = [
            value
            for value in category_scores.values()
            if isinstance(value, int | float)
            and not isinstance(value, bool)
            and in_score_range(value)
        ]
        if not values:
            return None
        return round_half_up(mean(values))


class BiasOverlayReader:
    """Reads the externally computed bias-weighted overall score."""

    def read(self, bias: BiasOverlay | None) -> float | None:
        """Return weighted_overall if present and within [0, 100], else None."""
        if bias is None or bias.weighted_overall is None:
            return None
        if not in_score_range(bias.weighted_overall):
            return None
        return bias.weighted_overall
