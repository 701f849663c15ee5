"""Metrics collection for the ranker module."""

from dataclasses import dataclass, field
from typing import ClassVar


@dataclass
class RankerMetrics:
    """Metrics for scoring and selection.

    Attributes:
        items_in: Number of items entering selection.
        items_out: Number of real items selected.
        dropped_total: Items dropped because their category was full.
        dropped_by_source: Dropped count per source.
        placeholders_total: Categories filled with a placeholder.
        score_values: All scores for percentile calculation.
        scoring_duration_ms: Time spent scoring.
        selection_duration_ms: Time spent selecting.
    """

    items_in: int = 0
    items_out: int = 0
    dropped_total: int = 0
    dropped_by_source: dict[str, int] = field(default_factory=dict)
    placeholders_total: int = 0
    score_values: list[float] = field(default_factory=list)
    scoring_duration_ms: float = 0.0
    selection_duration_ms: float = 0.0

    _instance: ClassVar["RankerMetrics | None"] = None

    @classmethod
    def get_instance(cls) -> "RankerMetrics":
        """Get singleton metrics instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset metrics (primarily for testing)."""
        cls._instance = None

    def record_items_in(self, count: int) -> None:
        self.items_in = count

    def record_items_out(self, count: int) -> None:
        self.items_out = count

    def record_drop(self, source_id: str) -> None:
        """Record an item dropped by a full category.

        Args:
            source_id: Source ID of the dropped item.
        """
        self.dropped_total += 1
        self.dropped_by_source[source_id] = self.dropped_by_source.get(source_id, 0) + 1

    def record_placeholders(self, count: int) -> None:
        self.placeholders_total += count

    def record_scores(self, scores: list[float]) -> None:
        self.score_values.extend(scores)

    def record_scoring_duration(self, duration_ms: float) -> None:
        self.scoring_duration_ms = duration_ms

    def record_selection_duration(self, duration_ms: float) -> None:
        self.selection_duration_ms = duration_ms

    def get_score_percentile(self, percentile: float) -> float:
        """Score at a percentile (0-100) using nearest-rank.

        Args:
            percentile: Percentile to compute.

        Returns:
            Score value, 0.0 when no scores were recorded.
        """
        if not self.score_values:
            return 0.0
        ordered = sorted(self.score_values)
        index = int(len(ordered) * percentile / 100)
        return ordered[min(index, len(ordered) - 1)]

    def to_dict(self) -> dict[str, object]:
        """Convert metrics to dictionary for logging."""
        return {
            "items_in": self.items_in,
            "items_out": self.items_out,
            "dropped_total": self.dropped_total,
            "dropped_by_source": dict(self.dropped_by_source),
            "placeholders_total": self.placeholders_total,
            "score_p50": self.get_score_percentile(50),
            "score_p90": self.get_score_percentile(90),
            "scoring_duration_ms": round(self.scoring_duration_ms, 2),
            "selection_duration_ms": round(self.selection_duration_ms, 2),
        }
