"""Metrics collection for the collector framework."""

from collections import Counter
from dataclasses import dataclass, field
from threading import Lock

from src.collectors.errors import CollectorErrorClass


# Module-level singleton state
_metrics_instance: "CollectorMetrics | None" = None
_metrics_lock: Lock = Lock()


@dataclass
class CollectorMetrics:
    """Thread-safe metrics for collector operations.

    Use get_instance() for singleton access.
    """

    _lock: Lock = field(default_factory=Lock, repr=False, compare=False)

    # Per-source item counts by content type
    items_by_source_type: Counter[tuple[str, str]] = field(default_factory=Counter)

    # Per-source failure counts by error class
    failures_by_source_error: Counter[tuple[str, str]] = field(default_factory=Counter)

    # Per-source duration in milliseconds
    duration_by_source: dict[str, float] = field(default_factory=dict)

    # Strategy that succeeded, per source
    strategy_by_source: dict[str, str] = field(default_factory=dict)

    total_items: int = 0
    total_failures: int = 0
    total_sources: int = 0
    tier2_activations: int = 0

    @classmethod
    def get_instance(cls) -> "CollectorMetrics":
        """Get the singleton instance (thread-safe)."""
        global _metrics_instance  # noqa: PLW0603
        if _metrics_instance is None:
            with _metrics_lock:
                if _metrics_instance is None:
                    _metrics_instance = cls()
        return _metrics_instance

    @classmethod
    def reset(cls) -> None:
        """Reset the singleton instance (for testing)."""
        global _metrics_instance  # noqa: PLW0603
        with _metrics_lock:
            _metrics_instance = None

    def record_items(self, source_id: str, content_type: str, count: int) -> None:
        """Record items collected from a source."""
        with self._lock:
            self.items_by_source_type[(source_id, content_type)] += count
            self.total_items += count

    def record_failure(self, source_id: str, error_class: CollectorErrorClass) -> None:
        """Record a source that ended with an error."""
        with self._lock:
            self.failures_by_source_error[(source_id, error_class.value)] += 1
            self.total_failures += 1

    def record_duration(self, source_id: str, duration_ms: float) -> None:
        """Record collection duration for a source."""
        with self._lock:
            self.duration_by_source[source_id] = duration_ms
            self.total_sources += 1

    def record_strategy(self, source_id: str, strategy: str) -> None:
        """Record which retrieval strategy produced a source's items."""
        with self._lock:
            self.strategy_by_source[source_id] = strategy

    def record_tier2_activation(self) -> None:
        """Record that the Tier 2 fallback ran."""
        with self._lock:
            self.tier2_activations += 1

    def get_items_total(self, source_id: str | None = None) -> int:
        """Get total items collected, optionally for one source."""
        with self._lock:
            if source_id is None:
                return self.total_items
            return sum(
                count
                for (sid, _), count in self.items_by_source_type.items()
                if sid == source_id
            )

    def get_failures_total(self, source_id: str | None = None) -> int:
        """Get total failures, optionally for one source."""
        with self._lock:
            if source_id is None:
                return self.total_failures
            return sum(
                count
                for (sid, _), count in self.failures_by_source_error.items()
                if sid == source_id
            )

    def to_dict(self) -> dict[str, int | dict[str, int] | dict[str, str]]:
        """Snapshot of the counters, keyed for JSON output."""
        with self._lock:
            return {
                "total_items": self.total_items,
                "total_failures": self.total_failures,
                "total_sources": self.total_sources,
                "tier2_activations": self.tier2_activations,
                "failures_by_source": {
                    f"{sid}:{error_class}": count
                    for (sid, error_class), count in sorted(
                        self.failures_by_source_error.items()
                    )
                },
                "strategy_by_source": dict(sorted(self.strategy_by_source.items())),
            }
