"""Per-run counters for the HTTP fetch layer."""

import threading
from collections import Counter
from dataclasses import dataclass, field
from typing import ClassVar

from src.fetch.models import FetchErrorClass


@dataclass
class FetchMetrics:
    """Request, retry and failure counters, broken down by host.

    Singleton shared by the concurrent Tier 1 fetches; updates hold a lock.
    Per-host counts separate proxy traffic from direct requests.
    """

    requests_by_host: Counter[str] = field(default_factory=Counter)
    requests_by_status: Counter[int] = field(default_factory=Counter)
    retries_by_host: Counter[str] = field(default_factory=Counter)
    failures_by_class: Counter[str] = field(default_factory=Counter)
    bytes_total: int = 0
    duration_ms_total: float = 0.0
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    _instance: ClassVar["FetchMetrics | None"] = None

    @classmethod
    def get_instance(cls) -> "FetchMetrics":
        """Get singleton metrics instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset metrics (primarily for testing)."""
        cls._instance = None

    def record_request(self, host: str, status_code: int, bytes_received: int) -> None:
        """Record a request that received a response."""
        with self._lock:
            self.requests_by_host[host] += 1
            self.requests_by_status[status_code] += 1
            self.bytes_total += bytes_received

    def record_retry(self, host: str) -> None:
        """Record a scheduled retry."""
        with self._lock:
            self.retries_by_host[host] += 1

    def record_failure(self, error_class: FetchErrorClass) -> None:
        """Record a fetch that failed after all attempts."""
        with self._lock:
            self.failures_by_class[error_class.value] += 1

    def record_duration(self, duration_ms: float) -> None:
        """Add the wall time of one fetch, retries included."""
        with self._lock:
            self.duration_ms_total += duration_ms

    @property
    def retry_total(self) -> int:
        """Retries across all hosts."""
        return sum(self.retries_by_host.values())

    def to_dict(self) -> dict[str, object]:
        """Snapshot for the end-of-run log event."""
        with self._lock:
            return {
                "requests_by_host": dict(self.requests_by_host),
                "requests_by_status": {
                    str(status): count for status, count in self.requests_by_status.items()
                },
                "retries_by_host": dict(self.retries_by_host),
                "failures_by_class": dict(self.failures_by_class),
                "bytes_total": self.bytes_total,
                "duration_ms_total": round(self.duration_ms_total, 2),
            }
