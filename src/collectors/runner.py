"""Tiered source fetching with parallel Tier 1 and sequential Tier 2 fallback."""

import time
from collections.abc import Callable, Mapping
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from datetime import UTC, datetime

import structlog

from src.collectors.base import BaseCollector, CollectorResult
from src.collectors.errors import CollectorErrorClass, ErrorRecord
from src.collectors.hackernews import HackerNewsTopCollector
from src.collectors.metrics import CollectorMetrics
from src.collectors.reddit import RedditHotCollector
from src.collectors.rss_atom import RssAtomCollector
from src.collectors.state_machine import SourceState
from src.collectors.strategies import build_strategies
from src.config.schemas.base import ParserKind, SourceTier
from src.config.schemas.pipeline import TierPolicy
from src.config.schemas.sources import SourceConfig, SourcesConfig
from src.data_model import ContentItem
from src.fetch.client import HttpFetcher


logger = structlog.get_logger()


@dataclass
class SourceRunResult:
    """Outcome of one source after all of its strategies were tried."""

    source_id: str
    tier: SourceTier
    method: str
    result: CollectorResult
    strategies_tried: list[str] = field(default_factory=list)
    duration_ms: float = 0.0

    @property
    def items(self) -> list[ContentItem]:
        """Items produced by the source (empty on failure)."""
        return self.result.items

    @property
    def failed(self) -> bool:
        """Whether every strategy failed."""
        return not self.result.success


@dataclass
class TierFetchResult:
    """Per-source results of both tiers, in declaration order."""

    run_id: str
    started_at: datetime
    finished_at: datetime
    tier1_results: list[SourceRunResult]
    tier2_results: list[SourceRunResult] = field(default_factory=list)
    tier2_triggered: bool = False

    @property
    def tier1_items(self) -> list[ContentItem]:
        """Tier 1 items joined in source declaration order."""
        return [item for r in self.tier1_results for item in r.items]

    @property
    def tier2_items(self) -> list[ContentItem]:
        """Tier 2 items joined in fetch order."""
        return [item for r in self.tier2_results for item in r.items]

    @property
    def items(self) -> list[ContentItem]:
        """All items, Tier 1 first."""
        return self.tier1_items + self.tier2_items

    @property
    def source_results(self) -> list[SourceRunResult]:
        """Results of every source that was attempted."""
        return self.tier1_results + self.tier2_results

    @property
    def failed_sources(self) -> list[str]:
        """IDs of sources that contributed nothing because they failed."""
        return [r.source_id for r in self.source_results if r.failed]

    @property
    def duration_ms(self) -> float:
        """Get total duration in milliseconds."""
        return (self.finished_at - self.started_at).total_seconds() * 1000


def build_collectors(
    run_id: str,
    recency_window_hours: int = 72,
    sleep: Callable[[float], None] = time.sleep,
) -> dict[ParserKind, BaseCollector]:
    """One collector per parser kind.

    Args:
        run_id: Run identifier for logging.
        recency_window_hours: Recency window applied at parse time.
        sleep: Sleep function for throttled per-item requests.

    Returns:
        Mapping from ParserKind to collector instance.
    """
    return {
        ParserKind.RSS_ATOM: RssAtomCollector(
            run_id=run_id, recency_window_hours=recency_window_hours
        ),
        ParserKind.REDDIT_HOT: RedditHotCollector(
            run_id=run_id, recency_window_hours=recency_window_hours
        ),
        ParserKind.HACKERNEWS_TOP: HackerNewsTopCollector(
            run_id=run_id, recency_window_hours=recency_window_hours, sleep=sleep
        ),
    }


class TieredSourceFetcher:
    """Fetch Tier 1 in parallel and fall back to Tier 2 when it under-delivers.

    - Tier 1 sources run on a thread pool; the phase waits for all of them.
    - Results are joined in declaration order, independent of completion order.
    - Tier 2 runs only below ``tier1_min_items``, one source at a time with
      ``tier2_delay_ms`` between requests, until ``tier2_sufficient_items``.
    - A failing source never affects its siblings.
    """

    def __init__(
        self,
        http_client: HttpFetcher,
        run_id: str,
        tier_policy: TierPolicy,
        collectors: Mapping[ParserKind, BaseCollector] | None = None,
        recency_window_hours: int = 72,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """Initialize the fetcher.

        Args:
            http_client: HTTP client shared by all collectors.
            run_id: Unique run identifier.
            tier_policy: Thresholds, delays and proxy settings.
            collectors: Collector per parser kind; built by default.
            recency_window_hours: Recency window for default collectors.
            sleep: Sleep function for inter-request delays.
        """
        self._http_client = http_client
        self._run_id = run_id
        self._policy = tier_policy
        self._sleep = sleep
        self._collectors = dict(
            collectors or build_collectors(run_id, recency_window_hours, sleep)
        )
        self._metrics = CollectorMetrics.get_instance()
        self._log = logger.bind(component="runner", run_id=run_id)

    def run(self, sources: SourcesConfig, now: datetime) -> TierFetchResult:
        """Fetch all tiers for one pipeline run.

        Args:
            sources: Configured sources.
            now: Pipeline start time.

        Returns:
            TierFetchResult with per-source outcomes.
        """
        started_at = datetime.now(UTC)
        tier1_sources = sources.enabled_for_tier(SourceTier.PRIMARY)
        tier2_sources = sources.enabled_for_tier(SourceTier.SECONDARY)

        self._log.info(
            "tier1_started",
            source_count=len(tier1_sources),
            max_workers=self._policy.max_workers,
        )
        tier1_results = self._run_parallel(tier1_sources, now)
        tier1_count = sum(len(r.items) for r in tier1_results)
        self._log.info(
            "tier1_complete",
            items=tier1_count,
            sources_failed=sum(1 for r in tier1_results if r.failed),
        )

        tier2_results: list[SourceRunResult] = []
        tier2_triggered = tier1_count < self._policy.tier1_min_items and bool(
            tier2_sources
        )
        if tier2_triggered:
            self._metrics.record_tier2_activation()
            self._log.info(
                "tier2_started",
                tier1_items=tier1_count,
                threshold=self._policy.tier1_min_items,
                source_count=len(tier2_sources),
            )
            tier2_results = self._run_sequential(tier2_sources, now)
            self._log.info(
                "tier2_complete",
                items=sum(len(r.items) for r in tier2_results),
                sources_attempted=len(tier2_results),
            )

        return TierFetchResult(
            run_id=self._run_id,
            started_at=started_at,
            finished_at=datetime.now(UTC),
            tier1_results=tier1_results,
            tier2_results=tier2_results,
            tier2_triggered=tier2_triggered,
        )

    def _run_parallel(
        self, sources: list[SourceConfig], now: datetime
    ) -> list[SourceRunResult]:
        """Fan out over a thread pool and fan back in by declaration index."""
        if not sources:
            return []

        results: dict[int, SourceRunResult] = {}
        with ThreadPoolExecutor(max_workers=self._policy.max_workers) as executor:
            future_to_index = {
                executor.submit(self._run_single_source, source, now): index
                for index, source in enumerate(sources)
            }
            for future in as_completed(future_to_index):
                index = future_to_index[future]
                try:
                    results[index] = future.result()
                except Exception as e:  # noqa: BLE001
                    results[index] = self._execution_failure(sources[index], e)

        return [results[index] for index in range(len(sources))]

    def _run_sequential(
        self, sources: list[SourceConfig], now: datetime
    ) -> list[SourceRunResult]:
        """Fetch one source at a time until enough items were produced."""
        results: list[SourceRunResult] = []
        produced = 0

        for index, source in enumerate(sources):
            if index > 0 and self._policy.tier2_delay_ms:
                self._sleep(self._policy.tier2_delay_ms / 1000.0)
            try:
                run_result = self._run_single_source(source, now)
            except Exception as e:  # noqa: BLE001
                run_result = self._execution_failure(source, e)
            results.append(run_result)
            produced += len(run_result.items)

            if produced >= self._policy.tier2_sufficient_items:
                self._log.info(
                    "tier2_sufficient",
                    items=produced,
                    threshold=self._policy.tier2_sufficient_items,
                    sources_skipped=len(sources) - index - 1,
                )
                break

        return results

    def _run_single_source(self, source: SourceConfig, now: datetime) -> SourceRunResult:
        """Try a source's strategies in order; the first success wins."""
        start_time_ns = time.perf_counter_ns()
        log = self._log.bind(source_id=source.id, method=source.method.value)

        collector = self._collectors.get(source.method)
        if collector is None:
            log.warning("unsupported_method")
            return SourceRunResult(
                source_id=source.id,
                tier=source.tier,
                method=source.method.value,
                result=CollectorResult(
                    items=[],
                    error=ErrorRecord(
                        error_class=CollectorErrorClass.SCHEMA,
                        message=f"Unsupported method: {source.method.value}",
                        source_id=source.id,
                    ),
                    state=SourceState.SOURCE_FAILED,
                ),
            )

        strategies = build_strategies(source, self._policy)
        if not strategies:
            log.warning("no_strategies")
            self._metrics.record_failure(source.id, CollectorErrorClass.SCHEMA)
            return SourceRunResult(
                source_id=source.id,
                tier=source.tier,
                method=source.method.value,
                result=CollectorResult(
                    items=[],
                    error=ErrorRecord(
                        error_class=CollectorErrorClass.SCHEMA,
                        message="No retrieval strategies configured",
                        source_id=source.id,
                    ),
                    state=SourceState.SOURCE_FAILED,
                ),
            )

        tried = [strategies[0].name.value]
        result = collector.collect(source, self._http_client, now, strategies[0])
        for strategy in strategies[1:]:
            if result.success:
                break
            log.info(
                "strategy_failed",
                strategy=tried[-1],
                error_class=result.error.error_class.value if result.error else None,
            )
            tried.append(strategy.name.value)
            result = collector.collect(source, self._http_client, now, strategy)

        duration_ms = (time.perf_counter_ns() - start_time_ns) / 1_000_000
        self._metrics.record_duration(source.id, duration_ms)

        if result.success:
            self._metrics.record_strategy(source.id, tried[-1])
            self._metrics.record_items(
                source.id, source.content_type.value, len(result.items)
            )
            log.info(
                "source_complete",
                items_emitted=len(result.items),
                strategy=tried[-1],
                duration_ms=round(duration_ms, 2),
            )
        else:
            error_class = (
                result.error.error_class if result.error else CollectorErrorClass.FETCH
            )
            self._metrics.record_failure(source.id, error_class)
            log.warning(
                "source_failed",
                error_class=error_class.value,
                strategies_tried=tried,
                duration_ms=round(duration_ms, 2),
            )

        return SourceRunResult(
            source_id=source.id,
            tier=source.tier,
            method=source.method.value,
            result=result,
            strategies_tried=tried,
            duration_ms=duration_ms,
        )

    def _execution_failure(self, source: SourceConfig, error: Exception) -> SourceRunResult:
        self._log.error(
            "source_execution_error",
            source_id=source.id,
            error=str(error),
        )
        self._metrics.record_failure(source.id, CollectorErrorClass.FETCH)
        return SourceRunResult(
            source_id=source.id,
            tier=source.tier,
            method=source.method.value,
            result=CollectorResult(
                items=[],
                error=ErrorRecord(
                    error_class=CollectorErrorClass.FETCH,
                    message=f"Execution error: {error}",
                    source_id=source.id,
                ),
                state=SourceState.SOURCE_FAILED,
            ),
        )
