"""End-to-end digest pipeline: fetch, filter, rank, select, assemble."""

import random
import time
import uuid
from collections.abc import Callable
from datetime import UTC, datetime

import httpx
import structlog

from src.collectors.metrics import CollectorMetrics
from src.collectors.runner import TieredSourceFetcher
from src.config.schemas.pipeline import PipelineConfig
from src.digest.assembler import DigestAssembler, RunStats
from src.digest.fallback import build_fallback_digest
from src.digest.models import Digest
from src.digest.summary import Summarizer
from src.fetch.client import HttpFetcher
from src.fetch.metrics import FetchMetrics
from src.llm.factory import create_llm_client
from src.llm.protocols import LlmClient
from src.quality.filter import QualityFilter
from src.ranker.metrics import RankerMetrics
from src.ranker.scorer import SignificanceScorer
from src.ranker.selector import CategorySelector
from src.settings import AppSettings


logger = structlog.get_logger()

PROXY_URL_SLOT = "{url}"


def proxy_template_from(custom_proxy_url: str) -> str:
    """Turn a proxy base URL into a template with a ``{url}`` slot.

    Values that already carry the slot are used as they are; a bare base
    URL gets the ``/get?url=`` path of the default proxy.
    """
    if PROXY_URL_SLOT in custom_proxy_url:
        return custom_proxy_url
    return f"{custom_proxy_url.rstrip('/')}/get?url={PROXY_URL_SLOT}"


def apply_settings(config: PipelineConfig, settings: AppSettings) -> PipelineConfig:
    """Overlay environment settings onto a pipeline configuration.

    Args:
        config: Base configuration.
        settings: Environment-derived settings.

    Returns:
        Re-validated configuration with overrides applied.
    """
    data = config.model_dump()
    if settings.custom_proxy_url:
        data["tiers"]["proxy_url_template"] = proxy_template_from(
            settings.custom_proxy_url
        )
    if settings.digest_timezone:
        data["digest"]["timezone"] = settings.digest_timezone
    if settings.claude_model:
        data["summary"]["model"] = settings.claude_model
    return PipelineConfig.model_validate(data)


class ContentAggregator:
    """Runs one digest generation.

    All collaborators are passed in explicitly; nothing in here reads the
    environment.
    """

    def __init__(  # noqa: PLR0913
        self,
        config: PipelineConfig,
        llm_client: LlmClient | None = None,
        run_id: str | None = None,
        http_client: httpx.Client | None = None,
        now: datetime | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """Initialize the aggregator.

        Args:
            config: Pipeline configuration.
            llm_client: Summarization client; None uses the local fallback.
            run_id: Run identifier; generated when omitted.
            http_client: Shared httpx client, mainly for tests.
            now: Pipeline clock; defaults to the current time.
            sleep: Sleep function for retries and delays.
        """
        self._config = config
        self._llm_client = llm_client
        self._run_id = run_id or str(uuid.uuid4())
        self._http_client = http_client
        self._now = now
        self._sleep = sleep
        self._log = logger.bind(component="pipeline", run_id=self._run_id)

    @property
    def run_id(self) -> str:
        """Identifier of this run."""
        return self._run_id

    def run(self) -> Digest:
        """Execute every stage and return the digest.

        Source, parse and summarization failures are absorbed by their
        stages. Anything else propagates to the caller.

        Returns:
            Digest.
        """
        config = self._config
        now = self._now or datetime.now(UTC)
        rng = random.Random(config.digest.seed)  # noqa: S311
        start = time.perf_counter()

        self._log.info(
            "pipeline_started",
            sources=len(config.sources.sources),
            summary_client=self._llm_client is not None,
        )

        fetcher = HttpFetcher(
            config=config.fetch,
            run_id=self._run_id,
            client=self._http_client,
            sleep=self._sleep,
        )
        tiered = TieredSourceFetcher(
            http_client=fetcher,
            run_id=self._run_id,
            tier_policy=config.tiers,
            recency_window_hours=config.ranking.recency_window_hours,
            sleep=self._sleep,
        )
        fetch_result = tiered.run(config.sources, now)

        quality = QualityFilter(config.quality, run_id=self._run_id).apply(
            fetch_result.items
        )

        scorer = SignificanceScorer(config.ranking, now=now, run_id=self._run_id)
        ranked = scorer.rank(quality.items)

        selection = CategorySelector(
            config.selection, rng=rng, run_id=self._run_id
        ).select(ranked)

        assembler = DigestAssembler(
            config=config.digest,
            summarizer=Summarizer(config.summary, self._llm_client, self._run_id),
            rng=rng,
            now=now,
            top_story_count=config.selection.top_stories,
            run_id=self._run_id,
        )
        digest = assembler.assemble(
            selection,
            RunStats(
                fetched_items=fetch_result.items,
                filtered_count=len(quality.items),
                tier1_count=len(fetch_result.tier1_items),
                tier2_count=len(fetch_result.tier2_items),
                failed_sources=tuple(fetch_result.failed_sources),
            ),
        )

        self._log.info(
            "pipeline_complete",
            fetched=len(fetch_result.items),
            filtered=len(quality.items),
            selected=selection.selected_count,
            failed_sources=len(fetch_result.failed_sources),
            tier2_triggered=fetch_result.tier2_triggered,
            duration_ms=round((time.perf_counter() - start) * 1000, 2),
        )
        self._log.info(
            "run_metrics",
            fetch=FetchMetrics.get_instance().to_dict(),
            collectors=CollectorMetrics.get_instance().to_dict(),
            ranker=RankerMetrics.get_instance().to_dict(),
        )
        return digest


def run_digest(  # noqa: PLR0913
    config: PipelineConfig | None = None,
    settings: AppSettings | None = None,
    llm_client: LlmClient | None = None,
    run_id: str | None = None,
    http_client: httpx.Client | None = None,
    now: datetime | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> Digest:
    """Generate a digest; never raises.

    When ``settings`` are given they override the configuration and, if no
    client was passed, provide the summarization key. Any unexpected error
    yields the static fallback digest.

    Args:
        config: Pipeline configuration; built-in defaults when omitted.
        settings: Environment-derived settings.
        llm_client: Summarization client, overriding the settings key.
        run_id: Run identifier.
        http_client: Shared httpx client.
        now: Pipeline clock.
        sleep: Sleep function for retries and delays.

    Returns:
        Digest, possibly the static fallback.
    """
    run_id = run_id or str(uuid.uuid4())
    log = logger.bind(component="pipeline", run_id=run_id)

    try:
        config = config or PipelineConfig()
        if settings is not None:
            config = apply_settings(config, settings)
            if llm_client is None:
                llm_client = create_llm_client(
                    api_key=settings.claude_api_key,
                    config=config.summary,
                )

        aggregator = ContentAggregator(
            config=config,
            llm_client=llm_client,
            run_id=run_id,
            http_client=http_client,
            now=now,
            sleep=sleep,
        )
        return aggregator.run()
    except Exception as e:  # noqa: BLE001
        log.error(
            "pipeline_failed",
            error=str(e),
            error_type=type(e).__name__,
            exc_info=True,
        )
        return build_fallback_digest(now or datetime.now(UTC))
