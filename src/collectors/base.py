"""Base collector interface and the shared collect flow."""

import json
from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from typing import ClassVar

import structlog

from src.collectors.errors import (
    CollectorError,
    CollectorErrorClass,
    ErrorRecord,
    ParseError,
)
from src.collectors.state_machine import SourceState, SourceStateMachine
from src.collectors.strategies import DirectStrategy, RetrievalStrategy
from src.collectors.text import (
    clean_text,
    is_ai_related,
    is_within_window,
    resolve_source_name,
    truncate_description,
)
from src.config.constants import AI_VOCABULARY, SOURCE_DISPLAY_NAMES
from src.config.schemas.base import FetchStrategy, ParserKind
from src.config.schemas.sources import SourceConfig
from src.data_model import ContentItem, ContentType, DateConfidence
from src.fetch.client import HttpFetcher


logger = structlog.get_logger()


@dataclass(frozen=True)
class CollectorResult:
    """Result of collecting one source through one strategy."""

    items: list[ContentItem]
    parse_warnings: list[str] = field(default_factory=list)
    error: ErrorRecord | None = None
    state: SourceState = SourceState.SOURCE_DONE
    strategy: FetchStrategy | None = None

    @property
    def success(self) -> bool:
        """Check if collection succeeded."""
        return self.state == SourceState.SOURCE_DONE

    @property
    def items_count(self) -> int:
        """Get number of items collected."""
        return len(self.items)


class BaseCollector(ABC):
    """Fetch a source document, normalize it, and isolate any failure.

    Subclasses implement ``_collect_items``; this class owns the state
    machine, error downgrading and logging so that a failing source always
    yields an empty CollectorResult instead of an exception.
    """

    method: ClassVar[ParserKind]

    def __init__(
        self,
        run_id: str = "",
        recency_window_hours: int = 72,
        vocabulary: Sequence[str] = AI_VOCABULARY,
        display_names: Mapping[str, str] = SOURCE_DISPLAY_NAMES,
    ) -> None:
        """Initialize the collector.

        Args:
            run_id: Run identifier for logging.
            recency_window_hours: Items older than this are dropped.
            vocabulary: AI/ML terms for topical filtering of API sources.
            display_names: Hostname to display-name table.
        """
        self._run_id = run_id
        self._recency_window_hours = recency_window_hours
        self._vocabulary = tuple(vocabulary)
        self._display_names = dict(display_names)

    def collect(
        self,
        source_config: SourceConfig,
        http_client: HttpFetcher,
        now: datetime,
        strategy: RetrievalStrategy | None = None,
    ) -> CollectorResult:
        """Collect items from a source.

        Args:
            source_config: Configuration for the source.
            http_client: HTTP client for fetching.
            now: Pipeline start time; anchors the recency window.
            strategy: How to retrieve the document; direct when omitted.

        Returns:
            CollectorResult with items and final state.
        """
        strategy = strategy or DirectStrategy()
        log = logger.bind(
            component="collector",
            run_id=self._run_id,
            source_id=source_config.id,
            method=self.method.value,
            strategy=strategy.name.value,
        )
        state_machine = SourceStateMachine(source_config.id, self._run_id)
        parse_warnings: list[str] = []

        try:
            state_machine.to_fetching()
            body = strategy.retrieve(source_config, http_client)

            state_machine.to_parsing()
            items = self._collect_items(
                body=body,
                source_config=source_config,
                http_client=http_client,
                now=now,
                state_machine=state_machine,
                parse_warnings=parse_warnings,
            )

            state_machine.to_done()
            log.info(
                "collection_complete",
                items_emitted=len(items),
                parse_warnings_count=len(parse_warnings),
            )
            return CollectorResult(
                items=items,
                parse_warnings=parse_warnings,
                strategy=strategy.name,
            )

        except CollectorError as e:
            log.warning(
                "collection_failed",
                error_class=e.error_class.value,
                error=e.message,
            )
            state_machine.to_failed()
            return CollectorResult(
                items=[],
                parse_warnings=parse_warnings,
                error=e.to_record(source_config.id),
                state=SourceState.SOURCE_FAILED,
                strategy=strategy.name,
            )

        except Exception as e:  # noqa: BLE001
            log.warning("unexpected_error", error=str(e), exc_info=True)
            state_machine.to_failed()
            return CollectorResult(
                items=[],
                parse_warnings=parse_warnings,
                error=ErrorRecord(
                    error_class=CollectorErrorClass.PARSE,
                    message=f"Unexpected error: {e}",
                    source_id=source_config.id,
                ),
                state=SourceState.SOURCE_FAILED,
                strategy=strategy.name,
            )

    @abstractmethod
    def _collect_items(
        self,
        body: bytes,
        source_config: SourceConfig,
        http_client: HttpFetcher,
        now: datetime,
        state_machine: SourceStateMachine,
        parse_warnings: list[str],
    ) -> list[ContentItem]:
        """Normalize a fetched document into items.

        Raises:
            CollectorError: When the document as a whole is unusable.
        """

    def is_recent(self, published_at: datetime | None, now: datetime) -> bool:
        """Whether a timestamp lies inside this collector's recency window."""
        return is_within_window(published_at, now, self._recency_window_hours)

    def is_ai_related(self, title: str) -> bool:
        """Topical filter used by API-style sources."""
        return is_ai_related(title, self._vocabulary)

    def source_name_for(self, url: str) -> str:
        """Display name for a URL's hostname."""
        return resolve_source_name(url, self._display_names)

    def build_item(
        self,
        source_config: SourceConfig,
        title: str,
        description: str,
        url: str | None,
        source_name: str,
        published_at: datetime | None,
        date_confidence: DateConfidence,
        content_type: ContentType | None = None,
        engagement: int | None = None,
        duration: str | None = None,
    ) -> ContentItem:
        """Build a ContentItem with cleaned and bounded text fields."""
        return ContentItem(
            title=clean_text(title),
            description=truncate_description(clean_text(description)),
            url=url or "#",
            source=source_name,
            source_id=source_config.id,
            source_url=source_config.url,
            published_at=published_at,
            date_confidence=date_confidence,
            type=content_type or source_config.content_type,
            engagement=engagement,
            duration=duration,
        )

    @staticmethod
    def parse_json(body: bytes, source_id: str) -> object:
        """Decode a JSON payload.

        Raises:
            ParseError: If the body is not valid JSON.
        """
        try:
            return json.loads(body)
        except ValueError as e:
            raise ParseError(f"Invalid JSON payload: {e}", source_id=source_id) from e
