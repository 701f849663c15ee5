"""Hacker News top-stories collector."""

import json
import time
from collections.abc import Callable, Mapping, Sequence
from datetime import datetime
from typing import Any

import structlog

from src.collectors.base import BaseCollector
from src.collectors.errors import SchemaError
from src.collectors.state_machine import SourceStateMachine
from src.collectors.text import clean_text, epoch_to_datetime
from src.config.constants import AI_VOCABULARY, SOURCE_DISPLAY_NAMES
from src.config.schemas.base import ParserKind
from src.config.schemas.sources import SourceConfig
from src.data_model import ContentItem, DateConfidence
from src.fetch.client import HttpFetcher


logger = structlog.get_logger()

HN_ITEM_PAGE = "https://news.ycombinator.com/item?id={id}"


class HackerNewsTopCollector(BaseCollector):
    """Resolve the top-stories ID list into items, one request per story.

    Story requests run sequentially with a fixed pause between them and a
    single attempt each; a failed or malformed story is skipped.
    """

    method = ParserKind.HACKERNEWS_TOP

    def __init__(
        self,
        run_id: str = "",
        recency_window_hours: int = 72,
        vocabulary: Sequence[str] = AI_VOCABULARY,
        display_names: Mapping[str, str] = SOURCE_DISPLAY_NAMES,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """Initialize the collector.

        Args:
            run_id: Run identifier for logging.
            recency_window_hours: Stories older than this are dropped.
            vocabulary: AI/ML terms for topical filtering.
            display_names: Hostname to display-name table.
            sleep: Sleep function for the per-story pause, injectable for tests.
        """
        super().__init__(run_id, recency_window_hours, vocabulary, display_names)
        self._sleep = sleep

    def _collect_items(
        self,
        body: bytes,
        source_config: SourceConfig,
        http_client: HttpFetcher,
        now: datetime,
        state_machine: SourceStateMachine,
        parse_warnings: list[str],
    ) -> list[ContentItem]:
        payload = self.parse_json(body, source_config.id)
        if not isinstance(payload, list):
            raise SchemaError(
                "Top stories payload is not an ID list",
                source_id=source_config.id,
                expected="list",
            )
        story_ids = payload[: source_config.max_items]

        state_machine.to_fetching_details()
        log = logger.bind(
            component="collector",
            run_id=self._run_id,
            source_id=source_config.id,
        )

        items: list[ContentItem] = []
        failed = 0
        for index, story_id in enumerate(story_ids):
            if index > 0 and source_config.detail_delay_ms:
                self._sleep(source_config.detail_delay_ms / 1000.0)

            story = self._fetch_story(story_id, source_config, http_client)
            if story is None:
                failed += 1
                parse_warnings.append(f"Story {story_id} unavailable")
                continue

            item = self._parse_story(story_id, story, source_config, now)
            if item is not None:
                items.append(item)

        log.info(
            "stories_resolved",
            ids_total=len(story_ids),
            stories_failed=failed,
            items_kept=len(items),
        )
        return items

    def _fetch_story(
        self,
        story_id: object,
        source_config: SourceConfig,
        http_client: HttpFetcher,
    ) -> dict[str, Any] | None:
        """Fetch one story; None on any failure."""
        template = source_config.detail_url_template or ""
        result = http_client.fetch(
            source_id=source_config.id,
            url=template.format(id=story_id),
            extra_headers=dict(source_config.headers) or None,
            timeout=source_config.timeout_seconds,
            max_attempts=1,
        )
        if result.error is not None:
            return None
        try:
            story = json.loads(result.body_bytes)
        except ValueError:
            return None
        return story if isinstance(story, dict) else None

    def _parse_story(
        self,
        story_id: object,
        story: dict[str, Any],
        source_config: SourceConfig,
        now: datetime,
    ) -> ContentItem | None:
        if story.get("deleted") or story.get("dead"):
            return None

        title = clean_text(story.get("title"))
        if not title or not self.is_ai_related(title):
            return None

        timestamp = story.get("time")
        if not isinstance(timestamp, int | float):
            return None
        published_at = epoch_to_datetime(timestamp)
        if not self.is_recent(published_at, now):
            return None

        text = clean_text(story.get("text"))
        description = text or f"HN discussion with {story.get('descendants') or 0} comments"
        score = story.get("score")

        return self.build_item(
            source_config=source_config,
            title=title,
            description=description,
            url=story.get("url") or HN_ITEM_PAGE.format(id=story_id),
            source_name=source_config.name,
            published_at=published_at,
            date_confidence=DateConfidence.HIGH,
            engagement=max(0, int(score)) if isinstance(score, int | float) else None,
        )
