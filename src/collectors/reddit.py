"""Reddit hot-list collector."""

from datetime import datetime
from typing import Any

import structlog

from src.collectors.base import BaseCollector
from src.collectors.errors import SchemaError
from src.collectors.state_machine import SourceStateMachine
from src.collectors.text import clean_text, epoch_to_datetime
from src.config.schemas.base import ParserKind
from src.config.schemas.sources import SourceConfig
from src.data_model import ContentItem, DateConfidence
from src.fetch.client import HttpFetcher


logger = structlog.get_logger()

REDDIT_BASE_URL = "https://reddit.com"


class RedditHotCollector(BaseCollector):
    """Normalize a subreddit ``hot.json`` listing.

    Only posts with an AI-related title and a creation time inside the
    recency window are kept. The post score becomes the item engagement.
    """

    method = ParserKind.REDDIT_HOT

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
        children = self._extract_children(payload, source_config.id)

        items: list[ContentItem] = []
        for child in children:
            post = child.get("data") if isinstance(child, dict) else None
            if not isinstance(post, dict):
                parse_warnings.append("Listing child without data object")
                continue
            try:
                item = self._parse_post(post, source_config, now)
            except (TypeError, ValueError) as e:
                parse_warnings.append(f"Failed to parse post: {e}")
                continue
            if item is not None:
                items.append(item)
            if len(items) >= source_config.max_items:
                break

        logger.debug(
            "reddit_posts_parsed",
            source_id=source_config.id,
            posts_total=len(children),
            items_kept=len(items),
        )
        return items

    @staticmethod
    def _extract_children(payload: object, source_id: str) -> list[Any]:
        data = payload.get("data") if isinstance(payload, dict) else None
        children = data.get("children") if isinstance(data, dict) else None
        if not isinstance(children, list):
            raise SchemaError(
                "Listing has no data.children array",
                source_id=source_id,
                field="data.children",
                expected="list",
            )
        return children

    def _parse_post(
        self,
        post: dict[str, Any],
        source_config: SourceConfig,
        now: datetime,
    ) -> ContentItem | None:
        title = clean_text(post.get("title"))
        if not title or not self.is_ai_related(title):
            return None

        created_utc = post.get("created_utc")
        published_at = epoch_to_datetime(created_utc) if created_utc else None
        if published_at is None or not self.is_recent(published_at, now):
            return None

        selftext = post.get("selftext") or ""
        description = selftext or f"Discussion with {post.get('num_comments', 0)} comments"
        permalink = post.get("permalink") or ""

        return self.build_item(
            source_config=source_config,
            title=title,
            description=description,
            url=f"{REDDIT_BASE_URL}{permalink}" if permalink else None,
            source_name=source_config.name,
            published_at=published_at,
            date_confidence=DateConfidence.HIGH,
            engagement=max(0, int(post.get("score") or 0)),
        )
