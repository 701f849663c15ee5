"""RSS/Atom feed collector."""

import math
from datetime import datetime

import feedparser  # type: ignore[import-untyped]
import structlog

from src.collectors.base import BaseCollector
from src.collectors.errors import ParseError
from src.collectors.state_machine import SourceStateMachine
from src.collectors.text import clean_text, struct_time_to_datetime
from src.config.schemas.base import ParserKind
from src.config.schemas.sources import SourceConfig
from src.data_model import ContentItem, ContentType, DateConfidence
from src.fetch.client import HttpFetcher


logger = structlog.get_logger()

_MEDIA_PREFIXES = {
    "audio/": ContentType.AUDIO,
    "video/": ContentType.VIDEO,
}


class RssAtomCollector(BaseCollector):
    """Collector for RSS 2.0 and Atom 1.0 feeds, parsed with feedparser.

    Entries need a non-empty title and a timestamp inside the recency
    window. Entries with an audio or video enclosure become audio/video
    items; everything else takes the source's declared content type.
    """

    method = ParserKind.RSS_ATOM

    def _collect_items(
        self,
        body: bytes,
        source_config: SourceConfig,
        http_client: HttpFetcher,
        now: datetime,
        state_machine: SourceStateMachine,
        parse_warnings: list[str],
    ) -> list[ContentItem]:
        log = logger.bind(
            component="collector",
            run_id=self._run_id,
            source_id=source_config.id,
        )
        feed = feedparser.parse(body)

        if feed.bozo and feed.bozo_exception:
            if not feed.entries:
                raise ParseError(
                    f"Malformed feed: {feed.bozo_exception}",
                    source_id=source_config.id,
                )
            parse_warnings.append(f"Feed parsing warning: {feed.bozo_exception}")
            log.warning("feed_parse_warning", bozo_exception=str(feed.bozo_exception))

        source_name = self.source_name_for(source_config.url)
        items: list[ContentItem] = []
        skipped_stale = 0

        for entry in feed.entries:
            try:
                item = self._parse_entry(entry, source_config, source_name)
            except Exception as e:  # noqa: BLE001
                parse_warnings.append(f"Failed to parse entry: {e}")
                continue
            if item is None:
                continue
            if not self.is_recent(item.published_at, now):
                skipped_stale += 1
                continue
            items.append(item)
            if len(items) >= source_config.max_items:
                break

        log.debug(
            "feed_entries_parsed",
            entries_total=len(feed.entries),
            items_kept=len(items),
            skipped_stale=skipped_stale,
        )
        return items

    def _parse_entry(
        self,
        entry: feedparser.FeedParserDict,
        source_config: SourceConfig,
        source_name: str,
    ) -> ContentItem | None:
        """Parse a single feed entry; None when it has no usable title."""
        title = clean_text(entry.get("title"))
        if not title:
            return None

        published_at, date_confidence = self._extract_date(entry)
        content_type = self._detect_media_type(entry) or source_config.content_type
        duration = None
        if content_type != ContentType.BLOG:
            duration = format_duration(entry.get("itunes_duration"))

        return self.build_item(
            source_config=source_config,
            title=title,
            description=self._extract_description(entry),
            url=self._extract_link(entry),
            source_name=source_name,
            published_at=published_at,
            date_confidence=date_confidence,
            content_type=content_type,
            duration=duration,
        )

    @staticmethod
    def _extract_description(entry: feedparser.FeedParserDict) -> str:
        """First non-empty of description/summary, then content."""
        for key in ("description", "summary"):
            value = entry.get(key)
            if value and clean_text(value):
                return str(value)
        for content in entry.get("content", []):
            value = content.get("value")
            if value and clean_text(value):
                return str(value)
        return ""

    @staticmethod
    def _extract_link(entry: feedparser.FeedParserDict) -> str | None:
        """Entry link in text form, else the first alternate href."""
        link = (entry.get("link") or "").strip()
        if link:
            return link
        links = entry.get("links", [])
        for link_entry in links:
            if link_entry.get("rel") == "alternate" and link_entry.get("href"):
                return str(link_entry["href"])
        if links and links[0].get("href"):
            return str(links[0]["href"])
        return None

    @staticmethod
    def _extract_date(
        entry: feedparser.FeedParserDict,
    ) -> tuple[datetime | None, DateConfidence]:
        """Publish date first, then update date.

        Returns:
            Tuple of (datetime or None, confidence level).
        """
        if entry.get("published_parsed"):
            try:
                return (
                    struct_time_to_datetime(entry.published_parsed),
                    DateConfidence.HIGH,
                )
            except (ValueError, OverflowError):
                pass

        if entry.get("updated_parsed"):
            try:
                return (
                    struct_time_to_datetime(entry.updated_parsed),
                    DateConfidence.MEDIUM,
                )
            except (ValueError, OverflowError):
                pass

        return None, DateConfidence.LOW

    @staticmethod
    def _detect_media_type(entry: feedparser.FeedParserDict) -> ContentType | None:
        for enclosure in entry.get("enclosures", []):
            mime = (enclosure.get("type") or "").lower()
            for prefix, content_type in _MEDIA_PREFIXES.items():
                if mime.startswith(prefix):
                    return content_type
        return None


def format_duration(raw: str | None) -> str | None:
    """Normalize an itunes:duration value to ``"N min"``.

    Accepts ``HH:MM:SS``, ``MM:SS`` or plain seconds; anything else is
    returned unchanged.
    """
    if not raw:
        return None
    value = raw.strip()
    parts = value.split(":")
    if not all(part.isdigit() for part in parts) or len(parts) > 3:
        return value
    seconds = 0
    for part in parts:
        seconds = seconds * 60 + int(part)
    return f"{max(1, math.ceil(seconds / 60))} min"
