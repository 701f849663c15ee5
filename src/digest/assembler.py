"""Assembles the final digest from selected items and run statistics."""

import random
from collections import Counter
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from zoneinfo import ZoneInfo

import structlog

from src.config.schemas.pipeline import DigestConfig
from src.data_model import ContentItem, ContentType
from src.digest.enrich import enrich_item
from src.digest.models import (
    Digest,
    DigestContent,
    DigestItem,
    DigestMetadata,
    TopStory,
)
from src.digest.summary import Summarizer
from src.ranker.models import ScoredItem, SelectionResult


logger = structlog.get_logger()

MORNING_BADGE = "Morning Digest"
EVENING_BADGE = "Evening Digest"


@dataclass(frozen=True)
class RunStats:
    """Counts gathered by earlier pipeline stages.

    Attributes:
        fetched_items: Every item fetched, before filtering.
        filtered_count: Items surviving the quality filter.
        tier1_count: Items produced by Tier 1.
        tier2_count: Items produced by Tier 2.
        failed_sources: IDs of failed sources.
    """

    fetched_items: Sequence[ContentItem] = ()
    filtered_count: int = 0
    tier1_count: int = 0
    tier2_count: int = 0
    failed_sources: tuple[str, ...] = ()


def digest_badge(now: datetime, timezone: str = "UTC", evening_hour: int = 14) -> str:
    """Badge from the local hour: morning before ``evening_hour``, else evening."""
    local = now.astimezone(ZoneInfo(timezone))
    return MORNING_BADGE if local.hour < evening_hour else EVENING_BADGE


def top_stories(selection: SelectionResult, limit: int = 3) -> list[TopStory]:
    """Highest-scoring real items across categories, score descending.

    Ties keep blog, video, audio order.
    """
    ranked = sorted(selection.real_items, key=lambda s: s.score, reverse=True)
    return [
        TopStory(
            title=scored.item.title,
            source=scored.item.source,
            significance_score=scored.score,
        )
        for scored in ranked[:limit]
    ]


def source_counts(items: Sequence[ContentItem]) -> dict[str, int]:
    """Item count per source display name."""
    return dict(Counter(item.source for item in items))


class DigestAssembler:
    """Builds the digest envelope."""

    def __init__(
        self,
        config: DigestConfig,
        summarizer: Summarizer,
        rng: random.Random,
        now: datetime,
        top_story_count: int = 3,
        run_id: str = "",
    ) -> None:
        """Initialize the assembler.

        Args:
            config: Output stamping settings.
            summarizer: Summary generator.
            rng: Seeded generator for missing durations.
            now: Generation time.
            top_story_count: Number of top stories to expose.
            run_id: Run identifier for logging.
        """
        self._config = config
        self._summarizer = summarizer
        self._rng = rng
        self._now = now
        self._top_story_count = top_story_count
        self._log = logger.bind(component="digest", subcomponent="assembler", run_id=run_id)

    def _enrich(self, items: list[ScoredItem]) -> list[DigestItem]:
        return [
            enrich_item(scored, self._now, self._rng, self._config.words_per_minute)
            for scored in items
        ]

    def assemble(self, selection: SelectionResult, stats: RunStats) -> Digest:
        """Assemble the digest.

        Args:
            selection: Categorized items, placeholders included.
            stats: Counts from the fetch and filter stages.

        Returns:
            Digest.
        """
        content = DigestContent(
            blog=self._enrich(selection.items_for(ContentType.BLOG)),
            audio=self._enrich(selection.items_for(ContentType.AUDIO)),
            video=self._enrich(selection.items_for(ContentType.VIDEO)),
        )
        summary = self._summarizer.summarize(selection)

        metadata = DigestMetadata(
            total_items=len(stats.fetched_items),
            filtered_items=stats.filtered_count,
            ranked_items=selection.selected_count,
            sources=source_counts(stats.fetched_items),
            tier1_items=stats.tier1_count,
            tier2_items=stats.tier2_count,
            failed_sources=list(stats.failed_sources),
            summary_source=summary.source,
            generated_at=self._now,
        )

        digest = Digest(
            summary=summary.text,
            content=content,
            top_stories=top_stories(selection, self._top_story_count),
            metadata=metadata,
            timestamp=self._now,
            badge=digest_badge(
                self._now, self._config.timezone, self._config.evening_hour
            ),
        )

        self._log.info(
            "digest_assembled",
            blog=len(content.blog),
            audio=len(content.audio),
            video=len(content.video),
            top_stories=len(digest.top_stories),
            summary_source=summary.source.value,
            badge=digest.badge,
        )
        return digest
