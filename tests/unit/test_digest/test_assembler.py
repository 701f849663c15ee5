"""Unit tests for digest assembly, serialization and the static fallback."""

import json
import random
from datetime import timedelta
from unittest.mock import MagicMock

import pytest

from src.config.schemas.pipeline import DigestConfig, SelectionConfig, SummaryConfig
from src.data_model import ContentItem, ContentType, DateConfidence
from src.digest.assembler import (
    EVENING_BADGE,
    MORNING_BADGE,
    DigestAssembler,
    RunStats,
    digest_badge,
    source_counts,
    top_stories,
)
from src.digest.fallback import FALLBACK_BADGE, FALLBACK_SUMMARY, build_fallback_digest
from src.digest.models import SummarySource
from src.digest.summary import Summarizer
from src.ranker.models import ImpactLevel, ScoredItem, SelectionResult
from src.ranker.selector import CategorySelector
from tests.helpers.time import FIXED_NOW


def _item(
    title: str,
    source: str = "OpenAI",
    content_type: ContentType = ContentType.BLOG,
) -> ContentItem:
    return ContentItem(
        title=title,
        description=f"About {title}.",
        url=f"https://example.com/{title.replace(' ', '-').lower()}",
        source=source,
        source_id="src",
        published_at=FIXED_NOW - timedelta(hours=2),
        date_confidence=DateConfidence.HIGH,
        type=content_type,
    )


def _scored(title: str, score: float, content_type: ContentType = ContentType.BLOG) -> ScoredItem:
    return ScoredItem(
        item=_item(title, content_type=content_type),
        score=score,
        impact=ImpactLevel.HIGH if score >= 7 else ImpactLevel.MEDIUM,
    )


def _selection(items: list[ScoredItem]) -> SelectionResult:
    return CategorySelector(SelectionConfig(), rng=random.Random(0)).select(items)


def _assembler(llm_client: MagicMock | None = None, timezone: str = "UTC") -> DigestAssembler:
    return DigestAssembler(
        config=DigestConfig(timezone=timezone),
        summarizer=Summarizer(SummaryConfig(), llm_client=llm_client),
        rng=random.Random(0),
        now=FIXED_NOW,
        run_id="test",
    )


class TestDigestBadge:
    """Tests for digest_badge."""

    def test_morning_before_cutoff(self) -> None:
        """Midnight UTC is a morning digest."""
        assert digest_badge(FIXED_NOW, "UTC") == MORNING_BADGE

    def test_evening_after_cutoff(self) -> None:
        """From the evening hour on the badge switches."""
        assert digest_badge(FIXED_NOW + timedelta(hours=14), "UTC") == EVENING_BADGE

    def test_uses_local_timezone(self) -> None:
        """The local hour decides, not the UTC hour."""
        assert digest_badge(FIXED_NOW, "America/Los_Angeles") == EVENING_BADGE


class TestTopStories:
    """Tests for top_stories."""

    def test_global_score_order(self) -> None:
        """Top stories span categories and are score descending."""
        selection = _selection(
            [
                _scored("Blog low", 5.0),
                _scored("Video high", 9.0, ContentType.VIDEO),
                _scored("Blog high", 8.0),
                _scored("Audio mid", 7.0, ContentType.AUDIO),
            ]
        )

        stories = top_stories(selection, limit=3)

        assert [s.title for s in stories] == ["Video high", "Blog high", "Audio mid"]

    def test_placeholders_excluded(self) -> None:
        """Placeholder items never become top stories."""
        assert top_stories(_selection([])) == []


class TestSourceCounts:
    """Tests for source_counts."""

    def test_counts_per_source(self) -> None:
        """Items are tallied by source display name."""
        items = [_item("a"), _item("b"), _item("c", source="Anthropic")]

        assert source_counts(items) == {"OpenAI": 2, "Anthropic": 1}


class TestDigestAssembler:
    """Tests for DigestAssembler.assemble."""

    def test_envelope(self) -> None:
        """Content, metadata and badge are populated from the run."""
        selection = _selection([_scored("GPT-5 is out", 9.2), _scored("Claude 4", 8.0)])
        stats = RunStats(
            fetched_items=[_item("GPT-5 is out"), _item("Claude 4", source="Anthropic"), _item("x")],
            filtered_count=2,
            tier1_count=3,
            failed_sources=("venturebeat-ai",),
        )

        digest = _assembler().assemble(selection, stats)

        assert [i.title for i in digest.content.blog] == ["GPT-5 is out", "Claude 4"]
        assert digest.content.audio[0].placeholder
        assert digest.content.video[0].placeholder
        assert digest.metadata.total_items == 3
        assert digest.metadata.filtered_items == 2
        assert digest.metadata.ranked_items == 2
        assert digest.metadata.sources == {"OpenAI": 2, "Anthropic": 1}
        assert digest.metadata.failed_sources == ["venturebeat-ai"]
        assert digest.metadata.summary_source == SummarySource.FALLBACK
        assert not digest.metadata.fallback
        assert digest.badge == MORNING_BADGE
        assert digest.timestamp == FIXED_NOW
        assert [s.title for s in digest.top_stories] == ["GPT-5 is out", "Claude 4"]

    def test_llm_summary_source(self) -> None:
        """A successful summary is marked as coming from the LLM."""
        client = MagicMock()
        client.generate_content.return_value = "A big day for AI."

        digest = _assembler(llm_client=client).assemble(
            _selection([_scored("GPT-5 is out", 9.2)]), RunStats()
        )

        assert digest.summary == "A big day for AI."
        assert digest.metadata.summary_source == SummarySource.LLM


class TestSerialization:
    """Tests for Digest.to_json_dict."""

    def test_camel_case_and_omitted_fields(self) -> None:
        """Wire keys are camelCase and absent optionals are left out."""
        digest = _assembler().assemble(_selection([_scored("GPT-5 is out", 9.2)]), RunStats())

        data = digest.to_json_dict()

        assert set(data) == {"summary", "content", "topStories", "metadata", "timestamp", "badge"}
        blog = data["content"]["blog"][0]
        assert blog["significanceScore"] == 9.2
        assert blog["readTime"] == "1 min read"
        assert blog["impact"] == "high"
        assert blog["type"] == "blog"
        assert "duration" not in blog
        assert "engagement" not in blog
        assert data["metadata"]["summarySource"] == "fallback"
        assert data["metadata"]["rankedItems"] == 1
        assert data["topStories"][0] == {
            "title": "GPT-5 is out",
            "source": "OpenAI",
            "significanceScore": 9.2,
        }
        json.dumps(data)


class TestFallbackDigest:
    """Tests for build_fallback_digest."""

    def test_static_content(self) -> None:
        """One placeholder blog item and empty audio/video."""
        digest = build_fallback_digest(FIXED_NOW)

        assert digest.summary == FALLBACK_SUMMARY
        assert digest.badge == FALLBACK_BADGE
        assert digest.metadata.fallback
        assert len(digest.content.blog) == 1
        assert digest.content.audio == []
        assert digest.content.video == []
        blog = digest.content.blog[0]
        assert blog.title == "AI Industry Continues Rapid Development"
        assert blog.time == "1 hour ago"
        assert blog.read_time == "3 min read"
        assert digest.top_stories[0].significance_score == 5.0

    @pytest.mark.parametrize("hours", [0, 15])
    def test_timestamped(self, hours: int) -> None:
        """Timestamp and generation time follow the given clock."""
        now = FIXED_NOW + timedelta(hours=hours)

        digest = build_fallback_digest(now)

        assert digest.timestamp == now
        assert digest.metadata.generated_at == now
