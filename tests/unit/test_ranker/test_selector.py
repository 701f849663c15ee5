"""Unit tests for category selection and placeholders."""

import random
from collections.abc import Generator

import pytest

from src.config.constants import AUDIO_DURATIONS, VIDEO_DURATIONS
from src.config.schemas.pipeline import SelectionConfig
from src.data_model import ContentItem, ContentType
from src.ranker.metrics import RankerMetrics
from src.ranker.models import ImpactLevel, ScoredItem
from src.ranker.placeholders import PLACEHOLDER_SOURCE_ID, pick_duration, placeholder_for
from src.ranker.selector import CategorySelector


pytestmark = pytest.mark.unit


def _scored(
    title: str,
    score: float,
    content_type: ContentType = ContentType.BLOG,
    source_id: str = "src",
) -> ScoredItem:
    """Create a ScoredItem of a given type and score."""
    return ScoredItem(
        item=ContentItem(title=title, source_id=source_id, type=content_type),
        score=score,
        impact=ImpactLevel.MEDIUM,
    )


def _select(ranked: list[ScoredItem], seed: int = 0):
    return CategorySelector(SelectionConfig(), rng=random.Random(seed)).select(ranked)


@pytest.fixture(autouse=True)
def reset_metrics() -> Generator[None]:
    """Reset singleton before and after each test."""
    RankerMetrics.reset()
    yield
    RankerMetrics.reset()


class TestCapacities:
    """Tests for per-category capacities."""

    def test_blog_capped_at_eight(self) -> None:
        """Overflow beyond the capacity is dropped with a reason."""
        ranked = [_scored(f"Blog {i}", 9.0 - i * 0.1) for i in range(10)]

        result = _select(ranked)

        blog = result.items_for(ContentType.BLOG)
        assert [s.item.title for s in blog] == [f"Blog {i}" for i in range(8)]
        assert [d.title for d in result.dropped] == ["Blog 8", "Blog 9"]
        assert {d.reason for d in result.dropped} == {"category_full:blog"}

    def test_audio_and_video_capped_at_four(self) -> None:
        """Audio and video hold at most four items each."""
        ranked = [
            _scored(f"{t.value} {i}", 5.0, content_type=t)
            for t in (ContentType.AUDIO, ContentType.VIDEO)
            for i in range(6)
        ]

        result = _select(ranked)

        assert len(result.items_for(ContentType.AUDIO)) == 4
        assert len(result.items_for(ContentType.VIDEO)) == 4
        assert len(result.dropped) == 4

    def test_overflow_does_not_spill_into_blog(self) -> None:
        """Full audio items are dropped, never moved to another category."""
        ranked = [_scored(f"Audio {i}", 6.0, ContentType.AUDIO) for i in range(5)]

        result = _select(ranked)

        assert result.dropped[0].reason == "category_full:audio"
        assert all(s.placeholder for s in result.items_for(ContentType.BLOG))

    def test_categories_score_descending(self) -> None:
        """Unsorted input is ordered by score within each category."""
        ranked = [_scored("low", 3.0), _scored("high", 8.0), _scored("mid", 5.0)]

        result = _select(ranked)

        assert [s.item.title for s in result.items_for(ContentType.BLOG)] == [
            "high",
            "mid",
            "low",
        ]

    def test_ties_keep_input_order(self) -> None:
        """Equal scores keep their ranked order."""
        ranked = [_scored("first", 5.0), _scored("second", 5.0)]

        result = _select(ranked)

        assert [s.item.title for s in result.items_for(ContentType.BLOG)] == [
            "first",
            "second",
        ]

    def test_drops_recorded_in_metrics(self) -> None:
        """Drops are counted per source."""
        ranked = [_scored(f"Blog {i}", 5.0, source_id="hacker-news") for i in range(9)]

        _select(ranked)

        metrics = RankerMetrics.get_instance()
        assert metrics.dropped_total == 1
        assert metrics.dropped_by_source == {"hacker-news": 1}


class TestPlaceholders:
    """Tests for empty-category placeholders."""

    def test_empty_categories_get_placeholders(self) -> None:
        """Audio and video fall back to fixed placeholder items."""
        result = _select([_scored("Only blog post", 6.0)])

        assert result.placeholder_categories == [ContentType.AUDIO, ContentType.VIDEO]
        audio = result.items_for(ContentType.AUDIO)[0]
        video = result.items_for(ContentType.VIDEO)[0]
        assert audio.placeholder
        assert audio.item.title == "AI Weekly: Industry Roundup"
        assert audio.score == 6.5
        assert video.item.title == "AI Breakthrough Demonstrations"
        assert video.impact == ImpactLevel.HIGH
        assert video.item.source_id == PLACEHOLDER_SOURCE_ID
        assert video.item.url == "#"

    def test_empty_input_fills_every_category(self) -> None:
        """With no items every category holds exactly one placeholder."""
        result = _select([])

        assert result.selected_count == 0
        assert len(result.all_items) == 3
        assert result.items_for(ContentType.BLOG)[0].item.source == "AI News"

    def test_placeholder_durations_seeded(self) -> None:
        """The same seed yields the same placeholder durations."""
        first = _select([], seed=42)
        second = _select([], seed=42)

        for content_type in (ContentType.AUDIO, ContentType.VIDEO):
            assert (
                first.items_for(content_type)[0].item.duration
                == second.items_for(content_type)[0].item.duration
            )
        assert first.items_for(ContentType.AUDIO)[0].item.duration in AUDIO_DURATIONS
        assert first.items_for(ContentType.VIDEO)[0].item.duration in VIDEO_DURATIONS

    def test_blog_placeholder_has_no_duration(self) -> None:
        """Blog placeholders never draw a duration."""
        rng = random.Random(0)
        state = rng.getstate()

        placeholder = placeholder_for(ContentType.BLOG, rng)

        assert placeholder.item.duration is None
        assert rng.getstate() == state

    def test_pick_duration(self) -> None:
        """Durations come from the per-type table."""
        rng = random.Random(7)
        assert pick_duration(ContentType.BLOG, rng) is None
        assert pick_duration(ContentType.VIDEO, rng) in VIDEO_DURATIONS
