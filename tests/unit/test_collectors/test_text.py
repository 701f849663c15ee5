"""Unit tests for text normalization helpers."""

from datetime import timedelta

import pytest

from src.collectors.text import (
    clean_text,
    epoch_to_datetime,
    hostname_of,
    is_ai_related,
    is_within_window,
    resolve_source_name,
    truncate_description,
)
from src.config.constants import AI_VOCABULARY, SOURCE_DISPLAY_NAMES
from tests.helpers.time import FIXED_NOW


class TestCleanText:
    """Tests for clean_text."""

    def test_strips_tags(self) -> None:
        """Markup is removed and whitespace collapsed."""
        assert clean_text("<p>Hello   <em>world</em></p>\n") == "Hello world"

    def test_replaces_entities_with_spaces(self) -> None:
        """Named and numeric entities become spaces."""
        assert clean_text("AT&amp;T&#39;s model") == "AT T s model"

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_empty(self, value: str | None) -> None:
        """Empty input yields an empty string."""
        assert clean_text(value) == ""


class TestTruncateDescription:
    """Tests for truncate_description."""

    def test_short_text_unchanged(self) -> None:
        """Text within the limit is returned as is."""
        assert truncate_description("short") == "short"

    def test_long_text_marked(self) -> None:
        """Long text is cut to the limit including the ellipsis."""
        result = truncate_description("a" * 301)
        assert len(result) == 300
        assert result.endswith("...")

    def test_exact_limit(self) -> None:
        """Exactly 300 characters are kept."""
        assert truncate_description("b" * 300) == "b" * 300


class TestSourceNames:
    """Tests for hostname and display name resolution."""

    def test_hostname_strips_www(self) -> None:
        """Leading www. is removed."""
        assert hostname_of("https://www.deepmind.com/blog/rss.xml") == "deepmind.com"

    def test_hostname_missing(self) -> None:
        """URLs without a host yield None."""
        assert hostname_of("#") is None

    def test_display_name_known(self) -> None:
        """Known hosts map to their display name."""
        assert resolve_source_name("https://openai.com/blog", SOURCE_DISPLAY_NAMES) == "OpenAI"

    def test_display_name_falls_back_to_host(self) -> None:
        """Unknown hosts keep their hostname."""
        assert (
            resolve_source_name("https://www.wired.com/feed", SOURCE_DISPLAY_NAMES)
            == "wired.com"
        )

    def test_display_name_unknown(self) -> None:
        """Unparseable URLs get the unknown-source label."""
        assert resolve_source_name("not a url", SOURCE_DISPLAY_NAMES) == "Unknown Source"


class TestAiRelated:
    """Tests for the vocabulary filter."""

    def test_matches_case_insensitively(self) -> None:
        """Vocabulary terms match regardless of case."""
        assert is_ai_related("New LLM benchmark released", AI_VOCABULARY)

    def test_rejects_off_topic(self) -> None:
        """Titles without any term are rejected."""
        assert not is_ai_related("Show HN: my sourdough log", AI_VOCABULARY)


class TestRecencyWindow:
    """Tests for is_within_window."""

    def test_recent_kept(self) -> None:
        """Items inside the window are kept."""
        assert is_within_window(FIXED_NOW - timedelta(hours=71), FIXED_NOW, 72)

    def test_boundary_excluded(self) -> None:
        """An item exactly at the window edge is excluded."""
        assert not is_within_window(FIXED_NOW - timedelta(hours=72), FIXED_NOW, 72)

    def test_undated_kept(self) -> None:
        """Undated items pass the window check."""
        assert is_within_window(None, FIXED_NOW, 72)

    def test_epoch_conversion(self) -> None:
        """Epoch seconds become aware UTC datetimes."""
        assert epoch_to_datetime(FIXED_NOW.timestamp()) == FIXED_NOW
