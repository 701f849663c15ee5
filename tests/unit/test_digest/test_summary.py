"""Unit tests for summary generation and its fallback."""

import random
from unittest.mock import MagicMock

from src.config.schemas.pipeline import SelectionConfig, SummaryConfig
from src.data_model import ContentItem, ContentType
from src.digest.models import SummarySource
from src.digest.summary import Summarizer, fallback_summary
from src.llm.errors import LlmApiError
from src.ranker.models import ImpactLevel, ScoredItem, SelectionResult
from src.ranker.selector import CategorySelector


def _scored(
    title: str,
    score: float,
    source: str,
    content_type: ContentType = ContentType.BLOG,
) -> ScoredItem:
    return ScoredItem(
        item=ContentItem(
            title=title,
            description=f"{title} in detail.",
            source=source,
            source_id="src",
            type=content_type,
        ),
        score=score,
        impact=ImpactLevel.HIGH if score >= 7 else ImpactLevel.MEDIUM,
    )


def _selection(items: list[ScoredItem]) -> SelectionResult:
    return CategorySelector(SelectionConfig(), rng=random.Random(0)).select(items)


class TestFallbackSummary:
    """Tests for fallback_summary."""

    def test_names_count_and_sources(self) -> None:
        """The text names the item count and the first three sources."""
        selection = _selection(
            [
                _scored("Blog A", 9.0, "OpenAI"),
                _scored("Blog B", 8.0, "OpenAI"),
                _scored("Blog C", 7.0, "Anthropic"),
                _scored("Audio A", 6.0, "Latent Space", ContentType.AUDIO),
                _scored("Video A", 5.0, "Two Minute Papers", ContentType.VIDEO),
            ]
        )

        text = fallback_summary(selection)

        assert text.startswith(
            "Today's AI landscape features 5 significant developments across the industry."
        )
        assert "Key updates emerge from OpenAI, Anthropic, Latent Space," in text
        assert "Two Minute Papers" not in text

    def test_counts_placeholders(self) -> None:
        """With no real items the placeholders are counted and named."""
        text = fallback_summary(_selection([]))

        assert "features 3 significant developments" in text
        assert "AI News, AI Weekly Podcast, AI Demos Channel" in text


class TestSummarizer:
    """Tests for Summarizer.summarize."""

    def test_uses_llm_text(self) -> None:
        """A successful call returns the model's text."""
        client = MagicMock()
        client.generate_content.return_value = "  AI had a big day.  "
        summarizer = Summarizer(SummaryConfig(), llm_client=client)

        result = summarizer.summarize(_selection([_scored("GPT-5 is out", 9.2, "OpenAI")]))

        assert result.text == "AI had a big day."
        assert result.source == SummarySource.LLM
        prompt, max_tokens = client.generate_content.call_args.args
        assert "[HIGH IMPACT] GPT-5 is out: GPT-5 is out in detail." in prompt
        assert max_tokens == 400

    def test_timeout_uses_fallback(self) -> None:
        """An API timeout yields the deterministic fallback text."""
        client = MagicMock()
        client.generate_content.side_effect = LlmApiError("Messages request timed out")
        selection = _selection([_scored("GPT-5 is out", 9.2, "OpenAI")])

        result = Summarizer(SummaryConfig(), llm_client=client).summarize(selection)

        assert result.source == SummarySource.FALLBACK
        assert result.text == fallback_summary(selection)

    def test_unexpected_client_error_uses_fallback(self) -> None:
        """Errors outside the LLM error type are absorbed too."""
        client = MagicMock()
        client.generate_content.side_effect = TimeoutError("read timed out")
        selection = _selection([_scored("GPT-5 is out", 9.2, "OpenAI")])

        result = Summarizer(SummaryConfig(), llm_client=client).summarize(selection)

        assert result.source == SummarySource.FALLBACK
        assert result.text == fallback_summary(selection)

    def test_empty_response_uses_fallback(self) -> None:
        """Blank model output is treated as a failure."""
        client = MagicMock()
        client.generate_content.return_value = "   "

        result = Summarizer(SummaryConfig(), llm_client=client).summarize(
            _selection([_scored("GPT-5 is out", 9.2, "OpenAI")])
        )

        assert result.source == SummarySource.FALLBACK

    def test_no_client_uses_fallback(self) -> None:
        """Without a client the fallback is used directly."""
        result = Summarizer(SummaryConfig()).summarize(_selection([]))

        assert result.source == SummarySource.FALLBACK
        assert result.text

    def test_placeholders_only_skips_llm(self) -> None:
        """Placeholders never reach the prompt."""
        client = MagicMock()

        result = Summarizer(SummaryConfig(), llm_client=client).summarize(_selection([]))

        client.generate_content.assert_not_called()
        assert result.source == SummarySource.FALLBACK

    def test_prompt_items(self) -> None:
        """Three blog, one video and one audio item, score descending."""
        selection = _selection(
            [
                _scored("Blog 1", 9.0, "A"),
                _scored("Blog 2", 6.0, "A"),
                _scored("Blog 3", 5.0, "A"),
                _scored("Blog 4", 4.0, "A"),
                _scored("Video 1", 8.0, "V", ContentType.VIDEO),
                _scored("Video 2", 7.5, "V", ContentType.VIDEO),
                _scored("Audio 1", 5.5, "P", ContentType.AUDIO),
            ]
        )

        items = Summarizer(SummaryConfig()).select_prompt_items(selection)

        assert [s.item.title for s in items] == [
            "Blog 1",
            "Video 1",
            "Blog 2",
            "Audio 1",
            "Blog 3",
        ]
