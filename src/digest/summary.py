"""Digest summary generation with a deterministic local fallback."""

from dataclasses import dataclass

import structlog

from src.config.schemas.pipeline import SummaryConfig
from src.data_model import ContentType
from src.digest.models import SummarySource
from src.llm.errors import LlmApiError
from src.llm.prompts import build_summary_prompt
from src.llm.protocols import LlmClient
from src.ranker.models import ScoredItem, SelectionResult


logger = structlog.get_logger()

# Category order used when counting items and naming sources
_FALLBACK_ORDER = (ContentType.BLOG, ContentType.AUDIO, ContentType.VIDEO)


@dataclass(frozen=True)
class SummaryResult:
    """Summary text and where it came from."""

    text: str
    source: SummarySource


def fallback_summary(selection: SelectionResult, source_count: int = 3) -> str:
    """Local summary naming the item count and the leading sources.

    Every categorized item counts, placeholders included.

    Args:
        selection: Categorized items.
        source_count: How many distinct sources to name.

    Returns:
        Summary text.
    """
    items = [
        scored
        for content_type in _FALLBACK_ORDER
        for scored in selection.items_for(content_type)
    ]
    sources: list[str] = []
    for scored in items:
        if scored.item.source not in sources:
            sources.append(scored.item.source)

    return (
        f"Today's AI landscape features {len(items)} significant developments "
        "across the industry. "
        f"Key updates emerge from {', '.join(sources[:source_count])}, showcasing "
        "continued innovation in machine learning, language models, and AI "
        "applications. Breakthrough announcements and research findings continue "
        "to drive the field forward."
    )


class Summarizer:
    """Requests a summary from the LLM and falls back to local text."""

    def __init__(
        self,
        config: SummaryConfig,
        llm_client: LlmClient | None = None,
        run_id: str = "",
    ) -> None:
        """Initialize the summarizer.

        Args:
            config: Summary request settings.
            llm_client: Text generation client; None forces the fallback.
            run_id: Run identifier for logging.
        """
        self._config = config
        self._client = llm_client
        self._log = logger.bind(component="digest", subcomponent="summary", run_id=run_id)

    def select_prompt_items(self, selection: SelectionResult) -> list[ScoredItem]:
        """Leading real items of each category, score descending (stable)."""

        def real(content_type: ContentType) -> list[ScoredItem]:
            return [s for s in selection.items_for(content_type) if not s.placeholder]

        items = [
            *real(ContentType.BLOG)[: self._config.blog_items],
            *real(ContentType.VIDEO)[: self._config.video_items],
            *real(ContentType.AUDIO)[: self._config.audio_items],
        ]
        return sorted(items, key=lambda s: s.score, reverse=True)

    def summarize(self, selection: SelectionResult) -> SummaryResult:
        """Produce the digest summary.

        Never raises for collaborator problems: a missing client, an empty
        prompt, any client exception or an empty response yield the fallback.

        Args:
            selection: Categorized items.

        Returns:
            SummaryResult.
        """
        prompt_items = self.select_prompt_items(selection)

        if self._client is None:
            return self._fallback(selection, reason="no_client")
        if not prompt_items:
            return self._fallback(selection, reason="no_items")

        prompt = build_summary_prompt(prompt_items)
        try:
            text = self._client.generate_content(prompt, self._config.max_tokens)
        except LlmApiError as e:
            self._log.warning(
                "summary_llm_failed",
                error=str(e),
                status_code=e.status_code,
            )
            return self._fallback(selection, reason="api_error")
        except Exception as e:  # noqa: BLE001
            self._log.warning("summary_llm_unexpected_error", error=str(e), exc_info=True)
            return self._fallback(selection, reason="unexpected_error")

        if not isinstance(text, str) or not text.strip():
            return self._fallback(selection, reason="empty_response")

        self._log.info("summary_generated", source="llm", prompt_items=len(prompt_items))
        return SummaryResult(text=text.strip(), source=SummarySource.LLM)

    def _fallback(self, selection: SelectionResult, reason: str) -> SummaryResult:
        self._log.info("summary_fallback_used", reason=reason)
        return SummaryResult(
            text=fallback_summary(selection, self._config.fallback_source_count),
            source=SummarySource.FALLBACK,
        )
