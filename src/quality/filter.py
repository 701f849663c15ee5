"""Quality filter applied to the merged item pool before scoring."""

import re
from dataclasses import dataclass, field
from enum import Enum

import structlog

from src.config.schemas.pipeline import QualityConfig
from src.data_model import ContentItem
from src.quality.similarity import title_similarity


logger = structlog.get_logger()

# ASCII letters, digits, whitespace and basic sentence punctuation
_TARGET_LANGUAGE = re.compile(r"^[a-zA-Z0-9\s\-.,!?'\"()]+$")


class DropReason(str, Enum):
    """Why an item was removed."""

    TITLE_TOO_SHORT = "title_too_short"
    DESCRIPTION_TOO_SHORT = "description_too_short"
    NON_TARGET_LANGUAGE = "non_target_language"
    DUPLICATE = "duplicate"


@dataclass(frozen=True)
class DroppedItem:
    """An item removed by the filter, with the reason."""

    item: ContentItem
    reason: DropReason
    duplicate_of: str | None = None


@dataclass
class QualityResult:
    """Surviving items in input order plus everything that was dropped."""

    items: list[ContentItem]
    dropped: list[DroppedItem] = field(default_factory=list)

    @property
    def input_count(self) -> int:
        """Number of items the filter received."""
        return len(self.items) + len(self.dropped)

    def dropped_by_reason(self) -> dict[str, int]:
        """Count of dropped items per reason."""
        counts: dict[str, int] = {}
        for dropped in self.dropped:
            counts[dropped.reason.value] = counts.get(dropped.reason.value, 0) + 1
        return counts


def is_target_language(title: str, check_chars: int = 50) -> bool:
    """Character-set check over the first ``check_chars`` characters of a title."""
    return bool(_TARGET_LANGUAGE.match(title[:check_chars]))


class QualityFilter:
    """Drop short, non-target-language and near-duplicate items.

    Length and language checks run first. Deduplication then keeps the
    first-encountered item of every group whose titles are more similar
    than ``similarity_threshold``, so no surviving pair exceeds it.
    """

    def __init__(self, config: QualityConfig, run_id: str = "") -> None:
        """Initialize the filter.

        Args:
            config: Length, language and similarity thresholds.
            run_id: Run identifier for logging.
        """
        self._config = config
        self._log = logger.bind(component="quality", run_id=run_id)

    def apply(self, items: list[ContentItem]) -> QualityResult:
        """Filter items.

        Args:
            items: Merged items from all sources, in join order.

        Returns:
            QualityResult with survivors in input order.
        """
        dropped: list[DroppedItem] = []
        eligible: list[ContentItem] = []
        for item in items:
            reason = self._check(item)
            if reason is None:
                eligible.append(item)
            else:
                dropped.append(DroppedItem(item=item, reason=reason))

        kept: list[ContentItem] = []
        for item in eligible:
            original = self._find_duplicate(item, kept)
            if original is None:
                kept.append(item)
            else:
                dropped.append(
                    DroppedItem(
                        item=item,
                        reason=DropReason.DUPLICATE,
                        duplicate_of=original.title,
                    )
                )

        result = QualityResult(items=kept, dropped=dropped)
        self._log.info(
            "quality_filter_complete",
            items_in=len(items),
            items_kept=len(kept),
            dropped=result.dropped_by_reason(),
        )
        return result

    def _check(self, item: ContentItem) -> DropReason | None:
        if len(item.title) < self._config.min_title_length:
            return DropReason.TITLE_TOO_SHORT
        if len(item.description) < self._config.min_description_length:
            return DropReason.DESCRIPTION_TOO_SHORT
        if not is_target_language(item.title, self._config.language_check_chars):
            return DropReason.NON_TARGET_LANGUAGE
        return None

    def _find_duplicate(
        self, item: ContentItem, kept: list[ContentItem]
    ) -> ContentItem | None:
        threshold = self._config.similarity_threshold
        for other in kept:
            if title_similarity(item.title, other.title) > threshold:
                return other
        return None
