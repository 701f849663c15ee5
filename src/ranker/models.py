"""Data models for the ranker module."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from src.data_model import ContentItem, ContentType


class ImpactLevel(str, Enum):
    """Coarse label derived from the significance score."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


@dataclass(frozen=True)
class ScoreComponents:
    """Breakdown of an item's significance score.

    Each signal is on a 0-10 scale; ``total_score`` is the weighted sum,
    clamped and rounded to one decimal.

    Attributes:
        source_trust: Trust of the item's hostname.
        keyword_salience: Boosted sum of matched keyword weights.
        recency: Freshness bucket relative to the pipeline clock.
        engagement: Title hook heuristics.
        novelty: Novelty phrases minus routine terms.
        total_score: Final significance score.
        matched_keywords: Keywords that contributed to salience.
    """

    source_trust: float
    keyword_salience: float
    recency: float
    engagement: float
    novelty: float
    total_score: float
    matched_keywords: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "source_trust": self.source_trust,
            "keyword_salience": self.keyword_salience,
            "recency": self.recency,
            "engagement": self.engagement,
            "novelty": self.novelty,
            "total_score": self.total_score,
            "matched_keywords": list(self.matched_keywords),
        }


@dataclass(frozen=True)
class ScoredItem:
    """An item paired with its significance score.

    Placeholder items carry a fixed score and no component breakdown.

    Attributes:
        item: The scored content item.
        score: Significance score in [0, 10], one decimal.
        impact: Impact label derived from the score.
        components: Signal breakdown, None for placeholders.
        placeholder: Whether the item was synthesized for an empty category.
    """

    item: ContentItem
    score: float
    impact: ImpactLevel
    components: ScoreComponents | None = None
    placeholder: bool = False

    @property
    def content_type(self) -> ContentType:
        """Category the item belongs to."""
        return self.item.type


@dataclass(frozen=True)
class DroppedEntry:
    """Record of an item that did not make it into the digest.

    Attributes:
        title: Title of the dropped item.
        source_id: Source the item came from.
        score: Significance score at the time of the drop.
        reason: Machine-readable reason, e.g. ``category_full:blog``.
    """

    title: str
    source_id: str
    score: float
    reason: str

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "title": self.title,
            "source_id": self.source_id,
            "score": self.score,
            "reason": self.reason,
        }


@dataclass
class SelectionResult:
    """Outcome of category selection.

    Attributes:
        categories: Selected items per category, score descending.
        dropped: Items rejected because their category was full.
        placeholder_categories: Categories filled with a placeholder.
    """

    categories: dict[ContentType, list[ScoredItem]] = field(default_factory=dict)
    dropped: list[DroppedEntry] = field(default_factory=list)
    placeholder_categories: list[ContentType] = field(default_factory=list)

    def items_for(self, content_type: ContentType) -> list[ScoredItem]:
        """Selected items of one category."""
        return self.categories.get(content_type, [])

    @property
    def all_items(self) -> list[ScoredItem]:
        """Every selected item, blog then video then audio."""
        return [
            scored
            for content_type in (ContentType.BLOG, ContentType.VIDEO, ContentType.AUDIO)
            for scored in self.items_for(content_type)
        ]

    @property
    def real_items(self) -> list[ScoredItem]:
        """Selected items excluding placeholders."""
        return [scored for scored in self.all_items if not scored.placeholder]

    @property
    def selected_count(self) -> int:
        """Number of non-placeholder items kept."""
        return len(self.real_items)
