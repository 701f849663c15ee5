"""Output models for the digest envelope.

Field names are snake_case in Python and camelCase on the wire; use
``Digest.to_json_dict()`` to get the serialized form.
"""

from datetime import datetime
from enum import Enum
from typing import Annotated, Any

from pydantic import Field

from src.data_model import ContentType, DateConfidence, StrictBaseModel
from src.ranker.models import ImpactLevel


class SummarySource(str, Enum):
    """Where the digest summary text came from."""

    LLM = "llm"
    FALLBACK = "fallback"


class DigestItem(StrictBaseModel):
    """An enriched, display-ready item."""

    title: str
    description: str
    url: str
    source: str
    type: ContentType
    significance_score: Annotated[float, Field(ge=0.0, le=10.0)] = Field(
        serialization_alias="significanceScore"
    )
    impact: ImpactLevel
    time: str
    read_time: str | None = Field(default=None, serialization_alias="readTime")
    duration: str | None = None
    published_at: datetime | None = Field(
        default=None, serialization_alias="publishedAt"
    )
    date_confidence: DateConfidence | None = Field(
        default=None, serialization_alias="dateConfidence"
    )
    engagement: int | None = None
    placeholder: bool = False


class TopStory(StrictBaseModel):
    """Compact view of one of the highest-scoring items."""

    title: str
    source: str
    significance_score: float = Field(serialization_alias="significanceScore")


class DigestContent(StrictBaseModel):
    """Items per category, score descending."""

    blog: list[DigestItem] = Field(default_factory=list)
    audio: list[DigestItem] = Field(default_factory=list)
    video: list[DigestItem] = Field(default_factory=list)

    def all_items(self) -> list[DigestItem]:
        """Every item across categories, blog then video then audio."""
        return [*self.blog, *self.video, *self.audio]


class DigestMetadata(StrictBaseModel):
    """Run statistics attached to the digest.

    Attributes:
        total_items: Items fetched before filtering.
        filtered_items: Items surviving the quality filter.
        ranked_items: Real (non-placeholder) items placed into categories.
        sources: Item count per source name over all fetched items.
        tier1_items: Items produced by Tier 1 sources.
        tier2_items: Items produced by Tier 2 sources.
        failed_sources: IDs of sources that failed.
        summary_source: Whether the summary came from the LLM or the fallback.
        generated_at: Generation time.
        fallback: True only for the static fallback digest.
    """

    total_items: int = Field(default=0, serialization_alias="totalItems")
    filtered_items: int = Field(default=0, serialization_alias="filteredItems")
    ranked_items: int = Field(default=0, serialization_alias="rankedItems")
    sources: dict[str, int] = Field(default_factory=dict)
    tier1_items: int = Field(default=0, serialization_alias="tier1Items")
    tier2_items: int = Field(default=0, serialization_alias="tier2Items")
    failed_sources: list[str] = Field(
        default_factory=list, serialization_alias="failedSources"
    )
    summary_source: SummarySource = Field(
        default=SummarySource.FALLBACK, serialization_alias="summarySource"
    )
    generated_at: datetime = Field(serialization_alias="generatedAt")
    fallback: bool = False


class Digest(StrictBaseModel):
    """The digest envelope returned by the pipeline."""

    summary: Annotated[str, Field(min_length=1)]
    content: DigestContent
    top_stories: list[TopStory] = Field(
        default_factory=list, serialization_alias="topStories"
    )
    metadata: DigestMetadata
    timestamp: datetime
    badge: str

    def to_json_dict(self) -> dict[str, Any]:
        """Serialize with camelCase keys, omitting absent optional fields."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
