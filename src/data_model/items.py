"""Normalized content item produced by every collector."""

from datetime import datetime
from enum import Enum
from typing import Annotated

from pydantic import Field, field_validator

from src.data_model.base import StrictBaseModel


MAX_DESCRIPTION_LENGTH = 300
ELLIPSIS = "..."
PLACEHOLDER_URL = "#"
UNKNOWN_SOURCE = "Unknown Source"


class ContentType(str, Enum):
    """Digest category an item belongs to."""

    BLOG = "blog"
    AUDIO = "audio"
    VIDEO = "video"


class DateConfidence(str, Enum):
    """How trustworthy an item's publish timestamp is.

    - HIGH: the document carried a publish date
    - MEDIUM: only an update date was available
    - LOW: no date at all; the item is treated as undated
    """

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class ContentItem(StrictBaseModel):
    """A single news-like item, immutable once parsed."""

    title: Annotated[str, Field(min_length=1)]
    description: Annotated[str, Field(max_length=MAX_DESCRIPTION_LENGTH)] = ""
    url: Annotated[str, Field(min_length=1)] = PLACEHOLDER_URL
    source: Annotated[str, Field(min_length=1)] = UNKNOWN_SOURCE
    source_id: Annotated[str, Field(min_length=1)]
    source_url: str = ""
    published_at: datetime | None = None
    date_confidence: DateConfidence = DateConfidence.LOW
    type: ContentType = ContentType.BLOG
    engagement: Annotated[int, Field(ge=0)] | None = None
    duration: str | None = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        """Reject whitespace-only titles."""
        if not v.strip():
            msg = "title must not be blank"
            raise ValueError(msg)
        return v

    @field_validator("published_at")
    @classmethod
    def validate_timezone(cls, v: datetime | None) -> datetime | None:
        """Require timezone-aware timestamps."""
        if v is not None and v.tzinfo is None:
            msg = "published_at must be timezone-aware"
            raise ValueError(msg)
        return v

    @property
    def is_dated(self) -> bool:
        """Whether the item carries a publish or update timestamp."""
        return self.published_at is not None
