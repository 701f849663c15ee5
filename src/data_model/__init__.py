"""Core data models shared across the pipeline."""

from src.data_model.base import StrictBaseModel
from src.data_model.items import (
    ELLIPSIS,
    MAX_DESCRIPTION_LENGTH,
    PLACEHOLDER_URL,
    UNKNOWN_SOURCE,
    ContentItem,
    ContentType,
    DateConfidence,
)


__all__ = [
    "ELLIPSIS",
    "MAX_DESCRIPTION_LENGTH",
    "PLACEHOLDER_URL",
    "UNKNOWN_SOURCE",
    "ContentItem",
    "ContentType",
    "DateConfidence",
    "StrictBaseModel",
]
