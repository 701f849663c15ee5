"""Quality filtering: length, language and near-duplicate checks."""

from src.quality.filter import (
    DropReason,
    DroppedItem,
    QualityFilter,
    QualityResult,
    is_target_language,
)
from src.quality.similarity import levenshtein, title_similarity


__all__ = [
    "DropReason",
    "DroppedItem",
    "QualityFilter",
    "QualityResult",
    "is_target_language",
    "levenshtein",
    "title_similarity",
]
