"""Significance ranking and category selection.

Items are scored on five weighted signals, ranked by score with stable
tie-breaking, and distributed into capacity-bounded content categories.
Empty categories are filled with fixed placeholder items.
"""

from src.ranker.keyword_matcher import KeywordMatch, KeywordMatcher, PhraseCounter
from src.ranker.metrics import RankerMetrics
from src.ranker.models import (
    DroppedEntry,
    ImpactLevel,
    ScoreComponents,
    ScoredItem,
    SelectionResult,
)
from src.ranker.placeholders import (
    PLACEHOLDER_SOURCE_ID,
    pick_duration,
    placeholder_for,
)
from src.ranker.scorer import (
    SignificanceScorer,
    extract_domain,
    impact_level,
    round_half_up,
)
from src.ranker.selector import CategorySelector


__all__ = [
    "PLACEHOLDER_SOURCE_ID",
    "CategorySelector",
    "DroppedEntry",
    "ImpactLevel",
    "KeywordMatch",
    "KeywordMatcher",
    "PhraseCounter",
    "RankerMetrics",
    "ScoreComponents",
    "ScoredItem",
    "SelectionResult",
    "SignificanceScorer",
    "extract_domain",
    "impact_level",
    "pick_duration",
    "placeholder_for",
    "round_half_up",
]
