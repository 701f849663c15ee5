"""Keyword matching for significance scoring.

Patterns are compiled once per scorer so that a ranking pass over a few
hundred items does not recompile the keyword table for every item.
"""

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass


# Keywords this short are prone to substring false positives
# (e.g. "ai" in "said", "gpt" in "egypt"), so they get \b guards.
_SHORT_KEYWORD_THRESHOLD = 4

_WORD_CHARS_ONLY = re.compile(r"^\w+$")


@dataclass(frozen=True)
class KeywordMatch:
    """A keyword found in an item's text.

    Attributes:
        keyword: The table keyword that matched.
        weight: Salience weight of the keyword.
    """

    keyword: str
    weight: float


def _compile_keyword_pattern(keyword: str) -> re.Pattern[str]:
    """Compile a keyword into a case-insensitive pattern.

    Short all-word-character keywords get word-boundary anchors. Longer
    keywords and keywords containing punctuation ("gpt-4") match as plain
    substrings.

    Args:
        keyword: Raw keyword from the weight table.

    Returns:
        Compiled regex pattern.
    """
    escaped = re.escape(keyword)
    if len(keyword) <= _SHORT_KEYWORD_THRESHOLD and _WORD_CHARS_ONLY.match(keyword):
        return re.compile(rf"\b{escaped}\b", re.IGNORECASE)
    return re.compile(escaped, re.IGNORECASE)


def _compile_phrase_pattern(phrase: str) -> re.Pattern[str]:
    return re.compile(re.escape(phrase), re.IGNORECASE)


class KeywordMatcher:
    """Matches text against a keyword -> weight table."""

    def __init__(self, keyword_weights: Mapping[str, float]) -> None:
        """Initialize the matcher.

        Args:
            keyword_weights: Keyword to salience weight mapping.
        """
        self._patterns: list[tuple[str, float, re.Pattern[str]]] = [
            (keyword, weight, _compile_keyword_pattern(keyword))
            for keyword, weight in keyword_weights.items()
        ]

    @property
    def keyword_count(self) -> int:
        """Number of keywords in the table."""
        return len(self._patterns)

    def match_text(self, text: str) -> list[KeywordMatch]:
        """Find every distinct table keyword present in the text.

        Args:
            text: Text to scan.

        Returns:
            Matches in table order, each keyword at most once.
        """
        return [
            KeywordMatch(keyword=keyword, weight=weight)
            for keyword, weight, pattern in self._patterns
            if pattern.search(text)
        ]


class PhraseCounter:
    """Counts how many phrases of a fixed list occur in a text."""

    def __init__(self, phrases: Iterable[str]) -> None:
        self._patterns = [_compile_phrase_pattern(p) for p in phrases if p]

    def count(self, text: str) -> int:
        """Number of distinct phrases present (substring, case-insensitive)."""
        return sum(1 for pattern in self._patterns if pattern.search(text))

    def any_in(self, text: str) -> bool:
        """Whether at least one phrase is present."""
        return any(pattern.search(text) for pattern in self._patterns)
