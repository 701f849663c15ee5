"""Prompt template for the daily digest summary."""

from collections.abc import Iterable

from src.ranker.models import ScoredItem


SUMMARY_INSTRUCTION = (
    "Create a compelling 3-4 sentence summary of today's most significant AI "
    "developments. Focus on breakthrough announcements and industry-changing "
    "news. Be specific about companies and technologies:"
)


def format_item_line(scored: ScoredItem) -> str:
    """Format one item as ``[HIGH IMPACT] title: description``."""
    impact = scored.impact.value.upper()
    return f"[{impact} IMPACT] {scored.item.title}: {scored.item.description}"


def build_summary_prompt(items: Iterable[ScoredItem]) -> str:
    """Build the user prompt listing the top items, one paragraph each.

    Args:
        items: Items in the order they should be presented.

    Returns:
        Prompt text.
    """
    body = "\n\n".join(format_item_line(scored) for scored in items)
    return f"{SUMMARY_INSTRUCTION}\n\n{body}"
