"""Fixed placeholder items for categories left empty after selection."""

import random

from src.config.constants import AUDIO_DURATIONS, VIDEO_DURATIONS
from src.data_model import PLACEHOLDER_URL, ContentItem, ContentType
from src.ranker.models import ImpactLevel, ScoredItem


PLACEHOLDER_SOURCE_ID = "placeholder"

_DURATIONS: dict[ContentType, tuple[str, ...]] = {
    ContentType.VIDEO: VIDEO_DURATIONS,
    ContentType.AUDIO: AUDIO_DURATIONS,
}

# content type -> (title, description, source, score, impact)
_PLACEHOLDERS: dict[ContentType, tuple[str, str, str, float, ImpactLevel]] = {
    ContentType.AUDIO: (
        "AI Weekly: Industry Roundup",
        "Expert analysis of this week's most significant AI developments "
        "and their industry implications.",
        "AI Weekly Podcast",
        6.5,
        ImpactLevel.MEDIUM,
    ),
    ContentType.VIDEO: (
        "AI Breakthrough Demonstrations",
        "Latest AI model capabilities showcased through real-world "
        "applications and use cases.",
        "AI Demos Channel",
        7.8,
        ImpactLevel.HIGH,
    ),
    ContentType.BLOG: (
        "AI Industry Continues Rapid Development",
        "The artificial intelligence sector maintains its momentum with "
        "ongoing research breakthroughs and commercial applications.",
        "AI News",
        5.0,
        ImpactLevel.MEDIUM,
    ),
}


def pick_duration(content_type: ContentType, rng: random.Random) -> str | None:
    """Draw a display duration for an audio or video item; None for blog posts."""
    choices = _DURATIONS.get(content_type)
    if not choices:
        return None
    return rng.choice(choices)


def placeholder_for(content_type: ContentType, rng: random.Random) -> ScoredItem:
    """Build the placeholder item for a category.

    Args:
        content_type: Category to fill.
        rng: Seeded generator used for the duration.

    Returns:
        ScoredItem flagged as a placeholder.
    """
    title, description, source, score, impact = _PLACEHOLDERS[content_type]
    item = ContentItem(
        title=title,
        description=description,
        url=PLACEHOLDER_URL,
        source=source,
        source_id=PLACEHOLDER_SOURCE_ID,
        type=content_type,
        duration=pick_duration(content_type, rng),
    )
    return ScoredItem(item=item, score=score, impact=impact, placeholder=True)
