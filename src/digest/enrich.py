"""Turn scored items into display-ready digest items."""

import math
import random
from datetime import datetime

from src.data_model import ContentType
from src.digest.models import DigestItem
from src.ranker.models import ScoredItem
from src.ranker.placeholders import pick_duration


SECONDS_PER_HOUR = 3600
HOURS_PER_DAY = 24


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}{'s' if count != 1 else ''} ago"


def format_time_ago(published_at: datetime | None, now: datetime) -> str:
    """Relative age such as ``Just now``, ``3 hours ago`` or ``1 day ago``.

    Undated and future-dated items read as ``Just now``.
    """
    if published_at is None:
        return "Just now"
    hours = int((now - published_at).total_seconds() // SECONDS_PER_HOUR)
    if hours < 1:
        return "Just now"
    if hours < HOURS_PER_DAY:
        return _plural(hours, "hour")
    return _plural(hours // HOURS_PER_DAY, "day")


def estimate_read_time(text: str, words_per_minute: int = 200) -> str:
    """Reading time as ``N min read``, rounded up, at least one minute."""
    words = len(text.split())
    minutes = max(1, math.ceil(words / words_per_minute))
    return f"{minutes} min read"


def enrich_item(
    scored: ScoredItem,
    now: datetime,
    rng: random.Random,
    words_per_minute: int = 200,
) -> DigestItem:
    """Build the digest view of a scored item.

    Blog posts get a read time; audio and video keep their own duration or
    draw one from ``rng``. Title, description and url pass through unchanged.

    Args:
        scored: Scored item.
        now: Generation time used for the relative age.
        rng: Seeded generator for missing durations.
        words_per_minute: Reading speed for read time.

    Returns:
        DigestItem.
    """
    item = scored.item
    read_time = None
    duration = None
    if item.type == ContentType.BLOG:
        read_time = estimate_read_time(item.description, words_per_minute)
    else:
        duration = item.duration or pick_duration(item.type, rng)

    return DigestItem(
        title=item.title,
        description=item.description,
        url=item.url,
        source=item.source,
        type=item.type,
        significance_score=scored.score,
        impact=scored.impact,
        time=format_time_ago(item.published_at, now),
        read_time=read_time,
        duration=duration,
        published_at=item.published_at,
        date_confidence=None if scored.placeholder else item.date_confidence,
        engagement=item.engagement,
        placeholder=scored.placeholder,
    )
