"""Text normalization helpers shared by all parsers."""

import calendar
import re
import time
from collections.abc import Iterable, Mapping
from datetime import UTC, datetime, timedelta
from urllib.parse import urlparse

from bs4 import BeautifulSoup

from src.data_model import ELLIPSIS, MAX_DESCRIPTION_LENGTH, UNKNOWN_SOURCE


_ENTITY_PATTERN = re.compile(r"&#?[A-Za-z0-9]+;")


def clean_text(text: str | None) -> str:
    """Strip markup, replace HTML entities with spaces and collapse whitespace.

    Args:
        text: Raw text that may contain tags and entities.

    Returns:
        Plain single-line text.
    """
    if not text:
        return ""
    text = _ENTITY_PATTERN.sub(" ", text)
    if "<" in text:
        text = BeautifulSoup(text, "lxml").get_text(" ")
    return " ".join(text.split())


def truncate_description(text: str, limit: int = MAX_DESCRIPTION_LENGTH) -> str:
    """Bound a description to ``limit`` characters, marking the cut with '...'."""
    if len(text) <= limit:
        return text
    return text[: limit - len(ELLIPSIS)].rstrip() + ELLIPSIS


def hostname_of(url: str) -> str | None:
    """Lowercase hostname of a URL without a leading ``www.``."""
    try:
        hostname = urlparse(url).hostname
    except ValueError:
        return None
    if not hostname:
        return None
    return hostname.removeprefix("www.")


def resolve_source_name(url: str, display_names: Mapping[str, str]) -> str:
    """Map a URL to a display name, falling back to its bare hostname."""
    hostname = hostname_of(url)
    if hostname is None:
        return UNKNOWN_SOURCE
    return display_names.get(hostname, hostname)


def is_ai_related(title: str, vocabulary: Iterable[str]) -> bool:
    """Case-insensitive substring match of a title against the AI vocabulary."""
    lowered = title.lower()
    return any(term in lowered for term in vocabulary)


def is_within_window(
    published_at: datetime | None, now: datetime, window_hours: int
) -> bool:
    """Whether an item falls inside the recency window ending at ``now``.

    Undated items are kept; their recency is handled at scoring time.
    """
    if published_at is None:
        return True
    return published_at > now - timedelta(hours=window_hours)


def struct_time_to_datetime(value: time.struct_time) -> datetime:
    """Convert a UTC struct_time (as produced by feedparser) to an aware datetime."""
    return datetime.fromtimestamp(calendar.timegm(value), tz=UTC)


def epoch_to_datetime(value: int | float) -> datetime:
    """Convert Unix epoch seconds to an aware UTC datetime."""
    return datetime.fromtimestamp(value, tz=UTC)
