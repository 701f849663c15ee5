"""Base schema types for configuration."""

from enum import Enum


class SourceTier(int, Enum):
    """Source tier classification.

    Tier 1: High-reliability sources fetched in parallel on every run
    Tier 2: Proxy-dependent sources fetched only when Tier 1 under-delivers
    """

    PRIMARY = 1
    SECONDARY = 2


class ParserKind(str, Enum):
    """Parser used to normalize a source's payload into content items."""

    RSS_ATOM = "rss_atom"
    REDDIT_HOT = "reddit_hot"
    HACKERNEWS_TOP = "hackernews_top"


class FetchStrategy(str, Enum):
    """Retrieval path for a source document.

    - ALLORIGINS: fetch through the allorigins pass-through proxy
    - DIRECT: fetch the endpoint directly
    """

    ALLORIGINS = "allorigins"
    DIRECT = "direct"
