"""Source descriptor schema and the built-in source list."""

from typing import Annotated

from pydantic import Field, field_validator, model_validator

from src.config.constants import (
    API_TIMEOUT_SECONDS,
    API_USER_AGENT,
    HACKERNEWS_ITEM_URL_TEMPLATE,
    RSS_ACCEPT,
    RSS_TIMEOUT_SECONDS,
    RSS_USER_AGENT,
    VALID_URL_SCHEMES,
)
from src.config.schemas.base import FetchStrategy, ParserKind, SourceTier
from src.data_model import ContentType, StrictBaseModel


class SourceConfig(StrictBaseModel):
    """Configuration for a single source endpoint.

    Attributes:
        id: Unique identifier for the source.
        name: Human-readable name.
        url: Endpoint URL.
        tier: Source tier.
        method: Parser that normalizes the payload.
        content_type: Default category for items from this source.
        headers: Request headers, typically an identifying User-Agent.
        timeout_seconds: Per-attempt timeout; falls back to the fetch default.
        max_items: Maximum items (or story IDs) taken per run.
        strategies: Ordered retrieval strategies, first success wins.
        detail_url_template: Per-item endpoint for ID-only listings.
        detail_delay_ms: Pause between per-item requests.
        enabled: Whether the source is fetched.
    """

    id: Annotated[str, Field(min_length=1, max_length=100, pattern=r"^[a-z0-9_-]+$")]
    name: Annotated[str, Field(min_length=1, max_length=200)]
    url: Annotated[str, Field(min_length=1)]
    tier: SourceTier = SourceTier.PRIMARY
    method: ParserKind = ParserKind.RSS_ATOM
    content_type: ContentType = ContentType.BLOG
    headers: dict[str, str] = Field(default_factory=dict)
    timeout_seconds: Annotated[float, Field(ge=1.0, le=60.0)] | None = None
    max_items: Annotated[int, Field(ge=1, le=500)] = 50
    strategies: Annotated[list[FetchStrategy], Field(min_length=1)] = Field(
        default_factory=lambda: [FetchStrategy.DIRECT]
    )
    detail_url_template: str | None = None
    detail_delay_ms: Annotated[int, Field(ge=0, le=10000)] = 100
    enabled: bool = True

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Validate URL starts with http:// or https://."""
        if not v.startswith(VALID_URL_SCHEMES):
            msg = "URL must start with http:// or https://"
            raise ValueError(msg)
        return v

    @field_validator("headers")
    @classmethod
    def validate_no_auth_headers(cls, v: dict[str, str]) -> dict[str, str]:
        """Ensure no credentials are stored in config."""
        forbidden = {"authorization", "cookie", "x-api-key"}
        for key in v:
            if key.lower() in forbidden:
                msg = f"Header '{key}' must not be stored in config; use environment variables"
                raise ValueError(msg)
        return v

    @model_validator(mode="after")
    def validate_detail_template(self) -> "SourceConfig":
        """ID-only listings need a per-item endpoint."""
        if self.method == ParserKind.HACKERNEWS_TOP:
            template = self.detail_url_template
            if not template or "{id}" not in template:
                msg = "hackernews_top sources require a detail_url_template containing '{id}'"
                raise ValueError(msg)
        return self


class SourcesConfig(StrictBaseModel):
    """All configured sources, in declaration order.

    Declaration order is significant: merged results follow it.
    """

    sources: list[SourceConfig] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_unique_ids(self) -> "SourcesConfig":
        """Ensure all source IDs are unique."""
        seen: set[str] = set()
        duplicates = []
        for source in self.sources:
            if source.id in seen:
                duplicates.append(source.id)
            seen.add(source.id)
        if duplicates:
            msg = f"Duplicate source IDs: {sorted(set(duplicates))}"
            raise ValueError(msg)
        return self

    def enabled_for_tier(self, tier: SourceTier) -> list[SourceConfig]:
        """Enabled sources of a tier, in declaration order."""
        return [s for s in self.sources if s.enabled and s.tier == tier]


_RSS_HEADERS = {"User-Agent": RSS_USER_AGENT, "Accept": RSS_ACCEPT}
_API_HEADERS = {"User-Agent": API_USER_AGENT}

_PRIMARY_FEEDS = [
    ("openai-blog", "OpenAI Blog", "https://openai.com/blog/rss.xml"),
    ("google-ai-blog", "Google AI Blog", "https://ai.googleblog.com/feeds/posts/default"),
    ("anthropic-blog", "Anthropic Blog", "https://blog.anthropic.com/rss.xml"),
    ("deepmind-blog", "DeepMind Blog", "https://www.deepmind.com/blog/rss.xml"),
    ("microsoft-ai-blog", "Microsoft AI Blog", "https://blogs.microsoft.com/ai/feed/"),
    ("google-research", "Google Research", "https://research.google/blog/rss/"),
    (
        "meta-ai-research",
        "Meta AI Research",
        "https://engineering.fb.com/category/ai-research/feed/",
    ),
    ("arxiv-cs-ai", "arXiv cs.AI", "https://arxiv.org/rss/cs.AI"),
    ("arxiv-cs-lg", "arXiv cs.LG", "https://arxiv.org/rss/cs.LG"),
]

_SECONDARY_FEEDS = [
    (
        "techcrunch-ai",
        "TechCrunch AI",
        "https://techcrunch.com/category/artificial-intelligence/feed/",
    ),
    ("venturebeat-ai", "VentureBeat AI", "https://venturebeat.com/ai/feed/"),
]


def default_sources() -> SourcesConfig:
    """Build the default Tier 1 and Tier 2 source list.

    Returns:
        SourcesConfig with RSS feeds, the Reddit and Hacker News APIs,
        and the proxy-dependent Tier 2 feeds.
    """
    sources = [
        SourceConfig(
            id=source_id,
            name=name,
            url=url,
            tier=SourceTier.PRIMARY,
            method=ParserKind.RSS_ATOM,
            headers=_RSS_HEADERS,
            timeout_seconds=RSS_TIMEOUT_SECONDS,
        )
        for source_id, name, url in _PRIMARY_FEEDS
    ]
    sources.append(
        SourceConfig(
            id="reddit-machinelearning",
            name="Reddit AI",
            url="https://www.reddit.com/r/MachineLearning/hot.json?limit=15",
            tier=SourceTier.PRIMARY,
            method=ParserKind.REDDIT_HOT,
            headers=_API_HEADERS,
            timeout_seconds=API_TIMEOUT_SECONDS,
        )
    )
    sources.append(
        SourceConfig(
            id="hacker-news",
            name="Hacker News",
            url="https://hacker-news.firebaseio.com/v0/topstories.json",
            tier=SourceTier.PRIMARY,
            method=ParserKind.HACKERNEWS_TOP,
            headers=_API_HEADERS,
            timeout_seconds=API_TIMEOUT_SECONDS,
            max_items=30,
            detail_url_template=HACKERNEWS_ITEM_URL_TEMPLATE,
            detail_delay_ms=100,
        )
    )
    sources.extend(
        SourceConfig(
            id=source_id,
            name=name,
            url=url,
            tier=SourceTier.SECONDARY,
            method=ParserKind.RSS_ATOM,
            strategies=[FetchStrategy.ALLORIGINS, FetchStrategy.DIRECT],
        )
        for source_id, name, url in _SECONDARY_FEEDS
    )
    return SourcesConfig(sources=sources)
