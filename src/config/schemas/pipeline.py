"""Pipeline tuning schema: tiers, quality, ranking, selection and output."""

import math
from typing import Annotated
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator, model_validator

from src.config.constants import (
    ALLORIGINS_URL_TEMPLATE,
    BROWSER_USER_AGENT,
    DIRECT_TIMEOUT_SECONDS,
    ENGAGEMENT_HOOKS,
    FLAGSHIP_MARKERS,
    KEYWORD_WEIGHTS,
    NOVELTY_PHRASES,
    PROXY_TIMEOUT_SECONDS,
    ROUTINE_TERMS,
    SOURCE_TRUST,
    SUMMARY_TIMEOUT_SECONDS,
)
from src.config.schemas.sources import SourcesConfig, default_sources
from src.data_model import ContentType, StrictBaseModel
from src.fetch.config import FetchConfig


class TierPolicy(StrictBaseModel):
    """Tier fallback thresholds and Tier 2 retrieval settings.

    Attributes:
        tier1_min_items: Tier 2 runs only when Tier 1 yields fewer items.
        tier2_sufficient_items: Tier 2 stops once it has produced this many.
        tier2_delay_ms: Pause between sequential Tier 2 requests.
        max_workers: Thread pool size for the parallel Tier 1 phase.
        proxy_url_template: Pass-through proxy URL with a ``{url}`` slot.
        proxy_timeout_seconds: Timeout for proxied requests.
        direct_timeout_seconds: Timeout for direct Tier 2 requests.
        direct_user_agent: Browser-like User-Agent for direct Tier 2 requests.
    """

    tier1_min_items: Annotated[int, Field(ge=0)] = 15
    tier2_sufficient_items: Annotated[int, Field(ge=1)] = 10
    tier2_delay_ms: Annotated[int, Field(ge=0, le=60000)] = 2000
    max_workers: Annotated[int, Field(ge=1, le=64)] = 8
    proxy_url_template: str = ALLORIGINS_URL_TEMPLATE
    proxy_timeout_seconds: Annotated[float, Field(ge=1.0, le=60.0)] = (
        PROXY_TIMEOUT_SECONDS
    )
    direct_timeout_seconds: Annotated[float, Field(ge=1.0, le=60.0)] = (
        DIRECT_TIMEOUT_SECONDS
    )
    direct_user_agent: Annotated[str, Field(min_length=1)] = BROWSER_USER_AGENT

    @field_validator("proxy_url_template")
    @classmethod
    def validate_proxy_template(cls, v: str) -> str:
        """The proxy template must carry a target URL slot."""
        if "{url}" not in v:
            msg = "proxy_url_template must contain '{url}'"
            raise ValueError(msg)
        return v


class QualityConfig(StrictBaseModel):
    """Thresholds applied before scoring."""

    min_title_length: Annotated[int, Field(ge=0)] = 10
    min_description_length: Annotated[int, Field(ge=0)] = 50
    similarity_threshold: Annotated[float, Field(ge=0.0, le=1.0)] = 0.8
    language_check_chars: Annotated[int, Field(ge=1)] = 50


class SignalWeights(StrictBaseModel):
    """Weights of the five significance signals; they must sum to 1.0."""

    source_trust: Annotated[float, Field(ge=0.0, le=1.0)] = 0.25
    keyword_salience: Annotated[float, Field(ge=0.0, le=1.0)] = 0.30
    recency: Annotated[float, Field(ge=0.0, le=1.0)] = 0.20
    engagement: Annotated[float, Field(ge=0.0, le=1.0)] = 0.15
    novelty: Annotated[float, Field(ge=0.0, le=1.0)] = 0.10

    @model_validator(mode="after")
    def validate_sum(self) -> "SignalWeights":
        """Ensure the weights form a convex combination."""
        total = (
            self.source_trust
            + self.keyword_salience
            + self.recency
            + self.engagement
            + self.novelty
        )
        if not math.isclose(total, 1.0, abs_tol=1e-6):
            msg = f"Signal weights must sum to 1.0, got {total:.4f}"
            raise ValueError(msg)
        return self


class RankingConfig(StrictBaseModel):
    """Significance scoring tables and parameters.

    Attributes:
        weights: Per-signal weights.
        keyword_weights: Keyword -> salience weight (4-10).
        source_trust: Hostname -> trust value (3-10).
        default_trust: Trust of hostnames missing from the table.
        flagship_markers: Hostname fragments that earn the flagship bonus.
        flagship_bonus: Trust bonus for flagship hosts, capped at 10.
        boost_min_matches: Distinct matches above which the first boost applies.
        boost_factor: First keyword boost multiplier.
        strong_boost_min_matches: Distinct matches above which the second boost applies.
        strong_boost_factor: Second keyword boost multiplier.
        recency_window_hours: Items older than this are dropped at parse time.
        undated_recency_score: Recency value for items without a timestamp.
        engagement_hooks: Title words that signal reader interest.
        novelty_phrases: Phrases that raise novelty by one point each.
        routine_terms: Terms that lower novelty by half a point each.
        high_impact_threshold: Minimum score for high impact.
        medium_impact_threshold: Minimum score for medium impact.
    """

    weights: SignalWeights = Field(default_factory=SignalWeights)
    keyword_weights: dict[str, float] = Field(
        default_factory=lambda: dict(KEYWORD_WEIGHTS)
    )
    source_trust: dict[str, float] = Field(default_factory=lambda: dict(SOURCE_TRUST))
    default_trust: Annotated[float, Field(ge=0.0, le=10.0)] = 3.0
    flagship_markers: list[str] = Field(default_factory=lambda: list(FLAGSHIP_MARKERS))
    flagship_bonus: Annotated[float, Field(ge=0.0, le=10.0)] = 2.0
    boost_min_matches: Annotated[int, Field(ge=0)] = 2
    boost_factor: Annotated[float, Field(ge=1.0, le=5.0)] = 1.2
    strong_boost_min_matches: Annotated[int, Field(ge=0)] = 4
    strong_boost_factor: Annotated[float, Field(ge=1.0, le=5.0)] = 1.4
    recency_window_hours: Annotated[int, Field(ge=1, le=24 * 30)] = 72
    undated_recency_score: Annotated[float, Field(ge=0.0, le=10.0)] = 5.0
    engagement_hooks: list[str] = Field(default_factory=lambda: list(ENGAGEMENT_HOOKS))
    novelty_phrases: list[str] = Field(default_factory=lambda: list(NOVELTY_PHRASES))
    routine_terms: list[str] = Field(default_factory=lambda: list(ROUTINE_TERMS))
    high_impact_threshold: Annotated[float, Field(ge=0.0, le=10.0)] = 7.0
    medium_impact_threshold: Annotated[float, Field(ge=0.0, le=10.0)] = 4.0

    @field_validator("keyword_weights", "source_trust")
    @classmethod
    def validate_table_values(cls, v: dict[str, float]) -> dict[str, float]:
        """Table keys are lowercase and values lie within [0, 10]."""
        for key, value in v.items():
            if not key.strip() or key != key.lower():
                msg = f"Table key '{key}' must be a non-empty lowercase string"
                raise ValueError(msg)
            if not 0.0 <= value <= 10.0:
                msg = f"Table value for '{key}' must be within [0, 10]"
                raise ValueError(msg)
        return v

    @model_validator(mode="after")
    def validate_thresholds(self) -> "RankingConfig":
        """Impact and boost thresholds must be ordered."""
        if self.medium_impact_threshold > self.high_impact_threshold:
            msg = "medium_impact_threshold must not exceed high_impact_threshold"
            raise ValueError(msg)
        if self.boost_min_matches > self.strong_boost_min_matches:
            msg = "boost_min_matches must not exceed strong_boost_min_matches"
            raise ValueError(msg)
        return self


class SelectionConfig(StrictBaseModel):
    """Category capacities and top-story count."""

    capacities: dict[ContentType, Annotated[int, Field(ge=0)]] = Field(
        default_factory=lambda: {
            ContentType.VIDEO: 4,
            ContentType.AUDIO: 4,
            ContentType.BLOG: 8,
        }
    )
    top_stories: Annotated[int, Field(ge=0, le=3)] = 3

    def capacity_for(self, content_type: ContentType) -> int:
        """Capacity of a category; unlisted categories hold nothing."""
        return self.capacities.get(content_type, 0)


class SummaryConfig(StrictBaseModel):
    """Summarization request settings."""

    enabled: bool = True
    endpoint: str = "https://api.anthropic.com/v1/messages"
    api_version: str = "2023-06-01"
    model: Annotated[str, Field(min_length=1)] = "claude-3-sonnet-20240229"
    max_tokens: Annotated[int, Field(ge=1, le=4096)] = 400
    timeout_seconds: Annotated[float, Field(ge=1.0, le=120.0)] = (
        SUMMARY_TIMEOUT_SECONDS
    )
    blog_items: Annotated[int, Field(ge=0)] = 3
    video_items: Annotated[int, Field(ge=0)] = 1
    audio_items: Annotated[int, Field(ge=0)] = 1
    fallback_source_count: Annotated[int, Field(ge=1)] = 3


class DigestConfig(StrictBaseModel):
    """Output stamping and enrichment settings."""

    timezone: Annotated[str, Field(min_length=1)] = "UTC"
    evening_hour: Annotated[int, Field(ge=0, le=23)] = 14
    words_per_minute: Annotated[int, Field(ge=1)] = 200
    seed: int = 0

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        """Reject unknown IANA zone names."""
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            msg = f"Unknown timezone: {v}"
            raise ValueError(msg) from e
        return v


class PipelineConfig(StrictBaseModel):
    """Root configuration for a digest run."""

    version: Annotated[str, Field(pattern=r"^\d+\.\d+$")] = "1.0"
    sources: SourcesConfig = Field(default_factory=default_sources)
    fetch: FetchConfig = Field(default_factory=FetchConfig)
    tiers: TierPolicy = Field(default_factory=TierPolicy)
    quality: QualityConfig = Field(default_factory=QualityConfig)
    ranking: RankingConfig = Field(default_factory=RankingConfig)
    selection: SelectionConfig = Field(default_factory=SelectionConfig)
    summary: SummaryConfig = Field(default_factory=SummaryConfig)
    digest: DigestConfig = Field(default_factory=DigestConfig)
