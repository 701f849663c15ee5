"""Configuration loading and validation module."""

from src.config.loader import ConfigValidationError, load_pipeline_config
from src.config.schemas import (
    DigestConfig,
    FetchStrategy,
    ParserKind,
    PipelineConfig,
    QualityConfig,
    RankingConfig,
    SelectionConfig,
    SignalWeights,
    SourceConfig,
    SourcesConfig,
    SourceTier,
    SummaryConfig,
    TierPolicy,
    default_sources,
)


__all__ = [
    "ConfigValidationError",
    "DigestConfig",
    "FetchStrategy",
    "ParserKind",
    "PipelineConfig",
    "QualityConfig",
    "RankingConfig",
    "SelectionConfig",
    "SignalWeights",
    "SourceConfig",
    "SourceTier",
    "SourcesConfig",
    "SummaryConfig",
    "TierPolicy",
    "default_sources",
    "load_pipeline_config",
]
