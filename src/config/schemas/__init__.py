"""Configuration schema definitions."""

from src.config.schemas.base import FetchStrategy, ParserKind, SourceTier
from src.config.schemas.pipeline import (
    DigestConfig,
    PipelineConfig,
    QualityConfig,
    RankingConfig,
    SelectionConfig,
    SignalWeights,
    SummaryConfig,
    TierPolicy,
)
from src.config.schemas.sources import SourceConfig, SourcesConfig, default_sources


__all__ = [
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
]
