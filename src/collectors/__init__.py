"""Source collectors: retrieval strategies, parsers and the tiered runner."""

from src.collectors.base import BaseCollector, CollectorResult
from src.collectors.errors import (
    CollectorError,
    CollectorErrorClass,
    ErrorRecord,
    FetchStageError,
    ParseError,
    SchemaError,
)
from src.collectors.hackernews import HackerNewsTopCollector
from src.collectors.metrics import CollectorMetrics
from src.collectors.reddit import RedditHotCollector
from src.collectors.rss_atom import RssAtomCollector
from src.collectors.runner import (
    SourceRunResult,
    TieredSourceFetcher,
    TierFetchResult,
    build_collectors,
)
from src.collectors.state_machine import (
    SourceState,
    SourceStateMachine,
    SourceStateTransitionError,
)
from src.collectors.strategies import (
    AllOriginsStrategy,
    DirectStrategy,
    RetrievalStrategy,
    build_strategies,
)


__all__ = [
    "AllOriginsStrategy",
    "BaseCollector",
    "CollectorError",
    "CollectorErrorClass",
    "CollectorMetrics",
    "CollectorResult",
    "DirectStrategy",
    "ErrorRecord",
    "FetchStageError",
    "HackerNewsTopCollector",
    "ParseError",
    "RedditHotCollector",
    "RetrievalStrategy",
    "RssAtomCollector",
    "SchemaError",
    "SourceRunResult",
    "SourceState",
    "SourceStateMachine",
    "SourceStateTransitionError",
    "TierFetchResult",
    "TieredSourceFetcher",
    "build_collectors",
    "build_strategies",
]
