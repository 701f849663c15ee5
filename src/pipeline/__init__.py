"""Digest pipeline orchestration."""

from src.pipeline.aggregator import (
    ContentAggregator,
    apply_settings,
    proxy_template_from,
    run_digest,
)


__all__ = [
    "ContentAggregator",
    "apply_settings",
    "proxy_template_from",
    "run_digest",
]
