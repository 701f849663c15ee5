"""Digest assembly: enrichment, summary, top stories and the static fallback."""

from src.digest.assembler import (
    EVENING_BADGE,
    MORNING_BADGE,
    DigestAssembler,
    RunStats,
    digest_badge,
    source_counts,
    top_stories,
)
from src.digest.enrich import enrich_item, estimate_read_time, format_time_ago
from src.digest.fallback import FALLBACK_BADGE, FALLBACK_SUMMARY, build_fallback_digest
from src.digest.models import (
    Digest,
    DigestContent,
    DigestItem,
    DigestMetadata,
    SummarySource,
    TopStory,
)
from src.digest.summary import Summarizer, SummaryResult, fallback_summary


__all__ = [
    "EVENING_BADGE",
    "FALLBACK_BADGE",
    "FALLBACK_SUMMARY",
    "MORNING_BADGE",
    "Digest",
    "DigestAssembler",
    "DigestContent",
    "DigestItem",
    "DigestMetadata",
    "RunStats",
    "Summarizer",
    "SummaryResult",
    "SummarySource",
    "TopStory",
    "build_fallback_digest",
    "digest_badge",
    "enrich_item",
    "estimate_read_time",
    "fallback_summary",
    "format_time_ago",
    "source_counts",
    "top_stories",
]
