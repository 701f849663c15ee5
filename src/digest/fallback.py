"""Static digest returned when the pipeline fails as a whole."""

from datetime import datetime

from src.data_model import PLACEHOLDER_URL, ContentType
from src.digest.models import (
    Digest,
    DigestContent,
    DigestItem,
    DigestMetadata,
    SummarySource,
    TopStory,
)
from src.ranker.models import ImpactLevel


FALLBACK_BADGE = "Fallback Digest"
FALLBACK_SUMMARY = (
    "AI development continues with significant progress across multiple "
    "sectors, including language models, computer vision, and robotics "
    "applications."
)


def build_fallback_digest(now: datetime) -> Digest:
    """Fixed digest with one placeholder blog item and empty audio/video.

    Builds only from constants so it cannot fail for the reasons the
    pipeline did.

    Args:
        now: Generation time.

    Returns:
        Digest flagged with ``metadata.fallback``.
    """
    item = DigestItem(
        title="AI Industry Continues Rapid Development",
        description=(
            "The artificial intelligence sector maintains its momentum with "
            "ongoing research breakthroughs and commercial applications."
        ),
        url=PLACEHOLDER_URL,
        source="AI News",
        type=ContentType.BLOG,
        significance_score=5.0,
        impact=ImpactLevel.MEDIUM,
        time="1 hour ago",
        read_time="3 min read",
        placeholder=True,
    )
    return Digest(
        summary=FALLBACK_SUMMARY,
        content=DigestContent(blog=[item], audio=[], video=[]),
        top_stories=[
            TopStory(
                title=item.title,
                source=item.source,
                significance_score=item.significance_score,
            )
        ],
        metadata=DigestMetadata(
            summary_source=SummarySource.FALLBACK,
            generated_at=now,
            fallback=True,
        ),
        timestamp=now,
        badge=FALLBACK_BADGE,
    )
