"""Significance scoring for content items.

Five signals on a 0-10 scale are combined with configurable weights:

    score = trust * w_trust + salience * w_salience + recency * w_recency
          + engagement * w_engagement + novelty * w_novelty

The result is clamped to [0, 10] and rounded half-up to one decimal.
Scoring is a pure function of the item and the pipeline clock.
"""

import time
from datetime import UTC, datetime
from decimal import ROUND_HALF_UP, Decimal
from urllib.parse import urlparse

import structlog

from src.config.schemas.pipeline import RankingConfig
from src.data_model import PLACEHOLDER_URL, ContentItem
from src.ranker.keyword_matcher import KeywordMatcher, PhraseCounter
from src.ranker.metrics import RankerMetrics
from src.ranker.models import ImpactLevel, ScoreComponents, ScoredItem


logger = structlog.get_logger()

MAX_SCORE = 10.0
MIN_SCORE = 0.0
UNKNOWN_DOMAIN = "unknown"

# (upper bound in hours, score) checked in order
RECENCY_BUCKETS: tuple[tuple[float, float], ...] = (
    (1, 10.0),
    (3, 9.0),
    (6, 8.0),
    (12, 7.0),
    (24, 6.0),
    (48, 4.0),
)
STALE_RECENCY_SCORE = 2.0

ENGAGEMENT_BASE = 5.0
ENGAGEMENT_HOOK_BONUS = 2.0
ENGAGEMENT_QUESTION_BONUS = 1.0
ENGAGEMENT_NUMBER_BONUS = 1.0
ENGAGEMENT_QUESTION_MARKERS = ("?", "how")

NOVELTY_BASE = 5.0
NOVELTY_PHRASE_BONUS = 1.0
NOVELTY_ROUTINE_PENALTY = 0.5
NOVELTY_MIN = 1.0


def round_half_up(value: float, places: int = 1) -> float:
    """Round with ties away from zero (2.25 -> 2.3), unlike built-in round()."""
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def clamp(value: float, low: float = MIN_SCORE, high: float = MAX_SCORE) -> float:
    """Bound a value to [low, high]."""
    return max(low, min(high, value))


def extract_domain(url: str) -> str:
    """Hostname of a URL without ``www.``; ``unknown`` for empty or placeholder URLs.

    Scheme-less URLs are treated as https.
    """
    if not url or url == PLACEHOLDER_URL:
        return UNKNOWN_DOMAIN
    if not url.startswith("http"):
        url = "https://" + url
    try:
        hostname = urlparse(url).hostname
    except ValueError:
        return UNKNOWN_DOMAIN
    if not hostname:
        return UNKNOWN_DOMAIN
    return hostname.lower().removeprefix("www.")


def impact_level(
    score: float, high_threshold: float = 7.0, medium_threshold: float = 4.0
) -> ImpactLevel:
    """Map a score to its impact label."""
    if score >= high_threshold:
        return ImpactLevel.HIGH
    if score >= medium_threshold:
        return ImpactLevel.MEDIUM
    return ImpactLevel.LOW


class SignificanceScorer:
    """Computes significance scores and ranks items."""

    def __init__(
        self,
        config: RankingConfig,
        now: datetime | None = None,
        run_id: str = "",
    ) -> None:
        """Initialize the scorer.

        Args:
            config: Ranking tables and weights.
            now: Pipeline clock; recency is measured against it.
            run_id: Run identifier for logging.
        """
        self._config = config
        self._now = now or datetime.now(UTC)
        self._keyword_matcher = KeywordMatcher(config.keyword_weights)
        self._hooks = PhraseCounter(config.engagement_hooks)
        self._question_markers = PhraseCounter(ENGAGEMENT_QUESTION_MARKERS)
        self._novelty = PhraseCounter(config.novelty_phrases)
        self._routine = PhraseCounter(config.routine_terms)
        self._log = logger.bind(
            component="ranker",
            subcomponent="scorer",
            run_id=run_id,
        )

    @property
    def now(self) -> datetime:
        """Clock used for recency."""
        return self._now

    def impact_level(self, score: float) -> ImpactLevel:
        """Impact label using the configured thresholds."""
        return impact_level(
            score,
            high_threshold=self._config.high_impact_threshold,
            medium_threshold=self._config.medium_impact_threshold,
        )

    def score(self, item: ContentItem) -> ScoredItem:
        """Score a single item.

        Args:
            item: Item to score.

        Returns:
            ScoredItem with the component breakdown.
        """
        weights = self._config.weights
        text = f"{item.title} {item.description}".lower()

        trust = self._compute_source_trust(item)
        salience, matched = self._compute_keyword_salience(text)
        recency = self._compute_recency(item)
        engagement = self._compute_engagement(item.title.lower())
        novelty = self._compute_novelty(text)

        weighted = (
            trust * weights.source_trust
            + salience * weights.keyword_salience
            + recency * weights.recency
            + engagement * weights.engagement
            + novelty * weights.novelty
        )
        total = round_half_up(clamp(weighted))

        components = ScoreComponents(
            source_trust=trust,
            keyword_salience=salience,
            recency=recency,
            engagement=engagement,
            novelty=novelty,
            total_score=total,
            matched_keywords=matched,
        )
        return ScoredItem(
            item=item,
            score=total,
            impact=self.impact_level(total),
            components=components,
        )

    def score_items(self, items: list[ContentItem]) -> list[ScoredItem]:
        """Score items, preserving input order."""
        start = time.perf_counter()
        scored = [self.score(item) for item in items]
        duration_ms = (time.perf_counter() - start) * 1000

        metrics = RankerMetrics.get_instance()
        metrics.record_scores([s.score for s in scored])
        metrics.record_scoring_duration(duration_ms)

        self._log.info(
            "scoring_complete",
            items_scored=len(scored),
            min_score=min((s.score for s in scored), default=0.0),
            max_score=max((s.score for s in scored), default=0.0),
            duration_ms=round(duration_ms, 2),
        )

        return scored

    def rank(self, items: list[ContentItem]) -> list[ScoredItem]:
        """Score items and sort them by score descending.

        The sort is stable, so equal scores keep their encounter order.
        """
        return sorted(self.score_items(items), key=lambda s: s.score, reverse=True)

    def _compute_source_trust(self, item: ContentItem) -> float:
        """Trust of the item's hostname.

        Items without a usable URL are judged by their source name instead.
        Subdomains inherit the trust of their registered parent
        (news.mit.edu -> mit.edu). Flagship lab hostnames get a bonus.
        """
        domain = extract_domain(item.url)
        if domain == UNKNOWN_DOMAIN:
            domain = extract_domain(item.source)
        table = self._config.source_trust

        trust = self._config.default_trust
        labels = domain.split(".")
        for start in range(len(labels) - 1):
            candidate = ".".join(labels[start:])
            if candidate in table:
                trust = table[candidate]
                break

        if any(marker in domain for marker in self._config.flagship_markers):
            trust = min(trust + self._config.flagship_bonus, MAX_SCORE)

        return trust

    def _compute_keyword_salience(self, text: str) -> tuple[float, tuple[str, ...]]:
        """Sum of matched keyword weights with multi-match boosts, capped at 10."""
        matches = self._keyword_matcher.match_text(text)
        salience = sum(m.weight for m in matches)

        if len(matches) > self._config.boost_min_matches:
            salience *= self._config.boost_factor
        if len(matches) > self._config.strong_boost_min_matches:
            salience *= self._config.strong_boost_factor

        return min(salience, MAX_SCORE), tuple(m.keyword for m in matches)

    def _compute_recency(self, item: ContentItem) -> float:
        """Bucketed freshness; undated items get the neutral value."""
        if item.published_at is None:
            return self._config.undated_recency_score

        hours = (self._now - item.published_at).total_seconds() / 3600
        for upper_bound, value in RECENCY_BUCKETS:
            if hours < upper_bound:
                return value
        return STALE_RECENCY_SCORE

    def _compute_engagement(self, title: str) -> float:
        score = ENGAGEMENT_BASE
        if self._hooks.any_in(title):
            score += ENGAGEMENT_HOOK_BONUS
        if self._question_markers.any_in(title):
            score += ENGAGEMENT_QUESTION_BONUS
        if any(ch.isdigit() for ch in title):
            score += ENGAGEMENT_NUMBER_BONUS
        return min(score, MAX_SCORE)

    def _compute_novelty(self, text: str) -> float:
        score = (
            NOVELTY_BASE
            + self._novelty.count(text) * NOVELTY_PHRASE_BONUS
            - self._routine.count(text) * NOVELTY_ROUTINE_PENALTY
        )
        return clamp(score, NOVELTY_MIN, MAX_SCORE)
