"""Unit tests for the significance scorer."""

from collections.abc import Generator
from datetime import datetime, timedelta

import pytest

from src.config.schemas.pipeline import RankingConfig
from src.data_model import ContentItem, DateConfidence
from src.ranker.metrics import RankerMetrics
from src.ranker.models import ImpactLevel
from src.ranker.scorer import (
    SignificanceScorer,
    extract_domain,
    impact_level,
    round_half_up,
)
from tests.helpers.time import FIXED_NOW


def _make_item(
    title: str = "Test item title",
    description: str = "",
    url: str = "https://example.com/post",
    published_at: datetime | None = None,
    source_id: str = "test-source",
) -> ContentItem:
    """Create a test ContentItem."""
    return ContentItem(
        title=title,
        description=description,
        url=url,
        source_id=source_id,
        published_at=published_at,
        date_confidence=DateConfidence.HIGH if published_at else DateConfidence.LOW,
    )


def _make_scorer(config: RankingConfig | None = None) -> SignificanceScorer:
    """Create a scorer pinned to FIXED_NOW."""
    return SignificanceScorer(config or RankingConfig(), now=FIXED_NOW, run_id="test")


@pytest.fixture(autouse=True)
def reset_metrics() -> Generator[None]:
    """Reset singleton before and after each test."""
    RankerMetrics.reset()
    yield
    RankerMetrics.reset()


class TestRoundHalfUp:
    """Tests for round_half_up."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [(2.25, 2.3), (2.35, 2.4), (7.04, 7.0), (9.95, 10.0), (0.0, 0.0)],
    )
    def test_ties_round_up(self, value: float, expected: float) -> None:
        """Ties go away from zero, unlike banker's rounding."""
        assert round_half_up(value) == expected


class TestExtractDomain:
    """Tests for extract_domain."""

    @pytest.mark.parametrize(
        ("url", "expected"),
        [
            ("https://www.openai.com/blog/x", "openai.com"),
            ("https://Blog.Anthropic.com/post", "blog.anthropic.com"),
            ("news.mit.edu/2024/story", "news.mit.edu"),
            ("#", "unknown"),
            ("", "unknown"),
        ],
    )
    def test_domains(self, url: str, expected: str) -> None:
        """Hostnames are lowercased and stripped of www."""
        assert extract_domain(url) == expected


class TestImpactLevel:
    """Tests for impact_level."""

    @pytest.mark.parametrize(
        ("score", "expected"),
        [
            (10.0, ImpactLevel.HIGH),
            (7.0, ImpactLevel.HIGH),
            (6.9, ImpactLevel.MEDIUM),
            (4.0, ImpactLevel.MEDIUM),
            (3.9, ImpactLevel.LOW),
            (0.0, ImpactLevel.LOW),
        ],
    )
    def test_thresholds(self, score: float, expected: ImpactLevel) -> None:
        """Boundaries are inclusive on the lower side."""
        assert impact_level(score) == expected


class TestSignificanceScorer:
    """Tests for SignificanceScorer.score."""

    def test_flagship_breakthrough_announcement(self) -> None:
        """A fresh flagship announcement scores high on every signal."""
        item = _make_item(
            title="OpenAI Announces Breakthrough GPT-5 Model",
            url="https://openai.com/blog/gpt-5",
            published_at=FIXED_NOW - timedelta(minutes=30),
        )

        scored = _make_scorer().score(item)

        assert scored.components is not None
        assert scored.components.source_trust == 10.0
        assert scored.components.keyword_salience == 10.0
        assert scored.components.recency == 10.0
        assert scored.components.engagement == 8.0
        assert scored.components.novelty == 5.0
        assert set(scored.components.matched_keywords) == {
            "breakthrough",
            "announce",
            "gpt-5",
            "openai",
        }
        assert scored.score == 9.2
        assert scored.impact == ImpactLevel.HIGH

    def test_score_is_deterministic(self) -> None:
        """Scoring the same item twice yields the same result."""
        item = _make_item(
            title="Anthropic publishes new safety research",
            url="https://blog.anthropic.com/safety",
            published_at=FIXED_NOW - timedelta(hours=5),
        )
        scorer = _make_scorer()

        assert scorer.score(item) == scorer.score(item)
        assert _make_scorer().score(item).score == scorer.score(item).score

    def test_score_bounds(self) -> None:
        """Scores stay within [0, 10] with one decimal."""
        items = [
            _make_item(title="x" * 20),
            _make_item(
                title="First revolutionary breakthrough: GPT-5 AGI launch?",
                description="Unprecedented, novel, pioneering, unique and original work.",
                url="https://openai.com/x",
                published_at=FIXED_NOW,
            ),
        ]

        for scored in _make_scorer().score_items(items):
            assert 0.0 <= scored.score <= 10.0
            assert round(scored.score, 1) == scored.score

    def test_undated_item_gets_neutral_recency(self) -> None:
        """Items without a timestamp are neither fresh nor stale."""
        scored = _make_scorer().score(_make_item(published_at=None))

        assert scored.components is not None
        assert scored.components.recency == 5.0

    @pytest.mark.parametrize(
        ("age_hours", "expected"),
        [
            (0.5, 10.0),
            (2, 9.0),
            (5, 8.0),
            (11, 7.0),
            (23, 6.0),
            (47, 4.0),
            (60, 2.0),
        ],
    )
    def test_recency_buckets(self, age_hours: float, expected: float) -> None:
        """Age maps to a fixed freshness bucket."""
        item = _make_item(published_at=FIXED_NOW - timedelta(hours=age_hours))

        scored = _make_scorer().score(item)

        assert scored.components is not None
        assert scored.components.recency == expected

    def test_subdomain_inherits_trust(self) -> None:
        """Subdomains use the trust of their parent domain."""
        scored = _make_scorer().score(_make_item(url="https://news.mit.edu/2024/x"))

        assert scored.components is not None
        assert scored.components.source_trust == 9.0

    def test_unknown_domain_default_trust(self) -> None:
        """Hosts outside the table get the default trust."""
        scored = _make_scorer().score(_make_item(url="https://someblog.example.org/p"))

        assert scored.components is not None
        assert scored.components.source_trust == 3.0

    def test_flagship_bonus(self) -> None:
        """Flagship hostnames get the bonus on top of default trust."""
        scored = _make_scorer().score(_make_item(url="https://blog.google/technology"))

        assert scored.components is not None
        assert scored.components.source_trust == 5.0

    def test_linkless_item_trusted_by_source_name(self) -> None:
        """Without a URL host the source name decides trust."""
        item = ContentItem(
            title="Some headline here", source="OpenAI", url="#", source_id="test-source"
        )

        scored = _make_scorer().score(item)

        assert scored.components is not None
        assert scored.components.source_trust == 5.0

    def test_url_host_wins_over_source_name(self) -> None:
        """The source name is ignored when the URL has a host."""
        item = ContentItem(
            title="Some headline here",
            source="OpenAI",
            url="https://someblog.example.org/p",
            source_id="test-source",
        )

        scored = _make_scorer().score(item)

        assert scored.components is not None
        assert scored.components.source_trust == 3.0

    def test_short_keyword_needs_word_boundary(self) -> None:
        """Short keywords do not match inside longer words."""
        scored = _make_scorer().score(
            _make_item(title="Magical tipo of pagination", description="")
        )

        assert scored.components is not None
        assert "agi" not in scored.components.matched_keywords
        assert "ipo" not in scored.components.matched_keywords

    def test_routine_terms_lower_novelty(self) -> None:
        """Routine wording lowers novelty by half a point per term."""
        scored = _make_scorer().score(
            _make_item(
                title="Minor update for the SDK",
                description="This patch fixes a typo.",
            )
        )

        assert scored.components is not None
        assert scored.components.novelty == 3.5

    def test_engagement_signals(self) -> None:
        """Hooks, questions and numbers raise engagement."""
        scorer = _make_scorer()

        plain = scorer.score(_make_item(title="Quarterly earnings summary"))
        hooked = scorer.score(_make_item(title="How the new 3B model works?"))

        assert plain.components is not None
        assert hooked.components is not None
        assert plain.components.engagement == 5.0
        assert hooked.components.engagement == 9.0


class TestKeywordBoosts:
    """Tests for multi-match salience boosts."""

    def _config(self) -> RankingConfig:
        return RankingConfig(
            keyword_weights={
                "alpha": 1,
                "bravo": 1,
                "charlie": 1,
                "delta": 1,
                "echo": 1,
            }
        )

    @pytest.mark.parametrize(
        ("words", "expected"),
        [
            ("alpha bravo", 2.0),
            ("alpha bravo charlie", 3.6),
            ("alpha bravo charlie delta echo", 8.4),
        ],
    )
    def test_boosts(self, words: str, expected: float) -> None:
        """Above two matches salience is boosted, above four boosted again."""
        scored = _make_scorer(self._config()).score(_make_item(title=words))

        assert scored.components is not None
        assert scored.components.keyword_salience == pytest.approx(expected)

    def test_capped_at_ten(self) -> None:
        """Salience never exceeds 10."""
        config = RankingConfig(keyword_weights={"alpha": 9, "bravo": 9})

        scored = _make_scorer(config).score(_make_item(title="alpha and bravo"))

        assert scored.components is not None
        assert scored.components.keyword_salience == 10.0


class TestRank:
    """Tests for SignificanceScorer.rank."""

    def test_sorted_descending_with_stable_ties(self) -> None:
        """Higher scores come first; ties keep their input order."""
        low = _make_item(title="Quarterly earnings summary", source_id="low")
        tie_a = _make_item(title="OpenAI blog entry one", source_id="a")
        tie_b = _make_item(title="OpenAI blog entry two", source_id="b")

        ranked = _make_scorer().rank([low, tie_a, tie_b])

        assert [s.item.source_id for s in ranked] == ["a", "b", "low"]
        assert ranked[0].score == ranked[1].score

    def test_records_metrics(self) -> None:
        """Scores are recorded for percentile reporting."""
        _make_scorer().rank([_make_item(), _make_item(title="Another test item")])

        assert len(RankerMetrics.get_instance().score_values) == 2
