"""Tests for retrieval strategies."""

import json
from unittest.mock import MagicMock

import pytest

from src.collectors.errors import CollectorError, CollectorErrorClass
from src.collectors.strategies import (
    AllOriginsStrategy,
    DirectStrategy,
    build_strategies,
)
from src.config.schemas.base import FetchStrategy, SourceTier
from src.config.schemas.pipeline import TierPolicy
from src.config.schemas.sources import SourceConfig
from src.fetch.models import FetchError, FetchErrorClass, FetchResult


FEED_URL = "https://techcrunch.com/category/artificial-intelligence/feed/"


def make_source(tier: SourceTier = SourceTier.SECONDARY) -> SourceConfig:
    """Create a Tier 2 style SourceConfig."""
    return SourceConfig(
        id="techcrunch-ai",
        name="TechCrunch AI",
        url=FEED_URL,
        tier=tier,
        headers={"User-Agent": "AI-Digest-Bot/1.0"},
        timeout_seconds=15.0,
        strategies=[FetchStrategy.ALLORIGINS, FetchStrategy.DIRECT],
    )


def fetcher_returning(body: bytes = b"", error: FetchError | None = None) -> MagicMock:
    """MagicMock fetcher with a fixed result."""
    fetcher = MagicMock()
    fetcher.fetch.return_value = FetchResult(
        status_code=500 if error else 200,
        final_url="https://example.com",
        body_bytes=body,
        error=error,
    )
    return fetcher


class TestDirectStrategy:
    """Tests for DirectStrategy."""

    def test_uses_source_headers_and_timeout(self) -> None:
        """Source settings are passed to the fetcher."""
        fetcher = fetcher_returning(b"<rss/>")

        body = DirectStrategy().retrieve(make_source(), fetcher)

        assert body == b"<rss/>"
        fetcher.fetch.assert_called_once_with(
            source_id="techcrunch-ai",
            url=FEED_URL,
            extra_headers={"User-Agent": "AI-Digest-Bot/1.0"},
            timeout=15.0,
        )

    def test_overrides_user_agent_and_timeout(self) -> None:
        """Tier 2 direct fetches use a browser-like identity."""
        fetcher = fetcher_returning(b"<rss/>")

        DirectStrategy(user_agent="Mozilla/5.0", timeout_seconds=20.0).retrieve(
            make_source(), fetcher
        )

        kwargs = fetcher.fetch.call_args.kwargs
        assert kwargs["extra_headers"]["User-Agent"] == "Mozilla/5.0"
        assert kwargs["timeout"] == 20.0

    def test_fetch_error_raises(self) -> None:
        """A failed fetch raises a FETCH-class error with the status code."""
        fetcher = fetcher_returning(
            error=FetchError(
                error_class=FetchErrorClass.HTTP_5XX, message="HTTP 503", status_code=503
            )
        )

        with pytest.raises(CollectorError) as exc_info:
            DirectStrategy().retrieve(make_source(), fetcher)

        assert exc_info.value.error_class == CollectorErrorClass.FETCH
        assert exc_info.value.details["status_code"] == 503
        assert exc_info.value.details["strategy"] == "direct"


class TestAllOriginsStrategy:
    """Tests for AllOriginsStrategy."""

    def test_proxy_url_encodes_target(self) -> None:
        """The target URL is percent-encoded into the template."""
        strategy = AllOriginsStrategy("https://api.allorigins.win/get?url={url}", 20.0)

        assert strategy.proxy_url("https://a.com/feed?x=1") == (
            "https://api.allorigins.win/get?url=https%3A%2F%2Fa.com%2Ffeed%3Fx%3D1"
        )

    def test_unwraps_contents(self) -> None:
        """The document is taken from the contents field."""
        fetcher = fetcher_returning(json.dumps({"contents": "<rss>ok</rss>"}).encode())
        strategy = AllOriginsStrategy("https://proxy.local/get?url={url}", 20.0)

        body = strategy.retrieve(make_source(), fetcher)

        assert body == b"<rss>ok</rss>"
        assert fetcher.fetch.call_args.kwargs["timeout"] == 20.0

    def test_invalid_json_is_parse_error(self) -> None:
        """A non-JSON proxy response is a PARSE error."""
        strategy = AllOriginsStrategy("https://proxy.local/get?url={url}", 20.0)

        with pytest.raises(CollectorError) as exc_info:
            strategy.retrieve(make_source(), fetcher_returning(b"<html>"))

        assert exc_info.value.error_class == CollectorErrorClass.PARSE

    @pytest.mark.parametrize("payload", [{"contents": ""}, {"status": {}}, ["x"]])
    def test_missing_contents_is_schema_error(self, payload: object) -> None:
        """Empty or absent contents is a SCHEMA error."""
        strategy = AllOriginsStrategy("https://proxy.local/get?url={url}", 20.0)

        with pytest.raises(CollectorError) as exc_info:
            strategy.retrieve(make_source(), fetcher_returning(json.dumps(payload).encode()))

        assert exc_info.value.error_class == CollectorErrorClass.SCHEMA


class TestBuildStrategies:
    """Tests for build_strategies."""

    def test_tier2_order_and_settings(self) -> None:
        """Declared order is kept and Tier 2 direct uses the browser identity."""
        policy = TierPolicy(direct_user_agent="Mozilla/5.0 test")

        strategies = build_strategies(make_source(), policy)

        assert [s.name for s in strategies] == [
            FetchStrategy.ALLORIGINS,
            FetchStrategy.DIRECT,
        ]
        fetcher = fetcher_returning(b"<rss/>")
        strategies[1].retrieve(make_source(), fetcher)
        assert fetcher.fetch.call_args.kwargs["extra_headers"]["User-Agent"] == (
            "Mozilla/5.0 test"
        )

    def test_tier1_direct_keeps_source_identity(self) -> None:
        """Tier 1 direct fetches keep the configured headers."""
        source = make_source(tier=SourceTier.PRIMARY)
        strategies = build_strategies(source, TierPolicy())

        fetcher = fetcher_returning(b"<rss/>")
        strategies[1].retrieve(source, fetcher)
        assert fetcher.fetch.call_args.kwargs["extra_headers"]["User-Agent"] == (
            "AI-Digest-Bot/1.0"
        )
