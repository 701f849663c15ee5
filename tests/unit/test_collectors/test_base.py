"""Unit tests for the shared collector flow."""

from datetime import datetime
from unittest.mock import MagicMock

from src.collectors.base import BaseCollector, CollectorResult
from src.collectors.errors import CollectorErrorClass, SchemaError
from src.collectors.state_machine import SourceState, SourceStateMachine
from src.config.schemas.base import FetchStrategy, ParserKind
from src.config.schemas.sources import SourceConfig
from src.data_model import ContentItem, DateConfidence
from src.fetch.client import HttpFetcher
from src.fetch.models import FetchResult
from tests.helpers.time import FIXED_NOW


class EchoCollector(BaseCollector):
    """Turns the document body into a single item titled with it."""

    method = ParserKind.RSS_ATOM

    def _collect_items(
        self,
        body: bytes,
        source_config: SourceConfig,
        http_client: HttpFetcher,
        now: datetime,
        state_machine: SourceStateMachine,
        parse_warnings: list[str],
    ) -> list[ContentItem]:
        text = body.decode()
        if text == "schema":
            raise SchemaError("missing fields", source_id=source_config.id)
        if text == "boom":
            raise RuntimeError("unexpected")
        return [
            self.build_item(
                source_config=source_config,
                title=text,
                description="<b>Bold</b> &amp; " + "x" * 400,
                url=None,
                source_name="Echo",
                published_at=None,
                date_confidence=DateConfidence.LOW,
            )
        ]


def make_source() -> SourceConfig:
    """Create a test SourceConfig."""
    return SourceConfig(id="echo", name="Echo", url="https://echo.example.com/feed")


def http_client_returning(body: bytes) -> MagicMock:
    """MagicMock fetcher returning a fixed body."""
    http_client = MagicMock()
    http_client.fetch.return_value = FetchResult(
        status_code=200, final_url="https://echo.example.com/feed", body_bytes=body
    )
    return http_client


class TestCollectorResult:
    """Tests for CollectorResult."""

    def test_empty_result(self) -> None:
        """An empty result still counts as success."""
        result = CollectorResult(items=[])
        assert result.success
        assert result.items_count == 0

    def test_failed_result(self) -> None:
        """SOURCE_FAILED is not a success."""
        result = CollectorResult(items=[], state=SourceState.SOURCE_FAILED)
        assert not result.success


class TestBaseCollectorFlow:
    """Tests for BaseCollector.collect."""

    def test_success_uses_direct_strategy_by_default(self) -> None:
        """Without a strategy the endpoint is fetched directly."""
        result = EchoCollector().collect(
            make_source(), http_client_returning(b"Hello digest"), FIXED_NOW
        )

        assert result.success
        assert result.strategy == FetchStrategy.DIRECT
        assert result.items[0].title == "Hello digest"

    def test_build_item_bounds_text(self) -> None:
        """Descriptions are cleaned and capped, missing URLs become '#'."""
        result = EchoCollector().collect(
            make_source(), http_client_returning(b"Hello digest"), FIXED_NOW
        )

        item = result.items[0]
        assert item.url == "#"
        assert item.description.startswith("Bold x")
        assert len(item.description) == 300
        assert item.description.endswith("...")
        assert item.source_url == "https://echo.example.com/feed"

    def test_collector_error_is_recorded(self) -> None:
        """Typed errors become an error record with their class."""
        result = EchoCollector().collect(
            make_source(), http_client_returning(b"schema"), FIXED_NOW
        )

        assert result.state == SourceState.SOURCE_FAILED
        assert result.error is not None
        assert result.error.error_class == CollectorErrorClass.SCHEMA
        assert result.error.source_id == "echo"

    def test_unexpected_error_is_contained(self) -> None:
        """Any other exception is downgraded to a PARSE failure."""
        result = EchoCollector().collect(
            make_source(), http_client_returning(b"boom"), FIXED_NOW
        )

        assert result.state == SourceState.SOURCE_FAILED
        assert result.items == []
        assert result.error is not None
        assert result.error.error_class == CollectorErrorClass.PARSE
        assert "unexpected" in result.error.message
