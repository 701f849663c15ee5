"""Unit tests for create_llm_client."""

from src.config.schemas.pipeline import SummaryConfig
from src.llm.client import ClaudeMessagesClient
from src.llm.factory import create_llm_client
from src.llm.protocols import LlmClient


class TestCreateLlmClient:
    """Tests for the summarization client factory."""

    def test_returns_client_with_key(self) -> None:
        """A key yields a configured Messages client."""
        client = create_llm_client(api_key="sk-ant-test", config=SummaryConfig())

        assert isinstance(client, ClaudeMessagesClient)
        assert isinstance(client, LlmClient)
        assert client.model == SummaryConfig().model

    def test_model_override(self) -> None:
        """An explicit model takes precedence over the config."""
        client = create_llm_client(
            api_key="sk-ant-test", config=SummaryConfig(), model="claude-3-haiku-20240307"
        )

        assert isinstance(client, ClaudeMessagesClient)
        assert client.model == "claude-3-haiku-20240307"

    def test_missing_key_returns_none(self) -> None:
        """Without a key summaries use the local fallback."""
        assert create_llm_client(api_key=None, config=SummaryConfig()) is None

    def test_blank_key_returns_none(self) -> None:
        """Whitespace-only keys count as missing."""
        assert create_llm_client(api_key="   ", config=SummaryConfig()) is None

    def test_disabled_returns_none(self) -> None:
        """Disabled summaries never create a client."""
        config = SummaryConfig(enabled=False)

        assert create_llm_client(api_key="sk-ant-test", config=config) is None
