"""Factory for the summarization client."""

import structlog

from src.config.schemas.pipeline import SummaryConfig
from src.llm.client import ClaudeMessagesClient
from src.llm.protocols import LlmClient


logger = structlog.get_logger()


def create_llm_client(
    *,
    api_key: str | None,
    config: SummaryConfig,
    model: str | None = None,
) -> LlmClient | None:
    """Create a summarization client when it is enabled and a key is present.

    Args:
        api_key: Anthropic API key, or None.
        config: Summary request settings.
        model: Optional model override (takes precedence over the config).

    Returns:
        A ready client, or None when summaries fall back to local text.
    """
    log = logger.bind(component="llm", subcomponent="factory")

    if not config.enabled:
        log.info("llm_client_skipped", reason="disabled")
        return None

    if not api_key or not api_key.strip():
        log.info("llm_client_skipped", reason="no_api_key")
        return None

    resolved_model = model or config.model
    log.info("llm_client_created", model=resolved_model)
    return ClaudeMessagesClient(
        api_key=api_key.strip(),
        model=resolved_model,
        endpoint=config.endpoint,
        api_version=config.api_version,
        timeout_seconds=config.timeout_seconds,
    )
