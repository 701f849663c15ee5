"""Summarization collaborator: protocol, Anthropic client and factory."""

from src.llm.client import ClaudeMessagesClient
from src.llm.errors import LlmApiError
from src.llm.factory import create_llm_client
from src.llm.protocols import LlmClient


__all__ = [
    "ClaudeMessagesClient",
    "LlmApiError",
    "LlmClient",
    "create_llm_client",
]
