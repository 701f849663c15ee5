"""Protocol interface for LLM clients."""

from typing import Protocol, runtime_checkable


@runtime_checkable
class LlmClient(Protocol):
    """Protocol for text generation clients used by the summarizer.

    Any client that implements ``generate_content`` with the matching
    signature can be used interchangeably, including test doubles.
    """

    def generate_content(self, prompt: str, max_tokens: int) -> str:
        """Generate text from a prompt.

        Args:
            prompt: User prompt text.
            max_tokens: Response length budget.

        Returns:
            Generated text from the model.

        Raises:
            LlmApiError: If the API call fails.
        """
        ...
