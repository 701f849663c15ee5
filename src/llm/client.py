"""Anthropic Messages API client."""

from http import HTTPStatus

import httpx
import structlog

from src.llm.errors import LlmApiError


logger = structlog.get_logger()

DEFAULT_ENDPOINT = "https://api.anthropic.com/v1/messages"
DEFAULT_API_VERSION = "2023-06-01"
DEFAULT_MODEL = "claude-3-sonnet-20240229"
DEFAULT_TIMEOUT_SECONDS = 30.0


class ClaudeMessagesClient:
    """Client for the Anthropic Messages API.

    Sends a single user message per request. There is no retry loop: the
    summarizer has a local fallback, so a failed call is reported once and
    the pipeline moves on.

    Attributes:
        model: Model identifier to use.
    """

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_MODEL,
        endpoint: str = DEFAULT_ENDPOINT,
        api_version: str = DEFAULT_API_VERSION,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        """Initialize the client.

        Args:
            api_key: Anthropic API key.
            model: Model identifier.
            endpoint: Messages endpoint URL.
            api_version: Value of the ``anthropic-version`` header.
            timeout_seconds: Request timeout.
        """
        self._api_key = api_key
        self.model = model
        self._endpoint = endpoint
        self._api_version = api_version
        self._timeout = timeout_seconds
        self._log = logger.bind(component="llm", subcomponent="client")

    def _build_request_body(self, prompt: str, max_tokens: int) -> dict[str, object]:
        return {
            "model": self.model,
            "max_tokens": max_tokens,
            "messages": [{"role": "user", "content": prompt}],
        }

    def generate_content(self, prompt: str, max_tokens: int) -> str:
        """Send a messages request and return the generated text.

        Args:
            prompt: User prompt text.
            max_tokens: Response length budget.

        Returns:
            Text of the first content block.

        Raises:
            LlmApiError: On network errors, timeouts, non-200 responses or
                malformed payloads.
        """
        try:
            response = httpx.post(
                self._endpoint,
                headers={
                    "x-api-key": self._api_key,
                    "anthropic-version": self._api_version,
                    "content-type": "application/json",
                },
                json=self._build_request_body(prompt, max_tokens),
                timeout=self._timeout,
            )
        except httpx.TimeoutException as exc:
            msg = f"Messages request timed out after {self._timeout}s"
            raise LlmApiError(msg) from exc
        except httpx.HTTPError as exc:
            msg = f"Messages request failed: {exc}"
            raise LlmApiError(msg) from exc

        if response.status_code != HTTPStatus.OK:
            msg = f"Messages API returned {response.status_code}"
            raise LlmApiError(msg, status_code=response.status_code)

        text = self._extract_text(response)
        self._log.info("llm_generation_complete", model=self.model, chars=len(text))
        return text

    @staticmethod
    def _extract_text(response: httpx.Response) -> str:
        """Extract generated text from the API response.

        Raises:
            LlmApiError: If the response is missing expected fields.
        """
        try:
            data = response.json()
        except ValueError as exc:
            msg = "Messages API returned invalid JSON"
            raise LlmApiError(msg, status_code=response.status_code) from exc

        content = data.get("content") if isinstance(data, dict) else None
        if not content or not isinstance(content, list):
            msg = "No content blocks in Messages response"
            raise LlmApiError(msg, status_code=response.status_code)

        first = content[0]
        text = first.get("text", "") if isinstance(first, dict) else ""
        if not isinstance(text, str) or not text.strip():
            msg = "Empty text in Messages response"
            raise LlmApiError(msg, status_code=response.status_code)

        return text.strip()
