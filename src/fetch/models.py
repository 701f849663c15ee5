"""Data models for the HTTP fetch layer."""

from enum import Enum
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field

from src.fetch.constants import HTTP_STATUS_OK_MAX, HTTP_STATUS_OK_MIN


class FetchErrorClass(str, Enum):
    """Classification of fetch errors for metrics and logging.

    - NETWORK_TIMEOUT: Request timed out
    - CONNECTION_ERROR: Could not establish connection
    - RESPONSE_SIZE_EXCEEDED: Response exceeded max size limit
    - HTTP_4XX: 4xx client error (except 429)
    - HTTP_5XX: 5xx server error
    - RATE_LIMITED: 429 Too Many Requests
    - UNKNOWN: Unclassified error
    """

    NETWORK_TIMEOUT = "NETWORK_TIMEOUT"
    CONNECTION_ERROR = "CONNECTION_ERROR"
    RESPONSE_SIZE_EXCEEDED = "RESPONSE_SIZE_EXCEEDED"
    HTTP_4XX = "HTTP_4XX"
    HTTP_5XX = "HTTP_5XX"
    RATE_LIMITED = "RATE_LIMITED"
    UNKNOWN = "UNKNOWN"


class FetchError(BaseModel):
    """Typed error from a fetch operation."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    error_class: FetchErrorClass = Field(description="Classification of the error")
    message: Annotated[str, Field(min_length=1, description="Human-readable message")]
    status_code: int | None = Field(
        default=None, description="HTTP status code if available"
    )


class FetchFailedError(Exception):
    """Raised by FetchResult.raise_for_error when every attempt failed."""

    def __init__(self, url: str, error: FetchError) -> None:
        """Initialize the error.

        Args:
            url: URL that could not be fetched.
            error: Error from the last attempt.
        """
        self.url = url
        self.error = error
        super().__init__(f"{error.error_class.value}: {error.message} ({url})")


class FetchResult(BaseModel):
    """Result of a fetch operation.

    Contains the response data or error information from an HTTP fetch.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    status_code: int = Field(ge=0, le=599, description="HTTP status code, 0 if none")
    final_url: Annotated[
        str, Field(min_length=1, description="Final URL after redirects")
    ]
    headers: dict[str, str] = Field(
        default_factory=dict, description="Response headers"
    )
    body_bytes: bytes = Field(default=b"", description="Response body")
    attempts: Annotated[int, Field(ge=1)] = 1
    error: FetchError | None = Field(
        default=None, description="Error details if fetch failed"
    )

    @property
    def is_success(self) -> bool:
        """Check if the fetch was successful (2xx status, no error)."""
        return (
            self.error is None
            and HTTP_STATUS_OK_MIN <= self.status_code < HTTP_STATUS_OK_MAX
        )

    @property
    def body_size(self) -> int:
        """Get the size of the response body in bytes."""
        return len(self.body_bytes)

    def raise_for_error(self) -> "FetchResult":
        """Return self on success, raise FetchFailedError otherwise."""
        if self.error is not None:
            raise FetchFailedError(self.final_url, self.error)
        return self


class RetryPolicy(BaseModel):
    """Bounded retry with linear backoff.

    After failed attempt ``n`` (1-based) the fetcher waits
    ``n * base_delay_ms`` before the next one, capped at ``max_delay_ms``.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    max_attempts: Annotated[int, Field(ge=1, le=10)] = 2
    base_delay_ms: Annotated[int, Field(ge=0, le=60000)] = 1000
    max_delay_ms: Annotated[int, Field(ge=0, le=300000)] = 30000

    def should_retry(self, error: FetchError, attempt: int) -> bool:
        """Determine if a failed attempt should be followed by another.

        Args:
            error: The error that occurred.
            attempt: Number of the attempt that failed (1-based).

        Returns:
            True if another attempt is allowed.
        """
        if attempt >= self.max_attempts:
            return False
        # An oversized body will be oversized again
        return error.error_class != FetchErrorClass.RESPONSE_SIZE_EXCEEDED

    def get_delay_ms(self, attempt: int) -> int:
        """Calculate the wait after a failed attempt.

        Args:
            attempt: Number of the attempt that failed (1-based).

        Returns:
            Delay in milliseconds.
        """
        return min(attempt * self.base_delay_ms, self.max_delay_ms)


class ResponseSizeExceededError(Exception):
    """Raised when response size exceeds the configured limit."""
