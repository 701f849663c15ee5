"""HTTP fetch layer with bounded retries and failure isolation."""

from src.fetch.client import HttpFetcher
from src.fetch.config import FetchConfig
from src.fetch.metrics import FetchMetrics
from src.fetch.models import (
    FetchError,
    FetchErrorClass,
    FetchFailedError,
    FetchResult,
    ResponseSizeExceededError,
    RetryPolicy,
)
from src.fetch.redact import redact_headers, redact_url_credentials


__all__ = [
    "FetchConfig",
    "FetchError",
    "FetchErrorClass",
    "FetchFailedError",
    "FetchMetrics",
    "FetchResult",
    "HttpFetcher",
    "ResponseSizeExceededError",
    "RetryPolicy",
    "redact_headers",
    "redact_url_credentials",
]
