"""HTTP client with bounded retries and failure isolation."""

import time
from collections.abc import Callable
from io import BytesIO
from urllib.parse import urlparse

import httpx
import structlog

from src.fetch.config import FetchConfig
from src.fetch.constants import (
    DEFAULT_CHUNK_SIZE,
    HTTP_STATUS_BAD_REQUEST,
    HTTP_STATUS_OK_MAX,
    HTTP_STATUS_OK_MIN,
    HTTP_STATUS_SERVER_ERROR_MIN,
    HTTP_STATUS_TOO_MANY_REQUESTS,
)
from src.fetch.metrics import FetchMetrics
from src.fetch.models import (
    FetchError,
    FetchErrorClass,
    FetchResult,
    ResponseSizeExceededError,
    RetryPolicy,
)
from src.fetch.redact import redact_headers, redact_url_credentials


logger = structlog.get_logger()


class HttpFetcher:
    """HTTP GET with an explicit timeout, bounded attempts and linear backoff.

    Every failed attempt is logged. After the last attempt the failure is
    returned inside the FetchResult; callers decide whether it is fatal.
    The fetcher is safe to share between threads.
    """

    def __init__(
        self,
        config: FetchConfig,
        run_id: str,
        client: httpx.Client | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """Initialize the HTTP fetcher.

        Args:
            config: Fetch configuration.
            run_id: Unique run identifier for logging.
            client: Shared httpx client. A short-lived client is opened per
                attempt when omitted.
            sleep: Sleep function used for backoff, injectable for tests.
        """
        self._config = config
        self._run_id = run_id
        self._client = client
        self._sleep = sleep
        self._metrics = FetchMetrics.get_instance()
        self._log = logger.bind(component="fetch", run_id=run_id)

    def fetch(
        self,
        source_id: str,
        url: str,
        extra_headers: dict[str, str] | None = None,
        timeout: float | None = None,
        max_attempts: int | None = None,
    ) -> FetchResult:
        """Fetch a URL with retry support.

        Args:
            source_id: Identifier for the source being fetched.
            url: The URL to fetch.
            extra_headers: Headers merged over the defaults.
            timeout: Per-attempt timeout in seconds.
            max_attempts: Overrides the configured attempt bound.

        Returns:
            FetchResult with status and body, or the last attempt's error.
        """
        start_time_ns = time.perf_counter_ns()
        domain = urlparse(url).netloc

        log = self._log.bind(
            source_id=source_id,
            url=redact_url_credentials(url),
            domain=domain,
        )

        headers = self._build_headers(extra_headers)
        policy = self._config.retry_policy
        if max_attempts is not None:
            policy = policy.model_copy(update={"max_attempts": max_attempts})

        result = self._execute_with_retry(
            url=url,
            headers=headers,
            timeout=timeout or self._config.default_timeout_seconds,
            policy=policy,
            log=log,
        )

        duration_ms = (time.perf_counter_ns() - start_time_ns) / 1_000_000
        self._metrics.record_duration(duration_ms)

        log.info(
            "fetch_complete",
            status_code=result.status_code,
            attempts=result.attempts,
            bytes=result.body_size,
            duration_ms=round(duration_ms, 2),
            error_class=result.error.error_class.value if result.error else None,
        )

        return result

    def _build_headers(self, extra_headers: dict[str, str] | None) -> dict[str, str]:
        headers: dict[str, str] = {
            "User-Agent": self._config.user_agent,
            "Accept": "*/*",
        }
        if extra_headers:
            headers.update(extra_headers)
        return headers

    def _execute_with_retry(
        self,
        url: str,
        headers: dict[str, str],
        timeout: float,
        policy: RetryPolicy,
        log: structlog.stdlib.BoundLogger,
    ) -> FetchResult:
        """Run attempts until success or the policy gives up.

        Args:
            url: URL to fetch.
            headers: Request headers.
            timeout: Per-attempt timeout in seconds.
            policy: Retry policy for this call.
            log: Bound logger.

        Returns:
            The first successful result, or the last failed one.
        """
        attempt = 0
        while True:
            attempt += 1
            result = self._execute_single(url, headers, timeout, attempt, log)
            if result.error is None:
                return result

            log.warning(
                "fetch_attempt_failed",
                attempt=attempt,
                max_attempts=policy.max_attempts,
                error_class=result.error.error_class.value,
                error=result.error.message,
                status_code=result.error.status_code,
            )

            if not policy.should_retry(result.error, attempt):
                self._metrics.record_failure(result.error.error_class)
                return result

            delay_ms = policy.get_delay_ms(attempt)
            self._metrics.record_retry(urlparse(url).netloc)
            log.debug("retry_scheduled", attempt=attempt, delay_ms=delay_ms)
            self._sleep(delay_ms / 1000.0)

    def _execute_single(
        self,
        url: str,
        headers: dict[str, str],
        timeout: float,
        attempt: int,
        log: structlog.stdlib.BoundLogger,
    ) -> FetchResult:
        """Execute a single HTTP request.

        Args:
            url: URL to fetch.
            headers: Request headers.
            timeout: Request timeout in seconds.
            attempt: Current attempt number (1-based).
            log: Bound logger.

        Returns:
            FetchResult from the request.
        """
        log.debug("fetch_attempt", attempt=attempt, headers=redact_headers(headers))

        try:
            if self._client is not None:
                return self._request(self._client, url, headers, timeout, attempt)
            with httpx.Client(follow_redirects=True) as client:
                return self._request(client, url, headers, timeout, attempt)

        except httpx.TimeoutException as e:
            return self._failure(
                url,
                attempt,
                FetchErrorClass.NETWORK_TIMEOUT,
                f"Request timed out after {timeout}s: {e}",
            )

        except httpx.ConnectError as e:
            return self._failure(
                url, attempt, FetchErrorClass.CONNECTION_ERROR, f"Connection failed: {e}"
            )

        except ResponseSizeExceededError as e:
            return self._failure(
                url, attempt, FetchErrorClass.RESPONSE_SIZE_EXCEEDED, str(e)
            )

        except Exception as e:  # noqa: BLE001
            return self._failure(
                url, attempt, FetchErrorClass.UNKNOWN, f"Unexpected error: {e}"
            )

    def _request(
        self,
        client: httpx.Client,
        url: str,
        headers: dict[str, str],
        timeout: float,
        attempt: int,
    ) -> FetchResult:
        with client.stream("GET", url, headers=headers, timeout=timeout) as response:
            content_length = response.headers.get("content-length")
            max_size = self._config.max_response_size_bytes
            if content_length and content_length.isdigit() and int(content_length) > max_size:
                msg = f"Response size {content_length} exceeds limit {max_size}"
                raise ResponseSizeExceededError(msg)

            body = self._read_body_with_limit(response)

        self._metrics.record_request(response.url.host, response.status_code, len(body))

        return FetchResult(
            status_code=response.status_code,
            final_url=str(response.url),
            headers=dict(response.headers),
            body_bytes=body,
            attempts=attempt,
            error=self._classify_http_error(response.status_code),
        )

    def _read_body_with_limit(self, response: httpx.Response) -> bytes:
        """Read response body with size limit.

        Raises:
            ResponseSizeExceededError: If the body exceeds the limit.
        """
        buffer = BytesIO()
        total_read = 0
        max_size = self._config.max_response_size_bytes

        for chunk in response.iter_bytes(chunk_size=DEFAULT_CHUNK_SIZE):
            total_read += len(chunk)
            if total_read > max_size:
                msg = (
                    f"Response size exceeded limit of {max_size} bytes "
                    f"(read {total_read} bytes)"
                )
                raise ResponseSizeExceededError(msg)
            buffer.write(chunk)

        return buffer.getvalue()

    @staticmethod
    def _failure(
        url: str, attempt: int, error_class: FetchErrorClass, message: str
    ) -> FetchResult:
        return FetchResult(
            status_code=0,
            final_url=url,
            attempts=attempt,
            error=FetchError(error_class=error_class, message=message),
        )

    @staticmethod
    def _classify_http_error(status_code: int) -> FetchError | None:
        """Classify an HTTP status code; None for 2xx."""
        if HTTP_STATUS_OK_MIN <= status_code < HTTP_STATUS_OK_MAX:
            return None

        if status_code == HTTP_STATUS_TOO_MANY_REQUESTS:
            return FetchError(
                error_class=FetchErrorClass.RATE_LIMITED,
                message="Rate limited (429 Too Many Requests)",
                status_code=status_code,
            )

        if HTTP_STATUS_BAD_REQUEST <= status_code < HTTP_STATUS_SERVER_ERROR_MIN:
            return FetchError(
                error_class=FetchErrorClass.HTTP_4XX,
                message=f"Client error ({status_code})",
                status_code=status_code,
            )

        if status_code >= HTTP_STATUS_SERVER_ERROR_MIN:
            return FetchError(
                error_class=FetchErrorClass.HTTP_5XX,
                message=f"Server error ({status_code})",
                status_code=status_code,
            )

        # 1xx/3xx that survived redirect following
        return FetchError(
            error_class=FetchErrorClass.UNKNOWN,
            message=f"Unexpected status ({status_code})",
            status_code=status_code,
        )
