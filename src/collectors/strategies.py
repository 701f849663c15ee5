"""Retrieval strategies: how a source document is obtained.

Tier 1 sources are fetched directly. Tier 2 sources try a pass-through
proxy first and then a direct request with a browser-like User-Agent.
"""

import json
from abc import ABC, abstractmethod
from typing import ClassVar
from urllib.parse import quote

from src.collectors.errors import FetchStageError, ParseError, SchemaError
from src.config.schemas.base import FetchStrategy, SourceTier
from src.config.schemas.pipeline import TierPolicy
from src.config.schemas.sources import SourceConfig
from src.fetch.client import HttpFetcher


class RetrievalStrategy(ABC):
    """One way of turning a source descriptor into raw document bytes."""

    name: ClassVar[FetchStrategy]

    @abstractmethod
    def retrieve(self, source: SourceConfig, fetcher: HttpFetcher) -> bytes:
        """Fetch the source document.

        Args:
            source: Source descriptor.
            fetcher: HTTP fetcher with retry support.

        Returns:
            Raw document bytes.

        Raises:
            CollectorError: If the document could not be obtained.
        """


class DirectStrategy(RetrievalStrategy):
    """GET the source endpoint itself."""

    name = FetchStrategy.DIRECT

    def __init__(
        self,
        user_agent: str | None = None,
        timeout_seconds: float | None = None,
    ) -> None:
        """Initialize the strategy.

        Args:
            user_agent: Overrides the source's User-Agent when set.
            timeout_seconds: Overrides the source's timeout when set.
        """
        self._user_agent = user_agent
        self._timeout_seconds = timeout_seconds

    def retrieve(self, source: SourceConfig, fetcher: HttpFetcher) -> bytes:
        """Fetch the endpoint, raising FetchStageError on failure."""
        headers = dict(source.headers)
        if self._user_agent:
            headers["User-Agent"] = self._user_agent

        result = fetcher.fetch(
            source_id=source.id,
            url=source.url,
            extra_headers=headers or None,
            timeout=self._timeout_seconds or source.timeout_seconds,
        )
        if result.error is not None:
            raise FetchStageError(
                result.error.message,
                source_id=source.id,
                status_code=result.error.status_code,
                strategy=self.name.value,
            )
        return result.body_bytes


class AllOriginsStrategy(RetrievalStrategy):
    """Fetch through the allorigins proxy, which wraps the body as ``{"contents": ...}``."""

    name = FetchStrategy.ALLORIGINS

    def __init__(self, url_template: str, timeout_seconds: float) -> None:
        """Initialize the strategy.

        Args:
            url_template: Proxy URL with a ``{url}`` slot for the encoded target.
            timeout_seconds: Per-attempt timeout for proxied requests.
        """
        self._url_template = url_template
        self._timeout_seconds = timeout_seconds

    def proxy_url(self, target_url: str) -> str:
        """Build the proxy URL for a target endpoint."""
        return self._url_template.format(url=quote(target_url, safe=""))

    def retrieve(self, source: SourceConfig, fetcher: HttpFetcher) -> bytes:
        """Fetch via the proxy and unwrap the ``contents`` envelope."""
        result = fetcher.fetch(
            source_id=source.id,
            url=self.proxy_url(source.url),
            timeout=self._timeout_seconds,
        )
        if result.error is not None:
            raise FetchStageError(
                result.error.message,
                source_id=source.id,
                status_code=result.error.status_code,
                strategy=self.name.value,
            )

        try:
            payload = json.loads(result.body_bytes)
        except ValueError as e:
            raise ParseError(
                f"Proxy returned invalid JSON: {e}", source_id=source.id
            ) from e

        contents = payload.get("contents") if isinstance(payload, dict) else None
        if not isinstance(contents, str) or not contents.strip():
            raise SchemaError(
                "Proxy response has no contents",
                source_id=source.id,
                field="contents",
                expected="non-empty string",
            )
        return contents.encode("utf-8")


def build_strategies(
    source: SourceConfig, tier_policy: TierPolicy
) -> list[RetrievalStrategy]:
    """Instantiate a source's declared strategies, in order.

    Args:
        source: Source descriptor.
        tier_policy: Proxy and direct-fetch settings.

    Returns:
        Strategies to try until one succeeds.
    """
    strategies: list[RetrievalStrategy] = []
    for kind in source.strategies:
        if kind == FetchStrategy.ALLORIGINS:
            strategies.append(
                AllOriginsStrategy(
                    tier_policy.proxy_url_template,
                    tier_policy.proxy_timeout_seconds,
                )
            )
        elif source.tier == SourceTier.SECONDARY:
            strategies.append(
                DirectStrategy(
                    user_agent=tier_policy.direct_user_agent,
                    timeout_seconds=tier_policy.direct_timeout_seconds,
                )
            )
        else:
            strategies.append(DirectStrategy())
    return strategies
