"""Market page retrieval over a prioritized list of strategies.

This module provides pluggable retrieval strategies:
- DirectStrategy: GET the origin with a browser-like header set
- ProxyStrategy: GET the origin through a public CORS relay
- RelayStrategy: GET a deployed relay endpoint that returns the origin markup

`DocumentRetriever` tries them in order, bounding each attempt with a
timeout and all attempts with a shared budget, and returns a tagged
result instead of raising.

Example:
    async with DocumentRetriever() as retriever:
        result = await retriever.retrieve()
    if isinstance(result, FetchSuccess):
        rows = extract_rows(result.body)
"""

from __future__ import annotations

import asyncio
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Literal, Protocol, runtime_checkable
from urllib.parse import quote, urlparse

import httpx
import structlog

from .config import (
    ATTEMPTS_PER_STRATEGY,
    BACKOFF_MAX_SECONDS,
    BACKOFF_MULTIPLIER,
    BROWSER_HEADERS,
    MARKET_URL,
    MAX_TOTAL_ATTEMPTS,
    PROXY_PREFIXES,
    REQUEST_TIMEOUT_SECONDS,
    REQUIRED_MARKER,
)
from .exceptions import FetchError
from .utils.retry import transport_retrying

if TYPE_CHECKING:
    from types import TracebackType

logger = structlog.get_logger(__name__)

# HTTP status codes
HTTP_OK = 200


@dataclass(frozen=True)
class FetcherConfig:
    """Configuration for document retrieval.

    Attributes:
        timeout: Seconds allowed for one attempt, body included.
        attempts_per_strategy: Maximum attempts on a single strategy.
        max_total_attempts: Attempt budget shared by all strategies.
        backoff_multiplier: Exponential backoff multiplier between retries.
        backoff_max: Longest single backoff sleep.
        headers: Request headers sent with every attempt.
    """

    timeout: float = REQUEST_TIMEOUT_SECONDS
    attempts_per_strategy: int = ATTEMPTS_PER_STRATEGY
    max_total_attempts: int = MAX_TOTAL_ATTEMPTS
    backoff_multiplier: float = BACKOFF_MULTIPLIER
    backoff_max: float = BACKOFF_MAX_SECONDS
    headers: Mapping[str, str] = field(default_factory=lambda: dict(BROWSER_HEADERS))


# =============================================================================
# STRATEGIES
# =============================================================================


@runtime_checkable
class RetrievalStrategy(Protocol):
    """Protocol defining how one route to the origin builds its request."""

    @property
    def name(self) -> str:
        """Short label used in logs and results."""
        ...

    def request_url(self, target: str) -> str:
        """Return the URL to GET in order to obtain `target`."""
        ...


@dataclass(frozen=True)
class DirectStrategy:
    """Request the origin itself."""

    @property
    def name(self) -> str:
        """Strategy label."""
        return "direct"

    def request_url(self, target: str) -> str:
        """The origin URL, unchanged."""
        return target


@dataclass(frozen=True)
class ProxyStrategy:
    """Request the origin through a CORS relay that takes the URL as a suffix.

    Attributes:
        prefix: Relay URL the encoded origin URL is appended to.
    """

    prefix: str

    @property
    def name(self) -> str:
        """Strategy label, derived from the relay host."""
        return f"proxy:{urlparse(self.prefix).netloc}"

    def request_url(self, target: str) -> str:
        """The relay URL with the percent-encoded origin appended."""
        return self.prefix + quote(target, safe="")


@dataclass(frozen=True)
class RelayStrategy:
    """Request a relay endpoint that always serves the market page.

    Attributes:
        relay_url: Full URL of the relay endpoint.
    """

    relay_url: str

    @property
    def name(self) -> str:
        """Strategy label."""
        return "relay"

    def request_url(self, target: str) -> str:  # noqa: ARG002
        """The relay URL; the relay knows its own origin."""
        return self.relay_url


def default_strategies(relay_url: str | None = None) -> list[RetrievalStrategy]:
    """Build the default strategy order.

    Args:
        relay_url: Optional relay endpoint, tried first when given.

    Returns:
        Relay (if any), then direct, then each public CORS relay.
    """
    strategies: list[RetrievalStrategy] = []
    if relay_url:
        strategies.append(RelayStrategy(relay_url))
    strategies.append(DirectStrategy())
    strategies.extend(ProxyStrategy(prefix) for prefix in PROXY_PREFIXES)
    return strategies


# =============================================================================
# RESULTS
# =============================================================================


@dataclass(frozen=True)
class FetchSuccess:
    """A strategy returned an acceptable document.

    Attributes:
        body: Raw HTML of the market page.
        strategy: Name of the strategy that succeeded.
        attempts: Attempts spent, across all strategies.
    """

    body: str
    strategy: str
    attempts: int
    ok: Literal[True] = True


@dataclass(frozen=True)
class FetchExhausted:
    """Every strategy failed or the attempt budget ran out.

    Attributes:
        last_error: Description of the last failure.
        last_status: HTTP status of the last failure, if a response arrived.
        attempts: Attempts spent, across all strategies.
    """

    last_error: str
    last_status: int | None
    attempts: int
    ok: Literal[False] = False


FetchResult = FetchSuccess | FetchExhausted


# =============================================================================
# RETRIEVER
# =============================================================================


class DocumentRetriever:
    """Fetch the market page through the first strategy that works.

    Features:
    - Strategies tried in priority order
    - Per-attempt timeout covering connect, headers and body
    - Exponential backoff retry on transport errors within a strategy
    - Attempt budget shared by all strategies
    - Marker check rejecting interstitial or error pages served with 200

    Example:
        async with DocumentRetriever(default_strategies()) as retriever:
            result = await retriever.retrieve()
    """

    def __init__(
        self,
        strategies: Sequence[RetrievalStrategy] | None = None,
        config: FetcherConfig | None = None,
        marker: str | None = REQUIRED_MARKER,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize DocumentRetriever.

        Args:
            strategies: Strategies in priority order. Uses defaults if not provided.
            config: Optional retrieval configuration. Uses defaults if not provided.
            marker: Substring an accepted body must contain; None accepts any body.
            transport: Optional httpx transport (used by tests to mock the network).
        """
        self._strategies = list(strategies) if strategies is not None else default_strategies()
        self._config = config or FetcherConfig()
        self._marker = marker
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def strategies(self) -> list[RetrievalStrategy]:
        """Strategies in the order they are tried."""
        return list(self._strategies)

    async def __aenter__(self) -> DocumentRetriever:
        """Initialize HTTP client on context entry."""
        self._client = httpx.AsyncClient(
            timeout=self._config.timeout,
            follow_redirects=True,
            headers=dict(self._config.headers),
            transport=self._transport,
        )
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Close HTTP client on context exit."""
        await self.close()

    async def close(self) -> None:
        """Close the HTTP client and release resources."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def retrieve(self, target: str = MARKET_URL) -> FetchResult:
        """Fetch `target` through the first strategy that yields an acceptable body.

        Args:
            target: Origin URL of the document.

        Returns:
            FetchSuccess with the body, or FetchExhausted with the last error.

        Raises:
            RuntimeError: If retriever not initialized (not used as context manager).
        """
        if not self._client:
            msg = "Retriever not initialized. Use as async context manager."
            raise RuntimeError(msg)

        attempts = 0
        last_error = "no retrieval strategies configured"
        last_status: int | None = None

        for strategy in self._strategies:
            remaining = self._config.max_total_attempts - attempts
            if remaining <= 0:
                logger.warning(
                    "Retrieval attempt budget exhausted",
                    budget=self._config.max_total_attempts,
                    skipped_strategy=strategy.name,
                )
                break

            retrying = transport_retrying(
                min(self._config.attempts_per_strategy, remaining),
                self._config.backoff_multiplier,
                self._config.backoff_max,
            )
            try:
                async for attempt in retrying:
                    with attempt:
                        attempts += 1
                        body = await self._attempt(strategy, target)
            except FetchError as e:
                last_error, last_status = str(e), e.status_code
                logger.warning("Retrieval strategy rejected", strategy=strategy.name, error=str(e))
                continue
            except (httpx.HTTPError, TimeoutError) as e:
                last_error = f"{strategy.name}: {type(e).__name__}: {e}"
                last_status = None
                logger.warning("Retrieval strategy failed", strategy=strategy.name, error=repr(e))
                continue

            logger.info("Document retrieved", strategy=strategy.name, attempts=attempts)
            return FetchSuccess(body=body, strategy=strategy.name, attempts=attempts)

        return FetchExhausted(last_error=last_error, last_status=last_status, attempts=attempts)

    async def _attempt(self, strategy: RetrievalStrategy, target: str) -> str:
        """Run one bounded request and validate the response.

        Args:
            strategy: Strategy building the request.
            target: Origin URL of the document.

        Returns:
            The response body.

        Raises:
            FetchError: On a non-200 status or a body missing the marker.
        """
        url = strategy.request_url(target)
        async with asyncio.timeout(self._config.timeout):
            response = await self._client.get(url)  # type: ignore[union-attr]
            body = response.text

        if response.status_code != HTTP_OK:
            raise FetchError(url, f"HTTP {response.status_code}", status_code=response.status_code)
        if self._marker and self._marker not in body:
            msg = f"response does not contain {self._marker!r}"
            raise FetchError(url, msg, status_code=response.status_code)
        return body
