"""Dashboard session: one market table, its load cycle and its view state.

A session owns at most one load at a time. Concurrent `refresh()` calls
join the load already in flight; `refresh(force=True)` starts a newer
load and the older one's result is discarded when it lands. Results
arriving after `close()` are discarded as well.

Example:
    async with DocumentRetriever() as retriever:
        session = DashboardSession(retriever_loader(retriever))
        await session.refresh()
        session.select_group("ENERGY")
        rows = session.visible_rows()
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Iterable
from enum import Enum

import structlog

from .config import MARKET_URL
from .fetcher import DocumentRetriever, FetchExhausted, FetchResult, FetchSuccess
from .models.rows import CategorizedRow
from .parser import MarketTableParser
from .taxonomy.resolver import CategoryResolver
from .view import SortDirection, ViewState, visible_industries

logger = structlog.get_logger(__name__)

LOAD_ERROR_MESSAGE = "Failed to load data. Please try again."

Loader = Callable[[], Awaitable[FetchResult]]


class LoadStatus(str, Enum):
    """Where the session is in its load cycle."""

    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    EMPTY = "empty"  # Document fetched, but no rows could be extracted
    FAILED = "failed"


def retriever_loader(retriever: DocumentRetriever, target: str = MARKET_URL) -> Loader:
    """Adapt an open retriever into a session loader."""

    async def load() -> FetchResult:
        return await retriever.retrieve(target)

    return load


def static_loader(html: str, source: str = "file") -> Loader:
    """Loader returning a fixed document, e.g. a saved copy of the market page."""

    async def load() -> FetchResult:
        return FetchSuccess(body=html, strategy=source, attempts=0)

    return load


class DashboardSession:
    """State of one market table view.

    Attributes:
        resolver: Category resolver shared with other views.
        rows: Categorized rows from the latest applied load.
        state: Current selection, filters and sort.
        status: Load cycle status.
        error: User-facing error banner text, or None.
        error_detail: Diagnostic detail for the banner.
        source: Strategy that produced the current rows.
    """

    def __init__(
        self,
        loader: Loader,
        resolver: CategoryResolver | None = None,
        parser: MarketTableParser | None = None,
    ) -> None:
        """Initialize DashboardSession.

        Args:
            loader: Coroutine factory returning a tagged fetch result.
            resolver: Category resolver. A default one is built if not provided.
            parser: Market table parser. A default one is built if not provided.
        """
        self._loader = loader
        self.resolver = resolver or CategoryResolver()
        self.parser = parser or MarketTableParser()
        self.rows: list[CategorizedRow] = []
        self.state = ViewState()
        self.status = LoadStatus.IDLE
        self.error: str | None = None
        self.error_detail: str | None = None
        self.source: str | None = None
        self._generation = 0
        self._inflight: asyncio.Task[None] | None = None
        self._closed = False

    # -------------------------------------------------------------------------
    # Load cycle
    # -------------------------------------------------------------------------

    @property
    def loading(self) -> bool:
        """Whether a load is in flight."""
        return self._inflight is not None and not self._inflight.done()

    @property
    def generation(self) -> int:
        """Token of the most recently started load."""
        return self._generation

    @property
    def closed(self) -> bool:
        """Whether the session has been torn down."""
        return self._closed

    async def refresh(self, force: bool = False) -> LoadStatus:
        """Load the market table, or join the load already in flight.

        Args:
            force: Start a new load even if one is in flight; the older
                load's result will be discarded.

        Returns:
            The status once the awaited load has been applied.

        Raises:
            RuntimeError: If the session is closed.
        """
        if self._closed:
            msg = "Session is closed"
            raise RuntimeError(msg)

        task = self._inflight
        if task is not None and not task.done() and not force:
            logger.debug("Joining in-flight load", generation=self._generation)
        else:
            self._generation += 1
            self.status = LoadStatus.LOADING
            task = asyncio.create_task(self._run(self._generation))
            self._inflight = task

        # wait() leaves the shared load running if this caller is cancelled
        await asyncio.wait({task})
        # Follow forced reloads that superseded the awaited one
        while not self._closed and self._inflight is not None and self._inflight is not task:
            task = self._inflight
            await asyncio.wait({task})
        return self.status

    async def close(self) -> None:
        """Tear the session down, cancelling and discarding any pending load."""
        self._closed = True
        task = self._inflight
        if task is not None and not task.done():
            task.cancel()
            await asyncio.wait({task})
        logger.debug("Session closed", generation=self._generation)

    def dismiss_error(self) -> None:
        """Hide the error banner."""
        self.error = None
        self.error_detail = None

    async def _run(self, generation: int) -> None:
        try:
            result = await self._loader()
        except Exception as e:  # Failures stop at the view boundary
            logger.exception("Load failed", generation=generation)
            result = FetchExhausted(last_error=f"{type(e).__name__}: {e}", last_status=None, attempts=0)

        if self._closed or generation != self._generation:
            logger.info(
                "Discarding stale load",
                generation=generation,
                current=self._generation,
                closed=self._closed,
            )
            return
        self._apply(result)

    def _apply(self, result: FetchResult) -> None:
        if isinstance(result, FetchExhausted):
            self.status = LoadStatus.FAILED
            self.error = LOAD_ERROR_MESSAGE
            self.error_detail = result.last_error
            logger.warning("Market page unavailable", error=result.last_error, attempts=result.attempts)
            return

        extracted = self.parser.extract_rows(result.body)
        self.rows = self.resolver.categorize(extracted)
        self.source = result.strategy
        self.error = None
        self.error_detail = None
        if self.rows:
            self.status = LoadStatus.READY
            logger.info("Market table loaded", rows=len(self.rows), source=result.strategy)
        else:
            self.status = LoadStatus.EMPTY
            logger.warning(
                "No rows extracted from market page",
                source=result.strategy,
                body_length=len(result.body),
            )

    # -------------------------------------------------------------------------
    # View state
    # -------------------------------------------------------------------------

    def select_group(self, group: str | None) -> None:
        """Select a group (None for all industries); clears the sub-group."""
        self.state = self.state.select_group(group)

    def select_sub_group(self, sub_group: str | None) -> None:
        """Select a sub-group within the current group."""
        self.state = self.state.select_sub_group(sub_group)

    def sort_by(self, column: str | None, direction: SortDirection = SortDirection.ASCEND) -> None:
        """Sort the table by a single column."""
        self.state = self.state.sorted_by(column, direction)

    def filter_column(self, column: str, values: Iterable[str] | None) -> None:
        """Restrict a column to the given values."""
        self.state = self.state.with_column_filter(column, values)

    def clear_filters(self) -> None:
        """Drop the group selection and every column filter."""
        self.state = self.state.cleared()

    def visible_rows(self) -> list[CategorizedRow]:
        """Rows visible under the current view state."""
        return visible_industries(self.rows, self.state, self.resolver)

    def sub_groups(self) -> list[str]:
        """Sub-groups of the selected group."""
        if self.state.selected_group is None:
            return []
        return self.resolver.sub_groups_of(self.state.selected_group)

    def count(self, group: str | None = None, sub_group: str | None = None) -> int:
        """Number of loaded rows under a group (or all rows for None)."""
        if group is None:
            return len(self.rows)
        return self.resolver.count_matching(self.rows, group, sub_group)
