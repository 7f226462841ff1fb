"""Result pagination controller.

Owns the displayed records for one result list, the cursor of the next page
and whether more pages exist. State machine::

    IDLE --commit--> LOADING --ok--> IDLE
    LOADING --fail--> ERROR --retry--> LOADING
    IDLE --load_more--> LOADING_MORE --ok--> IDLE
    LOADING_MORE --fail--> ERROR
    ERROR --commit--> LOADING

At most one fetch is outstanding at a time. Every commit bumps a generation
counter; a fetch result is applied only if its generation is still current,
so results for an outdated filter (or after ``close``) are dropped.
"""

import asyncio
from enum import Enum
from typing import Any, Dict, List, Optional

from config.logging_config import get_logger
from src.filters.filter_state import FilterStateBase, ListingFilterState
from src.pagination.notifications import LoggingNotifier, Notifier
from src.pagination.page import Page, PageFetcher

logger = get_logger("pagination.controller")


class ViewState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    LOADING_MORE = "loading_more"
    ERROR = "error"


class FetchMode(str, Enum):
    """How a fetched page is merged into the displayed records."""
    REPLACE = "replace"
    APPEND = "append"


class ResultPaginationController:
    """
    Drives paged fetches for a committed filter state.

    Args:
        fetcher: Object with ``async fetch_page(filter_state, page_size, cursor)``.
        page_size: Records per page.
        notifier: Receives error notifications (defaults to logging).
        initial_filter: Filter in effect before the first commit.
    """

    def __init__(
        self,
        fetcher: PageFetcher,
        page_size: int = 10,
        notifier: Optional[Notifier] = None,
        initial_filter: Optional[FilterStateBase] = None,
    ):
        if page_size < 1:
            raise ValueError("page_size must be at least 1")

        self._fetcher = fetcher
        self._page_size = page_size
        self._notifier = notifier or LoggingNotifier()

        self._filter_state: FilterStateBase = initial_filter or ListingFilterState()
        self._records: List[Dict[str, Any]] = []
        self._cursor: Optional[str] = None
        self._has_more = True
        self._state = ViewState.IDLE
        self._last_error: Optional[BaseException] = None
        self._failed_mode: Optional[FetchMode] = None
        self._loaded = False

        self._generation = 0
        self._inflight: Optional[asyncio.Task] = None
        self._closed = False

    # =========================================================================
    # Read-only view
    # =========================================================================

    @property
    def records(self) -> List[Dict[str, Any]]:
        return list(self._records)

    @property
    def cursor(self) -> Optional[str]:
        return self._cursor

    @property
    def has_more(self) -> bool:
        return self._has_more

    @property
    def state(self) -> ViewState:
        return self._state

    @property
    def filter_state(self) -> FilterStateBase:
        return self._filter_state

    @property
    def page_size(self) -> int:
        return self._page_size

    @property
    def last_error(self) -> Optional[BaseException]:
        return self._last_error

    @property
    def is_closed(self) -> bool:
        return self._closed

    @property
    def is_empty(self) -> bool:
        """True when a load completed and matched nothing."""
        return self._loaded and self._state is ViewState.IDLE and not self._records

    # =========================================================================
    # Triggers
    # =========================================================================

    async def commit(self, filter_state: FilterStateBase) -> None:
        """
        Make ``filter_state`` the active filter and load its first page.

        A fetch already in flight is left to resolve and its result dropped;
        the new first page is requested only after it has resolved.
        """
        if self._closed:
            logger.debug("Ignoring commit on closed controller")
            return

        self._generation += 1
        generation = self._generation
        self._filter_state = filter_state
        self._cursor = None
        self._has_more = True
        self._failed_mode = None
        self._state = ViewState.LOADING

        inflight = self._inflight
        if inflight is not None and not inflight.done():
            logger.debug("Filter changed during fetch; waiting for in-flight request")
            await asyncio.wait({inflight})
            if generation != self._generation or self._closed:
                return

        await self._run(FetchMode.REPLACE, generation)

    def schedule_commit(self, filter_state: FilterStateBase) -> "asyncio.Task[None]":
        """Run ``commit`` as a task on the running loop (editor callback)."""
        return asyncio.get_running_loop().create_task(self.commit(filter_state))

    async def refresh(self) -> None:
        """Reload the first page of the current filter."""
        await self.commit(self._filter_state)

    async def load_more(self) -> None:
        """Fetch the next page; ignored unless idle with more pages available."""
        if self._closed or self._state is not ViewState.IDLE or not self._has_more:
            logger.debug(f"Ignoring load_more (state={self._state.value}, has_more={self._has_more})")
            return

        mode = FetchMode.APPEND if self._cursor is not None else FetchMode.REPLACE
        await self._run(mode, self._generation)

    async def retry(self) -> None:
        """Re-run the operation that failed; ignored unless in ERROR."""
        if self._closed or self._state is not ViewState.ERROR:
            logger.debug(f"Ignoring retry (state={self._state.value})")
            return

        mode = self._failed_mode or FetchMode.REPLACE
        if mode is FetchMode.APPEND and self._cursor is None:
            mode = FetchMode.REPLACE
        await self._run(mode, self._generation)

    def close(self) -> None:
        """Unmount: drop any in-flight result and ignore further triggers."""
        self._closed = True
        self._generation += 1
        logger.debug("Pagination controller closed")

    # =========================================================================
    # Fetch
    # =========================================================================

    async def _run(self, mode: FetchMode, generation: int) -> None:
        self._state = ViewState.LOADING if mode is FetchMode.REPLACE else ViewState.LOADING_MORE
        cursor = None if mode is FetchMode.REPLACE else self._cursor
        filter_state = self._filter_state

        task = asyncio.ensure_future(
            self._fetcher.fetch_page(filter_state, self._page_size, cursor)
        )
        self._inflight = task
        try:
            page = await task
        except asyncio.CancelledError:
            raise
        except Exception as e:
            if self._is_current(generation):
                self._fail(mode, e)
            else:
                logger.debug(f"Discarding stale fetch error: {e}")
            return
        finally:
            if self._inflight is task:
                self._inflight = None

        if not self._is_current(generation):
            logger.debug(f"Discarding stale page of {len(page.records)} records")
            return
        self._apply(mode, page)

    def _is_current(self, generation: int) -> bool:
        return not self._closed and generation == self._generation

    def _apply(self, mode: FetchMode, page: Page) -> None:
        if mode is FetchMode.REPLACE:
            self._records = list(page.records)
        else:
            self._records.extend(page.records)

        self._cursor = page.next_cursor
        self._has_more = page.next_cursor is not None and len(page.records) >= self._page_size
        self._state = ViewState.IDLE
        self._last_error = None
        self._failed_mode = None
        self._loaded = True
        logger.debug(
            f"Loaded {len(page.records)} records ({mode.value}); "
            f"total={len(self._records)}, has_more={self._has_more}"
        )

    def _fail(self, mode: FetchMode, error: Exception) -> None:
        self._state = ViewState.ERROR
        self._last_error = error
        self._failed_mode = mode
        action = "load listings" if mode is FetchMode.REPLACE else "load more listings"
        logger.error(f"Failed to {action}: {error}")
        self._notifier.error(f"Failed to {action}")
