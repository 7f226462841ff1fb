"""Async page fetchers backed by the query services.

The services run blocking DuckDB queries, so each fetch runs in a worker
thread. Backend failures surface as ``FetchError``.
"""

import asyncio
from typing import Optional

import duckdb

from api.services.paged_query import PagedQueryService
from config.logging_config import get_logger
from src.exceptions import FetchError
from src.filters.filter_state import FilterStateBase
from src.pagination.page import Page

logger = get_logger("api.fetchers")


class ServicePageFetcher:
    """Adapts a PagedQueryService to the controller's fetcher interface."""

    def __init__(self, service: PagedQueryService):
        self.service = service

    async def fetch_page(
        self,
        filter_state: FilterStateBase,
        page_size: int,
        cursor: Optional[str],
    ) -> Page:
        try:
            return await asyncio.to_thread(self.service.fetch_page, filter_state, page_size, cursor)
        except duckdb.Error as e:
            logger.error(f"Fetching {self.service.table} failed: {e}")
            raise FetchError(f"Could not load {self.service.table}") from e
