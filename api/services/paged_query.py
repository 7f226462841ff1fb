"""Shared keyset-paging and grouped-count queries."""

from enum import Enum
from typing import Any, Dict, List, Optional, Type

from api.services.cache import TTLCache, counts_cache
from api.services.database import DatabaseService, get_db
from api.services.query_builder import QueryBuilder
from config.logging_config import get_logger
from src.filters.filter_state import FilterStateBase
from src.pagination.cursor import cursor_for_record, decode_cursor
from src.pagination.page import Page

logger = get_logger("api.paged_query")


class PagedQueryService:
    """
    Base for services that page through a table under a filter state.

    Subclasses set ``table``, ``columns``, ``group_fields`` and implement
    ``apply_filters``. Rows are ordered newest first by (created_at, id).
    """

    table: str = ""
    columns: List[str] = []
    group_fields: Dict[str, Type[Enum]] = {}

    def __init__(self, db: Optional[DatabaseService] = None, cache: Optional[TTLCache] = None):
        self.db = db or get_db()
        self.cache = cache if cache is not None else counts_cache

    def base_query(self) -> QueryBuilder:
        return QueryBuilder().select(self.table, self.columns)

    def apply_filters(self, builder: QueryBuilder, filter_state: FilterStateBase) -> QueryBuilder:
        raise NotImplementedError

    def build_page_query(
        self,
        filter_state: FilterStateBase,
        page_size: int,
        cursor: Optional[str] = None,
    ) -> tuple[str, list]:
        """Build the SQL for one page plus a look-ahead row."""
        builder = self.apply_filters(self.base_query(), filter_state)
        if cursor is not None:
            created_at, record_id = decode_cursor(cursor)
            builder.where_before_key("created_at", created_at, record_id)
        return (
            builder
            .order_by("created_at", desc=True)
            .order_by("id", desc=True)
            .limit(page_size + 1)
            .build()
        )

    def fetch_page(
        self,
        filter_state: FilterStateBase,
        page_size: int,
        cursor: Optional[str] = None,
    ) -> Page:
        """
        Fetch one page of records.

        Args:
            filter_state: Committed filter state.
            page_size: Maximum number of records.
            cursor: Cursor from the previous page, or None for the first page.

        Returns:
            Page whose ``next_cursor`` is None when no further records exist.

        Raises:
            InvalidCursorError: If the cursor is malformed.
        """
        if page_size < 1:
            raise ValueError("page_size must be at least 1")

        query, params = self.build_page_query(filter_state, page_size, cursor)
        rows = [self.to_record(row) for row in self.db.fetch_dicts(query, params)]

        records = rows[:page_size]
        next_cursor = cursor_for_record(records[-1]) if len(rows) > page_size else None
        logger.debug(
            f"{self.table}: fetched {len(records)} records "
            f"(filters={filter_state.active_filter_count}, more={next_cursor is not None})"
        )
        return Page(records=records, next_cursor=next_cursor)

    def count(self, filter_state: FilterStateBase) -> int:
        """Count all records matching the filter."""
        builder = self.apply_filters(self.base_query(), filter_state)
        query, params = builder.build_count()
        result = self.db.fetch_one(query, params)
        return result[0] if result else 0

    def fetch_counts(self, grouping_field: str) -> Dict[str, int]:
        """
        Count records per value of ``grouping_field``.

        Every enum member appears in the result, zero-filled.

        Raises:
            ValueError: If the field cannot be grouped on.
        """
        enum_cls = self.group_fields.get(grouping_field)
        if enum_cls is None:
            raise ValueError(
                f"Cannot group {self.table} by '{grouping_field}'. "
                f"Valid options: {', '.join(self.group_fields)}"
            )

        cache_key = f"{self.table}:counts:{grouping_field}"
        cached = self.cache.get(cache_key)
        if cached is not None:
            return dict(cached)

        builder = self.apply_filters(QueryBuilder().select(self.table, [grouping_field]), self.empty_filter())
        builder.add_expression("COUNT(*)", "count").group_by(grouping_field)
        query, params = builder.build()

        counts = {member.value: 0 for member in enum_cls}
        for value, count in self.db.fetch_all(query, params):
            if value in counts:
                counts[value] = count

        self.cache.set(cache_key, counts)
        return dict(counts)

    def invalidate_counts(self) -> None:
        removed = self.cache.invalidate(f"{self.table}:")
        if removed:
            logger.debug(f"Invalidated {removed} cached {self.table} counts")

    def empty_filter(self) -> FilterStateBase:
        raise NotImplementedError

    def to_record(self, row: Dict[str, Any]) -> Dict[str, Any]:
        return row
