"""Listing queries and the listing status workflow."""

import json
import uuid
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, List, Optional

import pandas as pd

from api.config import get_settings
from api.services.paged_query import PagedQueryService
from api.services.query_builder import QueryBuilder
from config import config
from config.logging_config import get_logger
from src.database.schema import LISTING_COLUMNS
from src.exceptions import InvalidStatusTransition, ListingNotFoundError
from src.filters.filter_state import ListingFilterState
from src.listings.schemas import ListingCreate, slugify
from src.listings.status import REASON_REQUIRED, available_transitions, ensure_transition
from src.listings.types import ListingPlan, ListingStatus, ListingType

logger = get_logger("api.listing_query")

SEARCH_COLUMNS = ["name", "description", "short_description", "id"]

EXPORT_COLUMNS = [
    "id", "type", "name", "status", "plan", "industries", "country", "state",
    "city", "price", "currency", "is_featured", "is_verified", "created_at",
    "published_at",
]


def apply_listing_filters(builder: QueryBuilder, filter_state: ListingFilterState) -> QueryBuilder:
    """
    Translate a listing filter state into WHERE conditions.

    Set fields become IN (...) (industries: any overlap), tri-states become
    boolean equality, empty fields add nothing. Deleted listings are
    always excluded.

    Args:
        builder: Builder with ``select`` already called on ``listings``.
        filter_state: Committed filter state.

    Returns:
        The same builder.
    """
    builder.where_bool("is_deleted", False)
    builder.where_search(SEARCH_COLUMNS, filter_state.search)
    builder.where_in("type", [t.value for t in filter_state.type])
    builder.where_in("status", [s.value for s in filter_state.status])
    builder.where_in("plan", [p.value for p in filter_state.plan])
    builder.where_any_in("industries", list(filter_state.industries))
    builder.where_bool("is_featured", filter_state.is_featured.as_bool())
    builder.where_bool("is_verified", filter_state.is_verified.as_bool())

    location = filter_state.location
    for part in location.PARTS:
        value = getattr(location, part)
        if value:
            builder.where(f"LOWER({part}) = ?", [value.lower()])

    price = filter_state.price_range
    builder.where_range("price", price.min, price.max)
    dates = filter_state.date_range
    builder.where_date_range("created_at", dates.start, dates.end)
    return builder


class ListingQueryService(PagedQueryService):
    """Service for listing search, counts and status changes."""

    table = "listings"
    columns = LISTING_COLUMNS
    group_fields = {
        "status": ListingStatus,
        "type": ListingType,
        "plan": ListingPlan,
    }

    def __init__(self, db=None, cache=None, clock: Optional[Callable[[], datetime]] = None):
        super().__init__(db, cache)
        self._now = clock or datetime.now

    def apply_filters(self, builder: QueryBuilder, filter_state: ListingFilterState) -> QueryBuilder:
        return apply_listing_filters(builder, filter_state)

    def empty_filter(self) -> ListingFilterState:
        return ListingFilterState()

    def to_record(self, row: Dict[str, Any]) -> Dict[str, Any]:
        details = row.get("details")
        if isinstance(details, str):
            row["details"] = json.loads(details)
        row["industries"] = list(row.get("industries") or [])
        return row

    # =========================================================================
    # Reads
    # =========================================================================

    def get(self, listing_id: str) -> Dict[str, Any]:
        """
        Get one listing.

        Raises:
            ListingNotFoundError: If the listing does not exist or is deleted.
        """
        query, params = (
            self.base_query()
            .where_equal("id", listing_id)
            .where_bool("is_deleted", False)
            .build()
        )
        rows = self.db.fetch_dicts(query, params)
        if not rows:
            raise ListingNotFoundError(listing_id)
        return self.to_record(rows[0])

    def status_history(self, listing_id: str) -> List[Dict[str, Any]]:
        """Status changes of a listing, newest first."""
        self.get(listing_id)
        return self.db.fetch_dicts(
            """
            SELECT status, reason, updated_by, created_at
            FROM listing_status_history
            WHERE listing_id = ?
            ORDER BY created_at DESC, id DESC
            """,
            [listing_id],
        )

    def transitions(self, listing_id: str) -> List[str]:
        """Statuses the listing can move to next."""
        listing = self.get(listing_id)
        return [s.value for s in available_transitions(listing["status"])]

    def export_df(self, filter_state: ListingFilterState, limit: int = 10000) -> pd.DataFrame:
        """
        Export the filtered listings as a DataFrame.

        Args:
            filter_state: Filter to export.
            limit: Maximum number of rows.

        Returns:
            DataFrame with EXPORT_COLUMNS, newest first.
        """
        builder = apply_listing_filters(QueryBuilder().select(self.table, EXPORT_COLUMNS), filter_state)
        query, params = (
            builder
            .order_by("created_at", desc=True)
            .order_by("id", desc=True)
            .limit(limit)
            .build()
        )
        df = self.db.fetch_df(query, params)
        if not df.empty:
            df["industries"] = df["industries"].apply(lambda v: ", ".join(v) if v is not None else "")
        return df

    # =========================================================================
    # Writes
    # =========================================================================

    def create(self, payload: ListingCreate) -> Dict[str, Any]:
        """
        Create a listing.

        Args:
            payload: Validated listing payload.

        Returns:
            The stored listing.
        """
        now = self._now()
        listing_id = str(uuid.uuid4())
        price = payload.listing_price()

        row = {column: None for column in LISTING_COLUMNS}
        row.update({
            "id": listing_id,
            "type": payload.type.value,
            "name": payload.name,
            "slug": slugify(payload.name),
            "description": payload.description,
            "short_description": payload.short_description,
            "status": payload.status.value,
            "plan": payload.plan.value,
            "industries": payload.industries,
            "country": payload.location.country,
            "state": payload.location.state,
            "city": payload.location.city,
            "price": price.value if price else None,
            "currency": price.currency if price else config.listings.default_currency,
            "is_featured": False,
            "is_verified": False,
            "is_deleted": False,
            "owner_id": payload.owner_id,
            "details": payload.details.model_dump_json(),
            "created_at": now,
            "updated_at": now,
        })

        placeholders = ", ".join("?" for _ in LISTING_COLUMNS)
        with self.db.transaction() as conn:
            conn.execute(
                f"INSERT INTO listings ({', '.join(LISTING_COLUMNS)}) VALUES ({placeholders})",
                [row[c] for c in LISTING_COLUMNS],
            )
            self._record_status(conn, listing_id, payload.status.value, "Listing created", payload.owner_id, now)

        self.invalidate_counts()
        logger.info(f"Created {payload.type.value} listing {listing_id}")
        return self.get(listing_id)

    def update_status(
        self,
        listing_id: str,
        status: ListingStatus,
        reason: Optional[str] = None,
        updated_by: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Move a listing to a new status.

        Appends a status-history row and sets ``published_at`` the first
        time the listing is published.

        Raises:
            ListingNotFoundError: If the listing does not exist.
            InvalidStatusTransition: If the workflow forbids the change.
            ValueError: If a rejection has no reason.
        """
        listing = self.get(listing_id)
        target = ensure_transition(listing["status"], status)
        if target in REASON_REQUIRED and not (reason and reason.strip()):
            raise ValueError(f"A reason is required to mark a listing as {target.value}")

        now = self._now()
        with self.db.transaction() as conn:
            conn.execute(
                """
                UPDATE listings
                SET status = ?, status_reason = ?, updated_at = ?,
                    published_at = CASE
                        WHEN ? = 'published' AND published_at IS NULL THEN ?
                        ELSE published_at
                    END
                WHERE id = ?
                """,
                [target.value, reason, now, target.value, now, listing_id],
            )
            self._record_status(conn, listing_id, target.value, reason, updated_by, now)

        self.invalidate_counts()
        logger.info(f"Listing {listing_id}: {listing['status']} -> {target.value}")
        return self.get(listing_id)

    def bulk_update_status(
        self,
        listing_ids: List[str],
        status: ListingStatus,
        reason: Optional[str] = None,
        updated_by: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """
        Apply a status change to several listings.

        Returns:
            One outcome per id: ``{"id", "success", "error"}``.
        """
        outcomes = []
        for listing_id in dict.fromkeys(listing_ids):
            try:
                self.update_status(listing_id, status, reason, updated_by)
                outcomes.append({"id": listing_id, "success": True, "error": None})
            except (ListingNotFoundError, InvalidStatusTransition, ValueError) as e:
                outcomes.append({"id": listing_id, "success": False, "error": str(e)})

        failed = sum(1 for o in outcomes if not o["success"])
        if failed:
            target = getattr(status, "value", status)
            logger.warning(f"Bulk status change to {target}: {failed}/{len(outcomes)} failed")
        return outcomes

    def toggle_feature(
        self,
        listing_id: str,
        featured: bool = True,
        duration_days: Optional[int] = None,
    ) -> Dict[str, Any]:
        """Feature a listing for ``duration_days`` (default from settings) or unfeature it."""
        self.get(listing_id)
        now = self._now()
        if featured:
            days = duration_days or get_settings().feature_duration_days
            featured_until = now + timedelta(days=days)
        else:
            featured_until = None

        self.db.execute(
            "UPDATE listings SET is_featured = ?, featured_until = ?, updated_at = ? WHERE id = ?",
            [featured, featured_until, now, listing_id],
        )
        self.invalidate_counts()
        return self.get(listing_id)

    def verify(self, listing_id: str, verified: bool = True) -> Dict[str, Any]:
        self.get(listing_id)
        self.db.execute(
            "UPDATE listings SET is_verified = ?, updated_at = ? WHERE id = ?",
            [verified, self._now(), listing_id],
        )
        self.invalidate_counts()
        return self.get(listing_id)

    def delete(self, listing_id: str) -> None:
        """Soft delete a listing."""
        self.get(listing_id)
        self.db.execute(
            "UPDATE listings SET is_deleted = TRUE, updated_at = ? WHERE id = ?",
            [self._now(), listing_id],
        )
        self.invalidate_counts()
        logger.info(f"Deleted listing {listing_id}")

    @staticmethod
    def _record_status(conn, listing_id, status, reason, updated_by, created_at) -> None:
        conn.execute(
            """
            INSERT INTO listing_status_history (listing_id, status, reason, updated_by, created_at)
            VALUES (?, ?, ?, ?, ?)
            """,
            [listing_id, status, reason, updated_by, created_at],
        )
