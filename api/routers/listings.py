"""Listings API router."""

import io
from typing import Optional

from fastapi import APIRouter, HTTPException, Query, Request
from fastapi.responses import StreamingResponse

from api.config import get_settings
from api.models.schemas import (
    BulkStatusResponse,
    CountsResponse,
    PageResponse,
    StatusHistoryItem,
    TransitionsResponse,
)
from api.routers.errors import filter_params, http_error
from api.services.fetchers import ServicePageFetcher
from api.services.listing_query import ListingQueryService
from config.logging_config import get_logger
from src.exceptions import MarketplaceError
from src.filters.filter_state import ListingFilterState
from src.listings.schemas import BulkStatusUpdate, FeatureUpdate, ListingCreate, StatusUpdate

router = APIRouter()
logger = get_logger("api.listings")

PAGING_PARAMS = ("page_size", "cursor")


def parse_listing_filters(request: Request, reserved: tuple[str, ...] = PAGING_PARAMS) -> ListingFilterState:
    """Build a ListingFilterState from the request's query string."""
    try:
        return ListingFilterState.from_query_params(filter_params(request.query_params, reserved))
    except MarketplaceError as e:
        raise http_error(e)


@router.get("", response_model=PageResponse)
async def list_listings(
    request: Request,
    page_size: Optional[int] = Query(None, ge=1, description="Results per page"),
    cursor: Optional[str] = Query(None, description="Cursor returned with the previous page"),
):
    """
    List listings matching the filters, newest first.

    Filter parameters: search, type, status, industries, plan (comma
    separated); is_featured, is_verified (include|exclude); country, state,
    city; min_price, max_price; date_from, date_to. Unknown parameters are
    rejected.
    """
    settings = get_settings()
    size = min(page_size or settings.default_page_size, settings.max_page_size)
    filters = parse_listing_filters(request)

    fetcher = ServicePageFetcher(ListingQueryService())
    try:
        page = await fetcher.fetch_page(filters, size, cursor)
    except MarketplaceError as e:
        raise http_error(e)

    return {
        "records": page.records,
        "next_cursor": page.next_cursor,
        "has_more": page.next_cursor is not None,
        "active_filter_count": filters.active_filter_count,
        "filters": filters.to_dict(),
    }


@router.get("/counts", response_model=CountsResponse)
async def listing_counts(
    group_by: str = Query("status", description="Grouping field: status, type or plan"),
):
    """Get listing counts per status, type or plan."""
    try:
        counts = ListingQueryService().fetch_counts(group_by)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"group_by": group_by, "counts": counts, "total": sum(counts.values())}


@router.get("/export")
async def export_listings(
    request: Request,
    max_records: int = Query(10000, ge=1, le=100000, description="Maximum records to export"),
):
    """Export the filtered listings as CSV."""
    filters = parse_listing_filters(request, reserved=("max_records",))
    df = ListingQueryService().export_df(filters, limit=max_records)

    output = io.StringIO()
    df.to_csv(output, index=False)
    output.seek(0)
    logger.info(f"Exported {len(df)} listings ({filters.summary()})")

    return StreamingResponse(
        iter([output.getvalue()]),
        media_type="text/csv",
        headers={"Content-Disposition": "attachment; filename=listings_export.csv"},
    )


@router.post("", status_code=201)
async def create_listing(payload: ListingCreate):
    """Create a listing; details are validated per listing type."""
    return ListingQueryService().create(payload)


@router.post("/bulk-status", response_model=BulkStatusResponse)
async def bulk_update_status(request: BulkStatusUpdate):
    """Change the status of several listings; each id succeeds or fails on its own."""
    results = ListingQueryService().bulk_update_status(
        request.ids, request.status, request.reason, request.updated_by
    )
    succeeded = sum(1 for r in results if r["success"])
    return {"results": results, "succeeded": succeeded, "failed": len(results) - succeeded}


@router.get("/{listing_id}")
async def get_listing(listing_id: str):
    """Get one listing."""
    try:
        return ListingQueryService().get(listing_id)
    except MarketplaceError as e:
        raise http_error(e)


@router.get("/{listing_id}/transitions", response_model=TransitionsResponse)
async def get_transitions(listing_id: str):
    """Get the statuses a listing can move to."""
    service = ListingQueryService()
    try:
        listing = service.get(listing_id)
        transitions = service.transitions(listing_id)
    except MarketplaceError as e:
        raise http_error(e)
    return {"id": listing_id, "status": listing["status"], "transitions": transitions}


@router.get("/{listing_id}/history", response_model=list[StatusHistoryItem])
async def get_status_history(listing_id: str):
    """Get the status history of a listing, newest first."""
    try:
        return ListingQueryService().status_history(listing_id)
    except MarketplaceError as e:
        raise http_error(e)


@router.patch("/{listing_id}/status")
async def update_status(listing_id: str, request: StatusUpdate):
    """Move a listing to a new status."""
    try:
        return ListingQueryService().update_status(
            listing_id, request.status, request.reason, request.updated_by
        )
    except MarketplaceError as e:
        raise http_error(e)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))


@router.post("/{listing_id}/feature")
async def feature_listing(listing_id: str, request: Optional[FeatureUpdate] = None):
    """Feature a listing (default 30 days) or remove the feature."""
    request = request or FeatureUpdate()
    try:
        return ListingQueryService().toggle_feature(listing_id, request.featured, request.duration_days)
    except MarketplaceError as e:
        raise http_error(e)


@router.post("/{listing_id}/verify")
async def verify_listing(listing_id: str, verified: bool = Query(True)):
    """Mark a listing as verified (or unverified)."""
    try:
        return ListingQueryService().verify(listing_id, verified)
    except MarketplaceError as e:
        raise http_error(e)


@router.delete("/{listing_id}", status_code=204)
async def delete_listing(listing_id: str):
    """Soft delete a listing."""
    try:
        ListingQueryService().delete(listing_id)
    except MarketplaceError as e:
        raise http_error(e)
    return None
