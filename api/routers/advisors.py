"""Advisors API router."""

from typing import Optional

from fastapi import APIRouter, HTTPException, Query, Request

from api.config import get_settings
from api.models.schemas import CountsResponse, PageResponse
from api.routers.errors import filter_params, http_error
from api.services.advisor_query import AdvisorQueryService
from api.services.fetchers import ServicePageFetcher
from src.exceptions import MarketplaceError
from src.filters.filter_state import AdvisorFilterState

router = APIRouter()


@router.get("", response_model=PageResponse)
async def list_advisors(
    request: Request,
    page_size: Optional[int] = Query(None, ge=1, description="Results per page"),
    cursor: Optional[str] = Query(None, description="Cursor returned with the previous page"),
):
    """
    List advisors matching the filters, newest first.

    Filter parameters: search, status, commission_tier, country (comma
    separated); is_verified; currency; min_commission_rate,
    max_commission_rate.
    """
    settings = get_settings()
    size = min(page_size or settings.default_page_size, settings.max_page_size)
    try:
        filters = AdvisorFilterState.from_query_params(
            filter_params(request.query_params, ("page_size", "cursor"))
        )
        page = await ServicePageFetcher(AdvisorQueryService()).fetch_page(filters, size, cursor)
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
async def advisor_counts(
    group_by: str = Query("status", description="Grouping field: status or commission_tier"),
):
    """Get advisor counts per status or commission tier."""
    try:
        counts = AdvisorQueryService().fetch_counts(group_by)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"group_by": group_by, "counts": counts, "total": sum(counts.values())}
