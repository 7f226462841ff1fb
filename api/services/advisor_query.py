"""Advisor queries."""

from api.services.paged_query import PagedQueryService
from api.services.query_builder import QueryBuilder
from src.database.schema import ADVISOR_COLUMNS
from src.filters.filter_state import AdvisorFilterState
from src.listings.types import AdvisorStatus, CommissionTier

SEARCH_COLUMNS = ["name", "email", "id"]


def apply_advisor_filters(builder: QueryBuilder, filter_state: AdvisorFilterState) -> QueryBuilder:
    """Translate an advisor filter state into WHERE conditions."""
    builder.where_search(SEARCH_COLUMNS, filter_state.search)
    builder.where_in("status", [s.value for s in filter_state.status])
    builder.where_in("commission_tier", [t.value for t in filter_state.commission_tier])
    builder.where_in("country", list(filter_state.country))
    builder.where_bool("is_verified", filter_state.is_verified.as_bool())
    if filter_state.currency:
        builder.where_equal("currency", filter_state.currency)
    rate = filter_state.commission_rate
    builder.where_range("commission_rate", rate.min, rate.max)
    return builder


class AdvisorQueryService(PagedQueryService):
    """Service for advisor search and counts."""

    table = "advisors"
    columns = ADVISOR_COLUMNS
    group_fields = {
        "status": AdvisorStatus,
        "commission_tier": CommissionTier,
    }

    def apply_filters(self, builder: QueryBuilder, filter_state: AdvisorFilterState) -> QueryBuilder:
        return apply_advisor_filters(builder, filter_state)

    def empty_filter(self) -> AdvisorFilterState:
        return AdvisorFilterState()
