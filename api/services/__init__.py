"""API services."""

from api.services.database import get_db, set_db, DatabaseService
from api.services.listing_query import ListingQueryService
from api.services.advisor_query import AdvisorQueryService
from api.services.fetchers import ServicePageFetcher

__all__ = [
    "get_db",
    "set_db",
    "DatabaseService",
    "ListingQueryService",
    "AdvisorQueryService",
    "ServicePageFetcher",
]
