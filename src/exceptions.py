"""Exception hierarchy for Marketplace Admin."""


class MarketplaceError(Exception):
    """Base class for all application errors."""

    pass


class InvalidFilterError(MarketplaceError):
    """Raised when a filter payload contains unknown fields or values."""

    pass


class InvalidCursorError(MarketplaceError):
    """Raised when a pagination cursor cannot be decoded."""

    pass


class ListingNotFoundError(MarketplaceError):
    """Raised when a listing does not exist or has been deleted."""

    def __init__(self, listing_id: str):
        super().__init__(f"Listing not found: {listing_id}")
        self.listing_id = listing_id


class InvalidStatusTransition(MarketplaceError):
    """Raised when a listing status change is not allowed by the workflow."""

    def __init__(self, current: str, target: str):
        super().__init__(f"Cannot move listing from '{current}' to '{target}'")
        self.current = current
        self.target = target


class FetchError(MarketplaceError):
    """Raised by page fetchers when the backend request fails."""

    pass
