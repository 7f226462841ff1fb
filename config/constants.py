"""Constants for Marketplace Admin application.

Display labels and option lists shared by the filter layer, the API and the
console scripts. Filter defaults are EMPTY, which means no constraint.
"""

from typing import Dict, List


# =============================================================================
# Display Labels
# =============================================================================

LISTING_TYPE_LABELS: Dict[str, str] = {
    "business": "Business",
    "franchise": "Franchise",
    "startup": "Startup",
    "investor": "Investor",
    "digital_asset": "Digital Asset",
}

LISTING_STATUS_LABELS: Dict[str, str] = {
    "draft": "Draft",
    "pending": "Pending",
    "published": "Published",
    "rejected": "Rejected",
    "archived": "Archived",
}

LISTING_PLAN_LABELS: Dict[str, str] = {
    "free": "Free",
    "basic": "Basic",
    "advanced": "Advanced",
    "premium": "Premium",
    "platinum": "Platinum",
}


# =============================================================================
# Option Lists
# =============================================================================

# Countries offered first in the advisor country filter
POPULAR_COUNTRIES: List[str] = ["US", "IN", "GB", "CA", "AU", "SG", "AE", "JP"]

SUPPORTED_CURRENCIES: List[str] = ["INR", "USD", "EUR", "GBP", "AED", "SGD"]

# Commission rates are percentages
COMMISSION_RATE_MIN = 0.0
COMMISSION_RATE_MAX = 100.0

# Listing validation limits
LISTING_NAME_MIN_LENGTH = 3
LISTING_NAME_MAX_LENGTH = 100
LISTING_DESCRIPTION_MIN_LENGTH = 20
LISTING_MAX_INDUSTRIES = 3


def get_label(labels: Dict[str, str], value: str) -> str:
    """Get display label for a code, falling back to the code itself."""
    return labels.get(value, value)
