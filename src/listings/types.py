"""Enumerations for listings and advisors."""

from enum import Enum


class ListingType(str, Enum):
    """Listing sub-types."""
    BUSINESS = "business"
    FRANCHISE = "franchise"
    STARTUP = "startup"
    INVESTOR = "investor"
    DIGITAL_ASSET = "digital_asset"


class ListingStatus(str, Enum):
    """Listing workflow status."""
    DRAFT = "draft"
    PENDING = "pending"
    PUBLISHED = "published"
    REJECTED = "rejected"
    ARCHIVED = "archived"


class ListingPlan(str, Enum):
    """Subscription tier of a listing."""
    FREE = "free"
    BASIC = "basic"
    ADVANCED = "advanced"
    PREMIUM = "premium"
    PLATINUM = "platinum"


class AdvisorStatus(str, Enum):
    """Account status of an advisor."""
    ACTIVE = "active"
    INACTIVE = "inactive"
    PENDING = "pending"
    VERIFICATION_PENDING = "verification_pending"


class CommissionTier(str, Enum):
    """Advisor commission tier."""
    BRONZE = "bronze"
    SILVER = "silver"
    GOLD = "gold"
    PLATINUM = "platinum"


class DevelopmentStage(str, Enum):
    IDEA = "idea"
    MVP = "mvp"
    PRE_SEED = "pre_seed"
    SEED = "seed"
    SERIES_A = "series_a"
    SERIES_B_PLUS = "series_b_plus"


class InvestorType(str, Enum):
    ANGEL = "angel"
    VENTURE_CAPITAL = "venture_capital"
    PRIVATE_EQUITY = "private_equity"
    FAMILY_OFFICE = "family_office"
    CORPORATE = "corporate"
    INDIVIDUAL = "individual"


class AssetType(str, Enum):
    WEBSITE = "website"
    E_COMMERCE = "e_commerce"
    BLOG = "blog"
    MOBILE_APP = "mobile_app"
    SAAS = "saas"
    ONLINE_COMMUNITY = "online_community"
    DOMAIN_PORTFOLIO = "domain_portfolio"


def parse_enum(enum_cls, value):
    """
    Coerce a raw value into a member of ``enum_cls``.

    Args:
        enum_cls: Enum class to coerce into.
        value: Member, member value, or member name (case-insensitive).

    Returns:
        The matching member.

    Raises:
        ValueError: If no member matches.
    """
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        normalized = value.strip().lower()
        for member in enum_cls:
            if member.value == normalized or member.name.lower() == normalized:
                return member
    raise ValueError(f"{value!r} is not a valid {enum_cls.__name__}")
