"""Pydantic schemas for listing creation.

The ``details`` block is a union discriminated on ``type``; each listing
type carries its own required fields. ``ListingCreate.listing_price()``
derives the single ``price`` value used by the price-range filter.
"""

from datetime import date
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field, field_validator, model_validator

from config.constants import (
    LISTING_DESCRIPTION_MIN_LENGTH,
    LISTING_MAX_INDUSTRIES,
    LISTING_NAME_MAX_LENGTH,
    LISTING_NAME_MIN_LENGTH,
    SUPPORTED_CURRENCIES,
)
from src.listings.types import (
    AssetType,
    DevelopmentStage,
    InvestorType,
    ListingPlan,
    ListingStatus,
    ListingType,
)

MIN_ESTABLISHED_YEAR = 1900


def slugify(name: str) -> str:
    """Lowercase, hyphen-separated form of a listing name."""
    return "-".join("".join(c if c.isalnum() else " " for c in name.lower()).split())


class Money(BaseModel):
    """Non-negative amount with currency."""
    value: float = Field(..., ge=0)
    currency: str = "INR"

    @field_validator("currency")
    @classmethod
    def check_currency(cls, v: str) -> str:
        code = v.strip().upper()
        if code not in SUPPORTED_CURRENCIES:
            raise ValueError(f"Unsupported currency: {v}")
        return code


class ListingLocation(BaseModel):
    country: str = Field(..., min_length=2, max_length=2, description="ISO country code")
    state: Optional[str] = None
    city: Optional[str] = None

    @field_validator("country")
    @classmethod
    def upper_country(cls, v: str) -> str:
        return v.upper()

    @model_validator(mode="after")
    def check_refinement(self) -> "ListingLocation":
        if self.city and not self.state:
            raise ValueError("City requires a state")
        return self


# =============================================================================
# Type-specific details
# =============================================================================

class EmployeeCounts(BaseModel):
    count: int = Field(0, ge=0)
    full_time: int = Field(0, ge=0)

    @model_validator(mode="after")
    def check_full_time(self) -> "EmployeeCounts":
        if self.full_time > self.count:
            raise ValueError("Full-time employees cannot exceed total employees")
        return self

    @property
    def part_time(self) -> int:
        return self.count - self.full_time


class BusinessDetails(BaseModel):
    type: Literal["business"] = "business"
    business_type: str = Field(..., min_length=1)
    entity_type: str = Field(..., min_length=1)
    established_year: Optional[int] = None
    employees: EmployeeCounts = Field(default_factory=EmployeeCounts)
    annual_revenue: Optional[Money] = None
    asking_price: Money

    @field_validator("established_year")
    @classmethod
    def check_year(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and not MIN_ESTABLISHED_YEAR <= v <= date.today().year:
            raise ValueError(
                f"Year must be between {MIN_ESTABLISHED_YEAR} and {date.today().year}"
            )
        return v


class FranchiseDetails(BaseModel):
    type: Literal["franchise"] = "franchise"
    franchise_brand: str = Field(..., min_length=1)
    franchise_fee: Money
    total_initial_investment: Money
    royalty_percentage: Optional[float] = Field(None, ge=0, le=100)

    @model_validator(mode="after")
    def check_investment(self) -> "FranchiseDetails":
        if self.franchise_fee.value > self.total_initial_investment.value:
            raise ValueError("Franchise fee cannot exceed total initial investment")
        return self


class StartupDetails(BaseModel):
    type: Literal["startup"] = "startup"
    development_stage: DevelopmentStage
    team_size: int = Field(1, ge=1)
    current_raising_amount: Money
    equity_offered: Optional[float] = Field(None, gt=0, le=100)


class InvestorDetails(BaseModel):
    type: Literal["investor"] = "investor"
    investor_type: InvestorType
    ticket_min: Money
    ticket_max: Money
    preferred_stages: list[DevelopmentStage] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_ticket_range(self) -> "InvestorDetails":
        if self.ticket_min.value > self.ticket_max.value:
            raise ValueError("Minimum investment cannot exceed maximum investment")
        return self


class DigitalAssetDetails(BaseModel):
    type: Literal["digital_asset"] = "digital_asset"
    asset_type: AssetType
    url: Optional[str] = Field(None, pattern=r"^(https?://)?[\w.-]+\.[a-zA-Z]{2,}(/\S*)?$")
    monthly_revenue: Optional[Money] = None
    monthly_traffic: Optional[int] = Field(None, ge=0)
    asking_price: Money


ListingDetails = Annotated[
    Union[BusinessDetails, FranchiseDetails, StartupDetails, InvestorDetails, DigitalAssetDetails],
    Field(discriminator="type"),
]


# =============================================================================
# Listing
# =============================================================================

class ListingCreate(BaseModel):
    """Request body for creating a listing."""
    name: str = Field(..., min_length=LISTING_NAME_MIN_LENGTH, max_length=LISTING_NAME_MAX_LENGTH)
    description: str = Field(..., min_length=LISTING_DESCRIPTION_MIN_LENGTH)
    short_description: Optional[str] = Field(None, max_length=200)
    plan: ListingPlan = ListingPlan.FREE
    status: ListingStatus = ListingStatus.DRAFT
    industries: list[str] = Field(..., min_length=1, max_length=LISTING_MAX_INDUSTRIES)
    location: ListingLocation
    owner_id: Optional[str] = None
    details: ListingDetails

    @field_validator("name", "description")
    @classmethod
    def strip_text(cls, v: str) -> str:
        return v.strip()

    @field_validator("industries")
    @classmethod
    def unique_industries(cls, v: list[str]) -> list[str]:
        cleaned = [i.strip() for i in v if i and i.strip()]
        if len(set(cleaned)) != len(cleaned):
            raise ValueError("Industries must be unique")
        if not cleaned:
            raise ValueError("Select at least one industry")
        return cleaned

    @model_validator(mode="after")
    def check_initial_status(self) -> "ListingCreate":
        if self.status not in (ListingStatus.DRAFT, ListingStatus.PENDING):
            raise ValueError("New listings must start as draft or pending")
        return self

    @property
    def type(self) -> ListingType:
        return ListingType(self.details.type)

    def listing_price(self) -> Optional[Money]:
        """The amount the price-range filter matches for this listing."""
        details = self.details
        if isinstance(details, (BusinessDetails, DigitalAssetDetails)):
            return details.asking_price
        if isinstance(details, FranchiseDetails):
            return details.total_initial_investment
        if isinstance(details, StartupDetails):
            return details.current_raising_amount
        if isinstance(details, InvestorDetails):
            return details.ticket_min
        return None


class StatusUpdate(BaseModel):
    """Request body for a status change."""
    status: ListingStatus
    reason: Optional[str] = Field(None, max_length=500)
    updated_by: Optional[str] = None


class BulkStatusUpdate(StatusUpdate):
    ids: list[str] = Field(..., min_length=1, max_length=100)


class FeatureUpdate(BaseModel):
    featured: bool = True
    duration_days: int = Field(30, ge=1, le=365)
