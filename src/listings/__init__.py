"""Listing and advisor domain types, status workflow and schemas."""

from src.listings.types import (
    AdvisorStatus,
    AssetType,
    CommissionTier,
    DevelopmentStage,
    InvestorType,
    ListingPlan,
    ListingStatus,
    ListingType,
    parse_enum,
)
from src.listings.status import available_transitions, can_transition, ensure_transition
