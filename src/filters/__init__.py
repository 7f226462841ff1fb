"""Filter state, reducer, editor and presets for the admin consoles."""

from src.filters.filter_state import (
    AdvisorFilterState,
    DateRange,
    FilterStateBase,
    ListingFilterState,
    Location,
    PriceRange,
    TriState,
)
from src.filters.counter import active_filter_count
from src.filters.editor import FilterEditor
from src.filters.presets import FilterPreset, get_builtin_presets, get_preset

__all__ = [
    "AdvisorFilterState",
    "DateRange",
    "FilterStateBase",
    "ListingFilterState",
    "Location",
    "PriceRange",
    "TriState",
    "active_filter_count",
    "FilterEditor",
    "FilterPreset",
    "get_builtin_presets",
    "get_preset",
]
