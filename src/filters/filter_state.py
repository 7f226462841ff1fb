"""Filter state for the listings and advisors consoles.

A filter state is an immutable value describing zero or more predicates.
Every edit produces a new value, so the committed copy that drives data
fetches and the draft copy edited in the filter panel never share state.

Field kinds:
- set fields: empty means no constraint, members are OR-combined
- tri-state fields: UNSET, INCLUDE (flag must be true), EXCLUDE (flag must be false)
- location: country -> state -> city, each a refinement of the previous
- ranges: optional lower/upper bounds, lower <= upper when both are present
"""

from dataclasses import dataclass, field, fields, replace
from datetime import date, datetime
from enum import Enum
from typing import Any, ClassVar, Dict, FrozenSet, Optional, Tuple, Type
import math

from src.exceptions import InvalidFilterError
from src.listings.types import (
    ListingType,
    ListingStatus,
    ListingPlan,
    AdvisorStatus,
    CommissionTier,
    parse_enum,
)
from config.constants import COMMISSION_RATE_MIN, COMMISSION_RATE_MAX


class TriState(str, Enum):
    """Three-way boolean filter."""
    UNSET = "unset"
    INCLUDE = "include"
    EXCLUDE = "exclude"

    @classmethod
    def coerce(cls, value: Any) -> "TriState":
        """Convert a bool, None, member or member value into a TriState."""
        if isinstance(value, TriState):
            return value
        if value is None:
            return cls.UNSET
        if isinstance(value, bool):
            return cls.INCLUDE if value else cls.EXCLUDE
        if isinstance(value, str):
            lowered = value.strip().lower()
            if lowered in ("true", "yes", "1"):
                return cls.INCLUDE
            if lowered in ("false", "no", "0"):
                return cls.EXCLUDE
        return parse_enum(cls, value)

    def as_bool(self) -> Optional[bool]:
        """The flag value this state constrains to, or None when unset."""
        if self is TriState.INCLUDE:
            return True
        if self is TriState.EXCLUDE:
            return False
        return None


# =============================================================================
# Compound Field Values
# =============================================================================

@dataclass(frozen=True)
class Location:
    """Country / state / city refinement chain."""
    country: Optional[str] = None
    state: Optional[str] = None
    city: Optional[str] = None

    PARTS: ClassVar[Tuple[str, ...]] = ("country", "state", "city")

    @property
    def is_set(self) -> bool:
        return any(getattr(self, part) for part in self.PARTS)

    def with_part(self, part: str, value: Optional[str]) -> "Location":
        """
        Set one part of the location, clearing the parts that depend on it.

        Changing the country clears state and city; changing the state
        clears city. Re-selecting the current value keeps the dependents.

        Args:
            part: "country", "state" or "city".
            value: New value, or None/"" to clear the part.

        Returns:
            New Location.
        """
        if part not in self.PARTS:
            raise ValueError(f"Unknown location part: {part}")

        value = value.strip() if isinstance(value, str) else value
        value = value or None

        if getattr(self, part) == value:
            return self

        if part == "country":
            return Location(country=value)
        if part == "state":
            return Location(country=self.country, state=value)
        return replace(self, city=value)

    def to_dict(self) -> Dict[str, str]:
        return {part: getattr(self, part) for part in self.PARTS if getattr(self, part)}


@dataclass(frozen=True)
class PriceRange:
    """Numeric range with optional bounds (also used for percentages)."""
    min: Optional[float] = None
    max: Optional[float] = None

    BOUNDS: ClassVar[Dict[str, str]] = {"min": "min", "max": "max"}

    @property
    def is_set(self) -> bool:
        return self.min is not None or self.max is not None

    @property
    def is_inverted(self) -> bool:
        return self.min is not None and self.max is not None and self.min > self.max

    @property
    def lower(self) -> Optional[float]:
        return self.min

    @property
    def upper(self) -> Optional[float]:
        return self.max

    def with_bound(self, bound: str, value: Optional[float]) -> "PriceRange":
        return replace(self, **{self.BOUNDS[bound]: value})

    def to_dict(self) -> Dict[str, float]:
        result = {}
        if self.min is not None:
            result["min"] = self.min
        if self.max is not None:
            result["max"] = self.max
        return result


@dataclass(frozen=True)
class DateRange:
    """Date range with optional inclusive bounds."""
    start: Optional[date] = None
    end: Optional[date] = None

    # Bound names used by callers ("from" is a keyword, hence start/end attributes)
    BOUNDS: ClassVar[Dict[str, str]] = {"from": "start", "to": "end"}

    @property
    def is_set(self) -> bool:
        return self.start is not None or self.end is not None

    @property
    def is_inverted(self) -> bool:
        return self.start is not None and self.end is not None and self.start > self.end

    @property
    def lower(self) -> Optional[date]:
        return self.start

    @property
    def upper(self) -> Optional[date]:
        return self.end

    def with_bound(self, bound: str, value: Optional[date]) -> "DateRange":
        return replace(self, **{self.BOUNDS[bound]: value})

    def to_dict(self) -> Dict[str, str]:
        result = {}
        if self.start is not None:
            result["from"] = self.start.isoformat()
        if self.end is not None:
            result["to"] = self.end.isoformat()
        return result


@dataclass(frozen=True)
class RangeSpec:
    """Describes how a range field is validated and serialised."""
    kind: str  # "number" or "date"
    param_lower: str
    param_upper: str
    minimum: Optional[float] = None
    maximum: Optional[float] = None


# =============================================================================
# Value Parsing (shared by reducer and boundary parsing)
# =============================================================================

def parse_number(value: Any, spec: RangeSpec) -> float:
    """
    Parse a numeric range bound.

    Raises:
        ValueError: If the value is not a finite number within the range limits.
    """
    if isinstance(value, bool):
        raise ValueError("Boolean is not a number")
    if isinstance(value, str):
        value = value.strip().replace(",", "")
    number = float(value)
    if math.isnan(number) or math.isinf(number):
        raise ValueError("Range bound must be finite")
    if spec.minimum is not None and number < spec.minimum:
        raise ValueError(f"Range bound must be at least {spec.minimum}")
    if spec.maximum is not None and number > spec.maximum:
        raise ValueError(f"Range bound cannot exceed {spec.maximum}")
    return number


def parse_date(value: Any) -> date:
    """
    Parse a date range bound from a date, datetime or ISO string.

    Raises:
        ValueError: If the value is not a date.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return date.fromisoformat(value.strip()[:10])
    raise ValueError(f"{value!r} is not a date")


def parse_range_bound(value: Any, spec: RangeSpec):
    """Parse a range bound according to its RangeSpec."""
    if spec.kind == "date":
        return parse_date(value)
    return parse_number(value, spec)


def normalize_member(value: Any, enum_cls: Optional[Type[Enum]], upper: bool = False):
    if enum_cls is not None:
        return parse_enum(enum_cls, value)
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"{value!r} is not a valid identifier")
    if "," in value:
        raise ValueError(f"{value!r} must not contain a comma")
    return value.strip().upper() if upper else value.strip()


def _split(value: Any) -> list:
    if value is None:
        return []
    if isinstance(value, str):
        return [v for v in (part.strip() for part in value.split(",")) if v]
    return list(value)


# =============================================================================
# Filter States
# =============================================================================

class FilterStateBase:
    """Shared behaviour for filter states.

    Subclasses are frozen dataclasses and describe their fields through the
    class-level field tables below. The tables form a closed set: anything not named
    in them is rejected by ``from_dict`` and ``from_query_params``.
    """

    SET_FIELDS: ClassVar[Dict[str, Optional[Type[Enum]]]] = {}
    UPPERCASE_SET_FIELDS: ClassVar[Tuple[str, ...]] = ()
    TRI_STATE_FIELDS: ClassVar[Tuple[str, ...]] = ()
    SCALAR_FIELDS: ClassVar[Tuple[str, ...]] = ()
    RANGE_FIELDS: ClassVar[Dict[str, RangeSpec]] = {}
    HAS_LOCATION: ClassVar[bool] = False

    @classmethod
    def field_names(cls) -> Tuple[str, ...]:
        return tuple(f.name for f in fields(cls))

    def with_changes(self, **changes):
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)

    def with_search_only(self):
        """Return an empty filter state carrying over only the search text."""
        return type(self)(search=self.search)

    @property
    def is_empty(self) -> bool:
        """True when no predicate other than search is active."""
        return self == self.with_search_only()

    @property
    def active_filter_count(self) -> int:
        from src.filters.counter import active_filter_count

        return active_filter_count(self)

    # -------------------------------------------------------------------------
    # Dictionary form (presets, JSON payloads)
    # -------------------------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-friendly dictionary containing only active fields."""
        result: Dict[str, Any] = {}
        if self.search:
            result["search"] = self.search

        for name, enum_cls in self.SET_FIELDS.items():
            members = getattr(self, name)
            if members:
                values = [m.value if enum_cls else m for m in members]
                result[name] = sorted(values)

        for name in self.TRI_STATE_FIELDS:
            value = getattr(self, name)
            if value is not TriState.UNSET:
                result[name] = value.value

        for name in self.SCALAR_FIELDS:
            value = getattr(self, name)
            if value is not None:
                result[name] = value

        if self.HAS_LOCATION and self.location.is_set:
            result["location"] = self.location.to_dict()

        for name in self.RANGE_FIELDS:
            rng = getattr(self, name)
            if rng.is_set:
                result[name] = rng.to_dict()

        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]):
        """
        Create a filter state from a dictionary.

        Args:
            data: Dictionary in ``to_dict`` form.

        Returns:
            New filter state.

        Raises:
            InvalidFilterError: On unknown keys, unknown members or invalid ranges.
        """
        if not isinstance(data, dict):
            raise InvalidFilterError("Filter payload must be an object")

        unknown = set(data) - set(cls.field_names())
        if unknown:
            raise InvalidFilterError(f"Unknown filter fields: {', '.join(sorted(unknown))}")

        values: Dict[str, Any] = {}
        try:
            if data.get("search") is not None:
                search = str(data["search"]).strip()
                values["search"] = search or None

            for name, enum_cls in cls.SET_FIELDS.items():
                if name in data:
                    upper = name in cls.UPPERCASE_SET_FIELDS
                    values[name] = frozenset(
                        normalize_member(v, enum_cls, upper) for v in _split(data[name])
                    )

            for name in cls.TRI_STATE_FIELDS:
                if name in data:
                    values[name] = TriState.coerce(data[name])

            for name in cls.SCALAR_FIELDS:
                if data.get(name) is not None:
                    values[name] = str(data[name]).strip().upper() or None

            if cls.HAS_LOCATION and data.get("location") is not None:
                values["location"] = _location_from_dict(data["location"])

            for name, spec in cls.RANGE_FIELDS.items():
                if data.get(name) is not None:
                    values[name] = _range_from_dict(cls, name, spec, data[name])
        except (ValueError, TypeError) as e:
            raise InvalidFilterError(str(e)) from e

        return cls(**values)

    # -------------------------------------------------------------------------
    # Flat query parameter form (HTTP API)
    # -------------------------------------------------------------------------

    def to_query_params(self) -> Dict[str, str]:
        """Convert to flat, URL-friendly parameters."""
        params: Dict[str, str] = {}
        data = self.to_dict()

        if "search" in data:
            params["search"] = data["search"]
        for name in self.SET_FIELDS:
            if name in data:
                params[name] = ",".join(data[name])
        for name in self.TRI_STATE_FIELDS:
            if name in data:
                params[name] = data[name]
        for name in self.SCALAR_FIELDS:
            if name in data:
                params[name] = data[name]
        if "location" in data:
            params.update(data["location"])
        for name, spec in self.RANGE_FIELDS.items():
            rng = getattr(self, name)
            if rng.lower is not None:
                params[spec.param_lower] = _format_bound(rng.lower)
            if rng.upper is not None:
                params[spec.param_upper] = _format_bound(rng.upper)

        return params

    @classmethod
    def query_param_names(cls) -> Tuple[str, ...]:
        names = ["search", *cls.SET_FIELDS, *cls.TRI_STATE_FIELDS, *cls.SCALAR_FIELDS]
        if cls.HAS_LOCATION:
            names.extend(Location.PARTS)
        for spec in cls.RANGE_FIELDS.values():
            names.extend([spec.param_lower, spec.param_upper])
        return tuple(names)

    @classmethod
    def from_query_params(cls, params: Dict[str, Any]):
        """
        Create a filter state from flat query parameters.

        Raises:
            InvalidFilterError: On unknown parameters or invalid values.
        """
        unknown = set(params) - set(cls.query_param_names())
        if unknown:
            raise InvalidFilterError(f"Unknown filter parameters: {', '.join(sorted(unknown))}")

        data: Dict[str, Any] = {}
        for name in ("search", *cls.SET_FIELDS, *cls.TRI_STATE_FIELDS, *cls.SCALAR_FIELDS):
            if params.get(name) not in (None, ""):
                data[name] = params[name]

        if cls.HAS_LOCATION:
            location = {part: params[part] for part in Location.PARTS if params.get(part)}
            if location:
                data["location"] = location

        for name, spec in cls.RANGE_FIELDS.items():
            bounds = {}
            labels = list(cls._range_class(name).BOUNDS)
            if params.get(spec.param_lower) not in (None, ""):
                bounds[labels[0]] = params[spec.param_lower]
            if params.get(spec.param_upper) not in (None, ""):
                bounds[labels[1]] = params[spec.param_upper]
            if bounds:
                data[name] = bounds

        return cls.from_dict(data)

    @classmethod
    def _range_class(cls, name: str):
        return DateRange if cls.RANGE_FIELDS[name].kind == "date" else PriceRange

    # -------------------------------------------------------------------------
    # Display
    # -------------------------------------------------------------------------

    def summary(self) -> str:
        """Get a human-readable summary of active filters."""
        parts = []
        data = self.to_dict()
        data.pop("search", None)

        for name, value in data.items():
            label = name.replace("_", " ").capitalize()
            if isinstance(value, list):
                if len(value) <= 3:
                    parts.append(f"{label}: {', '.join(value)}")
                else:
                    parts.append(f"{label}: {len(value)} selected")
            elif isinstance(value, dict):
                rendered = ", ".join(f"{k} {v}" for k, v in value.items())
                parts.append(f"{label}: {rendered}")
            else:
                parts.append(f"{label}: {value}")

        return " | ".join(parts) if parts else "All records (no filters)"


@dataclass(frozen=True)
class ListingFilterState(FilterStateBase):
    """Filters for the listings table."""

    search: Optional[str] = None
    type: FrozenSet[ListingType] = frozenset()
    status: FrozenSet[ListingStatus] = frozenset()
    industries: FrozenSet[str] = frozenset()
    plan: FrozenSet[ListingPlan] = frozenset()
    is_featured: TriState = TriState.UNSET
    is_verified: TriState = TriState.UNSET
    location: Location = field(default_factory=Location)
    price_range: PriceRange = field(default_factory=PriceRange)
    date_range: DateRange = field(default_factory=DateRange)

    SET_FIELDS: ClassVar[Dict[str, Optional[Type[Enum]]]] = {
        "type": ListingType,
        "status": ListingStatus,
        "industries": None,
        "plan": ListingPlan,
    }
    TRI_STATE_FIELDS: ClassVar[Tuple[str, ...]] = ("is_featured", "is_verified")
    RANGE_FIELDS: ClassVar[Dict[str, RangeSpec]] = {
        "price_range": RangeSpec("number", "min_price", "max_price", minimum=0.0),
        "date_range": RangeSpec("date", "date_from", "date_to"),
    }
    HAS_LOCATION: ClassVar[bool] = True


@dataclass(frozen=True)
class AdvisorFilterState(FilterStateBase):
    """Filters for the advisors table."""

    search: Optional[str] = None
    status: FrozenSet[AdvisorStatus] = frozenset()
    commission_tier: FrozenSet[CommissionTier] = frozenset()
    country: FrozenSet[str] = frozenset()
    is_verified: TriState = TriState.UNSET
    currency: Optional[str] = None
    commission_rate: PriceRange = field(default_factory=PriceRange)

    SET_FIELDS: ClassVar[Dict[str, Optional[Type[Enum]]]] = {
        "status": AdvisorStatus,
        "commission_tier": CommissionTier,
        "country": None,
    }
    UPPERCASE_SET_FIELDS: ClassVar[Tuple[str, ...]] = ("country",)
    TRI_STATE_FIELDS: ClassVar[Tuple[str, ...]] = ("is_verified",)
    SCALAR_FIELDS: ClassVar[Tuple[str, ...]] = ("currency",)
    RANGE_FIELDS: ClassVar[Dict[str, RangeSpec]] = {
        "commission_rate": RangeSpec(
            "number", "min_commission_rate", "max_commission_rate",
            minimum=COMMISSION_RATE_MIN, maximum=COMMISSION_RATE_MAX,
        ),
    }


# =============================================================================
# Helpers
# =============================================================================

def _location_from_dict(data: Dict[str, Any]) -> Location:
    if not isinstance(data, dict):
        raise ValueError("Location must be an object")
    unknown = set(data) - set(Location.PARTS)
    if unknown:
        raise ValueError(f"Unknown location fields: {', '.join(sorted(unknown))}")

    location = Location()
    for part in Location.PARTS:
        value = data.get(part)
        if value:
            location = location.with_part(part, str(value))
    if location.state and not location.country:
        raise ValueError("Location state requires a country")
    if location.city and not location.state:
        raise ValueError("Location city requires a state")
    return location


def _range_from_dict(cls, name: str, spec: RangeSpec, data: Dict[str, Any]):
    range_cls = cls._range_class(name)
    if not isinstance(data, dict):
        raise ValueError(f"{name} must be an object")
    unknown = set(data) - set(range_cls.BOUNDS)
    if unknown:
        raise ValueError(f"Unknown {name} bounds: {', '.join(sorted(unknown))}")

    rng = range_cls()
    for bound in range_cls.BOUNDS:
        if data.get(bound) is not None:
            rng = rng.with_bound(bound, parse_range_bound(data[bound], spec))
    if rng.is_inverted:
        raise ValueError(f"{name} lower bound is greater than upper bound")
    return rng


def _format_bound(value) -> str:
    if isinstance(value, date):
        return value.isoformat()
    if float(value).is_integer():
        return str(int(value))
    return str(value)

