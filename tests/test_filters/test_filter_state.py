"""Tests for filter state values and boundary parsing."""

from datetime import date

import pytest

from src.exceptions import InvalidFilterError
from src.filters.filter_state import (
    AdvisorFilterState,
    DateRange,
    ListingFilterState,
    Location,
    PriceRange,
    TriState,
)
from src.listings.types import AdvisorStatus, ListingStatus, ListingType


class TestTriState:
    """Tests for TriState coercion."""

    @pytest.mark.parametrize("value,expected", [
        (True, TriState.INCLUDE),
        (False, TriState.EXCLUDE),
        (None, TriState.UNSET),
        ("include", TriState.INCLUDE),
        ("EXCLUDE", TriState.EXCLUDE),
        ("true", TriState.INCLUDE),
        ("false", TriState.EXCLUDE),
    ])
    def test_coerce(self, value, expected):
        assert TriState.coerce(value) is expected

    def test_coerce_rejects_unknown(self):
        with pytest.raises(ValueError):
            TriState.coerce("maybe")

    def test_as_bool(self):
        assert TriState.INCLUDE.as_bool() is True
        assert TriState.EXCLUDE.as_bool() is False
        assert TriState.UNSET.as_bool() is None


class TestLocation:
    """Tests for the country -> state -> city chain."""

    def test_changing_country_clears_state_and_city(self):
        location = Location("IN", "Karnataka", "Bengaluru")
        assert location.with_part("country", "US") == Location(country="US")

    def test_changing_state_clears_city(self):
        location = Location("IN", "Karnataka", "Bengaluru")
        assert location.with_part("state", "Maharashtra") == Location("IN", "Maharashtra")

    def test_setting_city_keeps_parents(self):
        location = Location("IN", "Karnataka")
        assert location.with_part("city", "Mysuru") == Location("IN", "Karnataka", "Mysuru")

    def test_reselecting_same_country_keeps_dependents(self):
        location = Location("IN", "Karnataka", "Bengaluru")
        assert location.with_part("country", "IN") is location

    def test_blank_clears(self):
        location = Location("IN", "Karnataka", "Bengaluru")
        assert location.with_part("state", "  ") == Location(country="IN")

    def test_unknown_part(self):
        with pytest.raises(ValueError):
            Location().with_part("region", "x")


class TestRanges:
    def test_price_range_inverted(self):
        assert PriceRange(10, 5).is_inverted
        assert not PriceRange(5, 10).is_inverted
        assert not PriceRange(None, 10).is_inverted

    def test_date_range_bounds(self):
        rng = DateRange().with_bound("from", date(2024, 1, 1))
        assert rng.start == date(2024, 1, 1)
        assert rng.to_dict() == {"from": "2024-01-01"}


class TestListingFilterState:
    """Tests for ListingFilterState."""

    def test_default_is_empty(self):
        state = ListingFilterState()
        assert state.is_empty
        assert state.active_filter_count == 0
        assert state.to_dict() == {}
        assert state.summary() == "All records (no filters)"

    def test_search_alone_is_empty(self):
        assert ListingFilterState(search="cafe").is_empty

    def test_immutable(self):
        state = ListingFilterState()
        with pytest.raises(AttributeError):
            state.search = "x"

    def test_to_dict_only_active_fields(self):
        state = ListingFilterState(
            status=frozenset({ListingStatus.PENDING, ListingStatus.DRAFT}),
            is_featured=TriState.INCLUDE,
            price_range=PriceRange(min=1000),
        )
        assert state.to_dict() == {
            "status": ["draft", "pending"],
            "is_featured": "include",
            "price_range": {"min": 1000},
        }

    def test_dict_round_trip(self):
        state = ListingFilterState(
            search="cafe",
            type=frozenset({ListingType.BUSINESS}),
            industries=frozenset({"retail"}),
            location=Location("IN", "Karnataka"),
            date_range=DateRange(date(2024, 1, 1), date(2024, 2, 1)),
        )
        assert ListingFilterState.from_dict(state.to_dict()) == state

    def test_from_dict_rejects_unknown_field(self):
        with pytest.raises(InvalidFilterError, match="colour"):
            ListingFilterState.from_dict({"colour": ["red"]})

    def test_from_dict_rejects_unknown_member(self):
        with pytest.raises(InvalidFilterError):
            ListingFilterState.from_dict({"status": ["deleted"]})

    def test_from_dict_rejects_inverted_range(self):
        with pytest.raises(InvalidFilterError):
            ListingFilterState.from_dict({"price_range": {"min": 10, "max": 5}})

    def test_from_dict_rejects_comma_in_member(self):
        with pytest.raises(InvalidFilterError, match="comma"):
            ListingFilterState.from_dict({"industries": ["food,retail"]})

    def test_from_dict_rejects_city_without_state(self):
        with pytest.raises(InvalidFilterError):
            ListingFilterState.from_dict({"location": {"country": "IN", "city": "Pune"}})

    def test_from_query_params(self):
        state = ListingFilterState.from_query_params({
            "type": "business,startup",
            "is_verified": "exclude",
            "country": "IN",
            "min_price": "100000",
            "date_to": "2024-03-31",
        })
        assert state.type == frozenset({ListingType.BUSINESS, ListingType.STARTUP})
        assert state.is_verified is TriState.EXCLUDE
        assert state.location == Location(country="IN")
        assert state.price_range == PriceRange(min=100000.0)
        assert state.date_range == DateRange(end=date(2024, 3, 31))

    def test_query_params_round_trip(self):
        state = ListingFilterState(
            status=frozenset({ListingStatus.PUBLISHED}),
            is_featured=TriState.INCLUDE,
            location=Location("US", "Texas", "Austin"),
            price_range=PriceRange(100, 2500.5),
        )
        assert ListingFilterState.from_query_params(state.to_query_params()) == state

    def test_from_query_params_rejects_unknown(self):
        with pytest.raises(InvalidFilterError, match="sort"):
            ListingFilterState.from_query_params({"sort": "name"})

    def test_from_query_params_rejects_negative_price(self):
        with pytest.raises(InvalidFilterError):
            ListingFilterState.from_query_params({"min_price": "-5"})

    def test_summary(self):
        state = ListingFilterState(type=frozenset({ListingType.BUSINESS, ListingType.STARTUP}))
        assert state.summary() == "Type: business, startup"


class TestAdvisorFilterState:
    """Tests for AdvisorFilterState."""

    def test_country_codes_uppercased(self):
        state = AdvisorFilterState.from_dict({"country": ["in", "us"]})
        assert state.country == frozenset({"IN", "US"})

    def test_from_query_params(self):
        state = AdvisorFilterState.from_query_params({
            "status": "active",
            "currency": "usd",
            "max_commission_rate": "12.5",
        })
        assert state.status == frozenset({AdvisorStatus.ACTIVE})
        assert state.currency == "USD"
        assert state.commission_rate == PriceRange(max=12.5)

    def test_commission_rate_above_hundred_rejected(self):
        with pytest.raises(InvalidFilterError):
            AdvisorFilterState.from_query_params({"max_commission_rate": "150"})
