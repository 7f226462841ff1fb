"""Tests for the listing status workflow."""

import pytest

from src.exceptions import InvalidStatusTransition
from src.listings.status import (
    ALLOWED_TRANSITIONS,
    available_transitions,
    can_transition,
    ensure_transition,
)
from src.listings.types import ListingStatus


class TestTransitions:
    """Tests for the transition table."""

    def test_every_status_has_transitions(self):
        assert set(ALLOWED_TRANSITIONS) == set(ListingStatus)
        assert all(ALLOWED_TRANSITIONS.values())

    def test_no_self_transitions(self):
        for status, targets in ALLOWED_TRANSITIONS.items():
            assert status not in targets

    def test_available_transitions_in_workflow_order(self):
        assert available_transitions("pending") == [
            ListingStatus.DRAFT, ListingStatus.PUBLISHED, ListingStatus.REJECTED,
        ]

    @pytest.mark.parametrize("current,target,allowed", [
        ("draft", "pending", True),
        ("pending", "published", True),
        ("pending", "rejected", True),
        ("published", "archived", True),
        ("archived", "draft", True),
        ("draft", "published", False),
        ("archived", "published", False),
        ("published", "published", False),
        ("published", "deleted", False),
    ])
    def test_can_transition(self, current, target, allowed):
        assert can_transition(current, target) is allowed

    def test_ensure_transition_returns_target(self):
        assert ensure_transition(ListingStatus.PENDING, "published") is ListingStatus.PUBLISHED

    def test_ensure_transition_rejects(self):
        with pytest.raises(InvalidStatusTransition) as exc_info:
            ensure_transition("draft", ListingStatus.PUBLISHED)
        assert exc_info.value.current == "draft"
        assert exc_info.value.target == "published"
