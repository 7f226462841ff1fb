"""Tests for the draft/committed filter editor."""

import pytest

from src.filters.editor import FilterEditor
from src.filters.filter_state import (
    AdvisorFilterState,
    ListingFilterState,
    Location,
    PriceRange,
    TriState,
)
from src.filters.presets import FilterPreset
from src.listings.types import ListingStatus


@pytest.fixture
def commits():
    return []


@pytest.fixture
def editor(commits):
    return FilterEditor(on_commit=commits.append)


class TestDraftEdits:
    """Draft edits stay out of the committed filter until applied."""

    def test_edits_do_not_commit(self, editor, commits):
        editor.toggle("status", "pending")
        editor.set_tri_state("is_featured", True)
        editor.set_location("country", "IN")
        editor.set_range("price_range", "min", 1000)

        assert editor.committed == ListingFilterState()
        assert editor.is_dirty
        assert editor.draft_filter_count == 4
        assert editor.active_filter_count == 0
        assert commits == []

    def test_apply_commits_draft(self, editor, commits):
        editor.toggle("status", "pending")
        committed = editor.apply()

        assert committed.status == frozenset({ListingStatus.PENDING})
        assert not editor.is_dirty
        assert editor.active_filter_count == 1
        assert commits == [committed]

    def test_apply_without_changes_still_commits(self, editor, commits):
        editor.apply()
        assert commits == [ListingFilterState()]

    def test_discard_reverts_draft(self, editor, commits):
        editor.toggle("status", "pending")
        editor.apply()
        editor.toggle("status", "draft")

        draft = editor.discard()
        assert draft == editor.committed
        assert not editor.is_dirty
        assert len(commits) == 1

    def test_rejected_range_leaves_draft(self, editor):
        editor.set_range("price_range", "min", 500)
        before = editor.draft
        editor.set_range("price_range", "max", 100)
        assert editor.draft == before
        assert editor.draft.price_range == PriceRange(min=500.0)


class TestSearch:
    """Search commits immediately."""

    def test_search_commits(self, editor, commits):
        editor.toggle("status", "pending")
        editor.set_search("cafe")

        assert editor.committed.search == "cafe"
        assert editor.committed.status == frozenset()
        assert editor.draft.search == "cafe"
        assert editor.draft.status == frozenset({ListingStatus.PENDING})
        assert len(commits) == 1

    def test_same_search_does_not_commit(self, commits):
        editor = FilterEditor(initial_search="cafe", on_commit=commits.append)
        editor.set_search(" cafe ")
        assert commits == []

    def test_initial_search_seeds_both_copies(self):
        editor = FilterEditor(initial_search="  bakery ")
        assert editor.committed.search == "bakery"
        assert editor.draft.search == "bakery"
        assert not editor.is_dirty


class TestReset:
    """Tests for reset."""

    def test_reset_clears_both_and_commits(self, editor, commits):
        editor.set_search("cafe")
        editor.toggle("status", "pending")
        editor.apply()
        editor.set_location("country", "IN")

        editor.reset()

        assert editor.committed == ListingFilterState(search="cafe")
        assert editor.draft == editor.committed
        assert commits[-1] == ListingFilterState(search="cafe")

    def test_reset_dropping_search(self, editor):
        editor.set_search("cafe")
        editor.reset(preserve_search=False)
        assert editor.committed == ListingFilterState()

    def test_reset_is_idempotent(self, editor, commits):
        editor.toggle("plan", "free")
        editor.apply()
        first = editor.reset()
        second = editor.reset()
        assert first == second
        assert commits[-1] == commits[-2]


class TestPresets:
    """Tests for apply_preset."""

    def test_preset_loads_into_draft_keeping_search(self, editor):
        editor.set_search("cafe")
        preset = FilterPreset(
            id="featured",
            name="Featured",
            filters=ListingFilterState(is_featured=TriState.INCLUDE, search="ignored"),
        )

        draft = editor.apply_preset(preset)

        assert draft.is_featured is TriState.INCLUDE
        assert draft.search == "cafe"
        assert editor.committed.is_featured is TriState.UNSET

    def test_preset_of_other_state_kind_ignored(self):
        editor = FilterEditor(AdvisorFilterState)
        preset = FilterPreset(id="x", name="X", filters=ListingFilterState(location=Location("IN")))
        assert editor.apply_preset(preset) == AdvisorFilterState()


class TestAdvisorEditor:
    def test_currency_toggle(self):
        editor = FilterEditor(AdvisorFilterState)
        editor.toggle_currency("inr")
        editor.toggle("country", "in")
        committed = editor.apply()
        assert committed.currency == "INR"
        assert committed.country == frozenset({"IN"})
        assert editor.active_filter_count == 2
