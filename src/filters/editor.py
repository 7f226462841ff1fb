"""Filter editor with draft and committed copies.

The filter panel edits a draft. Nothing reaches the result list until the
draft is applied, at which point it becomes the committed filter and the
``on_commit`` callback fires (typically ``ResultPaginationController.commit``).
A callback that returns an awaitable is scheduled as a task on the running
event loop. Search is the exception: it commits immediately.
"""

import asyncio
import inspect
from typing import Any, Callable, Generic, Optional, Type, TypeVar

from config.logging_config import get_logger
from src.filters import reducer
from src.filters.filter_state import FilterStateBase, ListingFilterState

logger = get_logger("filters.editor")

S = TypeVar("S", bound=FilterStateBase)


class FilterEditor(Generic[S]):
    """
    Holds the committed filter and the draft being edited.

    Example (inside a running event loop):
        editor = FilterEditor(on_commit=controller.commit)
        editor.toggle("status", "pending")
        editor.set_range("price_range", "min", 100000)
        editor.apply()
    """

    def __init__(
        self,
        state_cls: Type[S] = ListingFilterState,
        initial_search: Optional[str] = None,
        on_commit: Optional[Callable[[S], Any]] = None,
    ):
        """
        Args:
            state_cls: Filter state class to edit.
            initial_search: Search text to pre-seed both copies with.
            on_commit: Called with the new committed state after every commit.
                Coroutine functions are run as tasks on the running loop.
        """
        seeded = reducer.set_search(state_cls(), initial_search)
        self._committed: S = seeded
        self._draft: S = seeded
        self._on_commit = on_commit
        self._pending_commit: Optional[asyncio.Future] = None

    @property
    def committed(self) -> S:
        return self._committed

    @property
    def draft(self) -> S:
        return self._draft

    @property
    def is_dirty(self) -> bool:
        """True when the draft has edits that were not applied."""
        return self._draft != self._committed

    @property
    def active_filter_count(self) -> int:
        """Badge count for the committed filter."""
        return self._committed.active_filter_count

    @property
    def draft_filter_count(self) -> int:
        return self._draft.active_filter_count

    # =========================================================================
    # Draft edits
    # =========================================================================

    def toggle(self, field_name: str, value: Any) -> S:
        self._draft = reducer.toggle_set_member(self._draft, field_name, value)
        return self._draft

    def set_tri_state(self, field_name: str, value: Any) -> S:
        self._draft = reducer.set_tri_state(self._draft, field_name, value)
        return self._draft

    def set_location(self, part: str, value: Optional[str]) -> S:
        self._draft = reducer.set_location(self._draft, part, value)
        return self._draft

    def set_range(self, field_name: str, bound: str, value: Any) -> S:
        self._draft = reducer.set_range(self._draft, field_name, bound, value)
        return self._draft

    def toggle_currency(self, currency: Optional[str]) -> S:
        self._draft = reducer.toggle_currency(self._draft, currency)
        return self._draft

    def apply_preset(self, preset) -> S:
        """
        Load a preset's filters into the draft, keeping the current search.

        Args:
            preset: FilterPreset (or any object with a ``filters`` state).

        Returns:
            The new draft. Call ``apply()`` to commit it.
        """
        filters = preset.filters
        if not isinstance(filters, type(self._draft)):
            logger.warning(f"Preset '{preset.id}' does not match {type(self._draft).__name__}")
            return self._draft
        self._draft = filters.with_changes(search=self._draft.search)
        return self._draft

    # =========================================================================
    # Commit / revert
    # =========================================================================

    def set_search(self, text: Optional[str]) -> S:
        """Set search on both copies and commit immediately."""
        self._draft = reducer.set_search(self._draft, text)
        committed = reducer.set_search(self._committed, text)
        if committed != self._committed:
            self._commit(committed)
        return self._committed

    def apply(self) -> S:
        """Commit the draft."""
        if self._draft != self._committed:
            logger.debug(f"Applying filters: {self._draft.summary()}")
        self._commit(self._draft)
        return self._committed

    def reset(self, preserve_search: bool = True) -> S:
        """Clear all filters on both copies and commit."""
        cleared = reducer.reset(self._draft, preserve_search=preserve_search)
        self._draft = cleared
        self._commit(cleared)
        return self._committed

    def discard(self) -> S:
        """Revert the draft to the committed filter."""
        self._draft = self._committed
        return self._draft

    def _commit(self, state: S) -> None:
        self._committed = state
        if self._on_commit is None:
            return
        result = self._on_commit(state)
        if inspect.isawaitable(result):
            try:
                asyncio.get_running_loop()
            except RuntimeError:
                if inspect.iscoroutine(result):
                    result.close()
                raise
            self._pending_commit = asyncio.ensure_future(result)
