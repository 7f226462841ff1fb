"""Active filter count used for the filter badge."""

from src.filters.filter_state import FilterStateBase, TriState


def active_filter_count(state: FilterStateBase) -> int:
    """
    Count of active filters.

    One per non-empty set field, one per tri-state field that is set, one
    per scalar field that is set, one if any location part is set and one
    per range field with at least one bound. Search is not counted.

    Args:
        state: Committed or draft filter state.

    Returns:
        Badge count.
    """
    count = 0
    for name in state.SET_FIELDS:
        if getattr(state, name):
            count += 1
    for name in state.TRI_STATE_FIELDS:
        if getattr(state, name) is not TriState.UNSET:
            count += 1
    for name in state.SCALAR_FIELDS:
        if getattr(state, name) is not None:
            count += 1
    if state.HAS_LOCATION and state.location.is_set:
        count += 1
    for name in state.RANGE_FIELDS:
        if getattr(state, name).is_set:
            count += 1
    return count
