"""Filter state reducer.

Each function applies a single user action to a draft filter state and
returns the new draft. The functions are total: an unknown field, an unknown
member or an invalid range bound rejects the edit, logs a warning and returns
the draft unchanged.
"""

from typing import Any, Optional

from config.logging_config import get_logger
from src.filters.filter_state import (
    FilterStateBase,
    TriState,
    normalize_member,
    parse_range_bound,
)

logger = get_logger("filters.reducer")


def _valid_name(name: Any, kind: str) -> bool:
    if isinstance(name, str):
        return True
    logger.warning(f"Ignoring edit with non-text {kind} name {name!r}")
    return False


def toggle_set_member(state: FilterStateBase, field_name: str, value: Any) -> FilterStateBase:
    """
    Add ``value`` to a set field, or remove it if already present.

    Args:
        state: Current draft.
        field_name: One of the state's set-valued fields.
        value: Member to toggle (enum member or its string value).

    Returns:
        New draft.
    """
    if not _valid_name(field_name, "field"):
        return state
    if field_name not in state.SET_FIELDS:
        logger.warning(f"Ignoring toggle on unknown set field '{field_name}'")
        return state

    enum_cls = state.SET_FIELDS[field_name]
    try:
        member = normalize_member(value, enum_cls, field_name in state.UPPERCASE_SET_FIELDS)
    except ValueError as e:
        logger.warning(f"Ignoring toggle on '{field_name}': {e}")
        return state

    current = getattr(state, field_name)
    if member in current:
        updated = current - {member}
    else:
        updated = current | {member}
    return state.with_changes(**{field_name: frozenset(updated)})


def set_tri_state(state: FilterStateBase, field_name: str, value: Any) -> FilterStateBase:
    """
    Select a tri-state value; selecting the current value again deselects it.

    Args:
        state: Current draft.
        field_name: One of the state's tri-state fields.
        value: TriState member, bool, or member value.

    Returns:
        New draft.
    """
    if not _valid_name(field_name, "field"):
        return state
    if field_name not in state.TRI_STATE_FIELDS:
        logger.warning(f"Ignoring tri-state edit on unknown field '{field_name}'")
        return state

    try:
        candidate = TriState.coerce(value)
    except ValueError as e:
        logger.warning(f"Ignoring tri-state edit on '{field_name}': {e}")
        return state

    if getattr(state, field_name) == candidate:
        candidate = TriState.UNSET
    return state.with_changes(**{field_name: candidate})


def set_location(state: FilterStateBase, part: str, value: Optional[str]) -> FilterStateBase:
    """
    Set a location part, clearing the parts that depend on it.

    Args:
        state: Current draft.
        part: "country", "state" or "city".
        value: New value, or None to clear.

    Returns:
        New draft.
    """
    if not _valid_name(part, "location part"):
        return state
    if not state.HAS_LOCATION:
        logger.warning(f"{type(state).__name__} has no location filter")
        return state
    if value is not None and not isinstance(value, str):
        logger.warning(f"Ignoring non-text location value {value!r}")
        return state

    try:
        location = state.location.with_part(part, value)
    except ValueError as e:
        logger.warning(f"Ignoring location edit: {e}")
        return state

    if location is state.location:
        return state
    return state.with_changes(location=location)


def set_range(state: FilterStateBase, field_name: str, bound: str, value: Any) -> FilterStateBase:
    """
    Set one bound of a range field.

    Malformed values and edits that would leave the lower bound above the
    upper bound are rejected.

    Args:
        state: Current draft.
        field_name: One of the state's range fields.
        bound: "min"/"max" for numeric ranges, "from"/"to" for date ranges.
        value: New bound, or None/"" to clear it.

    Returns:
        New draft.
    """
    if not (_valid_name(field_name, "field") and _valid_name(bound, "bound")):
        return state
    spec = state.RANGE_FIELDS.get(field_name)
    if spec is None:
        logger.warning(f"Ignoring range edit on unknown field '{field_name}'")
        return state

    current = getattr(state, field_name)
    if bound not in current.BOUNDS:
        logger.warning(f"Ignoring unknown bound '{bound}' for '{field_name}'")
        return state

    if value is None or (isinstance(value, str) and not value.strip()):
        parsed = None
    else:
        try:
            parsed = parse_range_bound(value, spec)
        except (ValueError, TypeError) as e:
            logger.warning(f"Rejected {field_name}.{bound}={value!r}: {e}")
            return state

    updated = current.with_bound(bound, parsed)
    if updated.is_inverted:
        logger.warning(f"Rejected {field_name}.{bound}={value!r}: lower bound would exceed upper bound")
        return state
    return state.with_changes(**{field_name: updated})


def set_search(state: FilterStateBase, text: Optional[str]) -> FilterStateBase:
    """Set the free-text search; blank text clears it."""
    search = text.strip() if isinstance(text, str) else None
    return state.with_changes(search=search or None)


def toggle_currency(state: FilterStateBase, currency: Optional[str]) -> FilterStateBase:
    """Select a currency; selecting the current currency again clears it."""
    if "currency" not in state.SCALAR_FIELDS:
        logger.warning(f"{type(state).__name__} has no currency filter")
        return state

    code = currency.strip().upper() if isinstance(currency, str) else None
    if not code or state.currency == code:
        return state.with_changes(currency=None)
    return state.with_changes(currency=code)


def reset(state: FilterStateBase, preserve_search: bool = True) -> FilterStateBase:
    """
    Clear every filter.

    Args:
        state: Current draft.
        preserve_search: Keep the current search text.

    Returns:
        Fresh filter state of the same kind.
    """
    if preserve_search:
        return state.with_search_only()
    return type(state)()
