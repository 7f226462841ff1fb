"""Listing status workflow.

The transition table gates which status actions the console offers for a
listing and which status changes the API accepts.
"""

from typing import Dict, FrozenSet, List, Union

from src.exceptions import InvalidStatusTransition
from src.listings.types import ListingStatus, parse_enum

StatusLike = Union[ListingStatus, str]

ALLOWED_TRANSITIONS: Dict[ListingStatus, FrozenSet[ListingStatus]] = {
    ListingStatus.DRAFT: frozenset({ListingStatus.PENDING, ListingStatus.ARCHIVED}),
    ListingStatus.PENDING: frozenset({
        ListingStatus.PUBLISHED,
        ListingStatus.REJECTED,
        ListingStatus.DRAFT,
    }),
    ListingStatus.PUBLISHED: frozenset({ListingStatus.REJECTED, ListingStatus.ARCHIVED}),
    ListingStatus.REJECTED: frozenset({ListingStatus.PENDING, ListingStatus.ARCHIVED}),
    ListingStatus.ARCHIVED: frozenset({ListingStatus.DRAFT}),
}

# Statuses whose change must carry a reason shown to the listing owner
REASON_REQUIRED = frozenset({ListingStatus.REJECTED})


def available_transitions(status: StatusLike) -> List[ListingStatus]:
    """Get the statuses reachable from ``status``, in workflow order."""
    current = parse_enum(ListingStatus, status)
    allowed = ALLOWED_TRANSITIONS[current]
    return [s for s in ListingStatus if s in allowed]


def can_transition(current: StatusLike, target: StatusLike) -> bool:
    try:
        current_status = parse_enum(ListingStatus, current)
        target_status = parse_enum(ListingStatus, target)
    except ValueError:
        return False
    return target_status in ALLOWED_TRANSITIONS[current_status]


def ensure_transition(current: StatusLike, target: StatusLike) -> ListingStatus:
    """
    Validate a status change.

    Args:
        current: Current listing status.
        target: Requested status.

    Returns:
        The target status as a ListingStatus.

    Raises:
        InvalidStatusTransition: If the workflow does not allow the change.
    """
    if not can_transition(current, target):
        current_value = getattr(current, "value", current)
        target_value = getattr(target, "value", target)
        raise InvalidStatusTransition(str(current_value), str(target_value))
    return parse_enum(ListingStatus, target)
