"""
Order lifecycle state machine.

pending -> assigned -> picked_up -> delivered

The first step happens only through assignment by an admin; the other two are
driven by the partner the order is assigned to.
"""
from typing import Dict, FrozenSet, Union

from app.core.exceptions import InvalidTransition
from app.shared.constants import OrderStatus

# Current status -> statuses it may move to
ORDER_TRANSITIONS: Dict[OrderStatus, FrozenSet[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.ASSIGNED}),
    OrderStatus.ASSIGNED: frozenset({OrderStatus.PICKED_UP}),
    OrderStatus.PICKED_UP: frozenset({OrderStatus.DELIVERED}),
    OrderStatus.DELIVERED: frozenset(),
}

# Steps a partner may take on an order assigned to them
PARTNER_TRANSITIONS: Dict[OrderStatus, FrozenSet[OrderStatus]] = {
    OrderStatus.ASSIGNED: frozenset({OrderStatus.PICKED_UP}),
    OrderStatus.PICKED_UP: frozenset({OrderStatus.DELIVERED}),
}

StatusLike = Union[OrderStatus, str]


def _as_status(value: StatusLike) -> OrderStatus:
    return value if isinstance(value, OrderStatus) else OrderStatus(value)


def can_transition(current: StatusLike, new: StatusLike) -> bool:
    """True if the table allows current -> new."""
    return _as_status(new) in ORDER_TRANSITIONS.get(_as_status(current), frozenset())


def can_partner_transition(current: StatusLike, new: StatusLike) -> bool:
    """True if a partner may move their order from current to new."""
    return _as_status(new) in PARTNER_TRANSITIONS.get(_as_status(current), frozenset())


def ensure_partner_transition(current: StatusLike, new: StatusLike) -> OrderStatus:
    """Return the new status or raise InvalidTransition."""
    if not can_partner_transition(current, new):
        raise InvalidTransition(_as_status(current).value, _as_status(new).value)
    return _as_status(new)
