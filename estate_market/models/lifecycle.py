"""Optional transition tables for entity status machines.

Entities accept any status through ``set_status``. These tables are only
consulted by callers that opt into strict transitions, such as
``MarketplaceStore(strict_transitions=True)``.
"""

from enum import Enum

from estate_market.exceptions import InvalidEntityStateError
from estate_market.models.enums import OfferStatus, PropertyStatus, ViewingStatus

PROPERTY_TRANSITIONS: dict[PropertyStatus, frozenset[PropertyStatus]] = {
    PropertyStatus.OFF_MARKET: frozenset({PropertyStatus.FOR_SALE}),
    PropertyStatus.FOR_SALE: frozenset(
        {PropertyStatus.OFF_MARKET, PropertyStatus.PENDING, PropertyStatus.SOLD}
    ),
    PropertyStatus.PENDING: frozenset(
        {PropertyStatus.FOR_SALE, PropertyStatus.OFF_MARKET, PropertyStatus.SOLD}
    ),
    PropertyStatus.SOLD: frozenset(),
}

OFFER_TRANSITIONS: dict[OfferStatus, frozenset[OfferStatus]] = {
    OfferStatus.PENDING: frozenset(
        {OfferStatus.ACCEPTED, OfferStatus.REJECTED, OfferStatus.WITHDRAWN}
    ),
    OfferStatus.ACCEPTED: frozenset(),
    OfferStatus.REJECTED: frozenset(),
    OfferStatus.WITHDRAWN: frozenset(),
}

VIEWING_TRANSITIONS: dict[ViewingStatus, frozenset[ViewingStatus]] = {
    ViewingStatus.BOOKED: frozenset(
        {ViewingStatus.CONFIRMED, ViewingStatus.CANCELLED, ViewingStatus.RESCHEDULED}
    ),
    ViewingStatus.CONFIRMED: frozenset(
        {ViewingStatus.COMPLETED, ViewingStatus.CANCELLED, ViewingStatus.RESCHEDULED}
    ),
    ViewingStatus.RESCHEDULED: frozenset(
        {
            ViewingStatus.CONFIRMED,
            ViewingStatus.CANCELLED,
            ViewingStatus.COMPLETED,
            ViewingStatus.RESCHEDULED,
        }
    ),
    ViewingStatus.CANCELLED: frozenset(),
    ViewingStatus.COMPLETED: frozenset(),
}

_TABLES: dict[type[Enum], dict] = {
    PropertyStatus: PROPERTY_TRANSITIONS,
    OfferStatus: OFFER_TRANSITIONS,
    ViewingStatus: VIEWING_TRANSITIONS,
}


def is_allowed(current: Enum, target: Enum) -> bool:
    """Return True if ``current -> target`` is in the table for its enum."""
    if type(current) is not type(target):
        return False
    if current == target:
        return True
    return target in _TABLES[type(current)].get(current, frozenset())


def check_transition(current: Enum, target: Enum) -> None:
    """Raise ``InvalidEntityStateError`` for a transition outside the table."""
    if not is_allowed(current, target):
        raise InvalidEntityStateError(
            f"Transition {current.value} -> {target.value} is not allowed"
        )
