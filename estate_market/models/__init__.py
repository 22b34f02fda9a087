"""Domain models for the real-estate marketplace."""

from estate_market.models.base import Entity, Event
from estate_market.models.enums import (
    MessageDirection,
    OfferStatus,
    PropertyStatus,
    PropertyType,
    Role,
    ViewingStatus,
)
from estate_market.models.message import Message
from estate_market.models.offer import Offer
from estate_market.models.participants import (
    Buyer,
    Participant,
    Profile,
    Seller,
    ensure_owner,
    owner_of,
    staged_append,
)
from estate_market.models.property import Property
from estate_market.models.search import (
    ListingView,
    SearchCriteria,
    SearchCriteriaBuilder,
    display_available_properties,
    search_properties,
)
from estate_market.models.viewing import Viewing

__all__ = [
    "Buyer",
    "Entity",
    "Event",
    "ListingView",
    "Message",
    "MessageDirection",
    "Offer",
    "OfferStatus",
    "Participant",
    "Profile",
    "Property",
    "PropertyStatus",
    "PropertyType",
    "Role",
    "SearchCriteria",
    "SearchCriteriaBuilder",
    "Seller",
    "Viewing",
    "ViewingStatus",
    "display_available_properties",
    "ensure_owner",
    "owner_of",
    "search_properties",
    "staged_append",
]
