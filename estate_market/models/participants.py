"""Marketplace participants: buyers and sellers.

Both roles compose a shared ``Profile`` rather than inheriting from a user
base class; ``Participant`` is the union of the two variants. Roles create
offers, viewings and properties, and run ownership checks before mutating
them.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any, ClassVar, Iterable, Iterator, Union

from estate_market.exceptions import OwnershipError, ValidationError
from estate_market.models.base import new_id, require, to_decimal
from estate_market.models.enums import OfferStatus, PropertyType, Role
from estate_market.models.offer import Offer
from estate_market.models.property import Property
from estate_market.models.search import ListingView, SearchCriteria, search_properties, type_label
from estate_market.models.viewing import Viewing


def owner_of(entity: Any) -> str | None:
    """Return the id of the participant controlling ``entity``."""
    if isinstance(entity, Property):
        return entity.owner_id
    if isinstance(entity, Offer):
        return entity.buyer_id
    if isinstance(entity, Viewing):
        return entity.user_id
    raise TypeError(f"No ownership rule for {type(entity).__name__}")


def ensure_owner(actor_id: str, entity: Any, action: str = "modify") -> None:
    """Raise ``OwnershipError`` unless ``actor_id`` controls ``entity``."""
    if actor_id is None or owner_of(entity) != actor_id:
        raise OwnershipError(
            f"User {actor_id} cannot {action} {type(entity).__name__.lower()} "
            f"{entity.entity_id} they do not own"
        )


@contextmanager
def staged_append(collection: list, item: Any) -> Iterator[None]:
    """Track ``item`` in ``collection`` for the duration of a mutation.

    The item is appended if not already present. If the block raises, a
    fresh append is undone before the error propagates.
    """
    added = item not in collection
    if added:
        collection.append(item)
    try:
        yield
    except BaseException:
        if added:
            collection.remove(item)
        raise


@dataclass
class Profile:
    """Identity fields shared by every role."""

    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    username: str | None = None
    user_id: str = field(default_factory=new_id)

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part)


@dataclass(eq=False)
class Buyer:
    """Participant searching listings, placing offers and booking viewings.

    Offers and viewings are returned to the caller rather than retained here;
    ``MarketplaceStore`` is the place that tracks them.
    """

    role: ClassVar[Role] = Role.BUYER

    profile: Profile = field(default_factory=Profile)
    budget: Decimal = Decimal("0")
    _interests: list[str] = field(default_factory=list, repr=False)
    _documents: list[str] = field(default_factory=list, repr=False)
    _preferred_locations: list[str] = field(default_factory=list, repr=False)
    _saved_listings: dict[str, ListingView] = field(default_factory=dict, repr=False)

    def __post_init__(self) -> None:
        self.budget = to_decimal(self.budget, "budget")

    @property
    def user_id(self) -> str:
        return self.profile.user_id

    # Offers and viewings

    def place_offer(self, prop: Property | None, amount: Decimal | float | int) -> Offer:
        """Create a pending offer on ``prop``; the caller decides where to track it."""
        if prop is None:
            raise ValidationError("property is required")
        amount = to_decimal(amount, "amount")
        if amount <= 0:
            raise ValidationError("amount must be positive")
        return Offer(property_id=prop.property_id, buyer_id=self.user_id, amount=amount)

    def withdraw_offer(self, offer: Offer | None) -> None:
        if offer is None:
            raise ValidationError("offer is required")
        ensure_owner(self.user_id, offer, "withdraw")
        offer.set_status(OfferStatus.WITHDRAWN)

    def request_viewing(
        self,
        prop: Property | None,
        time_slot: datetime | None,
        agent_id: str | None = None,
    ) -> Viewing:
        """Book a viewing; the seller acts as agent unless one is given."""
        if prop is None:
            raise ValidationError("property is required")
        if time_slot is None:
            raise ValidationError("time_slot is required")
        return Viewing(
            property_id=prop.property_id,
            listing_id=prop.property_id,
            user_id=self.user_id,
            agent_id=agent_id or prop.owner_id,
            location=prop.location,
            time_slot=time_slot,
        )

    def can_afford(self, prop: Property) -> bool:
        return prop.price <= self.budget

    def search_properties(
        self,
        listings: Iterable[Any],
        criteria: SearchCriteria | None = None,
    ) -> list[Any]:
        return search_properties(listings, criteria)

    # Interests and documents

    @property
    def property_types_of_interest(self) -> tuple[str, ...]:
        return tuple(self._interests)

    def add_interest(self, property_type: PropertyType | str) -> None:
        label = require(type_label(property_type), "property_type").strip()
        if label not in self._interests:
            self._interests.append(label)

    def remove_interest(self, property_type: PropertyType | str) -> None:
        label = type_label(property_type)
        if label in self._interests:
            self._interests.remove(label)

    @property
    def documents(self) -> tuple[str, ...]:
        return tuple(self._documents)

    def add_document(self, document_ref: str) -> None:
        require(document_ref, "document_ref")
        if document_ref not in self._documents:
            self._documents.append(document_ref)

    def remove_document(self, document_ref: str) -> None:
        if document_ref in self._documents:
            self._documents.remove(document_ref)

    # Preferred locations and saved listings

    @property
    def preferred_locations(self) -> tuple[str, ...]:
        return tuple(self._preferred_locations)

    def add_preferred_location(self, location: str | None) -> bool:
        location = require(location, "location").strip()
        if location in self._preferred_locations:
            return False
        self._preferred_locations.append(location)
        return True

    def remove_preferred_location(self, location: str | None) -> bool:
        if location is None or location.strip() not in self._preferred_locations:
            return False
        self._preferred_locations.remove(location.strip())
        return True

    @property
    def saved_listings(self) -> tuple[ListingView, ...]:
        return tuple(self._saved_listings.values())

    def save_listing(self, listing: Property | ListingView) -> bool:
        """Snapshot a listing; returns True if it was not saved before."""
        if listing is None:
            raise ValidationError("listing is required")
        view = ListingView.from_property(listing) if isinstance(listing, Property) else listing
        is_new = view.listing_id not in self._saved_listings
        self._saved_listings[view.listing_id] = view
        return is_new

    def remove_saved_listing(self, listing_id: str | None) -> bool:
        if not listing_id:
            return False
        return self._saved_listings.pop(listing_id, None) is not None


@dataclass(eq=False)
class Seller:
    """Participant listing properties and answering offers."""

    role: ClassVar[Role] = Role.SELLER

    profile: Profile = field(default_factory=Profile)
    _owned_properties: list[Property] = field(default_factory=list, repr=False)
    _received_offers: list[Offer] = field(default_factory=list, repr=False)

    @property
    def user_id(self) -> str:
        return self.profile.user_id

    @property
    def owned_properties(self) -> tuple[Property, ...]:
        return tuple(self._owned_properties)

    @property
    def received_offers(self) -> tuple[Offer, ...]:
        return tuple(self._received_offers)

    def create_property(
        self,
        title: str | None,
        description: str | None,
        location: str | None,
        price: Decimal | float | int,
        size: float,
        property_type: PropertyType | str | None,
    ) -> Property:
        prop = Property(
            title=title,
            owner_id=self.user_id,
            description=description,
            location=location,
            price=price,
            size=size,
            property_type=property_type,
        )
        self._owned_properties.append(prop)
        return prop

    def publish_property(self, prop: Property | None) -> None:
        if prop is None:
            raise ValidationError("property is required")
        ensure_owner(self.user_id, prop, "publish")
        with staged_append(self._owned_properties, prop):
            prop.publish()

    def respond_to_offer(self, offer: Offer | None, accept: bool) -> None:
        if offer is None:
            raise ValidationError("offer is required")
        prop = self._find_owned(offer.property_id)
        if prop is None:
            raise OwnershipError(
                f"Seller {self.user_id} can only respond to offers for their own properties"
            )
        with staged_append(self._received_offers, offer):
            offer.set_status(OfferStatus.ACCEPTED if accept else OfferStatus.REJECTED)

    def _find_owned(self, property_id: str) -> Property | None:
        for prop in self._owned_properties:
            if prop.property_id == property_id:
                return prop
        return None


Participant = Union[Buyer, Seller]
