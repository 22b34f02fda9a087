"""Marketplace data store with referential integrity and an event log."""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Callable, TypeVar

from estate_market.exceptions import EntityNotFoundError, ReferentialIntegrityError
from estate_market.models.base import Event, new_id
from estate_market.models.enums import OfferStatus, PropertyStatus, PropertyType, ViewingStatus
from estate_market.models.lifecycle import check_transition
from estate_market.models.message import Message
from estate_market.models.offer import Offer
from estate_market.models.participants import Buyer, Seller, ensure_owner
from estate_market.models.property import Property
from estate_market.models.search import SearchCriteria, search_properties
from estate_market.models.viewing import Viewing
from estate_market.store.messages import MessageStore

logger = logging.getLogger(__name__)

EVENT_SOURCE = "estate-market"

T = TypeVar("T")


@dataclass
class MarketplaceStore:
    """In-memory registry of participants, listings, offers and viewings.

    Workflows (``place_offer``, ``respond_to_offer``...) resolve ids, delegate
    to the role methods on ``Buyer``/``Seller`` and record an ``Event`` per
    completed action. Calls must be serialized by the caller.
    """

    strict_transitions: bool = False

    # Participants
    buyers: dict[str, Buyer] = field(default_factory=dict)
    sellers: dict[str, Seller] = field(default_factory=dict)

    # Primary entities
    properties: dict[str, Property] = field(default_factory=dict)
    offers: dict[str, Offer] = field(default_factory=dict)
    viewings: dict[str, Viewing] = field(default_factory=dict)

    messages: MessageStore = field(default_factory=MessageStore)
    events: list[Event] = field(default_factory=list)

    # Relationship indexes
    _seller_properties: dict[str, list[str]] = field(default_factory=dict)
    _property_offers: dict[str, list[str]] = field(default_factory=dict)
    _buyer_offers: dict[str, list[str]] = field(default_factory=dict)
    _property_viewings: dict[str, list[str]] = field(default_factory=dict)

    # Registration

    def add_buyer(self, buyer: Buyer) -> None:
        """Add a buyer to the store."""
        self.buyers[buyer.user_id] = buyer
        self._buyer_offers.setdefault(buyer.user_id, [])

    def add_seller(self, seller: Seller) -> None:
        """Add a seller and any properties it already owns."""
        self.sellers[seller.user_id] = seller
        self._seller_properties.setdefault(seller.user_id, [])
        for prop in seller.owned_properties:
            if prop.property_id not in self.properties:
                self.add_property(prop)

    def add_property(self, prop: Property) -> None:
        """Add a property to the store."""
        if prop.owner_id not in self.sellers:
            raise ReferentialIntegrityError(f"Seller {prop.owner_id} not found")

        self.properties[prop.property_id] = prop
        self._seller_properties[prop.owner_id].append(prop.property_id)
        self._property_offers.setdefault(prop.property_id, [])
        self._property_viewings.setdefault(prop.property_id, [])

    def add_offer(self, offer: Offer) -> None:
        """Add an offer to the store."""
        if offer.property_id not in self.properties:
            raise ReferentialIntegrityError(f"Property {offer.property_id} not found")
        if offer.buyer_id not in self.buyers:
            raise ReferentialIntegrityError(f"Buyer {offer.buyer_id} not found")

        self.offers[offer.offer_id] = offer
        self._property_offers[offer.property_id].append(offer.offer_id)
        self._buyer_offers[offer.buyer_id].append(offer.offer_id)

    def add_viewing(self, viewing: Viewing) -> None:
        """Add a viewing to the store."""
        if viewing.property_id not in self.properties:
            raise ReferentialIntegrityError(f"Property {viewing.property_id} not found")
        if viewing.user_id not in self.buyers:
            raise ReferentialIntegrityError(f"Buyer {viewing.user_id} not found")

        self.viewings[viewing.viewing_id] = viewing
        self._property_viewings[viewing.property_id].append(viewing.viewing_id)

    # Lookups

    def get_buyer(self, buyer_id: str) -> Buyer:
        return _lookup(self.buyers, buyer_id, "Buyer")

    def get_seller(self, seller_id: str) -> Seller:
        return _lookup(self.sellers, seller_id, "Seller")

    def get_property(self, property_id: str) -> Property:
        return _lookup(self.properties, property_id, "Property")

    def get_offer(self, offer_id: str) -> Offer:
        return _lookup(self.offers, offer_id, "Offer")

    def get_viewing(self, viewing_id: str) -> Viewing:
        return _lookup(self.viewings, viewing_id, "Viewing")

    # Listing workflows

    def list_property(
        self,
        seller_id: str,
        title: str,
        description: str | None,
        location: str,
        price: Decimal | float | int,
        size: float,
        property_type: PropertyType | str,
    ) -> Property:
        """Create a property for a registered seller."""
        seller = self.get_seller(seller_id)
        prop = seller.create_property(title, description, location, price, size, property_type)
        self.add_property(prop)
        self._record("property.listed", prop.property_id, {"seller_id": seller_id})
        logger.debug("Seller %s listed property %s", seller_id, prop.property_id)
        return prop

    def publish_property(self, seller_id: str, property_id: str) -> Property:
        seller = self.get_seller(seller_id)
        prop = self.get_property(property_id)
        self._guard(prop.status, PropertyStatus.FOR_SALE)
        self._attempt(
            "publish_property",
            lambda: seller.publish_property(prop),
            seller_id=seller_id,
            property_id=property_id,
        )
        self._record("property.published", property_id, {"seller_id": seller_id})
        return prop

    def suspend_property(self, seller_id: str, property_id: str) -> Property:
        return self._change_property_status(seller_id, property_id, PropertyStatus.OFF_MARKET)

    def close_property(self, seller_id: str, property_id: str) -> Property:
        return self._change_property_status(seller_id, property_id, PropertyStatus.SOLD)

    # Offer workflows

    def place_offer(self, buyer_id: str, property_id: str, amount: Decimal | float | int) -> Offer:
        buyer = self.get_buyer(buyer_id)
        prop = self.get_property(property_id)
        offer = self._attempt(
            "place_offer",
            lambda: buyer.place_offer(prop, amount),
            buyer_id=buyer_id,
            property_id=property_id,
        )
        self.add_offer(offer)
        self._record(
            "offer.placed",
            offer.offer_id,
            {"buyer_id": buyer_id, "property_id": property_id, "amount": str(offer.amount)},
        )
        logger.info("Offer %s placed on property %s", offer.offer_id, property_id)
        return offer

    def respond_to_offer(self, seller_id: str, offer_id: str, accept: bool) -> Offer:
        seller = self.get_seller(seller_id)
        offer = self.get_offer(offer_id)
        target = OfferStatus.ACCEPTED if accept else OfferStatus.REJECTED
        self._guard(offer.status, target)
        self._attempt(
            "respond_to_offer",
            lambda: seller.respond_to_offer(offer, accept),
            seller_id=seller_id,
            offer_id=offer_id,
        )
        self._record(
            f"offer.{target.value.lower()}",
            offer_id,
            {"seller_id": seller_id, "property_id": offer.property_id},
        )
        logger.info("Offer %s %s by seller %s", offer_id, target.value, seller_id)
        return offer

    def withdraw_offer(self, buyer_id: str, offer_id: str) -> Offer:
        buyer = self.get_buyer(buyer_id)
        offer = self.get_offer(offer_id)
        self._guard(offer.status, OfferStatus.WITHDRAWN)
        self._attempt(
            "withdraw_offer",
            lambda: buyer.withdraw_offer(offer),
            buyer_id=buyer_id,
            offer_id=offer_id,
        )
        self._record("offer.withdrawn", offer_id, {"buyer_id": buyer_id})
        return offer

    # Viewing workflows

    def request_viewing(
        self,
        buyer_id: str,
        property_id: str,
        time_slot: datetime,
        agent_id: str | None = None,
    ) -> Viewing:
        buyer = self.get_buyer(buyer_id)
        prop = self.get_property(property_id)
        viewing = self._attempt(
            "request_viewing",
            lambda: buyer.request_viewing(prop, time_slot, agent_id),
            buyer_id=buyer_id,
            property_id=property_id,
        )
        self.add_viewing(viewing)
        self._record(
            "viewing.booked",
            viewing.viewing_id,
            {"buyer_id": buyer_id, "property_id": property_id, "time_slot": time_slot.isoformat()},
        )
        return viewing

    def change_viewing_status(self, viewing_id: str, status: ViewingStatus | str) -> Viewing:
        viewing = self.get_viewing(viewing_id)
        target = ViewingStatus(status)
        self._guard(viewing.status, target)
        viewing.set_status(target)
        self._record(f"viewing.{target.value.lower()}", viewing_id, {})
        return viewing

    def reschedule_viewing(self, viewing_id: str, time_slot: datetime) -> Viewing:
        viewing = self.get_viewing(viewing_id)
        self._guard(viewing.status, ViewingStatus.RESCHEDULED)
        viewing.reschedule(time_slot)
        self._record("viewing.rescheduled", viewing_id, {"time_slot": time_slot.isoformat()})
        return viewing

    # Messaging

    def send_message(
        self,
        sender_id: str,
        recipient_id: str,
        subject: str,
        content: str,
        property_id: str | None = None,
    ) -> Message:
        """Send a message between two registered participants."""
        for user_id in (sender_id, recipient_id):
            if user_id not in self.buyers and user_id not in self.sellers:
                raise EntityNotFoundError(f"Participant {user_id} not found")
        if property_id is not None:
            self.get_property(property_id)
        message = self.messages.send(sender_id, recipient_id, subject, content, property_id)
        self._record(
            "message.sent",
            message.message_id,
            {"sender_id": sender_id, "recipient_id": recipient_id, "property_id": property_id},
        )
        return message

    # Queries

    def search(
        self,
        criteria: SearchCriteria | None = None,
        available_only: bool = True,
    ) -> list[Property]:
        """Search stored properties, cheapest first."""
        return search_properties(self.properties.values(), criteria, available_only)

    def get_seller_properties(self, seller_id: str) -> list[Property]:
        """Get all properties listed by a seller."""
        ids = self._seller_properties.get(seller_id, [])
        return [self.properties[pid] for pid in ids]

    def get_property_offers(self, property_id: str) -> list[Offer]:
        """Get all offers placed on a property."""
        ids = self._property_offers.get(property_id, [])
        return [self.offers[oid] for oid in ids]

    def get_buyer_offers(self, buyer_id: str) -> list[Offer]:
        """Get all offers placed by a buyer."""
        ids = self._buyer_offers.get(buyer_id, [])
        return [self.offers[oid] for oid in ids]

    def get_property_viewings(self, property_id: str) -> list[Viewing]:
        """Get all viewings booked for a property."""
        ids = self._property_viewings.get(property_id, [])
        return [self.viewings[vid] for vid in ids]

    def summary(self) -> dict[str, int]:
        """Return summary counts of all entities."""
        return {
            "buyers": len(self.buyers),
            "sellers": len(self.sellers),
            "properties": len(self.properties),
            "offers": len(self.offers),
            "viewings": len(self.viewings),
            "messages": len(self.messages),
            "events": len(self.events),
        }

    def snapshot(self) -> dict[str, list[Any]]:
        """Return every record grouped by entity type, ready for a sink."""
        return {
            "buyers": list(self.buyers.values()),
            "sellers": list(self.sellers.values()),
            "properties": list(self.properties.values()),
            "offers": list(self.offers.values()),
            "viewings": list(self.viewings.values()),
            "messages": self.messages.sent_messages(),
            "events": list(self.events),
        }

    # Internals

    def _change_property_status(
        self, seller_id: str, property_id: str, status: PropertyStatus
    ) -> Property:
        seller = self.get_seller(seller_id)
        prop = self.get_property(property_id)
        self._guard(prop.status, status)
        self._attempt(
            "change_property_status",
            lambda: _owned_status_change(seller, prop, status),
            seller_id=seller_id,
            property_id=property_id,
        )
        self._record(f"property.{status.value.lower()}", property_id, {"seller_id": seller_id})
        return prop

    def _guard(self, current: Enum, target: Enum) -> None:
        if self.strict_transitions:
            check_transition(current, target)

    def _attempt(self, action: str, step: Callable[[], T], **context: str) -> T:
        try:
            return step()
        except Exception:
            logger.warning("%s rejected", action, extra={"context": context})
            raise

    def _record(self, event_type: str, subject: str, data: dict) -> Event:
        event = Event(
            event_id=new_id(),
            event_type=event_type,
            event_time=datetime.now(),
            source=EVENT_SOURCE,
            subject=subject,
            data=data,
        )
        self.events.append(event)
        return event


def _owned_status_change(seller: Seller, prop: Property, status: PropertyStatus) -> None:
    ensure_owner(seller.user_id, prop, "change the status of")
    prop.set_status(status)


def _lookup(registry: dict[str, T], key: str, kind: str) -> T:
    try:
        return registry[key]
    except KeyError:
        raise EntityNotFoundError(f"{kind} {key} not found") from None
