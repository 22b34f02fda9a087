"""Offer model."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal

from estate_market.exceptions import ValidationError
from estate_market.models.base import Entity, new_id, require, to_decimal
from estate_market.models.enums import OfferStatus


@dataclass(eq=False)
class Offer(Entity):
    """Monetary bid by a buyer against a property.

    Everything except ``status`` is fixed once the offer exists.
    """

    _id_field = "offer_id"
    _write_once = frozenset({"offer_id", "property_id", "buyer_id", "amount", "created_at"})

    property_id: str
    buyer_id: str
    amount: Decimal
    offer_id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=datetime.now)
    status: OfferStatus = OfferStatus.PENDING

    def __post_init__(self) -> None:
        require(self.property_id, "property_id")
        require(self.buyer_id, "buyer_id")
        amount = to_decimal(self.amount, "amount")
        if amount <= 0:
            raise ValidationError("amount must be positive")
        object.__setattr__(self, "amount", amount)
        self.status = OfferStatus(self.status)

    def set_status(self, status: OfferStatus | str) -> None:
        """Set any status; no transition table is enforced here."""
        self.status = OfferStatus(status)

    def is_pending(self) -> bool:
        return self.status == OfferStatus.PENDING
