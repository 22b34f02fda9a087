"""Viewing appointment model."""

from dataclasses import dataclass, field
from datetime import datetime

from estate_market.exceptions import InvalidEntityStateError
from estate_market.models.base import Entity, new_id, require
from estate_market.models.enums import ViewingStatus


@dataclass(eq=False)
class Viewing(Entity):
    """Scheduled inspection of a property by a prospective buyer."""

    _id_field = "viewing_id"
    _write_once = frozenset(
        {"viewing_id", "property_id", "listing_id", "user_id", "agent_id", "location", "created_at"}
    )

    property_id: str
    listing_id: str
    user_id: str
    agent_id: str
    location: str
    time_slot: datetime
    viewing_id: str = field(default_factory=new_id)
    status: ViewingStatus = ViewingStatus.BOOKED
    feedback: str | None = None
    created_at: datetime = field(default_factory=datetime.now)

    def __post_init__(self) -> None:
        require(self.property_id, "property_id")
        require(self.listing_id, "listing_id")
        require(self.user_id, "user_id")
        require(self.agent_id, "agent_id")
        require(self.location, "location")
        require(self.time_slot, "time_slot")
        self.status = ViewingStatus(self.status)

    def set_status(self, status: ViewingStatus | str) -> None:
        """Set any status; no transition table is enforced here."""
        self.status = ViewingStatus(status)

    def confirm(self) -> None:
        self.set_status(ViewingStatus.CONFIRMED)

    def cancel(self) -> None:
        self.set_status(ViewingStatus.CANCELLED)

    def complete(self) -> None:
        self.set_status(ViewingStatus.COMPLETED)

    def reschedule(self, time_slot: datetime) -> None:
        """Move the appointment to a new slot."""
        self.time_slot = require(time_slot, "time_slot")
        self.set_status(ViewingStatus.RESCHEDULED)

    def leave_feedback(self, feedback: str) -> None:
        """Attach feedback once the viewing took place."""
        if self.status != ViewingStatus.COMPLETED:
            raise InvalidEntityStateError(
                f"Viewing {self.viewing_id} is {self.status.value}; feedback needs COMPLETED"
            )
        self.feedback = require(feedback, "feedback")
