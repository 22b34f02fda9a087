"""Message model exchanged between participants."""

from dataclasses import dataclass, field, replace
from datetime import datetime

from estate_market.models.base import new_id
from estate_market.models.enums import MessageDirection


@dataclass
class Message:
    """One copy of a message, as seen from the sender or the recipient."""

    sender_id: str
    recipient_id: str
    subject: str
    content: str
    direction: MessageDirection
    property_id: str | None = None  # Listing the conversation is about
    message_id: str = field(default_factory=new_id)
    sent_at: datetime = field(default_factory=datetime.now)
    read: bool = False

    @classmethod
    def outbound(
        cls,
        sender_id: str,
        recipient_id: str,
        subject: str,
        content: str,
        property_id: str | None = None,
    ) -> "Message":
        """Sender-side copy; sent messages count as read."""
        return cls(
            sender_id=sender_id,
            recipient_id=recipient_id,
            subject=subject,
            content=content,
            direction=MessageDirection.SENT,
            property_id=property_id,
            read=True,
        )

    def as_inbound(self) -> "Message":
        """Recipient-side copy sharing the same message id and timestamp."""
        return replace(self, direction=MessageDirection.RECEIVED, read=False)

    def mark_as_read(self) -> None:
        self.read = True
