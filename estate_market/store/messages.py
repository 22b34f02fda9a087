"""In-memory message store for participant conversations."""

from dataclasses import dataclass, field

from estate_market.models.base import require
from estate_market.models.enums import MessageDirection
from estate_market.models.message import Message


@dataclass
class MessageStore:
    """Keeps one mailbox per participant id.

    Sending stores an outbound copy for the sender and an inbound copy for
    the recipient, both sharing the same message id.
    """

    _mailboxes: dict[str, list[Message]] = field(default_factory=dict)

    def send(
        self,
        sender_id: str,
        recipient_id: str,
        subject: str,
        content: str,
        property_id: str | None = None,
    ) -> Message:
        """Deliver a message and return the sender's copy."""
        require(sender_id, "sender_id")
        require(recipient_id, "recipient_id")
        outbound = Message.outbound(sender_id, recipient_id, subject, content, property_id)
        self._mailboxes.setdefault(sender_id, []).append(outbound)
        self._mailboxes.setdefault(recipient_id, []).append(outbound.as_inbound())
        return outbound

    def messages_for(
        self,
        user_id: str,
        direction: MessageDirection | None = None,
    ) -> tuple[Message, ...]:
        """Return a participant's messages, optionally filtered by direction."""
        mailbox = self._mailboxes.get(user_id, [])
        if direction is None:
            return tuple(mailbox)
        return tuple(m for m in mailbox if m.direction == direction)

    def sent_messages(self) -> list[Message]:
        """Sender-side copy of every message, one per message id."""
        return [
            m
            for mailbox in self._mailboxes.values()
            for m in mailbox
            if m.direction == MessageDirection.SENT
        ]

    def unread_count(self, user_id: str) -> int:
        return sum(1 for m in self._mailboxes.get(user_id, []) if not m.read)

    def __len__(self) -> int:
        """Number of distinct messages sent."""
        return len(self.sent_messages())
