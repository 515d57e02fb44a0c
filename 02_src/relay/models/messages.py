"""Message-related data models."""

from dataclasses import dataclass

BROADCAST_CONVERSATION_ID = "status@broadcast"


@dataclass
class InboundMessage:
    """A chat message delivered by the transport."""

    conversation_id: str
    sender_address: str
    body: str
    is_group: bool = False
    message_type: str = "chat"

    @property
    def is_relayable(self) -> bool:
        """Only direct text chats are relayed; groups and status broadcasts are not."""
        return (
            self.message_type == "chat"
            and not self.is_group
            and self.conversation_id != BROADCAST_CONVERSATION_ID
        )


@dataclass
class DeliveryReceipt:
    """Confirmation returned by the transport for a sent text."""

    body: str
    id: str | None = None
