"""Core data models for the relay."""

from .ai import AIOption
from .conversation import BufferSnapshot, ConversationBuffer
from .messages import DeliveryReceipt, InboundMessage
from .transport import TransportState

__all__ = [
    # AI
    "AIOption",
    # Conversation
    "ConversationBuffer",
    "BufferSnapshot",
    # Messages
    "InboundMessage",
    "DeliveryReceipt",
    # Transport
    "TransportState",
]
