"""Conversation buffering data models."""

import asyncio
from dataclasses import dataclass, field


@dataclass
class ConversationBuffer:
    """Pending text and debounce timer of one conversation."""

    conversation_id: str
    reply_address: str
    generation: int
    pending_segments: list[str] = field(default_factory=list)
    timer_handle: asyncio.Task | None = None


@dataclass(frozen=True)
class BufferSnapshot:
    """What a dispatch consumed from a buffer."""

    conversation_id: str
    generation: int
    text: str  # pending segments joined by newline
    reply_address: str
    segment_count: int
