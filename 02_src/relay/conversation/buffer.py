"""Per-conversation message buffers with debounce timers."""

import asyncio
import itertools
from typing import Awaitable, Callable

from ..logging_config import get_logger
from ..models import BufferSnapshot, ConversationBuffer

logger = get_logger(__name__)


ExpiryCallback = Callable[[str, int], Awaitable[None]]


class BufferRegistry:
    """
    Owns the pending text and debounce timer of every active conversation.

    Each ``append`` arms a fresh timer tagged with a new generation number and
    cancels the previous one. When a timer expires it calls ``on_expire`` with
    ``(conversation_id, generation)``; the callee consumes the buffer through
    ``snapshot_and_clear``, which only succeeds while that generation is still
    the live one. A timer superseded by a newer message therefore finds a
    generation mismatch and does nothing, even if cancellation came too late.

    None of the mutating methods await, so on a single event loop they are
    indivisible with respect to each other.
    """

    def __init__(self, window_seconds: float, on_expire: ExpiryCallback):
        if window_seconds < 0:
            raise ValueError("window_seconds must be non-negative")
        self._window = window_seconds
        self._on_expire = on_expire
        self._buffers: dict[str, ConversationBuffer] = {}
        # One counter for all conversations keeps generations unique per
        # conversation even after its buffer has been removed and recreated.
        self._generations = itertools.count(1)
        self._tasks: set[asyncio.Task] = set()

    @property
    def window_seconds(self) -> float:
        return self._window

    def __len__(self) -> int:
        return len(self._buffers)

    def __contains__(self, conversation_id: object) -> bool:
        return conversation_id in self._buffers

    def append(self, conversation_id: str, text: str, reply_address: str | None = None) -> int:
        """Buffer ``text`` for the conversation and re-arm its debounce timer.

        Returns the generation of the newly armed timer.
        """
        buffer = self._buffers.get(conversation_id)
        if buffer is None:
            buffer = ConversationBuffer(
                conversation_id=conversation_id,
                reply_address=reply_address or conversation_id,
                generation=0,
            )
            self._buffers[conversation_id] = buffer
            logger.debug("Created buffer for %s", conversation_id)
        elif reply_address:
            buffer.reply_address = reply_address

        buffer.pending_segments.append(text)

        if buffer.timer_handle is not None:
            buffer.timer_handle.cancel()

        buffer.generation = next(self._generations)
        buffer.timer_handle = self._arm(conversation_id, buffer.generation)

        logger.debug(
            "Buffered message for %s (segments=%d, generation=%d)",
            conversation_id,
            len(buffer.pending_segments),
            buffer.generation,
        )
        return buffer.generation

    def snapshot_and_clear(self, conversation_id: str, generation: int) -> BufferSnapshot | None:
        """Consume the buffer if ``generation`` is still the live one.

        Returns None without touching anything when the buffer is gone or a
        newer message has re-armed the timer.
        """
        buffer = self._buffers.get(conversation_id)
        if buffer is None or buffer.generation != generation:
            logger.debug(
                "Stale dispatch for %s (generation=%d, live=%s)",
                conversation_id,
                generation,
                buffer.generation if buffer else None,
            )
            return None

        del self._buffers[conversation_id]
        return BufferSnapshot(
            conversation_id=conversation_id,
            generation=generation,
            text="\n".join(buffer.pending_segments),
            reply_address=buffer.reply_address,
            segment_count=len(buffer.pending_segments),
        )

    def discard(self, conversation_id: str) -> bool:
        """Drop a buffer and revoke its timer without dispatching."""
        buffer = self._buffers.pop(conversation_id, None)
        if buffer is None:
            return False
        if buffer.timer_handle is not None:
            buffer.timer_handle.cancel()
        logger.info(
            "Discarded %d pending message(s) for %s",
            len(buffer.pending_segments),
            conversation_id,
        )
        return True

    def pending(self, conversation_id: str) -> list[str]:
        """Get a copy of the pending segments of a conversation."""
        buffer = self._buffers.get(conversation_id)
        return list(buffer.pending_segments) if buffer else []

    def generation_of(self, conversation_id: str) -> int | None:
        buffer = self._buffers.get(conversation_id)
        return buffer.generation if buffer else None

    async def wait_idle(self) -> None:
        """Wait until no timer or dispatch task is outstanding."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def close(self) -> None:
        """Cancel all timers and in-flight dispatches and drop every buffer."""
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        self._buffers.clear()

    def _arm(self, conversation_id: str, generation: int) -> asyncio.Task:
        task = asyncio.create_task(
            self._expire_after_window(conversation_id, generation),
            name=f"debounce:{conversation_id}:{generation}",
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _expire_after_window(self, conversation_id: str, generation: int) -> None:
        await asyncio.sleep(self._window)
        buffer = self._buffers.get(conversation_id)
        if buffer is not None and buffer.generation == generation:
            # The dispatch outlives this buffer; the timer slot must not keep
            # pointing at a task that is no longer a timer.
            buffer.timer_handle = None
        await self._on_expire(conversation_id, generation)
