"""DispatchCoordinator implementation."""

from typing import Protocol

from ..delivery import Pacer, segment
from ..errors import AIBackendExhaustedError
from ..llm import IAIBackend, RetryingInvoker
from ..logging_config import get_logger
from ..models import InboundMessage
from ..transport import ITransport
from .buffer import BufferRegistry

logger = get_logger(__name__)


class IDispatchCoordinator(Protocol):
    """Aggregates inbound messages per conversation and relays the AI answer."""

    async def handle_inbound(self, message: InboundMessage) -> int | None:
        """Buffer a relayable message. Return its generation, or None if ignored."""
        ...

    async def start(self) -> None:
        """Start accepting messages."""
        ...

    async def stop(self) -> None:
        """Cancel pending timers and in-flight dispatches."""
        ...


class DispatchCoordinator:
    """Runs buffer -> AI backend -> segmenter -> pacer for every conversation."""

    def __init__(
        self,
        backend: IAIBackend,
        transport: ITransport,
        invoker: RetryingInvoker,
        pacer: Pacer,
        window_seconds: float = 10.0,
    ):
        self._backend = backend
        self._transport = transport
        self._invoker = invoker
        self._pacer = pacer
        self._registry = BufferRegistry(window_seconds, on_expire=self.dispatch)
        self._running = False

    @property
    def registry(self) -> BufferRegistry:
        return self._registry

    async def start(self) -> None:
        logger.info(
            "Starting DispatchCoordinator (window=%.1fs, max_retries=%d)",
            self._registry.window_seconds,
            self._invoker.max_retries,
        )
        self._running = True

    async def stop(self) -> None:
        logger.info("Stopping DispatchCoordinator")
        self._running = False
        await self._registry.close()
        await self._pacer.drain()

    async def handle_inbound(self, message: InboundMessage) -> int | None:
        if not self._running:
            raise RuntimeError("DispatchCoordinator not started")

        if not message.is_relayable:
            logger.debug(
                "Ignoring %s message from %s (group=%s)",
                message.message_type,
                message.conversation_id,
                message.is_group,
            )
            return None

        logger.info("Message received from %s: %s", message.conversation_id, message.body[:100])
        generation = self._registry.append(
            message.conversation_id, message.body, reply_address=message.sender_address
        )
        logger.info("Waiting for more messages from %s...", message.conversation_id)
        return generation

    def discard(self, conversation_id: str) -> bool:
        """Forget a conversation's pending messages without replying."""
        return self._registry.discard(conversation_id)

    async def wait_idle(self) -> None:
        """Wait for pending dispatches and the sends they started."""
        await self._registry.wait_idle()
        await self._pacer.drain()

    async def dispatch(self, conversation_id: str, generation: int) -> None:
        """Relay one debounce window; called by the registry when a timer expires."""
        snapshot = self._registry.snapshot_and_clear(conversation_id, generation)
        if snapshot is None:
            return

        context = {"conversation_id": conversation_id, "generation": generation}
        try:
            try:
                answer = await self._invoker.invoke(self._backend, conversation_id, snapshot.text)
            except AIBackendExhaustedError as e:
                logger.warning(
                    "No answer from AI after %d attempt(s) for chat %s. Not sending messages.",
                    e.attempts,
                    conversation_id,
                    extra={"context": context},
                )
                return

            if not answer or not answer.strip():
                logger.warning(
                    "Empty answer from AI for chat %s. Not sending messages.",
                    conversation_id,
                    extra={"context": context},
                )
                return

            chunks = segment(answer)
            logger.info(
                "Sending %d messages to %s (from %d buffered)",
                len(chunks),
                snapshot.reply_address,
                snapshot.segment_count,
                extra={"context": context},
            )
            await self._pacer.deliver(self._transport, snapshot.reply_address, chunks)
        except Exception as e:
            logger.error("Dispatch error for %s: %s", conversation_id, e, exc_info=True)
        finally:
            logger.info("Dispatch finished for chat %s", conversation_id)
