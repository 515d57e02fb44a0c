"""Human-paced delivery of reply chunks."""

import asyncio
from typing import Iterable

from ..logging_config import get_logger
from ..transport import ITransport

logger = get_logger(__name__)


class Pacer:
    """
    Sends chunks one by one, waiting a typing delay before each.

    The delay is ``len(chunk) * delay_per_char_seconds``. By default a send
    is only started before the next delay begins, not awaited, so a slow or
    failing send never holds back the chunks after it. With ``strict=True``
    each send completes before the next delay starts.
    """

    def __init__(self, delay_per_char_seconds: float = 0.1, strict: bool = False):
        self._delay_per_char = delay_per_char_seconds
        self._strict = strict
        self._sends: set[asyncio.Task] = set()

    @property
    def strict(self) -> bool:
        return self._strict

    def delay_for(self, chunk: str) -> float:
        return len(chunk) * self._delay_per_char

    async def deliver(self, transport: ITransport, address: str, chunks: Iterable[str]) -> int:
        """Deliver ``chunks`` in order to ``address``. Returns the number of sends started."""
        started = 0
        for chunk in chunks:
            await asyncio.sleep(self.delay_for(chunk))

            text = chunk.lstrip()
            if not text.strip():
                continue

            if self._strict:
                await self._send(transport, address, text)
            else:
                task = asyncio.create_task(self._send(transport, address, text))
                self._sends.add(task)
                task.add_done_callback(self._sends.discard)
            started += 1
        return started

    async def drain(self) -> None:
        """Wait for every started send to finish."""
        while self._sends:
            await asyncio.gather(*list(self._sends), return_exceptions=True)

    async def _send(self, transport: ITransport, address: str, text: str) -> None:
        try:
            receipt = await transport.send_text(address, text)
        except Exception as e:
            logger.error(
                "Failed to send message to %s: %s",
                address,
                e,
                exc_info=True,
                extra={"context": {"address": address, "chunk_length": len(text)}},
            )
            return
        logger.info("Message sent to %s: %s", address, receipt.body)
