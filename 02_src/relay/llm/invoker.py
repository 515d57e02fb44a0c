"""Bounded retry around an AI backend."""

import asyncio

from ..errors import AIBackendExhaustedError
from ..logging_config import get_logger
from .backends import IAIBackend

logger = get_logger(__name__)


class RetryingInvoker:
    """Calls a backend up to ``max_retries`` times, with no delay between attempts."""

    def __init__(self, max_retries: int = 3, timeout_seconds: float | None = None):
        if max_retries < 0:
            raise ValueError("max_retries must be non-negative")
        self._max_retries = max_retries
        self._timeout = timeout_seconds

    @property
    def max_retries(self) -> int:
        return self._max_retries

    async def invoke(self, backend: IAIBackend, conversation_id: str, text: str) -> str:
        """
        Return the first successful answer.

        Raises:
            AIBackendExhaustedError: When every attempt failed.
        """
        last_error: BaseException | None = None
        for attempt in range(1, self._max_retries + 1):
            try:
                if self._timeout is None:
                    return await backend.invoke(conversation_id, text)
                return await asyncio.wait_for(
                    backend.invoke(conversation_id, text), timeout=self._timeout
                )
            except asyncio.CancelledError:
                raise
            except Exception as e:
                last_error = e
                logger.error(
                    "AI attempt %d/%d failed for chat %s: %s",
                    attempt,
                    self._max_retries,
                    conversation_id,
                    e,
                    exc_info=True,
                    extra={"context": {"conversation_id": conversation_id, "attempt": attempt}},
                )

        raise AIBackendExhaustedError(conversation_id, self._max_retries, last_error)
