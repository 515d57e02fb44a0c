"""Exceptions raised across the relay pipeline."""


class AIBackendError(RuntimeError):
    """An AI backend could not produce an answer."""


class AIBackendTransientError(AIBackendError):
    """A single invocation attempt failed."""


class AIBackendExhaustedError(AIBackendError):
    """Every retry attempt failed."""

    def __init__(self, conversation_id: str, attempts: int, last_error: BaseException | None = None):
        self.conversation_id = conversation_id
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(
            f"AI backend gave no answer for {conversation_id} after {attempts} attempt(s)"
        )


class DeliveryError(RuntimeError):
    """The transport failed to send a chunk."""


class ConfigError(ValueError):
    """Configuration is missing or invalid."""
