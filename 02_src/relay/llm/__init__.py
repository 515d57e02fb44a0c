"""LLM module."""

from .backends import ClaudeBackend, GeminiBackend, IAIBackend, OpenAIAssistantBackend
from .factory import create_backend
from .invoker import RetryingInvoker

__all__ = [
    "IAIBackend",
    "OpenAIAssistantBackend",
    "GeminiBackend",
    "ClaudeBackend",
    "create_backend",
    "RetryingInvoker",
]
