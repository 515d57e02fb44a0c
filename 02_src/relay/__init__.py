"""Zap Relay: debounced chat relay to an AI backend."""

from .app import Application, IApplication
from .config import Settings
from .conversation import BufferRegistry, DispatchCoordinator, IDispatchCoordinator
from .delivery import Pacer, segment
from .errors import (
    AIBackendError,
    AIBackendExhaustedError,
    AIBackendTransientError,
    ConfigError,
    DeliveryError,
)
from .llm import (
    ClaudeBackend,
    GeminiBackend,
    IAIBackend,
    OpenAIAssistantBackend,
    RetryingInvoker,
    create_backend,
)
from .models import (
    AIOption,
    BufferSnapshot,
    ConversationBuffer,
    DeliveryReceipt,
    InboundMessage,
    TransportState,
)
from .transport import BridgeTransport, ITransport, TransportStatus

__all__ = [
    # Application
    "Application",
    "IApplication",
    "Settings",
    # Models
    "AIOption",
    "ConversationBuffer",
    "BufferSnapshot",
    "InboundMessage",
    "DeliveryReceipt",
    "TransportState",
    # Errors
    "AIBackendError",
    "AIBackendTransientError",
    "AIBackendExhaustedError",
    "DeliveryError",
    "ConfigError",
    # Components
    "BufferRegistry",
    "IDispatchCoordinator",
    "DispatchCoordinator",
    "segment",
    "Pacer",
    "IAIBackend",
    "OpenAIAssistantBackend",
    "GeminiBackend",
    "ClaudeBackend",
    "create_backend",
    "RetryingInvoker",
    "ITransport",
    "BridgeTransport",
    "TransportStatus",
]
