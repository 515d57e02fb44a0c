"""Chat transport module."""

from .bridge import BridgeTransport, ITransport
from .status import TransportStatus

__all__ = ["ITransport", "BridgeTransport", "TransportStatus"]
