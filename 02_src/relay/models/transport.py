"""Transport connection state."""

from dataclasses import asdict, dataclass
from typing import Any


@dataclass
class TransportState:
    """Last known state of the chat transport connection."""

    status: str = "initializing"
    qr_code: str | None = None
    message: str | None = "Service is starting..."
    session_name: str | None = None
    error: Any = None

    def to_dict(self) -> dict:
        return asdict(self)
