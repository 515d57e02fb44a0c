"""Last known transport connection state, reported by the bridge."""

from ..logging_config import get_logger
from ..models import TransportState

logger = get_logger(__name__)


class TransportStatus:
    """Holds the connection state shown by the status API."""

    def __init__(self) -> None:
        self._state = TransportState()

    def update(self, **changes) -> TransportState:
        """Merge ``changes`` into the current state."""
        unknown = set(changes) - set(TransportState.__dataclass_fields__)
        if unknown:
            raise ValueError(f"Unknown transport state fields: {sorted(unknown)}")

        for name, value in changes.items():
            setattr(self._state, name, value)
        # QR payloads are large and short-lived; keep them out of the logs
        snapshot = {k: v for k, v in self._state.to_dict().items() if k != "qr_code"}
        logger.info(
            "Transport status updated: %s",
            self._state.status,
            extra={"context": {"transport": snapshot}},
        )
        return self._state

    def get(self) -> TransportState:
        return self._state
