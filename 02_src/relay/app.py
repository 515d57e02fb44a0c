"""Application bootstrap and lifecycle management."""

from typing import Protocol

from .config import Settings
from .conversation import DispatchCoordinator
from .delivery import Pacer
from .llm import IAIBackend, RetryingInvoker, create_backend
from .logging_config import get_logger
from .transport import BridgeTransport, ITransport, TransportStatus

logger = get_logger(__name__)


class IApplication(Protocol):
    """Bootstrap and lifecycle."""

    async def start(self) -> None:
        """Initialize components in dependency order."""
        ...

    async def stop(self) -> None:
        """Shutdown in reverse order."""
        ...

    @property
    def settings(self) -> Settings: ...

    @property
    def transport_status(self) -> TransportStatus: ...

    @property
    def coordinator(self) -> DispatchCoordinator: ...


class Application:
    """Main application bootstrap."""

    def __init__(
        self,
        settings: Settings | None = None,
        backend: IAIBackend | None = None,
        transport: ITransport | None = None,
    ):
        self._settings = settings or Settings.from_env()

        # Injected collaborators are not owned: stop() leaves them open
        self._backend = backend
        self._transport = transport
        self._owns_transport = transport is None

        self._transport_status = TransportStatus()
        self._coordinator: DispatchCoordinator | None = None

    async def start(self) -> None:
        """Initialize components in dependency order."""
        logger.info("Starting application (AI_SELECTED=%s)", self._settings.ai_selected.value)

        # 1. Settings; an injected backend brings its own credentials
        if self._backend is None:
            self._settings.validate()
            self._backend = create_backend(self._settings)
        logger.info("AI backend initialized")

        # 2. Transport
        if self._transport is None:
            self._transport = BridgeTransport(
                base_url=self._settings.bridge_url,
                token=self._settings.bridge_token,
            )
        self._transport_status.update(
            status="starting_bridge", message="Waiting for the chat bridge to connect..."
        )

        # 3. DispatchCoordinator (depends on backend + transport)
        self._coordinator = DispatchCoordinator(
            backend=self._backend,
            transport=self._transport,
            invoker=RetryingInvoker(
                max_retries=self._settings.max_retries,
                timeout_seconds=self._settings.ai_timeout_seconds,
            ),
            pacer=Pacer(
                delay_per_char_seconds=self._settings.typing_delay_per_char_seconds,
                strict=self._settings.strict_delivery,
            ),
            window_seconds=self._settings.buffer_timeout_seconds,
        )
        await self._coordinator.start()
        logger.info("All components initialized successfully")

    async def stop(self) -> None:
        """Shutdown in reverse order."""
        if self._coordinator:
            await self._coordinator.stop()
        if self._transport and self._owns_transport:
            await self._transport.close()
            self._transport = None
            logger.info("Transport closed")

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def transport_status(self) -> TransportStatus:
        return self._transport_status

    @property
    def coordinator(self) -> DispatchCoordinator:
        """Get dispatch coordinator instance."""
        if not self._coordinator:
            raise RuntimeError("Application not started")
        return self._coordinator
