"""Service and transport status routes."""

from typing import Any

from pydantic import BaseModel
from fastapi import APIRouter

from ...app import IApplication


class ServiceStatusResponse(BaseModel):
    status: str
    message: str
    ai_selected: str
    pending_conversations: int


class TransportStateModel(BaseModel):
    """Transport connection state as reported by the bridge."""

    status: str
    qr_code: str | None = None
    message: str | None = None
    session_name: str | None = None
    error: Any = None


class TransportStateUpdate(BaseModel):
    status: str | None = None
    qr_code: str | None = None
    message: str | None = None
    session_name: str | None = None
    error: Any = None


def create_status_router(app: IApplication) -> APIRouter:
    """Create status router."""
    router = APIRouter(prefix="/api/status", tags=["status"])

    @router.get("/service", response_model=ServiceStatusResponse)
    async def service_status() -> dict:
        """Report that the relay is up."""
        return {
            "status": "running",
            "message": "Relay service is active.",
            "ai_selected": app.settings.ai_selected.value,
            "pending_conversations": len(app.coordinator.registry),
        }

    @router.get("/whatsapp", response_model=TransportStateModel)
    async def transport_status() -> dict:
        """Get the last reported transport state (connection, QR code)."""
        return app.transport_status.get().to_dict()

    @router.post("/whatsapp", response_model=TransportStateModel)
    async def update_transport_status(update: TransportStateUpdate) -> dict:
        """Let the bridge push connection state changes."""
        state = app.transport_status.update(**update.model_dump(exclude_unset=True))
        return state.to_dict()

    return router
