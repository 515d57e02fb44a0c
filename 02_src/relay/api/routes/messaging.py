"""Messaging API routes: the bridge's inbound webhook."""

from pydantic import BaseModel, Field
from fastapi import APIRouter, HTTPException

from ...app import IApplication
from ...models import InboundMessage


class InboundMessageRequest(BaseModel):
    """Inbound chat event posted by the bridge."""

    conversation_id: str
    sender_address: str
    body: str
    is_group: bool = False
    type: str = Field("chat", description="Transport message type; only 'chat' is relayed")


class InboundMessageResponse(BaseModel):
    """Whether the message was buffered, and under which generation."""

    accepted: bool
    generation: int | None = None


class DiscardResponse(BaseModel):
    discarded: bool


def create_messaging_router(app: IApplication) -> APIRouter:
    """Create messaging router."""
    router = APIRouter(prefix="/api", tags=["messaging"])

    @router.post("/messages/inbound", response_model=InboundMessageResponse, status_code=202)
    async def receive_message(request: InboundMessageRequest) -> dict:
        """Buffer an inbound message; the reply is sent after the quiet period."""
        message = InboundMessage(
            conversation_id=request.conversation_id,
            sender_address=request.sender_address,
            body=request.body,
            is_group=request.is_group,
            message_type=request.type,
        )
        try:
            generation = await app.coordinator.handle_inbound(message)
        except RuntimeError as e:
            raise HTTPException(status_code=503, detail=str(e))
        return {"accepted": generation is not None, "generation": generation}

    @router.delete("/conversations/{conversation_id}/buffer", response_model=DiscardResponse)
    async def discard_buffer(conversation_id: str) -> dict:
        """Drop pending messages of a conversation without replying."""
        return {"discarded": app.coordinator.discard(conversation_id)}

    return router
