"""HTTP bridge to the chat network."""

from typing import Protocol

import httpx

from ..errors import DeliveryError
from ..models import DeliveryReceipt


class ITransport(Protocol):
    """Outbound side of the chat transport."""

    async def send_text(self, address: str, text: str) -> DeliveryReceipt:
        """Send ``text`` to ``address``; raise DeliveryError on failure."""
        ...


class BridgeTransport:
    """Sends texts through a chat bridge's ``POST /send`` endpoint."""

    def __init__(
        self,
        base_url: str,
        token: str | None = None,
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ):
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        self._client = client or httpx.AsyncClient(
            base_url=base_url, headers=headers, timeout=timeout
        )

    async def send_text(self, address: str, text: str) -> DeliveryReceipt:
        try:
            response = await self._client.post("/send", json={"to": address, "text": text})
            response.raise_for_status()
            data = response.json()
            if not isinstance(data, dict):
                raise ValueError(f"expected a JSON object, got {type(data).__name__}")
        except (httpx.HTTPError, ValueError) as e:
            raise DeliveryError(f"Bridge send to {address} failed: {e}") from e

        return DeliveryReceipt(body=data.get("body", text), id=data.get("id"))

    async def close(self) -> None:
        await self._client.aclose()
