"""Pytest configuration and fixtures."""

import sys
from pathlib import Path
from unittest.mock import AsyncMock, Mock

import pytest

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from relay.models import DeliveryReceipt  # noqa: E402

# Short enough to keep tests fast, long enough to aggregate back-to-back messages
TEST_WINDOW_SECONDS = 0.05


@pytest.fixture
def mock_backend():
    """Create mock AI backend."""
    backend = Mock()
    backend.invoke = AsyncMock(return_value="Test response.")
    return backend


@pytest.fixture
def mock_transport():
    """Create mock transport that echoes the sent text in its receipt."""
    transport = Mock()

    async def send_text(address: str, text: str) -> DeliveryReceipt:
        return DeliveryReceipt(body=text)

    transport.send_text = AsyncMock(side_effect=send_text)
    return transport


@pytest.fixture
def pacer():
    """Create pacer without typing delays."""
    from relay.delivery import Pacer

    return Pacer(delay_per_char_seconds=0)


@pytest.fixture
def invoker():
    """Create invoker with the default retry bound."""
    from relay.llm import RetryingInvoker

    return RetryingInvoker(max_retries=3)


@pytest.fixture
async def coordinator(mock_backend, mock_transport, invoker, pacer):
    """Create started DispatchCoordinator for testing."""
    from relay.conversation import DispatchCoordinator

    dc = DispatchCoordinator(
        backend=mock_backend,
        transport=mock_transport,
        invoker=invoker,
        pacer=pacer,
        window_seconds=TEST_WINDOW_SECONDS,
    )
    await dc.start()
    yield dc
    await dc.stop()


@pytest.fixture
def settings(tmp_path):
    """Create settings for a Claude backend with a temporary .env file."""
    from relay.config import Settings
    from relay.models import AIOption

    return Settings(
        ai_selected=AIOption.CLAUDE,
        anthropic_api_key="test_key",
        buffer_timeout_ms=50,
        typing_delay_per_char_ms=0,
        env_file=tmp_path / ".env",
    )
