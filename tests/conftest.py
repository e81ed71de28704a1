"""
Pytest configuration and fixtures for EcoChat tests.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from ecochat.core.catalog import ProviderCatalog
from ecochat.core.config import ClimatiqConfig, EcoChatConfig, ProviderConfig, set_config
from ecochat.core.types import CompletionResponse, Message
from ecochat.providers.base import BaseProvider


@pytest.fixture(autouse=True)
def reset_global_config():
    """Keep the process-wide config from leaking between tests."""
    set_config(None)
    yield
    set_config(None)


@pytest.fixture
def test_config() -> EcoChatConfig:
    """Provide a test configuration with no network services enabled."""
    return EcoChatConfig(
        completion=ProviderConfig(api_key="test-api-key", max_retries=1),
        climatiq=ClimatiqConfig(api_key=None),
    )


@pytest.fixture
def default_catalog() -> ProviderCatalog:
    return ProviderCatalog.default()


@pytest.fixture
def sample_messages() -> list[Message]:
    """Provide sample messages for testing."""
    return [
        Message(role="user", content="Hello, how are you?"),
    ]


@pytest.fixture
def mock_completion_response() -> CompletionResponse:
    """Provide a mock completion response."""
    return CompletionResponse(
        content="Quantum computers use qubits that can hold superpositions.",
        tokens_used=25,
        input_tokens=10,
        output_tokens=15,
        model="deepseek-chat",
        finish_reason="stop",
        latency_ms=500.0,
    )


@pytest.fixture
def mock_provider(mock_completion_response: CompletionResponse) -> MagicMock:
    """Provide a mock completion provider."""
    provider = MagicMock(spec=BaseProvider)
    provider.name = "mock"
    provider.model = "mock-model"
    provider.complete = AsyncMock(return_value=mock_completion_response)
    provider.close = AsyncMock()
    provider.count_tokens = MagicMock(return_value=10)
    return provider
