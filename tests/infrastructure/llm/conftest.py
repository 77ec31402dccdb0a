"""Common fixtures for LLM infrastructure tests."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from batinh.config import LLMConfig, PersonaConfig
from batinh.infrastructure.llm import LLMClient


@pytest.fixture
def persona_config() -> PersonaConfig:
    """Create test persona config."""
    return PersonaConfig(name="Thầy Bát Tinh")


@pytest.fixture
def llm_config() -> LLMConfig:
    """Create test LLM config."""
    return LLMConfig(model="openai/gpt-4o-mini", temperature=0.7, max_tokens=1000)


@pytest.fixture
def mock_client(llm_config: LLMConfig) -> MagicMock:
    """Create a mock LLMClient."""
    client = MagicMock(spec=LLMClient)
    client.config = llm_config
    client.complete = AsyncMock(return_value="Số điện thoại này rất tốt.")
    return client
