"""Shared fixtures."""

import os

# Use litellm's bundled model cost map instead of fetching it over the
# network at import time (the fetch can deadlock imports when offline).
os.environ.setdefault("LITELLM_LOCAL_MODEL_COST_MAP", "True")

from datetime import datetime, timezone

import pytest

from batinh.domain.services import PhoneNumberAnalyzer
from batinh.infrastructure.knowledge import YamlKnowledgeBase


@pytest.fixture(scope="session")
def knowledge_base() -> YamlKnowledgeBase:
    """Load the packaged knowledge base once."""
    return YamlKnowledgeBase.from_file()


@pytest.fixture
def analyzer(knowledge_base: YamlKnowledgeBase) -> PhoneNumberAnalyzer:
    """Create a phone number analyzer with default settings."""
    return PhoneNumberAnalyzer.create(knowledge_base)


@pytest.fixture
def now() -> datetime:
    """Create a fixed current time for testing."""
    return datetime(2024, 1, 15, 12, 0, 0, tzinfo=timezone.utc)
