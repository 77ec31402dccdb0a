"""LLM integration."""

from batinh.infrastructure.llm.client import LLMClient
from batinh.infrastructure.llm.exceptions import (
    LLMAuthenticationError,
    LLMBadRequestError,
    LLMConnectionError,
    LLMEmptyResponseError,
    LLMError,
    LLMModelNotFoundError,
    LLMRateLimitError,
    LLMServerError,
    LLMTimeoutError,
)
from batinh.infrastructure.llm.intent_extractor import LLMIntentExtractor
from batinh.infrastructure.llm.orchestrator import (
    GenerationOrchestrator,
    build_cache_key,
)
from batinh.infrastructure.llm.prompt_builder import PromptBuilder

__all__ = [
    "GenerationOrchestrator",
    "LLMAuthenticationError",
    "LLMBadRequestError",
    "LLMClient",
    "LLMConnectionError",
    "LLMEmptyResponseError",
    "LLMError",
    "LLMIntentExtractor",
    "LLMModelNotFoundError",
    "LLMRateLimitError",
    "LLMServerError",
    "LLMTimeoutError",
    "PromptBuilder",
    "build_cache_key",
]
