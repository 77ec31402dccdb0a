"""In-process storage backends."""

from batinh.infrastructure.memory.context_store import (
    InMemoryConversationContextStore,
)
from batinh.infrastructure.memory.generation_cache import InMemoryGenerationCache

__all__ = ["InMemoryConversationContextStore", "InMemoryGenerationCache"]
