"""Domain repositories."""

from batinh.domain.repositories.analysis_repository import AnalysisRepository
from batinh.domain.repositories.context_store import ConversationContextStore
from batinh.domain.repositories.generation_cache import GenerationCacheRepository

__all__ = [
    "AnalysisRepository",
    "ConversationContextStore",
    "GenerationCacheRepository",
]
