"""Persistence infrastructure."""

from batinh.infrastructure.persistence.analysis_repository import (
    SQLiteAnalysisRepository,
)
from batinh.infrastructure.persistence.database import DatabaseManager
from batinh.infrastructure.persistence.exceptions import (
    DatabaseError,
    PersistenceError,
)
from batinh.infrastructure.persistence.generation_cache_repository import (
    SQLiteGenerationCacheRepository,
)
from batinh.infrastructure.persistence.models import (
    AnalysisModel,
    GenerationCacheModel,
)

__all__ = [
    "AnalysisModel",
    "DatabaseError",
    "DatabaseManager",
    "GenerationCacheModel",
    "PersistenceError",
    "SQLiteAnalysisRepository",
    "SQLiteGenerationCacheRepository",
]
