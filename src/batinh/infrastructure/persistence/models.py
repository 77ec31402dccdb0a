"""SQLModel table definitions."""

from datetime import datetime, timezone

from sqlmodel import Field, SQLModel


class AnalysisModel(SQLModel, table=True):
    """Stored phone number analyses."""

    __tablename__ = "analyses"

    id: int | None = Field(default=None, primary_key=True)
    caller_id: str = Field(index=True)
    phone_number: str = Field(index=True)
    result_json: str  # AnalysisResult.to_dict() as JSON
    narrative: str | None = None
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc), index=True
    )


class GenerationCacheModel(SQLModel, table=True):
    """Cached LLM responses."""

    __tablename__ = "generation_caches"

    id: int | None = Field(default=None, primary_key=True)
    cache_key: str = Field(unique=True, index=True)
    response: str
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc), index=True
    )
