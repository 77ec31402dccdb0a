"""Analysis repository protocol."""

from typing import Protocol

from batinh.domain.entities import AnalysisRecord, AnalysisResult


class AnalysisRepository(Protocol):
    """Durable storage of analyses."""

    async def save(
        self,
        caller_id: str,
        phone_number: str,
        analysis: AnalysisResult,
        narrative: str | None = None,
    ) -> None:
        """Store an analysis.

        Args:
            caller_id: Owner of the analysis.
            phone_number: Normalized digit string.
            analysis: Structured analysis.
            narrative: Generated narrative, if any.
        """
        ...

    async def find_latest(
        self,
        caller_id: str,
        phone_number: str | None = None,
    ) -> AnalysisRecord | None:
        """Find the most recent analysis.

        Args:
            caller_id: Owner of the analysis.
            phone_number: Restrict to this number (None for any number).

        Returns:
            Most recent record, or None.
        """
        ...
