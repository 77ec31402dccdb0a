"""Conversation context store protocol."""

from typing import Protocol

from batinh.domain.entities import AnalysisResult, ConversationTurn, CurrentPhone


class ConversationContextStore(Protocol):
    """Per-caller conversational memory.

    Switching the caller to a different phone number clears the transcript;
    saving the current number again keeps it. The transcript never exceeds
    the store's maximum turn count; whole exchanges are evicted oldest first,
    so a replayed transcript never opens with a system reply.
    """

    async def save_current_phone(
        self,
        caller_id: str,
        phone_number: str,
        analysis: AnalysisResult,
    ) -> None:
        """Make phone_number the caller's current number.

        The transcript is cleared when the number differs from the current one.
        """
        ...

    async def get_current_phone(self, caller_id: str) -> CurrentPhone | None:
        """Return the caller's current number, or None."""
        ...

    async def append_turn(self, caller_id: str, turn: ConversationTurn) -> None:
        """Append a turn, evicting the oldest beyond the limit."""
        ...

    async def get_transcript(self, caller_id: str) -> list[ConversationTurn]:
        """Return a copy of the caller's transcript, oldest first."""
        ...

    async def clear(self, caller_id: str) -> None:
        """Forget everything about the caller."""
        ...

    async def has_active_conversation(self, caller_id: str) -> bool:
        """Whether the caller has a non-empty transcript."""
        ...
