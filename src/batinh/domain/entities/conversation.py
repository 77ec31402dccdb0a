"""Conversation entities."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from batinh.domain.entities.analysis import AnalysisResult


class TurnRole(str, Enum):
    """Author of a transcript turn.

    CALLER is the person asking; SYSTEM is the reading service's reply.
    """

    CALLER = "caller"
    SYSTEM = "system"

    @property
    def llm_role(self) -> str:
        """OpenAI-format role used when replaying the turn."""
        return "user" if self is TurnRole.CALLER else "assistant"


@dataclass(frozen=True)
class ConversationTurn:
    """One transcript entry."""

    role: TurnRole
    content: str

    def to_message(self) -> dict[str, str]:
        """Convert to an OpenAI-format message."""
        return {"role": self.role.llm_role, "content": self.content}


@dataclass(frozen=True)
class CurrentPhone:
    """The number a caller is currently discussing.

    Attributes:
        phone_number: Normalized digit string.
        analysis: Its structured analysis.
        timestamp: When it became the current number.
    """

    phone_number: str
    analysis: AnalysisResult
    timestamp: datetime


@dataclass
class ConversationContext:
    """Per-caller conversational memory.

    Structured context (current number and analysis) is kept apart from the
    free-text transcript replayed to the model.

    Attributes:
        caller_id: Opaque caller identity.
        current: Current number and analysis, if any.
        transcript: Ordered turns, oldest first.
    """

    caller_id: str
    current: CurrentPhone | None = None
    transcript: list[ConversationTurn] = field(default_factory=list)
