"""In-process conversation context store."""

import logging
from collections.abc import Callable
from datetime import datetime, timezone

from batinh.domain.entities import (
    AnalysisResult,
    ConversationContext,
    ConversationTurn,
    CurrentPhone,
    TurnRole,
)

logger = logging.getLogger(__name__)


class InMemoryConversationContextStore:
    """ConversationContextStore backed by a dict.

    Methods do not lock; callers serialize work per caller.
    """

    def __init__(
        self,
        max_turns: int = 20,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ) -> None:
        """Initialize.

        Args:
            max_turns: Maximum transcript entries kept per caller.
            clock: Current time source.
        """
        if max_turns < 1:
            raise ValueError("max_turns must be at least 1")
        self._max_turns = max_turns
        self._clock = clock
        self._contexts: dict[str, ConversationContext] = {}

    def _context(self, caller_id: str) -> ConversationContext:
        context = self._contexts.get(caller_id)
        if context is None:
            context = ConversationContext(caller_id=caller_id)
            self._contexts[caller_id] = context
        return context

    async def save_current_phone(
        self,
        caller_id: str,
        phone_number: str,
        analysis: AnalysisResult,
    ) -> None:
        context = self._context(caller_id)
        previous = context.current
        context.current = CurrentPhone(
            phone_number=phone_number, analysis=analysis, timestamp=self._clock()
        )
        if previous is None or previous.phone_number != phone_number:
            context.transcript.clear()
            logger.debug("Caller %s switched to %s", caller_id, phone_number)

    async def get_current_phone(self, caller_id: str) -> CurrentPhone | None:
        context = self._contexts.get(caller_id)
        return context.current if context else None

    async def append_turn(self, caller_id: str, turn: ConversationTurn) -> None:
        transcript = self._context(caller_id).transcript
        transcript.append(turn)
        overflow = len(transcript) - self._max_turns
        if overflow > 0:
            del transcript[:overflow]
            # Drop the reply whose prompt was just evicted
            while transcript and transcript[0].role is TurnRole.SYSTEM:
                del transcript[0]

    async def get_transcript(self, caller_id: str) -> list[ConversationTurn]:
        context = self._contexts.get(caller_id)
        return list(context.transcript) if context else []

    async def clear(self, caller_id: str) -> None:
        self._contexts.pop(caller_id, None)
        logger.debug("Cleared context of %s", caller_id)

    async def has_active_conversation(self, caller_id: str) -> bool:
        context = self._contexts.get(caller_id)
        return bool(context and context.transcript)
