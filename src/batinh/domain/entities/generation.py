"""Generation request and cache entities."""

import asyncio
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from batinh.domain.entities.analysis import AnalysisResult


class TemplateKind(str, Enum):
    """Prompt templates."""

    SINGLE_ANALYSIS = "single_analysis"
    TARGETED_QUESTION = "targeted_question"
    COMPARISON = "comparison"
    GENERAL_INFO = "general_info"
    FOLLOW_UP = "follow_up"


@dataclass(frozen=True)
class PromptContext:
    """Inputs for rendering a prompt template.

    Attributes:
        analysis: Analysis for single, targeted and follow-up templates.
        analyses: Analyses for the comparison template.
        question: Caller's free-text question.
    """

    analysis: AnalysisResult | None = None
    analyses: list[AnalysisResult] = field(default_factory=list)
    question: str = ""


@dataclass(frozen=True)
class GenerationOptions:
    """Per-call generation options.

    Attributes:
        temperature: Sampling temperature (None uses the client default).
        max_tokens: Output token limit (None uses the client default).
        use_cache: Allow cache lookup and insertion.
        use_history: Replay the caller's transcript before the prompt.
            Calls using history are never cached.
        caller_id: Caller whose transcript is read and appended to.
        cancel_event: When set, aborts the LLM call or the retry loop.
        template_kind: Template the prompt was rendered from, for logging.
    """

    temperature: float | None = None
    max_tokens: int | None = None
    use_cache: bool = True
    use_history: bool = False
    caller_id: str | None = None
    cancel_event: asyncio.Event | None = None
    template_kind: TemplateKind | None = None


@dataclass(frozen=True)
class GenerationRequest:
    """A rendered prompt ready to send.

    Attributes:
        template_kind: Template the prompt was rendered from, if known.
        rendered_prompt: Prompt text.
        temperature: Sampling temperature.
        use_history: Whether the caller's transcript is replayed.
        cache_key: Cache key, None for calls that are not cacheable.
    """

    template_kind: TemplateKind | None
    rendered_prompt: str
    temperature: float
    use_history: bool = False
    cache_key: str | None = None


@dataclass(frozen=True)
class GenerationCacheEntry:
    """A cached response."""

    key: str
    response: str
    created_at: datetime

    def is_fresh(self, current_time: datetime, ttl_seconds: int) -> bool:
        """Whether the entry is still within its TTL.

        Args:
            current_time: Current time.
            ttl_seconds: Time to live in seconds.

        Returns:
            True if current_time - created_at < ttl.
        """
        return (current_time - self.created_at).total_seconds() < ttl_seconds
