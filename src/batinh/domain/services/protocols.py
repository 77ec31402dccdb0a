"""Domain service protocols."""

from typing import Protocol

from batinh.domain.entities import (
    ClassifiedMessage,
    DigitPosition,
    GenerationOptions,
    PatternEntry,
    PromptContext,
    SpecificCombination,
    Star,
    StarInfo,
    StarPairEntry,
    TemplateKind,
)


class KnowledgeBase(Protocol):
    """Read-only Bát Tinh knowledge base.

    Implementations must be total over the digit pairs "00".."99".
    """

    def star_of(self, pair: str) -> tuple[Star, int]:
        """Resolve a two-digit pair.

        Args:
            pair: Two-character digit string.

        Returns:
            The star and the pair's energy level (0-4).

        Raises:
            KnowledgeGapError: The pair has no entry.
        """
        ...

    def star_info(self, star: Star) -> StarInfo:
        """Return static knowledge about a star."""
        ...

    def star_pair_interpretation(self, first: Star, second: Star) -> StarPairEntry:
        """Interpret an ordered star pair.

        Raises:
            KnowledgeGapError: The pair has no entry.
        """
        ...

    def three_digit_pattern_of(self, digits: str) -> list[PatternEntry]:
        """Return every pattern whose code list contains digits."""
        ...

    def special_ending_of(self, digits: str) -> SpecificCombination | None:
        """Return the special-ending entry if digits is a special ending."""
        ...

    def specific_examples_for(self, digits: str) -> list[SpecificCombination]:
        """Return specific combinations listing digits among their examples."""
        ...

    def digit_meaning(self, position: DigitPosition, digit: str) -> str | None:
        """Return the meaning of a digit at a fixed position."""
        ...

    def stars(self) -> list[StarInfo]:
        """Return all stars, auspicious first."""
        ...


class IntentExtractor(Protocol):
    """Best-effort natural-language message classification."""

    async def extract(self, message: str) -> ClassifiedMessage:
        """Classify a message.

        Args:
            message: Caller's raw message.

        Returns:
            Proposed intent, phone numbers and main question.
        """
        ...


class PromptRenderer(Protocol):
    """Renders prompt templates."""

    def build(self, template_kind: TemplateKind, context: PromptContext) -> str:
        """Render a template. Same inputs always yield the same string."""
        ...


class NarrativeGenerator(Protocol):
    """Sends rendered prompts to the remote generation service."""

    async def generate(self, prompt: str, options: GenerationOptions) -> str:
        """Generate narrative text.

        Raises:
            GenerationServiceError: The call failed permanently.
            GenerationCancelledError: The call was cancelled.
        """
        ...
