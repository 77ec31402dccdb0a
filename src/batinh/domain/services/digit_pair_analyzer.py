"""Digit pair analysis."""

import re

from batinh.domain.entities import StarAssignment
from batinh.domain.exceptions import InvalidInputError
from batinh.domain.services.protocols import KnowledgeBase

NON_DIGIT_PATTERN = re.compile(r"\D")


def normalize_digits(raw: str) -> str:
    """Strip every non-digit character.

    Args:
        raw: Raw phone number or digit string.

    Returns:
        Digits only.

    Raises:
        InvalidInputError: Fewer than 2 digits remain.
    """
    digits = NON_DIGIT_PATTERN.sub("", raw or "")
    if len(digits) < 2:
        raise InvalidInputError(
            f"Expected at least 2 digits, got {len(digits)} in {raw!r}"
        )
    return digits


class DigitPairAnalyzer:
    """Decomposes a digit string into overlapping star assignments."""

    def __init__(self, knowledge_base: KnowledgeBase) -> None:
        self._knowledge_base = knowledge_base

    def analyze(self, digit_string: str) -> list[StarAssignment]:
        """Resolve every overlapping pair of digits.

        A string of n digits yields n - 1 assignments; only the final one
        has is_last_pair set.

        Args:
            digit_string: Phone number, non-digits are ignored.

        Returns:
            Star assignments in left-to-right order.

        Raises:
            InvalidInputError: Fewer than 2 digits.
            KnowledgeGapError: A pair has no knowledge-base entry.
        """
        digits = normalize_digits(digit_string)
        last_index = len(digits) - 2
        assignments: list[StarAssignment] = []
        for i in range(len(digits) - 1):
            pair = digits[i : i + 2]
            star, energy = self._knowledge_base.star_of(pair)
            info = self._knowledge_base.star_info(star)
            assignments.append(
                StarAssignment(
                    pair_value=pair,
                    star=star,
                    energy_level=energy,
                    description=info.description,
                    detailed_description=info.detailed_description,
                    position=i,
                    is_last_pair=i == last_index,
                )
            )
        return assignments
