"""Combination matching."""

import logging

from batinh.domain.entities import (
    CombinationKind,
    CombinationMatch,
    CombinationReport,
    DigitPosition,
    KeyPositions,
    PositionReading,
    StarAssignment,
)
from batinh.domain.services.protocols import KnowledgeBase

logger = logging.getLogger(__name__)

PATTERN_LENGTH = 3


class CombinationMatcher:
    """Finds notable combinations in a digit string.

    Runs three independent passes: 3-digit code patterns, adjacent star
    pairs and fixed digit positions. A special-ending check closes the
    key combination list.
    """

    def __init__(self, knowledge_base: KnowledgeBase) -> None:
        self._knowledge_base = knowledge_base

    def match(
        self, digit_string: str, star_sequence: list[StarAssignment]
    ) -> CombinationReport:
        """Match combinations.

        key_combinations are ordered by significance: 3-digit patterns left
        to right, then star pairs (the pair touching the final star first,
        then by combined energy descending, then by position), then special
        endings.

        Args:
            digit_string: Normalized digits.
            star_sequence: Assignments produced from the same digits.

        Returns:
            Combination report.
        """
        patterns = self._match_patterns(digit_string)
        key_pairs, dangerous_pairs = self._match_star_pairs(star_sequence)
        special = self._match_special_ending(digit_string)

        key_combinations = patterns + key_pairs + special
        logger.debug(
            "Matched %d key and %d dangerous combinations in %s",
            len(key_combinations),
            len(dangerous_pairs),
            digit_string,
        )
        return CombinationReport(
            key_combinations=key_combinations,
            dangerous_combinations=dangerous_pairs,
            key_positions=self._read_positions(digit_string),
        )

    def _match_patterns(self, digits: str) -> list[CombinationMatch]:
        matches: list[CombinationMatch] = []
        last_window = len(digits) - PATTERN_LENGTH
        for i in range(last_window + 1):
            window = digits[i : i + PATTERN_LENGTH]
            for entry in self._knowledge_base.three_digit_pattern_of(window):
                matches.append(
                    CombinationMatch(
                        kind=CombinationKind.THREE_DIGIT_PATTERN,
                        code=entry.code,
                        matched_value=window,
                        description=entry.description,
                        detailed_description=entry.detailed_description,
                        category=entry.category,
                        position=i,
                        involves_last_pair=i == last_window,
                    )
                )
        return matches

    def _match_star_pairs(
        self, star_sequence: list[StarAssignment]
    ) -> tuple[list[CombinationMatch], list[CombinationMatch]]:
        key: list[CombinationMatch] = []
        dangerous: list[CombinationMatch] = []
        for first, second in zip(star_sequence, star_sequence[1:]):
            entry = self._knowledge_base.star_pair_interpretation(
                first.star, second.star
            )
            combined = first.energy_level + second.energy_level
            match = CombinationMatch(
                kind=CombinationKind.STAR_PAIR,
                code=entry.code,
                matched_value=f"{first.pair_value}-{second.pair_value}",
                description=entry.description,
                detailed_description=entry.detailed_description,
                source_stars=(first.star, second.star),
                position=first.position,
                combined_energy=combined,
                involves_last_pair=second.is_last_pair,
            )
            if entry.warning:
                dangerous.append(match)
            elif combined > entry.energy_threshold:
                key.append(match)

        return sorted(key, key=_significance), sorted(dangerous, key=_significance)

    def _match_special_ending(self, digits: str) -> list[CombinationMatch]:
        if len(digits) < PATTERN_LENGTH:
            return []
        ending = digits[-PATTERN_LENGTH:]
        entry = self._knowledge_base.special_ending_of(ending)
        if entry is None:
            return []
        return [
            CombinationMatch(
                kind=CombinationKind.SPECIAL_ENDING,
                code=entry.code,
                matched_value=ending,
                description=entry.description,
                detailed_description=entry.detailed_description,
                position=len(digits) - PATTERN_LENGTH,
                involves_last_pair=True,
            )
        ]

    def _read_positions(self, digits: str) -> KeyPositions:
        readings: dict[DigitPosition, PositionReading] = {}
        for position in DigitPosition:
            if len(digits) < position.offset:
                continue
            value = digits[-position.offset]
            meaning = self._knowledge_base.digit_meaning(position, value) or ""
            readings[position] = PositionReading(
                position=position, value=value, meaning=meaning
            )
        return KeyPositions(
            last_digit=readings.get(DigitPosition.LAST),
            third_from_end=readings.get(DigitPosition.THIRD_FROM_END),
            fifth_from_end=readings.get(DigitPosition.FIFTH_FROM_END),
        )


def _significance(match: CombinationMatch) -> tuple[bool, int, int]:
    return (not match.involves_last_pair, -match.combined_energy, match.position)
