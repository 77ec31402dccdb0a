"""Phone number analysis."""

import logging

from batinh.domain.entities import AnalysisResult, LastThreeAnalysis, StarAssignment
from batinh.domain.exceptions import InvalidInputError
from batinh.domain.services.combination_matcher import CombinationMatcher
from batinh.domain.services.digit_pair_analyzer import (
    NON_DIGIT_PATTERN,
    DigitPairAnalyzer,
)
from batinh.domain.services.energy_aggregator import EnergyAggregator
from batinh.domain.services.protocols import KnowledgeBase

logger = logging.getLogger(__name__)

COUNTRY_CODE = "84"
TRUNK_PREFIX = "0"
MIN_PHONE_DIGITS = 10
MAX_PHONE_DIGITS = 11


def normalize_phone_number(raw: str) -> str:
    """Normalize a phone number for reading.

    Non-digits are stripped and a leading country code 84 becomes the
    trunk prefix 0, unless the national number already starts with 0.

    Args:
        raw: Phone number as typed, e.g. "+84 912.345.678".

    Returns:
        A 10-11 digit string.

    Raises:
        InvalidInputError: The result is not 10-11 digits long.
    """
    digits = NON_DIGIT_PATTERN.sub("", raw or "")
    if digits.startswith(COUNTRY_CODE) and len(digits) > MIN_PHONE_DIGITS:
        national = digits[len(COUNTRY_CODE) :]
        # "+84 0912..." already carries the trunk prefix
        if not national.startswith(TRUNK_PREFIX):
            national = TRUNK_PREFIX + national
        digits = national
    if not MIN_PHONE_DIGITS <= len(digits) <= MAX_PHONE_DIGITS:
        raise InvalidInputError(
            f"Phone number must have {MIN_PHONE_DIGITS}-{MAX_PHONE_DIGITS} "
            f"digits: {raw!r}"
        )
    return digits


class PhoneNumberAnalyzer:
    """Assembles the full AnalysisResult for a phone number."""

    def __init__(
        self,
        knowledge_base: KnowledgeBase,
        pair_analyzer: DigitPairAnalyzer,
        aggregator: EnergyAggregator,
        matcher: CombinationMatcher,
    ) -> None:
        self._knowledge_base = knowledge_base
        self._pair_analyzer = pair_analyzer
        self._aggregator = aggregator
        self._matcher = matcher

    @classmethod
    def create(
        cls,
        knowledge_base: KnowledgeBase,
        aggregator: EnergyAggregator | None = None,
    ) -> "PhoneNumberAnalyzer":
        """Build an analyzer whose components share one knowledge base."""
        return cls(
            knowledge_base=knowledge_base,
            pair_analyzer=DigitPairAnalyzer(knowledge_base),
            aggregator=aggregator or EnergyAggregator(),
            matcher=CombinationMatcher(knowledge_base),
        )

    def analyze(self, phone_number: str) -> AnalysisResult:
        """Analyze a phone number.

        Args:
            phone_number: Raw phone number.

        Returns:
            Analysis result.

        Raises:
            InvalidInputError: Not a 10-11 digit phone number.
            KnowledgeGapError: The knowledge base is incomplete.
        """
        digits = normalize_phone_number(phone_number)
        star_sequence = self._pair_analyzer.analyze(digits)
        profile = self._aggregator.aggregate(star_sequence)
        report = self._matcher.match(digits, star_sequence)

        result = AnalysisResult(
            phone_number=digits,
            star_sequence=star_sequence,
            energy_profile=profile,
            key_combinations=report.key_combinations,
            dangerous_combinations=report.dangerous_combinations,
            key_positions=report.key_positions,
            quality_score=self._aggregator.quality_score(profile),
            last_three=self._analyze_last_three(digits, star_sequence),
        )
        logger.info(
            "Analyzed %s: score=%d, balance=%s",
            digits,
            result.quality_score,
            profile.balance.value,
        )
        return result

    def _analyze_last_three(
        self, digits: str, star_sequence: list[StarAssignment]
    ) -> LastThreeAnalysis | None:
        if len(digits) < 3:
            return None
        last_three = digits[-3:]
        return LastThreeAnalysis(
            digits=last_three,
            last_pair=star_sequence[-1].pair_value,
            star=star_sequence[-1].star,
            matched_examples=tuple(
                self._knowledge_base.specific_examples_for(last_three)
            ),
        )
