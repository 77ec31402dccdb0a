"""Intent classification."""

import logging
import re

from batinh.domain.entities import ClassifiedMessage, Intent
from batinh.domain.exceptions import InvalidInputError
from batinh.domain.services.phone_analyzer import (
    MAX_PHONE_DIGITS,
    MIN_PHONE_DIGITS,
    normalize_phone_number,
)
from batinh.domain.services.protocols import IntentExtractor

logger = logging.getLogger(__name__)

# Digit runs with separators: space, dot, dash, parentheses, leading "+"
PHONE_CANDIDATE_PATTERN = re.compile(r"\+?\(?\d(?:[\s.\-()]{0,2}\d)*")
WHITESPACE_PATTERN = re.compile(r"\s+")


def _digit_count(text: str) -> int:
    return sum(ch.isdigit() for ch in text)


def _split_candidate(candidate: str) -> list[str]:
    """Split a candidate run into phone numbers.

    Space-separated numbers are matched as one run, so chunks are
    accumulated until they form a valid number.
    """
    numbers: list[str] = []
    buffer = ""
    for chunk in WHITESPACE_PATTERN.split(candidate.strip()):
        buffer = f"{buffer}{chunk}"
        for attempt in (buffer, chunk):
            if _digit_count(attempt) < MIN_PHONE_DIGITS:
                buffer = attempt
                break
            try:
                numbers.append(normalize_phone_number(attempt))
            except InvalidInputError:
                # 84-prefixed numbers may still need one more chunk
                if _digit_count(attempt) <= MAX_PHONE_DIGITS:
                    buffer = attempt
                    break
                buffer = ""
            else:
                buffer = ""
                break
    return numbers


def extract_phone_numbers(message: str) -> tuple[list[str], str]:
    """Extract phone numbers with regular expressions.

    Args:
        message: Caller's message.

    Returns:
        Normalized 10-11 digit numbers (deduplicated, in order of appearance)
        and the message with those numbers removed and whitespace collapsed.
    """
    numbers: list[str] = []
    remainder_parts: list[str] = []
    cursor = 0
    for match in PHONE_CANDIDATE_PATTERN.finditer(message):
        found = _split_candidate(match.group())
        if not found:
            continue
        remainder_parts.append(message[cursor : match.start()])
        cursor = match.end()
        for number in found:
            if number not in numbers:
                numbers.append(number)
    remainder_parts.append(message[cursor:])

    main_question = WHITESPACE_PATTERN.sub(" ", "".join(remainder_parts)).strip()
    return numbers, main_question


class IntentClassifier:
    """Classifies caller messages.

    The regex pass always runs. An optional extractor may propose the
    intent, numbers and main question; its failures are logged and the
    regex result is used instead.
    """

    def __init__(self, extractor: IntentExtractor | None = None) -> None:
        self._extractor = extractor

    async def classify(self, message: str) -> ClassifiedMessage:
        """Classify a message.

        Args:
            message: Caller's raw message.

        Returns:
            Classified message. An Unknown intent with at least one phone
            number is promoted to AnalyzePhone.
        """
        regex_numbers, regex_question = extract_phone_numbers(message)

        intent = Intent.UNKNOWN
        numbers = regex_numbers
        main_question = regex_question

        if self._extractor is not None:
            try:
                proposed = await self._extractor.extract(message)
            except Exception:
                logger.warning(
                    "Intent extraction failed, using regex result", exc_info=True
                )
            else:
                intent = proposed.intent
                extracted = self._normalize_all(proposed.phone_numbers)
                if extracted:
                    numbers = extracted
                if proposed.main_question.strip():
                    main_question = proposed.main_question.strip()

        if intent is Intent.UNKNOWN and numbers:
            intent = Intent.ANALYZE_PHONE

        logger.debug("Classified message as %s with numbers %s", intent.value, numbers)
        return ClassifiedMessage(
            intent=intent, phone_numbers=numbers, main_question=main_question
        )

    @staticmethod
    def _normalize_all(candidates: list[str]) -> list[str]:
        numbers: list[str] = []
        for candidate in candidates:
            try:
                number = normalize_phone_number(str(candidate))
            except InvalidInputError:
                logger.debug("Dropping extracted number %r", candidate)
                continue
            if number not in numbers:
                numbers.append(number)
        return numbers
