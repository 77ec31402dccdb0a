"""Tests for IntentClassifier."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from batinh.domain.entities import ClassifiedMessage, Intent
from batinh.domain.services import IntentClassifier, extract_phone_numbers


class TestExtractPhoneNumbers:
    """extract_phone_numbers tests."""

    def test_single_number(self) -> None:
        """The number is removed from the question."""
        numbers, question = extract_phone_numbers(
            "so dien thoai 0912345678 co tot khong"
        )

        assert numbers == ["0912345678"]
        assert question == "so dien thoai co tot khong"

    def test_grouped_number(self) -> None:
        """Numbers typed with spaces, dots or dashes are recognized."""
        assert extract_phone_numbers("số 0912 345 678 thế nào")[0] == ["0912345678"]
        assert extract_phone_numbers("số 0912.345.678")[0] == ["0912345678"]
        assert extract_phone_numbers("số 0912-345-678?")[0] == ["0912345678"]

    def test_country_code(self) -> None:
        """+84 numbers are normalized to the trunk prefix."""
        numbers, _ = extract_phone_numbers("xem giúp +84 912 345 678")
        assert numbers == ["0912345678"]

    def test_country_code_with_trunk_prefix(self) -> None:
        """A country code before a number that keeps its 0 yields one 0."""
        numbers, question = extract_phone_numbers("so +84 0912345678 co tot khong")

        assert numbers == ["0912345678"]
        assert question == "so co tot khong"

    def test_adjacent_numbers(self) -> None:
        """Two numbers separated only by a space are split."""
        numbers, question = extract_phone_numbers(
            "so sánh 0912345678 0987654321 giúp tôi"
        )

        assert numbers == ["0912345678", "0987654321"]
        assert question == "so sánh giúp tôi"

    def test_duplicates_removed(self) -> None:
        """A repeated number is reported once."""
        numbers, _ = extract_phone_numbers("0912345678 và 0912.345.678")
        assert numbers == ["0912345678"]

    def test_short_digit_runs_ignored(self) -> None:
        """Digit runs that are not phone numbers stay in the question."""
        numbers, question = extract_phone_numbers("sao số 2 năm 2024 là gì")

        assert numbers == []
        assert question == "sao số 2 năm 2024 là gì"


class TestIntentClassifier:
    """IntentClassifier tests."""

    async def test_regex_only(self) -> None:
        """Without an extractor, a message with a number analyzes it."""
        classifier = IntentClassifier()

        result = await classifier.classify("so dien thoai 0912345678 co tot khong")

        assert result == ClassifiedMessage(
            intent=Intent.ANALYZE_PHONE,
            phone_numbers=["0912345678"],
            main_question="so dien thoai co tot khong",
        )

    async def test_regex_only_without_number(self) -> None:
        """Without numbers the intent stays unknown."""
        result = await IntentClassifier().classify("còn sức khỏe thì sao?")

        assert result.intent is Intent.UNKNOWN
        assert result.phone_numbers == []
        assert result.main_question == "còn sức khỏe thì sao?"

    async def test_extractor_result_used(self) -> None:
        """The extractor's intent and question take precedence."""
        extractor = MagicMock()
        extractor.extract = AsyncMock(
            return_value=ClassifiedMessage(
                intent=Intent.COMPARE,
                phone_numbers=["+84912345678", "0987 654 321"],
                main_question="số nào tốt hơn",
            )
        )
        classifier = IntentClassifier(extractor)

        result = await classifier.classify(
            "0912345678 với 0987654321 số nào tốt hơn vậy"
        )

        assert result.intent is Intent.COMPARE
        assert result.phone_numbers == ["0912345678", "0987654321"]
        assert result.main_question == "số nào tốt hơn"

    async def test_extractor_invalid_numbers_fall_back_to_regex(self) -> None:
        """Invalid extracted numbers are dropped in favor of the regex pass."""
        extractor = MagicMock()
        extractor.extract = AsyncMock(
            return_value=ClassifiedMessage(
                intent=Intent.ANALYZE_PHONE,
                phone_numbers=["12345"],
                main_question="",
            )
        )
        classifier = IntentClassifier(extractor)

        result = await classifier.classify("số 0912345678 có tốt không")

        assert result.phone_numbers == ["0912345678"]
        assert result.main_question == "số có tốt không"

    async def test_extractor_failure_falls_back(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Extractor failures are logged and the regex result is used."""
        extractor = MagicMock()
        extractor.extract = AsyncMock(side_effect=ValueError("not JSON"))
        classifier = IntentClassifier(extractor)

        result = await classifier.classify("so dien thoai 0912345678 co tot khong")

        assert result.intent is Intent.ANALYZE_PHONE
        assert result.phone_numbers == ["0912345678"]
        assert "Intent extraction failed" in caplog.text

    async def test_unknown_with_numbers_promoted(self) -> None:
        """An unknown extractor intent with numbers becomes AnalyzePhone."""
        extractor = MagicMock()
        extractor.extract = AsyncMock(
            return_value=ClassifiedMessage(intent=Intent.UNKNOWN)
        )
        classifier = IntentClassifier(extractor)

        result = await classifier.classify("0912345678")

        assert result.intent is Intent.ANALYZE_PHONE
        assert result.phone_numbers == ["0912345678"]
