"""Tests for LLMIntentExtractor."""

from unittest.mock import MagicMock

import pytest

from batinh.domain.entities import Intent
from batinh.infrastructure.llm import LLMIntentExtractor, LLMServerError


@pytest.fixture
def extractor(mock_client: MagicMock) -> LLMIntentExtractor:
    """Create an extractor around the mock client."""
    return LLMIntentExtractor(mock_client)


class TestExtract:
    """extract tests."""

    async def test_sends_classifier_prompt(
        self, extractor: LLMIntentExtractor, mock_client: MagicMock
    ) -> None:
        """The classifier instruction and the message are sent at temperature 0."""
        mock_client.complete.return_value = (
            '{"intent": "analyze_phone", "phone_numbers": ["0912345678"], '
            '"main_question": "có tốt không"}'
        )

        result = await extractor.extract("0912345678 có tốt không")

        messages = mock_client.complete.call_args.args[0]
        assert messages[0]["role"] == "system"
        assert "analyze_phone" in messages[0]["content"]
        assert messages[1] == {"role": "user", "content": "0912345678 có tốt không"}
        assert mock_client.complete.call_args.kwargs["temperature"] == 0.0
        assert result.intent is Intent.ANALYZE_PHONE
        assert result.phone_numbers == ["0912345678"]
        assert result.main_question == "có tốt không"

    async def test_client_errors_propagate(
        self, extractor: LLMIntentExtractor, mock_client: MagicMock
    ) -> None:
        """LLM failures are raised to the caller."""
        mock_client.complete.side_effect = LLMServerError("503")

        with pytest.raises(LLMServerError):
            await extractor.extract("xin chào")


class TestParseResponse:
    """_parse_response tests."""

    def test_json_in_code_fence(self, extractor: LLMIntentExtractor) -> None:
        """JSON wrapped in a code fence is found."""
        response = (
            "```json\n"
            '{"intent": "compare", "phone_numbers": ["0912345678", "0987654321"], '
            '"main_question": "số nào tốt hơn"}\n'
            "```"
        )

        result = extractor._parse_response(response)

        assert result.intent is Intent.COMPARE
        assert result.phone_numbers == ["0912345678", "0987654321"]

    def test_loose_values(self, extractor: LLMIntentExtractor) -> None:
        """Loose labels, a single number and null question are tolerated."""
        result = extractor._parse_response(
            '{"intent": "Follow-Up", "phone_numbers": 912345678, "main_question": null}'
        )

        assert result.intent is Intent.FOLLOW_UP
        assert result.phone_numbers == ["912345678"]
        assert result.main_question == ""

    def test_unknown_intent(self, extractor: LLMIntentExtractor) -> None:
        """Unrecognized labels become UNKNOWN."""
        result = extractor._parse_response('{"intent": "chitchat"}')

        assert result.intent is Intent.UNKNOWN
        assert result.phone_numbers == []

    def test_not_json(self, extractor: LLMIntentExtractor) -> None:
        """Responses without JSON raise ValueError."""
        with pytest.raises(ValueError):
            extractor._parse_response("Tôi không hiểu câu hỏi.")

    def test_not_an_object(self, extractor: LLMIntentExtractor) -> None:
        """JSON that is not an object raises ValueError."""
        with pytest.raises(ValueError):
            extractor._parse_response('["analyze_phone"]')
