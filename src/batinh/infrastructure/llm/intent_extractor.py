"""LLM-based intent extraction."""

import json
import logging
import re

from batinh.domain.entities import ClassifiedMessage, Intent
from batinh.infrastructure.llm.client import LLMClient
from batinh.infrastructure.llm.templates import create_jinja_env

logger = logging.getLogger(__name__)

JSON_OBJECT_PATTERN = re.compile(r"\{[^{}]*\}")


class LLMIntentExtractor:
    """Asks the LLM for the intent, phone numbers and main question.

    Failures propagate; the classifier treats this pass as best effort.
    """

    def __init__(self, client: LLMClient, *, temperature: float = 0.0) -> None:
        """Initialize the extractor.

        Args:
            client: LLMClient instance.
            temperature: Sampling temperature for classification.
        """
        self._client = client
        self._temperature = temperature
        self._system_prompt = (
            create_jinja_env().get_template("intent_system.j2").render().strip()
        )

    async def extract(self, message: str) -> ClassifiedMessage:
        """Classify a message.

        Raises:
            LLMError: The LLM call failed.
            ValueError: The response is not valid JSON.
        """
        messages = [
            {"role": "system", "content": self._system_prompt},
            {"role": "user", "content": message},
        ]
        response = await self._client.complete(
            messages, temperature=self._temperature
        )
        return self._parse_response(response)

    def _parse_response(self, response: str) -> ClassifiedMessage:
        """Parse LLM response to ClassifiedMessage.

        Args:
            response: LLM response string.

        Returns:
            Parsed classification.

        Raises:
            ValueError: No JSON object could be decoded.
        """
        # JSON may be wrapped in prose or a code fence
        json_match = JSON_OBJECT_PATTERN.search(response)
        json_str = json_match.group() if json_match else response
        try:
            data = json.loads(json_str)
        except json.JSONDecodeError as e:
            raise ValueError(f"Intent response is not JSON: {response!r}") from e
        if not isinstance(data, dict):
            raise ValueError(f"Intent response is not an object: {response!r}")

        numbers = data.get("phone_numbers") or []
        if not isinstance(numbers, list):
            numbers = [numbers]

        result = ClassifiedMessage(
            intent=Intent.parse(data.get("intent")),
            phone_numbers=[str(n) for n in numbers],
            main_question=str(data.get("main_question") or ""),
        )
        logger.debug("Extracted intent: %s", result.intent.value)
        return result
