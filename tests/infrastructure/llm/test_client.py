"""Tests for LLMClient."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from litellm.exceptions import (
    APIConnectionError,
    AuthenticationError,
    BadRequestError,
    NotFoundError,
    RateLimitError,
    ServiceUnavailableError,
    Timeout,
)

from batinh.config import LLMConfig
from batinh.infrastructure.llm import (
    LLMAuthenticationError,
    LLMBadRequestError,
    LLMClient,
    LLMConnectionError,
    LLMEmptyResponseError,
    LLMError,
    LLMModelNotFoundError,
    LLMRateLimitError,
    LLMServerError,
    LLMTimeoutError,
)

MESSAGES = [{"role": "user", "content": "Xin chào"}]


class StatusError(Exception):
    """Provider error carrying an HTTP status code."""

    def __init__(self, status_code: int) -> None:
        super().__init__(f"status {status_code}")
        self.status_code = status_code


def make_response(content: str | None) -> MagicMock:
    response = MagicMock()
    response.choices = [MagicMock()]
    response.choices[0].message.content = content
    return response


class TestLLMClient:
    """LLMClient tests."""

    @pytest.fixture
    def client(self, llm_config: LLMConfig) -> LLMClient:
        """Create LLMClient instance."""
        return LLMClient(config=llm_config)

    async def test_complete_success(self, client: LLMClient) -> None:
        """Returns the first choice's content."""
        with patch(
            "litellm.acompletion",
            new=AsyncMock(return_value=make_response("Xin chào bạn!")),
        ) as mock_completion:
            result = await client.complete(MESSAGES)

        assert result == "Xin chào bạn!"
        mock_completion.assert_awaited_once()

    async def test_complete_applies_config(self, client: LLMClient) -> None:
        """Config parameters are sent."""
        with patch(
            "litellm.acompletion", new=AsyncMock(return_value=make_response("ok"))
        ) as mock_completion:
            await client.complete(MESSAGES)

        call_kwargs = mock_completion.call_args.kwargs
        assert call_kwargs["model"] == "openai/gpt-4o-mini"
        assert call_kwargs["temperature"] == 0.7
        assert call_kwargs["max_tokens"] == 1000
        assert call_kwargs["timeout"] == 30.0
        assert call_kwargs["messages"] == MESSAGES

    async def test_complete_kwargs_override(self, client: LLMClient) -> None:
        """kwargs override config; None values are ignored."""
        with patch(
            "litellm.acompletion", new=AsyncMock(return_value=make_response("ok"))
        ) as mock_completion:
            await client.complete(MESSAGES, temperature=0.2, max_tokens=None)

        call_kwargs = mock_completion.call_args.kwargs
        assert call_kwargs["temperature"] == 0.2
        assert call_kwargs["max_tokens"] == 1000

    @pytest.mark.parametrize("content", [None, "", "   \n"])
    async def test_empty_content(self, client: LLMClient, content: str | None) -> None:
        """Empty content is a retryable error."""
        with patch(
            "litellm.acompletion", new=AsyncMock(return_value=make_response(content))
        ):
            with pytest.raises(LLMEmptyResponseError) as exc_info:
                await client.complete(MESSAGES)

        assert exc_info.value.retryable is True

    async def test_no_choices(self, client: LLMClient) -> None:
        """A response without choices is an empty response."""
        response = MagicMock()
        response.choices = []
        with patch("litellm.acompletion", new=AsyncMock(return_value=response)):
            with pytest.raises(LLMEmptyResponseError):
                await client.complete(MESSAGES)

    @pytest.mark.parametrize(
        ("error", "expected", "retryable"),
        [
            (
                AuthenticationError(
                    message="Invalid API key", llm_provider="openai", model="gpt"
                ),
                LLMAuthenticationError,
                False,
            ),
            (
                RateLimitError(
                    message="Rate limit exceeded", llm_provider="openai", model="gpt"
                ),
                LLMRateLimitError,
                True,
            ),
            (
                Timeout(message="Timed out", model="gpt", llm_provider="openai"),
                LLMTimeoutError,
                True,
            ),
            (
                APIConnectionError(
                    message="Connection reset", llm_provider="openai", model="gpt"
                ),
                LLMConnectionError,
                True,
            ),
            (
                ServiceUnavailableError(
                    message="Overloaded", llm_provider="openai", model="gpt"
                ),
                LLMServerError,
                True,
            ),
            (
                NotFoundError(
                    message="No such model", model="gpt", llm_provider="openai"
                ),
                LLMModelNotFoundError,
                False,
            ),
            (
                BadRequestError(
                    message="Bad request", model="gpt", llm_provider="openai"
                ),
                LLMBadRequestError,
                False,
            ),
            (StatusError(502), LLMServerError, True),
            (Exception("Unknown error"), LLMError, False),
        ],
    )
    async def test_error_mapping(
        self,
        client: LLMClient,
        error: Exception,
        expected: type[LLMError],
        retryable: bool,
    ) -> None:
        """Provider errors are mapped to LLMError subclasses."""
        with patch("litellm.acompletion", new=AsyncMock(side_effect=error)):
            with pytest.raises(expected) as exc_info:
                await client.complete(MESSAGES)

        assert exc_info.value.retryable is retryable
        assert exc_info.value.__cause__ is error
