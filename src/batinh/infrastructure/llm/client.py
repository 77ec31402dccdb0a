"""LLM client wrapper."""

import logging
from typing import Any

import litellm
from litellm.exceptions import (
    APIConnectionError,
    AuthenticationError,
    BadRequestError,
    InternalServerError,
    NotFoundError,
    RateLimitError,
    ServiceUnavailableError,
    Timeout,
)

from batinh.config import LLMConfig
from batinh.infrastructure.llm.exceptions import (
    LLMAuthenticationError,
    LLMBadRequestError,
    LLMConnectionError,
    LLMEmptyResponseError,
    LLMError,
    LLMModelNotFoundError,
    LLMRateLimitError,
    LLMServerError,
    LLMTimeoutError,
)

logger = logging.getLogger(__name__)


class LLMClient:
    """LiteLLM wrapper client.

    This class provides a simplified interface to LiteLLM,
    applying configuration and mapping provider errors to LLMError
    subclasses that carry a retryable flag.
    """

    def __init__(self, config: LLMConfig) -> None:
        """Initialize the client.

        Args:
            config: LLM configuration (model, temperature, max_tokens, etc.).
        """
        self._config = config

    @property
    def config(self) -> LLMConfig:
        """Client configuration."""
        return self._config

    async def complete(
        self,
        messages: list[dict[str, str]],
        **kwargs: Any,
    ) -> str:
        """Execute chat completion.

        Args:
            messages: OpenAI-format message list.
                [{"role": "system", "content": "..."}, ...]
            **kwargs: Additional parameters (override config).

        Returns:
            Generated text.

        Raises:
            LLMEmptyResponseError: No choices or empty content.
            LLMAuthenticationError: Invalid API key.
            LLMRateLimitError: Rate limit exceeded.
            LLMError: Other API errors.
        """
        params = {
            "model": self._config.model,
            "temperature": self._config.temperature,
            "max_tokens": self._config.max_tokens,
            "timeout": self._config.timeout_seconds,
            "messages": messages,
            **{key: value for key, value in kwargs.items() if value is not None},
        }

        logger.debug("LLM request: model=%s", params["model"])

        try:
            response = await litellm.acompletion(**params)
        except Timeout as e:
            logger.warning("LLM request timed out: %s", e)
            raise LLMTimeoutError(str(e)) from e
        except AuthenticationError as e:
            logger.error("LLM authentication error: %s", e)
            raise LLMAuthenticationError(str(e)) from e
        except RateLimitError as e:
            logger.warning("LLM rate limit exceeded: %s", e)
            raise LLMRateLimitError(str(e)) from e
        except APIConnectionError as e:
            logger.warning("LLM connection error: %s", e)
            raise LLMConnectionError(str(e)) from e
        except (InternalServerError, ServiceUnavailableError) as e:
            logger.warning("LLM server error: %s", e)
            raise LLMServerError(str(e)) from e
        except NotFoundError as e:
            logger.error("LLM model not found: %s", e)
            raise LLMModelNotFoundError(str(e)) from e
        except BadRequestError as e:
            logger.error("LLM bad request: %s", e)
            raise LLMBadRequestError(str(e)) from e
        except Exception as e:
            status_code = getattr(e, "status_code", None)
            if isinstance(status_code, int) and status_code >= 500:
                logger.warning("LLM server error (%d): %s", status_code, e)
                raise LLMServerError(str(e)) from e
            logger.error("LLM error: %s", e)
            raise LLMError(str(e)) from e

        choices = getattr(response, "choices", None)
        if not choices:
            raise LLMEmptyResponseError("LLM returned no choices")
        content = choices[0].message.content
        if not content or not content.strip():
            raise LLMEmptyResponseError("LLM returned empty content")

        logger.debug("LLM response received")
        return content
