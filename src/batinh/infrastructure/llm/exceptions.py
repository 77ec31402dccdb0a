"""LLM-related exceptions."""


class LLMError(Exception):
    """Base exception for LLM-related errors.

    Attributes:
        retryable: Whether the failure is transient.
    """

    retryable = False


class LLMRateLimitError(LLMError):
    """Rate limit exceeded error."""

    retryable = True


class LLMServerError(LLMError):
    """Provider-side failure (HTTP 5xx)."""

    retryable = True


class LLMConnectionError(LLMError):
    """Network failure reaching the provider."""

    retryable = True


class LLMTimeoutError(LLMError):
    """Request timed out."""

    retryable = True


class LLMEmptyResponseError(LLMError):
    """Response had no choices or no content."""

    retryable = True


class LLMAuthenticationError(LLMError):
    """Authentication error (invalid API key, etc.)."""


class LLMBadRequestError(LLMError):
    """Request rejected as malformed."""


class LLMModelNotFoundError(LLMError):
    """Configured model does not exist."""
