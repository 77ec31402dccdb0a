"""Domain exceptions."""


class InvalidInputError(ValueError):
    """Malformed digit string or phone number.

    Never retried; surfaced to the caller as a client error.
    """


class KnowledgeGapError(Exception):
    """A lookup found no knowledge-base entry.

    The pair table is total over 00-99, so this indicates a broken
    knowledge base, not bad input.
    """


class NoAnalysisContextError(Exception):
    """A follow-up arrived but the caller has no analysis to refer to."""

    def __init__(self, caller_id: str | None) -> None:
        """Initialize.

        Args:
            caller_id: Caller without context (None for anonymous callers).
        """
        self.caller_id = caller_id
        super().__init__(f"No analysis context for caller {caller_id!r}")


class GenerationServiceError(Exception):
    """The remote generation call failed permanently.

    Raised after retries are exhausted or on a non-retryable failure.
    """

    def __init__(self, message: str, attempts: int = 0) -> None:
        """Initialize.

        Args:
            message: Error message.
            attempts: Number of attempts made.
        """
        self.attempts = attempts
        super().__init__(message)


class GenerationCancelledError(Exception):
    """The caller aborted an in-flight generation."""
