"""Generation orchestration: cache, history, retry and cancellation."""

import asyncio
import hashlib
import json
import logging
from collections.abc import Awaitable, Callable
from datetime import datetime, timezone

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from batinh.config import GenerationConfig
from batinh.domain.entities import (
    ConversationTurn,
    GenerationCacheEntry,
    GenerationOptions,
    GenerationRequest,
    TurnRole,
)
from batinh.domain.exceptions import GenerationCancelledError, GenerationServiceError
from batinh.domain.repositories import (
    ConversationContextStore,
    GenerationCacheRepository,
)
from batinh.infrastructure.llm.client import LLMClient
from batinh.infrastructure.llm.exceptions import LLMError

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def build_cache_key(prompt: str, temperature: float, max_tokens: int) -> str:
    """Derive the cache key of a request.

    Args:
        prompt: Rendered prompt.
        temperature: Sampling temperature.
        max_tokens: Output token limit.

    Returns:
        SHA-256 hex digest.
    """
    payload = json.dumps([prompt, temperature, max_tokens], ensure_ascii=False)
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


def _is_transient(error: BaseException) -> bool:
    return isinstance(error, LLMError) and error.retryable


class GenerationOrchestrator:
    """Sends prompts to the LLM with caching, history and retries.

    Transient LLM failures are retried up to max_attempts total attempts,
    waiting base_delay * 2 ** (attempt - 1) between them. Non-transient
    failures fail immediately.
    """

    def __init__(
        self,
        client: LLMClient,
        cache: GenerationCacheRepository,
        context_store: ConversationContextStore,
        system_prompt: str,
        config: GenerationConfig,
        *,
        debug_llm_messages: bool = False,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            client: LLMClient instance.
            cache: Response cache.
            context_store: Per-caller transcript store.
            system_prompt: System instruction sent first in every request.
            config: Retry and cache settings.
            debug_llm_messages: If True, log LLM messages at INFO level.
            sleep: Backoff wait used when no cancel event is given.
            clock: Current time source.
        """
        self._client = client
        self._cache = cache
        self._context_store = context_store
        self._system_prompt = system_prompt
        self._config = config
        self._debug_llm_messages = debug_llm_messages
        self._sleep = sleep
        self._clock = clock

    async def generate(self, prompt: str, options: GenerationOptions) -> str:
        """Generate a response for a rendered prompt.

        Args:
            prompt: Rendered prompt.
            options: Per-call options.

        Returns:
            Generated text.

        Raises:
            GenerationServiceError: Retries exhausted or a non-retryable failure.
            GenerationCancelledError: options.cancel_event was set.
        """
        request = self._prepare(prompt, options)
        max_tokens = options.max_tokens or self._client.config.max_tokens
        logger.debug(
            "Generating %s (temperature=%s, history=%s, cache_key=%s)",
            request.template_kind.value if request.template_kind else "prompt",
            request.temperature,
            request.use_history,
            request.cache_key[:12] if request.cache_key else None,
        )

        if request.cache_key is not None:
            cached = await self._lookup(request.cache_key)
            if cached is not None:
                await self._record_turns(options.caller_id, prompt, cached)
                return cached

        messages = await self._build_messages(request, options.caller_id)

        if self._should_log():
            self._log_messages(messages)

        response = await self._complete_with_retry(
            messages, request.temperature, max_tokens, options.cancel_event
        )

        if self._should_log():
            self._log_response(response)

        await self._record_turns(options.caller_id, prompt, response)
        if request.cache_key is not None:
            await self._cache.put(
                GenerationCacheEntry(
                    key=request.cache_key, response=response, created_at=self._clock()
                )
            )
        return response

    def _prepare(self, prompt: str, options: GenerationOptions) -> GenerationRequest:
        """Resolve client defaults and the cache key for one call."""
        temperature = (
            options.temperature
            if options.temperature is not None
            else self._client.config.temperature
        )
        max_tokens = options.max_tokens or self._client.config.max_tokens
        cache_key = None
        if self._is_cacheable(options):
            cache_key = build_cache_key(prompt, temperature, max_tokens)
        return GenerationRequest(
            template_kind=options.template_kind,
            rendered_prompt=prompt,
            temperature=temperature,
            use_history=options.use_history and options.caller_id is not None,
            cache_key=cache_key,
        )

    def _is_cacheable(self, options: GenerationOptions) -> bool:
        return (
            self._config.cache_enabled
            and options.use_cache
            and not options.use_history
        )

    async def _lookup(self, key: str) -> str | None:
        entry = await self._cache.get(key)
        if entry is None:
            return None
        if entry.is_fresh(self._clock(), self._config.cache_ttl_seconds):
            logger.debug("Cache hit: %s", key[:12])
            return entry.response
        logger.debug("Cache entry expired: %s", key[:12])
        await self._cache.delete(key)
        return None

    async def _build_messages(
        self, request: GenerationRequest, caller_id: str | None
    ) -> list[dict[str, str]]:
        messages = [{"role": "system", "content": self._system_prompt}]
        if request.use_history and caller_id is not None:
            transcript = await self._context_store.get_transcript(caller_id)
            messages.extend(turn.to_message() for turn in transcript)
        messages.append({"role": "user", "content": request.rendered_prompt})
        return messages

    async def _complete_with_retry(
        self,
        messages: list[dict[str, str]],
        temperature: float,
        max_tokens: int,
        cancel_event: asyncio.Event | None,
    ) -> str:
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self._config.max_attempts),
            wait=wait_exponential(
                multiplier=self._config.base_delay_seconds, exp_base=2
            ),
            retry=retry_if_exception(_is_transient),
            sleep=self._backoff(cancel_event),
            before_sleep=self._log_retry,
            reraise=True,
        )
        attempts = 0
        try:
            async for attempt in retrying:
                with attempt:
                    attempts = attempt.retry_state.attempt_number
                    return await self._complete_once(
                        messages, temperature, max_tokens, cancel_event
                    )
        except LLMError as e:
            if e.retryable:
                message = f"Generation failed after {attempts} attempts: {e}"
            else:
                message = f"Generation failed: {e}"
            raise GenerationServiceError(message, attempts=attempts) from e
        raise GenerationServiceError("Generation failed", attempts=attempts)

    async def _complete_once(
        self,
        messages: list[dict[str, str]],
        temperature: float,
        max_tokens: int,
        cancel_event: asyncio.Event | None,
    ) -> str:
        """Run one LLM call, abandoning it if cancel_event is set meanwhile."""
        if cancel_event is None:
            return await self._client.complete(
                messages, temperature=temperature, max_tokens=max_tokens
            )
        if cancel_event.is_set():
            raise GenerationCancelledError("Generation cancelled")

        completion = asyncio.ensure_future(
            self._client.complete(
                messages, temperature=temperature, max_tokens=max_tokens
            )
        )
        cancelled = asyncio.ensure_future(cancel_event.wait())
        try:
            done, _ = await asyncio.wait(
                {completion, cancelled}, return_when=asyncio.FIRST_COMPLETED
            )
        finally:
            for task in (completion, cancelled):
                if not task.done():
                    task.cancel()

        if completion in done:
            return completion.result()
        logger.info("LLM call abandoned: generation cancelled")
        raise GenerationCancelledError("Generation cancelled during the LLM call")

    def _backoff(
        self, cancel_event: asyncio.Event | None
    ) -> Callable[[float], Awaitable[None]]:
        """Return the retry sleep; it ends early when cancel_event is set."""

        async def sleep(seconds: float) -> None:
            if cancel_event is None:
                await self._sleep(seconds)
                return
            try:
                await asyncio.wait_for(cancel_event.wait(), timeout=seconds)
            except asyncio.TimeoutError:
                return
            raise GenerationCancelledError("Generation cancelled during backoff")

        return sleep

    def _log_retry(self, retry_state: RetryCallState) -> None:
        error = retry_state.outcome.exception() if retry_state.outcome else None
        delay = retry_state.next_action.sleep if retry_state.next_action else 0.0
        logger.warning(
            "Transient LLM error (attempt %d/%d), retrying in %.1fs: %s",
            retry_state.attempt_number,
            self._config.max_attempts,
            delay,
            error,
        )

    async def _record_turns(
        self, caller_id: str | None, prompt: str, response: str
    ) -> None:
        if caller_id is None:
            return
        await self._context_store.append_turn(
            caller_id, ConversationTurn(role=TurnRole.CALLER, content=prompt)
        )
        await self._context_store.append_turn(
            caller_id, ConversationTurn(role=TurnRole.SYSTEM, content=response)
        )

    def _should_log(self) -> bool:
        """Check if logging should occur."""
        return self._debug_llm_messages or logger.isEnabledFor(logging.DEBUG)

    def _log_messages(self, messages: list[dict[str, str]]) -> None:
        """Log LLM request messages."""
        log_func = logger.info if self._debug_llm_messages else logger.debug
        log_func("=== LLM Request Messages ===")
        for i, msg in enumerate(messages):
            log_func("[%d] role=%s", i, msg.get("role", "unknown"))
            log_func("    content: %s", msg.get("content", ""))
        log_func("=== End of Messages ===")

    def _log_response(self, response: str) -> None:
        """Log LLM response."""
        log_func = logger.info if self._debug_llm_messages else logger.debug
        log_func("=== LLM Response ===")
        log_func("response: %s", response)
        log_func("=== End of Response ===")
