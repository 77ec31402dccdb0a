"""Reading service use case."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from datetime import datetime, timezone

from sqlalchemy.exc import SQLAlchemyError

from batinh.application.services import CallerLocks
from batinh.application.use_cases.requests import (
    AnalyzePhoneRequest,
    CompareRequest,
    FollowUpRequest,
    GeneralInfoRequest,
    ReadingRequest,
    ReadingResult,
    ReadingStatus,
)
from batinh.config import AnalysisConfig, ConversationConfig, GenerationConfig
from batinh.domain.entities import (
    AnalysisResult,
    ClassifiedMessage,
    GenerationOptions,
    Intent,
    PromptContext,
    TemplateKind,
)
from batinh.domain.exceptions import (
    GenerationCancelledError,
    GenerationServiceError,
    InvalidInputError,
    KnowledgeGapError,
    NoAnalysisContextError,
)
from batinh.domain.repositories import AnalysisRepository, ConversationContextStore
from batinh.domain.services import (
    IntentClassifier,
    NarrativeGenerator,
    PhoneNumberAnalyzer,
    PromptRenderer,
    normalize_phone_number,
)
from batinh.infrastructure.persistence import PersistenceError

logger = logging.getLogger(__name__)

INVALID_INPUT_MESSAGE = (
    "Số điện thoại không hợp lệ. Vui lòng nhập số có 10 hoặc 11 chữ số."
)
FAILURE_MESSAGE = "Xin lỗi, hệ thống đang gặp sự cố. Vui lòng thử lại sau."
CANCELLED_MESSAGE = "Yêu cầu đã bị hủy."
DEFAULT_FOLLOW_UP_QUESTION = "Hãy cho tôi biết thêm về số điện thoại này."
DEFAULT_GENERAL_QUESTION = "Giới thiệu về phương pháp Bát Tinh."

_RECOVERABLE = (GenerationServiceError, NoAnalysisContextError)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ReadingService:
    """Turns caller messages into readings.

    Requests are dispatched to one handler per request kind. When a handler
    fails with a recoverable error the request falls back along
    AnalyzePhone -> FollowUp -> GeneralInfo and Compare -> GeneralInfo, at
    most max_fallback_hops times. All work for one caller is serialized.
    """

    def __init__(
        self,
        analyzer: PhoneNumberAnalyzer,
        classifier: IntentClassifier,
        prompt_renderer: PromptRenderer,
        generator: NarrativeGenerator,
        context_store: ConversationContextStore,
        analysis_repository: AnalysisRepository,
        *,
        generation_config: GenerationConfig | None = None,
        analysis_config: AnalysisConfig | None = None,
        conversation_config: ConversationConfig | None = None,
        locks: CallerLocks | None = None,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        """Initialize the service.

        Args:
            analyzer: Phone number analyzer.
            classifier: Message classifier.
            prompt_renderer: Prompt template renderer.
            generator: Narrative generator (orchestrated LLM calls).
            context_store: Per-caller conversation memory.
            analysis_repository: Durable analysis storage.
            generation_config: Per-template temperatures.
            analysis_config: Analysis reuse window.
            conversation_config: Fallback hop limit.
            locks: Per-caller lock registry.
            clock: Current time source.
        """
        self._analyzer = analyzer
        self._classifier = classifier
        self._prompt_renderer = prompt_renderer
        self._generator = generator
        self._context_store = context_store
        self._analysis_repository = analysis_repository
        self._generation_config = generation_config or GenerationConfig()
        self._analysis_config = analysis_config or AnalysisConfig()
        self._conversation_config = conversation_config or ConversationConfig()
        self._locks = locks if locks is not None else CallerLocks()
        self._clock = clock
        self._handlers: dict[
            type, Callable[..., Awaitable[tuple[str, list[AnalysisResult]]]]
        ] = {
            AnalyzePhoneRequest: self._handle_analyze_phone,
            FollowUpRequest: self._handle_follow_up,
            CompareRequest: self._handle_compare,
            GeneralInfoRequest: self._handle_general_info,
        }

    async def handle_message(
        self,
        caller_id: str,
        message: str,
        cancel_event: asyncio.Event | None = None,
    ) -> ReadingResult:
        """Classify a raw message and answer it.

        Args:
            caller_id: Opaque caller identity.
            message: Caller's message.
            cancel_event: When set, aborts generation.

        Returns:
            Reading result.
        """
        async with self._locks.hold(caller_id):
            classified = await self._classifier.classify(message)
            request = await self.route(caller_id, classified)
            logger.info(
                "Caller %s: intent=%s -> %s",
                caller_id,
                classified.intent.value,
                type(request).__name__,
            )
            return await self._run(request, cancel_event)

    async def handle(
        self,
        request: ReadingRequest,
        cancel_event: asyncio.Event | None = None,
    ) -> ReadingResult:
        """Answer an already-typed request.

        Args:
            request: Request to handle.
            cancel_event: When set, aborts generation.

        Returns:
            Reading result.
        """
        async with self._locks.hold(request.caller_id):
            return await self._run(request, cancel_event)

    async def clear_conversation(self, caller_id: str) -> None:
        """Forget the caller's current number, transcript and idle lock."""
        async with self._locks.hold(caller_id):
            await self._context_store.clear(caller_id)
        self._locks.discard(caller_id)
        logger.info("Cleared conversation for %s", caller_id)

    async def route(
        self, caller_id: str, classified: ClassifiedMessage
    ) -> ReadingRequest:
        """Turn a classified message into a request.

        Args:
            caller_id: Opaque caller identity.
            classified: Classifier output.

        Returns:
            The request to dispatch.
        """
        numbers = classified.phone_numbers
        question = classified.main_question
        intent = classified.intent

        if intent is Intent.COMPARE or (
            intent is Intent.ANALYZE_PHONE and len(numbers) > 1
        ):
            if len(numbers) > 1:
                return CompareRequest(caller_id, list(numbers), question)
            if numbers:
                return AnalyzePhoneRequest(caller_id, numbers[0], question)
            return GeneralInfoRequest(caller_id, question or DEFAULT_GENERAL_QUESTION)

        if intent is Intent.ANALYZE_PHONE and numbers:
            return AnalyzePhoneRequest(caller_id, numbers[0], question)

        if intent is Intent.GENERAL_INFO:
            return GeneralInfoRequest(caller_id, question or DEFAULT_GENERAL_QUESTION)

        # FollowUp, or Unknown/AnalyzePhone without numbers
        current = await self._context_store.get_current_phone(caller_id)
        if intent is Intent.FOLLOW_UP or current is not None:
            return FollowUpRequest(caller_id, question or DEFAULT_FOLLOW_UP_QUESTION)
        return GeneralInfoRequest(caller_id, question or DEFAULT_GENERAL_QUESTION)

    async def _run(
        self,
        request: ReadingRequest,
        cancel_event: asyncio.Event | None,
    ) -> ReadingResult:
        """Dispatch a request, following fallbacks on recoverable errors."""
        max_hops = self._conversation_config.max_fallback_hops
        hops = 0
        current: ReadingRequest = request

        while True:
            kind = type(current).__name__
            try:
                answer, analyses = await self._handlers[type(current)](
                    current, cancel_event
                )
                return ReadingResult(
                    status=ReadingStatus.OK,
                    answer=answer,
                    handled_by=kind,
                    analyses=analyses,
                    fallback_hops=hops,
                )
            except InvalidInputError as e:
                logger.info("Invalid input from %s: %s", current.caller_id, e)
                return ReadingResult(
                    status=ReadingStatus.INVALID_INPUT,
                    answer=INVALID_INPUT_MESSAGE,
                    handled_by=kind,
                    fallback_hops=hops,
                )
            except GenerationCancelledError:
                logger.info("Generation cancelled for %s", current.caller_id)
                return ReadingResult(
                    status=ReadingStatus.CANCELLED,
                    answer=CANCELLED_MESSAGE,
                    handled_by=kind,
                    fallback_hops=hops,
                )
            except KnowledgeGapError:
                logger.exception("Knowledge base lookup failed")
                return self._failed(kind, hops)
            except (PersistenceError, SQLAlchemyError):
                logger.exception("Storage failed while handling %s", kind)
                return self._failed(kind, hops)
            except _RECOVERABLE as e:
                fallback = self._fallback_for(current)
                if fallback is None or hops >= max_hops:
                    logger.exception(
                        "%s failed with no fallback left (hops=%d)", kind, hops
                    )
                    return self._failed(kind, hops)
                hops += 1
                logger.warning(
                    "%s failed (%s), falling back to %s (hop %d/%d)",
                    kind,
                    e,
                    type(fallback).__name__,
                    hops,
                    max_hops,
                )
                current = fallback

    @staticmethod
    def _failed(kind: str, hops: int) -> ReadingResult:
        return ReadingResult(
            status=ReadingStatus.FAILED,
            answer=FAILURE_MESSAGE,
            handled_by=kind,
            fallback_hops=hops,
        )

    @staticmethod
    def _fallback_for(request: ReadingRequest) -> ReadingRequest | None:
        if isinstance(request, AnalyzePhoneRequest):
            return FollowUpRequest(
                request.caller_id, request.question or DEFAULT_FOLLOW_UP_QUESTION
            )
        if isinstance(request, (FollowUpRequest, CompareRequest)):
            return GeneralInfoRequest(
                request.caller_id, request.question or DEFAULT_GENERAL_QUESTION
            )
        return None

    # Handlers

    async def _handle_analyze_phone(
        self,
        request: AnalyzePhoneRequest,
        cancel_event: asyncio.Event | None,
    ) -> tuple[str, list[AnalysisResult]]:
        # 1. Validate and analyze (or reuse a recent analysis)
        phone_number = normalize_phone_number(request.phone_number)
        analysis, is_new = await self._get_analysis(request.caller_id, phone_number)

        # 2. Make it the current number; a new number clears the transcript
        await self._context_store.save_current_phone(
            request.caller_id, phone_number, analysis
        )

        # 3. Render and generate
        template = (
            TemplateKind.TARGETED_QUESTION
            if request.question
            else TemplateKind.SINGLE_ANALYSIS
        )
        prompt = self._prompt_renderer.build(
            template, PromptContext(analysis=analysis, question=request.question)
        )
        narrative = await self._generator.generate(
            prompt,
            self._options(template, request.caller_id, cancel_event),
        )

        # 4. Persist newly computed analyses
        if is_new:
            await self._analysis_repository.save(
                request.caller_id, phone_number, analysis, narrative
            )
        return narrative, [analysis]

    async def _handle_follow_up(
        self,
        request: FollowUpRequest,
        cancel_event: asyncio.Event | None,
    ) -> tuple[str, list[AnalysisResult]]:
        current = await self._context_store.get_current_phone(request.caller_id)
        if current is not None:
            analysis = current.analysis
        else:
            record = await self._analysis_repository.find_latest(request.caller_id)
            if record is None:
                raise NoAnalysisContextError(request.caller_id)
            analysis = record.analysis
            await self._context_store.save_current_phone(
                request.caller_id, record.phone_number, analysis
            )

        prompt = self._prompt_renderer.build(
            TemplateKind.FOLLOW_UP,
            PromptContext(analysis=analysis, question=request.question),
        )
        answer = await self._generator.generate(
            prompt,
            self._options(
                TemplateKind.FOLLOW_UP,
                request.caller_id,
                cancel_event,
                use_history=True,
            ),
        )
        return answer, [analysis]

    async def _handle_compare(
        self,
        request: CompareRequest,
        cancel_event: asyncio.Event | None,
    ) -> tuple[str, list[AnalysisResult]]:
        analyses: list[AnalysisResult] = []
        for raw in request.phone_numbers:
            phone_number = normalize_phone_number(raw)
            analysis, is_new = await self._get_analysis(
                request.caller_id, phone_number
            )
            if is_new:
                await self._analysis_repository.save(
                    request.caller_id, phone_number, analysis
                )
            analyses.append(analysis)

        prompt = self._prompt_renderer.build(
            TemplateKind.COMPARISON,
            PromptContext(analyses=analyses, question=request.question),
        )
        answer = await self._generator.generate(
            prompt,
            self._options(TemplateKind.COMPARISON, request.caller_id, cancel_event),
        )
        return answer, analyses

    async def _handle_general_info(
        self,
        request: GeneralInfoRequest,
        cancel_event: asyncio.Event | None,
    ) -> tuple[str, list[AnalysisResult]]:
        prompt = self._prompt_renderer.build(
            TemplateKind.GENERAL_INFO, PromptContext(question=request.question)
        )
        use_history = await self._context_store.has_active_conversation(
            request.caller_id
        )
        answer = await self._generator.generate(
            prompt,
            self._options(
                TemplateKind.GENERAL_INFO,
                request.caller_id,
                cancel_event,
                use_history=use_history,
            ),
        )
        return answer, []

    # Helpers

    async def _get_analysis(
        self, caller_id: str, phone_number: str
    ) -> tuple[AnalysisResult, bool]:
        """Return a recent stored analysis, or compute a new one.

        Returns:
            The analysis and whether it was newly computed.
        """
        record = await self._analysis_repository.find_latest(caller_id, phone_number)
        if record is not None and record.is_fresh(
            self._clock(), self._analysis_config.analysis_reuse_seconds
        ):
            logger.debug("Reusing stored analysis of %s", phone_number)
            return record.analysis, False
        return self._analyzer.analyze(phone_number), True

    def _options(
        self,
        template: TemplateKind,
        caller_id: str,
        cancel_event: asyncio.Event | None,
        *,
        use_history: bool = False,
    ) -> GenerationOptions:
        return GenerationOptions(
            temperature=self._generation_config.temperatures.get(template.value),
            use_cache=True,
            use_history=use_history,
            caller_id=caller_id,
            cancel_event=cancel_event,
            template_kind=template,
        )
