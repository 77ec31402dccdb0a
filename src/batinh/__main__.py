"""Application entry point."""

import asyncio
import logging
import signal
import sys
from pathlib import Path

from batinh.application.services import CallerLocks
from batinh.application.use_cases import ReadingService
from batinh.config import Config, ConfigError, LoggingConfig, load_config
from batinh.domain.repositories import GenerationCacheRepository
from batinh.domain.services import (
    EnergyAggregator,
    IntentClassifier,
    PhoneNumberAnalyzer,
)
from batinh.infrastructure.knowledge import YamlKnowledgeBase
from batinh.infrastructure.llm import (
    GenerationOrchestrator,
    LLMClient,
    LLMIntentExtractor,
    PromptBuilder,
)
from batinh.infrastructure.memory import (
    InMemoryConversationContextStore,
    InMemoryGenerationCache,
)
from batinh.infrastructure.persistence import (
    DatabaseManager,
    SQLiteAnalysisRepository,
    SQLiteGenerationCacheRepository,
)
from batinh.presentation import ConsoleSession

# Default logging for early startup
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def configure_logging(config: LoggingConfig | None) -> None:
    """Configure logging based on config.

    Args:
        config: Logging configuration. If None, uses defaults.
    """
    if config is None:
        return

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, config.level.upper(), logging.INFO))

    if root_logger.handlers:
        formatter = logging.Formatter(config.format)
        for handler in root_logger.handlers:
            handler.setFormatter(formatter)

    if config.loggers:
        for logger_name, logger_level in config.loggers.items():
            individual_level = getattr(logging, logger_level.upper(), logging.INFO)
            logging.getLogger(logger_name).setLevel(individual_level)
            logger.debug(
                "Set logger '%s' to level %s", logger_name, logger_level.upper()
            )


def build_cache(
    config: Config, db_manager: DatabaseManager
) -> GenerationCacheRepository:
    """Create the configured generation cache backend."""
    max_entries = config.generation.cache_max_entries
    if config.generation.cache_backend == "sqlite":
        return SQLiteGenerationCacheRepository(
            db_manager.get_session, max_entries=max_entries
        )
    return InMemoryGenerationCache(max_entries=max_entries)


def build_reading_service(
    config: Config, db_manager: DatabaseManager
) -> ReadingService:
    """Wire the reading service from configuration."""
    knowledge_base = YamlKnowledgeBase.from_file()
    aggregator = EnergyAggregator(
        balance_threshold=config.analysis.balance_threshold,
        policy=config.analysis.quality,
    )
    analyzer = PhoneNumberAnalyzer.create(knowledge_base, aggregator)

    llm_client = LLMClient(config.llm["default"])

    # The intent extractor is optional; without it only regex extraction runs
    extractor = None
    if "intent" in config.llm:
        extractor = LLMIntentExtractor(LLMClient(config.llm["intent"]))
    classifier = IntentClassifier(extractor)

    context_store = InMemoryConversationContextStore(
        max_turns=config.conversation.max_turns
    )
    prompt_builder = PromptBuilder(config.persona, knowledge_base)
    debug_llm_messages = bool(config.logging and config.logging.debug_llm_messages)
    orchestrator = GenerationOrchestrator(
        client=llm_client,
        cache=build_cache(config, db_manager),
        context_store=context_store,
        system_prompt=prompt_builder.system_prompt(),
        config=config.generation,
        debug_llm_messages=debug_llm_messages,
    )

    return ReadingService(
        analyzer=analyzer,
        classifier=classifier,
        prompt_renderer=prompt_builder,
        generator=orchestrator,
        context_store=context_store,
        analysis_repository=SQLiteAnalysisRepository(db_manager.get_session),
        generation_config=config.generation,
        analysis_config=config.analysis,
        conversation_config=config.conversation,
        locks=CallerLocks(),
    )


async def main(config_path: Path) -> None:
    """Start the console reading session."""
    if not config_path.exists():
        logger.error("%s not found", config_path)
        sys.exit(1)

    try:
        config = load_config(config_path)
    except ConfigError as e:
        logger.error("Failed to load config: %s", e)
        sys.exit(1)

    configure_logging(config.logging)

    db_manager = DatabaseManager(config.storage.database_path)
    await db_manager.create_tables()

    session = ConsoleSession(build_reading_service(config, db_manager))
    logger.info("Starting %s...", config.persona.name)

    run_task = asyncio.create_task(session.run())
    loop = asyncio.get_running_loop()

    def interrupt_handler() -> None:
        # First Ctrl+C cancels a reading in progress, otherwise exits
        if session.cancel():
            logger.info("Cancelling current reading...")
            return
        logger.info("Received shutdown signal...")
        run_task.cancel()

    loop.add_signal_handler(signal.SIGINT, interrupt_handler)
    loop.add_signal_handler(signal.SIGTERM, run_task.cancel)

    try:
        await run_task
    except asyncio.CancelledError:
        pass
    finally:
        await db_manager.close()
        logger.info("Shutdown complete")


def run() -> None:
    """Run the async main function."""
    config_path = Path(sys.argv[1]) if len(sys.argv) > 1 else Path("config.yaml")
    try:
        asyncio.run(main(config_path))
    except KeyboardInterrupt:
        logger.info("Shutting down...")


if __name__ == "__main__":
    run()
