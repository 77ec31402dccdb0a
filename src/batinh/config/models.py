"""Configuration dataclasses."""

from dataclasses import dataclass, field


@dataclass
class LLMConfig:
    """LLM settings passed to LiteLLM completion."""

    model: str
    temperature: float = 0.7
    max_tokens: int = 8192
    timeout_seconds: float = 30.0


@dataclass
class GenerationConfig:
    """Generation orchestration settings.

    Attributes:
        max_attempts: Total attempts for one remote call, first call included.
        base_delay_seconds: Backoff base; attempt n waits base * 2 ** (n - 1).
        cache_enabled: Allow response caching.
        cache_ttl_seconds: Cached responses older than this are discarded.
        cache_max_entries: Oldest entries are evicted beyond this count.
        cache_backend: "memory" or "sqlite".
        temperatures: Per-template temperature overrides, keyed by template name.
    """

    max_attempts: int = 3
    base_delay_seconds: float = 1.0
    cache_enabled: bool = True
    cache_ttl_seconds: int = 86400
    cache_max_entries: int = 100
    cache_backend: str = "memory"
    temperatures: dict[str, float] = field(
        default_factory=lambda: {
            "single_analysis": 0.7,
            "targeted_question": 0.7,
            "comparison": 0.6,
            "general_info": 0.5,
            "follow_up": 0.7,
        }
    )


@dataclass
class QualityPolicy:
    """Quality score weights.

    score = base + auspicious_weight * auspicious - inauspicious_weight
    * inauspicious + balance bonus, clamped to 0-100.

    Bonuses must satisfy inauspicious_heavy <= balanced <= auspicious_heavy
    so the score never drops when auspicious energy rises.
    """

    base_score: float = 50.0
    auspicious_weight: float = 2.0
    inauspicious_weight: float = 2.5
    balanced_bonus: float = 5.0
    auspicious_heavy_bonus: float = 8.0
    inauspicious_heavy_bonus: float = -10.0


@dataclass
class AnalysisConfig:
    """Symbolic analysis settings.

    Attributes:
        balance_threshold: Energy difference beyond which a side dominates.
        analysis_reuse_seconds: Stored analyses younger than this are reused.
        quality: Quality score policy.
    """

    balance_threshold: int = 3
    analysis_reuse_seconds: int = 86400
    quality: QualityPolicy = field(default_factory=QualityPolicy)


@dataclass
class ConversationConfig:
    """Conversation memory settings.

    Attributes:
        max_turns: Maximum transcript entries kept per caller.
        max_fallback_hops: Maximum handler fallbacks for one message.
    """

    max_turns: int = 20
    max_fallback_hops: int = 2


@dataclass
class StorageConfig:
    """Persistence settings."""

    database_path: str


@dataclass
class PersonaConfig:
    """Reader persona."""

    name: str
    system_prompt: str | None = None


@dataclass
class LoggingConfig:
    """Logging settings."""

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    loggers: dict[str, str] | None = None
    debug_llm_messages: bool = False


@dataclass
class Config:
    """Application settings."""

    llm: dict[str, LLMConfig]
    storage: StorageConfig
    persona: PersonaConfig
    generation: GenerationConfig = field(default_factory=GenerationConfig)
    analysis: AnalysisConfig = field(default_factory=AnalysisConfig)
    conversation: ConversationConfig = field(default_factory=ConversationConfig)
    logging: LoggingConfig | None = None
