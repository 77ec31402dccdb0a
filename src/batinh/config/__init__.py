"""Configuration management."""

from batinh.config.loader import (
    ConfigError,
    ConfigValidationError,
    EnvironmentVariableError,
    expand_env_vars,
    load_config,
    validate_quality_policy,
)
from batinh.config.models import (
    AnalysisConfig,
    Config,
    ConversationConfig,
    GenerationConfig,
    LLMConfig,
    LoggingConfig,
    PersonaConfig,
    QualityPolicy,
    StorageConfig,
)

__all__ = [
    "AnalysisConfig",
    "Config",
    "ConfigError",
    "ConfigValidationError",
    "ConversationConfig",
    "EnvironmentVariableError",
    "GenerationConfig",
    "LLMConfig",
    "LoggingConfig",
    "PersonaConfig",
    "QualityPolicy",
    "StorageConfig",
    "expand_env_vars",
    "load_config",
    "validate_quality_policy",
]
