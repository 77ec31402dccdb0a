"""YAML config loading with environment variable expansion."""

import os
import re
from pathlib import Path
from typing import Any

import yaml

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


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigValidationError(ConfigError):
    """Invalid or missing configuration value."""


class EnvironmentVariableError(ConfigError):
    """Referenced environment variable is not set."""


# Environment variable pattern: ${VAR_NAME}
ENV_VAR_PATTERN = re.compile(r"\$\{([^}]+)\}")

CACHE_BACKENDS = ("memory", "sqlite")


def expand_env_vars(value: str) -> str:
    """Replace ${VAR_NAME} in a string with the environment value.

    Args:
        value: String to expand.

    Returns:
        Expanded string.

    Raises:
        EnvironmentVariableError: A referenced variable is not set.
    """
    if not value:
        return value

    def replace_var(match: re.Match[str]) -> str:
        var_name = match.group(1)
        env_value = os.environ.get(var_name)
        if env_value is None:
            raise EnvironmentVariableError(
                f"Environment variable '{var_name}' is not set"
            )
        return env_value

    return ENV_VAR_PATTERN.sub(replace_var, value)


def _expand_recursive(data: Any) -> Any:
    """Expand environment variables in every string of a nested structure."""
    if isinstance(data, dict):
        return {key: _expand_recursive(value) for key, value in data.items()}
    elif isinstance(data, list):
        return [_expand_recursive(item) for item in data]
    elif isinstance(data, str):
        return expand_env_vars(data)
    else:
        return data


def _validate_required_field(data: dict[str, Any], field: str, parent: str = "") -> Any:
    """Return a required field.

    Args:
        data: Section to read from.
        field: Field name.
        parent: Parent section name (for error messages).

    Returns:
        Field value.

    Raises:
        ConfigValidationError: The field is missing.
    """
    if field not in data or data[field] is None:
        full_path = f"{parent}.{field}" if parent else field
        raise ConfigValidationError(f"Required field '{full_path}' is missing")
    return data[field]


def validate_quality_policy(policy: QualityPolicy) -> None:
    """Check a quality policy.

    Raises:
        ConfigValidationError: A weight is negative, or the bonuses are not
            ordered inauspicious_heavy <= balanced <= auspicious_heavy.
    """
    for name in ("auspicious_weight", "inauspicious_weight"):
        if getattr(policy, name) < 0:
            raise ConfigValidationError(
                f"'analysis.quality.{name}' must not be negative"
            )
    if not (
        policy.inauspicious_heavy_bonus
        <= policy.balanced_bonus
        <= policy.auspicious_heavy_bonus
    ):
        raise ConfigValidationError(
            "'analysis.quality' bonuses must satisfy "
            "inauspicious_heavy <= balanced <= auspicious_heavy"
        )


def _load_quality_policy(data: dict[str, Any]) -> QualityPolicy:
    defaults = QualityPolicy()
    policy = QualityPolicy(
        base_score=float(data.get("base_score", defaults.base_score)),
        auspicious_weight=float(
            data.get("auspicious_weight", defaults.auspicious_weight)
        ),
        inauspicious_weight=float(
            data.get("inauspicious_weight", defaults.inauspicious_weight)
        ),
        balanced_bonus=float(data.get("balanced_bonus", defaults.balanced_bonus)),
        auspicious_heavy_bonus=float(
            data.get("auspicious_heavy_bonus", defaults.auspicious_heavy_bonus)
        ),
        inauspicious_heavy_bonus=float(
            data.get("inauspicious_heavy_bonus", defaults.inauspicious_heavy_bonus)
        ),
    )
    validate_quality_policy(policy)
    return policy


def _load_generation(data: dict[str, Any]) -> GenerationConfig:
    defaults = GenerationConfig()
    generation = GenerationConfig(
        max_attempts=int(data.get("max_attempts", defaults.max_attempts)),
        base_delay_seconds=float(
            data.get("base_delay_seconds", defaults.base_delay_seconds)
        ),
        cache_enabled=bool(data.get("cache_enabled", defaults.cache_enabled)),
        cache_ttl_seconds=int(
            data.get("cache_ttl_seconds", defaults.cache_ttl_seconds)
        ),
        cache_max_entries=int(
            data.get("cache_max_entries", defaults.cache_max_entries)
        ),
        cache_backend=data.get("cache_backend", defaults.cache_backend),
        temperatures={**defaults.temperatures, **data.get("temperatures", {})},
    )
    if generation.max_attempts < 1:
        raise ConfigValidationError("'generation.max_attempts' must be at least 1")
    if generation.cache_max_entries < 1:
        raise ConfigValidationError(
            "'generation.cache_max_entries' must be at least 1"
        )
    if generation.cache_backend not in CACHE_BACKENDS:
        raise ConfigValidationError(
            f"'generation.cache_backend' must be one of {', '.join(CACHE_BACKENDS)}"
        )
    return generation


def load_config(path: str | Path) -> Config:
    """Load the configuration file.

    Args:
        path: Path to config.yaml.

    Returns:
        Config object.

    Raises:
        FileNotFoundError: The file does not exist.
        ConfigValidationError: A required value is missing or invalid.
        EnvironmentVariableError: A referenced variable is not set.
        yaml.YAMLError: YAML syntax error.
    """
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, encoding="utf-8") as f:
        raw_data = yaml.safe_load(f)

    if not isinstance(raw_data, dict):
        raise ConfigValidationError("Config root must be a mapping")

    data = _expand_recursive(raw_data)

    llm_data = _validate_required_field(data, "llm")
    storage_data = _validate_required_field(data, "storage")
    persona_data = _validate_required_field(data, "persona")

    # LLMConfig ("default" is required)
    _validate_required_field(llm_data, "default", "llm")
    llm: dict[str, LLMConfig] = {}
    for key, llm_item in llm_data.items():
        model = _validate_required_field(llm_item, "model", f"llm.{key}")
        llm[key] = LLMConfig(
            model=model,
            temperature=llm_item.get("temperature", 0.7),
            max_tokens=llm_item.get("max_tokens", 8192),
            timeout_seconds=llm_item.get("timeout_seconds", 30.0),
        )

    storage = StorageConfig(
        database_path=_validate_required_field(
            storage_data, "database_path", "storage"
        ),
    )

    persona = PersonaConfig(
        name=_validate_required_field(persona_data, "name", "persona"),
        system_prompt=persona_data.get("system_prompt"),
    )

    generation = _load_generation(data.get("generation") or {})

    analysis_data = data.get("analysis") or {}
    analysis = AnalysisConfig(
        balance_threshold=int(analysis_data.get("balance_threshold", 3)),
        analysis_reuse_seconds=int(
            analysis_data.get("analysis_reuse_seconds", 86400)
        ),
        quality=_load_quality_policy(analysis_data.get("quality") or {}),
    )
    if analysis.balance_threshold < 0:
        raise ConfigValidationError(
            "'analysis.balance_threshold' must not be negative"
        )

    conversation_data = data.get("conversation") or {}
    conversation = ConversationConfig(
        max_turns=int(conversation_data.get("max_turns", 20)),
        max_fallback_hops=int(conversation_data.get("max_fallback_hops", 2)),
    )
    if conversation.max_turns < 1:
        raise ConfigValidationError("'conversation.max_turns' must be at least 1")

    # LoggingConfig (optional)
    logging_config: LoggingConfig | None = None
    logging_data = data.get("logging")
    if logging_data:
        logging_config = LoggingConfig(
            level=logging_data.get("level", "INFO"),
            format=logging_data.get(
                "format", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
            ),
            loggers=logging_data.get("loggers"),
            debug_llm_messages=logging_data.get("debug_llm_messages", False),
        )

    return Config(
        llm=llm,
        storage=storage,
        persona=persona,
        generation=generation,
        analysis=analysis,
        conversation=conversation,
        logging=logging_config,
    )
