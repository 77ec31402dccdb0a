"""Intent classification entities."""

from dataclasses import dataclass, field
from enum import Enum


class Intent(str, Enum):
    """What a caller's message asks for."""

    ANALYZE_PHONE = "analyze_phone"
    FOLLOW_UP = "follow_up"
    COMPARE = "compare"
    GENERAL_INFO = "general_info"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: object) -> "Intent":
        """Parse a loosely formatted label, returning UNKNOWN when unrecognized."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return cls.UNKNOWN
        normalized = value.strip().lower().replace("-", "_").replace(" ", "_")
        aliases = {
            "analyzephone": cls.ANALYZE_PHONE,
            "analyze": cls.ANALYZE_PHONE,
            "followup": cls.FOLLOW_UP,
            "comparison": cls.COMPARE,
            "generalinfo": cls.GENERAL_INFO,
            "general": cls.GENERAL_INFO,
        }
        if normalized in aliases:
            return aliases[normalized]
        try:
            return cls(normalized)
        except ValueError:
            return cls.UNKNOWN


@dataclass(frozen=True)
class ClassifiedMessage:
    """Result of classifying a caller message.

    Attributes:
        intent: Classified intent.
        phone_numbers: Normalized phone numbers found in the message.
        main_question: The question with phone numbers removed.
    """

    intent: Intent
    phone_numbers: list[str] = field(default_factory=list)
    main_question: str = ""
