"""Domain entities."""

from batinh.domain.entities.analysis import (
    AnalysisRecord,
    AnalysisResult,
    LastThreeAnalysis,
)
from batinh.domain.entities.combination import (
    CombinationKind,
    CombinationMatch,
    CombinationReport,
    DigitPosition,
    KeyPositions,
    PatternEntry,
    PositionReading,
    SpecificCombination,
    StarPairEntry,
)
from batinh.domain.entities.conversation import (
    ConversationContext,
    ConversationTurn,
    CurrentPhone,
    TurnRole,
)
from batinh.domain.entities.energy import BalanceClass, EnergyProfile
from batinh.domain.entities.generation import (
    GenerationCacheEntry,
    GenerationOptions,
    GenerationRequest,
    PromptContext,
    TemplateKind,
)
from batinh.domain.entities.intent import ClassifiedMessage, Intent
from batinh.domain.entities.star import Polarity, Star, StarAssignment, StarInfo

__all__ = [
    "AnalysisRecord",
    "AnalysisResult",
    "BalanceClass",
    "ClassifiedMessage",
    "CombinationKind",
    "CombinationMatch",
    "CombinationReport",
    "ConversationContext",
    "ConversationTurn",
    "CurrentPhone",
    "DigitPosition",
    "EnergyProfile",
    "GenerationCacheEntry",
    "GenerationOptions",
    "GenerationRequest",
    "Intent",
    "KeyPositions",
    "LastThreeAnalysis",
    "PatternEntry",
    "Polarity",
    "PositionReading",
    "PromptContext",
    "SpecificCombination",
    "Star",
    "StarAssignment",
    "StarInfo",
    "StarPairEntry",
    "TemplateKind",
    "TurnRole",
]
