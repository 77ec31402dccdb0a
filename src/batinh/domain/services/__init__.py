"""Domain services."""

from batinh.domain.services.combination_matcher import CombinationMatcher
from batinh.domain.services.digit_pair_analyzer import (
    DigitPairAnalyzer,
    normalize_digits,
)
from batinh.domain.services.energy_aggregator import EnergyAggregator
from batinh.domain.services.intent_classifier import (
    IntentClassifier,
    extract_phone_numbers,
)
from batinh.domain.services.phone_analyzer import (
    PhoneNumberAnalyzer,
    normalize_phone_number,
)
from batinh.domain.services.protocols import (
    IntentExtractor,
    KnowledgeBase,
    NarrativeGenerator,
    PromptRenderer,
)

__all__ = [
    "CombinationMatcher",
    "DigitPairAnalyzer",
    "EnergyAggregator",
    "IntentClassifier",
    "IntentExtractor",
    "KnowledgeBase",
    "NarrativeGenerator",
    "PhoneNumberAnalyzer",
    "PromptRenderer",
    "extract_phone_numbers",
    "normalize_digits",
    "normalize_phone_number",
]
