"""YAML-backed knowledge base."""

import logging
from itertools import product
from pathlib import Path
from typing import Any

import yaml

from batinh.domain.entities import (
    DigitPosition,
    PatternEntry,
    SpecificCombination,
    Star,
    StarInfo,
    StarPairEntry,
)
from batinh.domain.exceptions import KnowledgeGapError

logger = logging.getLogger(__name__)

DEFAULT_DATA_PATH = Path(__file__).parent / "data" / "bat_tinh.yaml"

# Energy of the pairs listed for a star, two pairs per level
PAIR_ENERGY_LEVELS = (4, 4, 3, 3, 2, 2, 1, 1)


class YamlKnowledgeBase:
    """Read-only Bát Tinh knowledge base loaded from YAML.

    The data is validated at construction: every digit pair 00-99 must
    resolve to a star and every ordered star pair must have an entry.
    """

    def __init__(self, data: dict[str, Any]) -> None:
        """Initialize from parsed YAML.

        Args:
            data: Parsed knowledge base document.

        Raises:
            KnowledgeGapError: The data is incomplete.
        """
        self._stars = self._load_stars(data)
        self._pairs = self._load_pair_table(data)
        self._specific = self._load_specific(data.get("specific_combinations") or {})
        self._star_pairs = self._load_star_pairs(data)
        self._patterns = self._load_patterns(data.get("three_digit_patterns") or {})
        self._special_ending = self._load_special_ending(data.get("special_ending"))
        self._digit_meanings = self._load_digit_meanings(
            data.get("digit_meanings") or {}
        )
        logger.info(
            "Loaded knowledge base: %d pairs, %d star pairs, %d patterns",
            len(self._pairs),
            len(self._star_pairs),
            len(self._patterns),
        )

    @classmethod
    def from_file(cls, path: str | Path = DEFAULT_DATA_PATH) -> "YamlKnowledgeBase":
        """Load a knowledge base file.

        Args:
            path: YAML file path (defaults to the packaged data).

        Raises:
            FileNotFoundError: The file does not exist.
            KnowledgeGapError: The data is incomplete.
        """
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
        if not isinstance(data, dict):
            raise KnowledgeGapError(f"Knowledge base root must be a mapping: {path}")
        return cls(data)

    # Loading

    @staticmethod
    def _load_stars(data: dict[str, Any]) -> dict[Star, StarInfo]:
        stars_data = data.get("stars") or {}
        stars: dict[Star, StarInfo] = {}
        for star in Star:
            item = stars_data.get(star.value)
            if item is None:
                raise KnowledgeGapError(f"Missing star entry: {star.value}")
            pairs = tuple(str(p) for p in item.get("pairs", ()))
            if len(pairs) != len(PAIR_ENERGY_LEVELS):
                raise KnowledgeGapError(
                    f"Star {star.value} must list {len(PAIR_ENERGY_LEVELS)} pairs"
                )
            stars[star] = StarInfo(
                star=star,
                keywords=item.get("keywords", ""),
                description=item.get("description", ""),
                detailed_description=tuple(item.get("detailed_description") or ()),
                pairs=pairs,
            )
        return stars

    def _load_pair_table(self, data: dict[str, Any]) -> dict[str, tuple[Star, int]]:
        table: dict[str, tuple[Star, int]] = {}
        for info in self._stars.values():
            for pair, energy in zip(info.pairs, PAIR_ENERGY_LEVELS):
                if pair in table:
                    raise KnowledgeGapError(f"Pair {pair} listed for two stars")
                table[pair] = (info.star, energy)

        neutral = data.get("neutral") or {}
        neutral_digits = {str(d) for d in neutral.get("digits", ())}
        neutral_star = Star(neutral.get("star", Star.PHUC_VI.value))
        neutral_energy = int(neutral.get("energy", 0))

        for a, b in product("0123456789", repeat=2):
            pair = a + b
            if pair in table:
                continue
            if a in neutral_digits or b in neutral_digits:
                table[pair] = (neutral_star, neutral_energy)
            else:
                raise KnowledgeGapError(f"No star for digit pair {pair}")
        return table

    @staticmethod
    def _load_specific(data: dict[str, Any]) -> dict[str, SpecificCombination]:
        return {
            code: SpecificCombination(
                code=code,
                stars=tuple(Star(s) for s in item.get("stars", ())),
                numbers=tuple(str(n) for n in item.get("numbers") or ()),
                description=item.get("description", ""),
                detailed_description=tuple(item.get("detailed_description") or ()),
            )
            for code, item in data.items()
        }

    def _load_star_pairs(
        self, data: dict[str, Any]
    ) -> dict[tuple[Star, Star], StarPairEntry]:
        pairs_data = data.get("star_pairs") or {}
        default_threshold = int(data.get("default_energy_threshold", 5))
        entries: dict[tuple[Star, Star], StarPairEntry] = {}
        for first, second in product(Star, repeat=2):
            code = f"{first.value}_{second.value}"
            item = pairs_data.get(code)
            if item is None:
                raise KnowledgeGapError(f"Missing star pair entry: {code}")

            description = (item.get("description") or "").strip()
            detailed = tuple(item.get("detailed_description") or ())
            specific = self._specific.get(code)
            if not description:
                description = (
                    specific.description
                    if specific
                    else self._compose_description(first, second)
                )
            if not detailed and specific:
                detailed = specific.detailed_description

            entries[(first, second)] = StarPairEntry(
                first=first,
                second=second,
                description=description,
                detailed_description=detailed,
                energy_threshold=int(item.get("energy_threshold", default_threshold)),
                warning=bool(item.get("warning", False)),
            )
        return entries

    def _compose_description(self, first: Star, second: Star) -> str:
        if first is second:
            return (
                f"{first.display_name} lặp lại, tăng cường "
                f"{self._stars[first].keywords.lower()}."
            )
        first_keywords = self._stars[first].keywords.lower()
        second_keywords = self._stars[second].keywords.lower()
        return (
            f"{first.display_name} ({first_keywords}) "
            f"kết hợp {second.display_name} ({second_keywords})."
        )

    @staticmethod
    def _load_patterns(data: dict[str, Any]) -> list[PatternEntry]:
        patterns: list[PatternEntry] = []
        for category, entries in data.items():
            for code, item in (entries or {}).items():
                patterns.append(
                    PatternEntry(
                        code=code,
                        category=category,
                        codes=tuple(str(c) for c in item.get("codes", ())),
                        description=item.get("description", ""),
                        detailed_description=tuple(
                            item.get("detailed_description") or ()
                        ),
                    )
                )
        return patterns

    @staticmethod
    def _load_special_ending(
        data: dict[str, Any] | None,
    ) -> SpecificCombination | None:
        if not data:
            return None
        return SpecificCombination(
            code=data.get("code", "SPECIAL_ENDING"),
            stars=(),
            numbers=tuple(str(n) for n in data.get("numbers", ())),
            description=data.get("description", ""),
            detailed_description=tuple(data.get("detailed_description") or ()),
        )

    @staticmethod
    def _load_digit_meanings(
        data: dict[str, Any],
    ) -> dict[DigitPosition, dict[str, str]]:
        return {
            position: {str(k): v for k, v in (data.get(position.value) or {}).items()}
            for position in DigitPosition
        }

    # KnowledgeBase protocol

    def star_of(self, pair: str) -> tuple[Star, int]:
        try:
            return self._pairs[pair]
        except KeyError:
            raise KnowledgeGapError(f"No star for digit pair {pair!r}") from None

    def star_info(self, star: Star) -> StarInfo:
        return self._stars[star]

    def star_pair_interpretation(self, first: Star, second: Star) -> StarPairEntry:
        try:
            return self._star_pairs[(first, second)]
        except KeyError:
            raise KnowledgeGapError(
                f"No interpretation for {first.value}_{second.value}"
            ) from None

    def three_digit_pattern_of(self, digits: str) -> list[PatternEntry]:
        return [entry for entry in self._patterns if digits in entry.codes]

    def special_ending_of(self, digits: str) -> SpecificCombination | None:
        if self._special_ending and digits in self._special_ending.numbers:
            return self._special_ending
        return None

    def specific_examples_for(self, digits: str) -> list[SpecificCombination]:
        return [entry for entry in self._specific.values() if digits in entry.numbers]

    def digit_meaning(self, position: DigitPosition, digit: str) -> str | None:
        return self._digit_meanings[position].get(digit)

    def stars(self) -> list[StarInfo]:
        return list(self._stars.values())
