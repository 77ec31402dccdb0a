"""Combination and position entities."""

from dataclasses import dataclass, field
from enum import Enum

from batinh.domain.entities.star import Star


class CombinationKind(str, Enum):
    """Origin of a combination match."""

    STAR_PAIR = "star_pair"
    THREE_DIGIT_PATTERN = "three_digit_pattern"
    SPECIAL_ENDING = "special_ending"


class DigitPosition(str, Enum):
    """Digit positions with a fixed reading, counted from the end."""

    LAST = "last"
    THIRD_FROM_END = "third_from_end"
    FIFTH_FROM_END = "fifth_from_end"

    @property
    def offset(self) -> int:
        """1-based offset from the end of the number."""
        return _OFFSETS[self]


_OFFSETS: dict[DigitPosition, int] = {
    DigitPosition.LAST: 1,
    DigitPosition.THIRD_FROM_END: 3,
    DigitPosition.FIFTH_FROM_END: 5,
}


@dataclass(frozen=True)
class PatternEntry:
    """A 3-digit code from the pattern tables.

    Attributes:
        code: Table key, e.g. "QUY_NHAN_TRO_GIUP".
        category: "wealth", "career" or "marriage".
        codes: Digit strings that trigger this pattern.
        description: Short meaning.
        detailed_description: Detailed meaning lines.
    """

    code: str
    category: str
    codes: tuple[str, ...]
    description: str
    detailed_description: tuple[str, ...] = ()


@dataclass(frozen=True)
class StarPairEntry:
    """Interpretation of one ordered star pair.

    Attributes:
        first: Leading star.
        second: Following star.
        description: Short meaning.
        detailed_description: Detailed meaning lines.
        energy_threshold: Combined energy that must be exceeded to promote
            the pair to a key combination.
        warning: True for warning-grade pairs.
    """

    first: Star
    second: Star
    description: str
    detailed_description: tuple[str, ...] = ()
    energy_threshold: int = 5
    warning: bool = False

    @property
    def code(self) -> str:
        """Table key, e.g. "NGU_QUY_THIEN_Y"."""
        return f"{self.first.value}_{self.second.value}"


@dataclass(frozen=True)
class SpecificCombination:
    """A star-pair combination with its known 3-digit examples.

    Attributes:
        code: Table key.
        stars: Stars involved (empty for special endings).
        numbers: 3-digit example numbers.
        description: Short meaning.
        detailed_description: Detailed meaning lines.
    """

    code: str
    stars: tuple[Star, ...]
    numbers: tuple[str, ...]
    description: str
    detailed_description: tuple[str, ...] = ()

    def to_dict(self) -> dict:
        """Serialize to a JSON-compatible dict."""
        return {
            "code": self.code,
            "stars": [star.value for star in self.stars],
            "numbers": list(self.numbers),
            "description": self.description,
            "detailed_description": list(self.detailed_description),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "SpecificCombination":
        """Restore from a dict produced by to_dict()."""
        return cls(
            code=data["code"],
            stars=tuple(Star(s) for s in data.get("stars", ())),
            numbers=tuple(data.get("numbers", ())),
            description=data.get("description", ""),
            detailed_description=tuple(data.get("detailed_description", ())),
        )


@dataclass(frozen=True)
class CombinationMatch:
    """A notable combination found in a number.

    Attributes:
        kind: Which pass produced the match.
        code: Knowledge-base key of the matched entry.
        matched_value: Digits (or pair values) that matched, e.g. "413" or "81-13".
        description: Short meaning.
        detailed_description: Detailed meaning lines (may be empty).
        source_stars: Stars involved, in order.
        category: Pattern category for 3-digit patterns.
        position: Index of the first matched digit.
        combined_energy: Summed energy of the source stars (star pairs only).
        involves_last_pair: True when the match touches the final pair.
    """

    kind: CombinationKind
    code: str
    matched_value: str
    description: str
    detailed_description: tuple[str, ...] = ()
    source_stars: tuple[Star, ...] = ()
    category: str | None = None
    position: int = 0
    combined_energy: int = 0
    involves_last_pair: bool = False

    def to_dict(self) -> dict:
        """Serialize to a JSON-compatible dict."""
        return {
            "kind": self.kind.value,
            "code": self.code,
            "matched_value": self.matched_value,
            "description": self.description,
            "detailed_description": list(self.detailed_description),
            "source_stars": [star.value for star in self.source_stars],
            "category": self.category,
            "position": self.position,
            "combined_energy": self.combined_energy,
            "involves_last_pair": self.involves_last_pair,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CombinationMatch":
        """Restore from a dict produced by to_dict()."""
        return cls(
            kind=CombinationKind(data["kind"]),
            code=data["code"],
            matched_value=data["matched_value"],
            description=data.get("description", ""),
            detailed_description=tuple(data.get("detailed_description", ())),
            source_stars=tuple(Star(s) for s in data.get("source_stars", ())),
            category=data.get("category"),
            position=int(data.get("position", 0)),
            combined_energy=int(data.get("combined_energy", 0)),
            involves_last_pair=bool(data.get("involves_last_pair", False)),
        )


@dataclass(frozen=True)
class PositionReading:
    """Value and meaning of a digit at a fixed position."""

    position: DigitPosition
    value: str
    meaning: str

    def to_dict(self) -> dict:
        """Serialize to a JSON-compatible dict."""
        return {
            "position": self.position.value,
            "value": self.value,
            "meaning": self.meaning,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "PositionReading":
        """Restore from a dict produced by to_dict()."""
        return cls(
            position=DigitPosition(data["position"]),
            value=data["value"],
            meaning=data.get("meaning", ""),
        )


@dataclass(frozen=True)
class KeyPositions:
    """Readings of the last, 3rd-from-end and 5th-from-end digits.

    Positions the number is too short for are None.
    """

    last_digit: PositionReading | None = None
    third_from_end: PositionReading | None = None
    fifth_from_end: PositionReading | None = None

    def readings(self) -> list[PositionReading]:
        """Return present readings, most significant first."""
        return [
            reading
            for reading in (self.last_digit, self.third_from_end, self.fifth_from_end)
            if reading is not None
        ]

    def to_dict(self) -> dict:
        """Serialize to a JSON-compatible dict."""
        return {
            reading.position.value: reading.to_dict() for reading in self.readings()
        }

    @classmethod
    def from_dict(cls, data: dict) -> "KeyPositions":
        """Restore from a dict produced by to_dict()."""

        def _load(position: DigitPosition) -> PositionReading | None:
            item = data.get(position.value)
            return PositionReading.from_dict(item) if item else None

        return cls(
            last_digit=_load(DigitPosition.LAST),
            third_from_end=_load(DigitPosition.THIRD_FROM_END),
            fifth_from_end=_load(DigitPosition.FIFTH_FROM_END),
        )


@dataclass(frozen=True)
class CombinationReport:
    """Output of the combination matcher."""

    key_combinations: list[CombinationMatch] = field(default_factory=list)
    dangerous_combinations: list[CombinationMatch] = field(default_factory=list)
    key_positions: KeyPositions = field(default_factory=KeyPositions)
