"""Star entities."""

from dataclasses import dataclass, field
from enum import Enum


class Polarity(str, Enum):
    """Star polarity (Tứ Cát / Tứ Hung)."""

    AUSPICIOUS = "auspicious"
    INAUSPICIOUS = "inauspicious"


class Star(str, Enum):
    """The eight Bát Tinh stars."""

    SINH_KHI = "SINH_KHI"
    THIEN_Y = "THIEN_Y"
    DIEN_NIEN = "DIEN_NIEN"
    PHUC_VI = "PHUC_VI"
    HOA_HAI = "HOA_HAI"
    LUC_SAT = "LUC_SAT"
    NGU_QUY = "NGU_QUY"
    TUYET_MENH = "TUYET_MENH"

    @property
    def polarity(self) -> Polarity:
        """Return the fixed polarity of this star."""
        if self in _AUSPICIOUS_STARS:
            return Polarity.AUSPICIOUS
        return Polarity.INAUSPICIOUS

    @property
    def display_name(self) -> str:
        """Return the Vietnamese display name."""
        return _DISPLAY_NAMES[self]


_AUSPICIOUS_STARS = frozenset(
    {Star.SINH_KHI, Star.THIEN_Y, Star.DIEN_NIEN, Star.PHUC_VI}
)

_DISPLAY_NAMES: dict[Star, str] = {
    Star.SINH_KHI: "Sinh Khí",
    Star.THIEN_Y: "Thiên Y",
    Star.DIEN_NIEN: "Diên Niên",
    Star.PHUC_VI: "Phục Vị",
    Star.HOA_HAI: "Họa Hại",
    Star.LUC_SAT: "Lục Sát",
    Star.NGU_QUY: "Ngũ Quỷ",
    Star.TUYET_MENH: "Tuyệt Mệnh",
}


@dataclass(frozen=True)
class StarInfo:
    """Static knowledge about one star.

    Attributes:
        star: Star identity.
        keywords: Short summary of the star's themes.
        description: One-line meaning.
        detailed_description: Longer reading, one line per statement.
        pairs: Digit pairs resolving to this star, strongest first.
    """

    star: Star
    keywords: str
    description: str
    detailed_description: tuple[str, ...] = ()
    pairs: tuple[str, ...] = ()


@dataclass(frozen=True)
class StarAssignment:
    """A star resolved from one overlapping digit pair.

    Attributes:
        pair_value: The two-digit string, e.g. "78".
        star: Star identity resolved from the knowledge base.
        energy_level: Strength rating 0-4.
        description: Short meaning of the star.
        detailed_description: Detailed meaning lines.
        position: Index of the pair's first digit in the digit string.
        is_last_pair: True for the final pair of the number.
    """

    pair_value: str
    star: Star
    energy_level: int
    description: str
    detailed_description: tuple[str, ...] = field(default_factory=tuple)
    position: int = 0
    is_last_pair: bool = False

    @property
    def polarity(self) -> Polarity:
        """Polarity of the assigned star."""
        return self.star.polarity

    @property
    def is_auspicious(self) -> bool:
        """Whether the assigned star is auspicious."""
        return self.polarity is Polarity.AUSPICIOUS

    def to_dict(self) -> dict:
        """Serialize to a JSON-compatible dict."""
        return {
            "pair_value": self.pair_value,
            "star": self.star.value,
            "energy_level": self.energy_level,
            "description": self.description,
            "detailed_description": list(self.detailed_description),
            "position": self.position,
            "is_last_pair": self.is_last_pair,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "StarAssignment":
        """Restore from a dict produced by to_dict()."""
        return cls(
            pair_value=data["pair_value"],
            star=Star(data["star"]),
            energy_level=int(data["energy_level"]),
            description=data.get("description", ""),
            detailed_description=tuple(data.get("detailed_description", ())),
            position=int(data.get("position", 0)),
            is_last_pair=bool(data.get("is_last_pair", False)),
        )
