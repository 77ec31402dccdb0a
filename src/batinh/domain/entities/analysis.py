"""Analysis result entities."""

from dataclasses import dataclass, field
from datetime import datetime

from batinh.domain.entities.combination import (
    CombinationMatch,
    KeyPositions,
    SpecificCombination,
)
from batinh.domain.entities.energy import EnergyProfile
from batinh.domain.entities.star import Star, StarAssignment


@dataclass(frozen=True)
class LastThreeAnalysis:
    """Reading of the final three digits.

    Attributes:
        digits: The last three digits.
        last_pair: The final digit pair.
        star: Star of the final pair.
        matched_examples: Specific combinations listing these three digits.
    """

    digits: str
    last_pair: str
    star: Star
    matched_examples: tuple[SpecificCombination, ...] = ()

    def to_dict(self) -> dict:
        """Serialize to a JSON-compatible dict."""
        return {
            "digits": self.digits,
            "last_pair": self.last_pair,
            "star": self.star.value,
            "matched_examples": [ex.to_dict() for ex in self.matched_examples],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "LastThreeAnalysis":
        """Restore from a dict produced by to_dict()."""
        return cls(
            digits=data["digits"],
            last_pair=data["last_pair"],
            star=Star(data["star"]),
            matched_examples=tuple(
                SpecificCombination.from_dict(ex)
                for ex in data.get("matched_examples", ())
            ),
        )


@dataclass(frozen=True)
class AnalysisResult:
    """Structured interpretation of one phone number.

    Attributes:
        phone_number: Normalized digit string.
        star_sequence: Star assignments in left-to-right order.
        energy_profile: Aggregated energy.
        key_combinations: Notable combinations, most significant first.
        dangerous_combinations: Warning-grade combinations.
        key_positions: Fixed-position digit readings.
        quality_score: Overall score 0-100.
        last_three: Reading of the final three digits (None for short numbers).
    """

    phone_number: str
    star_sequence: list[StarAssignment]
    energy_profile: EnergyProfile
    key_combinations: list[CombinationMatch] = field(default_factory=list)
    dangerous_combinations: list[CombinationMatch] = field(default_factory=list)
    key_positions: KeyPositions = field(default_factory=KeyPositions)
    quality_score: int = 0
    last_three: LastThreeAnalysis | None = None

    @property
    def last_pair(self) -> StarAssignment:
        """The final star assignment."""
        return self.star_sequence[-1]

    def top_stars(self, limit: int = 3) -> list[StarAssignment]:
        """Return the strongest stars, ties kept in sequence order."""
        ranked = sorted(self.star_sequence, key=lambda s: -s.energy_level)
        return ranked[:limit]

    def star_counts(self) -> dict[Star, int]:
        """Count occurrences of each star, in order of first appearance."""
        counts: dict[Star, int] = {}
        for assignment in self.star_sequence:
            counts[assignment.star] = counts.get(assignment.star, 0) + 1
        return counts

    def to_dict(self) -> dict:
        """Serialize to a JSON-compatible dict."""
        return {
            "phone_number": self.phone_number,
            "star_sequence": [s.to_dict() for s in self.star_sequence],
            "energy_profile": self.energy_profile.to_dict(),
            "key_combinations": [c.to_dict() for c in self.key_combinations],
            "dangerous_combinations": [
                c.to_dict() for c in self.dangerous_combinations
            ],
            "key_positions": self.key_positions.to_dict(),
            "quality_score": self.quality_score,
            "last_three": self.last_three.to_dict() if self.last_three else None,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "AnalysisResult":
        """Restore from a dict produced by to_dict()."""
        last_three = data.get("last_three")
        return cls(
            phone_number=data["phone_number"],
            star_sequence=[
                StarAssignment.from_dict(s) for s in data.get("star_sequence", [])
            ],
            energy_profile=EnergyProfile.from_dict(data["energy_profile"]),
            key_combinations=[
                CombinationMatch.from_dict(c)
                for c in data.get("key_combinations", [])
            ],
            dangerous_combinations=[
                CombinationMatch.from_dict(c)
                for c in data.get("dangerous_combinations", [])
            ],
            key_positions=KeyPositions.from_dict(data.get("key_positions", {})),
            quality_score=int(data.get("quality_score", 0)),
            last_three=LastThreeAnalysis.from_dict(last_three) if last_three else None,
        )


@dataclass(frozen=True)
class AnalysisRecord:
    """A persisted analysis.

    Attributes:
        caller_id: Owner of the analysis.
        phone_number: Normalized digit string.
        analysis: Structured analysis.
        narrative: Generated narrative, if one was stored.
        created_at: When the analysis was stored.
    """

    caller_id: str
    phone_number: str
    analysis: AnalysisResult
    created_at: datetime
    narrative: str | None = None

    def is_fresh(self, current_time: datetime, max_age_seconds: int) -> bool:
        """Whether the record is younger than max_age_seconds."""
        return (current_time - self.created_at).total_seconds() < max_age_seconds
