"""Energy profile entity."""

from dataclasses import dataclass
from enum import Enum


class BalanceClass(str, Enum):
    """Which polarity dominates a number's energy."""

    BALANCED = "balanced"
    AUSPICIOUS_HEAVY = "auspicious_heavy"
    INAUSPICIOUS_HEAVY = "inauspicious_heavy"


@dataclass(frozen=True)
class EnergyProfile:
    """Aggregated energy of a star sequence.

    Attributes:
        total_energy: Sum of all energy levels.
        auspicious_energy: Sum over auspicious stars.
        inauspicious_energy: Sum over inauspicious stars.
        balance: Balance classification.
    """

    total_energy: int
    auspicious_energy: int
    inauspicious_energy: int
    balance: BalanceClass

    @property
    def difference(self) -> int:
        """Auspicious minus inauspicious energy."""
        return self.auspicious_energy - self.inauspicious_energy

    def to_dict(self) -> dict:
        """Serialize to a JSON-compatible dict."""
        return {
            "total_energy": self.total_energy,
            "auspicious_energy": self.auspicious_energy,
            "inauspicious_energy": self.inauspicious_energy,
            "balance": self.balance.value,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "EnergyProfile":
        """Restore from a dict produced by to_dict()."""
        return cls(
            total_energy=int(data["total_energy"]),
            auspicious_energy=int(data["auspicious_energy"]),
            inauspicious_energy=int(data["inauspicious_energy"]),
            balance=BalanceClass(data["balance"]),
        )
