"""Energy aggregation and quality scoring."""

from batinh.config import QualityPolicy, validate_quality_policy
from batinh.domain.entities import BalanceClass, EnergyProfile, StarAssignment


class EnergyAggregator:
    """Sums star energy per polarity and scores the result."""

    def __init__(
        self,
        balance_threshold: int = 3,
        policy: QualityPolicy | None = None,
    ) -> None:
        """Initialize.

        Args:
            balance_threshold: Difference beyond which one polarity dominates.
            policy: Quality score policy (defaults when None).

        Raises:
            ConfigValidationError: Bonuses are not ordered
                inauspicious_heavy <= balanced <= auspicious_heavy, or a weight
                is negative.
        """
        self._balance_threshold = balance_threshold
        self._policy = policy or QualityPolicy()
        validate_quality_policy(self._policy)
        self._bonuses = {
            BalanceClass.INAUSPICIOUS_HEAVY: self._policy.inauspicious_heavy_bonus,
            BalanceClass.BALANCED: self._policy.balanced_bonus,
            BalanceClass.AUSPICIOUS_HEAVY: self._policy.auspicious_heavy_bonus,
        }

    def aggregate(self, star_sequence: list[StarAssignment]) -> EnergyProfile:
        """Aggregate a star sequence.

        Args:
            star_sequence: Star assignments.

        Returns:
            Energy profile; identical input always gives an identical profile.
        """
        auspicious = sum(s.energy_level for s in star_sequence if s.is_auspicious)
        inauspicious = sum(
            s.energy_level for s in star_sequence if not s.is_auspicious
        )
        difference = auspicious - inauspicious
        if difference > self._balance_threshold:
            balance = BalanceClass.AUSPICIOUS_HEAVY
        elif difference < -self._balance_threshold:
            balance = BalanceClass.INAUSPICIOUS_HEAVY
        else:
            balance = BalanceClass.BALANCED

        return EnergyProfile(
            total_energy=auspicious + inauspicious,
            auspicious_energy=auspicious,
            inauspicious_energy=inauspicious,
            balance=balance,
        )

    def quality_score(self, profile: EnergyProfile) -> int:
        """Score a profile between 0 and 100.

        With inauspicious energy fixed, the score never decreases as
        auspicious energy increases.

        Args:
            profile: Energy profile.

        Returns:
            Quality score.
        """
        raw = (
            self._policy.base_score
            + self._policy.auspicious_weight * profile.auspicious_energy
            - self._policy.inauspicious_weight * profile.inauspicious_energy
            + self._bonuses[profile.balance]
        )
        return max(0, min(100, round(raw)))
