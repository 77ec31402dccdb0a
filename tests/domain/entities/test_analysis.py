"""Tests for analysis entities."""

from datetime import datetime, timedelta

from batinh.domain.entities import (
    AnalysisRecord,
    AnalysisResult,
    BalanceClass,
    EnergyProfile,
    Star,
    StarAssignment,
)
from batinh.domain.services import PhoneNumberAnalyzer


def make_assignment(
    pair: str, star: Star, energy: int, position: int, is_last: bool = False
) -> StarAssignment:
    return StarAssignment(
        pair_value=pair,
        star=star,
        energy_level=energy,
        description="",
        position=position,
        is_last_pair=is_last,
    )


class TestAnalysisResult:
    """AnalysisResult tests."""

    def test_dict_round_trip(self, analyzer: PhoneNumberAnalyzer) -> None:
        """A full analysis survives to_dict/from_dict unchanged."""
        analysis = analyzer.analyze("0912345678")

        assert AnalysisResult.from_dict(analysis.to_dict()) == analysis

    def test_last_pair(self) -> None:
        """last_pair is the final assignment."""
        result = AnalysisResult(
            phone_number="141",
            star_sequence=[
                make_assignment("14", Star.SINH_KHI, 4, 0),
                make_assignment("41", Star.SINH_KHI, 4, 1, is_last=True),
            ],
            energy_profile=EnergyProfile(8, 8, 0, BalanceClass.AUSPICIOUS_HEAVY),
        )
        assert result.last_pair.pair_value == "41"

    def test_top_stars_keeps_sequence_order_on_ties(self) -> None:
        """Stars with equal energy keep their order."""
        result = AnalysisResult(
            phone_number="0000",
            star_sequence=[
                make_assignment("67", Star.SINH_KHI, 3, 0),
                make_assignment("12", Star.TUYET_MENH, 4, 1),
                make_assignment("68", Star.THIEN_Y, 3, 2),
                make_assignment("19", Star.DIEN_NIEN, 4, 3),
            ],
            energy_profile=EnergyProfile(14, 10, 4, BalanceClass.AUSPICIOUS_HEAVY),
        )

        top = result.top_stars(3)

        assert [s.pair_value for s in top] == ["12", "19", "67"]

    def test_star_counts(self) -> None:
        """Counts are keyed in order of first appearance."""
        result = AnalysisResult(
            phone_number="0000",
            star_sequence=[
                make_assignment("14", Star.SINH_KHI, 4, 0),
                make_assignment("12", Star.TUYET_MENH, 4, 1),
                make_assignment("41", Star.SINH_KHI, 4, 2),
            ],
            energy_profile=EnergyProfile(12, 8, 4, BalanceClass.AUSPICIOUS_HEAVY),
        )
        counts = result.star_counts()

        assert list(counts) == [Star.SINH_KHI, Star.TUYET_MENH]
        assert counts[Star.SINH_KHI] == 2


class TestAnalysisRecord:
    """AnalysisRecord tests."""

    def test_is_fresh(self, analyzer: PhoneNumberAnalyzer, now: datetime) -> None:
        """Records younger than the reuse window are fresh."""
        record = AnalysisRecord(
            caller_id="caller-1",
            phone_number="0912345678",
            analysis=analyzer.analyze("0912345678"),
            created_at=now - timedelta(hours=1),
        )

        assert record.is_fresh(now, 86400) is True
        assert record.is_fresh(now, 3600) is False
