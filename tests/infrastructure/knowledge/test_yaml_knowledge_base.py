"""Tests for YamlKnowledgeBase."""

import copy
from itertools import product
from pathlib import Path

import pytest
import yaml

from batinh.domain.entities import DigitPosition, Polarity, Star
from batinh.domain.exceptions import KnowledgeGapError
from batinh.infrastructure.knowledge import DEFAULT_DATA_PATH, YamlKnowledgeBase


@pytest.fixture(scope="module")
def raw_data() -> dict:
    """Parsed packaged knowledge base."""
    with open(DEFAULT_DATA_PATH, encoding="utf-8") as f:
        return yaml.safe_load(f)


class TestTotality:
    """The packaged data covers every lookup."""

    def test_every_pair_resolves(self, knowledge_base: YamlKnowledgeBase) -> None:
        """All 100 digit pairs have a star and an energy of 0-4."""
        for a, b in product("0123456789", repeat=2):
            star, energy = knowledge_base.star_of(a + b)
            assert isinstance(star, Star)
            assert 0 <= energy <= 4

    def test_every_star_pair_interpreted(
        self, knowledge_base: YamlKnowledgeBase
    ) -> None:
        """All 64 ordered star pairs have a non-empty description."""
        for first, second in product(Star, repeat=2):
            entry = knowledge_base.star_pair_interpretation(first, second)
            assert entry.code == f"{first.value}_{second.value}"
            assert entry.description

    def test_neutral_pairs(self, knowledge_base: YamlKnowledgeBase) -> None:
        """Pairs containing 0 or 5 are neutral."""
        for pair in ("00", "05", "50", "15", "90"):
            assert knowledge_base.star_of(pair) == (Star.PHUC_VI, 0)

    def test_energy_by_rank(self, knowledge_base: YamlKnowledgeBase) -> None:
        """Listed pairs are rated 4, 4, 3, 3, 2, 2, 1, 1."""
        info = knowledge_base.star_info(Star.SINH_KHI)
        energies = [knowledge_base.star_of(pair)[1] for pair in info.pairs]
        assert energies == [4, 4, 3, 3, 2, 2, 1, 1]

    def test_unknown_pair(self, knowledge_base: YamlKnowledgeBase) -> None:
        """Lookups outside 00-99 raise KnowledgeGapError."""
        with pytest.raises(KnowledgeGapError):
            knowledge_base.star_of("1")


class TestLookups:
    """Lookup tests."""

    def test_stars_auspicious_first(self, knowledge_base: YamlKnowledgeBase) -> None:
        """Stars are listed with the four auspicious stars first."""
        polarities = [info.star.polarity for info in knowledge_base.stars()]
        assert polarities == [Polarity.AUSPICIOUS] * 4 + [Polarity.INAUSPICIOUS] * 4

    def test_three_digit_patterns(self, knowledge_base: YamlKnowledgeBase) -> None:
        """A code may belong to several patterns."""
        codes = {entry.code for entry in knowledge_base.three_digit_pattern_of("413")}
        assert codes == {"QUY_NHAN_TRO_GIUP", "CHINH_DAO_HOA"}
        assert knowledge_base.three_digit_pattern_of("555") == []

    def test_special_ending(self, knowledge_base: YamlKnowledgeBase) -> None:
        """Special endings are recognized."""
        assert knowledge_base.special_ending_of("806") is not None
        assert knowledge_base.special_ending_of("807") is None

    def test_digit_meaning(self, knowledge_base: YamlKnowledgeBase) -> None:
        """Every digit has a meaning at each key position."""
        for position in DigitPosition:
            for digit in "0123456789":
                assert knowledge_base.digit_meaning(position, digit)

    def test_empty_pair_description_filled(
        self, knowledge_base: YamlKnowledgeBase, raw_data: dict
    ) -> None:
        """Pairs without a description borrow the specific combination's."""
        assert not raw_data["star_pairs"]["HOA_HAI_PHUC_VI"].get("description")
        entry = knowledge_base.star_pair_interpretation(
            Star.HOA_HAI, Star.PHUC_VI
        )
        specific = raw_data["specific_combinations"]["HOA_HAI_PHUC_VI"]
        assert entry.description == specific["description"]


class TestValidation:
    """Incomplete data is rejected at load time."""

    def test_missing_star(self, raw_data: dict) -> None:
        """Every star needs an entry."""
        data = copy.deepcopy(raw_data)
        del data["stars"]["NGU_QUY"]
        with pytest.raises(KnowledgeGapError):
            YamlKnowledgeBase(data)

    def test_missing_star_pair(self, raw_data: dict) -> None:
        """Every ordered star pair needs an entry."""
        data = copy.deepcopy(raw_data)
        del data["star_pairs"]["HOA_HAI_THIEN_Y"]
        with pytest.raises(KnowledgeGapError):
            YamlKnowledgeBase(data)

    def test_uncovered_digit_pair(self, raw_data: dict) -> None:
        """Every digit pair must resolve to a star."""
        data = copy.deepcopy(raw_data)
        data["stars"]["SINH_KHI"]["pairs"][0] = "00"
        with pytest.raises(KnowledgeGapError):
            YamlKnowledgeBase(data)

    def test_from_file(self, tmp_path: Path, raw_data: dict) -> None:
        """Files are loaded with from_file."""
        path = tmp_path / "kb.yaml"
        path.write_text(yaml.safe_dump(raw_data, allow_unicode=True), encoding="utf-8")

        knowledge_base = YamlKnowledgeBase.from_file(path)

        assert knowledge_base.star_of("14") == (Star.SINH_KHI, 4)
