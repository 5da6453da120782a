"""Unit tests for meld descriptors."""

import pytest
from pydantic import ValidationError

from tracker.logic.enums import KanType
from tracker.logic.melds import Meld, chi, kan, pon
from tracker.tests.conftest import tile


class TestMeldTiles:
    def test_chi_is_a_sequence(self):
        assert chi(tile("3p")).tiles == (11, 12, 13)

    def test_pon_is_a_triplet(self):
        assert pon(tile("7z")).tiles == (33, 33, 33)

    def test_kan_is_four_copies(self):
        assert kan(tile("1s")).tiles == (18, 18, 18, 18)

    def test_request_kan_is_unclassified(self):
        meld = kan(0)
        assert meld.kan_type is None
        assert meld.opened is True


class TestMeldValidation:
    def test_chi_cannot_start_at_honor(self):
        with pytest.raises(ValidationError, match="chi cannot start"):
            chi(tile("1z"))

    def test_chi_cannot_start_above_seven(self):
        with pytest.raises(ValidationError, match="chi cannot start"):
            chi(tile("8m"))

    def test_chi_can_start_at_seven(self):
        assert chi(tile("7s")).tiles == (24, 25, 26)

    def test_unknown_tile_rejected(self):
        with pytest.raises(ValidationError, match="unknown tile type"):
            pon(34)

    def test_kan_type_only_on_kan(self):
        with pytest.raises(ValidationError, match="kan_type set on a pon meld"):
            Meld(meld_type=Meld.PON, tile=0, kan_type=KanType.CLOSED)

    def test_frozen(self):
        meld = pon(0)
        with pytest.raises(ValidationError):
            meld.tile = 1


class TestMeldRendering:
    def test_plain_meld(self):
        assert str(pon(0)) == "pon(111m)"

    def test_classified_kan(self):
        meld = Meld(meld_type=Meld.KAN, tile=tile("5p"), opened=False, kan_type=KanType.CLOSED)
        assert str(meld) == "closed_kan(5555p)"
