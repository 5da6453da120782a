"""Unit tests for tile type utilities."""

from tracker.logic.tiles import (
    EAST_34,
    HAKU_34,
    SANMA_REMOVED_34,
    array_34_to_tiles,
    is_honor,
    is_valid_tile,
    sort_tiles,
    string_to_tiles,
    tile_to_string,
    tile_value,
    tiles_to_34_array,
    tiles_to_string,
)


class TestTileClassification:
    def test_valid_tile_range(self):
        assert is_valid_tile(0)
        assert is_valid_tile(33)
        assert not is_valid_tile(-1)
        assert not is_valid_tile(34)

    def test_honors(self):
        assert is_honor(EAST_34)
        assert is_honor(HAKU_34)
        assert not is_honor(26)

    def test_tile_value_is_rank_within_suit(self):
        assert tile_value(0) == 0
        assert tile_value(13) == 4  # 5p
        assert tile_value(26) == 8  # 9s

    def test_sanma_removes_2m_to_8m(self):
        assert sorted(SANMA_REMOVED_34) == [1, 2, 3, 4, 5, 6, 7]


class TestTileArrays:
    def test_to_34_array_counts_copies(self):
        counts = tiles_to_34_array([0, 0, 5, 33])
        assert counts[0] == 2
        assert counts[5] == 1
        assert counts[33] == 1
        assert sum(counts) == 4

    def test_array_expands_back_sorted(self):
        assert array_34_to_tiles(tiles_to_34_array([33, 5, 0, 0])) == [0, 0, 5, 33]

    def test_sort_tiles(self):
        assert sort_tiles([27, 3, 9, 3]) == [3, 3, 9, 27]


class TestTileNotation:
    def test_render_mixed_suits(self):
        assert tiles_to_string([0, 1, 2, 12, 13, 27, 27]) == "123m45p11z"

    def test_render_single_tile(self):
        assert tile_to_string(13) == "5p"
        assert tile_to_string(EAST_34) == "1z"

    def test_render_empty(self):
        assert tiles_to_string([]) == ""

    def test_parse_suits(self):
        assert string_to_tiles(man="123", pin="5", honors="77") == [0, 1, 2, 13, 33, 33]

    def test_parse_sou(self):
        assert string_to_tiles(sou="19") == [18, 26]
