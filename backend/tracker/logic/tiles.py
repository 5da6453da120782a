"""
Tile type utilities for the hand tracker.

Tiles are tracked by type in 34-format (one index per tile type); the
physical copies of a type are interchangeable for supply bookkeeping.
Text notation ("123m456p11z") is delegated to mahjong.tile.TilesConverter,
which works on 136-format IDs.
"""

from collections.abc import Iterable

from mahjong.tile import TilesConverter

# tile ranges in 34-format (each unique tile type)
MAN_34_START = 0
MAN_34_END = 8
PIN_34_START = 9
PIN_34_END = 17
SOU_34_START = 18
SOU_34_END = 26
HONOR_34_START = 27
HONOR_34_END = 33

NUM_TILE_TYPES = 34
TILES_PER_SUIT = 9
MAX_TILE_COPIES = 4
COPIES_PER_136_TYPE = 4

# honor tile indices in 34-format
EAST_34 = 27
SOUTH_34 = 28
WEST_34 = 29
NORTH_34 = 30
HAKU_34 = 31  # white dragon
HATSU_34 = 32  # green dragon
CHUN_34 = 33  # red dragon

# man tiles removed from a three-player set (2m-8m)
SANMA_REMOVED_34 = frozenset(range(MAN_34_START + 1, MAN_34_END))


def is_valid_tile(tile: int) -> bool:
    """Check if value is a known 34-format tile type."""
    return isinstance(tile, int) and 0 <= tile < NUM_TILE_TYPES


def is_honor(tile_34: int) -> bool:
    """
    Check if tile is an honor (wind or dragon).
    """
    return HONOR_34_START <= tile_34 <= HONOR_34_END


def tile_value(tile_34: int) -> int:
    """Return 0-based rank of a tile within its suit."""
    return tile_34 % TILES_PER_SUIT


def sort_tiles(tiles: Iterable[int]) -> list[int]:
    """Sort tiles ascending by type."""
    return sorted(tiles)


def tiles_to_34_array(tiles: Iterable[int]) -> list[int]:
    """
    Convert a list of tile types to a 34-array (tile counts).

    Each index represents a tile type and the value is the number of
    copies of that type in the list.
    """
    tiles_34 = [0] * NUM_TILE_TYPES
    for tile in tiles:
        tiles_34[tile] += 1
    return tiles_34


def array_34_to_tiles(counts: Iterable[int]) -> list[int]:
    """Expand a 34-array of counts back into a sorted list of tile types."""
    return [tile for tile, count in enumerate(counts) for _ in range(count)]


def tiles_to_string(tiles: Iterable[int]) -> str:
    """Render tile types in one-line notation, e.g. "123m456p11z"."""
    return TilesConverter.to_one_line_string([tile * COPIES_PER_136_TYPE for tile in tiles])


def tile_to_string(tile: int) -> str:
    """Render a single tile type, e.g. "5p"."""
    return tiles_to_string([tile])


def string_to_tiles(
    sou: str | None = "",
    pin: str | None = "",
    man: str | None = "",
    honors: str | None = "",
) -> list[int]:
    """Parse per-suit digit strings into sorted tile types."""
    tiles_136 = TilesConverter.string_to_136_array(sou=sou, pin=pin, man=man, honors=honors)
    return sort_tiles(tile // COPIES_PER_136_TYPE for tile in tiles_136)
