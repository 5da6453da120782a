"""
Draw pool state and operations.

The draw pool holds the remaining supply of every tile type that the
tracked hand has not seen leave the pool. It only counts copies per type;
the order of the physical wall is not modelled.

Every mutating function takes a ``strict`` flag:
  strict=True   any underflow/overflow raises and the pool is left as-is
  strict=False  a short or overfull tile type is clamped and the rest is applied
"""

from __future__ import annotations

import random
from collections import Counter
from typing import TYPE_CHECKING

import structlog
from pydantic import BaseModel, ConfigDict, model_validator

from tracker.logic.exceptions import SupplyOverflowError, SupplyUnderflowError
from tracker.logic.settings import DEFAULT_PLAYER_COUNT, THREE_PLAYER_COUNT, PlayerCount
from tracker.logic.tiles import (
    MAX_TILE_COPIES,
    NUM_TILE_TYPES,
    SANMA_REMOVED_34,
    array_34_to_tiles,
    is_valid_tile,
    tile_to_string,
)

if TYPE_CHECKING:
    from collections.abc import Iterable

logger = structlog.get_logger()


def max_copies(tile: int, player_count: int = DEFAULT_PLAYER_COUNT) -> int:
    """Physical number of copies of a tile type in the full supply."""
    if not is_valid_tile(tile):
        return 0
    if player_count == THREE_PLAYER_COUNT and tile in SANMA_REMOVED_34:
        return 0
    return MAX_TILE_COPIES


class DrawPool(BaseModel):
    """Immutable per-type tile supply."""

    model_config = ConfigDict(frozen=True)

    player_count: PlayerCount = DEFAULT_PLAYER_COUNT
    counts: tuple[int, ...]

    @model_validator(mode="after")
    def _validate_counts(self) -> DrawPool:
        if len(self.counts) != NUM_TILE_TYPES:
            raise ValueError(f"pool must track {NUM_TILE_TYPES} tile types, got {len(self.counts)}")
        for tile, count in enumerate(self.counts):
            if not 0 <= count <= max_copies(tile, self.player_count):
                raise ValueError(f"invalid count {count} for tile type {tile}")
        return self


def create_pool(player_count: int = DEFAULT_PLAYER_COUNT) -> DrawPool:
    """Create a pool holding the full supply for the given player count."""
    counts = tuple(max_copies(tile, player_count) for tile in range(NUM_TILE_TYPES))
    return DrawPool(player_count=player_count, counts=counts)


def count_of(pool: DrawPool, tile: int) -> int:
    """Remaining copies of a tile type (0 for unknown types)."""
    if not is_valid_tile(tile):
        return 0
    return pool.counts[tile]


def tiles_remaining(pool: DrawPool) -> int:
    """Total number of tiles left in the pool."""
    return sum(pool.counts)


def remaining_tiles(pool: DrawPool) -> list[int]:
    """All remaining tiles, one entry per physical copy, ascending."""
    return array_34_to_tiles(pool.counts)


def _apply(pool: DrawPool, deltas: Counter[int]) -> DrawPool:
    counts = list(pool.counts)
    for tile, delta in deltas.items():
        counts[tile] += delta
    return pool.model_copy(update={"counts": tuple(counts)})


def _can_remove(counts: list[int], tile: int, amount: int) -> bool:
    return is_valid_tile(tile) and counts[tile] >= amount


def _can_add(counts: list[int], tile: int, amount: int, player_count: int) -> bool:
    return is_valid_tile(tile) and counts[tile] + amount <= max_copies(tile, player_count)


def remove_tiles(pool: DrawPool, tiles: Iterable[int], *, strict: bool = True) -> DrawPool:
    """
    Remove tiles from the pool.

    Strict mode checks the whole batch before applying anything and raises
    SupplyUnderflowError on the first shortage. Permissive mode removes
    whatever copies remain of a short tile type and skips the rest.
    """
    requested = Counter(tiles)
    counts = list(pool.counts)
    deltas: Counter[int] = Counter()
    for tile, amount in requested.items():
        if _can_remove(counts, tile, amount):
            deltas[tile] -= amount
            continue
        available = counts[tile] if is_valid_tile(tile) else 0
        if strict:
            raise SupplyUnderflowError(f"cannot remove {amount} of tile type {tile}: {available} remaining")
        logger.debug("pool underflow ignored", tile=tile, requested=amount, available=available)
        if available:
            deltas[tile] -= available
    return _apply(pool, deltas)


def remove_tile(pool: DrawPool, tile: int, *, strict: bool = True) -> DrawPool:
    """Remove a single tile from the pool."""
    return remove_tiles(pool, (tile,), strict=strict)


def add_tiles(pool: DrawPool, tiles: Iterable[int], *, strict: bool = True) -> DrawPool:
    """
    Return tiles to the pool.

    Strict mode raises SupplyOverflowError if any tile type would exceed its
    physical maximum. Permissive mode clamps each type at its maximum.
    """
    requested = Counter(tiles)
    counts = list(pool.counts)
    deltas: Counter[int] = Counter()
    for tile, amount in requested.items():
        if _can_add(counts, tile, amount, pool.player_count):
            deltas[tile] += amount
            continue
        room = max_copies(tile, pool.player_count) - counts[tile] if is_valid_tile(tile) else 0
        if strict:
            raise SupplyOverflowError(f"cannot add {amount} of tile type {tile}: room for {room}")
        logger.debug("pool overflow ignored", tile=tile, requested=amount, room=room)
        if room:
            deltas[tile] += room
    return _apply(pool, deltas)


def add_tile(pool: DrawPool, tile: int, *, strict: bool = True) -> DrawPool:
    """Return a single tile to the pool."""
    return add_tiles(pool, (tile,), strict=strict)


def pick_random_tile(pool: DrawPool, rng: random.Random) -> int | None:
    """
    Pick a tile type weighted by remaining copies without removing it.

    Returns None if the pool is empty.
    """
    total = tiles_remaining(pool)
    if total == 0:
        return None
    position = rng.randrange(total)
    for tile, count in enumerate(pool.counts):
        if position < count:
            return tile
        position -= count
    raise AssertionError("unreachable: position exceeds pool size")


def pool_to_string(pool: DrawPool) -> str:
    """Render remaining counts, e.g. "136 tiles | 1m:4 2m:4 ..."."""
    parts = [f"{tile_to_string(tile)}:{count}" for tile, count in enumerate(pool.counts) if count]
    return f"{tiles_remaining(pool)} tiles | {' '.join(parts)}" if parts else "0 tiles"
