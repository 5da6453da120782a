"""
Hand state and meld calls (chi, pon, kan).

All functions are pure: they validate against the current hand and
return a new Hand, raising a GameRuleError subclass when the requested
change cannot be made from the held tiles.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from pydantic import BaseModel, ConfigDict, field_validator

from tracker.logic.enums import KanType
from tracker.logic.exceptions import InvalidMeldError, TileNotHeldError
from tracker.logic.melds import TILES_FOR_KAN, TILES_FOR_PON, Meld
from tracker.logic.tiles import is_valid_tile, sort_tiles, tile_to_string, tiles_to_string

if TYPE_CHECKING:
    from collections.abc import Iterable

logger = structlog.get_logger()

# every meld counts as three tiles towards the 13/14 hand size
MELD_HAND_SIZE = 3

# concealed copies each call needs besides the claimed tile
TILES_FROM_HAND_FOR_PON = TILES_FOR_PON - 1
TILES_FROM_HAND_FOR_OPEN_KAN = TILES_FOR_KAN - 1
TILES_FROM_HAND_FOR_CLOSED_KAN = TILES_FOR_KAN
TILES_FROM_HAND_FOR_ADDED_KAN = 1

# order in which an unclassified kan request is matched against the hand
_KAN_RESOLUTION_ORDER = (KanType.CLOSED, KanType.ADDED, KanType.OPEN)


class Hand(BaseModel):
    """
    Immutable hand of the tracked player.

    Concealed tiles are kept sorted ascending.
    """

    model_config = ConfigDict(frozen=True)

    concealed: tuple[int, ...] = ()
    melds: tuple[Meld, ...] = ()

    @field_validator("concealed")
    @classmethod
    def _sort_concealed(cls, v: tuple[int, ...]) -> tuple[int, ...]:
        invalid = [t for t in v if not is_valid_tile(t)]
        if invalid:
            raise ValueError(f"unknown tile types in hand: {invalid}")
        return tuple(sort_tiles(v))

    @property
    def size(self) -> int:
        """Hand size with each meld counted as three tiles."""
        return len(self.concealed) + MELD_HAND_SIZE * len(self.melds)

    def __str__(self) -> str:
        concealed = tiles_to_string(self.concealed) or "-"
        if not self.melds:
            return concealed
        return f"{concealed} | {' '.join(str(m) for m in self.melds)}"


def create_hand(tiles: Iterable[int], melds: Iterable[Meld] = ()) -> Hand:
    """Create a hand from concealed tiles and optional melds."""
    return Hand(concealed=tuple(tiles), melds=tuple(melds))


def count_tile(hand: Hand, tile: int) -> int:
    """Number of concealed copies of a tile type."""
    return hand.concealed.count(tile)


def physical_tiles(hand: Hand) -> list[int]:
    """Every tile the hand holds, concealed and in melds (kans count four)."""
    tiles = list(hand.concealed)
    for meld in hand.melds:
        tiles.extend(meld.tiles)
    return sort_tiles(tiles)


def add_tile(hand: Hand, tile: int) -> Hand:
    """Add a drawn tile to the concealed tiles."""
    return hand.model_copy(update={"concealed": tuple(sort_tiles((*hand.concealed, tile)))})


def _remove_copies(concealed: tuple[int, ...], tile: int, count: int) -> tuple[int, ...]:
    """Remove ``count`` copies of tile; caller has checked they are held."""
    remaining = list(concealed)
    for _ in range(count):
        remaining.remove(tile)
    return tuple(remaining)


def discard_tile(hand: Hand, tile: int) -> Hand:
    """
    Remove one copy of tile from the concealed tiles.

    Raises TileNotHeldError if the tile is not held concealed.
    """
    if count_tile(hand, tile) == 0:
        raise TileNotHeldError(f"cannot discard {tile_to_string(tile) if is_valid_tile(tile) else tile}: not in hand")
    return hand.model_copy(update={"concealed": _remove_copies(hand.concealed, tile, 1)})


def call_chi(hand: Hand, meld: Meld, claimed_tile: int) -> tuple[Hand, Meld]:
    """
    Expose a sequence completed by a claimed tile.

    The two other tiles of the sequence must be held concealed.
    Returns (new_hand, exposed_meld).
    """
    if meld.meld_type != Meld.CHI:
        raise InvalidMeldError(f"cannot call chi with a {meld.meld_type} meld")
    if claimed_tile not in meld.tiles:
        raise InvalidMeldError(f"claimed tile {claimed_tile} is not part of {meld}")

    from_hand = list(meld.tiles)
    from_hand.remove(claimed_tile)
    missing = [t for t in from_hand if count_tile(hand, t) == 0]
    if missing:
        raise InvalidMeldError(f"cannot call chi {meld}: missing {tiles_to_string(missing)}")

    concealed = hand.concealed
    for tile in from_hand:
        concealed = _remove_copies(concealed, tile, 1)
    exposed = Meld(meld_type=Meld.CHI, tile=meld.tile, opened=True)
    return hand.model_copy(update={"concealed": concealed, "melds": (*hand.melds, exposed)}), exposed


def call_pon(hand: Hand, meld: Meld) -> tuple[Hand, Meld]:
    """
    Expose a triplet completed by a claimed tile.

    Two matching tiles must be held concealed.
    Returns (new_hand, exposed_meld).
    """
    if meld.meld_type != Meld.PON:
        raise InvalidMeldError(f"cannot call pon with a {meld.meld_type} meld")
    held = count_tile(hand, meld.tile)
    if held < TILES_FROM_HAND_FOR_PON:
        raise InvalidMeldError(f"cannot call pon {meld}: need {TILES_FROM_HAND_FOR_PON} matching tiles, found {held}")

    concealed = _remove_copies(hand.concealed, meld.tile, TILES_FROM_HAND_FOR_PON)
    exposed = Meld(meld_type=Meld.PON, tile=meld.tile, opened=True)
    return hand.model_copy(update={"concealed": concealed, "melds": (*hand.melds, exposed)}), exposed


def _find_pon(hand: Hand, tile: int) -> int | None:
    for index, meld in enumerate(hand.melds):
        if meld.meld_type == Meld.PON and meld.tile == tile:
            return index
    return None


def _realize_kan(hand: Hand, tile: int, kan_type: KanType, *, claimed: bool) -> tuple[Hand, Meld] | None:
    """Form a kan of the given kind, or return None if the hand lacks that shape."""
    held = count_tile(hand, tile)

    if kan_type == KanType.CLOSED:
        if held < TILES_FROM_HAND_FOR_CLOSED_KAN:
            return None
        meld = Meld(meld_type=Meld.KAN, tile=tile, opened=False, kan_type=KanType.CLOSED)
        concealed = _remove_copies(hand.concealed, tile, TILES_FROM_HAND_FOR_CLOSED_KAN)
        return hand.model_copy(update={"concealed": concealed, "melds": (*hand.melds, meld)}), meld

    if kan_type == KanType.ADDED:
        pon_index = _find_pon(hand, tile)
        if pon_index is None or held < TILES_FROM_HAND_FOR_ADDED_KAN:
            return None
        meld = Meld(meld_type=Meld.KAN, tile=tile, opened=True, kan_type=KanType.ADDED)
        melds = list(hand.melds)
        melds[pon_index] = meld
        concealed = _remove_copies(hand.concealed, tile, TILES_FROM_HAND_FOR_ADDED_KAN)
        return hand.model_copy(update={"concealed": concealed, "melds": tuple(melds)}), meld

    if kan_type == KanType.OPEN:
        # daiminkan needs someone else's discard
        if not claimed or held < TILES_FROM_HAND_FOR_OPEN_KAN:
            return None
        meld = Meld(meld_type=Meld.KAN, tile=tile, opened=True, kan_type=KanType.OPEN)
        concealed = _remove_copies(hand.concealed, tile, TILES_FROM_HAND_FOR_OPEN_KAN)
        return hand.model_copy(update={"concealed": concealed, "melds": (*hand.melds, meld)}), meld

    return None


def call_kan(
    hand: Hand,
    meld: Meld,
    replacement_tile: int | None = None,
    *,
    kan_type: KanType = KanType.UNKNOWN,
    claimed: bool = False,
) -> tuple[Hand, Meld]:
    """
    Form a kan and classify which kind it is.

    An explicit kan_type validates exactly that shape; an explicit open
    request forms the open shape even without ``claimed``. KanType.UNKNOWN
    tries, in order: four concealed copies (closed), an open pon plus one
    concealed copy (added), three concealed copies plus the claimed discard
    (open, only when ``claimed`` is set). A supplied replacement tile joins the
    concealed tiles afterwards.

    Returns (new_hand, realized_meld) where realized_meld.kan_type is never
    KanType.UNKNOWN. Raises InvalidMeldError if no shape matches.
    """
    if meld.meld_type != Meld.KAN:
        raise InvalidMeldError(f"cannot call kan with a {meld.meld_type} meld")

    candidates = _KAN_RESOLUTION_ORDER if kan_type == KanType.UNKNOWN else (kan_type,)
    claimed = claimed or kan_type == KanType.OPEN
    for candidate in candidates:
        result = _realize_kan(hand, meld.tile, candidate, claimed=claimed)
        if result is None:
            continue
        new_hand, realized = result
        if replacement_tile is not None:
            new_hand = add_tile(new_hand, replacement_tile)
        logger.debug("kan classified", tile=meld.tile, requested=kan_type.value, realized=candidate.value)
        return new_hand, realized

    raise InvalidMeldError(f"cannot call {kan_type.value} kan {meld}: hand does not hold a matching shape")
