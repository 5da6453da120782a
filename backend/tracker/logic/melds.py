"""
Immutable meld descriptors.

A meld is identified by its type and the lowest tile type of the group;
the member tiles are reconstructed from those two fields.
"""

from __future__ import annotations

from typing import ClassVar, Literal

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from tracker.logic.enums import KanType
from tracker.logic.tiles import TILES_PER_SUIT, is_honor, is_valid_tile, tile_value, tiles_to_string

MeldType = Literal["chi", "pon", "kan"]

TILES_FOR_CHI = 3
TILES_FOR_PON = 3
TILES_FOR_KAN = 4

# highest 0-based rank a sequence may start at (7 in 789)
CHI_LOWEST_MAX_VALUE = TILES_PER_SUIT - TILES_FOR_CHI


class Meld(BaseModel):
    """
    Immutable representation of a meld.

    For kans, kan_type is the realized kind once the hand has classified
    the meld; request descriptors leave it unset.
    """

    model_config = ConfigDict(frozen=True)

    meld_type: MeldType
    tile: int
    opened: bool = True
    kan_type: KanType | None = None

    # Meld type constants (matching mahjong.meld.Meld)
    CHI: ClassVar[MeldType] = "chi"
    PON: ClassVar[MeldType] = "pon"
    KAN: ClassVar[MeldType] = "kan"

    @field_validator("tile")
    @classmethod
    def _validate_tile(cls, v: int) -> int:
        if not is_valid_tile(v):
            raise ValueError(f"unknown tile type {v}")
        return v

    @model_validator(mode="after")
    def _validate_shape(self) -> Meld:
        if self.meld_type == self.CHI:
            if is_honor(self.tile) or tile_value(self.tile) > CHI_LOWEST_MAX_VALUE:
                raise ValueError(f"chi cannot start at tile type {self.tile}")
        if self.kan_type is not None and self.meld_type != self.KAN:
            raise ValueError(f"kan_type set on a {self.meld_type} meld")
        return self

    @property
    def tiles(self) -> tuple[int, ...]:
        """Tile types composing the meld, ascending."""
        if self.meld_type == self.CHI:
            return (self.tile, self.tile + 1, self.tile + 2)
        if self.meld_type == self.PON:
            return (self.tile,) * TILES_FOR_PON
        return (self.tile,) * TILES_FOR_KAN

    def __str__(self) -> str:
        label = self.meld_type if self.kan_type is None else f"{self.kan_type.value}_{self.meld_type}"
        return f"{label}({tiles_to_string(self.tiles)})"


def chi(tile: int) -> Meld:
    """Sequence starting at tile."""
    return Meld(meld_type=Meld.CHI, tile=tile)


def pon(tile: int) -> Meld:
    """Triplet of tile."""
    return Meld(meld_type=Meld.PON, tile=tile)


def kan(tile: int) -> Meld:
    """Unclassified quad request of tile."""
    return Meld(meld_type=Meld.KAN, tile=tile)
