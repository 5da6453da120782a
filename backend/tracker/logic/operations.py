"""
Operation models accepted by GameManager.operate.

Operations are frozen pydantic models discriminated by their ``op`` field
(calls by their ``kind`` field), so the history log can be serialized and
loaded back without losing the concrete variant.
"""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, TypeAdapter

from tracker.logic.enums import KanType, OperationFamily
from tracker.logic.hand import Hand
from tracker.logic.melds import Meld
from tracker.logic.tiles import is_valid_tile


def _check_tile(v: int) -> int:
    if not is_valid_tile(v):
        raise ValueError(f"unknown tile type {v}")
    return v


TileType = Annotated[int, AfterValidator(_check_tile)]


# ---------------------------------------------------------------------------
# Calls
# ---------------------------------------------------------------------------


class ChiCall(BaseModel):
    """Sequence completed by a claimed discard."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["chi"] = "chi"
    meld: Meld
    claimed_tile: TileType

    @property
    def family(self) -> OperationFamily:
        return OperationFamily.CHI


class PonCall(BaseModel):
    """Triplet completed by a claimed discard; the claimed tile is meld.tile."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["pon"] = "pon"
    meld: Meld

    @property
    def family(self) -> OperationFamily:
        return OperationFamily.PON


class KanCall(BaseModel):
    """
    Kan declaration.

    Callers submit kan_type=UNKNOWN; the recorded operation carries the
    kind the hand resolved it to. replacement_tile is set when the caller
    already knows the replacement draw.
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["kan"] = "kan"
    meld: Meld
    kan_type: KanType = KanType.UNKNOWN
    replacement_tile: TileType | None = None

    @property
    def family(self) -> OperationFamily:
        return OperationFamily.KAN


Call = Annotated[ChiCall | PonCall | KanCall, Field(discriminator="kind")]


# ---------------------------------------------------------------------------
# Draw pool operations
# ---------------------------------------------------------------------------


class PoolAdd(BaseModel):
    """Return tiles to the draw pool."""

    model_config = ConfigDict(frozen=True)

    op: Literal["pool_add"] = "pool_add"
    tiles: tuple[int, ...]
    strict: bool = True

    @property
    def family(self) -> OperationFamily:
        return OperationFamily.POOL_ADD


class PoolDiscard(BaseModel):
    """Remove tiles from the draw pool (seen leaving the supply)."""

    model_config = ConfigDict(frozen=True)

    op: Literal["pool_discard"] = "pool_discard"
    tiles: tuple[int, ...]
    strict: bool = True

    @property
    def family(self) -> OperationFamily:
        return OperationFamily.POOL_DISCARD


# ---------------------------------------------------------------------------
# Hand operations
# ---------------------------------------------------------------------------


class InitializeHand(BaseModel):
    """Set the starting hand; its tiles leave the pool."""

    model_config = ConfigDict(frozen=True)

    op: Literal["initialize"] = "initialize"
    hand: Hand

    @property
    def family(self) -> OperationFamily:
        return OperationFamily.INITIALIZE


class AddTile(BaseModel):
    """Draw a tile (regular or replacement) into the hand."""

    model_config = ConfigDict(frozen=True)

    op: Literal["add"] = "add"
    tile: TileType
    strict: bool = True

    @property
    def family(self) -> OperationFamily:
        return OperationFamily.ADD


class DiscardTile(BaseModel):
    """Discard a concealed tile."""

    model_config = ConfigDict(frozen=True)

    op: Literal["discard"] = "discard"
    tile: TileType

    @property
    def family(self) -> OperationFamily:
        return OperationFamily.DISCARD


class CallMeld(BaseModel):
    """Claim a tile or declare a kan."""

    model_config = ConfigDict(frozen=True)

    op: Literal["call"] = "call"
    call: Call
    strict: bool = True

    @property
    def family(self) -> OperationFamily:
        return self.call.family


PoolOperation = PoolAdd | PoolDiscard
HandOperation = InitializeHand | AddTile | DiscardTile | CallMeld
Operation = Annotated[PoolOperation | HandOperation, Field(discriminator="op")]

operation_adapter: TypeAdapter[Operation] = TypeAdapter(Operation)
