"""
Read-only views of the tracker state for transmission and display.

These are presentational: the authoritative state is GameState.
"""

from typing import Literal

from pydantic import BaseModel

from tracker.logic.enums import GamePhase
from tracker.logic.pool import pool_to_string, tiles_remaining
from tracker.logic.state import GameState
from tracker.logic.tiles import tile_to_string, tiles_to_string

HAND_NOT_INITIALIZED = "not_initialized"


class PoolView(BaseModel):
    """Remaining supply keyed by tile notation (types with no copies omitted)."""

    remaining: int
    counts: dict[str, int]


class HandView(BaseModel):
    """Concealed tiles and melds in tile notation."""

    concealed: str
    melds: list[str]
    size: int


class GameSnapshot(BaseModel):
    """Structured snapshot of a game manager."""

    pool: PoolView
    discarded_types: list[str]
    hand: HandView | Literal["not_initialized"]
    phase: GamePhase


def build_snapshot(state: GameState) -> GameSnapshot:
    """Build the structured snapshot of a state."""
    pool = PoolView(
        remaining=tiles_remaining(state.pool),
        counts={tile_to_string(tile): count for tile, count in enumerate(state.pool.counts) if count},
    )
    hand: HandView | Literal["not_initialized"] = HAND_NOT_INITIALIZED
    if state.hand is not None:
        hand = HandView(
            concealed=tiles_to_string(state.hand.concealed),
            melds=[str(meld) for meld in state.hand.melds],
            size=state.hand.size,
        )
    return GameSnapshot(
        pool=pool,
        discarded_types=[tile_to_string(tile) for tile in state.discarded_types],
        hand=hand,
        phase=state.phase,
    )


def render_state(state: GameState) -> str:
    """Multi-line human readable summary of a state."""
    discarded = " ".join(tile_to_string(tile) for tile in state.discarded_types) or "none"
    hand = str(state.hand) if state.hand is not None else "not initialized"
    return (
        f"Pool:\n  {pool_to_string(state.pool)}\n"
        f"Discarded types:\n  {discarded}\n"
        f"Hand:\n  {hand}\n"
        f"Phase:\n  {state.phase.value}"
    )
