"""
State models for the hand tracker.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from tracker.logic.enums import GamePhase
from tracker.logic.hand import Hand  # noqa: TC001
from tracker.logic.operations import Operation  # noqa: TC001
from tracker.logic.pool import DrawPool  # noqa: TC001


class GameState(BaseModel):
    """
    Immutable snapshot of everything the game manager tracks.

    hand is None only while phase is AWAITING_INIT.
    """

    model_config = ConfigDict(frozen=True)

    pool: DrawPool
    hand: Hand | None = None
    phase: GamePhase = GamePhase.AWAITING_INIT
    discards: tuple[int, ...] = ()  # own discard pile, in order
    discarded_types: tuple[int, ...] = ()  # distinct discarded tile types, ascending


class HistoryEntry(BaseModel):
    """An accepted operation paired with the phase it was issued from."""

    model_config = ConfigDict(frozen=True)

    operation: Operation
    phase: GamePhase
