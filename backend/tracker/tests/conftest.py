from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from mahjong.tile import TilesConverter

from tracker.logic.game_manager import GameManager
from tracker.logic.hand import create_hand
from tracker.logic.operations import AddTile, InitializeHand
from tracker.logic.pool import count_of
from tracker.logic.tiles import NUM_TILE_TYPES, tiles_to_34_array

if TYPE_CHECKING:
    from collections.abc import Sequence

    from tracker.logic.melds import Meld


# ============================================================================
# Test Builder Helpers
# ============================================================================


def tiles(
    man: str | None = None,
    pin: str | None = None,
    sou: str | None = None,
    honors: str | None = None,
) -> list[int]:
    """Build sorted 34-format tile types from per-suit notation."""
    tiles_136 = TilesConverter.string_to_136_array(man=man, pin=pin, sou=sou, honors=honors)
    return sorted(t // 4 for t in tiles_136)


def tile(notation: str) -> int:
    """Single 34-format tile type from notation like "5p" or "1z"."""
    value, suit = notation[:-1], notation[-1]
    suits = {"m": "man", "p": "pin", "s": "sou", "z": "honors"}
    (result,) = tiles(**{suits[suit]: value})
    return result


def initialize(
    manager: GameManager,
    concealed: Sequence[int],
    melds: Sequence[Meld] = (),
) -> GameManager:
    """Initialize a manager with the given concealed tiles."""
    manager.operate(InitializeHand(hand=create_hand(concealed, melds)))
    return manager


def create_manager(
    concealed: Sequence[int] | None = None,
    *,
    player_count: int = 4,
    draw: int | None = None,
) -> GameManager:
    """
    Create a GameManager, optionally initialized and with one tile drawn.

    Without ``concealed`` the manager stays in awaiting_init.
    """
    manager = GameManager(player_count=player_count)
    if concealed is not None:
        initialize(manager, concealed)
    if draw is not None:
        manager.operate(AddTile(tile=draw))
    return manager


def tile_totals(manager: GameManager) -> list[int]:
    """Per-type sum of pool, hand (concealed and melds) and own discards."""
    held = [0] * NUM_TILE_TYPES
    if manager.hand is not None:
        concealed = tiles_to_34_array(manager.hand.concealed)
        in_melds = tiles_to_34_array(t for meld in manager.hand.melds for t in meld.tiles)
        held = [a + b for a, b in zip(concealed, in_melds, strict=True)]
    discarded = tiles_to_34_array(manager.discards)
    return [count_of(manager.pool, t) + held[t] + discarded[t] for t in range(NUM_TILE_TYPES)]


def observable_state(manager: GameManager) -> tuple:
    """Everything a failed operation must leave untouched."""
    return (
        manager.state,
        manager.pool,
        manager.hand,
        manager.phase,
        manager.discards,
        manager.discarded_types,
        len(manager.history),
    )


# ============================================================================
# Fixtures
# ============================================================================

# 13 tiles: 123m 456p 789s 1z 222z
SHORT_HAND = tiles(man="123", pin="456", sou="789", honors="1222")


@pytest.fixture
def manager() -> GameManager:
    return GameManager()


@pytest.fixture
def short_hand_manager() -> GameManager:
    return create_manager(SHORT_HAND)


@pytest.fixture
def full_hand_manager() -> GameManager:
    return create_manager(SHORT_HAND, draw=tile("9m"))
