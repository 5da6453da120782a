"""
Game manager: the hand/turn state machine of the tracked seat.

The manager owns the draw pool and the hand and accepts typed operations
through ``operate``. It dispatches on (current phase, operation family):

    awaiting_init         initialize, pool add/discard
    full_hand             discard, kan, pool add/discard
    short_hand            add (draw), chi, pon, kan, pool add/discard
    awaiting_replacement  add (replacement draw), pool add/discard

Handlers never mutate anything. Each one receives the current immutable
GameState and returns a Transition holding the next state and the operation
to record; any exception leaves the manager exactly as it was. Every
accepted operation is appended to the history together with the phase it
was issued from.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any, NamedTuple

import structlog

from shared.logging import setup_logging
from tracker.logic.enums import GamePhase, KanType, OperationFamily
from tracker.logic.exceptions import (
    GameRuleError,
    IllegalOperationForPhaseError,
    InternalInconsistencyError,
    InvalidHandInitializationError,
)
from tracker.logic.hand import add_tile, call_chi, call_kan, call_pon, discard_tile
from tracker.logic.pool import add_tiles, create_pool, remove_tile, remove_tiles
from tracker.logic.settings import DEFAULT_PLAYER_COUNT
from tracker.logic.state import GameState, HistoryEntry
from tracker.logic.views import build_snapshot, render_state

if TYPE_CHECKING:
    from tracker.logic.hand import Hand
    from tracker.logic.operations import (
        AddTile,
        CallMeld,
        DiscardTile,
        InitializeHand,
        Operation,
        PoolAdd,
        PoolDiscard,
    )
    from tracker.logic.pool import DrawPool
    from tracker.logic.settings import TrackerSettings
    from tracker.logic.views import GameSnapshot

logger = structlog.get_logger()

SHORT_HAND_SIZE = 13
FULL_HAND_SIZE = 14

_INITIAL_PHASES: dict[int, GamePhase] = {
    SHORT_HAND_SIZE: GamePhase.SHORT_HAND,
    FULL_HAND_SIZE: GamePhase.FULL_HAND,
}

# kan kinds each phase may legally produce: a full hand declares its own
# tiles as a kan, a short hand can only claim a discard
_ALLOWED_KAN_TYPES: dict[GamePhase, frozenset[KanType]] = {
    GamePhase.FULL_HAND: frozenset({KanType.CLOSED, KanType.ADDED}),
    GamePhase.SHORT_HAND: frozenset({KanType.OPEN}),
}


class Transition(NamedTuple):
    """Result of a handler: the next state and the operation to record."""

    state: GameState
    operation: Operation


Handler = Callable[[GameState, Any], Transition]


def _require_hand(state: GameState) -> Hand:
    if state.hand is None:
        raise RuntimeError(f"hand missing in phase {state.phase.value}")
    return state.hand


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------


def _pool_add(state: GameState, operation: PoolAdd) -> Transition:
    pool = add_tiles(state.pool, operation.tiles, strict=operation.strict)
    return Transition(state.model_copy(update={"pool": pool}), operation)


def _pool_discard(state: GameState, operation: PoolDiscard) -> Transition:
    pool = remove_tiles(state.pool, operation.tiles, strict=operation.strict)
    return Transition(state.model_copy(update={"pool": pool}), operation)


def _initialize_hand(state: GameState, operation: InitializeHand) -> Transition:
    hand = operation.hand
    if hand.melds:
        raise InvalidHandInitializationError("cannot initialize a hand with melds")
    phase = _INITIAL_PHASES.get(len(hand.concealed))
    if phase is None:
        raise InvalidHandInitializationError(
            f"cannot initialize hand with {len(hand.concealed)} tiles, only 13 and 14 are supported"
        )
    # dealt tiles always leave the pool under strict accounting
    pool = remove_tiles(state.pool, hand.concealed, strict=True)
    return Transition(state.model_copy(update={"pool": pool, "hand": hand, "phase": phase}), operation)


def _draw_tile(state: GameState, operation: AddTile) -> Transition:
    pool = remove_tile(state.pool, operation.tile, strict=operation.strict)
    hand = add_tile(_require_hand(state), operation.tile)
    return Transition(
        state.model_copy(update={"pool": pool, "hand": hand, "phase": GamePhase.FULL_HAND}),
        operation,
    )


def _discard_tile(state: GameState, operation: DiscardTile) -> Transition:
    hand = discard_tile(_require_hand(state), operation.tile)
    discarded_types = state.discarded_types
    if operation.tile not in discarded_types:
        discarded_types = tuple(sorted((*discarded_types, operation.tile)))
    return Transition(
        state.model_copy(
            update={
                "hand": hand,
                "discards": (*state.discards, operation.tile),
                "discarded_types": discarded_types,
                "phase": GamePhase.SHORT_HAND,
            }
        ),
        operation,
    )


def _call_chi(state: GameState, operation: CallMeld) -> Transition:
    call = operation.call
    pool = remove_tile(state.pool, call.claimed_tile, strict=operation.strict)
    hand, _meld = call_chi(_require_hand(state), call.meld, call.claimed_tile)
    return Transition(
        state.model_copy(update={"pool": pool, "hand": hand, "phase": GamePhase.FULL_HAND}),
        operation,
    )


def _call_pon(state: GameState, operation: CallMeld) -> Transition:
    call = operation.call
    pool = remove_tile(state.pool, call.meld.tile, strict=operation.strict)
    hand, _meld = call_pon(_require_hand(state), call.meld)
    return Transition(
        state.model_copy(update={"pool": pool, "hand": hand, "phase": GamePhase.FULL_HAND}),
        operation,
    )


def _spend_kan_tiles(pool: DrawPool, operation: CallMeld, *, claimed: bool) -> DrawPool:
    """Remove the claimed discard (open kan) and the known replacement tile from the pool."""
    call = operation.call
    if claimed:
        pool = remove_tile(pool, call.meld.tile, strict=operation.strict)
    if call.replacement_tile is not None:
        pool = remove_tile(pool, call.replacement_tile, strict=operation.strict)
    return pool


def _form_kan(state: GameState, operation: CallMeld) -> Transition:
    """
    Form a kan and rewrite the request with the kind the hand resolved.

    ``state`` is the rollback snapshot: the hand, pool and phase are staged
    on copies and only reach the manager if the realized kind is allowed
    for the originating phase; any exception raised here abandons them.
    The kind is resolved before the pool is charged.
    """
    call = operation.call
    origin = state.phase
    claimed = origin == GamePhase.SHORT_HAND
    phase = GamePhase.FULL_HAND if call.replacement_tile is not None else GamePhase.AWAITING_REPLACEMENT

    hand, realized = call_kan(
        _require_hand(state),
        call.meld,
        call.replacement_tile,
        kan_type=call.kan_type,
        claimed=claimed,
    )
    realized_type = realized.kan_type
    if realized_type not in _ALLOWED_KAN_TYPES[origin]:
        raise InternalInconsistencyError(
            phase=origin.value,
            requested=call.kan_type.value,
            realized=realized_type.value if realized_type is not None else "none",
        )

    pool = _spend_kan_tiles(state.pool, operation, claimed=claimed)
    resolved = operation.model_copy(update={"call": call.model_copy(update={"kan_type": realized_type})})
    return Transition(state.model_copy(update={"pool": pool, "hand": hand, "phase": phase}), resolved)


# ---------------------------------------------------------------------------
# Dispatch table
# ---------------------------------------------------------------------------

# Every phase lists every operation family; None means the family is
# illegal in that phase.
_DISPATCH: dict[GamePhase, dict[OperationFamily, Handler | None]] = {
    GamePhase.AWAITING_INIT: {
        OperationFamily.POOL_ADD: _pool_add,
        OperationFamily.POOL_DISCARD: _pool_discard,
        OperationFamily.INITIALIZE: _initialize_hand,
        OperationFamily.ADD: None,
        OperationFamily.DISCARD: None,
        OperationFamily.CHI: None,
        OperationFamily.PON: None,
        OperationFamily.KAN: None,
    },
    GamePhase.FULL_HAND: {
        OperationFamily.POOL_ADD: _pool_add,
        OperationFamily.POOL_DISCARD: _pool_discard,
        OperationFamily.INITIALIZE: None,
        OperationFamily.ADD: None,
        OperationFamily.DISCARD: _discard_tile,
        OperationFamily.CHI: None,
        OperationFamily.PON: None,
        OperationFamily.KAN: _form_kan,
    },
    GamePhase.SHORT_HAND: {
        OperationFamily.POOL_ADD: _pool_add,
        OperationFamily.POOL_DISCARD: _pool_discard,
        OperationFamily.INITIALIZE: None,
        OperationFamily.ADD: _draw_tile,
        OperationFamily.DISCARD: None,
        OperationFamily.CHI: _call_chi,
        OperationFamily.PON: _call_pon,
        OperationFamily.KAN: _form_kan,
    },
    GamePhase.AWAITING_REPLACEMENT: {
        OperationFamily.POOL_ADD: _pool_add,
        OperationFamily.POOL_DISCARD: _pool_discard,
        OperationFamily.INITIALIZE: None,
        OperationFamily.ADD: _draw_tile,
        OperationFamily.DISCARD: None,
        OperationFamily.CHI: None,
        OperationFamily.PON: None,
        OperationFamily.KAN: None,
    },
}


def _validate_dispatch_table() -> None:
    """Fail at import if a phase or operation family is missing from the table."""
    for phase in GamePhase:
        handlers = _DISPATCH.get(phase)
        if handlers is None:
            raise RuntimeError(f"dispatch table has no entry for phase {phase.value}")
        missing = [family.value for family in OperationFamily if family not in handlers]
        if missing:
            raise RuntimeError(f"dispatch table for phase {phase.value} is missing {missing}")


_validate_dispatch_table()


def get_handler(phase: GamePhase, family: OperationFamily) -> Handler | None:
    """Return the handler for an operation family in a phase, or None if illegal."""
    return _DISPATCH[phase][family]


# ---------------------------------------------------------------------------
# Game manager
# ---------------------------------------------------------------------------


class GameManager:
    """
    Tracks one seat's hand against the shared draw pool.

    Single-threaded: each ``operate`` call either commits completely or
    raises and leaves every observable field untouched.
    """

    def __init__(self, player_count: int = DEFAULT_PLAYER_COUNT) -> None:
        self._state = GameState(pool=create_pool(player_count))
        self._history: list[HistoryEntry] = []

    @classmethod
    def from_settings(cls, settings: TrackerSettings) -> GameManager:
        """Build a manager for the configured table, starting a session log if log_dir is set."""
        if settings.log_dir is not None:
            setup_logging(
                settings.log_dir,
                level=settings.log_level,
                json_mode=settings.log_format == "json",
                player_count=settings.player_count,
            )
        return cls(player_count=settings.player_count)

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def pool(self) -> DrawPool:
        return self._state.pool

    @property
    def hand(self) -> Hand | None:
        return self._state.hand

    @property
    def phase(self) -> GamePhase:
        return self._state.phase

    @property
    def player_count(self) -> int:
        return self._state.pool.player_count

    @property
    def discards(self) -> tuple[int, ...]:
        return self._state.discards

    @property
    def discarded_types(self) -> tuple[int, ...]:
        return self._state.discarded_types

    @property
    def history(self) -> tuple[HistoryEntry, ...]:
        return tuple(self._history)

    def operate(self, operation: Operation) -> Operation:
        """
        Validate and apply an operation.

        Returns the operation as recorded in history, which differs from the
        submitted one only for kan requests (the resolved kan type is filled
        in). Raises GameRuleError subclasses or InternalInconsistencyError on
        failure, in which case nothing changes.
        """
        phase = self._state.phase
        family = operation.family
        handler = get_handler(phase, family)
        if handler is None:
            logger.info("operation rejected: illegal for phase", family=family, phase=phase)
            raise IllegalOperationForPhaseError(
                f"unsupported operation '{family.value}' in phase '{phase.value}'"
            )

        try:
            transition = handler(self._state, operation)
        except InternalInconsistencyError as error:
            logger.warning("kan classification contradicts phase", family=family, phase=phase, error=str(error))
            raise
        except GameRuleError as error:
            logger.info("operation rejected", family=family, phase=phase, error=str(error))
            raise

        self._state = transition.state
        self._history.append(HistoryEntry(operation=transition.operation, phase=phase))
        logger.debug("operation accepted", family=family, phase_before=phase, phase_after=self._state.phase)
        return transition.operation

    def snapshot(self) -> GameSnapshot:
        """Structured snapshot for transmission or display."""
        return build_snapshot(self._state)

    def to_json(self) -> str:
        return self.snapshot().model_dump_json()

    def __str__(self) -> str:
        return render_state(self._state)
