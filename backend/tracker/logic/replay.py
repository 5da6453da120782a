"""
History export and deterministic replay.

A HistoryLog holds the player count and every accepted (operation, phase)
pair of a session. Replaying it against a fresh GameManager reproduces the
session's final state; the recorded phase of each entry is checked against
the replaying manager before its operation is applied.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, ValidationError

from tracker.logic.exceptions import GameRuleError, InternalInconsistencyError
from tracker.logic.game_manager import GameManager
from tracker.logic.settings import DEFAULT_PLAYER_COUNT, PlayerCount
from tracker.logic.state import HistoryEntry  # noqa: TC001

REPLAY_VERSION = "1"


class ReplayError(Exception):
    """Base exception for history replay failures."""


class ReplayLoadError(ReplayError):
    """Raised when a history log cannot be parsed."""


class ReplayInvariantError(ReplayError):
    """Raised when a replayed entry does not reproduce the recorded session."""


class HistoryLog(BaseModel):
    """Versioned, serializable history of a session."""

    model_config = ConfigDict(frozen=True)

    version: str = REPLAY_VERSION
    player_count: PlayerCount = DEFAULT_PLAYER_COUNT
    entries: tuple[HistoryEntry, ...] = ()


def export_history(manager: GameManager) -> HistoryLog:
    """Capture the history of a manager."""
    return HistoryLog(player_count=manager.player_count, entries=manager.history)


def dump_history(manager: GameManager) -> str:
    """Serialize the history of a manager to JSON."""
    return export_history(manager).model_dump_json()


def load_history(text: str) -> HistoryLog:
    """
    Parse a JSON history log.

    Raises ReplayLoadError on malformed JSON, schema violations or a
    version mismatch.
    """
    try:
        log = HistoryLog.model_validate_json(text)
    except ValidationError as e:
        raise ReplayLoadError(f"invalid history log: {e}") from e
    if log.version != REPLAY_VERSION:
        raise ReplayLoadError(f"history version mismatch: expected {REPLAY_VERSION}, got {log.version}")
    return log


def replay_history(log: HistoryLog) -> GameManager:
    """
    Re-apply every recorded operation to a fresh manager.

    Raises ReplayInvariantError if an entry was recorded from a different
    phase than the replaying manager is in, or if an operation is rejected.
    """
    manager = GameManager(player_count=log.player_count)
    for index, entry in enumerate(log.entries):
        if manager.phase != entry.phase:
            raise ReplayInvariantError(
                f"entry {index}: recorded in phase {entry.phase.value}, replaying in {manager.phase.value}"
            )
        try:
            manager.operate(entry.operation)
        except (GameRuleError, InternalInconsistencyError) as e:
            raise ReplayInvariantError(f"entry {index}: operation rejected on replay: {e}") from e
    return manager
