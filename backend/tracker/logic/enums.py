"""
String enum definitions for hand tracking concepts.
"""

from enum import Enum


class GamePhase(str, Enum):
    """Position of the tracked hand in its turn cycle."""

    AWAITING_INIT = "awaiting_init"
    FULL_HAND = "full_hand"  # 14 tiles, must discard or declare kan
    SHORT_HAND = "short_hand"  # 13 tiles, waiting for a draw or a call
    AWAITING_REPLACEMENT = "awaiting_replacement"  # kan declared, replacement tile owed


class KanType(str, Enum):
    """Subtypes of kan declarations."""

    OPEN = "open"  # daiminkan, claimed from a discard
    ADDED = "added"  # shouminkan, upgraded from an open pon
    CLOSED = "closed"  # ankan, four concealed copies
    UNKNOWN = "unknown"  # request shape before the hand classifies it


class OperationFamily(str, Enum):
    """Operation families the game manager dispatches on."""

    POOL_ADD = "pool_add"
    POOL_DISCARD = "pool_discard"
    INITIALIZE = "initialize"
    ADD = "add"
    DISCARD = "discard"
    CHI = "chi"
    PON = "pon"
    KAN = "kan"
