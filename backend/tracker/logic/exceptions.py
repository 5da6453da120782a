"""Typed domain exceptions for hand tracking.

All rule violations use subclasses of GameRuleError rather than raw
ValueError, so callers of GameManager.operate can catch them uniformly.
A failed operation never leaves partial state behind.
"""


class GameRuleError(Exception):
    """Base exception for game rule violations.

    Raised by the pool, the hand and the game manager when an operation
    violates the rules or the tile supply bookkeeping.
    """


class IllegalOperationForPhaseError(GameRuleError):
    """Operation family is not accepted in the current phase."""


class SupplyUnderflowError(GameRuleError):
    """Strict pool removal asked for more copies than remain."""


class SupplyOverflowError(GameRuleError):
    """Strict pool addition would exceed the physical number of copies."""


class InvalidHandInitializationError(GameRuleError):
    """Initial hand has exposed melds or a tile count other than 13/14."""


class TileNotHeldError(GameRuleError):
    """Discarded tile is not among the concealed tiles."""


class InvalidMeldError(GameRuleError):
    """Meld call cannot be formed from the held tiles."""


class InternalInconsistencyError(Exception):
    """Raised when a kan resolves to a kind the originating phase forbids.

    Indicates a caller or collaborator contract violation rather than a
    user error, and is not a GameRuleError.

    Attributes:
        phase: Phase the kan request was issued from.
        requested: Kan type the caller asked for.
        realized: Kan type the hand classified the meld as.

    """

    def __init__(self, *, phase: str, requested: str, realized: str) -> None:
        self.phase = phase
        self.requested = requested
        self.realized = realized
        super().__init__(f"kan requested as {requested} resolved to {realized}, not allowed from {phase}")
