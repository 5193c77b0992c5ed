"""
Exceptions shared by all layers.

Two branches under GameError:
* RejectionError: the request was understood and refused. Deterministic, nothing was changed.
* FaultError: something around the rules broke (storage, corrupt records). Never reported as a rule violation.
"""

from typing import Optional

from src.core.shared_types import RejectionReason


class GameError(Exception):
    """Top-level error. `code` is what the API layer sends back to clients."""

    code: str = "game_error"

    def __init__(self, message: str, code: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code


# --- REJECTIONS ---
class RejectionError(GameError):
    code = "rejected"


class IllegalMoveError(RejectionError):
    """A placement or pass that breaks one of the rules."""

    def __init__(self, reason: RejectionReason, message: Optional[str] = None) -> None:
        super().__init__(message or f"Move rejected: {reason}", code=str(reason))
        self.reason = reason


class NotYourTurnError(IllegalMoveError):
    def __init__(self, message: Optional[str] = None) -> None:
        super().__init__(RejectionReason.NOT_YOUR_TURN, message)


class GameFinishedError(IllegalMoveError):
    def __init__(self, message: Optional[str] = None) -> None:
        super().__init__(RejectionReason.GAME_FINISHED, message)


class InvalidRequestError(RejectionError):
    code = "invalid_request"


class GameNotFoundError(RejectionError):
    code = "game_not_found"


# --- FAULTS ---
class FaultError(GameError):
    code = "fault"


class GameStateError(FaultError):
    """Persisted data (or the configuration used to create a game) does not describe a valid game."""

    code = "invalid_game_state"


class RepositoryError(FaultError):
    code = "storage_error"


class ConcurrentMoveError(RepositoryError):
    """Another request appended a move for the same turn first."""

    code = "concurrent_move"
