"""Game error taxonomy.

InvalidMove is a rejected request: the caller is told, the game goes on and
no state was changed. GameStateError signals a defect (missing seat,
inconsistent state); the current game should be considered unusable.
Running out of wall tiles is not an error but a drawn game.
"""

from enum import Enum
from typing import Any, Optional


class ErrorType(str, Enum):
    INVALID_MOVE = "invalid_move"
    GAME_STATE_ERROR = "game_state_error"


class GameError(Exception):
    """Base class for engine errors."""

    error_type: ErrorType = ErrorType.GAME_STATE_ERROR

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def __repr__(self):
        return f"{type(self).__name__}({self.message!r})"


class InvalidMove(GameError):
    error_type = ErrorType.INVALID_MOVE


class GameStateError(GameError):
    error_type = ErrorType.GAME_STATE_ERROR
