"""Exceptions raised by the Scoundrel rules engine."""

from __future__ import annotations

__all__ = [
    "CardsAlreadyPlayed",
    "GameNotInProgress",
    "InsufficientCards",
    "InvalidIndex",
    "PreviousRoomSkipped",
    "RuleViolation",
    "ScoundrelError",
    "SessionNotFound",
    "StructuralError",
]


class ScoundrelError(Exception):
    """Base class for every error raised by the engine."""

    code = "scoundrel_error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.__doc__ or self.code)

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else self.code


class StructuralError(ScoundrelError):
    """The caller referenced something that does not exist."""

    code = "structural_error"


class RuleViolation(ScoundrelError):
    """The requested move is not allowed by the rules of the game."""

    code = "rule_violation"


class SessionNotFound(StructuralError, KeyError):
    """Game session not found."""

    code = "session_not_found"

    def __init__(self, session_id: str) -> None:
        super().__init__(f"Game session '{session_id}' not found")
        self.session_id = session_id


class InvalidIndex(StructuralError, IndexError):
    """Invalid card index."""

    code = "invalid_index"

    def __init__(self, index: object, size: int | None = None) -> None:
        if size is None:
            message = f"Invalid card index: {index!r}"
        else:
            message = f"Invalid card index {index!r} (room holds {size} card(s))"
        super().__init__(message)
        self.index = index
        self.size = size


class GameNotInProgress(RuleViolation):
    """Game is not in progress."""

    code = "game_not_in_progress"


class PreviousRoomSkipped(RuleViolation):
    """Cannot skip two rooms in a row."""

    code = "previous_room_skipped"


class CardsAlreadyPlayed(RuleViolation):
    """Cannot skip a room after playing cards."""

    code = "cards_already_played"


class InsufficientCards(RuleViolation):
    """Not enough cards left in the dungeon."""

    code = "insufficient_cards"

    def __init__(self, requested: int, remaining: int) -> None:
        super().__init__(
            f"Cannot draw {requested} card(s); only {remaining} left in the dungeon"
        )
        self.requested = requested
        self.remaining = remaining
