"""Scoundrel: a single-player dungeon crawl played with a deck of cards."""

from .cards import Card, CardType, Deck, Rank, Suit
from .engine import DamagePreview, GameSession, GameState, PlayOutcome
from .errors import (
    CardsAlreadyPlayed,
    GameNotInProgress,
    InsufficientCards,
    InvalidIndex,
    PreviousRoomSkipped,
    RuleViolation,
    ScoundrelError,
    SessionNotFound,
    StructuralError,
)
from .player import Player
from .room import Room
from .sessions import SessionRegistry
from .snapshot import GameSnapshot

__all__ = [
    "Card",
    "CardType",
    "CardsAlreadyPlayed",
    "DamagePreview",
    "Deck",
    "GameNotInProgress",
    "GameSession",
    "GameSnapshot",
    "GameState",
    "InsufficientCards",
    "InvalidIndex",
    "PlayOutcome",
    "Player",
    "PreviousRoomSkipped",
    "Rank",
    "Room",
    "RuleViolation",
    "ScoundrelError",
    "SessionNotFound",
    "SessionRegistry",
    "StructuralError",
    "Suit",
]
