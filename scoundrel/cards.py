"""Playing cards and the Scoundrel dungeon deck."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Iterable, List, Optional, Sequence, Tuple

from .errors import InsufficientCards

__all__ = [
    "DUNGEON_SIZE",
    "Card",
    "CardType",
    "Deck",
    "Rank",
    "Suit",
]

log = logging.getLogger(__name__)

DUNGEON_SIZE = 44


class Suit(Enum):
    CLUBS = "clubs"
    DIAMONDS = "diamonds"
    HEARTS = "hearts"
    SPADES = "spades"

    @property
    def symbol(self) -> str:
        return _SUIT_SYMBOLS[self]

    @property
    def is_red(self) -> bool:
        return self in (Suit.DIAMONDS, Suit.HEARTS)


_SUIT_SYMBOLS = {
    Suit.CLUBS: "♣",
    Suit.DIAMONDS: "♦",
    Suit.HEARTS: "♥",
    Suit.SPADES: "♠",
}


class Rank(IntEnum):
    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13
    ACE = 14

    @property
    def label(self) -> str:
        return _RANK_LABELS.get(self, str(int(self)))


_RANK_LABELS = {
    Rank.JACK: "J",
    Rank.QUEEN: "Q",
    Rank.KING: "K",
    Rank.ACE: "A",
}


class CardType(Enum):
    """Role a card plays in the dungeon, derived from its suit."""

    MONSTER = "monster"
    WEAPON = "weapon"
    POTION = "potion"


@dataclass(frozen=True)
class Card:
    """Immutable playing card. Value and type are derived, never stored."""

    suit: Suit
    rank: Rank

    @property
    def value(self) -> int:
        return int(self.rank)

    @property
    def type(self) -> CardType:
        if self.suit is Suit.DIAMONDS:
            return CardType.WEAPON
        if self.suit is Suit.HEARTS:
            return CardType.POTION
        return CardType.MONSTER

    @property
    def is_monster(self) -> bool:
        return self.type is CardType.MONSTER

    @property
    def is_red_face_or_ace(self) -> bool:
        """Red court cards and red aces are removed from the dungeon."""

        return self.suit.is_red and self.rank >= Rank.JACK

    def to_payload(self) -> dict[str, object]:
        return {
            "suit": self.suit.value,
            "rank": int(self.rank),
            "value": self.value,
            "type": self.type.value,
            "display": str(self),
        }

    def __str__(self) -> str:
        return f"{self.rank.label}{self.suit.symbol}"


class Deck:
    """Ordered pile of cards the dungeon is dealt from.

    The first card of the sequence is the top of the deck. Cards returned to
    the deck after a skipped room are appended to the bottom.
    """

    def __init__(self, cards: Iterable[Card] = ()) -> None:
        self._cards: List[Card] = list(cards)
        self.prev_room_skipped = False

    @classmethod
    def standard(cls) -> "Deck":
        """Build the 44-card dungeon: a full deck minus red faces and red aces."""

        cards = [
            Card(suit=suit, rank=rank)
            for suit in Suit
            for rank in Rank
        ]
        return cls(card for card in cards if not card.is_red_face_or_ace)

    @property
    def cards(self) -> Tuple[Card, ...]:
        return tuple(self._cards)

    @property
    def remaining(self) -> int:
        return len(self._cards)

    def __len__(self) -> int:
        return len(self._cards)

    def shuffle(self, rng: Optional[random.Random] = None) -> None:
        """Shuffle in place using ``rng`` or the global generator."""

        generator = rng or random
        generator.shuffle(self._cards)

    def draw(self, count: int) -> List[Card]:
        """Remove and return the top ``count`` cards.

        Raises :class:`InsufficientCards` without touching the deck when fewer
        than ``count`` cards remain.
        """

        if count > len(self._cards):
            raise InsufficientCards(count, len(self._cards))
        drawn = self._cards[:count]
        del self._cards[:count]
        return drawn

    def add_to_bottom(self, cards: Sequence[Card]) -> None:
        self._cards.extend(cards)
        log.debug("Returned %d card(s) to the bottom of the deck", len(cards))
