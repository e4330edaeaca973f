"""The table of up to four cards the player works through."""

from __future__ import annotations

from typing import Iterable, List, Optional, Tuple

from .cards import Card
from .errors import InvalidIndex

__all__ = ["ROOM_SIZE", "CARDS_TO_COMPLETE", "Room"]

ROOM_SIZE = 4
CARDS_TO_COMPLETE = 3


class Room:
    """A dealt room tracking which of its cards have been played."""

    def __init__(self, cards: Iterable[Card]) -> None:
        self._cards: Tuple[Card, ...] = tuple(cards)
        self._played: List[Card] = []

    @property
    def cards(self) -> Tuple[Card, ...]:
        """Cards still on the table, in dealt order."""

        return self._cards

    @property
    def played(self) -> Tuple[Card, ...]:
        return tuple(self._played)

    @property
    def completed(self) -> bool:
        return len(self._played) >= CARDS_TO_COMPLETE

    def is_fresh(self) -> bool:
        """Return ``True`` while no card has been played in this room."""

        return not self._played

    def card_at(self, index: int) -> Card:
        self._check_index(index)
        return self._cards[index]

    def play_card(self, index: int) -> Tuple[Card, Tuple[Card, ...]]:
        """Remove the card at ``index`` and move it to the played pile.

        Returns the played card together with the cards left on the table.
        """

        self._check_index(index)
        card = self._cards[index]
        self._cards = self._cards[:index] + self._cards[index + 1 :]
        self._played.append(card)
        return card, self._cards

    def remaining_card(self) -> Optional[Card]:
        """Return the leftover card when exactly one remains unplayed."""

        if len(self._cards) == 1:
            return self._cards[0]
        return None

    def all_cards(self) -> Tuple[Card, ...]:
        return self._cards + tuple(self._played)

    def _check_index(self, index: int) -> None:
        if isinstance(index, bool) or not isinstance(index, int):
            raise InvalidIndex(index, len(self._cards))
        if not 0 <= index < len(self._cards):
            raise InvalidIndex(index, len(self._cards))

    def __len__(self) -> int:
        return len(self._cards)

    def __repr__(self) -> str:
        cards = ", ".join(str(card) for card in self._cards)
        return f"Room([{cards}], played={len(self._played)})"
