"""Read-only projections of a game session for adapters."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from .cards import Card

__all__ = ["GameSnapshot"]


@dataclass(frozen=True)
class GameSnapshot:
    """Everything a client needs to render a session at one point in time.

    Snapshots hold immutable cards and tuples only, so they can be handed to
    another thread or serialised after the registry lock has been released.
    """

    game_id: str
    state: str
    health: int
    max_health: int
    equipped_weapon: Optional[Card]
    defeated_monsters: Tuple[Card, ...]
    used_potion: bool
    room_cards: Tuple[Card, ...]
    room_completed: bool
    deck_remaining: int
    previous_room_skipped: bool
    last_played: Optional[Card] = None

    @property
    def is_over(self) -> bool:
        return self.state in ("Won", "Lost")

    def to_payload(self) -> Dict[str, object]:
        cards = []
        for index, card in enumerate(self.room_cards):
            entry: Dict[str, object] = {"index": index}
            entry.update(card.to_payload())
            cards.append(entry)
        weapon = self.equipped_weapon.to_payload() if self.equipped_weapon else None
        payload: Dict[str, object] = {
            "game_id": self.game_id,
            "state": self.state,
            "player": {
                "health": self.health,
                "max_health": self.max_health,
                "equipped_weapon": weapon,
                "defeated_monsters": [card.to_payload() for card in self.defeated_monsters],
                "used_potion": self.used_potion,
            },
            "room": {
                "cards": cards,
                "completed": self.room_completed,
            },
            "deck": {
                "remaining_cards": self.deck_remaining,
                "previous_room_skipped": self.previous_room_skipped,
            },
        }
        if self.last_played is not None:
            payload["last_played"] = self.last_played.to_payload()
        return payload
