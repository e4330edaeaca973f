"""Game session state machine enforcing the rules of Scoundrel.

A session owns the dungeon deck, the player and the room currently on the
table. Every public operation either applies all of its effects or raises
before touching any state.
"""

from __future__ import annotations

import logging
import random
import uuid
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from .cards import Card, CardType, Deck
from .errors import (
    CardsAlreadyPlayed,
    GameNotInProgress,
    InsufficientCards,
    PreviousRoomSkipped,
)
from .player import DEFAULT_MAX_HEALTH, Player
from .room import ROOM_SIZE, Room
from .snapshot import GameSnapshot

__all__ = [
    "DamagePreview",
    "GameSession",
    "GameState",
    "PlayOutcome",
]

log = logging.getLogger(__name__)


class GameState(Enum):
    INITIAL = "Initial"
    IN_PROGRESS = "InProgress"
    WON = "Won"
    LOST = "Lost"

    @property
    def is_terminal(self) -> bool:
        return self in (GameState.WON, GameState.LOST)


@dataclass(frozen=True)
class PlayOutcome:
    """What happened when a card was played."""

    card: Card
    damage: int = 0
    healed: int = 0
    weapon_used: bool = False
    potion_wasted: bool = False

    def describe(self) -> str:
        card = self.card
        if card.type is CardType.MONSTER:
            how = "with your weapon" if self.weapon_used else "barehanded"
            return f"Fought {card} {how} and took {self.damage} damage."
        if card.type is CardType.WEAPON:
            return f"Equipped a weapon with value {card.value}."
        if self.potion_wasted:
            return (
                f"Used a potion with value {card.value} but it had no effect "
                "(only one effective potion per room)."
            )
        return f"Used a potion with value {card.value} and restored {self.healed} health."


@dataclass(frozen=True)
class DamagePreview:
    """Damage a monster would deal with and without the equipped weapon.

    ``weapon_damage`` is ``None`` when no weapon is equipped or the weapon may
    not be used against this monster.
    """

    monster: Card
    weapon_damage: Optional[int]
    barehanded_damage: int

    @property
    def weapon_allowed(self) -> bool:
        return self.weapon_damage is not None


class GameSession:
    """A single run through the dungeon."""

    def __init__(
        self,
        *,
        game_id: Optional[str] = None,
        max_health: int = DEFAULT_MAX_HEALTH,
        rng: Optional[random.Random] = None,
        deck: Optional[Deck] = None,
    ) -> None:
        self.id = game_id or uuid.uuid4().hex
        self.player = Player(max_health=max_health)
        if deck is None:
            deck = Deck.standard()
            deck.shuffle(rng)
        self.deck = deck
        self.current_room: Optional[Room] = None
        self.play_history: List[Card] = []
        self.last_card_played: Optional[Card] = None
        self.state = GameState.INITIAL
        self._deal_room(carry=None)

    # ------------------------------------------------------------------
    @property
    def is_over(self) -> bool:
        return self.state.is_terminal

    def play_card(self, index: int) -> PlayOutcome:
        """Play the card at ``index``, fighting monsters with the weapon when allowed."""

        return self._play(index, use_weapon=True)

    def play_card_without_weapon(self, index: int) -> PlayOutcome:
        """Play the card at ``index``, fighting any monster barehanded."""

        return self._play(index, use_weapon=False)

    def skip_room(self) -> None:
        """Send the untouched room to the bottom of the deck and deal a new one."""

        self._require_in_progress()
        if self.deck.prev_room_skipped:
            raise PreviousRoomSkipped()
        room = self._room()
        if not room.is_fresh():
            raise CardsAlreadyPlayed()

        self.deck.add_to_bottom(room.all_cards())
        self.deck.prev_room_skipped = True
        log.debug("Session %s skipped room %r", self.id, room)
        self._deal_room(carry=None)

    def can_skip(self) -> bool:
        return (
            self.state is GameState.IN_PROGRESS
            and not self.deck.prev_room_skipped
            and self.current_room is not None
            and self.current_room.is_fresh()
        )

    def preview_damage(self, index: int) -> Optional[DamagePreview]:
        """Describe the fight against the monster at ``index`` without playing it.

        Returns ``None`` for weapons and potions.
        """

        self._require_in_progress()
        card = self._room().card_at(index)
        if card.type is not CardType.MONSTER:
            return None
        return DamagePreview(
            monster=card,
            weapon_damage=self.player.weapon_damage(card),
            barehanded_damage=card.value,
        )

    def snapshot(self) -> GameSnapshot:
        room = self.current_room
        return GameSnapshot(
            game_id=self.id,
            state=self.state.value,
            health=self.player.health,
            max_health=self.player.max_health,
            equipped_weapon=self.player.equipped_weapon,
            defeated_monsters=self.player.defeated_monsters,
            used_potion=self.player.used_potion_this_room,
            room_cards=room.cards if room is not None else (),
            room_completed=room.completed if room is not None else False,
            deck_remaining=self.deck.remaining,
            previous_room_skipped=self.deck.prev_room_skipped,
            last_played=self.last_card_played,
        )

    # ------------------------------------------------------------------
    def _play(self, index: int, *, use_weapon: bool) -> PlayOutcome:
        self._require_in_progress()
        room = self._room()
        card, _ = room.play_card(index)
        self.last_card_played = card

        if card.type is CardType.MONSTER:
            outcome = self._fight(card, use_weapon=use_weapon)
        elif card.type is CardType.WEAPON:
            self.player.equip_weapon(card)
            outcome = PlayOutcome(card=card)
        else:
            outcome = self._drink(card)

        self.play_history.append(card)
        log.debug(
            "Session %s played %s (damage=%d, healed=%d, health=%d)",
            self.id,
            card,
            outcome.damage,
            outcome.healed,
            self.player.health,
        )

        if room.completed:
            # Finishing a room by play re-enables skipping for the next one.
            self.deck.prev_room_skipped = False
            self._deal_room(carry=room.remaining_card())

        if self.player.is_dead:
            self.state = GameState.LOST
            log.info("Session %s lost with %d health", self.id, self.player.health)
        return outcome

    def _fight(self, monster: Card, *, use_weapon: bool) -> PlayOutcome:
        if use_weapon:
            damage = self.player.weapon_damage(monster)
            if damage is not None:
                self.player.apply_damage(damage)
                self.player.record_defeat(monster)
                return PlayOutcome(card=monster, damage=damage, weapon_used=True)
        self.player.apply_damage(monster.value)
        return PlayOutcome(card=monster, damage=monster.value)

    def _drink(self, potion: Card) -> PlayOutcome:
        if self.player.used_potion_this_room:
            return PlayOutcome(card=potion, potion_wasted=True)
        before = self.player.health
        self.player.heal(potion.value)
        self.player.used_potion_this_room = True
        return PlayOutcome(card=potion, healed=self.player.health - before)

    def _deal_room(self, *, carry: Optional[Card]) -> None:
        if self.state.is_terminal:
            raise GameNotInProgress("The game is already over")

        needed = ROOM_SIZE - 1 if carry is not None else ROOM_SIZE
        try:
            drawn = self.deck.draw(needed)
        except InsufficientCards:
            self.state = GameState.WON
            log.info("Session %s won: the dungeon is empty", self.id)
            return

        cards = [carry, *drawn] if carry is not None else drawn
        self.current_room = Room(cards)
        self.player.used_potion_this_room = False
        self.state = GameState.IN_PROGRESS

    def _require_in_progress(self) -> None:
        if self.state is not GameState.IN_PROGRESS:
            raise GameNotInProgress(f"Game is not in progress (state: {self.state.value})")

    def _room(self) -> Room:
        if self.current_room is None:
            raise GameNotInProgress("No room has been dealt")
        return self.current_room

    def __repr__(self) -> str:
        return (
            f"GameSession(id={self.id!r}, state={self.state.value}, "
            f"health={self.player.health}, deck={self.deck.remaining})"
        )


