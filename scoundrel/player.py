"""Player state and the weapon rules."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .cards import Card

__all__ = ["DEFAULT_MAX_HEALTH", "Player"]

DEFAULT_MAX_HEALTH = 20


@dataclass
class Player:
    """Health, the equipped weapon and what that weapon has slain.

    ``defeated_monsters`` only ever holds monsters beaten with the weapon that
    is currently equipped; equipping a new weapon starts a fresh history.
    """

    max_health: int = DEFAULT_MAX_HEALTH
    health: int = field(init=False)
    equipped_weapon: Optional[Card] = field(default=None, init=False)
    _defeated: List[Card] = field(default_factory=list, init=False, repr=False)
    used_potion_this_room: bool = field(default=False, init=False)

    def __post_init__(self) -> None:
        if self.max_health <= 0:
            raise ValueError("max_health must be positive")
        self.health = self.max_health

    @property
    def defeated_monsters(self) -> Tuple[Card, ...]:
        return tuple(self._defeated)

    @property
    def has_weapon(self) -> bool:
        return self.equipped_weapon is not None

    @property
    def is_dead(self) -> bool:
        return self.health <= 0

    def equip_weapon(self, card: Card) -> None:
        self.equipped_weapon = card
        self._defeated = []

    def can_use_weapon_against(self, monster: Card) -> bool:
        """Check the weapon against ``monster``.

        Once a weapon has slain something it can only be used on monsters no
        stronger than its most recent kill. Weapon presence is the caller's
        concern.
        """

        if not self._defeated:
            return True
        return monster.value <= self._defeated[-1].value

    def weapon_damage(self, monster: Card) -> Optional[int]:
        """Damage taken fighting ``monster`` with the weapon, if it can be used."""

        weapon = self.equipped_weapon
        if weapon is None or not self.can_use_weapon_against(monster):
            return None
        return max(0, monster.value - weapon.value)

    def record_defeat(self, monster: Card) -> None:
        self._defeated.append(monster)

    def apply_damage(self, amount: int) -> None:
        self.health -= amount

    def heal(self, amount: int) -> None:
        self.health = min(self.max_health, self.health + amount)
