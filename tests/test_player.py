import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from scoundrel.cards import Card, Rank, Suit
from scoundrel.player import Player


def monster(rank: int) -> Card:
    return Card(Suit.SPADES, Rank(rank))


def test_new_player_starts_at_full_health() -> None:
    player = Player()
    assert player.health == player.max_health == 20
    assert player.equipped_weapon is None
    assert player.defeated_monsters == ()
    assert not player.is_dead


def test_max_health_must_be_positive() -> None:
    with pytest.raises(ValueError):
        Player(max_health=0)


def test_weapon_can_only_face_monsters_no_stronger_than_last_kill() -> None:
    player = Player()
    player.equip_weapon(Card(Suit.DIAMONDS, Rank.TEN))

    assert player.can_use_weapon_against(monster(14))
    player.record_defeat(monster(12))
    player.record_defeat(monster(5))

    assert player.can_use_weapon_against(monster(5))
    assert not player.can_use_weapon_against(monster(9))
    assert player.weapon_damage(monster(9)) is None
    assert player.weapon_damage(monster(4)) == 0


def test_weapon_damage_never_goes_negative() -> None:
    player = Player()
    assert player.weapon_damage(monster(8)) is None

    player.equip_weapon(Card(Suit.DIAMONDS, Rank.SIX))

    assert player.weapon_damage(monster(8)) == 2
    assert player.weapon_damage(monster(3)) == 0


def test_equipping_a_new_weapon_clears_defeated_history() -> None:
    player = Player()
    player.equip_weapon(Card(Suit.DIAMONDS, Rank.FIVE))
    player.record_defeat(monster(3))

    player.equip_weapon(Card(Suit.DIAMONDS, Rank.EIGHT))

    assert player.defeated_monsters == ()
    assert player.can_use_weapon_against(monster(13))


def test_heal_is_capped_and_damage_is_not_clamped() -> None:
    player = Player()
    player.apply_damage(4)
    player.heal(10)
    assert player.health == 20

    player.apply_damage(23)
    assert player.health == -3
    assert player.is_dead
