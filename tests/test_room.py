import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from scoundrel.cards import Card, Rank, Suit
from scoundrel.errors import InvalidIndex
from scoundrel.room import Room

CARDS = [
    Card(Suit.SPADES, Rank.NINE),
    Card(Suit.DIAMONDS, Rank.FIVE),
    Card(Suit.HEARTS, Rank.SIX),
    Card(Suit.CLUBS, Rank.THREE),
]


def test_playing_removes_the_card_and_shifts_the_rest() -> None:
    room = Room(CARDS)
    assert room.is_fresh()

    card, remaining = room.play_card(1)

    assert card == CARDS[1]
    assert remaining == (CARDS[0], CARDS[2], CARDS[3])
    assert room.cards == remaining
    assert room.played == (CARDS[1],)
    assert not room.is_fresh()
    assert room.card_at(1) == CARDS[2]


def test_room_completes_after_three_plays() -> None:
    room = Room(CARDS)
    room.play_card(0)
    room.play_card(0)
    assert not room.completed
    assert room.remaining_card() is None

    room.play_card(0)

    assert room.completed
    assert room.remaining_card() == CARDS[3]
    assert len(room) == 1


def test_all_cards_lists_unplayed_then_played() -> None:
    room = Room(CARDS)
    room.play_card(2)

    assert room.all_cards() == (CARDS[0], CARDS[1], CARDS[3], CARDS[2])


@pytest.mark.parametrize("index", [-1, 4, True, "0", 1.0])
def test_invalid_indices_are_rejected_without_mutation(index: object) -> None:
    room = Room(CARDS)

    with pytest.raises(InvalidIndex):
        room.play_card(index)  # type: ignore[arg-type]

    assert room.cards == tuple(CARDS)
    assert room.is_fresh()


def test_index_bound_shrinks_as_cards_are_played() -> None:
    room = Room(CARDS)
    room.play_card(0)

    with pytest.raises(InvalidIndex) as excinfo:
        room.card_at(3)

    assert excinfo.value.size == 3
