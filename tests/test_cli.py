import sys
from pathlib import Path
from typing import Iterable, List

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from scoundrel.cards import Card, Deck, Rank, Suit
from scoundrel.cli import TerminalClient, build_parser, main, render_state
from scoundrel.engine import GameSession, GameState


def scripted(answers: Iterable[str]):
    pending = iter(answers)

    def _input(_prompt: str) -> str:
        try:
            return next(pending)
        except StopIteration:
            raise EOFError from None

    return _input


def make_client(session: GameSession, answers: Iterable[str]):
    output: List[str] = []
    client = TerminalClient(session, input_fn=scripted(answers), output=output.append)
    return client, output


def potion_session() -> GameSession:
    deck = Deck([Card(Suit.HEARTS, rank) for rank in (Rank.TWO, Rank.THREE, Rank.FOUR, Rank.FIVE)])
    return GameSession(deck=deck)


def test_playing_through_a_short_dungeon_wins() -> None:
    client, output = make_client(potion_session(), ["0", "0", "0"])

    assert client.run() is GameState.WON
    assert "Congratulations! You won!" in output
    assert any("had no effect" in line for line in output)


def test_quit_and_end_of_input_stop_the_loop() -> None:
    client, output = make_client(GameSession(), ["q"])
    assert client.run() is GameState.IN_PROGRESS
    assert output[-1] == "Quitting game..."

    client, output = make_client(GameSession(), [])
    assert client.run() is GameState.IN_PROGRESS
    assert output[-1] == "Quitting game..."


def test_invalid_input_is_reported() -> None:
    client, output = make_client(GameSession(), ["x", "9", "q"])

    client.run()

    assert "Invalid action! Please try again." in output
    assert "Invalid card index! Please try again." in output


def test_skip_twice_reports_the_rule() -> None:
    client, output = make_client(GameSession(), ["s", "s", "q"])

    client.run()

    assert "Room skipped! New room dealt." in output
    assert "Cannot skip two rooms in a row." in output


def test_weapon_prompt_allows_fighting_barehanded() -> None:
    deck = Deck(
        [
            Card(Suit.DIAMONDS, Rank.EIGHT),
            Card(Suit.SPADES, Rank.SIX),
            Card(Suit.CLUBS, Rank.TWO),
            Card(Suit.HEARTS, Rank.TWO),
            Card(Suit.CLUBS, Rank.THREE),
        ]
    )
    session = GameSession(deck=deck)
    client, output = make_client(session, ["0", "0", "n", "q"])

    client.run()

    assert "Equipped a weapon with value 8." in output
    assert "Using your weapon would result in 0 damage." in output
    assert "Fought 6♠ barehanded and took 6 damage." in output
    assert session.player.health == 14


def test_render_state_lists_the_room() -> None:
    session = potion_session()

    lines = render_state(session)

    assert "Health: 20/20" in lines
    assert "No weapon equipped" in lines
    assert "[0] 2♥ (Potion, Heal: 2)" in lines
    assert "Cards remaining in dungeon: 0" in lines


def test_parser_and_max_health_validation() -> None:
    args = build_parser().parse_args(["--seed", "4", "--max-health", "12"])
    assert args.seed == 4
    assert args.max_health == 12

    with pytest.raises(SystemExit):
        main(["--max-health", "0"])


def test_bad_settings_are_reported_as_usage_errors(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    settings_file = tmp_path / "settings.yaml"
    settings_file.write_text("scoundrel:\n  max_health: lots\n", encoding="utf-8")
    monkeypatch.setenv("SCOUNDREL_CONFIG", str(settings_file))

    with pytest.raises(SystemExit) as excinfo:
        main([])

    assert excinfo.value.code == 2
    assert "max_health must be an integer" in capsys.readouterr().err
