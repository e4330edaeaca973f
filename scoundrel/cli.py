"""Terminal client for playing a game of Scoundrel."""

from __future__ import annotations

import argparse
import logging
import random
from typing import Callable, List, Optional, Sequence

from .cards import Card, CardType
from .config import ConfigError, Settings, configure_logging
from .engine import GameSession, GameState
from .errors import ScoundrelError

__all__ = ["TerminalClient", "build_parser", "describe_card", "main", "render_state"]

log = logging.getLogger(__name__)

RULE = "-" * 50

_TYPE_LABELS = {
    CardType.MONSTER: "Monster, Damage",
    CardType.WEAPON: "Weapon, Value",
    CardType.POTION: "Potion, Heal",
}


def describe_card(card: Card) -> str:
    return f"{card} ({_TYPE_LABELS[card.type]}: {card.value})"


def render_state(session: GameSession) -> List[str]:
    player = session.player
    lines = [RULE, f"Health: {player.health}/{player.max_health}"]
    weapon = player.equipped_weapon
    if weapon is None:
        lines.append("No weapon equipped")
    else:
        lines.append(f"Equipped Weapon: {weapon} (Value: {weapon.value})")
        if player.defeated_monsters:
            slain = ", ".join(str(card) for card in player.defeated_monsters)
            lines.append(f"Defeated monsters: {slain}")
    if player.used_potion_this_room:
        lines.append("Potion already used in this room (only one effective potion per room)")

    room = session.current_room
    if room is not None and not session.is_over:
        lines.append("")
        lines.append("Current Room:")
        for index, card in enumerate(room.cards):
            lines.append(f"[{index}] {describe_card(card)}")

    lines.append("")
    lines.append(f"Cards remaining in dungeon: {session.deck.remaining}")
    if session.deck.prev_room_skipped:
        lines.append("You skipped the previous room, you cannot skip this one.")
    lines.append(RULE)
    return lines


class TerminalClient:
    """Prompt loop driving a :class:`GameSession` through ``input_fn``/``output``."""

    def __init__(
        self,
        session: GameSession,
        *,
        input_fn: Callable[[str], str] = input,
        output: Callable[[str], None] = print,
    ) -> None:
        self.session = session
        self._input = input_fn
        self._output = output

    def run(self) -> GameState:
        """Play until the game ends or the player quits. Returns the final state."""

        while not self.session.is_over:
            self._emit(render_state(self.session))
            try:
                action = self._prompt_action()
                if action == "q":
                    self._output("Quitting game...")
                    return self.session.state
                self.execute(action)
            except EOFError:
                self._output("Quitting game...")
                return self.session.state

        self._emit(render_state(self.session))
        if self.session.state is GameState.WON:
            self._output("Congratulations! You won!")
        else:
            self._output("Game over! You lost.")
        return self.session.state

    def execute(self, action: str) -> None:
        if action == "s":
            self._skip()
            return
        try:
            index = int(action)
        except ValueError:
            self._output("Invalid action! Please try again.")
            return
        room = self.session.current_room
        if room is None or not 0 <= index < len(room):
            self._output("Invalid card index! Please try again.")
            return
        self._play(index)

    # ------------------------------------------------------------------
    def _prompt_action(self) -> str:
        lines = ["", "Actions:"]
        room = self.session.current_room
        if room is not None:
            lines.extend(f"[{index}] Play card {card}" for index, card in enumerate(room.cards))
        if self.session.can_skip():
            lines.append("[s] Skip this room")
        lines.append("[q] Quit game")
        self._emit(lines)
        return self._input("\nEnter your choice: ").strip().lower()

    def _skip(self) -> None:
        try:
            self.session.skip_room()
        except ScoundrelError as exc:
            self._output(str(exc))
            return
        self._output("Room skipped! New room dealt.")

    def _play(self, index: int) -> None:
        preview = self.session.preview_damage(index)
        weapon = self.session.player.equipped_weapon
        try:
            if preview is None or weapon is None:
                outcome = self.session.play_card(index)
            elif preview.weapon_allowed:
                self._emit(
                    [
                        "",
                        f"You're facing a monster with value {preview.monster.value}. "
                        f"You have a weapon with value {weapon.value}.",
                        f"Using your weapon would result in {preview.weapon_damage} damage.",
                        f"Fighting barehanded would result in {preview.barehanded_damage} damage.",
                    ]
                )
                answer = self._input("Do you want to use your weapon? (y/n): ").strip().lower()
                if answer in ("y", "yes"):
                    outcome = self.session.play_card(index)
                else:
                    outcome = self.session.play_card_without_weapon(index)
            else:
                self._emit(
                    [
                        "",
                        f"Your weapon ({weapon}) can't be used against this monster because "
                        "it's stronger than the last monster you defeated.",
                        f"You'll take full damage of {preview.barehanded_damage} from this monster.",
                    ]
                )
                outcome = self.session.play_card_without_weapon(index)
        except ScoundrelError as exc:
            self._output(f"Error playing card: {exc}")
            return
        self._output(outcome.describe())

    def _emit(self, lines: Sequence[str]) -> None:
        for line in lines:
            self._output(line)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Play Scoundrel in the terminal.")
    parser.add_argument("--seed", type=int, default=None, help="Seed for a reproducible shuffle.")
    parser.add_argument("--max-health", type=int, default=None, help="Starting (and maximum) health.")
    parser.add_argument("--log-level", default=None, help="Logging level (defaults to the configured level).")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.max_health is not None and args.max_health <= 0:
        parser.error("--max-health must be positive")
    try:
        settings = Settings.load()
    except ConfigError as exc:
        parser.error(str(exc))
    configure_logging(args.log_level or settings.log_level)
    max_health = args.max_health if args.max_health is not None else settings.max_health
    rng = random.Random(args.seed) if args.seed is not None else None

    print("Scoundrel Card Game CLI")
    print("=======================")
    print("Starting new game...")
    session = GameSession(max_health=max_health, rng=rng)
    log.debug("Started terminal session %s", session.id)
    TerminalClient(session).run()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
