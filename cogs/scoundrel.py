"""Slash commands for playing Scoundrel in a Discord channel."""

from __future__ import annotations

import logging
from typing import Callable, Optional, Tuple

import discord
from discord import app_commands
from discord.ext import commands

from scoundrel.cards import Card, CardType
from scoundrel.channels import ChannelBindings, ChannelKey
from scoundrel.config import Settings
from scoundrel.engine import GameSession, PlayOutcome
from scoundrel.errors import ScoundrelError, SessionNotFound
from scoundrel.room import ROOM_SIZE
from scoundrel.sessions import SessionRegistry
from scoundrel.snapshot import GameSnapshot


log = logging.getLogger(__name__)


CARD_TYPE_LABELS = {
    CardType.MONSTER: "Monster",
    CardType.WEAPON: "Weapon",
    CardType.POTION: "Potion",
}

NO_GAME_MESSAGE = "There is no Scoundrel game in this channel. Start one with `/scoundrel start`."


def _format_card(card: Card) -> str:
    return f"**{card}** {CARD_TYPE_LABELS[card.type]} {card.value}"


def build_state_embed(snapshot: GameSnapshot, *, summary: Optional[str] = None) -> discord.Embed:
    """Render ``snapshot`` as an embed for the channel."""

    if snapshot.state == "Won":
        colour = discord.Colour.green()
        title = "Scoundrel: you escaped the dungeon!"
    elif snapshot.state == "Lost":
        colour = discord.Colour.red()
        title = "Scoundrel: you were slain"
    else:
        colour = discord.Colour.blurple()
        title = "Scoundrel"

    embed = discord.Embed(title=title, description=summary, colour=colour)
    embed.add_field(name="Health", value=f"{snapshot.health}/{snapshot.max_health}")

    weapon = snapshot.equipped_weapon
    if weapon is None:
        weapon_text = "None"
    else:
        weapon_text = f"{weapon} (value {weapon.value})"
        if snapshot.defeated_monsters:
            weapon_text += f"\nLast kill: {snapshot.defeated_monsters[-1]}"
    embed.add_field(name="Weapon", value=weapon_text)
    embed.add_field(name="Dungeon", value=f"{snapshot.deck_remaining} cards left")

    if not snapshot.is_over:
        lines = [
            f"`{position}` {_format_card(card)}"
            for position, card in enumerate(snapshot.room_cards, start=1)
        ]
        embed.add_field(name="Room", value="\n".join(lines) or "Empty", inline=False)
        notes = []
        if snapshot.used_potion:
            notes.append("A potion has already been used in this room.")
        if snapshot.previous_room_skipped:
            notes.append("The previous room was skipped; this one must be faced.")
        if notes:
            embed.add_field(name="Notes", value="\n".join(notes), inline=False)

    embed.set_footer(text=f"Game {snapshot.game_id}")
    return embed


class ScoundrelCog(commands.Cog):
    """Single-player Scoundrel games, one per channel."""

    scoundrel_group = app_commands.Group(name="scoundrel", description="Play the Scoundrel card game")

    def __init__(
        self,
        bot: commands.Bot,
        registry: Optional[SessionRegistry] = None,
        *,
        settings: Optional[Settings] = None,
    ) -> None:
        self.bot = bot
        self.settings = settings if settings is not None else Settings()
        if registry is None:
            registry = SessionRegistry(max_health=self.settings.max_health)
        self.registry = registry
        self.channels = ChannelBindings()

    def cog_unload(self) -> None:  # noqa: D401 - discord.py hook
        try:
            self.bot.tree.remove_command(
                self.scoundrel_group.name,
                type=discord.AppCommandType.chat_input,
            )
        except (app_commands.CommandTreeException, KeyError):
            pass

    @commands.Cog.listener()
    async def on_guild_remove(self, guild: discord.Guild) -> None:
        for game_id in await self.channels.clear_guild(guild.id):
            self._discard(game_id)

    # ------------------------------------------------------------------
    @scoundrel_group.command(name="start", description="Deal a new game of Scoundrel in this channel.")
    @app_commands.describe(seed="Optional seed for a reproducible shuffle")
    async def start(self, interaction: discord.Interaction, seed: Optional[int] = None) -> None:
        await self.handle_start(interaction, seed)

    @scoundrel_group.command(name="status", description="Show the game in this channel.")
    async def status(self, interaction: discord.Interaction) -> None:
        await self.handle_status(interaction)

    @scoundrel_group.command(name="play", description="Play a card from the current room.")
    @app_commands.describe(
        position="Card position in the room (1-4)",
        barehanded="Fight a monster without your weapon",
    )
    async def play(
        self,
        interaction: discord.Interaction,
        position: app_commands.Range[int, 1, ROOM_SIZE],
        barehanded: bool = False,
    ) -> None:
        await self.handle_play(interaction, position, barehanded=barehanded)

    @scoundrel_group.command(name="skip", description="Run from the current room.")
    async def skip(self, interaction: discord.Interaction) -> None:
        await self.handle_skip(interaction)

    @scoundrel_group.command(name="quit", description="Abandon the game in this channel.")
    async def quit(self, interaction: discord.Interaction) -> None:
        await self.handle_quit(interaction)

    # ------------------------------------------------------------------
    async def handle_start(self, interaction: discord.Interaction, seed: Optional[int] = None) -> None:
        key = self._channel_key(interaction)
        if await self.channels.get(key) is not None:
            await self._send_ephemeral_message(
                interaction,
                "A game is already running in this channel. Use `/scoundrel quit` to abandon it.",
            )
            return

        game_id = self.registry.create(seed=seed)
        if not await self.channels.bind(key, game_id):
            self._discard(game_id)
            await self._send_ephemeral_message(
                interaction, "A game was started in this channel at the same time."
            )
            return

        log.info("Started game %s in channel %s", game_id, key)
        snapshot = self.registry.state(game_id)
        await interaction.response.send_message(
            embed=build_state_embed(snapshot, summary="A new dungeon awaits.")
        )

    async def handle_status(self, interaction: discord.Interaction) -> None:
        key = self._channel_key(interaction)
        game_id = await self.channels.get(key)
        if game_id is None:
            await self._send_ephemeral_message(interaction, NO_GAME_MESSAGE)
            return
        try:
            snapshot = self.registry.state(game_id)
        except SessionNotFound:
            await self.channels.pop(key)
            await self._send_ephemeral_message(interaction, NO_GAME_MESSAGE)
            return
        await interaction.response.send_message(embed=build_state_embed(snapshot))

    async def handle_play(
        self,
        interaction: discord.Interaction,
        position: int,
        *,
        barehanded: bool = False,
    ) -> None:
        index = position - 1

        def move(session: GameSession) -> Tuple[str, GameSnapshot]:
            if barehanded:
                outcome: PlayOutcome = session.play_card_without_weapon(index)
            else:
                outcome = session.play_card(index)
            return outcome.describe(), session.snapshot()

        await self._apply_move(interaction, move)

    async def handle_skip(self, interaction: discord.Interaction) -> None:
        def move(session: GameSession) -> Tuple[str, GameSnapshot]:
            session.skip_room()
            return "You slip past the room. A new one is dealt.", session.snapshot()

        await self._apply_move(interaction, move)

    async def handle_quit(self, interaction: discord.Interaction) -> None:
        game_id = await self.channels.pop(self._channel_key(interaction))
        if game_id is None:
            await self._send_ephemeral_message(interaction, NO_GAME_MESSAGE)
            return
        self._discard(game_id)
        await interaction.response.send_message("The Scoundrel game in this channel was abandoned.")

    # ------------------------------------------------------------------
    async def _apply_move(
        self,
        interaction: discord.Interaction,
        move: Callable[[GameSession], Tuple[str, GameSnapshot]],
    ) -> None:
        key = self._channel_key(interaction)
        game_id = await self.channels.get(key)
        if game_id is None:
            await self._send_ephemeral_message(interaction, NO_GAME_MESSAGE)
            return
        try:
            summary, snapshot = self.registry.update(game_id, move)
        except SessionNotFound:
            await self.channels.pop(key)
            await self._send_ephemeral_message(interaction, NO_GAME_MESSAGE)
            return
        except ScoundrelError as exc:
            await self._send_ephemeral_message(interaction, str(exc))
            return

        if snapshot.is_over:
            await self.channels.pop(key)
            self._discard(game_id)
            log.info("Game %s in channel %s finished: %s", game_id, key, snapshot.state)
        await interaction.response.send_message(embed=build_state_embed(snapshot, summary=summary))

    def _discard(self, game_id: str) -> None:
        try:
            self.registry.delete(game_id)
        except SessionNotFound:
            log.debug("Game %s was already removed", game_id)

    @staticmethod
    def _channel_key(interaction: discord.Interaction) -> ChannelKey:
        return ChannelBindings.make_key(interaction.guild_id, interaction.channel_id)

    async def _send_ephemeral_message(
        self, interaction: discord.Interaction, message: str
    ) -> None:
        if interaction.response.is_done():
            await interaction.followup.send(message, ephemeral=True)
        else:
            await interaction.response.send_message(message, ephemeral=True)


async def setup(bot: commands.Bot) -> None:
    cog = ScoundrelCog(bot, settings=getattr(bot, "settings", None))
    await bot.add_cog(cog)
    existing = bot.tree.get_command(
        cog.scoundrel_group.name,
        type=discord.AppCommandType.chat_input,
    )
    if existing is not None:
        bot.tree.remove_command(
            cog.scoundrel_group.name,
            type=discord.AppCommandType.chat_input,
        )
    bot.tree.add_command(cog.scoundrel_group)
