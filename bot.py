"""Discord bot entry point hosting the Scoundrel cogs."""

import logging
import os
from pathlib import Path
from typing import Iterator

import discord
from discord.ext import commands
from dotenv import load_dotenv

from scoundrel.config import ConfigError, Settings, configure_logging

COGS_PATH = Path(__file__).parent / "cogs"

log = logging.getLogger("scoundrel.bot")


def iter_extensions(cogs_path: Path = COGS_PATH) -> Iterator[str]:
    """Yield importable extension names for every cog module in ``cogs_path``."""

    for path in sorted(cogs_path.glob("*.py")):
        if not path.name.startswith("__"):
            yield f"cogs.{path.stem}"


class ScoundrelBot(commands.Bot):
    """Slash-command bot that shares one set of :class:`Settings` with its cogs.

    Cogs read ``bot.settings`` in their ``setup`` hook so the configuration is
    loaded exactly once per process.
    """

    def __init__(self, settings: Settings) -> None:
        super().__init__(
            command_prefix=commands.when_mentioned,
            intents=discord.Intents.default(),
            help_command=None,
        )
        self.settings = settings

    async def setup_hook(self) -> None:  # type: ignore[override]
        for extension in iter_extensions():
            await self.load_extension(extension)
            log.info("Loaded extension %s", extension)
        synced = await self.tree.sync()
        log.info("Synced %d application command(s)", len(synced))

    async def on_ready(self) -> None:
        log.info(
            "Dealing Scoundrel games as %s (max health %d)",
            self.user,
            self.settings.max_health,
        )


def main() -> None:
    load_dotenv()
    token = os.getenv("DISCORD_TOKEN")
    if not token:
        raise SystemExit(
            "DISCORD_TOKEN environment variable is required. "
            "Set it in the .env file before starting the bot."
        )
    try:
        settings = Settings.load()
    except ConfigError as exc:
        raise SystemExit(f"Invalid settings: {exc}") from exc
    configure_logging(settings.log_level)

    bot = ScoundrelBot(settings)
    try:
        bot.run(token, log_handler=None)
    except KeyboardInterrupt:
        log.info("Shutting down bot")


if __name__ == "__main__":
    main()
