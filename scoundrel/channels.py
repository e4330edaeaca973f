"""Bind Discord channels to Scoundrel game sessions."""

from __future__ import annotations

import asyncio
from typing import Dict, Optional, Tuple

__all__ = ["ChannelBindings", "ChannelKey"]

ChannelKey = Tuple[Optional[int], int]


class ChannelBindings:
    """Map guild/channel pairs to registry game identifiers.

    Access is serialised with an :class:`asyncio.Lock` so two interactions in
    the same channel cannot both start a game.
    """

    __slots__ = ("_games", "_lock")

    def __init__(self) -> None:
        self._games: Dict[ChannelKey, str] = {}
        self._lock = asyncio.Lock()

    @staticmethod
    def make_key(guild_id: Optional[int], channel_id: Optional[int]) -> ChannelKey:
        if channel_id is None:
            raise ValueError("channel_id is required to build a channel key")
        return (guild_id, channel_id)

    async def get(self, key: ChannelKey) -> Optional[str]:
        async with self._lock:
            return self._games.get(key)

    async def bind(self, key: ChannelKey, game_id: str) -> bool:
        """Bind ``game_id`` to ``key`` unless the channel already has a game.

        Returns ``True`` when the binding was stored.
        """

        async with self._lock:
            if key in self._games:
                return False
            self._games[key] = game_id
            return True

    async def pop(self, key: ChannelKey) -> Optional[str]:
        async with self._lock:
            return self._games.pop(key, None)

    async def clear_guild(self, guild_id: int) -> Tuple[str, ...]:
        """Drop every binding in ``guild_id`` and return the unbound game ids."""

        async with self._lock:
            to_remove = [key for key in self._games if key[0] == guild_id]
            return tuple(self._games.pop(key) for key in to_remove)

    def __len__(self) -> int:
        return len(self._games)
