"""
Copyright (c) 2018-present HitchedSyringe

This Source Code Form is subject to the terms of the Mozilla Public
License, v. 2.0. If a copy of the MPL was not distributed with this
file, You can obtain one at https://mozilla.org/MPL/2.0/.
"""


from __future__ import annotations

# fmt: off
__all__ = (
    "Reaction",
    "ReactionPredicate",
    "ChatSurface",
    "DiscordSurface",
)
# fmt: on


import asyncio
import logging
from typing import (
    TYPE_CHECKING,
    Any,
    Callable,
    NamedTuple,
    Optional,
    Protocol,
    Sequence,
    Tuple,
)

import discord

if TYPE_CHECKING:
    from discord.abc import Messageable
    from discord.ext.commands import Bot


_LOG: logging.Logger = logging.getLogger(__name__)


class Reaction(NamedTuple):
    emote: str
    actor_id: int


# (emote, actor ID) -> whether the reaction counts.
ReactionPredicate = Callable[[str, int], bool]


class ChatSurface(Protocol):
    """Where questions get posted and answers get picked up from."""

    async def post_message(self, embed: discord.Embed) -> Any:
        ...

    async def attach_reactions(self, message: Any, emotes: Sequence[str]) -> None:
        ...

    async def await_reaction(
        self, message: Any, predicate: ReactionPredicate, timeout: float
    ) -> Optional[Reaction]:
        ...


class DiscordSurface:
    """A :class:`ChatSurface` backed by a Discord channel.

    Parameters
    ----------
    bot: :class:`commands.Bot`
        The bot instance, used to wait for reaction events.
    channel: :class:`discord.abc.Messageable`
        The channel to post in.
    """

    __slots__: Tuple[str, ...] = ("bot", "channel")

    def __init__(self, bot: Bot, channel: Messageable) -> None:
        self.bot: Bot = bot
        self.channel: Messageable = channel

    async def post_message(self, embed: discord.Embed) -> discord.Message:
        return await self.channel.send(embed=embed)

    async def attach_reactions(self, message: discord.Message, emotes: Sequence[str]) -> None:
        for emote in emotes:
            await message.add_reaction(emote)

    async def await_reaction(
        self, message: discord.Message, predicate: ReactionPredicate, timeout: float
    ) -> Optional[Reaction]:
        def check(reaction: discord.Reaction, user: discord.abc.User) -> bool:
            if reaction.message.id != message.id:
                return False

            return predicate(str(reaction.emoji), user.id)

        try:
            reaction, user = await self.bot.wait_for(
                "reaction_add", check=check, timeout=timeout
            )
        except asyncio.TimeoutError:
            return None

        _LOG.debug("Collected %s from %s on message %s.", reaction.emoji, user.id, message.id)
        return Reaction(str(reaction.emoji), user.id)
