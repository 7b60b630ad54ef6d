"""
Copyright (c) 2018-present HitchedSyringe

This Source Code Form is subject to the terms of the Mozilla Public
License, v. 2.0. If a copy of the MPL was not distributed with this
file, You can obtain one at https://mozilla.org/MPL/2.0/.
"""


from __future__ import annotations

# fmt: off
__all__ = (
    "Trivia",
)
# fmt: on


import logging
import random
from typing import TYPE_CHECKING, Any, Mapping, Optional

import discord
from discord.ext import commands

from .categories import CategoryResolver
from .errors import ProviderUnavailable, TriviaError
from .fetcher import DEFAULT_MAX_RETRIES, QuestionFetcher
from .provider import DEFAULT_API_BASE_URL, OpenTriviaClient
from .session import DEFAULT_ANSWER_TIME_LIMIT, AnswerSession
from .surface import DiscordSurface
from .tokens import TokenManager, TokenSlot

if TYPE_CHECKING:
    from quizzical.bot import Quizzical


_LOG: logging.Logger = logging.getLogger(__name__)


def _notice_embed(
    title: str, description: Optional[str] = None, *, confirmation: bool = False
) -> discord.Embed:
    colour = 0x00CC00 if confirmation else 0x0066CC
    return discord.Embed(title=title, description=description, colour=colour)


class Trivia(commands.Cog):
    """Trivia questions from the Open Trivia Database."""

    ICON: str = "\N{WHITE QUESTION MARK ORNAMENT}"

    def __init__(
        self,
        bot: Quizzical,
        *,
        config: Optional[Mapping[str, Any]] = None,
        token_slot: Optional[TokenSlot] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        config = config or {}

        self.bot: Quizzical = bot
        self.answer_time_limit: float = config.get(
            "answer_time_limit", DEFAULT_ANSWER_TIME_LIMIT
        )
        self.rng: random.Random = rng or random.Random()

        self.client: OpenTriviaClient = OpenTriviaClient(
            bot.http_requester, config.get("api_base_url", DEFAULT_API_BASE_URL)
        )
        self.tokens: TokenManager = TokenManager(self.client, token_slot)
        self.fetcher: QuestionFetcher = QuestionFetcher(
            self.client,
            self.tokens,
            max_retries=config.get("max_token_retries", DEFAULT_MAX_RETRIES),
        )
        self.resolver: CategoryResolver = CategoryResolver((), rng=self.rng)

    async def cog_load(self) -> None:
        # Categories never change while we're running,
        # so we only bother fetching them once.
        try:
            categories = await self.client.fetch_categories()
        except ProviderUnavailable as exc:
            _LOG.warning("Could not fetch trivia categories: %s", exc)
            return

        self.resolver = CategoryResolver(categories, rng=self.rng)
        _LOG.info("Loaded %s trivia categories.", len(categories))

    async def cog_command_error(self, ctx: commands.Context, error: Exception) -> None:
        if isinstance(error, commands.CommandInvokeError):
            error = error.original

        if not isinstance(error, TriviaError):
            return

        _LOG.info("Trivia command in channel %s failed: %s", ctx.channel.id, error)

        embed = discord.Embed(
            title="Error", description="An error was encountered", colour=0xCC0000
        )
        embed.add_field(name="Error message:", value=f"`{error}`")

        try:
            await ctx.send(embed=embed)
        except discord.HTTPException:
            pass

    @commands.group(invoke_without_command=True, usage="[category...]")
    @commands.bot_has_permissions(add_reactions=True, embed_links=True)
    async def trivia(self, ctx: commands.Context, *category: str) -> None:
        """Asks you a trivia question.

        You can optionally narrow the question down to a
        category by giving part of its name, e.g. `anime`
        or `video games`. Answer by reacting with the emote
        next to your choice before time runs out.

        (Bot Needs: Add Reactions and Embed Links)
        """
        category_id = self.resolver.resolve(category)

        async def notify(
            title: str, description: Optional[str] = None, *, confirmation: bool = False
        ) -> None:
            await ctx.send(embed=_notice_embed(title, description, confirmation=confirmation))

        async with ctx.typing():
            question = await self.fetcher.fetch(category_id, notify=notify)

        session = AnswerSession(
            DiscordSurface(ctx.bot, ctx.channel),
            timeout=self.answer_time_limit,
            rng=self.rng,
        )

        await session.run(question, ctx.author)

    @trivia.command(name="reset")
    @commands.is_owner()
    async def trivia_reset(self, ctx: commands.Context) -> None:
        """Resets the trivia session token, or requests one if
        there is no token yet.

        This makes previously asked questions available again.
        """
        if self.tokens.current_token is None:
            notice = _notice_embed("No stored token found", "Requesting new token...")
            await ctx.send(embed=notice)
            await self.tokens.issue()
            await ctx.send(embed=_notice_embed("Token received", confirmation=True))
        else:
            await self.tokens.reset()
            await ctx.send(embed=_notice_embed("Token reset", confirmation=True))
