"""
Copyright (c) 2018-present HitchedSyringe

This Source Code Form is subject to the terms of the Mozilla Public
License, v. 2.0. If a copy of the MPL was not distributed with this
file, You can obtain one at https://mozilla.org/MPL/2.0/.
"""


import asyncio
import random
from contextlib import asynccontextmanager
from types import SimpleNamespace
from typing import Any, Callable, List, Optional

import pytest
from conftest import QUESTION_PAYLOAD, FakeRequester, FakeUser
from discord.ext import commands

from quizzical.ext.trivia import InvalidCategory, TokenSlot, Trivia


class FakeMessage:
    def __init__(self, id: int, embed: Any) -> None:
        self.id: int = id
        self.embed: Any = embed
        self.reactions: List[str] = []

    async def add_reaction(self, emote: str) -> None:
        self.reactions.append(emote)


class FakeChannel:
    id: int = 555

    def __init__(self) -> None:
        self.messages: List[FakeMessage] = []

    async def send(self, content: Optional[str] = None, *, embed: Any = None) -> FakeMessage:
        message = FakeMessage(len(self.messages) + 1, embed)
        self.messages.append(message)
        return message


class FakeBot:
    """Answers every question with the first attached reaction,
    or never answers at all.
    """

    def __init__(self, channel: FakeChannel, answerer: Optional[FakeUser]) -> None:
        self.http_requester: FakeRequester = FakeRequester()
        self.channel: FakeChannel = channel
        self.answerer: Optional[FakeUser] = answerer

    async def wait_for(self, event: str, *, check: Callable[..., bool], timeout: float) -> Any:
        assert event == "reaction_add"

        await asyncio.sleep(0.01)

        if self.answerer is not None:
            message = self.channel.messages[-1]
            reaction = SimpleNamespace(emoji=message.reactions[0], message=message)

            if check(reaction, self.answerer):
                return reaction, self.answerer

        await asyncio.sleep(timeout)
        raise asyncio.TimeoutError


class FakeContext:
    def __init__(self, bot: FakeBot, author: FakeUser) -> None:
        self.bot: FakeBot = bot
        self.channel: FakeChannel = bot.channel
        self.author: FakeUser = author

    async def send(self, content: Optional[str] = None, *, embed: Any = None) -> FakeMessage:
        return await self.channel.send(content, embed=embed)

    @asynccontextmanager
    async def typing(self):
        yield


def make_cog(answerer: Optional[FakeUser] = None, **config: Any) -> Trivia:
    bot = FakeBot(FakeChannel(), answerer)
    config.setdefault("answer_time_limit", 0.05)

    return Trivia(bot, config=config, token_slot=TokenSlot("abc123"), rng=random.Random(0))  # type: ignore


@pytest.mark.asyncio
async def test_cog_load_fetches_categories() -> None:
    cog = make_cog()
    cog.bot.http_requester.queue(
        "api_category.php", {"trivia_categories": [{"id": 31, "name": "Anime & Manga"}]}
    )

    await cog.cog_load()

    assert len(cog.resolver) == 1
    assert cog.resolver.resolve(["anime"]) == 31


@pytest.mark.asyncio
async def test_cog_load_survives_provider_failure() -> None:
    cog = make_cog()
    cog.bot.http_requester.queue("api_category.php", "<html>Oops</html>")

    await cog.cog_load()

    assert len(cog.resolver) == 0


def test_config_is_applied() -> None:
    cog = make_cog(api_base_url="https://example.test", max_token_retries=5)

    assert cog.client.base_url == "https://example.test"
    assert cog.fetcher.max_retries == 5
    assert cog.answer_time_limit == 0.05


@pytest.mark.asyncio
async def test_trivia_command_times_out() -> None:
    user = FakeUser(1)
    cog = make_cog()
    ctx = FakeContext(cog.bot, user)

    cog.bot.http_requester.queue("api.php", {"response_code": 0, "results": [QUESTION_PAYLOAD]})

    await asyncio.wait_for(cog.trivia.callback(cog, ctx), 1)

    question, result = ctx.channel.messages

    assert question.embed.title == "Sleepyhead, here's a question!"
    assert len(question.reactions) == 4
    assert result.embed.title == "Time's up!"
    assert "Naruto Uzumaki" in result.embed.description


@pytest.mark.asyncio
async def test_trivia_command_collects_answer() -> None:
    user = FakeUser(1)
    cog = make_cog(answerer=user, answer_time_limit=5)
    ctx = FakeContext(cog.bot, user)

    cog.bot.http_requester.queue("api.php", {"response_code": 0, "results": [QUESTION_PAYLOAD]})

    await asyncio.wait_for(cog.trivia.callback(cog, ctx), 1)

    assert ctx.channel.messages[-1].embed.title in ("Correct answer!", "Incorrect")


@pytest.mark.asyncio
async def test_trivia_command_ignores_other_users() -> None:
    user = FakeUser(1)
    cog = make_cog(answerer=FakeUser(2))
    ctx = FakeContext(cog.bot, user)

    cog.bot.http_requester.queue("api.php", {"response_code": 0, "results": [QUESTION_PAYLOAD]})

    await asyncio.wait_for(cog.trivia.callback(cog, ctx), 1)

    assert ctx.channel.messages[-1].embed.title == "Time's up!"


@pytest.mark.asyncio
async def test_trivia_command_posts_token_notices() -> None:
    user = FakeUser(1)
    cog = make_cog()
    ctx = FakeContext(cog.bot, user)
    requester = cog.bot.http_requester

    requester.queue(
        "api.php",
        {"response_code": 4, "results": []},
        {"response_code": 0, "results": [QUESTION_PAYLOAD]},
    )
    requester.queue("api_token.php:reset", {"response_code": 0})

    await asyncio.wait_for(cog.trivia.callback(cog, ctx), 1)

    notice = ctx.channel.messages[0].embed

    assert (notice.title, notice.description) == ("Empty token", "Requesting reset...")
    assert notice.colour.value == 0x0066CC

    confirmation = ctx.channel.messages[1].embed

    assert confirmation.title == "Token reset"
    assert confirmation.colour.value == 0x00CC00
    assert requester.count("api_token.php:reset") == 1


@pytest.mark.asyncio
async def test_trivia_errors_are_reported() -> None:
    cog = make_cog()
    ctx = FakeContext(cog.bot, FakeUser(1))

    error = commands.CommandInvokeError(InvalidCategory(999))
    await cog.cog_command_error(ctx, error)  # type: ignore

    embed = ctx.channel.messages[0].embed

    assert embed.title == "Error"
    assert embed.fields[0].value == "`Invalid argument. Category ID: 999`"


@pytest.mark.asyncio
async def test_other_errors_are_left_alone() -> None:
    cog = make_cog()
    ctx = FakeContext(cog.bot, FakeUser(1))

    await cog.cog_command_error(ctx, commands.CommandInvokeError(RuntimeError()))  # type: ignore

    assert ctx.channel.messages == []


@pytest.mark.asyncio
async def test_reset_command_resets_held_token() -> None:
    cog = make_cog()
    ctx = FakeContext(cog.bot, FakeUser(1))
    cog.bot.http_requester.queue("api_token.php:reset", {"response_code": 0})

    await cog.trivia_reset.callback(cog, ctx)

    assert [m.embed.title for m in ctx.channel.messages] == ["Token reset"]
    assert ctx.channel.messages[0].embed.colour.value == 0x00CC00


@pytest.mark.asyncio
async def test_reset_command_issues_missing_token() -> None:
    cog = make_cog()
    cog.tokens.slot.value = None
    ctx = FakeContext(cog.bot, FakeUser(1))
    cog.bot.http_requester.queue("api_token.php:request", {"response_code": 0, "token": "new"})

    await cog.trivia_reset.callback(cog, ctx)

    assert cog.tokens.current_token == "new"
    assert [m.embed.title for m in ctx.channel.messages] == [
        "No stored token found",
        "Token received",
    ]
    assert ctx.channel.messages[-1].embed.colour.value == 0x00CC00
