"""
Copyright (c) 2018-present HitchedSyringe

This Source Code Form is subject to the terms of the Mozilla Public
License, v. 2.0. If a copy of the MPL was not distributed with this
file, You can obtain one at https://mozilla.org/MPL/2.0/.
"""


import asyncio
from collections import defaultdict
from typing import Any, Callable, Dict, List, Optional, Tuple

import pytest

from quizzical.ext.trivia import OpenTriviaClient, Reaction, TokenManager, TokenSlot


QUESTION_PAYLOAD: Dict[str, Any] = {
    "category": "Entertainment: Japanese Anime &amp; Manga",
    "type": "multiple",
    "difficulty": "easy",
    "question": "Who is the main character of &quot;Naruto&quot;?",
    "correct_answer": "Naruto Uzumaki",
    "incorrect_answers": ["Sasuke Uchiha", "Sakura Haruno", "Kakashi Hatake"],
}


class FakeRequester:
    """Stands in for :class:`quizzical.http.HTTPRequester`.

    Responses are queued per endpoint and handed out in order.
    Queued exceptions are raised instead of returned.
    """

    def __init__(self) -> None:
        self.responses: Dict[str, List[Any]] = defaultdict(list)
        self.calls: List[Tuple[str, Dict[str, Any]]] = []

    def queue(self, endpoint: str, *responses: Any) -> None:
        self.responses[endpoint].extend(responses)

    def count(self, endpoint: str) -> int:
        return sum(1 for e, _ in self.calls if e == endpoint)

    async def request(self, method: str, url: str, /, **params: Any) -> Any:
        endpoint = url.rsplit("/", 1)[-1]

        if endpoint == "api_token.php":
            endpoint = f"{endpoint}:{params['command']}"

        self.calls.append((endpoint, params))

        response = self.responses[endpoint].pop(0)

        if isinstance(response, BaseException):
            raise response

        return response


class FakeSurface:
    """Stands in for a Discord channel.

    :meth:`react` plays the role of a user adding a reaction.
    """

    def __init__(self) -> None:
        self.posted: List[Any] = []
        self.attached: Dict[int, List[str]] = {}
        self._waiters: List[Tuple[Callable[[str, int], bool], asyncio.Future]] = []

    async def post_message(self, embed: Any) -> int:
        self.posted.append(embed)
        return len(self.posted)

    async def attach_reactions(self, message: int, emotes: Any) -> None:
        self.attached[message] = list(emotes)

    async def await_reaction(
        self, message: int, predicate: Callable[[str, int], bool], timeout: float
    ) -> Optional[Reaction]:
        waiter = (predicate, asyncio.get_running_loop().create_future())
        self._waiters.append(waiter)

        try:
            return await asyncio.wait_for(waiter[1], timeout)
        except asyncio.TimeoutError:
            return None
        finally:
            self._waiters.remove(waiter)

    def react(self, emote: str, actor_id: int) -> bool:
        for predicate, future in self._waiters:
            if not future.done() and predicate(emote, actor_id):
                future.set_result(Reaction(emote, actor_id))
                return True

        return False


class FakeUser:
    def __init__(self, id: int, display_name: str = "Sleepyhead") -> None:
        self.id: int = id
        self.display_name: str = display_name
        self.mention: str = f"<@{id}>"


@pytest.fixture
def requester() -> FakeRequester:
    return FakeRequester()


@pytest.fixture
def client(requester: FakeRequester) -> OpenTriviaClient:
    return OpenTriviaClient(requester, "https://trivia.test/")  # type: ignore


@pytest.fixture
def slot() -> TokenSlot:
    return TokenSlot("abc123")


@pytest.fixture
def tokens(client: OpenTriviaClient, slot: TokenSlot) -> TokenManager:
    return TokenManager(client, slot)


@pytest.fixture
def surface() -> FakeSurface:
    return FakeSurface()


@pytest.fixture
def user() -> FakeUser:
    return FakeUser(1234)
