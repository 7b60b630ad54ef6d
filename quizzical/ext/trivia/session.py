"""
Copyright (c) 2018-present HitchedSyringe

This Source Code Form is subject to the terms of the Mozilla Public
License, v. 2.0. If a copy of the MPL was not distributed with this
file, You can obtain one at https://mozilla.org/MPL/2.0/.
"""


from __future__ import annotations

# fmt: off
__all__ = (
    "ANSWER_EMOTES",
    "DEFAULT_ANSWER_TIME_LIMIT",
    "AnswerSet",
    "AnswerSession",
    "Outcome",
    "OutcomeKind",
    "SessionHandle",
)
# fmt: on


import asyncio
import logging
import random
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, Iterator, NamedTuple, Optional, Tuple, Union

import discord

from quizzical.utils import plural, with_article

from .entities import decode

if TYPE_CHECKING:
    from typing_extensions import Self

    from .question import TriviaQuestion
    from .surface import ChatSurface

    Responder = Union[discord.Member, discord.User]


_LOG: logging.Logger = logging.getLogger(__name__)


DEFAULT_ANSWER_TIME_LIMIT: float = 25.0


# fmt: off
ANSWER_EMOTES: Tuple[str, ...] = (
    "\N{RED APPLE}",
    "\N{STRAWBERRY}",
    "\N{PEAR}",
    "\N{CHERRIES}",
    "\N{GRAPES}",
    "\N{CARROT}",
    "\N{TANGERINE}",
    "\N{WATERMELON}",
    "\N{LEMON}",
    "\N{BANANA}",
    "\N{COCONUT}",
    "\N{AVOCADO}",
    "\N{BROCCOLI}",
    "\N{HOT PEPPER}\N{VARIATION SELECTOR-16}",
    "\N{EAR OF MAIZE}",
    "\N{KIWIFRUIT}",
    "\N{GARLIC}",
    "\N{PINEAPPLE}",
    "\N{LEAFY GREEN}",
)
# fmt: on


class OutcomeKind(Enum):
    CORRECT = "correct"
    INCORRECT = "incorrect"
    TIMED_OUT = "timed_out"


class Outcome(NamedTuple):
    kind: OutcomeKind
    given_answer: Optional[str] = None


class AnswerSet:
    """The answers of a question, in presentation order, each paired
    with a distinct emote.

    True/false questions are always presented as "True" then "False".
    Every other question has its answers shuffled.
    """

    __slots__: Tuple[str, ...] = ("answers", "emotes", "correct_index", "_by_emote")

    def __init__(
        self, answers: Tuple[str, ...], emotes: Tuple[str, ...], correct_index: int
    ) -> None:
        if len(answers) != len(emotes) or len(set(emotes)) != len(emotes):
            raise ValueError("each answer needs its own emote.")

        self.answers: Tuple[str, ...] = answers
        self.emotes: Tuple[str, ...] = emotes
        self.correct_index: int = correct_index
        self._by_emote: Dict[str, int] = {e: i for i, e in enumerate(emotes)}

    @classmethod
    def build(cls, question: TriviaQuestion, *, rng: Optional[random.Random] = None) -> Self:
        rng = rng or random.Random()

        # Index 0 is always the correct answer. Positions are tracked
        # rather than strings in case an incorrect answer duplicates it.
        candidates = [decode(a) for a in question.answers]
        order = list(range(len(candidates)))

        if len(order) > len(ANSWER_EMOTES):
            raise ValueError(f"too many answers ({len(order)} > {len(ANSWER_EMOTES)}).")

        if len(order) == 2:
            order.sort(key=candidates.__getitem__, reverse=True)
        else:
            rng.shuffle(order)

        emotes = list(ANSWER_EMOTES)
        rng.shuffle(emotes)

        return cls(
            tuple(candidates[i] for i in order),
            tuple(emotes[: len(order)]),
            order.index(0),
        )

    def __len__(self) -> int:
        return len(self.answers)

    def __contains__(self, emote: object) -> bool:
        return emote in self._by_emote

    def __iter__(self) -> Iterator[Tuple[str, str]]:
        return zip(self.emotes, self.answers)

    @property
    def correct_answer(self) -> str:
        return self.answers[self.correct_index]

    @property
    def correct_emote(self) -> str:
        return self.emotes[self.correct_index]

    def answer_for(self, emote: str) -> str:
        return self.answers[self._by_emote[emote]]


class SessionHandle:
    """A single question's collection window.

    The handle resolves exactly once: either when :meth:`collect`
    is given a qualifying reaction or when the window expires.
    Anything collected after that is ignored.

    This must be constructed within a running event loop.
    """

    __slots__: Tuple[str, ...] = (
        "message",
        "answer_set",
        "responder_id",
        "deadline",
        "_future",
        "_timer",
        "_listener",
    )

    def __init__(
        self, message: Any, answer_set: AnswerSet, responder_id: int, *, timeout: float
    ) -> None:
        loop = asyncio.get_running_loop()

        self.message: Any = message
        self.answer_set: AnswerSet = answer_set
        self.responder_id: int = responder_id
        self.deadline: float = loop.time() + timeout

        self._future: asyncio.Future[Outcome] = loop.create_future()
        self._timer: asyncio.TimerHandle = loop.call_later(timeout, self._expire)
        self._listener: Optional[asyncio.Task] = None

    def __repr__(self) -> str:
        return (
            f"<SessionHandle responder_id={self.responder_id}"
            f" resolved={self.is_resolved()}>"
        )

    @property
    def remaining(self) -> float:
        """:class:`float`: Seconds left in the window, never negative."""
        return max(0.0, self.deadline - asyncio.get_running_loop().time())

    def is_resolved(self) -> bool:
        return self._future.done()

    def is_qualifying(self, emote: str, actor_id: int) -> bool:
        return actor_id == self.responder_id and emote in self.answer_set

    def collect(self, emote: str, actor_id: int) -> bool:
        """Offers a reaction to this session.

        Returns
        -------
        :class:`bool`
            Whether the reaction resolved the session.
        """
        if self.is_resolved() or not self.is_qualifying(emote, actor_id):
            return False

        if emote == self.answer_set.correct_emote:
            outcome = Outcome(OutcomeKind.CORRECT, self.answer_set.correct_answer)
        else:
            outcome = Outcome(OutcomeKind.INCORRECT, self.answer_set.answer_for(emote))

        return self._resolve(outcome)

    def cancel(self) -> None:
        """Tears the window down without resolving it."""
        self._timer.cancel()
        self._future.cancel()

        if self._listener is not None:
            self._listener.cancel()

    async def wait(self) -> Outcome:
        return await asyncio.shield(self._future)

    def _expire(self) -> None:
        if self._resolve(Outcome(OutcomeKind.TIMED_OUT)) and self._listener is not None:
            self._listener.cancel()

    def _resolve(self, outcome: Outcome) -> bool:
        # Runs on the loop thread, so cancelling the timer and
        # setting the result cannot interleave with _expire.
        if self._future.done():
            return False

        self._timer.cancel()
        self._future.set_result(outcome)

        return True


def _log_listener_failure(task: asyncio.Task) -> None:
    if task.cancelled():
        return

    if (exc := task.exception()) is not None:
        _LOG.error("Reaction listener stopped unexpectedly.", exc_info=exc)


def _question_embed(
    question: TriviaQuestion, answer_set: AnswerSet, responder: Responder
) -> discord.Embed:
    difficulty = question.difficulty
    category = decode(question.category)
    level = with_article(difficulty.value.capitalize())

    embed = discord.Embed(
        title=f"{responder.display_name}, here's a question!",
        description=f"{level} one from the category {category}.",
        colour=difficulty.colour,
        timestamp=discord.utils.utcnow(),
    )

    embed.add_field(name="Question", value=decode(question.text), inline=False)
    embed.add_field(
        name="Choices", value="\n".join(f"{e} - {a}" for e, a in answer_set), inline=False
    )
    embed.set_footer(text="Answer by reacting to the corresponding emote")

    return embed


def _result_embed(
    outcome: Outcome, answer_set: AnswerSet, responder: Responder, timeout: float
) -> discord.Embed:
    answer = answer_set.correct_answer

    if outcome.kind is OutcomeKind.CORRECT:
        return discord.Embed(
            title="Correct answer!",
            description=f"{responder.mention}, you were correct! Congratulations!",
            colour=0x00CC00,
        )

    if outcome.kind is OutcomeKind.INCORRECT:
        embed = discord.Embed(
            title="Incorrect",
            description=f"Sorry, but that's incorrect. The right answer was {answer}.",
            colour=0xCC0000,
        )
        embed.set_footer(text="Better luck next time!")
        return embed

    embed = discord.Embed(
        title="Time's up!",
        description=f"You ran out of time! The correct answer was {answer}.",
        colour=0xCC6600,
    )
    embed.set_footer(text=f"You had {plural(timeout, 'g'):second} to answer.")
    return embed


class AnswerSession:
    """Presents questions on a chat surface and collects a single
    participant's answer to each.

    Sessions opened from the same instance share nothing but the
    surface and the random source.

    Parameters
    ----------
    surface: :class:`ChatSurface`
        Where questions are posted and reactions come from.
    timeout: :class:`float`
        The length of the collection window, in seconds.
    rng: Optional[:class:`random.Random`]
        The random source for shuffling answers and emotes.
    """

    __slots__: Tuple[str, ...] = ("surface", "timeout", "_rng")

    def __init__(
        self,
        surface: ChatSurface,
        *,
        timeout: float = DEFAULT_ANSWER_TIME_LIMIT,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.surface: ChatSurface = surface
        self.timeout: float = timeout
        self._rng: random.Random = rng or random.Random()

    async def open(self, question: TriviaQuestion, responder: Responder) -> SessionHandle:
        """|coro|

        Posts ``question`` and opens its collection window. Only
        ``responder`` may answer.
        """
        answer_set = AnswerSet.build(question, rng=self._rng)
        embed = _question_embed(question, answer_set, responder)

        message = await self.surface.post_message(embed)

        # The window starts as soon as the question is visible.
        handle = SessionHandle(message, answer_set, responder.id, timeout=self.timeout)
        listener = asyncio.create_task(self._listen(handle))
        listener.add_done_callback(_log_listener_failure)
        handle._listener = listener

        try:
            await self.surface.attach_reactions(message, answer_set.emotes)
        except Exception:
            handle.cancel()
            raise

        return handle

    async def run(self, question: TriviaQuestion, responder: Responder) -> Outcome:
        """|coro|

        Opens a session, waits for it to resolve and posts the result.
        """
        handle = await self.open(question, responder)
        outcome = await handle.wait()

        _LOG.info("Session for %s resolved as %s.", responder.id, outcome.kind.value)

        embed = _result_embed(outcome, handle.answer_set, responder, self.timeout)
        await self.surface.post_message(embed)

        return outcome

    async def _listen(self, handle: SessionHandle) -> None:
        # The surface filters with is_qualifying, so collect() may
        # still ignore this if the window closed in the meantime.
        reaction = await self.surface.await_reaction(
            handle.message, handle.is_qualifying, handle.remaining
        )

        if reaction is not None:
            handle.collect(reaction.emote, reaction.actor_id)
