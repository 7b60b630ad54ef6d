"""
Copyright (c) 2018-present HitchedSyringe

This Source Code Form is subject to the terms of the Mozilla Public
License, v. 2.0. If a copy of the MPL was not distributed with this
file, You can obtain one at https://mozilla.org/MPL/2.0/.
"""


from __future__ import annotations

# fmt: off
__all__ = (
    "DEFAULT_MAX_RETRIES",
    "QuestionFetcher",
)
# fmt: on


import logging
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Optional, Tuple

from .errors import InvalidCategory, ProviderUnavailable, RetryExhausted
from .provider import ResponseCode
from .question import TriviaQuestion

if TYPE_CHECKING:
    from .provider import OpenTriviaClient
    from .tokens import TokenManager

    Notifier = Callable[..., Awaitable[Any]]


_LOG: logging.Logger = logging.getLogger(__name__)


DEFAULT_MAX_RETRIES: int = 2


class QuestionFetcher:
    """Fetches single questions, transparently recovering the session
    token whenever the provider reports it missing or used up.

    Token recovery is the only thing that is retried, and only up
    to ``max_retries`` times per fetch.

    Parameters
    ----------
    client: :class:`OpenTriviaClient`
        The provider client.
    tokens: :class:`TokenManager`
        The token manager owning the process-wide token.
    max_retries: :class:`int`
        The maximum number of token recoveries per fetch.
    """

    __slots__: Tuple[str, ...] = ("client", "tokens", "max_retries")

    def __init__(
        self,
        client: OpenTriviaClient,
        tokens: TokenManager,
        *,
        max_retries: int = DEFAULT_MAX_RETRIES,
    ) -> None:
        if max_retries < 0:
            raise ValueError(f"invalid max_retries {max_retries} (must be >= 0)")

        self.client: OpenTriviaClient = client
        self.tokens: TokenManager = tokens
        self.max_retries: int = max_retries

    async def fetch(
        self, category_id: Optional[int] = None, *, notify: Optional[Notifier] = None
    ) -> TriviaQuestion:
        """|coro|

        Fetches a single question.

        Parameters
        ----------
        category_id: Optional[:class:`int`]
            The category to pick from. ``None`` means any category.
        notify: Optional[Callable[..., Awaitable]]
            Called with a title and description whenever the
            token is being recovered, then with a title and
            ``confirmation=True`` once it has been.

        Raises
        ------
        :exc:`InvalidCategory`
            The provider rejected the category.
        :exc:`RetryExhausted`
            The token could not be recovered in time, or the provider
            ran out of questions.
        :exc:`ProviderUnavailable`
            The provider could not be reached or misbehaved.
        :exc:`TokenLifecycleFailure`
            The token could not be issued or reset.
        """
        retries = 0

        while True:
            token = self.tokens.current_token

            if token is None:
                code = ResponseCode.TOKEN_NOT_FOUND
                data = {}
            else:
                data = await self.client.fetch_questions(token, category_id)
                code = self.client.response_code_of(data)

            if code is ResponseCode.SUCCESS:
                return self._parse(data)

            if code is ResponseCode.INVALID_PARAMETER:
                raise InvalidCategory(category_id)

            if code is ResponseCode.NO_RESULTS:
                if category_id is not None:
                    raise InvalidCategory(
                        category_id, f"No questions left for category ID {category_id}."
                    )

                raise RetryExhausted(retries, "Could not get question. Response code: 1")

            if retries >= self.max_retries:
                _LOG.warning(
                    "Gave up fetching a question after %s token recoveries.", retries
                )
                raise RetryExhausted(retries)

            retries += 1

            if code is ResponseCode.TOKEN_EMPTY:
                _LOG.info("Session token is exhausted, resetting (attempt %s).", retries)

                if notify is not None:
                    await notify("Empty token", "Requesting reset...")

                await self.tokens.reset(token)

                if notify is not None:
                    await notify("Token reset", confirmation=True)
            else:
                _LOG.info("No usable session token, requesting one (attempt %s).", retries)

                if notify is not None:
                    await notify("No stored token found", "Requesting new token...")

                await self.tokens.issue()

                if notify is not None:
                    await notify("Token received", confirmation=True)

    @staticmethod
    def _parse(data: Any) -> TriviaQuestion:
        try:
            return TriviaQuestion.from_payload(data["results"][0])
        except (KeyError, IndexError, TypeError, ValueError):
            raise ProviderUnavailable(
                "Trivia provider returned a malformed question."
            ) from None
