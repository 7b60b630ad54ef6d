"""
Copyright (c) 2018-present HitchedSyringe

This Source Code Form is subject to the terms of the Mozilla Public
License, v. 2.0. If a copy of the MPL was not distributed with this
file, You can obtain one at https://mozilla.org/MPL/2.0/.
"""


from __future__ import annotations

# fmt: off
__all__ = (
    "TokenSlot",
    "TokenManager",
)
# fmt: on


import logging
from typing import TYPE_CHECKING, Optional, Tuple

from .errors import IssueRejected, NoToken, ProviderUnavailable, ResetRejected
from .provider import ResponseCode

if TYPE_CHECKING:
    from .provider import OpenTriviaClient


_LOG: logging.Logger = logging.getLogger(__name__)


class TokenSlot:
    """Holds the single session token shared by the whole process.

    There is no locking here. Concurrent recoveries may race each
    other and the last write wins.
    """

    __slots__: Tuple[str, ...] = ("value",)

    def __init__(self, value: Optional[str] = None) -> None:
        self.value: Optional[str] = value

    def __repr__(self) -> str:
        return f"<TokenSlot held={self.value is not None}>"


class TokenManager:
    """Issues and resets the provider session token.

    Parameters
    ----------
    client: :class:`OpenTriviaClient`
        The provider client.
    slot: Optional[:class:`TokenSlot`]
        The slot to store the token in. A fresh, empty one
        is created if not given.
    """

    __slots__: Tuple[str, ...] = ("client", "slot")

    def __init__(self, client: OpenTriviaClient, slot: Optional[TokenSlot] = None) -> None:
        self.client: OpenTriviaClient = client
        self.slot: TokenSlot = slot if slot is not None else TokenSlot()

    @property
    def current_token(self) -> Optional[str]:
        return self.slot.value

    async def issue(self) -> str:
        """|coro|

        Requests a brand new token, replacing the held one.

        Raises
        ------
        :exc:`IssueRejected`
            The provider returned a non-success response code.
        :exc:`ProviderUnavailable`
            The request failed.
        """
        data = await self.client.request_token()
        code = data.get("response_code")

        if code != ResponseCode.SUCCESS:
            _LOG.warning("Token request was rejected with response code %s.", code)
            raise IssueRejected(code)

        token = data.get("token")

        if not isinstance(token, str) or not token:
            raise ProviderUnavailable("Trivia provider issued an empty token.")

        self.slot.value = token
        _LOG.info("Issued a new trivia session token.")

        return token

    async def reset(self, token: Optional[str] = None) -> None:
        """|coro|

        Resets a token so that it can serve every question again.

        Parameters
        ----------
        token: Optional[:class:`str`]
            The token to reset. Defaults to the held token.

        Raises
        ------
        :exc:`NoToken`
            No token was given and none is held.
        :exc:`ResetRejected`
            The provider returned a non-success response code.
        :exc:`ProviderUnavailable`
            The request failed.
        """
        if token is None:
            token = self.slot.value

            if token is None:
                raise NoToken()

        data = await self.client.reset_token(token)
        code = data.get("response_code")

        if code != ResponseCode.SUCCESS:
            _LOG.warning("Token reset was rejected with response code %s.", code)
            raise ResetRejected(code)

        _LOG.info("Reset the trivia session token.")
