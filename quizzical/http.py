"""
Copyright (c) 2018-present HitchedSyringe

This Source Code Form is subject to the terms of the Mozilla Public
License, v. 2.0. If a copy of the MPL was not distributed with this
file, You can obtain one at https://mozilla.org/MPL/2.0/.
"""


from __future__ import annotations

__all__ = (
    "HTTPRequester",
    "HTTPRequestFailed",
)


import logging
from typing import TYPE_CHECKING, Any, Optional, Tuple, Union

import aiohttp
from discord.ext import commands
from discord.utils import MISSING

if TYPE_CHECKING:
    from yarl import URL

    RequestUrl = Union[str, URL]


_LOG: logging.Logger = logging.getLogger(__name__)


class HTTPRequestFailed(commands.CommandError):
    """Exception raised when an HTTP request returns a non-2xx status.

    This inherits from :exc:`commands.CommandError`.

    Attributes
    ----------
    status: :class:`int`
        The HTTP status code.
    reason: :class:`str`
        The HTTP status reason.
    data: Any
        The data returned from the failed request.
    """

    def __init__(self, response: aiohttp.ClientResponse, data: Any) -> None:
        self.status: int = response.status
        self.reason: str = response.reason  # type: ignore
        self.data: Any = data

        fmt = "{0.method} {0.url} failed with HTTP status {0.status} {0.reason}."
        super().__init__(fmt.format(response))


class HTTPRequester:
    """A thin wrapper around an :class:`aiohttp.ClientSession` that is
    shared by every extension.

    The session is not opened during construction. :meth:`start` must
    be awaited before any request is made.

    Parameters
    ----------
    timeout: Optional[:class:`float`]
        The total number of seconds a single request may take.
        ``None`` (the default) uses aiohttp's default timeout.
    """

    __slots__: Tuple[str, ...] = ("_timeout", "__session")

    def __init__(self, *, timeout: Optional[float] = None) -> None:
        self._timeout: Optional[float] = timeout
        self.__session: aiohttp.ClientSession = MISSING

    @property
    def session(self) -> aiohttp.ClientSession:
        """:class:`aiohttp.ClientSession`: The client session used for handling requests."""
        return self.__session

    def is_closed(self) -> bool:
        """:class:`bool`: Indicates whether the underlying HTTP client session is closed."""
        return self.__session is MISSING or self.__session.closed

    async def start(self, **session_kwargs: Any) -> None:
        """|coro|

        Starts this HTTP requester session.

        Parameters
        ----------
        session_kwargs
            The remaining parameters to be passed to the
            :class:`aiohttp.ClientSession` constructor.

        Raises
        ------
        RuntimeError
            This HTTP requester session is already active.
        """
        if not self.is_closed():
            raise RuntimeError("HTTP requester session is active.")

        if self._timeout is not None:
            session_kwargs.setdefault("timeout", aiohttp.ClientTimeout(total=self._timeout))

        self.__session = aiohttp.ClientSession(**session_kwargs)

        _LOG.info("New HTTP requester session started.")

    async def close(self) -> None:
        """|coro|

        Closes this HTTP requester session.
        """
        if self.is_closed():
            return

        await self.__session.close()
        self.__session = MISSING

        _LOG.info("Closed HTTP requester session.")

    async def request(self, method: str, url: RequestUrl, /, **params: Any) -> Any:
        """|coro|

        Performs an HTTP request, passing ``params`` as the query string.

        Parameters left as ``None`` are dropped from the query string.

        Returns
        -------
        Any
            The decoded JSON body if the response declares JSON,
            the text body if it declares text, and the raw bytes
            otherwise.

        Raises
        ------
        :exc:`.HTTPRequestFailed`
            The request returned a status code of either 4xx or 5xx.
        RuntimeError
            The underlying HTTP client session was closed.
        """
        if self.is_closed():
            raise RuntimeError("HTTP requester session is closed.")

        params = {k: v for k, v in params.items() if v is not None}

        async with self.__session.request(method, url, params=params) as resp:
            if "application/json" in resp.content_type:
                data = await resp.json()
            elif "text/" in resp.content_type:
                data = await resp.text("utf-8")
            else:
                data = await resp.read()

            if not 200 <= resp.status < 300:
                _LOG.warning(
                    "%s %s failed with HTTP status %s.", method, url, resp.status
                )
                raise HTTPRequestFailed(resp, data)

            _LOG.info("%s %s succeeded with HTTP status %s.", method, url, resp.status)
            return data
