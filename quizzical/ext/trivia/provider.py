"""
Copyright (c) 2018-present HitchedSyringe

This Source Code Form is subject to the terms of the Mozilla Public
License, v. 2.0. If a copy of the MPL was not distributed with this
file, You can obtain one at https://mozilla.org/MPL/2.0/.
"""


from __future__ import annotations

# fmt: off
__all__ = (
    "DEFAULT_API_BASE_URL",
    "ResponseCode",
    "OpenTriviaClient",
)
# fmt: on


import asyncio
import logging
from enum import IntEnum
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Tuple

import aiohttp

from quizzical.http import HTTPRequestFailed

from .errors import ProviderUnavailable
from .question import Category

if TYPE_CHECKING:
    from quizzical.http import HTTPRequester


_LOG: logging.Logger = logging.getLogger(__name__)


DEFAULT_API_BASE_URL: str = "https://opentdb.com"


class ResponseCode(IntEnum):
    SUCCESS = 0
    NO_RESULTS = 1
    INVALID_PARAMETER = 2
    TOKEN_NOT_FOUND = 3
    TOKEN_EMPTY = 4


class OpenTriviaClient:
    """Low-level client for the Open Trivia Database API.

    Every method returns the decoded payload as-is; interpreting
    the response codes is left to the caller. Transport failures
    and payloads that aren't JSON objects are raised as
    :exc:`ProviderUnavailable`.

    Parameters
    ----------
    requester: :class:`quizzical.http.HTTPRequester`
        The HTTP requester to make requests with.
    base_url: :class:`str`
        The API's base URL, without a trailing slash.
    """

    __slots__: Tuple[str, ...] = ("requester", "base_url")

    def __init__(
        self, requester: HTTPRequester, base_url: str = DEFAULT_API_BASE_URL
    ) -> None:
        self.requester: HTTPRequester = requester
        self.base_url: str = base_url.rstrip("/")

    async def _get(self, endpoint: str, **params: Any) -> Dict[str, Any]:
        url = f"{self.base_url}/{endpoint}"

        try:
            data = await self.requester.request("GET", url, **params)
        except HTTPRequestFailed as exc:
            raise ProviderUnavailable(f"Trivia provider returned HTTP {exc.status}.") from exc
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            _LOG.warning("GET %s could not be completed.", url, exc_info=exc)
            raise ProviderUnavailable("Trivia provider could not be reached.") from exc
        except ValueError as exc:
            _LOG.warning("GET %s returned an undecodable body.", url, exc_info=exc)
            raise ProviderUnavailable(
                "Trivia provider returned a malformed response."
            ) from exc

        if not isinstance(data, dict):
            raise ProviderUnavailable("Trivia provider returned a malformed response.")

        return data

    @staticmethod
    def response_code_of(data: Dict[str, Any]) -> ResponseCode:
        """Extracts the response code from a payload.

        Raises
        ------
        :exc:`ProviderUnavailable`
            The code is missing or not one the API documents.
        """
        try:
            return ResponseCode(data["response_code"])
        except (KeyError, ValueError):
            code = data.get("response_code")
            raise ProviderUnavailable(f"Unexpected response code: {code}") from None

    async def fetch_questions(
        self, token: Optional[str], category_id: Optional[int] = None, *, amount: int = 1
    ) -> Dict[str, Any]:
        return await self._get(
            "api.php", amount=amount, category=category_id, token=token
        )

    async def request_token(self) -> Dict[str, Any]:
        return await self._get("api_token.php", command="request")

    async def reset_token(self, token: str) -> Dict[str, Any]:
        return await self._get("api_token.php", command="reset", token=token)

    async def fetch_categories(self) -> List[Category]:
        """Fetches every category the provider offers.

        Raises
        ------
        :exc:`ProviderUnavailable`
            The request failed or the payload was malformed.
        """
        data = await self._get("api_category.php")

        try:
            return [Category(int(c["id"]), c["name"]) for c in data["trivia_categories"]]
        except (KeyError, TypeError, ValueError):
            raise ProviderUnavailable(
                "Trivia provider returned malformed categories."
            ) from None
