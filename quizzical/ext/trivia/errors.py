"""
Copyright (c) 2018-present HitchedSyringe

This Source Code Form is subject to the terms of the Mozilla Public
License, v. 2.0. If a copy of the MPL was not distributed with this
file, You can obtain one at https://mozilla.org/MPL/2.0/.
"""


from __future__ import annotations

# fmt: off
__all__ = (
    "TriviaError",
    "ProviderUnavailable",
    "InvalidCategory",
    "TokenLifecycleFailure",
    "NoToken",
    "ResetRejected",
    "IssueRejected",
    "RetryExhausted",
)
# fmt: on


from typing import Optional

from discord.ext import commands


class TriviaError(commands.CommandError):
    """Base exception for every failure raised while acquiring a question.

    This inherits from :exc:`commands.CommandError` so that command
    error handlers can report it to the invoking channel.
    """

    pass


class ProviderUnavailable(TriviaError):
    """Exception raised when the trivia provider cannot be reached
    or returns something that cannot be understood.
    """

    pass


class InvalidCategory(TriviaError):
    """Exception raised when the trivia provider rejects a category.

    Attributes
    ----------
    category_id: Optional[:class:`int`]
        The rejected category ID.
    """

    def __init__(self, category_id: Optional[int], message: Optional[str] = None) -> None:
        self.category_id: Optional[int] = category_id
        super().__init__(message or f"Invalid argument. Category ID: {category_id}")


class TokenLifecycleFailure(TriviaError):
    """Base exception for session token issue and reset failures.

    Attributes
    ----------
    response_code: Optional[:class:`int`]
        The response code returned by the provider, if any.
    """

    def __init__(self, message: str, *, response_code: Optional[int] = None) -> None:
        self.response_code: Optional[int] = response_code
        super().__init__(message)


class NoToken(TokenLifecycleFailure):
    """Exception raised when a reset is attempted without a held token."""

    def __init__(self) -> None:
        super().__init__("No token found.")


class ResetRejected(TokenLifecycleFailure):
    """Exception raised when the provider refuses to reset a token."""

    def __init__(self, response_code: Optional[int]) -> None:
        super().__init__(
            f"Could not reset token. Response code: {response_code}",
            response_code=response_code,
        )


class IssueRejected(TokenLifecycleFailure, ProviderUnavailable):
    """Exception raised when the provider refuses to issue a new token."""

    def __init__(self, response_code: Optional[int]) -> None:
        super().__init__(
            f"Could not generate new token. Response code: {response_code}",
            response_code=response_code,
        )


class RetryExhausted(TriviaError):
    """Exception raised when a question still could not be fetched
    after the maximum number of token recoveries.

    Attributes
    ----------
    attempts: :class:`int`
        The number of token recoveries that were performed.
    """

    def __init__(self, attempts: int, message: Optional[str] = None) -> None:
        self.attempts: int = attempts
        super().__init__(message or f"Could not get question after {attempts} retries.")
