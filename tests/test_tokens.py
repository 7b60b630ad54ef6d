"""
Copyright (c) 2018-present HitchedSyringe

This Source Code Form is subject to the terms of the Mozilla Public
License, v. 2.0. If a copy of the MPL was not distributed with this
file, You can obtain one at https://mozilla.org/MPL/2.0/.
"""


import pytest

from quizzical.ext.trivia import (
    IssueRejected,
    NoToken,
    ProviderUnavailable,
    ResetRejected,
    TokenLifecycleFailure,
    TokenManager,
    TokenSlot,
)


@pytest.mark.asyncio
async def test_issue_stores_token(requester, client) -> None:
    tokens = TokenManager(client)
    requester.queue("api_token.php:request", {"response_code": 0, "token": "fresh"})

    assert tokens.current_token is None
    assert await tokens.issue() == "fresh"
    assert tokens.current_token == "fresh"


@pytest.mark.asyncio
async def test_issue_overwrites_held_token(requester, tokens, slot) -> None:
    requester.queue("api_token.php:request", {"response_code": 0, "token": "fresh"})

    await tokens.issue()

    assert slot.value == "fresh"


@pytest.mark.asyncio
async def test_issue_rejected(requester, tokens) -> None:
    requester.queue("api_token.php:request", {"response_code": 3})

    with pytest.raises(IssueRejected) as info:
        await tokens.issue()

    assert info.value.response_code == 3
    assert isinstance(info.value, ProviderUnavailable)
    assert isinstance(info.value, TokenLifecycleFailure)
    assert tokens.current_token == "abc123"


@pytest.mark.asyncio
async def test_issue_without_token_in_payload(requester, client) -> None:
    tokens = TokenManager(client)
    requester.queue("api_token.php:request", {"response_code": 0})

    with pytest.raises(ProviderUnavailable):
        await tokens.issue()

    assert tokens.current_token is None


@pytest.mark.asyncio
async def test_reset_uses_held_token(requester, tokens) -> None:
    requester.queue("api_token.php:reset", {"response_code": 0})

    await tokens.reset()

    assert requester.calls == [("api_token.php:reset", {"command": "reset", "token": "abc123"})]
    assert tokens.current_token == "abc123"


@pytest.mark.asyncio
async def test_reset_without_token(requester, client) -> None:
    tokens = TokenManager(client)

    with pytest.raises(NoToken):
        await tokens.reset()

    assert requester.calls == []


@pytest.mark.asyncio
async def test_reset_rejected(requester, tokens) -> None:
    requester.queue("api_token.php:reset", {"response_code": 3})

    with pytest.raises(ResetRejected) as info:
        await tokens.reset()

    assert info.value.response_code == 3


@pytest.mark.asyncio
async def test_managers_share_a_slot(requester, client) -> None:
    slot = TokenSlot()
    first = TokenManager(client, slot)
    second = TokenManager(client, slot)

    requester.queue("api_token.php:request", {"response_code": 0, "token": "shared"})
    await first.issue()

    assert second.current_token == "shared"
