"""
Copyright (c) 2018-present HitchedSyringe

This Source Code Form is subject to the terms of the Mozilla Public
License, v. 2.0. If a copy of the MPL was not distributed with this
file, You can obtain one at https://mozilla.org/MPL/2.0/.
"""


# The pieces of this extension don't know about Discord
# beyond the surface adapter and the cog, which makes it
# possible to drive a session from anywhere else.


from __future__ import annotations as _annotations

from typing import TYPE_CHECKING as _TYPE_CHECKING

from .categories import *
from .cog import *
from .entities import *
from .errors import *
from .fetcher import *
from .provider import *
from .question import *
from .session import *
from .surface import *
from .tokens import *

if _TYPE_CHECKING:
    from quizzical.bot import Quizzical


async def setup(bot: Quizzical) -> None:
    await bot.add_cog(Trivia(bot, config=bot.config.get("trivia")))
