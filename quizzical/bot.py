"""
Copyright (c) 2018-present HitchedSyringe

This Source Code Form is subject to the terms of the Mozilla Public
License, v. 2.0. If a copy of the MPL was not distributed with this
file, You can obtain one at https://mozilla.org/MPL/2.0/.
"""


from __future__ import annotations

# fmt: off
__all__ = (
    "Quizzical",
)
# fmt: on


import logging
from typing import TYPE_CHECKING, Any, Mapping

from discord.ext import commands
from discord.utils import MISSING, utcnow

from .http import HTTPRequester, HTTPRequestFailed
from .utils import human_join

if TYPE_CHECKING:
    from datetime import datetime


_LOG: logging.Logger = logging.getLogger(__name__)


SOURCE_CODE_URL: str = "https://github.com/HitchedSyringe/Quizzical"


class Quizzical(commands.Bot):
    """The main Quizzical Discord bot class.

    Subclasses :class:`commands.Bot`.

    Parameters
    ----------
    config: Mapping[:class:`str`, Any]
        The loaded configuration values.

    Attributes
    ----------
    config: Mapping[:class:`str`, Any]
        The bot's configuration values.
    http_requester: :class:`HTTPRequester`
        The bot's HTTP requester client. Its session is
        started before any extension gets loaded.
    started_at: :class:`datetime.datetime`
        The bot's starting time as a UTC-aware datetime.
    """

    def __init__(self, config: Mapping[str, Any], *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)

        trivia_config = config.get("trivia") or {}

        self.config: Mapping[str, Any] = config
        self.http_requester: HTTPRequester = HTTPRequester(
            timeout=trivia_config.get("request_timeout")
        )
        self.started_at: datetime = MISSING

    async def _init_extensions(self) -> None:
        total = 0
        loaded = 0

        for ext in self.config.get("extensions_list", ()):
            total += 1

            try:
                await self.load_extension(ext)
            except (commands.ExtensionNotFound, ModuleNotFoundError):
                _LOG.warning("Extension '%s' was not found.", ext)
            except (commands.NoEntryPointError, commands.ExtensionAlreadyLoaded) as exc:
                _LOG.warning(exc)
            except commands.ExtensionFailed as exc:
                _LOG.warning("Failed to load extension '%s'.", ext, exc_info=exc.original)
            else:
                _LOG.debug("Loaded extension '%s'.", ext)
                loaded += 1

        failed = total - loaded

        _LOG.info("Extensions: %s total; %s loaded; %s failed.", total, loaded, failed)

    async def setup_hook(self) -> None:
        from sys import version_info as python_version

        from aiohttp import __version__ as aiohttp_version

        from . import __version__

        self.started_at = utcnow()

        user_agent = (
            f"Quizzical-DiscordBot/{__version__} (+{SOURCE_CODE_URL})"
            f" Python/{python_version[0]}.{python_version[1]}"
            f" aiohttp/{aiohttp_version}"
        )

        await self.http_requester.start(headers={"User-Agent": user_agent})

        await self._init_extensions()

        _LOG.info("Quizzical %s booted successfully. Awaiting READY event...", __version__)

    async def close(self) -> None:
        await self.http_requester.close()
        await super().close()

    async def on_ready(self) -> None:
        _LOG.info("Received a READY event.")

    async def on_resumed(self) -> None:
        _LOG.info("Received a RESUME event.")

    async def on_command_error(
        self, ctx: commands.Context, error: commands.CommandError
    ) -> None:
        if isinstance(error, commands.CommandNotFound):
            return

        # Command errors raised during invocation are reported by
        # their cogs. Anything else is a bug on our end.
        if isinstance(error, commands.CommandInvokeError):
            original = error.original

            if not isinstance(original, commands.CommandError):
                _LOG.error(
                    "Unhandled exception in command %s.", ctx.command, exc_info=original
                )

            return

        if isinstance(error, (commands.BadArgument, commands.ArgumentParsingError)):
            await ctx.send(
                "One or more of your command arguments were invalid."
                "\nPlease double-check your input(s) and try again."
            )
        elif isinstance(error, commands.CommandOnCooldown):
            await ctx.send(
                f"That command is on cooldown. Retry in **{error.retry_after:.2f}** second(s)."
            )
        elif isinstance(error, commands.BotMissingPermissions):
            perms = [
                p.replace('_', ' ').replace('guild', 'server').title()
                for p in error.missing_permissions
            ]

            await ctx.send(
                f"I need the `{human_join(perms)}` permission(s) to execute that command."
            )
        elif isinstance(error, commands.NotOwner):
            await ctx.send("You're not one of my higher-ups, scram!")
        elif isinstance(error, HTTPRequestFailed):
            await ctx.send(
                f"HTTP request failed with status code {error.status} {error.reason}"
            )
        else:
            _LOG.warning("Unhandled command error in %s: %s", ctx.command, error)
