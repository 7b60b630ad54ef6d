"""
Copyright (c) 2018-present HitchedSyringe

This program is free software: you can redistribute it and/or modify
it under the terms of the GNU Affero General Public License as published
by the Free Software Foundation, either version 3 of the License, or
(at your option) any later version.

This program is distributed in the hope that it will be useful,
but WITHOUT ANY WARRANTY; without even the implied warranty of
MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
GNU Affero General Public License for more details.

You should have received a copy of the GNU Affero General Public License
along with this program.  If not, see <https://www.gnu.org/licenses/>.

"""


import argparse
import asyncio
import logging
import os
from contextlib import contextmanager
from logging.handlers import RotatingFileHandler
from typing import Any, Generator, Mapping, Optional, Tuple

import yaml
from discord import AllowedMentions, Game, Intents
from discord.ext import commands

from . import __version__
from .bot import Quizzical


@contextmanager
def _setup_logging(*, log_filename: Optional[str] = None) -> Generator[None, None, None]:
    root_logger = logging.getLogger()

    try:
        stream_handler = logging.StreamHandler()

        formatter = logging.Formatter(
            fmt="[{asctime}] [{levelname:<8}] {name}: {message}",
            datefmt="%Y-%m-%d %H:%M:%S",
            style="{",
        )

        stream_handler.setFormatter(formatter)
        root_logger.addHandler(stream_handler)

        root_logger.setLevel(logging.INFO)

        if log_filename is not None:
            log_parent = os.path.dirname(log_filename)

            if log_parent:
                os.makedirs(log_parent, exist_ok=True)

            file_handler = RotatingFileHandler(
                filename=log_filename,
                mode="w",
                maxBytes=33_554_432,  # 32 MiB
                backupCount=5,
                encoding="utf-8",
            )

            file_handler.setFormatter(formatter)
            root_logger.addHandler(file_handler)

        yield
    finally:
        for handler in root_logger.handlers[:]:
            handler.close()
            root_logger.removeHandler(handler)


def _create_bot(config: Mapping[str, Any]) -> Quizzical:
    prefixes = config.get("prefixes") or []

    if prefixes:
        prefix = prefixes[0]

        if config.get("mentionable", True):
            prefixes = commands.when_mentioned_or(*prefixes)
    else:
        prefix = "@mention "
        prefixes = commands.when_mentioned

    owner_ids = set(config.get("owner_ids") or ())

    # Reactions are how questions get answered.
    intents = Intents(
        guilds=True,
        messages=True,
        reactions=True,
        message_content=True,
    )

    return Quizzical(
        config,
        prefixes,
        description=config.get("description"),
        activity=Game(f"{prefix}trivia \N{BULLET} Quizzical v{__version__}"),
        allowed_mentions=AllowedMentions(everyone=False, roles=False),
        intents=intents,
        owner_ids=owner_ids or None,
    )


def _start_bot(config: Mapping[str, Any]) -> None:
    async def runner() -> None:
        async with _create_bot(config) as bot:
            await bot.start(config["discord_auth_token"])

    try:
        asyncio.run(runner())
    except KeyboardInterrupt:
        pass


def _parse_args() -> Tuple[argparse.ArgumentParser, argparse.Namespace]:
    parser = argparse.ArgumentParser(prog="quizzical")

    parser.add_argument(
        "config_filename",
        default="config.yaml",
        help="the config file to load (default: config.yaml)",
        nargs="?",
    )
    parser.add_argument(
        "--log-filename", "-lfn", help="the file to write logging messages to"
    )

    return parser, parser.parse_args()


def _run(parser: argparse.ArgumentParser, args: argparse.Namespace) -> None:
    try:
        with open(args.config_filename) as f:
            config = yaml.safe_load(f)
    except (OSError, yaml.YAMLError):
        parser.error(f'Failed to read config file "{args.config_filename}".')

    if not isinstance(config, dict) or "discord_auth_token" not in config:
        parser.error(f'Config file "{args.config_filename}" has no discord_auth_token.')

    try:
        with _setup_logging(log_filename=args.log_filename):
            logging.getLogger("discord").setLevel(logging.INFO)
            _start_bot(config)
    except OSError:
        parser.error(f'Failed to write to log file "{args.log_filename}".')


def main() -> None:
    parser, args = _parse_args()
    _run(parser, args)


if __name__ == "__main__":
    main()
