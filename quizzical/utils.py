"""
Copyright (c) 2018-present HitchedSyringe

This Source Code Form is subject to the terms of the Mozilla Public
License, v. 2.0. If a copy of the MPL was not distributed with this
file, You can obtain one at https://mozilla.org/MPL/2.0/.
"""


from __future__ import annotations

__all__ = (
    "plural",
    "human_join",
    "with_article",
)


from typing import Any, Optional, Sequence, Tuple


class plural:
    """A formatting helper class that pluralises a string based on the
    given numerical value.

    Examples
    --------
    .. code-block:: python3

        >>> format(plural(1), "second")
        "1 second"

        >>> format(plural(25), "second")
        "25 seconds"

        >>> format(plural(2), "try|tries")
        "2 tries"

        >>> format(plural(0.5, ".1f"), "second")
        "0.5 seconds"
    """

    __slots__: Tuple[str, ...] = ("__value", "__value_fmt")

    def __init__(self, value: float, /, value_format_spec: Optional[str] = None) -> None:
        if not isinstance(value, (int, float)):
            raise TypeError(
                f"Expected value to be int or float, not {type(value).__name__}."
            )

        self.__value: float = value
        self.__value_fmt: str = value_format_spec or ""

    def __format__(self, spec: str) -> str:
        singular, _, plural = spec.partition("|")
        value = self.__value

        if abs(value) == 1:
            return f"{value:{self.__value_fmt}} {singular}"

        return f"{value:{self.__value_fmt}} {plural or f'{singular}s'}"


def human_join(sequence: Sequence[Any], /, *, joiner: str = "and") -> str:
    """Returns a human-readable, comma-separated sequence, with
    the last element joined with a given joiner.

    This uses an Oxford comma. Passing an empty sequence returns
    an empty string.
    """
    if not sequence:
        return ""

    size = len(sequence)

    if size == 1:
        return str(sequence[0])

    if size == 2:
        return f"{sequence[0]} {joiner} {sequence[1]}"

    return ", ".join(map(str, sequence[:-1])) + f", {joiner} {sequence[-1]}"


def with_article(word: str, /, *, capitalize: bool = True) -> str:
    """Prefixes ``word`` with the indefinite article that reads
    naturally before it, e.g. ``"An Easy"`` or ``"A Hard"``.

    This only looks at the leading letter, so words like
    "hour" or "unicorn" are not special-cased.
    """
    article = "an" if word[:1].lower() in "aeiou" and word else "a"

    if capitalize:
        article = article.capitalize()

    return f"{article} {word}"
