"""
Copyright (c) 2018-present HitchedSyringe

This Source Code Form is subject to the terms of the Mozilla Public
License, v. 2.0. If a copy of the MPL was not distributed with this
file, You can obtain one at https://mozilla.org/MPL/2.0/.
"""


from __future__ import annotations

# fmt: off
__all__ = (
    "NO_PREFERENCE",
    "CategoryResolver",
)
# fmt: on


import logging
import random
import re
from typing import Iterable, List, Optional, Sequence, Tuple

from .question import Category


_LOG: logging.Logger = logging.getLogger(__name__)


# Tells the provider to pick a question from any category.
NO_PREFERENCE: Optional[int] = None


class CategoryResolver:
    """Resolves free-text category arguments to a category ID.

    Parameters
    ----------
    categories: Iterable[:class:`Category`]
        Every category known to the provider.
    rng: Optional[:class:`random.Random`]
        The random source used to break ties between matches.
    """

    __slots__: Tuple[str, ...] = ("categories", "_rng")

    def __init__(
        self, categories: Iterable[Category], *, rng: Optional[random.Random] = None
    ) -> None:
        self.categories: Tuple[Category, ...] = tuple(categories)
        self._rng: random.Random = rng or random.Random()

    def __len__(self) -> int:
        return len(self.categories)

    def matches(self, word: str) -> List[Category]:
        """Returns the categories whose names contain ``word`` as a
        whole word or, failing that, contain a word starting with it.

        Matching is case-insensitive.
        """
        escaped = re.escape(word)

        whole = re.compile(rf"\b{escaped}\b", re.IGNORECASE)
        found = [c for c in self.categories if whole.search(c.name)]

        if not found:
            prefix = re.compile(rf"\b{escaped}", re.IGNORECASE)
            found = [c for c in self.categories if prefix.search(c.name)]

        return found

    def resolve(self, words: Sequence[str]) -> Optional[int]:
        """Resolves the given words to a category ID.

        Ambiguous words resolve to a random match. Scanning stops at
        the first word matching exactly one category; otherwise later
        matches override earlier ones.

        Returns
        -------
        Optional[:class:`int`]
            The category ID, or :data:`NO_PREFERENCE` if nothing matched.
        """
        category_id = NO_PREFERENCE

        for word in words:
            if not word:
                continue

            found = self.matches(word)

            if not found:
                continue

            category_id = self._rng.choice(found).id

            if len(found) == 1:
                break

        _LOG.debug("Resolved category words %r to ID %s.", words, category_id)
        return category_id
