"""
Copyright (c) 2018-present HitchedSyringe

This Source Code Form is subject to the terms of the Mozilla Public
License, v. 2.0. If a copy of the MPL was not distributed with this
file, You can obtain one at https://mozilla.org/MPL/2.0/.
"""


from __future__ import annotations

# fmt: off
__all__ = (
    "Category",
    "Difficulty",
    "TriviaQuestion",
)
# fmt: on


from enum import Enum
from typing import TYPE_CHECKING, Any, Mapping, NamedTuple, Tuple

if TYPE_CHECKING:
    from typing_extensions import Self


class Difficulty(Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"

    @property
    def colour(self) -> int:
        return _DIFFICULTY_COLOURS[self]


_DIFFICULTY_COLOURS = {
    Difficulty.EASY: 0x00CC00,
    Difficulty.MEDIUM: 0xCC6600,
    Difficulty.HARD: 0xCC0000,
}


class Category(NamedTuple):
    id: int
    name: str


class TriviaQuestion(NamedTuple):
    category: str
    difficulty: Difficulty
    text: str
    correct_answer: str
    incorrect_answers: Tuple[str, ...]

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> Self:
        """Builds a question from a single entry of the provider's
        ``results`` array.

        Raises
        ------
        KeyError
            A required field is missing.
        ValueError
            The difficulty is not recognised.
        """
        return cls(
            category=payload["category"],
            difficulty=Difficulty(payload["difficulty"]),
            text=payload["question"],
            correct_answer=payload["correct_answer"],
            incorrect_answers=tuple(payload["incorrect_answers"]),
        )

    @property
    def answers(self) -> Tuple[str, ...]:
        return (self.correct_answer, *self.incorrect_answers)
