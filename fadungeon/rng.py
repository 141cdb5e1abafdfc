"""Seeded random number helpers shared by the dungeon generator."""

from __future__ import annotations

import random
from typing import Iterable, TypeVar

T = TypeVar("T")

_rng = random.Random()


def seed(value: int) -> None:
    """Reseed the generator so later draws are reproducible."""
    _rng.seed(value)


def random_in_range(minimum: int, maximum: int) -> int:
    """Return a uniformly chosen integer in the closed range [minimum, maximum]."""
    if maximum < minimum:
        raise ValueError(f"empty range: {minimum}..{maximum}")
    return _rng.randint(minimum, maximum)


def norm_rand(minimum: int, maximum: int) -> int:
    """Return an integer in [minimum, maximum], normally distributed around minimum.

    The standard deviation is a 3.5th of the range, so small values are the
    most likely; draws outside the range are rejected and redrawn.
    """
    if maximum < minimum:
        raise ValueError(f"empty range: {minimum}..{maximum}")
    sigma = (maximum - minimum) / 3.5
    while True:
        result = int(_rng.gauss(minimum, sigma))
        if minimum <= result <= maximum:
            return result


def choose_one(options: Iterable[T]) -> T:
    """Return one of the given options, chosen uniformly."""
    choices = tuple(options)
    if not choices:
        raise ValueError("no options to choose from")
    return choices[random_in_range(0, len(choices) - 1)]