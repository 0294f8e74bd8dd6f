"""Order randomization used when a quiz is delivered."""

from __future__ import annotations

from collections.abc import Sequence
import random
from typing import TypeVar

T = TypeVar("T")

_rng = random.Random()


def shuffle_items(items: Sequence[T], rng: random.Random | None = None) -> list[T]:
    """Return a shuffled copy of ``items``; the input is left untouched."""
    shuffled = list(items)
    # random.shuffle is an in-place Fisher-Yates pass
    (rng or _rng).shuffle(shuffled)
    return shuffled
