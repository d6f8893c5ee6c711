"""Face specifications and single-die rollers.

A face specification is either a number of faces (``int`` >= 2) or the name of a
special die registered in SPECIAL_DICE. Rolling goes through a Randomizer so
tests can inject a seeded or scripted source.
"""

from __future__ import annotations

import random
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Protocol

from dicebag.options import RollOptions


class Randomizer(Protocol):
    """Source of uniform integers. ``random.Random`` satisfies it."""

    def randint(self, a: int, b: int) -> int:
        """Return a uniform integer N with a <= N <= b."""
        ...


FaceSpec = int | str

# Process-wide default source; pass a Randomizer explicitly for reproducible rolls.
default_randomizer: Randomizer = random.Random()


def _fudge(rng: Randomizer) -> int:
    return rng.randint(1, 3) - 2


SPECIAL_DICE: Mapping[str, Callable[[Randomizer], int]] = MappingProxyType({"f": _fudge})


@dataclass
class RawRoll:
    """The fate of one physical die."""

    value: int
    rerolled: bool = False
    dropped: bool = False
    exploded: bool = False

    def __str__(self) -> str:
        exploded = "!" if self.exploded else ""
        dropped = "✖" if self.dropped else ""
        rerolled = "\U0001f503" if self.rerolled else ""
        return f"{self.value}{exploded}{dropped}{rerolled}"


def is_special(faces: FaceSpec) -> bool:
    return isinstance(faces, str) and faces in SPECIAL_DICE


def roll_face(faces: FaceSpec, options: RollOptions, rng: Randomizer) -> RawRoll:
    """Roll one die and flag it against ``options``.

    Special dice never explode; numeric dice explode on their highest face when
    the options ask for it.
    """
    if isinstance(faces, str):
        value = SPECIAL_DICE[faces](rng)
        return RawRoll(value, rerolled=options.need_reroll(value))

    value = rng.randint(1, faces)
    return RawRoll(
        value,
        rerolled=options.need_reroll(value),
        exploded=options.exploding and value == faces,
    )
