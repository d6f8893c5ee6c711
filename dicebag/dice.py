"""Dice groups and the roll executor.

A dice group is one ``NdF[options]`` term, e.g. ``4d6k2``, ``d20!`` or ``3dfr0``.
Groups are validated when they are built and rolled once when their expression
executes. Constants are the literal integers of an expression.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from dicebag.errors import DiceError
from dicebag.options import RollOptions
from dicebag.rollers import (
    SPECIAL_DICE,
    FaceSpec,
    Randomizer,
    RawRoll,
    default_randomizer,
    roll_face,
)

_MAX_DICE = 999
_MAX_REROLLS = 50
# Longest digit run converted to an int; anything longer is out of range
_MAX_DIGITS = 9


def _sum_rolls(rolls: list[RawRoll]) -> int:
    return sum(r.value for r in rolls)


def _trim_rolls(rolls: list[RawRoll], start: int, end: int | None = None) -> int:
    """Sort ``rolls`` by value, keep the ``[start:end]`` slice and sum it.

    Everything outside the slice is marked dropped. The sort is stable, so equal
    values keep their rolling order.
    """
    ordered = sorted(rolls, key=lambda r: r.value)
    if end is None:
        end = len(ordered)
    for r in ordered[:start] + ordered[end:]:
        r.dropped = True
    return _sum_rolls(ordered[start:end])


def roll_group(
    dice: int,
    faces: FaceSpec,
    options: RollOptions,
    rng: Randomizer | None = None,
) -> tuple[list[RawRoll], int]:
    """Roll a dice group and reduce it to its kept total.

    Rerolled dice are replaced by an extra roll until the group has spent
    _MAX_REROLLS rerolls; after that a die stands as rolled. Every exploding die
    adds one more roll.

    Args:
        dice: Number of dice requested (already validated).
        faces: Number of faces or a special die name.
        options: Parsed modifiers for the group.
        rng: Random source; the process-wide default when omitted.

    Returns:
        A tuple of (every physical roll in order, reduced total).
    """
    rng = rng or default_randomizer
    details: list[RawRoll] = []
    roll_count = dice
    rerolls = 0

    while len(details) < roll_count:
        result = roll_face(faces, options, rng)
        details.append(result)

        if result.rerolled:
            if rerolls < _MAX_REROLLS:
                roll_count += 1
                rerolls += 1
            else:
                result.rerolled = False
        if result.exploded:
            roll_count += 1

    valid = [r for r in details if not r.rerolled]

    if options.drop:
        if options.highest:
            total = _trim_rolls(valid, 0, len(valid) - options.drop)
        else:
            total = _trim_rolls(valid, options.drop)
    elif options.keep:
        if options.lowest:
            total = _trim_rolls(valid, 0, options.keep)
        else:
            total = _trim_rolls(valid, len(valid) - options.keep)
    else:
        total = _sum_rolls(valid)

    return details, total


def _significant(digits: str) -> str:
    """Strip leading zeros so only significant digits count towards the limit."""
    return digits.lstrip("0") or "0"


def _parse_dice_count(text: str) -> int:
    if not text.isdigit():
        return 0
    digits = _significant(text)
    if len(digits) > _MAX_DIGITS:
        raise DiceError(f"Too many dice (max {_MAX_DICE})")
    return int(digits)


def _check_dice_count(count: int) -> None:
    if count < 1:
        raise DiceError("Invalid number of dice")
    if count > _MAX_DICE:
        raise DiceError(f"Too many dice: {count} (max {_MAX_DICE})")


def _parse_faces(text: str) -> FaceSpec:
    if text.isdigit():
        digits = _significant(text)
        if len(digits) > _MAX_DIGITS:
            raise DiceError(f"Too many faces (max {_MAX_DIGITS} digits)")
        faces = int(digits)
        if faces < 2:
            raise DiceError("You must have at least 2 faces to roll dice")
        return faces
    if text not in SPECIAL_DICE:
        raise DiceError(f"Invalid dice type: {text}")
    return text


@dataclass
class Constant:
    """A literal integer term."""

    value: int
    name: str = ""

    @property
    def notation(self) -> str:
        return str(self.value)

    def describe(self) -> str:
        return f"(constant) {self.value}"

    def __str__(self) -> str:
        return self.notation


@dataclass
class DiceGroup:
    """One ``NdF[options]`` term of an expression."""

    dice: int
    faces: FaceSpec
    options: RollOptions
    details: list[RawRoll] = field(default_factory=list)
    value: int = 0
    name: str = ""
    error: str | None = None

    @classmethod
    def create(cls, dice: str, faces: str, options: str = "") -> DiceGroup:
        """Build a group from the raw notation pieces, recording any validation error.

        Args:
            dice: Dice count text; empty means one die.
            faces: Face count digits or a special die name such as ``"f"``.
            options: Modifier suffix, e.g. ``"kh2!"``.
        """
        dice = dice or "1"
        group = cls(dice=0, faces=faces, options=RollOptions.parse(options))
        try:
            group.dice = _parse_dice_count(dice)
            _check_dice_count(group.dice)
            group.faces = _parse_faces(faces)
            group._check_options()
        except DiceError as exc:
            group.error = str(exc)
        return group

    def _check_options(self) -> None:
        if not self.options.is_valid:
            raise DiceError(f"Invalid options ({self.options}): {self.options.error}")
        if self.options.drop and self.options.drop >= self.dice:
            raise DiceError(
                f"Cannot drop {self.options.drop} dice when only {self.dice} are being rolled."
            )
        if self.options.keep and self.options.keep > self.dice:
            raise DiceError(
                f"Cannot keep {self.options.keep} dice when only {self.dice} are being rolled."
            )

    @property
    def is_valid(self) -> bool:
        return self.error is None

    @property
    def notation(self) -> str:
        return f"{self.dice}d{self.faces}{self.options}"

    def roll(self, rng: Randomizer | None = None) -> int:
        """Roll the group, store the details and return the reduced total.

        Raises:
            DiceError: If the group failed validation.
        """
        if not self.is_valid:
            raise DiceError(f"Cannot roll {self.notation}: {self.error}")
        self.details, self.value = roll_group(self.dice, self.faces, self.options, rng)
        return self.value

    def describe(self) -> str:
        rolls = ",".join(str(r) for r in self.details)
        return f"({self.notation}) [{rolls}] = {self.value}"

    def __str__(self) -> str:
        return f"({self.notation}) {self.value}"


Value = Constant | DiceGroup
