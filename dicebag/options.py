"""Roll options: the modifier suffix that follows a dice group.

Supported modifiers (combinable, but keep and drop are mutually exclusive):

    !        exploding dice
    k3 kh3   keep the highest 3 rolls      kl3  keep the lowest 3
    d3 dl3   drop the lowest 3 rolls       dh3  drop the highest 3
    r1       reroll 1s
    r<3      reroll anything below 3       r<=3, r>3, r>=3 likewise
"""

from __future__ import annotations

import operator
import re
from collections.abc import Callable
from dataclasses import dataclass, field

from dicebag.cursor import StringCursor
from dicebag.errors import OptionsError

RerollRule = Callable[[int], bool]

COMMAND_CHARACTERS = "!kdr"

_KEEP_DROP_ARGS = re.compile(r"(?P<side>[hl]?)(?P<count>\d+)", re.IGNORECASE)
_REROLL_ARGS = re.compile(r"(?P<comparator>[<>]?=?)(?P<target>\d+)")
# Longest argument converted to an int
_MAX_ARG_DIGITS = 9

_COMPARATORS: dict[str, Callable[[int, int], bool]] = {
    "": operator.eq,
    "<": operator.lt,
    "<=": operator.le,
    ">": operator.gt,
    ">=": operator.ge,
}

_BOTH_KEEP_AND_DROP = 'Cannot enable both "keep" and "drop" options simultaneously.'
_USAGE = {
    "k": "You must specify valid options for the (k)eep modifier, e.g. k3, kl2, kh2",
    "d": "You must specify valid options for the (d)rop modifier, e.g. d3, dl2, dh3",
    "r": "You must specify valid options for the (r)eroll modifier, e.g. r1, r<5, r>=10",
}


def is_command_char(char: str) -> bool:
    return bool(char) and char in COMMAND_CHARACTERS


def _to_int(digits: str) -> int:
    digits = digits.lstrip("0") or "0"
    if len(digits) > _MAX_ARG_DIGITS:
        raise OptionsError(f"Roll option argument is too large (max {_MAX_ARG_DIGITS} digits)")
    return int(digits)


def build_reroll_rule(target: int, comparator: str = "") -> RerollRule:
    """Build a predicate that says whether a rolled value must be rerolled.

    Args:
        target: The value the roll is compared against.
        comparator: ``""`` for an exact match, or one of ``<``, ``<=``, ``>``, ``>=``.

    Returns:
        A pure ``value -> bool`` function. Unknown comparators give a rule that
        never asks for a reroll.
    """
    compare = _COMPARATORS.get(comparator)
    if compare is None:
        return lambda value: False
    return lambda value: compare(value, target)


@dataclass
class RollOptions:
    """Parsed modifier state for one dice group."""

    original: str = ""
    exploding: bool = False
    keep: int | None = None
    drop: int | None = None
    highest: bool = False
    lowest: bool = False
    reroll_rules: list[RerollRule] = field(default_factory=list)
    error: str | None = None

    @classmethod
    def parse(cls, text: str | None) -> RollOptions:
        """Parse a modifier suffix such as ``"kh2r<3!"``.

        Parsing stops at the first error; the error is recorded on the returned
        object and no later modifier takes effect.
        """
        options = cls(original=text or "")
        cursor = StringCursor(options.original)
        try:
            while cursor.has_next:
                discarded = cursor.next_until(is_command_char)
                if discarded.strip():
                    raise OptionsError(f"Unrecognized roll options: {discarded.strip()}")
                command = cursor.next_char()
                if command is None:
                    break
                options._apply(command, cursor)
        except OptionsError as exc:
            options.error = str(exc)
        return options

    def _apply(self, command: str, cursor: StringCursor) -> None:
        if command == "!":
            self.exploding = True
        elif command in ("k", "d"):
            self._apply_keep_drop(command, cursor)
        elif command == "r":
            self._apply_reroll(cursor)

    def _apply_keep_drop(self, command: str, cursor: StringCursor) -> None:
        args = cursor.next_with(_KEEP_DROP_ARGS)
        if not args:
            raise OptionsError(_USAGE[command])
        count = _to_int(args["count"])
        if count < 1:
            raise OptionsError(_USAGE[command])
        if (command == "k" and self.drop) or (command == "d" and self.keep):
            raise OptionsError(_BOTH_KEEP_AND_DROP)

        side = args["side"].lower()
        if command == "k":
            # keep defaults to the highest rolls
            self.highest = side != "l"
            self.keep = count
        else:
            # drop defaults to the lowest rolls
            self.highest = side == "h"
            self.drop = count
        self.lowest = not self.highest

    def _apply_reroll(self, cursor: StringCursor) -> None:
        args = cursor.next_with(_REROLL_ARGS)
        if not args:
            raise OptionsError(_USAGE["r"])
        self.reroll_rules.append(build_reroll_rule(_to_int(args["target"]), args["comparator"]))

    @property
    def is_valid(self) -> bool:
        return self.error is None

    def need_reroll(self, value: int) -> bool:
        """Return True when any reroll rule matches ``value``."""
        return any(rule(value) for rule in self.reroll_rules)

    def __str__(self) -> str:
        return self.original


def find_options(cursor: StringCursor) -> str:
    """Consume the modifier suffix at the cursor and return it unparsed.

    Only command characters and the argument shapes they accept are consumed,
    so ``4d6k2 + 1`` stops right after ``k2``.
    """
    consumed: list[str] = []
    while is_command_char(cursor.peek()):
        command = cursor.next_char()
        consumed.append(command)
        if command in ("k", "d"):
            args = cursor.next_with(_KEEP_DROP_ARGS)
        elif command == "r":
            args = cursor.next_with(_REROLL_ARGS)
        else:
            args = None
        if args:
            consumed.append(args.group(0))
    return "".join(consumed)
