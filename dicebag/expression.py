"""Expression assembler: turns a whole roll request into named values and a formula.

``4d6k2 + 3d10-8 for damage`` becomes the values ``$0 = 4d6k2``, ``$1 = 3d10``,
``$2 = 8``, the formula ``$0 + $1 - $2`` and the label ``for damage``.
"""

from __future__ import annotations

import logging
import re

from dicebag.cursor import StringCursor
from dicebag.dice import Constant, DiceGroup, Value
from dicebag.errors import FormulaError
from dicebag.formula import Number, compile_formula
from dicebag.options import find_options
from dicebag.rollers import Randomizer

logger = logging.getLogger(__name__)

_DICE_RE = re.compile(r"(?P<dice>\d*)[dD](?P<faces>\d+|f)")
_CONSTANT_RE = re.compile(r"\d+")
_OPERATOR_RE = re.compile(r"[-+*/%^()]")
_MAX_CONSTANT_DIGITS = 1000

NO_DICE_ERROR = "Invalid roll: No dice to roll. Try help"
CONSTANT_TOO_LARGE_ERROR = (
    f"Invalid roll: Constant is too large (max {_MAX_CONSTANT_DIGITS} digits)"
)


class Expression:
    """A parsed roll request.

    Built by parse_expression(); execute() rolls it once. After that the object is
    only read for formatting.
    """

    def __init__(self, original: str) -> None:
        self.original = original
        self.segments: list[str] = []
        self.values: list[Value] = []
        self.label: str | None = None
        self.result: Number | None = None
        self.error: str | None = None

    @property
    def is_valid(self) -> bool:
        return self.error is None

    @property
    def formula(self) -> str:
        return " ".join(self.segments)

    @property
    def notation(self) -> str:
        """The formula with every slot name replaced by its value's notation."""
        by_name = {value.name: value.notation for value in self.values}
        return " ".join(by_name.get(segment, segment) for segment in self.segments)

    @property
    def dice_groups(self) -> list[DiceGroup]:
        return [value for value in self.values if isinstance(value, DiceGroup)]

    def add_value(self, value: Value) -> None:
        value.name = f"${len(self.values)}"
        self.values.append(value)
        self.segments.append(value.name)

    def add_operator(self, token: str) -> None:
        self.segments.append(token)

    def execute(self, rng: Randomizer | None = None) -> None:
        """Roll every dice group once and evaluate the formula.

        Failures are recorded on ``error``; nothing is raised for bad input.
        """
        if not self.is_valid:
            return

        invalid = [
            f"({value.notation}) {value.error}"
            for value in self.values
            if isinstance(value, DiceGroup) and not value.is_valid
        ]
        if invalid:
            self.error = "Invalid values:\r\n" + "\r\n".join(invalid)
            return

        try:
            evaluate = compile_formula(self.formula)
            scope: dict[str, Number] = {}
            for value in self.values:
                match value:
                    case DiceGroup():
                        scope[value.name] = value.roll(rng)
                    case Constant():
                        scope[value.name] = value.value
            self.result = evaluate(scope)
        except FormulaError as exc:
            self.error = str(exc)
            return

        logger.debug("Rolled %r: %s = %s", self.original, self.notation, self.result)

    def summary(self) -> str:
        if not self.is_valid:
            return self.error
        if self.label:
            return f"Total: {self.result} {self.label}"
        return f"Total: {self.result}"

    def details(self) -> str:
        if not self.is_valid:
            return self.error
        lines = []
        if self.label:
            lines.append(self.label)
        lines.append(f"Total: {self.result}")
        lines.append(f"Formula: {self.notation}")
        lines.append("Rolls:")
        lines.extend(group.describe() for group in self.dice_groups)
        return "\r\n".join(lines)

    def __str__(self) -> str:
        return self.summary()


def parse_expression(text: str) -> Expression:
    """Scan ``text`` into an Expression.

    At each position, after skipping whitespace, a dice group is tried first,
    then a constant, then an operator. The first position where none of them
    match ends the scan, and whatever remains becomes the label.

    An expression without any dice group is invalid, and so is one holding a
    constant too long to convert.
    """
    expression = Expression(text)
    cursor = StringCursor(text.strip() if isinstance(text, str) else "")

    while cursor.has_next:
        cursor.skip_whitespace()

        match = cursor.next_with(_DICE_RE)
        if match:
            options = find_options(cursor)
            expression.add_value(DiceGroup.create(match["dice"], match["faces"], options))
            continue

        match = cursor.next_with(_CONSTANT_RE)
        if match:
            digits = match.group(0).lstrip("0") or "0"
            if len(digits) > _MAX_CONSTANT_DIGITS:
                expression.error = CONSTANT_TOO_LARGE_ERROR
                break
            expression.add_value(Constant(int(digits)))
            continue

        match = cursor.next_with(_OPERATOR_RE)
        if match:
            expression.add_operator(match.group(0))
            continue

        break

    label = cursor.remainder.strip()
    if label:
        expression.label = label

    if expression.is_valid and not expression.dice_groups:
        logger.debug("No dice found in %r", text)
        expression.error = NO_DICE_ERROR
    return expression
