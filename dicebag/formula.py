"""Compile and evaluate the arithmetic formula behind an expression.

The formula is assembled from an expression's segments and evaluated against
the values of its slots with simpleeval.

Slot names (``$0``, ``$1``, ...) are not Python identifiers, so they are
rewritten to ``slot0``, ``slot1``, ... before parsing. ``^`` means
exponentiation in dice notation and is rewritten to ``**``.
"""

from __future__ import annotations

import logging
import math
import re
from collections.abc import Callable, Mapping

from simpleeval import InvalidExpression, SimpleEval

from dicebag.errors import FormulaError

logger = logging.getLogger(__name__)

Number = int | float

_SLOT_RE = re.compile(r"\$(\d+)")

# Results at or above this magnitude can't be reported as text
_RESULT_LIMIT = 10**1000


def _slot_to_identifier(name: str) -> str:
    """Convert a slot name to a valid identifier.

    Examples:
        "$0" -> "slot0"
        "$12" -> "slot12"
    """
    return _SLOT_RE.sub(r"slot\1", name)


def _prepare_formula(formula: str) -> str:
    return _slot_to_identifier(formula).replace("^", "**")


def _normalize(result: object) -> Number:
    if isinstance(result, bool) or not isinstance(result, (int, float)):
        raise FormulaError(f"Formula did not produce a number: {result!r}")
    if isinstance(result, float):
        if not math.isfinite(result):
            raise FormulaError("Invalid formula: result is not a finite number")
        if result.is_integer():
            return int(result)
        return result
    if abs(result) >= _RESULT_LIMIT:
        raise FormulaError("Invalid formula: result is too large")
    return result


def compile_formula(formula: str) -> Callable[[Mapping[str, Number]], Number]:
    """Compile a formula into a function of its slot values.

    Args:
        formula: Space-joined segments, e.g. "$0 + $1 - $2"

    Returns:
        A function taking a slot-name -> number mapping and returning the result.
        Integral float results come back as int.

    Raises:
        FormulaError: If the formula is not valid arithmetic, or (from the returned
            function) if evaluation fails or yields an infinite, NaN or oversized
            result.

    Examples:
        >>> compile_formula("$0 + $1")({"$0": 3, "$1": 4})
        7
        >>> compile_formula("( $0 + 1 ) ^ 2")({"$0": 2})
        9
    """
    prepared = _prepare_formula(formula)
    if not prepared.strip():
        raise FormulaError("Invalid formula: nothing to evaluate")
    try:
        parsed = SimpleEval.parse(prepared)
    except (SyntaxError, InvalidExpression) as exc:
        logger.debug("Failed to compile formula %r: %s", formula, exc)
        raise FormulaError(f"Invalid formula: {exc}") from exc

    def evaluate(values: Mapping[str, Number]) -> Number:
        names = {_slot_to_identifier(name): value for name, value in values.items()}
        evaluator = SimpleEval(names=names, functions={})
        try:
            result = evaluator.eval(prepared, previously_parsed=parsed)
        except (InvalidExpression, ArithmeticError) as exc:
            logger.debug("Failed to evaluate formula %r: %s", formula, exc)
            raise FormulaError(f"Invalid formula: {exc}") from exc
        return _normalize(result)

    return evaluate
