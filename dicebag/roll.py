"""Roll request facade: special responses, or parse, execute and format."""

from __future__ import annotations

import logging

from dicebag.config import settings
from dicebag.expression import Expression, parse_expression
from dicebag.rollers import Randomizer
from dicebag.special import get_special

logger = logging.getLogger(__name__)


class DiceRoll:
    """One roll request and its text result.

    Args:
        text: The raw request, e.g. ``"4d6k2 + 3d10-8 for damage"`` or ``"help"``.
        detailed: Return the multi-line breakdown; ``settings.detailed`` when None.
        rng: Random source for the dice; the process-wide default when None.
    """

    def __init__(
        self,
        text: str,
        detailed: bool | None = None,
        rng: Randomizer | None = None,
    ) -> None:
        self.input = text
        self.expression: Expression | None = None

        special = get_special(text)
        if special is not None:
            self.result = special
            return

        if detailed is None:
            detailed = settings.detailed

        expression = parse_expression(text)
        self.expression = expression
        expression.execute(rng)
        if not expression.is_valid:
            logger.debug("Rejected roll %r: %s", text, expression.error)
        self.result = expression.details() if detailed else expression.summary()

    def __str__(self) -> str:
        return self.result


def roll(text: str, *, detailed: bool | None = None, rng: Randomizer | None = None) -> str:
    """Roll ``text`` and return the result line (or breakdown)."""
    return DiceRoll(text, detailed=detailed, rng=rng).result
