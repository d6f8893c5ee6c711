"""Canned responses for roll requests that are not dice notation at all."""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

SYNTAX_HELP = "\n".join(
    [
        "Supports standard dice notation, as well as some extended functionality.",
        "syntax: <roll>[<operator><roll><operator><roll>...][<operator><constant>] [label]",
        "roll: [<number of dice>]d<number of sides>[<modifiers>]",
        "      default number of dice: 1, at most 999",
        "number of sides: any integer of 2 or more, or f (for Fudge dice)",
        "operator: + - * / % ^ and parentheses",
        "constant: any integer",
        "modifiers:",
        "  ! - exploding dice, a maximum roll value causes an additional roll",
        "  d<number> - drop the lowest X rolls from this group",
        "  k<number> - keep the highest X rolls from this group",
        "  h - alter either d or k modifier to affect the highest rolls, e.g. dh3: drop the highest 3 rolls",
        "  l - alter either d or k modifier to affect the lowest rolls, e.g. kl2: keep the lowest 2 rolls",
        "  r - reroll based on certain rules",
        "    r4 - reroll all 4s",
        "    r<3 - reroll anything less than 3",
        "    r>=11 - reroll anything greater than or equal to 11",
        "modifiers can be combined, but d and k are mutually exclusive",
    ]
)

SPECIAL_RESPONSES: Mapping[str, str] = MappingProxyType(
    {
        "barrel": "Donkey Kong rolls a barrel down the ramp and crushes you. -1000pts",
        "rick": "No.",
        "katamari": "Na naaaaa, na na na na na na, na na Katamari Damacy....",
        "help": SYNTAX_HELP,
        "syntax": SYNTAX_HELP,
    }
)


def get_special(text: str | None) -> str | None:
    """Return the canned response for ``text``, matched verbatim, or None."""
    if not text:
        return None
    return SPECIAL_RESPONSES.get(text)
