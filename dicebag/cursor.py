"""Position-tracking cursor over an immutable notation string.

Every parser in the package reads its input through a StringCursor. Absence of
a match is always reported as ``None`` or an empty string, never an exception.
"""

from __future__ import annotations

import re
from collections.abc import Callable

WHITESPACE = " \t\r\n"


class StringCursor:
    """A forward-only read head over ``text``.

    ``position`` may be reassigned by callers (tests rewind it), but none of the
    consumption methods ever move it backwards.
    """

    def __init__(self, text: str) -> None:
        if not isinstance(text, str):
            text = ""
        self._text = text
        self.position = 0

    @property
    def has_next(self) -> bool:
        return self.position < len(self._text)

    @property
    def remainder(self) -> str:
        return self._text[self.position :]

    def next_char(self) -> str | None:
        """Return the current character and advance, or None at the end."""
        if not self.has_next:
            return None
        char = self._text[self.position]
        self.position += 1
        return char

    def peek(self, distance: int = 1) -> str:
        """Return up to ``distance`` characters without advancing."""
        return self._text[self.position : self.position + max(distance, 0)]

    def next_until(self, predicate: Callable[[str], bool]) -> str:
        """Consume characters until ``predicate`` returns True for one."""
        start = self.position
        while self.has_next and not predicate(self._text[self.position]):
            self.position += 1
        return self._text[start : self.position]

    def next_while(self, predicate: Callable[[str], bool]) -> str:
        """Consume characters for as long as ``predicate`` returns True."""
        return self.next_until(lambda char: not predicate(char))

    def next_with(self, pattern: str | re.Pattern[str]) -> re.Match[str] | None:
        """Match ``pattern`` anchored at the current position.

        On success the cursor moves past the whole match and the match object is
        returned; on failure the position is left untouched.

        Args:
            pattern: A regex (string or compiled). It is anchored at the cursor
                position, so it should not start with ``^``.

        Returns:
            The ``re.Match`` for the consumed text, or None.
        """
        if isinstance(pattern, str):
            pattern = re.compile(pattern)
        match = pattern.match(self._text, self.position)
        if match:
            self.position = match.end()
        return match

    def skip_whitespace(self) -> None:
        self.next_while(lambda char: char in WHITESPACE)

    def __str__(self) -> str:
        return self._text
