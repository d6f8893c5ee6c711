"""Shared test fixtures for the dicebag test suite.

scripted_rng
    Factory for a Randomizer that returns a fixed sequence of die faces, so
    executor and expression tests can assert exact totals. It fails loudly if a
    scripted value is outside the requested range or the script runs out.
"""

from __future__ import annotations

import pytest


class ScriptedRandom:
    def __init__(self, values: list[int]) -> None:
        self._values = list(values)
        self.calls: list[tuple[int, int]] = []

    def randint(self, a: int, b: int) -> int:
        self.calls.append((a, b))
        if not self._values:
            raise AssertionError(f"scripted randomizer exhausted after {len(self.calls) - 1} rolls")
        value = self._values.pop(0)
        if not a <= value <= b:
            raise AssertionError(f"scripted value {value} outside [{a}, {b}]")
        return value

    @property
    def remaining(self) -> int:
        return len(self._values)


@pytest.fixture
def scripted_rng():
    return ScriptedRandom
