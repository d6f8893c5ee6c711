"""Tests for the roll request facade and special responses."""

import re
from unittest.mock import patch

import pytest

from dicebag.roll import DiceRoll, roll
from dicebag.special import SPECIAL_RESPONSES, SYNTAX_HELP, get_special


class TestSpecial:
    def test_rick(self) -> None:
        result = DiceRoll("rick")
        assert str(result) == "No."
        assert result.expression is None

    def test_help_and_syntax(self) -> None:
        for text in ("help", "syntax"):
            assert roll(text).startswith("Supports standard dice notation")
            assert roll(text) == SYNTAX_HELP

    def test_lookup_is_verbatim(self) -> None:
        assert get_special(" rick") is None
        assert get_special("Rick") is None
        assert get_special("") is None
        assert get_special(None) is None

    def test_table_is_read_only(self) -> None:
        with pytest.raises(TypeError):
            SPECIAL_RESPONSES["rick"] = "Yes."  # type: ignore[index]


class TestDiceRoll:
    def test_invalid_roll(self) -> None:
        result = DiceRoll("something")
        assert result.expression is not None
        assert not result.expression.is_valid
        assert str(result) == "Invalid roll: No dice to roll. Try help"

    def test_input_is_kept(self) -> None:
        assert DiceRoll("d6").input == "d6"

    def test_summary(self, scripted_rng) -> None:
        result = DiceRoll("2d6 + 3 for damage", detailed=False, rng=scripted_rng([4, 5]))
        assert result.result == "Total: 12 for damage"

    def test_detailed_complex_roll(self) -> None:
        result = DiceRoll("4d6k2 + 3d10-8", detailed=True)
        assert result.expression.is_valid
        lines = str(result).split("\r\n")
        assert re.fullmatch(r"Total: -?\d+", lines[0])
        assert lines[1] == "Formula: 4d6k2 + 3d10 - 8"
        assert lines[2] == "Rolls:"
        assert re.fullmatch(r"\(4d6k2\) \[(\d[^,]*,?){4}\] = \d+", lines[3])
        assert re.fullmatch(r"\(3d10\) \[(\d{1,2},?){3}\] = \d+", lines[4])
        assert len(lines) == 5

    def test_execution_error(self) -> None:
        assert roll("3d6d3").startswith("Invalid values:\r\n")

    def test_formula_error(self) -> None:
        assert roll("d6 * (2").startswith("Invalid formula")

    @pytest.mark.parametrize(
        "text",
        [
            "1" * 5000 + "d6",
            "d" + "9" * 5000,
            "d6 + " + "7" * 5000,
            "4d6k" + "1" * 5000,
            "d6 * 10 ^ 3000 * 10 ^ 2000",
            "d6 / 1 * 10 ^ 308 * 10",
        ],
    )
    @pytest.mark.parametrize("detailed", [False, True])
    def test_oversized_numbers_report_errors(self, text: str, detailed: bool) -> None:
        assert roll(text, detailed=detailed).startswith("Invalid ")

    def test_detailed_defaults_to_settings(self, scripted_rng) -> None:
        with patch("dicebag.roll.settings.detailed", True):
            result = roll("d6", rng=scripted_rng([3]))
        assert result.split("\r\n")[:2] == ["Total: 3", "Formula: 1d6"]

    def test_summary_by_default(self, scripted_rng) -> None:
        with patch("dicebag.roll.settings.detailed", False):
            assert roll("d6", rng=scripted_rng([3])) == "Total: 3"

    def test_fudge_results(self) -> None:
        for _ in range(30):
            assert roll("1df", detailed=False) in ("Total: -1", "Total: 0", "Total: 1")
