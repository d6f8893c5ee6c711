"""Unit tests for formula compilation and evaluation."""

import pytest

from dicebag.errors import FormulaError
from dicebag.formula import compile_formula


class TestCompileFormula:
    def test_addition(self) -> None:
        assert compile_formula("$0 + $1")({"$0": 3, "$1": 4}) == 7

    def test_operator_precedence_and_parentheses(self) -> None:
        evaluate = compile_formula("( $0 + $1 ) * $2 - $3")
        assert evaluate({"$0": 1, "$1": 2, "$2": 3, "$3": 4}) == 5

    def test_caret_is_power(self) -> None:
        assert compile_formula("$0 ^ $1")({"$0": 2, "$1": 3}) == 8

    def test_modulo(self) -> None:
        assert compile_formula("$0 % $1")({"$0": 17, "$1": 5}) == 2

    def test_unary_minus(self) -> None:
        assert compile_formula("- $0 + $1")({"$0": 3, "$1": 10}) == 7

    def test_integral_division_is_int(self) -> None:
        result = compile_formula("$0 / $1")({"$0": 12, "$1": 4})
        assert result == 3
        assert isinstance(result, int)

    def test_fractional_division_is_float(self) -> None:
        assert compile_formula("$0 / $1")({"$0": 7, "$1": 2}) == 3.5

    def test_slot_names_do_not_collide(self) -> None:
        values = {f"${i}": i for i in range(12)}
        assert compile_formula("$1 + $10 + $11")(values) == 22

    @pytest.mark.parametrize("formula", ["$0 +", "( $0", "$0 $1", ""])
    def test_syntax_errors(self, formula: str) -> None:
        with pytest.raises(FormulaError, match="Invalid formula"):
            compile_formula(formula)

    def test_division_by_zero(self) -> None:
        evaluate = compile_formula("$0 / $1")
        with pytest.raises(FormulaError, match="Invalid formula"):
            evaluate({"$0": 1, "$1": 0})

    def test_infinite_result(self) -> None:
        evaluate = compile_formula("$0 / 1 * 10 ^ 308 * 10")
        with pytest.raises(FormulaError, match="Invalid formula: result is not a finite number"):
            evaluate({"$0": 6})

    def test_nan_result(self) -> None:
        evaluate = compile_formula("$0 / 1 * 10 ^ 308 * 10 - $0 / 1 * 10 ^ 308 * 10")
        with pytest.raises(FormulaError, match="not a finite number"):
            evaluate({"$0": 6})

    def test_result_too_large(self) -> None:
        evaluate = compile_formula("$0 * 10 ^ 3000 * 10 ^ 2000")
        with pytest.raises(FormulaError, match="Invalid formula: result is too large"):
            evaluate({"$0": 1})

    def test_unknown_slot(self) -> None:
        evaluate = compile_formula("$0 + $1")
        with pytest.raises(FormulaError):
            evaluate({"$0": 1})
