"""Tests for the exprcalc evaluator.

Trees are built directly here so evaluation is tested apart from parsing.
"""

from __future__ import annotations

import math
from collections.abc import Callable

import pytest

from exprcalc.core.errors import EvalError, EvalErrorKind
from exprcalc.core.evaluator import FUNCTIONS, MAX_FACTORIAL_ARGUMENT, evaluate
from exprcalc.core.expressions import (
    Addition,
    Division,
    Exponentiation,
    Expr,
    FunctionCall,
    Minus,
    Multiplication,
    NumericLiteral,
    Subtraction,
)

Num = Callable[[float], Expr]


def _call(name: str, *values: float) -> FunctionCall:
    return FunctionCall(name=name, args=[NumericLiteral(value=v) for v in values])


def _fails(expr: Expr) -> EvalErrorKind:
    with pytest.raises(EvalError) as exc_info:
        evaluate(expr)
    return exc_info.value.kind


class TestArithmetic:
    """Operators on numeric leaves."""

    def test_numeric_literal(self, num: Num) -> None:
        assert evaluate(num(42)) == 42.0

    def test_addition(self, num: Num) -> None:
        assert evaluate(Addition(left=num(2), right=num(3))) == 5.0

    def test_subtraction(self, num: Num) -> None:
        assert evaluate(Subtraction(left=num(10), right=num(3))) == 7.0

    def test_unary_minus(self, num: Num) -> None:
        assert evaluate(Minus(operand=num(5))) == -5.0

    def test_multiplication(self, num: Num) -> None:
        assert evaluate(Multiplication(left=num(4), right=num(5))) == 20.0

    def test_division(self, num: Num) -> None:
        assert evaluate(Division(left=num(15), right=num(3))) == 5.0

    def test_exponentiation(self, num: Num) -> None:
        assert evaluate(Exponentiation(left=num(2), right=num(3))) == 8.0

    def test_nested(self, num: Num) -> None:
        # ((2 + 2) - 1) = 3
        expr = Subtraction(left=Addition(left=num(2), right=num(2)), right=num(1))
        assert evaluate(expr) == 3.0

    def test_right_associative_power(self, num: Num) -> None:
        expr = Exponentiation(left=num(2), right=Exponentiation(left=num(3), right=num(2)))
        assert evaluate(expr) == 512.0

    def test_long_left_chain(self, num: Num) -> None:
        expr: Expr = num(0)
        for i in range(1, 2001):
            node = Addition if i % 2 else Subtraction
            expr = node(left=expr, right=num(i))
        # 0 + 1 - 2 + 3 - 4 ... - 2000: each pair adds -1
        assert evaluate(expr) == -1000.0

    def test_long_power_chain(self, num: Num) -> None:
        expr: Expr = num(2)
        for _ in range(2000):
            expr = Exponentiation(left=num(1), right=expr)
        assert evaluate(expr) == 1.0

    def test_division_inside_chain(self, num: Num) -> None:
        expr = Addition(left=Division(left=num(1), right=num(0)), right=num(1))
        assert _fails(expr) == EvalErrorKind.DIVISION_BY_ZERO

    def test_idempotent(self, num: Num) -> None:
        expr = Addition(left=_call("sqrt", 16), right=Division(left=num(1), right=num(3)))
        assert evaluate(expr) == evaluate(expr)


class TestDivisionByZero:
    """Only an exact zero divisor fails."""

    def test_zero(self, num: Num) -> None:
        assert _fails(Division(left=num(10), right=num(0))) == EvalErrorKind.DIVISION_BY_ZERO

    def test_negative_zero(self, num: Num) -> None:
        expr = Division(left=num(1), right=Minus(operand=num(0)))
        assert _fails(expr) == EvalErrorKind.DIVISION_BY_ZERO

    def test_computed_zero(self, num: Num) -> None:
        expr = Division(left=num(1), right=Subtraction(left=num(2), right=num(2)))
        assert _fails(expr) == EvalErrorKind.DIVISION_BY_ZERO

    def test_tiny_divisor(self, num: Num) -> None:
        assert evaluate(Division(left=num(1), right=num(1e-300))) == pytest.approx(1e300)

    def test_left_error_reported_first(self, num: Num) -> None:
        expr = Division(left=_call("sqrt", -1), right=num(0))
        assert _fails(expr) == EvalErrorKind.DOMAIN_ERROR


class TestPowerSemantics:
    """Exponentiation follows IEEE pow, returning NaN or inf instead of raising."""

    def test_fractional(self, num: Num) -> None:
        assert evaluate(Exponentiation(left=num(9), right=num(0.5))) == 3.0

    def test_negative_exponent(self, num: Num) -> None:
        assert evaluate(Exponentiation(left=num(2), right=Minus(operand=num(1)))) == 0.5

    def test_negative_base_fractional_exponent_is_nan(self, num: Num) -> None:
        expr = Exponentiation(left=Minus(operand=num(8)), right=num(0.5))
        assert math.isnan(evaluate(expr))

    def test_zero_to_negative_power_is_inf(self, num: Num) -> None:
        expr = Exponentiation(left=num(0), right=Minus(operand=num(1)))
        assert evaluate(expr) == math.inf

    def test_overflow_is_inf(self, num: Num) -> None:
        assert evaluate(Exponentiation(left=num(10), right=num(400))) == math.inf

    def test_negative_overflow_odd_exponent(self, num: Num) -> None:
        expr = Exponentiation(left=Minus(operand=num(10)), right=num(401))
        assert evaluate(expr) == -math.inf


class TestFunctions:
    """Every entry of the function table."""

    @pytest.mark.parametrize(
        ("name", "args", "expected"),
        [
            ("log", (math.e,), 1.0),
            ("log10", (1000,), 3.0),
            ("log", (2, 8), 3.0),
            ("pow", (2, 10), 1024.0),
            ("sqrt", (16,), 4.0),
            ("abs", (-3,), 3.0),
            ("sin", (0,), 0.0),
            ("cos", (0,), 1.0),
            ("tan", (0,), 0.0),
            ("asin", (1,), math.pi / 2),
            ("acos", (1,), 0.0),
            ("atan", (1,), math.pi / 4),
            ("exp", (1,), math.e),
            ("cbrt", (27,), 3.0),
            ("ceil", (1.2,), 2.0),
            ("floor", (-1.2,), -2.0),
            ("round", (2.5,), 3.0),
            ("round", (-2.5,), -3.0),
            ("round", (2.4,), 2.0),
            ("trunc", (-1.7,), -1.0),
            ("signum", (-4,), -1.0),
            ("signum", (4,), 1.0),
            ("factorial", (0,), 1.0),
            ("factorial", (5,), 120.0),
        ],
    )
    def test_value(self, name: str, args: tuple[float, ...], expected: float) -> None:
        assert evaluate(_call(name, *args)) == pytest.approx(expected)

    def test_every_table_entry_is_callable(self) -> None:
        for (name, arity), function in FUNCTIONS.items():
            assert function.name == name
            assert function.arity == arity
            evaluate(_call(name, *([2.0] * arity)))

    def test_rounding_returns_float(self) -> None:
        assert isinstance(evaluate(_call("floor", 2.7)), float)

    def test_rounding_passes_infinity_through(self) -> None:
        assert evaluate(_call("ceil", math.inf)) == math.inf

    @pytest.mark.parametrize("name", ["ceil", "trunc"])
    def test_rounding_to_zero_keeps_sign(self, name: str) -> None:
        result = evaluate(_call(name, -0.5))
        assert result == 0.0
        assert math.copysign(1.0, result) == -1.0

    def test_signum_of_negative_zero_result(self) -> None:
        expr = FunctionCall(name="signum", args=[_call("ceil", -0.5)])
        assert evaluate(expr) == -1.0

    def test_out_of_range_trig_is_nan(self) -> None:
        assert math.isnan(evaluate(_call("asin", 2)))
        assert math.isnan(evaluate(_call("sin", math.inf)))

    def test_exp_overflow_is_inf(self) -> None:
        assert evaluate(_call("exp", 1000)) == math.inf

    def test_largest_factorial(self) -> None:
        assert evaluate(_call("factorial", MAX_FACTORIAL_ARGUMENT)) == float(2432902008176640000)


class TestDomainErrors:
    """Restricted functions reject inputs outside their domain."""

    @pytest.mark.parametrize(
        ("name", "args"),
        [
            ("log", (0,)),
            ("log", (-1,)),
            ("log10", (0,)),
            ("log", (1, 8)),
            ("log", (-2, 8)),
            ("log", (2, 0)),
            ("sqrt", (-4,)),
            ("cbrt", (-8,)),
            ("factorial", (-1,)),
            ("factorial", (2.5,)),
        ],
    )
    def test_domain_error(self, name: str, args: tuple[float, ...]) -> None:
        assert _fails(_call(name, *args)) == EvalErrorKind.DOMAIN_ERROR

    def test_factorial_overflow(self) -> None:
        expr = _call("factorial", MAX_FACTORIAL_ARGUMENT + 1)
        assert _fails(expr) == EvalErrorKind.INTEGER_OVERFLOW

    def test_huge_factorial_overflow(self) -> None:
        assert _fails(_call("factorial", 1e6)) == EvalErrorKind.INTEGER_OVERFLOW


class TestUnknownFunctions:
    """Unknown names and wrong arities fail before arguments are evaluated."""

    def test_unknown_name(self) -> None:
        assert _fails(_call("banana", 1)) == EvalErrorKind.UNKNOWN_FUNCTION

    def test_wrong_arity(self) -> None:
        assert _fails(_call("sqrt", 1, 2)) == EvalErrorKind.UNKNOWN_FUNCTION

    def test_no_arguments(self) -> None:
        assert _fails(_call("sin")) == EvalErrorKind.UNKNOWN_FUNCTION

    def test_arguments_not_evaluated(self, num: Num) -> None:
        expr = FunctionCall(name="banana", args=[Division(left=num(1), right=num(0))])
        assert _fails(expr) == EvalErrorKind.UNKNOWN_FUNCTION

    def test_invalid_argument_still_unknown(self) -> None:
        assert _fails(_call("log", -1, -1, -1)) == EvalErrorKind.UNKNOWN_FUNCTION
