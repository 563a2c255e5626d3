"""End-to-end tests: text in, number or typed error out."""

from __future__ import annotations

import logging

import pytest

from exprcalc import calculate
from exprcalc.core.errors import (
    ErrorContext,
    EvalError,
    EvalErrorKind,
    ExprCalcError,
    LexError,
    ParseError,
)


class TestScenarios:
    """Concrete expressions and their values."""

    @pytest.mark.parametrize(
        ("expression", "expected"),
        [
            ("2 * 3 / 4 ^ 2", 0.375),
            ("2 + 3 * 4", 14.0),
            ("10 - 2 * 3", 4.0),
            ("(2 + 3) * 4", 20.0),
            ("2 ^ 3 ^ 2", 512.0),
            ("8 / 2 / 2", 2.0),
            ("-5 + 3 * 2", 1.0),
            ("2 * -3", -6.0),
            ("2 * (23 - 2.5 *2) ^2 /2 *3 + log(231)", 977.4424177105218),
            ("abs(-3) + 4 * 2", 11.0),
            ("-2 ^ 2", -4.0),
            ("(-2) ^ 2", 4.0),
            ("log(2, 8) + sqrt(16)", 7.0),
            ("factorial(5) / pow(2, 3)", 15.0),
            ("((1 + 2) * (3 + 4))", 21.0),
        ],
    )
    def test_value(self, expression: str, expected: float) -> None:
        assert abs(calculate(expression) - expected) < 1e-6

    def test_long_flat_sum(self) -> None:
        assert calculate(" + ".join(["1"] * 1000)) == 1000.0

    def test_long_mixed_chain(self) -> None:
        source = " - ".join(["2 * 3 / 3"] * 1000)
        assert calculate(source) == 2.0 - 2.0 * 999

    def test_signum_keeps_sign_of_rounded_zero(self) -> None:
        assert calculate("signum(ceil(-0.5))") == -1.0
        assert calculate("signum(trunc(-0.5))") == -1.0


class TestStageErrors:
    """Each stage raises its own error type."""

    def test_division_by_zero(self) -> None:
        with pytest.raises(EvalError) as exc_info:
            calculate("10 / 0")
        assert exc_info.value.kind == EvalErrorKind.DIVISION_BY_ZERO

    def test_sqrt_of_negative(self) -> None:
        with pytest.raises(EvalError) as exc_info:
            calculate("sqrt(-4)")
        assert exc_info.value.kind == EvalErrorKind.DOMAIN_ERROR

    def test_unknown_function(self) -> None:
        with pytest.raises(EvalError) as exc_info:
            calculate("banana(1)")
        assert exc_info.value.kind == EvalErrorKind.UNKNOWN_FUNCTION

    def test_unmatched_parenthesis(self) -> None:
        with pytest.raises(ParseError):
            calculate("(2 + 3")

    def test_invalid_character(self) -> None:
        with pytest.raises(LexError):
            calculate("2 # 3")

    @pytest.mark.parametrize("source", ["", "2 # 3", "(2 + 3", "10 / 0"])
    def test_common_base_class(self, source: str) -> None:
        with pytest.raises(ExprCalcError):
            calculate(source)


class TestErrorContext:
    """Errors with a position can point at the source."""

    def test_marker_under_column(self) -> None:
        assert ErrorContext(source="2 + )", column=4).format() == "  | 2 + )\n        ^"

    def test_from_parse_error(self) -> None:
        with pytest.raises(ParseError) as exc_info:
            calculate("1 + 2)")
        context = exc_info.value.context("1 + 2)")
        assert context is not None
        assert context.format().splitlines()[1].index("^") == len("  | ") + 5

    def test_eval_error_has_no_position(self) -> None:
        with pytest.raises(EvalError) as exc_info:
            calculate("1 / 0")
        assert exc_info.value.context("1 / 0") is None


class TestLogging:
    """The pipeline logs each stage at DEBUG."""

    def test_debug_records(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.DEBUG, logger="exprcalc.core.pipeline"):
            calculate("1 + 2")
        messages = [r.getMessage() for r in caplog.records]
        assert any("3 tokens" in m for m in messages)
        assert any("= 3.0" in m for m in messages)
