"""
Expression evaluator for exprcalc.

Walks an expression tree bottom-up and computes a float. Pure evaluation:
no I/O, no state kept between calls. Does NOT use Python's eval().

Arithmetic follows IEEE-754 double semantics. Where the math module
raises for an input that IEEE arithmetic maps to NaN or infinity (for
example ``asin(2)`` or ``exp(1000)``), the IEEE value is returned instead.
Only the domain restrictions listed in :data:`FUNCTIONS` raise.
"""

from __future__ import annotations

import math
from collections.abc import Callable
from dataclasses import dataclass

from exprcalc.core.errors import EvalError, EvalErrorKind
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

# Largest n whose factorial fits in an unsigned 64-bit integer
MAX_FACTORIAL_ARGUMENT = 20

_LEFT_ASSOCIATIVE = (Addition, Subtraction, Multiplication, Division)


def evaluate(expr: Expr) -> float:
    """Evaluate an expression tree.

    Operands are evaluated left to right; the first error aborts evaluation.

    Args:
        expr: Parsed expression tree.

    Returns:
        The computed value.

    Raises:
        EvalError: On division by zero, a domain violation, an unknown
            function, or factorial overflow.
    """
    if isinstance(expr, NumericLiteral):
        return expr.value

    if isinstance(expr, Minus):
        return -evaluate(expr.operand)

    if isinstance(expr, _LEFT_ASSOCIATIVE):
        return _evaluate_left_chain(expr)

    if isinstance(expr, Exponentiation):
        return _evaluate_power_chain(expr)

    if isinstance(expr, FunctionCall):
        return _call(expr)

    raise TypeError(f"Unknown expression type: {type(expr).__name__}")


def _evaluate_left_chain(expr: Addition | Subtraction | Multiplication | Division) -> float:
    """Evaluate a left-leaning run of binary nodes without recursing per node."""
    spine: list[Expr] = []
    node: Expr = expr
    while isinstance(node, _LEFT_ASSOCIATIVE):
        spine.append(node)
        node = node.left

    value = evaluate(node)
    for node in reversed(spine):
        value = _apply(node, value, evaluate(node.right))
    return value


def _apply(node: Expr, left: float, right: float) -> float:
    if isinstance(node, Addition):
        return left + right
    if isinstance(node, Subtraction):
        return left - right
    if isinstance(node, Multiplication):
        return left * right
    if right == 0.0:
        raise EvalError(EvalErrorKind.DIVISION_BY_ZERO, "Division by zero")
    return left / right


def _evaluate_power_chain(expr: Exponentiation) -> float:
    """a ^ (b ^ (c ^ ...)): bases left to right, then fold from the top."""
    bases: list[float] = []
    node: Expr = expr
    while isinstance(node, Exponentiation):
        bases.append(evaluate(node.left))
        node = node.right

    value = evaluate(node)
    for base in reversed(bases):
        value = _power(base, value)
    return value


def _call(expr: FunctionCall) -> float:
    """Dispatch on (name, arity). Arguments of unknown calls are never evaluated."""
    function = FUNCTIONS.get((expr.name, expr.arity))
    if function is None:
        raise EvalError(
            EvalErrorKind.UNKNOWN_FUNCTION,
            f"Unknown function: {expr.name}() with {expr.arity} argument(s)",
        )
    values = [evaluate(arg) for arg in expr.args]
    return function.impl(*values)


# ---------------------------------------------------------------------------
# IEEE-754 helpers
# ---------------------------------------------------------------------------


def _is_odd_integer(x: float) -> bool:
    return x.is_integer() and x % 2 == 1


def _power(base: float, exponent: float) -> float:
    """pow() with IEEE results where math.pow raises."""
    try:
        return math.pow(base, exponent)
    except OverflowError:
        if base < 0 and _is_odd_integer(exponent):
            return -math.inf
        return math.inf
    except ValueError:
        # Zero to a negative power is a pole; negative base with a
        # fractional exponent has no real result.
        if base == 0.0:
            if _is_odd_integer(exponent):
                return math.copysign(math.inf, base)
            return math.inf
        return math.nan


def _ieee(fn: Callable[[float], float]) -> Callable[[float], float]:
    """Wrap a math function so domain and range errors become NaN and inf."""

    def wrapper(x: float) -> float:
        try:
            return fn(x)
        except ValueError:
            return math.nan
        except OverflowError:
            return math.inf

    wrapper.__name__ = fn.__name__
    return wrapper


def _finite_only(fn: Callable[[float], int]) -> Callable[[float], float]:
    """Wrap an integer-rounding function so it returns floats and passes inf/NaN through."""

    def wrapper(x: float) -> float:
        if not math.isfinite(x):
            return x
        # ceil(-0.5) is -0.0, not 0.0
        return math.copysign(float(fn(x)), x)

    wrapper.__name__ = fn.__name__
    return wrapper


def _round_half_away(x: float) -> float:
    if not math.isfinite(x):
        return x
    magnitude = abs(x)
    whole = math.floor(magnitude)
    if magnitude - whole >= 0.5:
        whole += 1
    return math.copysign(float(whole), x)


def _signum(x: float) -> float:
    if math.isnan(x):
        return x
    return math.copysign(1.0, x)


# ---------------------------------------------------------------------------
# Domain-checked functions
# ---------------------------------------------------------------------------


def _domain_error(message: str) -> EvalError:
    return EvalError(EvalErrorKind.DOMAIN_ERROR, message)


def _log(x: float) -> float:
    if x <= 0.0:
        raise _domain_error("Logarithm of non-positive number")
    return math.log(x)


def _log10(x: float) -> float:
    if x <= 0.0:
        raise _domain_error("Logarithm of non-positive number")
    return math.log10(x)


def _log_base(base: float, value: float) -> float:
    if base <= 0.0 or base == 1.0 or value <= 0.0:
        raise _domain_error("Invalid logarithm base or value")
    return math.log(value, base)


def _sqrt(x: float) -> float:
    if x < 0.0:
        raise _domain_error("Square root of negative number")
    return math.sqrt(x)


def _cbrt(x: float) -> float:
    # Negative input is rejected even though the real cube root exists
    if x < 0.0:
        raise _domain_error("Cube root of negative number")
    return math.cbrt(x)


def _factorial(x: float) -> float:
    if x < 0.0 or not x.is_integer():
        raise _domain_error("Factorial of negative or non-integer number")
    if x > MAX_FACTORIAL_ARGUMENT:
        raise EvalError(
            EvalErrorKind.INTEGER_OVERFLOW,
            f"Factorial overflow: {x:g}! does not fit in 64 bits "
            f"(largest supported argument is {MAX_FACTORIAL_ARGUMENT})",
        )
    return float(math.factorial(int(x)))


# ---------------------------------------------------------------------------
# Function table
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Function:
    """One entry of the built-in function table."""

    name: str
    arity: int
    impl: Callable[..., float]
    domain: str = "any"
    description: str = ""


_TABLE = [
    Function("log", 1, _log, "x > 0", "natural logarithm"),
    Function("log10", 1, _log10, "x > 0", "base-10 logarithm"),
    Function("log", 2, _log_base, "base > 0, base != 1, x > 0", "logarithm of x in base"),
    Function("pow", 2, _power, description="base raised to exponent"),
    Function("sqrt", 1, _sqrt, "x >= 0", "square root"),
    Function("abs", 1, math.fabs, description="absolute value"),
    Function("sin", 1, _ieee(math.sin), description="sine (radians)"),
    Function("cos", 1, _ieee(math.cos), description="cosine (radians)"),
    Function("tan", 1, _ieee(math.tan), description="tangent (radians)"),
    Function("asin", 1, _ieee(math.asin), description="arc sine"),
    Function("acos", 1, _ieee(math.acos), description="arc cosine"),
    Function("atan", 1, math.atan, description="arc tangent"),
    Function("exp", 1, _ieee(math.exp), description="e raised to x"),
    Function("cbrt", 1, _cbrt, "x >= 0", "cube root"),
    Function("ceil", 1, _finite_only(math.ceil), description="round toward +inf"),
    Function("floor", 1, _finite_only(math.floor), description="round toward -inf"),
    Function("round", 1, _round_half_away, description="round half away from zero"),
    Function("trunc", 1, _finite_only(math.trunc), description="round toward zero"),
    Function("signum", 1, _signum, description="sign of x as 1.0 or -1.0"),
    Function("factorial", 1, _factorial, f"whole x, 0 <= x <= {MAX_FACTORIAL_ARGUMENT}", "x!"),
]

FUNCTIONS: dict[tuple[str, int], Function] = {(f.name, f.arity): f for f in _TABLE}
