"""
exprcalc - arithmetic expression parser and evaluator.

Turns text such as ``"2 * (3 + 4) ^ 2"`` or ``"log(2, 8) + sqrt(16)"``
into an expression tree and evaluates it to a float.
"""

from __future__ import annotations

from ._version import get_version
from .core import (
    FUNCTIONS,
    EvalError,
    ExprCalcError,
    LexError,
    ParseError,
    calculate,
    evaluate,
    parse,
    parse_expr,
    tokenize,
)

__version__ = get_version()

__all__ = [
    "__version__",
    "FUNCTIONS",
    "EvalError",
    "ExprCalcError",
    "LexError",
    "ParseError",
    "calculate",
    "evaluate",
    "parse",
    "parse_expr",
    "tokenize",
]
