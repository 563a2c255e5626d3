"""
exprcalc core: tokenizer, parser, and evaluator for arithmetic expressions.

Usage:
    from exprcalc.core import calculate, evaluate, parse_expr

    expr = parse_expr("2 + 3 * 4")
    result = evaluate(expr)
    # result == 14.0
"""

from exprcalc.core.errors import (
    EvalError,
    EvalErrorKind,
    ExprCalcError,
    LexError,
    LexErrorKind,
    ParseError,
    ParseErrorKind,
)
from exprcalc.core.evaluator import FUNCTIONS, evaluate
from exprcalc.core.parser import parse, parse_expr
from exprcalc.core.pipeline import calculate
from exprcalc.core.tokenizer import Token, TokenKind, tokenize

__all__ = [
    "FUNCTIONS",
    "EvalError",
    "EvalErrorKind",
    "ExprCalcError",
    "LexError",
    "LexErrorKind",
    "ParseError",
    "ParseErrorKind",
    "Token",
    "TokenKind",
    "calculate",
    "evaluate",
    "parse",
    "parse_expr",
    "tokenize",
]
