"""
The text → number pipeline: tokenize, parse, evaluate.
"""

from __future__ import annotations

import logging

from exprcalc.core.evaluator import evaluate
from exprcalc.core.parser import parse
from exprcalc.core.tokenizer import tokenize

logger = logging.getLogger(__name__)


def calculate(source: str) -> float:
    """Evaluate an arithmetic expression string.

    Raises:
        LexError: If the text contains an unrecognised character.
        ParseError: If the tokens do not form an expression.
        EvalError: If the expression has no numeric value.
    """
    tokens = tokenize(source)
    logger.debug("Tokenized %r into %d tokens", source, len(tokens))

    expr = parse(tokens)
    logger.debug("Parsed %r as %s", source, expr)

    result = evaluate(expr)
    logger.debug("Evaluated %s = %r", expr, result)
    return result
