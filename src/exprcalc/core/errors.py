"""
Error types for exprcalc tokenizing, parsing, and evaluation.

Each pipeline stage raises its own exception class. The ``kind`` attribute
tells callers why the stage failed without matching on message text.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import ClassVar


class LexErrorKind(StrEnum):
    """Reasons the tokenizer can reject input."""

    INVALID_CHARACTER = "invalid_character"


class ParseErrorKind(StrEnum):
    """Reasons the parser can reject a token sequence."""

    EMPTY_INPUT = "empty_input"
    UNEXPECTED_TOKEN = "unexpected_token"
    MISMATCHED_PARENTHESES = "mismatched_parentheses"
    UNEXPECTED_CLOSING_PARENTHESIS = "unexpected_closing_parenthesis"
    UNPARSABLE_EXPRESSION = "unparsable_expression"
    INVALID_NUMBER = "invalid_number"
    EMPTY_ARGUMENT = "empty_argument"


class EvalErrorKind(StrEnum):
    """Reasons evaluation of a well-formed tree can fail."""

    DIVISION_BY_ZERO = "division_by_zero"
    DOMAIN_ERROR = "domain_error"
    UNKNOWN_FUNCTION = "unknown_function"
    INTEGER_OVERFLOW = "integer_overflow"


class ExprCalcError(Exception):
    """Base exception for all exprcalc errors."""

    stage: ClassVar[str] = "exprcalc"

    def __init__(
        self,
        kind: LexErrorKind | ParseErrorKind | EvalErrorKind,
        message: str,
        pos: int | None = None,
    ) -> None:
        self.kind = kind
        self.message = message
        self.pos = pos
        super().__init__(message)

    def context(self, source: str) -> ErrorContext | None:
        """Locate this error in *source*, if it carries a position."""
        if self.pos is None:
            return None
        return ErrorContext(source=source, column=self.pos)


class LexError(ExprCalcError):
    """
    Raised when the input text contains a character no token starts with.

    Examples:
    - ``2 % 3``
    - ``x = 1``
    """

    stage = "lex"

    def __init__(self, kind: LexErrorKind, message: str, pos: int | None = None) -> None:
        super().__init__(kind, message, pos)


class ParseError(ExprCalcError):
    """
    Raised when a token sequence does not form an expression.

    Examples:
    - Empty input or empty parentheses
    - Unbalanced parentheses
    - A lone name such as ``pi``
    - Two operands with no operator between them
    """

    stage = "parse"

    def __init__(self, kind: ParseErrorKind, message: str, pos: int | None = None) -> None:
        super().__init__(kind, message, pos)


class EvalError(ExprCalcError):
    """
    Raised when a parsed expression cannot be given a numeric value.

    Examples:
    - Division by exactly zero
    - ``sqrt(-4)``, ``log(0)``, ``factorial(2.5)``
    - Unknown function name or wrong argument count
    - ``factorial(21)``, which overflows a 64-bit unsigned integer
    """

    stage = "eval"

    def __init__(self, kind: EvalErrorKind, message: str) -> None:
        super().__init__(kind, message)


@dataclass
class ErrorContext:
    """
    Location of an error inside the source text.

    Attributes:
        source: The full expression text
        column: 0-based character offset of the failure
    """

    source: str
    column: int

    def format(self) -> str:
        """
        Format the source line with a marker under the failing column.

        Returns:
            Two lines, e.g. ``"  | 2 + )"`` and ``"  |     ^"``
        """
        prefix = "  | "
        line = self.source.replace("\n", " ").replace("\t", " ")
        marker = " " * (len(prefix) + min(self.column, len(line))) + "^"
        return f"{prefix}{line}\n{marker}"
