"""
Tokenizer for exprcalc arithmetic expressions.

Converts an expression string into a flat sequence of typed tokens.
Numeric literals keep their raw text; converting them to floats is the
parser's job.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum, auto

from exprcalc.core.errors import LexError, LexErrorKind


class TokenKind(StrEnum):
    """Token types for arithmetic expressions."""

    # Punctuation
    LPAREN = auto()
    RPAREN = auto()
    COMMA = auto()

    # Literals and identifiers
    NUMBER = auto()
    NAME = auto()

    # Operators: + - * / ^
    SYMBOL = auto()


SYMBOLS = frozenset("+-*/^")

_PUNCTUATION: dict[str, TokenKind] = {
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
    ",": TokenKind.COMMA,
}


@dataclass(frozen=True, slots=True)
class Token:
    """A single token from the expression tokenizer."""

    kind: TokenKind
    value: str
    pos: int = field(default=0, compare=False)

    def __repr__(self) -> str:
        return f"Token({self.kind}, {self.value!r}, pos={self.pos})"

    def is_symbol(self, *symbols: str) -> bool:
        """True for a SYMBOL token whose character is one of *symbols*."""
        return self.kind == TokenKind.SYMBOL and self.value in symbols


def tokenize(source: str) -> list[Token]:
    """Tokenize an expression string into a list of tokens.

    Raises:
        LexError: If a character starts no token.
    """
    tokens: list[Token] = []
    i = 0
    n = len(source)

    while i < n:
        c = source[i]

        if c.isspace():
            i += 1
            continue

        # Numbers: a digit, then digits and decimal points. "1.2.3" is
        # accepted here and rejected when the parser converts it.
        if c.isdecimal():
            end = i + 1
            while end < n and (source[end].isdecimal() or source[end] == "."):
                end += 1
            tokens.append(Token(TokenKind.NUMBER, source[i:end], i))
            i = end
            continue

        # Names: a letter, then letters and digits
        if c.isalpha():
            end = i + 1
            while end < n and source[end].isalnum():
                end += 1
            tokens.append(Token(TokenKind.NAME, source[i:end], i))
            i = end
            continue

        if c in _PUNCTUATION:
            tokens.append(Token(_PUNCTUATION[c], c, i))
            i += 1
            continue

        if c in SYMBOLS:
            tokens.append(Token(TokenKind.SYMBOL, c, i))
            i += 1
            continue

        raise LexError(LexErrorKind.INVALID_CHARACTER, f"Unexpected character: {c!r}", i)

    return tokens
