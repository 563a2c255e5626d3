"""
Precedence-scanning parser for exprcalc expressions.

The parser works on whole token slices instead of a cursor. Each call
groups the slice into top-level atoms (single tokens, or balanced
parenthesis groups treated as opaque), finds the tier of operators that
binds loosest, splits the slice at every top-level operator of that tier,
and recurses into the operand slices. Chains are folded in a loop, so
recursion depth follows parenthesis nesting rather than chain length.

Resolution order for one slice:
    1. strip parentheses that wrap the whole slice
    2. single token        → numeric literal
    3. NAME "(" ... ")"    → function call, arguments split on top-level commas
    4. "+" / "-"           → every binary top-level match, folded left;
                             otherwise a leading "-" is unary negation
    5. "*" / "/"           → every top-level match, folded left
    6. "^"                 → every top-level match, folded right

A "-" is unary when it is the first atom, or when the atom before it ends
in a symbol, "(" or ",". Only a unary minus in first position is applied
by the additive tier; any other unary minus is left in place and becomes
the first atom of an operand slice at a later tier, so ``2 * -3`` parses
as ``2 * (-3)``. Unary minus binds looser than "^": ``-2 ^ 2`` is -4.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from exprcalc.core.errors import ParseError, ParseErrorKind
from exprcalc.core.expressions import (
    Addition,
    BinaryNode,
    Division,
    Exponentiation,
    Expr,
    FunctionCall,
    Minus,
    Multiplication,
    NumericLiteral,
    Subtraction,
)
from exprcalc.core.tokenizer import Token, TokenKind, tokenize

_BINARY_NODES: dict[str, type[BinaryNode]] = {
    "+": Addition,
    "-": Subtraction,
    "*": Multiplication,
    "/": Division,
    "^": Exponentiation,
}


# ---------------------------------------------------------------------------
# Top-level atoms
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class _Single:
    """One token outside any parentheses."""

    index: int

    @property
    def start(self) -> int:
        return self.index

    @property
    def end(self) -> int:
        return self.index


@dataclass(frozen=True, slots=True)
class _Group:
    """A balanced parenthesis span, both parentheses included."""

    start: int
    end: int


_Atom = _Single | _Group


def _group_top_level(tokens: Sequence[Token]) -> list[_Atom]:
    """Split *tokens* into atoms that are not nested inside parentheses."""
    atoms: list[_Atom] = []
    depth = 0
    group_start = 0

    for i, token in enumerate(tokens):
        if token.kind == TokenKind.LPAREN:
            if depth == 0:
                group_start = i
            depth += 1
        elif token.kind == TokenKind.RPAREN:
            if depth == 0:
                raise ParseError(
                    ParseErrorKind.UNEXPECTED_CLOSING_PARENTHESIS,
                    "Unexpected closing parenthesis",
                    token.pos,
                )
            depth -= 1
            if depth == 0:
                atoms.append(_Group(group_start, i))
        elif depth == 0:
            atoms.append(_Single(i))

    if depth != 0:
        raise ParseError(
            ParseErrorKind.MISMATCHED_PARENTHESES,
            "Mismatched parentheses: '(' is never closed",
            tokens[group_start].pos,
        )

    return atoms


def _wrapped_in_parentheses(tokens: Sequence[Token]) -> bool:
    """True when the '(' at index 0 is closed by the last token."""
    if len(tokens) < 2:
        return False
    if tokens[0].kind != TokenKind.LPAREN or tokens[-1].kind != TokenKind.RPAREN:
        return False

    depth = 0
    for i, token in enumerate(tokens):
        if token.kind == TokenKind.LPAREN:
            depth += 1
        elif token.kind == TokenKind.RPAREN:
            depth -= 1
            if depth == 0:
                return i == len(tokens) - 1
    return False


def _span(tokens: Sequence[Token], atoms: Sequence[_Atom]) -> Sequence[Token]:
    """The tokens covered by a run of consecutive atoms."""
    return tokens[atoms[0].start : atoms[-1].end + 1]


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


def parse(tokens: Sequence[Token]) -> Expr:
    """Parse a complete token sequence into an expression tree.

    Args:
        tokens: Output of :func:`~exprcalc.core.tokenizer.tokenize`.

    Returns:
        The expression tree.

    Raises:
        ParseError: If the tokens do not form an expression.
    """
    return _parse(tokens, None)


def _parse(tokens: Sequence[Token], anchor: int | None) -> Expr:
    """Parse one slice. *anchor* locates an empty slice for error reporting."""
    if not tokens:
        raise ParseError(ParseErrorKind.EMPTY_INPUT, "Empty input", anchor)

    while _wrapped_in_parentheses(tokens):
        anchor = tokens[0].pos + 1
        tokens = tokens[1:-1]
        if not tokens:
            raise ParseError(ParseErrorKind.EMPTY_INPUT, "Empty parentheses", anchor)

    if len(tokens) == 1:
        return _parse_single(tokens[0])

    atoms = _group_top_level(tokens)

    call = _match_function_call(tokens, atoms)
    if call is not None:
        return call

    expr = _split_additive(tokens, atoms)
    if expr is not None:
        return expr

    expr = _split_multiplicative(tokens, atoms)
    if expr is not None:
        return expr

    expr = _split_exponent(tokens, atoms)
    if expr is not None:
        return expr

    raise ParseError(
        ParseErrorKind.UNPARSABLE_EXPRESSION,
        "Unable to parse expression",
        tokens[0].pos,
    )


def _parse_single(token: Token) -> NumericLiteral:
    if token.kind != TokenKind.NUMBER:
        raise ParseError(
            ParseErrorKind.UNEXPECTED_TOKEN,
            f"Expected a number, got {token.kind} ({token.value!r})",
            token.pos,
        )
    try:
        value = float(token.value)
    except ValueError:
        raise ParseError(
            ParseErrorKind.INVALID_NUMBER,
            f"Invalid numeric literal: {token.value!r}",
            token.pos,
        ) from None
    return NumericLiteral(value=value)


def _match_function_call(tokens: Sequence[Token], atoms: list[_Atom]) -> FunctionCall | None:
    """NAME '(' (expr (',' expr)*)? ')'"""
    if len(atoms) != 2:
        return None
    head, group = atoms
    if not isinstance(head, _Single) or not isinstance(group, _Group):
        return None
    name_tok = tokens[head.index]
    if name_tok.kind != TokenKind.NAME:
        return None

    inner = tokens[group.start + 1 : group.end]
    if not inner:
        return FunctionCall(name=name_tok.value, args=[])

    # Split the interior on commas that are not nested in parentheses
    arg_atoms: list[list[_Atom]] = [[]]
    separators: list[Token] = []
    for atom in _group_top_level(inner):
        if isinstance(atom, _Single) and inner[atom.index].kind == TokenKind.COMMA:
            separators.append(inner[atom.index])
            arg_atoms.append([])
        else:
            arg_atoms[-1].append(atom)

    args: list[Expr] = []
    for i, run in enumerate(arg_atoms):
        if not run:
            at = separators[i].pos if i < len(separators) else separators[-1].pos
            raise ParseError(
                ParseErrorKind.EMPTY_ARGUMENT,
                f"Empty argument {i + 1} in call to {name_tok.value}()",
                at,
            )
        args.append(_parse(_span(inner, run), None))

    return FunctionCall(name=name_tok.value, args=args)


def _is_unary_minus(tokens: Sequence[Token], atoms: list[_Atom], position: int) -> bool:
    """A '-' is unary where a value is expected rather than after one."""
    if position == 0:
        return True
    previous = atoms[position - 1]
    if isinstance(previous, _Group):
        return False
    trailing = tokens[previous.index]
    return trailing.kind in (TokenKind.SYMBOL, TokenKind.LPAREN, TokenKind.COMMA)


def _operator_positions(
    tokens: Sequence[Token], atoms: list[_Atom], symbols: tuple[str, ...]
) -> list[int]:
    """Token indices of the top-level operators among *symbols*, left to right."""
    return [
        atom.index
        for atom in atoms
        if isinstance(atom, _Single) and tokens[atom.index].is_symbol(*symbols)
    ]


def _operands(tokens: Sequence[Token], operators: list[int]) -> list[Expr]:
    """Parse the slices around *operators*, left to right."""
    operands = [_parse(tokens[: operators[0]], tokens[operators[0]].pos)]
    bounds = [*operators, len(tokens)]
    for index, end in zip(bounds, bounds[1:]):
        operands.append(_parse(tokens[index + 1 : end], tokens[index].pos + 1))
    return operands


def _fold_left(tokens: Sequence[Token], operators: list[int]) -> Expr:
    # Same tree as splitting at the rightmost operator and recursing left
    operands = _operands(tokens, operators)
    expr = operands[0]
    for index, right in zip(operators, operands[1:]):
        expr = _BINARY_NODES[tokens[index].value](left=expr, right=right)
    return expr


def _split_additive(tokens: Sequence[Token], atoms: list[_Atom]) -> Expr | None:
    """Binary '+' and '-' chains, or a leading unary '-'."""
    operators: list[int] = []
    for position, atom in enumerate(atoms):
        if not isinstance(atom, _Single):
            continue
        token = tokens[atom.index]
        if token.is_symbol("-") and _is_unary_minus(tokens, atoms, position):
            # Negates the operand that follows; never splits the slice
            continue
        if token.is_symbol("+", "-"):
            operators.append(atom.index)

    if operators:
        return _fold_left(tokens, operators)

    first = tokens[0]
    if first.is_symbol("-"):
        return Minus(operand=_parse(tokens[1:], first.pos + 1))
    return None


def _split_multiplicative(tokens: Sequence[Token], atoms: list[_Atom]) -> Expr | None:
    operators = _operator_positions(tokens, atoms, ("*", "/"))
    if not operators:
        return None
    return _fold_left(tokens, operators)


def _split_exponent(tokens: Sequence[Token], atoms: list[_Atom]) -> Expr | None:
    """'^' chains, grouped from the right."""
    operators = _operator_positions(tokens, atoms, ("^",))
    if not operators:
        return None

    # An exponent that starts with unary '-' takes the rest of the chain
    # with it: 2 ^ -1 ^ 2 is 2 ^ -(1 ^ 2)
    for count, index in enumerate(operators, start=1):
        if index + 1 < len(tokens) and tokens[index + 1].is_symbol("-"):
            operators = operators[:count]
            break

    operands = _operands(tokens, operators)
    expr = operands[-1]
    for left in reversed(operands[:-1]):
        expr = Exponentiation(left=left, right=expr)
    return expr


def parse_expr(source: str) -> Expr:
    """Parse an expression string into an expression tree.

    Args:
        source: Expression string (e.g., "2 * (3 + 4) ^ 2")

    Returns:
        Parsed expression tree.

    Raises:
        LexError: If tokenization fails.
        ParseError: If the expression is invalid.
    """
    return parse(tokenize(source))
