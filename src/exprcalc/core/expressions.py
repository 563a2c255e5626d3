"""
Expression tree types for exprcalc.

One frozen model per variant: a numeric leaf, unary negation, the five
binary arithmetic operators, and named function calls. Each node owns its
children outright, so trees are acyclic and compare structurally with ``==``.
"""

from __future__ import annotations

import math
from decimal import Decimal
from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field

# ---------------------------------------------------------------------------
# Leaf and unary nodes
# ---------------------------------------------------------------------------


class NumericLiteral(BaseModel):
    """A floating-point literal."""

    value: float = Field(description="The literal value")

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        # Positional notation: "1e+20" would tokenize as 1, e, +, 20
        if not math.isfinite(self.value):
            return repr(self.value)
        return format(Decimal(repr(self.value)), "f")

    def children(self) -> list[Expr]:
        return []


class Minus(BaseModel):
    """Unary negation: -operand."""

    operand: Expr

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"-({self.operand})"

    def children(self) -> list[Expr]:
        return [self.operand]


# ---------------------------------------------------------------------------
# Binary nodes
# ---------------------------------------------------------------------------


class BinaryNode(BaseModel):
    """Shared shape of the binary operators: left symbol right."""

    symbol: ClassVar[str]

    left: Expr
    right: Expr

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"({self.left} {self.symbol} {self.right})"

    def children(self) -> list[Expr]:
        return [self.left, self.right]


class Addition(BinaryNode):
    """left + right"""

    symbol = "+"


class Subtraction(BinaryNode):
    """left - right"""

    symbol = "-"


class Multiplication(BinaryNode):
    """left * right"""

    symbol = "*"


class Division(BinaryNode):
    """left / right"""

    symbol = "/"


class Exponentiation(BinaryNode):
    """left ^ right"""

    symbol = "^"


# ---------------------------------------------------------------------------
# Function calls
# ---------------------------------------------------------------------------


class FunctionCall(BaseModel):
    """
    Function call: name(arg1, arg2, ...).

    Whether the name and argument count are known is decided at evaluation
    time, not here.
    """

    name: str = Field(description="Function name")
    args: list[Expr] = Field(default_factory=list, description="Arguments, in call order")

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        args_str = ", ".join(str(a) for a in self.args)
        return f"{self.name}({args_str})"

    def children(self) -> list[Expr]:
        return list(self.args)

    @property
    def arity(self) -> int:
        return len(self.args)


# ---------------------------------------------------------------------------
# Union type
# ---------------------------------------------------------------------------

Expr = (
    NumericLiteral
    | Minus
    | Addition
    | Subtraction
    | Multiplication
    | Division
    | Exponentiation
    | FunctionCall
)

Minus.model_rebuild()
BinaryNode.model_rebuild()
Addition.model_rebuild()
Subtraction.model_rebuild()
Multiplication.model_rebuild()
Division.model_rebuild()
Exponentiation.model_rebuild()
FunctionCall.model_rebuild()
