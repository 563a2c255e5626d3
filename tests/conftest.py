"""Shared pytest fixtures for exprcalc tests."""

from collections.abc import Callable
from pathlib import Path

import pytest

from exprcalc.core.expressions import Expr, NumericLiteral


@pytest.fixture
def num() -> Callable[[float], Expr]:
    """Return a shorthand for numeric leaves."""

    def make(value: float) -> Expr:
        return NumericLiteral(value=value)

    return make


@pytest.fixture
def write_config(tmp_path: Path) -> Callable[[str], Path]:
    """Return a helper that writes an exprcalc.toml and returns its path."""

    def write(content: str) -> Path:
        path = tmp_path / "exprcalc.toml"
        path.write_text(content)
        return path

    return write
