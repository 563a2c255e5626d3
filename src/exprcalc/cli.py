"""
exprcalc CLI - entry point.

Commands:
    eval       evaluate an expression and print the result
    tokens     show the token sequence
    tree       show the parsed expression tree
    functions  list the built-in functions

Expressions that start with "-" must follow "--", e.g.
``exprcalc eval -- "-5 + 3"``.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Annotated, TypeVar

import typer
from rich.console import Console
from rich.table import Table
from rich.tree import Tree

from exprcalc._version import get_version
from exprcalc.config import DEFAULT_CONFIG_FILE, CalcConfig, ConfigError, load_config
from exprcalc.core.errors import ExprCalcError
from exprcalc.core.evaluator import FUNCTIONS
from exprcalc.core.expressions import BinaryNode, Expr, FunctionCall, Minus, NumericLiteral
from exprcalc.core.parser import parse
from exprcalc.core.pipeline import calculate
from exprcalc.core.tokenizer import tokenize

logger = logging.getLogger(__name__)

app = typer.Typer(
    help="Parse and evaluate arithmetic expressions.",
    no_args_is_help=True,
)

console = Console()

T = TypeVar("T")

# Lets "-2 ^ 2" through as an argument; commands below define no short options
_EXPRESSION_COMMAND = {"ignore_unknown_options": True}

ExpressionArg = Annotated[str, typer.Argument(help="Arithmetic expression, e.g. '2 * (3 + 4)'")]


def version_callback(value: bool) -> None:
    if value:
        typer.echo(f"exprcalc {get_version()}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = False,
) -> None:
    """Parse and evaluate arithmetic expressions."""


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _load_settings(config_path: Path | None) -> CalcConfig:
    path = config_path if config_path is not None else Path(DEFAULT_CONFIG_FILE)
    if config_path is not None and not config_path.exists():
        typer.echo(f"Config file not found: {config_path}", err=True)
        raise typer.Exit(code=2)
    try:
        return load_config(path)
    except ConfigError as e:
        typer.echo(f"Invalid configuration: {e}", err=True)
        raise typer.Exit(code=2)


def _run(source: str, stage: Callable[[str], T]) -> T:
    """Run one pipeline call, turning failures into an error message and exit code 1."""
    try:
        return stage(source)
    except ExprCalcError as e:
        typer.echo(f"{e.stage} error: {e.message}", err=True)
        context = e.context(source)
        if context is not None:
            typer.echo(context.format(), err=True)
        raise typer.Exit(code=1)
    except RecursionError:
        typer.echo("error: expression is nested too deeply", err=True)
        raise typer.Exit(code=1)


@app.command("eval", context_settings=_EXPRESSION_COMMAND)
def eval_command(
    expression: ExpressionArg,
    precision: Annotated[
        int | None,
        typer.Option("--precision", min=1, max=17, help="Significant digits to print."),
    ] = None,
    config: Annotated[
        Path | None,
        typer.Option("--config", help=f"Config file (default: ./{DEFAULT_CONFIG_FILE})."),
    ] = None,
    verbose: Annotated[bool, typer.Option("--verbose", help="Log each pipeline stage.")] = False,
) -> None:
    """Evaluate EXPRESSION and print the result."""
    settings = _load_settings(config)
    if precision is not None:
        settings = settings.model_copy(update={"precision": precision})
    _configure_logging("DEBUG" if verbose else settings.log_level)
    logger.debug("Settings: %s", settings.model_dump())

    result = _run(expression, calculate)
    typer.echo(settings.format_result(result))


@app.command("tokens", context_settings=_EXPRESSION_COMMAND)
def tokens_command(expression: ExpressionArg) -> None:
    """Print the tokens of EXPRESSION, one per line."""
    for token in _run(expression, tokenize):
        typer.echo(f"{token.kind:<7} {token.value!r:<10} @{token.pos}")


@app.command("tree", context_settings=_EXPRESSION_COMMAND)
def tree_command(expression: ExpressionArg) -> None:
    """Print the expression tree of EXPRESSION."""
    expr = _run(expression, lambda source: parse(tokenize(source)))
    console.print(_build_tree(expr))
    console.print(str(expr), highlight=False)


def _node_label(expr: Expr) -> str:
    if isinstance(expr, NumericLiteral):
        return f"[bold cyan]{expr}[/]"
    if isinstance(expr, Minus):
        return "Minus [dim](-)[/]"
    if isinstance(expr, BinaryNode):
        return f"{type(expr).__name__} [dim]({expr.symbol})[/]"
    if isinstance(expr, FunctionCall):
        return f"[bold green]{expr.name}[/] [dim]({expr.arity} args)[/]"
    return type(expr).__name__


def _build_tree(expr: Expr, parent: Tree | None = None) -> Tree:
    label = _node_label(expr)
    node = Tree(label) if parent is None else parent.add(label)
    for child in expr.children():
        _build_tree(child, node)
    return node


@app.command("functions")
def functions_command() -> None:
    """List the built-in functions."""
    table = Table(title="Built-in functions")
    table.add_column("Name", style="bold green")
    table.add_column("Arity", justify="right")
    table.add_column("Domain")
    table.add_column("Description")

    for (name, arity), function in sorted(FUNCTIONS.items()):
        table.add_row(name, str(arity), function.domain, function.description)

    console.print(table)


def main() -> None:
    app()
