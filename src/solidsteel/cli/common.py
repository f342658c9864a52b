"""Shared CLI utilities - colors, console, helpers."""

import asyncio
import json
from collections.abc import Awaitable, Callable
from functools import wraps
from typing import ParamSpec, TypeVar

from rich.console import Console
from rich.table import Table

# Site palette
STEEL_BLUE = "#4a90c2"
SAFETY_ORANGE = "#ff8c1a"
BEAM_GREY = "#a0a8b0"
CAUTION_YELLOW = "#f1fa8c"
SUCCESS_GREEN = "#50fa7b"
ERROR_RED = "#ff6363"

# Shared console instance (for styled output only, NOT for JSON)
console = Console()


def print_json(data: object) -> None:
    """Print JSON to stdout without Rich formatting.

    Rich wraps long lines at terminal width, which breaks JSON parsing.
    """
    print(json.dumps(data, indent=2, default=str, ensure_ascii=False))


def success(message: str) -> None:
    console.print(f"[{SUCCESS_GREEN}]✓[/{SUCCESS_GREEN}] {message}")


def error(message: str) -> None:
    console.print(f"[{ERROR_RED}]✗[/{ERROR_RED}] {message}")


def warn(message: str) -> None:
    console.print(f"[{CAUTION_YELLOW}]![/{CAUTION_YELLOW}] {message}")


def info(message: str) -> None:
    console.print(f"[{STEEL_BLUE}]→[/{STEEL_BLUE}] {message}")


def hint(message: str) -> None:
    console.print(f"[{CAUTION_YELLOW}]Hint:[/{CAUTION_YELLOW}] {message}")


def create_table(title: str | None = None, *columns: str) -> Table:
    """Create a styled table; numeric-looking columns are right-justified."""
    table = Table(title=title, border_style=BEAM_GREY)
    for i, col in enumerate(columns):
        style = SAFETY_ORANGE if i == 0 else STEEL_BLUE
        numeric = col.lower() in ("count", "images", "size (mb)", "value")
        table.add_column(col, style=style, justify="right" if numeric else "left")
    return table


def format_megabytes(size: int) -> str:
    return f"{size / (1024 * 1024):.2f}"


P = ParamSpec("P")
R = TypeVar("R")


def run_async(func: Callable[P, Awaitable[R]]) -> Callable[P, R]:
    """Decorator to run async functions in sync context (for Typer commands)."""

    @wraps(func)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        return asyncio.run(func(*args, **kwargs))

    return wrapper


def truncate(text: str, max_length: int = 50) -> str:
    """Truncate text with ellipsis if too long."""
    if len(text) <= max_length:
        return text
    return text[: max_length - 3] + "..."
