"""
Console output utilities for compatkeeper using Rich.

Status lines and tables shown to the user by the CLI commands. The
``version`` and ``compat`` theme styles are shared with the held-back
report so both color a release and its bound the same way. Diagnostics go
through :mod:`compatkeeper.utils.logger` instead.
"""

from __future__ import annotations

import os
import sys
import threading
from typing import Any, Dict, List, Optional

from rich.table import Table
from rich.theme import Theme
from rich.console import Console

COMPATKEEPER_THEME = Theme(
    {
        "success": "bold green",
        "error": "bold red",
        "warning": "bold yellow",
        "holder": "bold cyan",
        "version": "bright_green",
        "compat": "bright_red",
    }
)

_console: Optional[Console] = None
_console_lock = threading.Lock()


def _color_enabled() -> bool:
    # NO_COLOR and CI both force plain output, as does a redirected stdout
    if os.environ.get("NO_COLOR") or os.environ.get("CI"):
        return False
    try:
        return sys.stdout.isatty()
    except (AttributeError, OSError):
        return False


def _get_console() -> Console:
    """Return the shared Rich Console, creating it on first use."""
    global _console

    with _console_lock:
        if _console is None:
            _console = Console(
                theme=COMPATKEEPER_THEME,
                no_color=not _color_enabled(),
                highlight=False,
                soft_wrap=True,
            )
        return _console


def reconfigure_console() -> None:
    """Forget the shared console so the next call sees the current environment."""
    global _console
    with _console_lock:
        _console = None


def get_raw_console() -> Console:
    """Return the underlying Rich Console instance."""
    return _get_console()


def _print_status(style: str, prefix: str, message: str) -> None:
    # markup is off so compat strings such as "[1.*]" print literally
    _get_console().print(f"{prefix} {message}", style=style, markup=False)


def print_success(message: str, *, prefix: str = "[OK]") -> None:
    _print_status("success", prefix, message)


def print_error(message: str, *, prefix: str = "[ERROR]") -> None:
    _print_status("error", prefix, message)


def print_warning(message: str, *, prefix: str = "[WARNING]") -> None:
    _print_status("warning", prefix, message)


def print_table(
    rows: List[Dict[str, Any]],
    *,
    headers: Optional[List[str]] = None,
    title: Optional[str] = None,
    column_styles: Optional[Dict[str, Dict[str, Any]]] = None,
) -> None:
    """Print row dictionaries as a table; nothing is printed for no rows.

    ``headers`` selects and orders the columns (default: the first row's
    keys). ``column_styles`` maps a header to ``Table.add_column`` keyword
    arguments such as ``style``, ``justify`` or ``no_wrap``.
    """
    if not rows:
        return

    columns = headers if headers is not None else list(rows[0])
    styles = column_styles or {}

    table = Table(title=title, header_style="bold")
    for column in columns:
        table.add_column(column, **{"overflow": "fold", **styles.get(column, {})})
    for row in rows:
        table.add_row(*(str(row.get(column, "")) for column in columns))

    _get_console().print(table)
