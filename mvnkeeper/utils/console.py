"""
Console output for the mvnkeeper commands, built on Rich.

Reports and status lines go through this module; diagnostics go through
:mod:`mvnkeeper.utils.logger` and never through here. Coordinates, version
strings and rule patterns may contain ``[...]`` (version ranges, regexes),
so every helper that embeds caller text in markup escapes it first.
"""

from __future__ import annotations

import os
import sys
import json
import threading
from typing import Any, Dict, List, Optional

from rich.table import Table
from rich.markup import escape
from rich.theme import Theme
from rich.console import Console

MVNKEEPER_THEME = Theme(
    {
        "success": "bold green",
        "error": "bold red",
        "warning": "bold yellow",
        "info": "bold cyan",
        "dim": "dim",
    }
)

#: Colour per update classification, see :func:`~mvnkeeper.utils.version_utils.get_update_type`.
UPDATE_TYPE_COLORS: Dict[str, str] = {
    "major": "red",
    "minor": "yellow",
    "patch": "green",
    "new": "cyan",
    "downgrade": "red",
    "update": "yellow",
}

#: Colour and marker per artifact status label.
STATUS_STYLES: Dict[str, Dict[str, str]] = {
    "OK": {"color": "green", "marker": "✓"},
    "OUTDATED": {"color": "yellow", "marker": "⬆"},
    "NONE": {"color": "red", "marker": "✗"},
}

PLACEHOLDER = "[dim]-[/dim]"

_console: Optional[Console] = None
_console_lock = threading.Lock()


def _should_use_color() -> bool:
    """Return True if colored output should be enabled."""
    if os.environ.get("NO_COLOR") or os.environ.get("CI"):
        return False
    try:
        return sys.stdout.isatty()
    except (AttributeError, OSError):
        return False


def _get_console() -> Console:
    global _console

    if _console is None:
        with _console_lock:
            if _console is None:
                use_color = _should_use_color()
                _console = Console(
                    theme=MVNKEEPER_THEME,
                    no_color=not use_color,
                    highlight=use_color,
                )
    return _console


def reconfigure_console() -> None:
    """Drop the shared console so the next call picks up a new environment."""
    global _console
    with _console_lock:
        _console = None


def get_raw_console() -> Console:
    return _get_console()


# ---------------------------------------------------------------------------
# Status lines
# ---------------------------------------------------------------------------


def _print_message(style: str, prefix: str, message: str) -> None:
    _get_console().print(f"{escape(prefix)} {escape(message)}", style=style)


def print_success(message: str, *, prefix: str = "[OK]") -> None:
    _print_message("success", prefix, message)


def print_error(message: str, *, prefix: str = "[ERROR]") -> None:
    _print_message("error", prefix, message)


def print_warning(message: str, *, prefix: str = "[WARNING]") -> None:
    _print_message("warning", prefix, message)


# ---------------------------------------------------------------------------
# Reports
# ---------------------------------------------------------------------------


def print_json(data: Any) -> None:
    """Write ``data`` to stdout as indented JSON, bypassing Rich entirely.

    JSON reports are meant for other programs, so no markup, highlighting or
    wrapping may touch them.
    """
    sys.stdout.write(json.dumps(data, indent=2) + "\n")
    sys.stdout.flush()


def print_table(
    data: List[Dict[str, Any]],
    *,
    headers: Optional[List[str]] = None,
    title: Optional[str] = None,
    column_styles: Optional[Dict[str, Dict[str, Any]]] = None,
    show_row_lines: bool = False,
) -> None:
    """Render row dictionaries as a Rich table.

    Cell values are taken as Rich markup; use :func:`markup_or_placeholder`
    for raw coordinates and versions.

    Args:
        data: List of row dictionaries.
        headers: Column order. Defaults to keys of the first row.
        title: Optional table title.
        column_styles: Per-column ``style``, ``justify``, ``no_wrap`` and
            ``width`` settings.
        show_row_lines: Whether to draw horizontal lines between rows.
    """
    if not data:
        return

    if headers is None:
        headers = list(data[0].keys())

    table = Table(
        title=title,
        show_header=True,
        header_style="bold",
        show_lines=show_row_lines,
    )

    column_styles = column_styles or {}
    for header in headers:
        config = column_styles.get(header, {})
        table.add_column(
            header,
            style=config.get("style"),
            justify=config.get("justify", "default"),
            no_wrap=config.get("no_wrap", False),
            width=config.get("width"),
            overflow="fold",
        )

    for row in data:
        table.add_row(*(str(row.get(h, "")) for h in headers))

    _get_console().print(table)


def markup_or_placeholder(value: Optional[str]) -> str:
    """Escape ``value`` for a table cell, or return a dim dash when it is empty."""
    return escape(value) if value else PLACEHOLDER


def format_status(status: str) -> str:
    """Return the coloured table label for an artifact status (``OK``, ``OUTDATED``, ``NONE``)."""
    style = STATUS_STYLES.get(status)
    if style is None:
        return escape(status)
    return f"[{style['color']}]{style['marker']} {status}[/{style['color']}]"


def colorize_update_type(update_type: str) -> str:
    """Return a Rich-markup colored update type label."""
    color = UPDATE_TYPE_COLORS.get(update_type.lower())
    return f"[{color}]{update_type}[/{color}]" if color else update_type
