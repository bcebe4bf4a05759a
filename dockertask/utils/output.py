"""Output sink for command results and terminal repainting."""

import io
import json
from typing import Any, Iterable, List, Mapping, Optional, TextIO

from rich.console import Console
from rich.table import Table
from rich.text import Text

from ..config import settings
from .terminal import CLEAR_LINE, CLEAR_SCREEN_DOWN, cursor_to_column, cursor_up


def format_cell(value: Any) -> str:
    """Render one table cell as plain text."""
    if value is None:
        return ""
    if isinstance(value, (dict, list, tuple)):
        return json.dumps(value, separators=(",", ":"), default=str)
    return str(value)


def _render(table: Table, width: int) -> str:
    buffer = io.StringIO()
    console = Console(
        file=buffer,
        width=width,
        color_system=None,
        force_terminal=False,
        highlight=False,
    )
    console.print(table)
    lines = [line.rstrip() for line in buffer.getvalue().splitlines()]
    return "\n".join(lines).strip("\n")


def render_table(
    rows: Iterable[Mapping[str, Any]],
    col_opts: Optional[Mapping[str, Any]] = None,
    width: Optional[int] = None,
) -> str:
    """Render records as a plain-text table.

    Columns default to the union of record keys in first-seen order.
    ``col_opts`` may set ``columns`` (explicit order), ``show_headers``
    and ``title``.
    """
    col_opts = col_opts or {}
    rows = list(rows)
    columns: List[str] = list(col_opts.get("columns") or [])
    if not columns:
        for row in rows:
            for key in row:
                if key not in columns:
                    columns.append(key)

    table = Table(
        box=None,
        show_header=col_opts.get("show_headers", True),
        title=col_opts.get("title"),
        pad_edge=False,
        padding=(0, 2),
    )
    for column in columns:
        table.add_column(str(column).upper(), no_wrap=True)
    for row in rows:
        table.add_row(*(format_cell(row.get(column)) for column in columns))
    return _render(table, width or settings.table_width)


def render_mapping(record: Mapping[str, Any], width: Optional[int] = None) -> str:
    """Render a single record as a key/value table."""
    rows = [{"key": key, "value": value} for key, value in record.items()]
    return render_table(rows, {"columns": ["key", "value"]}, width=width)


class Reporter:
    """Writes confirmation lines, errors and repaintable blocks.

    Human-facing output goes through a rich console; spinner frames and
    cursor movement are written to the console's file directly.
    """

    def __init__(self, file: Optional[TextIO] = None, console: Optional[Console] = None):
        self.console = console or Console(file=file, highlight=False)

    @property
    def file(self) -> TextIO:
        return self.console.file

    def ok(self, message: str) -> None:
        self.console.print(Text.assemble((">> ", "green"), message), soft_wrap=True)

    def error(self, message: str) -> None:
        self.console.print(Text.assemble((">> ", "red"), message), soft_wrap=True)

    def writeln(self, message: str) -> None:
        self.console.print(Text(message), soft_wrap=True)

    def write_raw(self, text: str) -> None:
        self.file.write(text)
        self.file.flush()

    def overwrite_line(self, text: str) -> None:
        """Replace the contents of the current line with ``text``."""
        self.write_raw(cursor_to_column(0) + CLEAR_LINE + text)

    def reset_cursor(self) -> None:
        """Clear the current line and return to its first column."""
        self.write_raw(cursor_to_column(0) + CLEAR_LINE)

    def repaint_block(self, text: str, previous_lines: int) -> int:
        """Replace the previously printed block with ``text``.

        Returns:
            Number of lines the new block occupies
        """
        if previous_lines:
            self.write_raw(
                cursor_to_column(0) + cursor_up(previous_lines) + CLEAR_SCREEN_DOWN
            )
        self.writeln(text)
        return text.count("\n") + 1
