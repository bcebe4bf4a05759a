"""ANSI cursor control sequences."""

CSI = "\x1b["

CLEAR_LINE = f"{CSI}2K"
CLEAR_SCREEN_DOWN = f"{CSI}0J"


def cursor_to_column(column: int = 0) -> str:
    """Move the cursor to ``column`` (zero based) on the current line."""
    return f"{CSI}{column + 1}G"


def cursor_up(lines: int) -> str:
    """Move the cursor up ``lines`` rows; empty for zero or fewer."""
    if lines <= 0:
        return ""
    return f"{CSI}{lines}A"
