"""Cursor moves and line clearing on a terminal stream."""

from __future__ import annotations

from typing import TextIO


def _execute(w: TextIO, sequence: str) -> None:
    w.write(sequence)
    w.flush()


def goto(w: TextIO, x: int, y: int) -> None:
    """Move the cursor to the x, y position (zero based)."""
    _execute(w, f"\x1b[{y + 1};{x + 1}H")


def goto_line(w: TextIO, y: int) -> None:
    """Move the cursor to the start of the given line."""
    goto(w, 0, y)


def clear_line(w: TextIO) -> None:
    """Clear from the cursor position to the end of the line."""
    _execute(w, "\x1b[K")