"""Wrapping of lines to a given width."""

from __future__ import annotations

from typing import Iterable

from wcwidth import wcwidth

from bacon.line import Line, LineType
from bacon.tty import TLine, TString


def wrap(lines: Iterable[Line], width: int) -> list[Line]:
    """Wrap lines into sub-lines fitting in width (scrollbar column included)."""
    cols = width - 1  # for the probable scrollbar
    sub_lines: list[Line] = []
    for line in lines:
        summary = line.line_type.is_summary()
        current = Line(line.item_idx, line.line_type, TLine())
        sub_lines.append(current)
        sub_cols = line.line_type.cols()
        wrap_idx = 0
        for string in line.content.strings:
            piece = TString(string.csi, string.raw)
            current.content.strings.append(piece)
            offset = 0
            for idx, c in enumerate(string.raw):
                char_cols = max(wcwidth(c), 0)
                if sub_cols + char_cols > cols and sub_cols > 0:
                    after = piece.split_off(idx - offset)
                    offset = idx
                    current = Line(
                        line.item_idx,
                        LineType.continuation(wrap_idx, summary),
                        TLine([after]),
                    )
                    sub_lines.append(current)
                    piece = after
                    wrap_idx += 1
                    sub_cols = char_cols
                else:
                    sub_cols += char_cols
    return sub_lines