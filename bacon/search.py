"""Searching lines, either for a text pattern or for an item index."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional

from bacon.line import Line
from bacon.tty import TRange

CSI_FOUND = "\x1b[1m\x1b[38;5;208m"  # bold, orange foreground
CSI_FOUND_SELECTED = "\x1b[1m\x1b[30m\x1b[48;5;208m"  # bold, orange background


class SearchMode(Enum):
    PATTERN = "pattern"
    ITEM_IDX = "item_idx"


@dataclass(frozen=True)
class Found:
    """Position of a match: a line, a range in it, and its part after a line wrap."""

    line_idx: int
    trange: TRange
    continued: Optional[TRange] = None


def search_item_idx(idx: int, lines: Iterable[Line]) -> list[Found]:
    """Find the first non empty line of the item idx."""
    for line_idx, line in enumerate(lines):
        if line.item_idx == idx and line.content.strings:
            end = len(line.content.strings[0].raw)
            return [Found(line_idx, TRange(0, 0, end))]
    return []


def find_cut_pattern(pattern: str, a: str, b: str) -> Optional[int]:
    """Return where pattern is cut when it spans the end of a and the start of b."""
    for i in range(1, len(pattern)):
        if a.endswith(pattern[:i]) and b.startswith(pattern[i:]):
            return i
    return None


@dataclass(frozen=True)
class Pattern:
    """A search of a text; a match spans at most two lines."""

    pattern: str

    def search_lines(self, lines: Iterable[Line]) -> list[Found]:
        pattern = self.pattern
        size = len(pattern)
        founds: list[Found] = []
        if not pattern:
            return founds
        previous: Optional[Line] = None
        for line_idx, line in enumerate(lines):
            strings = line.content.strings
            if (
                line.is_continuation()
                and previous is not None
                and previous.content.strings
                and strings
            ):
                previous_string_idx = len(previous.content.strings) - 1
                previous_last = previous.content.strings[previous_string_idx].raw
                cut = find_cut_pattern(pattern, previous_last, strings[0].raw)
                if cut is not None:
                    founds.append(
                        Found(
                            line_idx - 1,
                            TRange(previous_string_idx, len(previous_last) - cut, len(previous_last)),
                            TRange(0, 0, size - cut),
                        )
                    )
            previous = line
            for string_idx, tstring in enumerate(strings):
                raw = tstring.raw
                offset = 0
                while offset + size < len(raw):
                    pos = raw.find(pattern, offset)
                    if pos < 0:
                        break
                    founds.append(Found(line_idx, TRange(string_idx, pos, pos + size)))
                    offset = pos + size
        return founds


@dataclass(frozen=True)
class ItemIdx:
    """A search of the item with a given index."""

    idx: int

    def search_lines(self, lines: Iterable[Line]) -> list[Found]:
        return search_item_idx(self.idx, lines)