"""Scroll commands and scroll position helpers."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ScrollKind(Enum):
    TOP = "top"
    BOTTOM = "bottom"
    LINES = "lines"
    MILLI_PAGES = "milli_pages"


_TOP_RE = re.compile(r"scroll[-_]?to[-_]?top", re.IGNORECASE)
_BOTTOM_RE = re.compile(r"scroll[-_]?to[-_]?bottom", re.IGNORECASE)
_LINES_RE = re.compile(r"scroll[-_]?lines?\(([+-]?[0-9]{1,4})\)", re.IGNORECASE)
_PAGES_RE = re.compile(r"scroll[-_]?pages?\(([+-]?[0-9]{1,4})\)", re.IGNORECASE)
_FRACTION_PAGES_RE = re.compile(
    r"scroll[-_]?pages?\(([+-]?[0-9]*\.[0-9]{1,3})\)", re.IGNORECASE
)


def _round_half_away(x: float) -> int:
    return int(math.copysign(math.floor(abs(x) + 0.5), x))


def _fraction(milli: int) -> str:
    return f"{milli / 1000:.3f}".strip("0")


@dataclass(frozen=True)
class ScrollCommand:
    """A scroll related command; amount is a line count or thousandths of page."""

    kind: ScrollKind
    amount: int = 0

    @classmethod
    def pages(cls, n: int) -> ScrollCommand:
        return cls(ScrollKind.MILLI_PAGES, n * 1000)

    @classmethod
    def parse(cls, s: str) -> ScrollCommand:
        if _TOP_RE.fullmatch(s):
            return cls(ScrollKind.TOP)
        if _BOTTOM_RE.fullmatch(s):
            return cls(ScrollKind.BOTTOM)
        if m := _LINES_RE.fullmatch(s):
            return cls(ScrollKind.LINES, int(m.group(1)))
        if m := _PAGES_RE.fullmatch(s):
            return cls(ScrollKind.MILLI_PAGES, int(m.group(1)) * 1000)
        if m := _FRACTION_PAGES_RE.fullmatch(s):
            return cls(ScrollKind.MILLI_PAGES, _round_half_away(float(m.group(1)) * 1000))
        raise ValueError("not a valid scroll command")

    def _to_lines(self, content_height: int, page_height: int) -> int:
        if self.kind is ScrollKind.TOP:
            return -content_height
        if self.kind is ScrollKind.BOTTOM:
            return content_height
        if self.kind is ScrollKind.LINES:
            return self.amount
        lines = self.amount * page_height / 1000.0
        return math.floor(lines) if lines < 0 else math.ceil(lines)

    def doc(self) -> str:
        """Return the action description shown in doc and help."""

        def txt(n: int, thing: str, way: str) -> str:
            plural = "s" if n > 1 else ""
            return f"scroll {n} {thing}{plural} {way}"

        if self.kind is ScrollKind.TOP:
            return "scroll to top"
        if self.kind is ScrollKind.BOTTOM:
            return "scroll to bottom"
        if self.kind is ScrollKind.LINES:
            n = self.amount
            return txt(n, "line", "down") if n > 0 else txt(-n, "line", "up")
        if self.amount % 1000 == 0:
            pages = self.amount // 1000
            return txt(pages, "page", "down") if pages > 0 else txt(-pages, "page", "up")
        return f"scroll {_fraction(self.amount)} pages"

    def apply(self, scroll: int, content_height: int, page_height: int) -> int:
        """Compute the new scroll value."""
        if content_height <= page_height:
            return 0
        target = scroll + self._to_lines(content_height, page_height)
        return max(0, min(target, content_height - page_height))

    def __str__(self) -> str:
        if self.kind is ScrollKind.TOP:
            return "scroll-to-top"
        if self.kind is ScrollKind.BOTTOM:
            return "scroll-to-bottom"
        if self.kind is ScrollKind.LINES:
            return f"scroll-lines({self.amount})"
        if self.amount % 1000 == 0:
            return f"scroll-pages({self.amount // 1000})"
        return f"scroll-pages({_fraction(self.amount)})"


def is_thumb(y: int, scrollbar: Optional[tuple[int, int]]) -> bool:
    """Tell whether row y is in the scrollbar thumb."""
    if scrollbar is None:
        return False
    top, bottom = scrollbar
    return top <= y <= bottom


def fix_scroll(scroll: int, content_height: int, page_height: int) -> int:
    if content_height > page_height:
        return min(scroll, content_height - page_height - 1)
    return 0