"""Search related state of the application: the input field and the matches."""

from __future__ import annotations

import re
from typing import Iterable, Optional, TextIO, Union

from wcwidth import wcwidth

from bacon.drawing import goto, goto_line
from bacon.search import CSI_FOUND, Found, ItemIdx, Pattern, SearchMode
from bacon.tty import TLine, draw

_INDEX_RE = re.compile(r"\+?[0-9]+")


def _parse_index(content: str) -> Optional[int]:
    if _INDEX_RE.fullmatch(content):
        return int(content)
    return None


def _tail_fitting(text: str, cols_max: int) -> tuple[str, int]:
    """Return the longest suffix of text fitting in cols_max columns, and its width."""
    cols = 0
    start = len(text)
    for c in reversed(text):
        char_cols = max(wcwidth(c), 0)
        if cols + char_cols > cols_max:
            break
        cols += char_cols
        start -= 1
    return text[start:], cols


class InputField:
    """A single line text input which may have the focus."""

    def __init__(self, content: str = "", focused: bool = False) -> None:
        self.content = content
        self.focused = focused

    def insert(self, text: str) -> None:
        """Append text at the end of the content."""
        self.content += text

    def backspace(self) -> bool:
        """Remove the last character; return whether there was one."""
        if not self.content:
            return False
        self.content = self.content[:-1]
        return True

    def clear(self) -> None:
        self.content = ""

    def is_empty(self) -> bool:
        return not self.content

    def _display_on(self, w: TextIO, x: int, y: int, width: int) -> None:
        """Draw the content in the given area, showing its end when too long."""
        goto(w, x, y)
        # keep a column for the cursor when focused
        available = max(width - 1, 0) if self.focused else width
        visible, cols = _tail_fitting(self.content, available)
        w.write(visible)
        w.write(" " * max(width - cols, 0))


class SearchState:
    """The search input, the locations matching it and the selected one."""

    def __init__(self) -> None:
        self._mode = SearchMode.PATTERN
        self._input = InputField()
        self._up_to_date = True
        self._founds: list[Found] = []
        self._selected_found = 0

    @property
    def mode(self) -> SearchMode:
        return self._mode

    @property
    def input(self) -> InputField:
        return self._input

    @property
    def selected_found(self) -> int:
        """Index, among the founds, of the selected one."""
        return self._selected_found

    @property
    def founds(self) -> tuple[Found, ...]:
        return tuple(self._founds)

    def is_up_to_date(self) -> bool:
        return self._up_to_date

    def touch(self) -> None:
        """Mark the search as no longer up to date with the application state."""
        self._up_to_date = False

    def has_founds(self) -> bool:
        return bool(self._founds)

    def must_be_drawn(self) -> bool:
        return self.focused() or not self._input.is_empty()

    def focus_with_mode(self, mode: SearchMode) -> None:
        """Focus the input; its content is cleared when the mode changes."""
        if mode != self._mode:
            self._input.clear()
        self._mode = mode
        self._input.focused = True

    def unfocus(self) -> None:
        self._input.focused = False

    def focused(self) -> bool:
        return self._input.focused

    def input_has_content(self) -> bool:
        return not self._input.is_empty()

    def unfocus_and_clear(self) -> None:
        self._input.clear()
        self._up_to_date = False
        self._input.focused = False

    def clear(self) -> None:
        self._input.clear()
        self._up_to_date = False

    def next_match(self) -> None:
        if self._founds:
            self._selected_found = (self._selected_found + 1) % len(self._founds)

    def previous_match(self) -> None:
        if self._founds:
            count = len(self._founds)
            self._selected_found = (self._selected_found + count - 1) % count

    def type_text(self, text: str) -> bool:
        """Insert typed text in the focused input; return whether it was consumed."""
        if not self._input.focused or not text:
            return False
        self._input.insert(text)
        self._up_to_date = False
        return True

    def search(self) -> Union[Pattern, ItemIdx]:
        """Build the search described by the input content and mode."""
        content = self._input.content
        if self._mode is SearchMode.PATTERN:
            return Pattern(content)
        index = _parse_index(content)
        return ItemIdx(0 if index is None else index)

    def is_invalid(self) -> bool:
        """Tell whether the input can't be understood in the current mode."""
        if self._mode is SearchMode.PATTERN or self._input.is_empty():
            return False
        return _parse_index(self._input.content) is None

    def set_founds(self, founds: Iterable[Found]) -> None:
        """Replace the founds, keeping the selection only if it's on the same line."""
        old_line = self.selected_found_line()
        self._founds = list(founds)
        if self.selected_found_line() != old_line:
            self._selected_found = 0
        self._up_to_date = True

    def extend_founds(self, new_founds: Iterable[Found]) -> None:
        self._founds.extend(new_founds)

    def selected_found_line(self) -> Optional[int]:
        """Return the line index of the selected found, if any."""
        if 0 <= self._selected_found < len(self._founds):
            return self._founds[self._selected_found].line_idx
        return None

    def draw_prefixed_input(self, w: TextIO, x: int, y: int, width: int) -> None:
        """Draw the mode prefix then the input, in width columns (width > 1)."""
        goto_line(w, y)
        draw(w, CSI_FOUND, ":" if self._mode is SearchMode.ITEM_IDX else "/")
        self._input._display_on(w, x + 1, y, width - 1)

    def add_summary_tstring(self, t_line: TLine) -> None:
        """Add to t_line a summary of the search results, when there's a search."""
        if not self.input_has_content():
            return
        if not self._founds:
            if self._mode is SearchMode.ITEM_IDX and self.is_invalid():
                t_line.add_tstring(CSI_FOUND, "integer expected")
            else:
                t_line.add_tstring(CSI_FOUND, "no match")
        else:
            t_line.add_tstring(
                CSI_FOUND, f"{self._selected_found + 1}/{len(self._founds)}"
            )