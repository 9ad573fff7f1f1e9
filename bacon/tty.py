"""Styled terminal lines: strings carrying CSI sequences, and their parsing."""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from typing import Iterable, Optional, Sequence, TextIO

from wcwidth import wcwidth

CSI_RESET = "\x1b[0m\x1b[0m"
CSI_BOLD = "\x1b[1m"
CSI_ITALIC = "\x1b[3m"

CSI_GREEN = "\x1b[32m"

CSI_RED = "\x1b[31m"
CSI_BOLD_RED = "\x1b[1m\x1b[38;5;9m"
CSI_BOLD_ORANGE = "\x1b[1m\x1b[38;5;208m"

# Used for "Blocking"
CSI_BLUE = "\x1b[1m\x1b[36m"

if sys.platform == "win32":
    CSI_BOLD_YELLOW = "\x1b[1m\x1b[38;5;11m"
    CSI_BOLD_BLUE = "\x1b[1m\x1b[38;5;14m"
else:
    CSI_BOLD_YELLOW = "\x1b[1m\x1b[33m"
    CSI_BOLD_BLUE = "\x1b[1m\x1b[38;5;12m"

CSI_BOLD_4BIT_YELLOW = "\x1b[1m\x1b[33m"
CSI_BOLD_WHITE = "\x1b[1m\x1b[38;5;15m"

TAB_REPLACEMENT = "    "

_ESC = "\x1b"
_MAX_PARAM = 0xFFFF


def draw(w: TextIO, csi: str, raw: str) -> None:
    """Write raw, wrapped in csi and a reset when csi isn't empty."""
    if csi:
        w.write(f"{csi}{raw}{CSI_RESET}")
    else:
        w.write(raw)


def _fit(raw: str, cols_max: int) -> tuple[str, int]:
    """Return the longest prefix of raw fitting in cols_max columns, and its width."""
    cols = 0
    end = 0
    for end, c in enumerate(raw):
        char_cols = max(wcwidth(c), 0)
        if cols + char_cols > cols_max:
            return raw[:end], cols
        cols += char_cols
    else:
        end = len(raw)
    return raw[:end], cols


@dataclass(frozen=True)
class TRange:
    """A position in a TLine: a string index and a range of offsets in its raw text."""

    string_idx: int
    start_byte_in_string: int
    end_byte_in_string: int


@dataclass
class TString:
    """A string with a uniform style, given as CSI sequences."""

    csi: str = ""
    raw: str = ""

    @classmethod
    def badge(cls, con: str, fg: int, bg: int) -> TString:
        """Build a badge; colors are 8 bit ANSI values."""
        return cls(
            csi=f"\x1b[1m\x1b[38;5;{fg}m\x1b[48;5;{bg}m",
            raw=f" {con} ",
        )

    @classmethod
    def num_badge(cls, num: int, cat: str, fg: int, bg: int) -> TString:
        raw = f" {num} {cat} " if num < 2 else f" {num} {cat}s "
        return cls.badge(raw, fg, bg)

    def push_csi(self, params: Sequence[Sequence[int]], action: str) -> None:
        """Append a CSI sequence made of the given parameter groups."""
        groups = ("".join(str(p) for p in group) for group in params)
        self.csi += f"{_ESC}[{';'.join(groups)}{action}"

    def draw(self, w: TextIO) -> None:
        draw(w, self.csi, self.raw)

    def draw_in(self, w: TextIO, cols_max: int) -> int:
        """Draw without taking more than cols_max columns; return the columns written."""
        fitted, cols = _fit(self.raw, cols_max)
        if self.csi:
            w.write(f"{self.csi}{fitted}{CSI_RESET}")
        else:
            w.write(fitted)
        return cols

    def starts_with(self, csi: str, raw: str) -> bool:
        return self.csi == csi and self.raw.startswith(raw)

    def split_off(self, at: int) -> TString:
        """Keep the text before at, return a string with the same style and the rest."""
        tail = TString(self.csi, self.raw[at:])
        self.raw = self.raw[:at]
        return tail

    def is_blank(self) -> bool:
        return all(c.isspace() for c in self.raw)

    def is_styled(self) -> bool:
        return bool(self.csi)

    def is_unstyled(self) -> bool:
        return not self.csi


@dataclass
class TLine:
    """A line made of homogeneously styled parts.

    Only CSI sequences are kept; this isn't a general terminal model.
    """

    strings: list[TString] = field(default_factory=list)

    def change_range_style(self, trange: TRange, new_csi: str) -> None:
        """Restyle a range, splitting the string it lies in when needed."""
        idx = trange.string_idx
        if idx >= len(self.strings):
            return
        start = trange.start_byte_in_string
        end = trange.end_byte_in_string
        source = self.strings[idx]
        has_before = start > 0
        has_after = end < len(source.raw)
        if has_after:
            self.strings.insert(idx + 1, TString(source.csi, source.raw[end:]))
        if has_before:
            self.strings.insert(idx, TString(source.csi, source.raw[:start]))
            idx += 1
        target = self.strings[idx]
        target.csi = new_csi
        target.raw = target.raw[start:end] if has_before else target.raw[:end]

    @classmethod
    def from_tty(cls, tty: str) -> TLine:
        """Parse a string holding terminal escape sequences."""
        builder = TLineBuilder()
        builder.read(tty.replace("\t", TAB_REPLACEMENT))
        return builder.build()

    @classmethod
    def from_raw(cls, raw: str) -> TLine:
        return cls([TString(" ", raw)])

    def to_raw(self) -> str:
        return "".join(ts.raw for ts in self.strings)

    @classmethod
    def bold(cls, raw: str) -> TLine:
        return cls([TString(CSI_BOLD, raw)])

    @classmethod
    def italic(cls, raw: str) -> TLine:
        return cls([TString(CSI_ITALIC, raw)])

    @classmethod
    def failed(cls, key: str) -> TLine:
        strings = [TString(CSI_BOLD_ORANGE, "failed"), TString("", ": ")]
        module, sep, function = key.rpartition("::")
        if sep:
            strings.append(TString("", f"{module}::"))
            strings.append(TString(CSI_BOLD_ORANGE, function))
        else:
            strings.append(TString(CSI_BOLD_ORANGE, key))
        return cls(strings)

    def add_badge(self, badge: TString) -> None:
        self.strings.append(badge)
        self.strings.append(TString("", " "))

    def add_tstring(self, csi: str, raw: str) -> None:
        self.strings.append(TString(csi, raw))

    def draw(self, w: TextIO) -> None:
        for ts in self.strings:
            ts.draw(w)

    def draw_in(self, w: TextIO, cols_max: int) -> int:
        """Draw without taking more than cols_max columns; return the columns written."""
        cols = 0
        for ts in self.strings:
            if cols >= cols_max:
                break
            cols += ts.draw_in(w, cols_max - cols)
        return cols

    def is_blank(self) -> bool:
        return all(not ts.raw.strip() for ts in self.strings)

    def if_unstyled(self) -> Optional[str]:
        """Return the content when the line is a single unstyled string."""
        if len(self.strings) == 1 and not self.strings[0].csi:
            return self.strings[0].raw
        return None

    def has(self, part: str) -> bool:
        return any(part in ts.raw for ts in self.strings)


class TLineBuilder:
    """Consumes text holding terminal sequences and builds a TLine."""

    def __init__(self) -> None:
        self._cur: Optional[TString] = None
        self._strings: list[TString] = []

    def read(self, s: str) -> None:
        _Parser(self).advance(s)

    def build(self) -> TLine:
        self._take_tstring()
        return TLine(self._strings)

    def _take_tstring(self) -> None:
        if self._cur is not None:
            cur, self._cur = self._cur, None
            self._push_tstring(cur)

    def _push_tstring(self, tstring: TString) -> None:
        if self._strings and self._strings[-1].csi == tstring.csi:
            self._strings[-1].raw += tstring.raw
        else:
            self._strings.append(tstring)

    def _print(self, c: str) -> None:
        if self._cur is None:
            self._cur = TString()
        self._cur.raw += c

    def _csi_dispatch(self, params: list[list[int]], action: str) -> None:
        if len(params) == 1 and params[0] == [0]:
            self._take_tstring()
            return
        if self._cur is not None and not self._cur.raw:
            self._cur.push_csi(params, action)
            return
        self._take_tstring()
        cur = TString()
        cur.push_csi(params, action)
        self._cur = cur


class _Parser:
    """A small state machine splitting text into printed chars and CSI sequences."""

    _GROUND, _ESCAPE, _CSI, _CSI_IGNORE, _OSC, _STRING = range(6)

    def __init__(self, builder: TLineBuilder) -> None:
        self._builder = builder
        self._state = self._GROUND
        self._reset_params()

    def _reset_params(self) -> None:
        self._params: list[list[int]] = []
        self._group: list[int] = []
        self._param = 0

    def _end_subparam(self) -> None:
        self._group.append(self._param)
        self._param = 0

    def _end_param(self) -> None:
        self._end_subparam()
        self._params.append(self._group)
        self._group = []

    def advance(self, text: Iterable[str]) -> None:
        for c in text:
            self._feed(c)

    def _feed(self, c: str) -> None:
        code = ord(c)
        state = self._state
        if c == _ESC:
            self._state = self._ESCAPE
            return
        if code in (0x18, 0x1A):
            self._state = self._GROUND
            return
        if state == self._GROUND:
            if code >= 0x20 and code != 0x7F:
                self._builder._print(c)
        elif state == self._ESCAPE:
            if c == "[":
                self._reset_params()
                self._state = self._CSI
            elif c == "]":
                self._state = self._OSC
            elif c in "PX^_":
                self._state = self._STRING
            elif 0x30 <= code <= 0x7E:
                self._state = self._GROUND
        elif state == self._CSI:
            if "0" <= c <= "9":
                self._param = min(self._param * 10 + int(c), _MAX_PARAM)
            elif c == ":":
                self._end_subparam()
            elif c == ";":
                self._end_param()
            elif 0x40 <= code <= 0x7E:
                self._end_param()
                self._state = self._GROUND
                self._builder._csi_dispatch(self._params, c)
            elif code > 0x7E:
                self._state = self._CSI_IGNORE
        elif state == self._CSI_IGNORE:
            if 0x40 <= code <= 0x7E:
                self._state = self._GROUND
        elif state == self._OSC:
            if c == "\x07":
                self._state = self._GROUND