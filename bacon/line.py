"""Report lines: styled content with a type and the index of the item they belong to."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any, Optional

from bacon.tty import TLine

if TYPE_CHECKING:
    from bacon.command_output import CommandOutputLine, CommandStream

_LOCATION_RE = re.compile(r"(\S+)\Z")
_TITLE_PREFIX_RE = re.compile(r"^[\s:]+")


class Kind(Enum):
    """The kind of item a title introduces."""

    WARNING = "warning"
    ERROR = "error"
    TEST_FAIL = "test_fail"


class LineKind(Enum):
    TITLE = "title"
    LOCATION = "location"
    NORMAL = "normal"
    CONTINUATION = "continuation"
    RAW = "raw"


@dataclass(frozen=True)
class LineType:
    """The type of a line; some kinds carry extra data."""

    kind: LineKind
    title_kind: Optional[Kind] = None
    offset: int = 0
    summary: bool = False
    origin: Optional[CommandStream] = None

    @classmethod
    def title(cls, kind: Kind) -> LineType:
        return cls(LineKind.TITLE, title_kind=kind)

    @classmethod
    def location(cls) -> LineType:
        return cls(LineKind.LOCATION)

    @classmethod
    def normal(cls) -> LineType:
        return cls(LineKind.NORMAL)

    @classmethod
    def continuation(cls, offset: int, summary: bool) -> LineType:
        return cls(LineKind.CONTINUATION, offset=offset, summary=summary)

    @classmethod
    def raw(cls, origin: CommandStream) -> LineType:
        return cls(LineKind.RAW, origin=origin)

    def is_summary(self) -> bool:
        """Tell whether the line is kept in summary mode."""
        if self.kind in (LineKind.TITLE, LineKind.LOCATION):
            return True
        return self.kind is LineKind.CONTINUATION and self.summary

    def cols(self) -> int:
        """Columns taken before the content of the line."""
        return 0


@dataclass
class Line:
    """A report line; lines with the same item_idx belong to the same item."""

    item_idx: int
    line_type: LineType
    content: TLine

    @classmethod
    def from_command_output_line(cls, col: CommandOutputLine) -> Line:
        return cls(0, LineType.raw(col.origin), col.content)

    def title_message(self) -> Optional[str]:
        """If the line is a title, return its message."""
        if self.line_type.kind is not LineKind.TITLE:
            return None
        unstyled = self.content.if_unstyled()
        if unstyled is not None:
            return unstyled
        if len(self.content.strings) < 2:
            return None
        return _TITLE_PREFIX_RE.sub("", self.content.strings[1].raw)

    def matches(self, summary: bool) -> bool:
        return not summary or self.line_type.is_summary()

    def location(self) -> Optional[str]:
        """Return the location as given by the tool, e.g. src/main.rs:15:3."""
        if self.line_type.kind is not LineKind.LOCATION or not self.content.strings:
            return None
        m = _LOCATION_RE.search(self.content.strings[-1].raw)
        return m.group(1) if m else None

    def location_path(self, mission: Any) -> Optional[Path]:
        """Return the absolute path of the location."""
        location = self.location()
        if location is None:
            return None
        path = Path(location)
        if not path.is_absolute():
            path = Path(mission.package_directory) / path
        return path

    def is_continuation(self) -> bool:
        return self.line_type.kind is LineKind.CONTINUATION