"""Regular expression patterns matched against raw output lines."""

from __future__ import annotations

import re


class LinePattern:
    """A pattern dedicated to line matching."""

    __slots__ = ("regex",)

    def __init__(self, regex: re.Pattern[str]) -> None:
        self.regex = regex

    @classmethod
    def parse(cls, s: str) -> LinePattern:
        try:
            return cls(re.compile(s))
        except re.error as e:
            raise ValueError(f"invalid regex: {e}") from e

    def raw_line_is_match(self, line: str) -> bool:
        """Tell whether the pattern is found anywhere in the line."""
        return self.regex.search(line) is not None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LinePattern):
            return NotImplemented
        return self.regex.pattern == other.regex.pattern

    def __hash__(self) -> int:
        return hash(self.regex.pattern)

    def __repr__(self) -> str:
        return f"LinePattern({self.regex.pattern!r})"