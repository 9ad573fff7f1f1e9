"""Lines coming out of an executed command, before and after TTY parsing."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Union

from bacon.line import Line
from bacon.tty import TLine


class CommandStream(Enum):
    """The stream a line of output came from."""

    STDOUT = "stdout"
    STDERR = "stderr"


@dataclass(frozen=True)
class RawCommandOutputLine:
    """A line from stdout or stderr, before TTY parsing."""

    content: str
    origin: CommandStream


@dataclass
class CommandOutputLine:
    """A line from stdout or stderr, with its styles parsed."""

    content: TLine
    origin: CommandStream

    @classmethod
    def from_raw(cls, raw: RawCommandOutputLine) -> CommandOutputLine:
        return cls(TLine.from_tty(raw.content), raw.origin)


@dataclass
class CommandOutput:
    """Some output lines."""

    lines: list[Line] = field(default_factory=list)

    def reverse(self) -> None:
        self.lines.reverse()

    def push(self, line: Union[Line, CommandOutputLine]) -> None:
        """Append a line, converting a command output line when needed."""
        if isinstance(line, CommandOutputLine):
            line = Line.from_command_output_line(line)
        self.lines.append(line)

    def __len__(self) -> int:
        return len(self.lines)