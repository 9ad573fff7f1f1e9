"""Results of commands: reports, failures, and their wrapped forms."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, TextIO, Union

from bacon.command_output import CommandOutput
from bacon.line import Kind, Line, LineKind, LineType
from bacon.wrap import wrap

logger = logging.getLogger(__name__)

_LOCATION_PARTS_RE = re.compile(r"([^:\s]+):(\d+)(?::(\d+))?")
_EXPORT_KEY_RE = re.compile(r"\{([^\s}]+)\}")
_TITLE_KINDS = {
    Kind.WARNING: "warning",
    Kind.ERROR: "error",
    Kind.TEST_FAIL: "test",
}


@dataclass
class Stats:
    """Counts computed by the analysis of a command output."""

    errors: int = 0
    warnings: int = 0
    test_fails: int = 0
    passed_tests: int = 0


@dataclass
class Failure:
    """Data of a failed command."""

    error_code: int
    output: CommandOutput
    suggest_backtrace: bool = False


@dataclass
class Report:
    """The usable content of a command's output, lightly analyzed."""

    lines: list[Line] = field(default_factory=list)
    stats: Stats = field(default_factory=Stats)
    suggest_backtrace: bool = False
    output: CommandOutput = field(default_factory=CommandOutput)
    failure_keys: list[str] = field(default_factory=list)
    analyzer_exports: dict[str, str] = field(default_factory=dict)

    def reverse(self) -> None:
        """Put items in reverse order, keeping the order of the lines of each item."""
        self.lines.sort(key=lambda line: line.item_idx, reverse=True)

    def is_success(self, allow_warnings: bool, allow_failures: bool) -> bool:
        """Tell whether there's nothing to report: no error, warning or failure."""
        stats = self.stats
        return not (
            stats.errors != 0
            or (not allow_failures and stats.test_fails != 0)
            or (not allow_warnings and stats.warnings != 0)
        )

    def _extract_raw_diagnostic_context(self, line: Line) -> str:
        return "\\n".join(
            other.content.to_raw()
            for other in self.lines
            if other.line_type.kind is LineKind.NORMAL and other.item_idx == line.item_idx
        )

    def write_locations(self, w: TextIO, mission: Any, line_format: str) -> None:
        """Export the locations, one per line, formatted with line_format."""
        last_kind = "???"
        message: Optional[str] = None
        has_context = "{context}" in line_format
        for line in self.lines:
            line_type = line.line_type
            if line_type.kind is LineKind.TITLE and line_type.title_kind in _TITLE_KINDS:
                last_kind = _TITLE_KINDS[line_type.title_kind]
                message = line.title_message()
            location = line.location()
            if location is None:
                continue
            m = _LOCATION_PARTS_RE.fullmatch(location)
            if m is None:
                path, file_line, file_column = location, "", ""
            else:
                path, file_line, file_column = m.group(1), m.group(2), m.group(3) or ""
            path = str(mission.make_absolute(Path(path)))
            context = self._extract_raw_diagnostic_context(line) if has_context else ""
            values = {
                "column": file_column or "1",
                "context": context,
                "kind": last_kind,
                "line": file_line,
                "message": message or "",
                "path": path,
            }

            def replace(match: re.Match[str]) -> str:
                key = match.group(1)
                if key not in values:
                    logger.debug("unknown export key: %r", key)
                return values.get(key, "")

            w.write(_EXPORT_KEY_RE.sub(replace, line_format) + "\n")
        logger.debug("exported locations")


@dataclass
class CommandResult:
    """What an execution gave: a report, a failure, or nothing yet (None)."""

    value: Union[Report, Failure, None] = None

    @classmethod
    def build(
        cls, output: CommandOutput, exit_code: Optional[int], report: Report
    ) -> CommandResult:
        """Build the result; a report showing nothing wrong for a failing command is distrusted."""
        logger.debug("report stats: %r", report.stats)
        if exit_code is not None and exit_code != 0:
            stats = report.stats
            if stats.errors + stats.test_fails + stats.warnings == 0:
                return cls(Failure(exit_code, output, report.suggest_backtrace))
        report.output = output
        return cls(report)

    def output(self) -> Optional[CommandOutput]:
        if self.value is None:
            return None
        return self.value.output

    def report(self) -> Optional[Report]:
        return self.value if isinstance(self.value, Report) else None

    def failure(self) -> Optional[Failure]:
        return self.value if isinstance(self.value, Failure) else None

    def suggest_backtrace(self) -> bool:
        return self.value is not None and self.value.suggest_backtrace

    def is_success(self) -> bool:
        """Tell whether there's a report with no error, warning or test failure."""
        report = self.report()
        if report is None:
            return False
        stats = report.stats
        return stats.errors + stats.warnings + stats.test_fails == 0

    def reverse(self) -> None:
        if isinstance(self.value, Report):
            self.value.reverse()
        elif isinstance(self.value, Failure):
            self.value.output.reverse()

    def lines_len(self) -> int:
        if isinstance(self.value, Report):
            return len(self.value.lines)
        if isinstance(self.value, Failure):
            return len(self.value.output.lines)
        return 0


class WrappedCommandOutput:
    """A command output wrapped for a width; only valid for the output it was made from."""

    def __init__(self, cmd_output: CommandOutput, width: int) -> None:
        self.sub_lines: list[Line] = wrap(cmd_output.lines, width)
        self.wrapped_lines_count = len(cmd_output)

    def update(self, cmd_output: CommandOutput, width: int) -> None:
        """Wrap the lines added since the last wrapping, the width being unchanged."""
        self.sub_lines.extend(wrap(cmd_output.lines[self.wrapped_lines_count:], width))
        self.wrapped_lines_count = len(cmd_output.lines)


class WrappedReport:
    """A report wrapped for a width."""

    def __init__(self, report: Report, width: int) -> None:
        logger.debug("wrapping report")
        self.sub_lines: list[Line] = wrap(report.lines, width)
        self.summary_height = sum(1 for sl in self.sub_lines if sl.line_type.is_summary())


def _normal(item_idx: int) -> LineType:
    return LineType.normal()