# bacon

Building blocks for a background code checker: a tool that watches a
project, runs a job (such as `cargo check` or `cargo test`) when files
change, and shows the command output as a compact, navigable report.

The package is a library; it has no command of its own.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## What's inside

- `bacon.tty`: styled terminal lines. `TLine.from_tty` parses text holding
  ANSI CSI sequences (tabs become four spaces) into a `TLine` made of
  `TString` parts; `TLine.to_raw` drops the styling, `change_range_style`
  restyles a `TRange` of a line, and `draw` / `draw_in` write a line to a
  text stream, `draw_in` limiting it to a column count and returning the
  columns written. `TString.badge` and `TString.num_badge` build colored
  badges.
- `bacon.scroll`: `ScrollCommand`, parsed with `ScrollCommand.parse` from
  strings such as `scroll-to-top`, `ScrollLines(5)`, `scroll-lines(-3)` or
  `scroll_pages(-.2)` (a `ValueError` otherwise), printed back with `str`,
  described with `doc`, and applied to a scroll position with `apply`.
  Also `is_thumb` and `fix_scroll`.
- `bacon.drawing`: cursor movement and line clearing on a stream
  (`goto`, `goto_line`, `clear_line`).
- `bacon.sound`: `Volume` (clamped to 0–100, parsed from `"50"` or
  `"50%"`, multipliable), `SoundConfig` and `PlaySoundCommand`. There is no
  audio output: creating a `SoundPlayer` raises `SoundUnavailableError`.
- `bacon.line_pattern`: `LinePattern`, a regular expression that lines of
  output can be matched against.
- `bacon.jobs`: `Scope`, `NameOrAlias`, `ConcreteJobRef` and `JobRef`,
  with string round trips (`JobRef.parse("alias:my-test(abc)")`,
  `JobRef.parse("scope:first::test,second_test")`, `previous-or-quit`, ...).
- `bacon.job`: `Job`, the configuration of a job, with `apply` to overlay
  one job's settings on another, `Job.from_alias` for cargo aliases, and
  `*_or_default` accessors giving the default of each unset setting.
- `bacon.job_stack`: `JobStack.pick_job`, which resolves a `JobRef`
  against the settings, keeps the history for "back" navigation, returns
  `None` when the application should quit, and raises `JobNotFoundError`
  for an unknown job name.
- `bacon.mission`: `Mission`, the job to run in a given directory.
  `get_command` builds a `CommandSpec` (executable, arguments, directory,
  environment) with `$VAR` expansion, test scoping and feature flags merged
  in; it raises `EmptyCommandError` for a job without a command.
  `merge_features` joins comma separated feature lists.
- `bacon.watcher`: `Watcher`, which watches files and directories, skips
  access-only events and paths an optional ignorer excludes, and lets you
  `wait` for a change, then `stop` (it is also a context manager).
- `bacon.command_output`, `bacon.line`, `bacon.result`: command output
  lines, report lines (`Line`, `LineType`, `Kind`), `Report`, `Failure`,
  `CommandResult` and the wrapped forms `WrappedCommandOutput` and
  `WrappedReport`. `Report.write_locations` exports locations using a
  format with `{path}`, `{line}`, `{column}`, `{kind}`, `{message}` and
  `{context}` keys.
- `bacon.wrap`: `wrap` splits lines into continuation sub-lines for a
  given width.
- `bacon.search`, `bacon.search_state`: text (`Pattern`) and item index
  (`ItemIdx`) search over report lines, including matches broken by
  wrapping, and `SearchState` with its `InputField`.

## Example

```python
from bacon.jobs import JobRef
from bacon.scroll import ScrollCommand
from bacon.tty import TLine

ref = JobRef.parse("nextest(first::test,second_test)")
print(str(ref))  # nextest(first::test,second_test)

cmd = ScrollCommand.parse("scroll-pages(-2)")
print(cmd.apply(10, 100, 20))  # 0

line = TLine.from_tty("\x1b[1mwarning\x1b[0m: unused variable")
print(line.to_raw())  # warning: unused variable
```

## What it does not do

- There is no command-line program and no full-screen interface: the
  pieces for drawing, scrolling and searching are here, but no
  application loop ties them together.
- No command is ever started: `Mission.get_command` only describes it.
- The output is not analyzed: the statistics, lines and failure keys of a
  `Report` must be filled in by the caller.
- No configuration files are read; the `settings` objects passed to
  `Job.from_alias`, `JobStack.pick_job` and `Mission` are supplied by the
  caller.
- No sound is played.