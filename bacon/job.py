"""The description of a job: a command and how to run and judge it."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from datetime import timedelta
from enum import Enum
from typing import Any, Optional

from bacon.line_pattern import LinePattern
from bacon.sound import SoundConfig

DEFAULT_ARGS = ("--color", "always")
DEFAULT_GRACE_PERIOD = timedelta(milliseconds=15)


class OnChangeStrategy(Enum):
    """What to do with a running job when files change."""

    WAIT_THEN_RESTART = "wait_then_restart"
    KILL_THEN_RESTART = "kill_then_restart"


_OPTIONAL_FIELDS = (
    "allow_failures",
    "allow_warnings",
    "analyzer",
    "apply_gitignore",
    "background",
    "default_watch",
    "expand_env_vars",
    "extraneous_args",
    "ignored_lines",
    "kill",
    "need_stdout",
    "on_change_strategy",
    "on_success",
    "grace_period",
    "on_failure",
    "watch",
    "show_changes_count",
)


@dataclass
class Job:
    """One of the jobs that can be run; None means "not set"."""

    allow_failures: Optional[bool] = None
    allow_warnings: Optional[bool] = None
    analyzer: Any = None
    apply_gitignore: Optional[bool] = None
    background: Optional[bool] = None
    command: list[str] = field(default_factory=list)
    default_watch: Optional[bool] = None
    env: dict[str, str] = field(default_factory=dict)
    expand_env_vars: Optional[bool] = None
    extraneous_args: Optional[bool] = None
    ignore: list[str] = field(default_factory=list)
    ignored_lines: Optional[list[LinePattern]] = None
    kill: Optional[list[str]] = None
    need_stdout: Optional[bool] = None
    on_change_strategy: Optional[OnChangeStrategy] = None
    on_success: Any = None
    grace_period: Optional[timedelta] = None
    on_failure: Any = None
    watch: Optional[list[str]] = None
    show_changes_count: Optional[bool] = None
    sound: SoundConfig = field(default_factory=SoundConfig)

    @classmethod
    def from_alias(cls, alias_name: str, settings: Any) -> Job:
        """Build a job running a cargo alias."""
        additional = settings.additional_alias_args
        args = DEFAULT_ARGS if additional is None else additional
        return cls(command=["cargo", alias_name, *args])

    def allow_failures_or_default(self) -> bool:
        return bool(self.allow_failures)

    def allow_warnings_or_default(self) -> bool:
        return bool(self.allow_warnings)

    def background_or_default(self) -> bool:
        return True if self.background is None else self.background

    def default_watch_or_default(self) -> bool:
        return True if self.default_watch is None else self.default_watch

    def expand_env_vars_or_default(self) -> bool:
        return True if self.expand_env_vars is None else self.expand_env_vars

    def need_stdout_or_default(self) -> bool:
        return bool(self.need_stdout)

    def extraneous_args_or_default(self) -> bool:
        return True if self.extraneous_args is None else self.extraneous_args

    def show_changes_count_or_default(self) -> bool:
        return bool(self.show_changes_count)

    def grace_period_or_default(self) -> timedelta:
        return DEFAULT_GRACE_PERIOD if self.grace_period is None else self.grace_period

    def on_change_strategy_or_default(self) -> OnChangeStrategy:
        if self.on_change_strategy is None:
            return OnChangeStrategy.WAIT_THEN_RESTART
        return self.on_change_strategy

    def apply(self, job: Job) -> None:
        """Override this job's settings with the ones set in job."""
        for name in _OPTIONAL_FIELDS:
            value = getattr(job, name)
            if value is not None:
                setattr(self, name, copy.copy(value))
        if job.command:
            self.command = list(job.command)
        self.env.update(job.env)
        for pattern in job.ignore:
            if pattern not in self.ignore:
                self.ignore.append(pattern)
        self.sound.apply(job.sound)