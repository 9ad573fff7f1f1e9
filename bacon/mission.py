"""A mission: the job to run, where, and with which settings."""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from bacon.job import Job
from bacon.jobs import ConcreteJobRef
from bacon.line_pattern import LinePattern

logger = logging.getLogger(__name__)

_ENV_VAR_RE = re.compile(r"\$([A-Za-z0-9_]+)")


class EmptyCommandError(ValueError):
    """Raised when the job of a mission has no command."""


@dataclass
class CommandSpec:
    """Everything needed to start the command of a mission."""

    executable: str
    args: list[str] = field(default_factory=list)
    current_dir: Optional[Path] = None
    env: dict[str, str] = field(default_factory=dict)
    with_stdout: bool = False


def merge_features(a: str, b: str) -> str:
    """Join the comma separated features of a and b, without duplicates."""
    features = dict.fromkeys(a.split(","))
    features.update(dict.fromkeys(b.split(",")))
    return ",".join(features)


def _expand_env_vars(token: str) -> str:
    def replace(m: re.Match[str]) -> str:
        value = os.environ.get(m.group(1))
        if value is None:
            logger.warning("variable %s not found in env", m.group(0))
            return m.group(0)
        return value

    return _ENV_VAR_RE.sub(replace, token)


@dataclass
class Mission:
    """What to run, after analysis of the arguments, environment and surroundings."""

    location_name: str
    concrete_job_ref: ConcreteJobRef
    execution_directory: Path
    package_directory: Path
    workspace_directory: Optional[Path]
    job: Job
    paths_to_watch: list[Path]
    settings: Any

    def is_success(self, report: Any) -> bool:
        return report.is_success(
            self.job.allow_warnings_or_default(),
            self.job.allow_failures_or_default(),
        )

    def make_absolute(self, path: Path) -> Path:
        """Make a path absolute, guessing whether it's relative to the workspace."""
        path = Path(path)
        if path.is_absolute():
            return path
        # cargo tends to give paths relative to the workspace, not to the package
        if self.workspace_directory is not None:
            joined = Path(self.workspace_directory) / path
            if joined.exists():
                return joined
        return Path(self.package_directory) / path

    def get_command(self) -> CommandSpec:
        """Build (without starting it) the command of the mission."""
        job = self.job
        settings = self.settings
        if job.expand_env_vars_or_default():
            command = [_expand_env_vars(token) for token in job.command]
        else:
            command = list(job.command)
        if not command:
            raise EmptyCommandError(
                f"Empty command in job {self.concrete_job_ref.badge_label()}"
            )

        scope = self.concrete_job_ref.scope
        if scope.has_tests() and len(command) > 2:
            # vanilla cargo test can only be scoped to one test
            if command[0] == "cargo" and command[1] == "test":
                command.extend(scope.tests[:1])
            else:
                command.extend(scope.tests)

        executable, *rest = command
        env = {**settings.all_jobs.env, **job.env}
        spec = CommandSpec(
            executable=executable,
            current_dir=self.execution_directory,
            env=env,
            with_stdout=job.need_stdout_or_default(),
        )
        if not job.extraneous_args_or_default():
            spec.args = rest
            logger.debug("command: %r", spec)
            return spec

        args = spec.args
        no_default_features_done = False
        features_done = False
        last_is_features = False
        has_double_dash = False
        tokens = iter([*rest, *settings.additional_job_args])
        for arg in tokens:
            if arg == "--":
                # what follows goes after the features arguments
                has_double_dash = True
                break
            if last_is_features:
                if settings.all_features:
                    logger.debug("ignoring features given along --all-features")
                else:
                    features_done = True
                    features = settings.features
                    if features is not None and not settings.no_default_features:
                        args += ["--features", merge_features(arg, features)]
                    elif features is not None:
                        args += ["--features", features]
                    elif not settings.no_default_features:
                        args += ["--features", arg]
                last_is_features = False
            elif arg == "--no-default-features":
                no_default_features_done = True
                args.append(arg)
            elif arg == "--features":
                last_is_features = True
            else:
                args.append(arg)
        if settings.no_default_features and not no_default_features_done:
            args.append("--no-default-features")
        if settings.all_features:
            args.append("--all-features")
        if not features_done and settings.features is not None:
            if settings.all_features:
                logger.debug("not using features because of --all-features")
            else:
                args += ["--features", settings.features]
        if has_double_dash:
            args.append("--")
            args.extend(tokens)
        logger.debug("command: %r", spec)
        return spec

    def kill_command(self) -> Optional[list[str]]:
        return None if self.job.kill is None else list(self.job.kill)

    def need_stdout(self) -> bool:
        """Tell whether stdout is needed, not just stderr."""
        if self.job.need_stdout is not None:
            return self.job.need_stdout
        return bool(self.settings.all_jobs.need_stdout)

    def analyzer(self) -> Any:
        """Return the analyzer set on the job, or None for the default one."""
        return self.job.analyzer

    def ignored_lines_patterns(self) -> Optional[list[LinePattern]]:
        patterns = self.job.ignored_lines
        if patterns is None:
            patterns = self.settings.all_jobs.ignored_lines
        return patterns or None