"""The stack of the jobs that were run, to go back to previous ones or scope them."""

from __future__ import annotations

import copy
import logging
from typing import Any, Optional

from bacon.job import Job
from bacon.jobs import ConcreteJobRef, JobRef, JobRefKind

logger = logging.getLogger(__name__)


class JobNotFoundError(LookupError):
    """Raised when a job reference names a job that isn't configured."""

    def __init__(self, name: str) -> None:
        super().__init__(f"job not found: {name!r}")
        self.name = name


class JobStack:
    """The jobs that were run, most recent last."""

    def __init__(self) -> None:
        self._entries: list[ConcreteJobRef] = []

    @property
    def entries(self) -> tuple[ConcreteJobRef, ...]:
        return tuple(self._entries)

    def pick_job(
        self, job_ref: JobRef, settings: Any
    ) -> Optional[tuple[ConcreteJobRef, Job]]:
        """Determine the job to run from job_ref, updating the stack.

        Return None when the application is supposed to quit.
        """
        logger.debug("picking job %s", job_ref)
        kind = job_ref.kind
        if kind is JobRefKind.DEFAULT:
            concrete = settings.default_job
        elif kind is JobRefKind.INITIAL:
            concrete = settings.arg_job if settings.arg_job is not None else settings.default_job
        elif kind in (JobRefKind.PREVIOUS, JobRefKind.PREVIOUS_OR_QUIT):
            current = self._entries.pop() if self._entries else None
            if self._entries:
                concrete = self._entries.pop()
            elif current is not None and current.scope.has_tests():
                # rather than quitting, the user probably wants to "unscope"
                concrete = ConcreteJobRef(current.name_or_alias)
            elif kind is JobRefKind.PREVIOUS_OR_QUIT:
                return None
            elif current is None:
                logger.error("no current job")
                return None
            else:
                concrete = current
        elif kind is JobRefKind.CONCRETE:
            concrete = job_ref.concrete
        else:
            if not self._entries:
                return None
            concrete = ConcreteJobRef(self._entries[-1].name_or_alias, job_ref.scope)

        name_or_alias = concrete.name_or_alias
        if name_or_alias.is_alias:
            job = Job.from_alias(name_or_alias.name, settings)
        else:
            configured = settings.jobs.get(name_or_alias.name)
            if configured is None:
                raise JobNotFoundError(name_or_alias.name)
            job = copy.deepcopy(configured)
        if not self._entries or self._entries[-1] != concrete:
            self._entries.append(concrete)
        return concrete, job