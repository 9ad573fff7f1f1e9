"""References to jobs: names, aliases, scopes and stack instructions."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Iterable, Optional

logger = logging.getLogger(__name__)

_CONCRETE_RE = re.compile(r"(alias:)?([^()]+)(?:\(([^)]+)\))?")
_SCOPE_RE = re.compile(r"scope:(.+)", re.IGNORECASE)


def _split_tests(s: str) -> tuple[str, ...]:
    return tuple(t for t in s.split(",") if t.strip())


@dataclass(frozen=True)
class Scope:
    """A dynamic reduction of a job execution to some tests."""

    tests: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "tests", tuple(self.tests))

    def has_tests(self) -> bool:
        return bool(self.tests)


@dataclass(frozen=True)
class NameOrAlias:
    """Either the name of a configured job or a cargo alias."""

    name: str
    is_alias: bool = False


@dataclass(frozen=True)
class ConcreteJobRef:
    """A job reference usable without looking at the job stack."""

    name_or_alias: NameOrAlias = field(default_factory=lambda: NameOrAlias("check"))
    scope: Scope = field(default_factory=Scope)

    @classmethod
    def from_job_name(cls, s: str) -> ConcreteJobRef:
        return cls(NameOrAlias(str(s)))

    def badge_label(self) -> str:
        label = self.name_or_alias.name
        if self.scope.has_tests():
            label += " (scoped)"
        return label

    def with_scope(self, scope: Scope) -> ConcreteJobRef:
        return replace(self, scope=scope)

    @classmethod
    def parse(cls, s: str) -> ConcreteJobRef:
        if not s:
            raise ValueError("empty job name")
        return cls._from_str(s)

    @classmethod
    def _from_str(cls, s: str) -> ConcreteJobRef:
        m = _CONCRETE_RE.fullmatch(s)
        if m is None:
            logger.warning("unexpected job ref: %r", s)
            return cls.from_job_name(s)
        alias_prefix, name, tests = m.groups()
        return cls(
            NameOrAlias(name, is_alias=alias_prefix is not None),
            Scope(_split_tests(tests or "")),
        )

    def __str__(self) -> str:
        if self.name_or_alias.is_alias:
            text = f"alias:{self.name_or_alias.name}"
        else:
            text = self.name_or_alias.name
        if self.scope.has_tests():
            text += f"({','.join(self.scope.tests)})"
        return text


class JobRefKind(Enum):
    DEFAULT = "default"
    INITIAL = "initial"
    PREVIOUS = "previous"
    PREVIOUS_OR_QUIT = "previous-or-quit"
    CONCRETE = "concrete"
    SCOPE = "scope"


_SIMPLE_KINDS = {
    kind.value: kind
    for kind in (
        JobRefKind.DEFAULT,
        JobRefKind.INITIAL,
        JobRefKind.PREVIOUS,
        JobRefKind.PREVIOUS_OR_QUIT,
    )
}


@dataclass(frozen=True)
class JobRef:
    """An instruction telling which job to run next.

    A CONCRETE reference carries `concrete`, a SCOPE reference carries `scope`.
    """

    kind: JobRefKind
    concrete: Optional[ConcreteJobRef] = None
    scope: Optional[Scope] = None

    def __post_init__(self) -> None:
        if self.kind is JobRefKind.CONCRETE and self.concrete is None:
            raise ValueError("a concrete job ref needs a concrete job")
        if self.kind is JobRefKind.SCOPE and self.scope is None:
            raise ValueError("a scope job ref needs a scope")

    @classmethod
    def from_job_name(cls, s: str) -> JobRef:
        return cls(JobRefKind.CONCRETE, concrete=ConcreteJobRef.from_job_name(s))

    @classmethod
    def parse(cls, s: str) -> JobRef:
        kind = _SIMPLE_KINDS.get(s.lower())
        if kind is not None:
            return cls(kind)
        m = _SCOPE_RE.fullmatch(s)
        if m is not None:
            return cls(JobRefKind.SCOPE, scope=Scope(_split_tests(m.group(1))))
        return cls(JobRefKind.CONCRETE, concrete=ConcreteJobRef._from_str(s))

    def __str__(self) -> str:
        if self.kind is JobRefKind.CONCRETE:
            return str(self.concrete)
        if self.kind is JobRefKind.SCOPE:
            return f"scope:{','.join(self.scope.tests)}"
        return self.kind.value


def scope_of(tests: Iterable[str]) -> Scope:
    """Build a scope from an iterable of test names."""
    return Scope(tuple(tests))