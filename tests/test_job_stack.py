from dataclasses import dataclass, field
from typing import Optional

import pytest

from bacon.job import DEFAULT_ARGS, Job
from bacon.job_stack import JobNotFoundError, JobStack
from bacon.jobs import ConcreteJobRef, JobRef, JobRefKind, NameOrAlias, Scope


@dataclass
class _Settings:
    jobs: dict = field(default_factory=dict)
    default_job: ConcreteJobRef = field(default_factory=ConcreteJobRef)
    arg_job: Optional[ConcreteJobRef] = None
    additional_alias_args: Optional[list] = None


def _settings(**kwargs):
    jobs = {
        "check": Job(command=["cargo", "check"]),
        "test": Job(command=["cargo", "test"]),
        "clippy": Job(command=["cargo", "clippy"]),
    }
    return _Settings(jobs=jobs, **kwargs)


def _named(name):
    return JobRef.from_job_name(name)


def test_initial_without_arg_job_uses_default():
    settings = _settings()
    concrete, job = JobStack().pick_job(JobRef(JobRefKind.INITIAL), settings)
    assert concrete == ConcreteJobRef.from_job_name("check")
    assert job.command == ["cargo", "check"]


def test_initial_with_arg_job():
    settings = _settings(arg_job=ConcreteJobRef.from_job_name("clippy"))
    concrete, job = JobStack().pick_job(JobRef(JobRefKind.INITIAL), settings)
    assert concrete.name_or_alias.name == "clippy"
    assert job.command == ["cargo", "clippy"]


def test_default_ignores_arg_job():
    settings = _settings(arg_job=ConcreteJobRef.from_job_name("clippy"))
    concrete, _ = JobStack().pick_job(JobRef(JobRefKind.DEFAULT), settings)
    assert concrete.name_or_alias.name == "check"


def test_unknown_job_raises():
    with pytest.raises(JobNotFoundError) as info:
        JobStack().pick_job(_named("nope"), _settings())
    assert info.value.name == "nope"


def test_alias_builds_cargo_command():
    ref = JobRef(JobRefKind.CONCRETE, concrete=ConcreteJobRef(NameOrAlias("my-alias", True)))
    concrete, job = JobStack().pick_job(ref, _settings())
    assert concrete.name_or_alias.is_alias
    assert job.command == ["cargo", "my-alias", *DEFAULT_ARGS]


def test_previous_goes_back():
    stack = JobStack()
    settings = _settings()
    stack.pick_job(_named("check"), settings)
    stack.pick_job(_named("test"), settings)
    concrete, job = stack.pick_job(JobRef(JobRefKind.PREVIOUS), settings)
    assert concrete.name_or_alias.name == "check"
    assert job.command == ["cargo", "check"]
    assert stack.entries == (ConcreteJobRef.from_job_name("check"),)


def test_previous_with_single_entry_keeps_current():
    stack = JobStack()
    settings = _settings()
    stack.pick_job(_named("test"), settings)
    concrete, _ = stack.pick_job(JobRef(JobRefKind.PREVIOUS), settings)
    assert concrete.name_or_alias.name == "test"
    assert len(stack.entries) == 1


def test_previous_or_quit_with_single_entry_quits():
    stack = JobStack()
    settings = _settings()
    stack.pick_job(_named("test"), settings)
    assert stack.pick_job(JobRef(JobRefKind.PREVIOUS_OR_QUIT), settings) is None


def test_previous_on_empty_stack_quits():
    assert JobStack().pick_job(JobRef(JobRefKind.PREVIOUS), _settings()) is None


def test_previous_on_scoped_job_unscopes():
    stack = JobStack()
    settings = _settings()
    scoped = ConcreteJobRef(NameOrAlias("test"), Scope(("a::b",)))
    stack.pick_job(JobRef(JobRefKind.CONCRETE, concrete=scoped), settings)
    concrete, _ = stack.pick_job(JobRef(JobRefKind.PREVIOUS_OR_QUIT), settings)
    assert concrete == ConcreteJobRef.from_job_name("test")
    assert not concrete.scope.has_tests()


def test_scope_on_empty_stack_quits():
    ref = JobRef(JobRefKind.SCOPE, scope=Scope(("a",)))
    assert JobStack().pick_job(ref, _settings()) is None


def test_scope_applies_to_current_job():
    stack = JobStack()
    settings = _settings()
    stack.pick_job(_named("test"), settings)
    ref = JobRef(JobRefKind.SCOPE, scope=Scope(("a", "b")))
    concrete, job = stack.pick_job(ref, settings)
    assert concrete.name_or_alias.name == "test"
    assert concrete.scope.tests == ("a", "b")
    assert job.command == ["cargo", "test"]
    assert len(stack.entries) == 2


def test_same_job_is_not_pushed_twice():
    stack = JobStack()
    settings = _settings()
    stack.pick_job(_named("check"), settings)
    stack.pick_job(_named("check"), settings)
    assert stack.entries == (ConcreteJobRef.from_job_name("check"),)


def test_returned_job_is_a_copy():
    settings = _settings()
    _, job = JobStack().pick_job(_named("check"), settings)
    job.command.append("--all")
    assert settings.jobs["check"].command == ["cargo", "check"]