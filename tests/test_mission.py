from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import pytest

from bacon.job import Job
from bacon.jobs import ConcreteJobRef, NameOrAlias, Scope
from bacon.line_pattern import LinePattern
from bacon.mission import EmptyCommandError, Mission, merge_features


@dataclass
class _Settings:
    all_jobs: Job = field(default_factory=Job)
    additional_job_args: list = field(default_factory=list)
    all_features: bool = False
    features: Optional[str] = None
    no_default_features: bool = False


def _mission(tmp_path, job, settings=None, job_ref=None, workspace=None):
    return Mission(
        location_name="demo",
        concrete_job_ref=job_ref or ConcreteJobRef.from_job_name("check"),
        execution_directory=tmp_path,
        package_directory=tmp_path / "pkg",
        workspace_directory=workspace,
        job=job,
        paths_to_watch=[tmp_path],
        settings=settings or _Settings(),
    )


def test_merge_features_has_union():
    merged = merge_features("a,b", "b,c")
    assert sorted(merged.split(",")) == ["a", "b", "c"]


def test_env_vars_are_expanded(tmp_path, monkeypatch):
    monkeypatch.setenv("BACON_TEST_VAR", "value")
    job = Job(command=["echo", "$BACON_TEST_VAR/x"], extraneous_args=False)
    spec = _mission(tmp_path, job).get_command()
    assert spec.executable == "echo"
    assert spec.args == ["value/x"]


def test_missing_env_var_is_kept(tmp_path, monkeypatch):
    monkeypatch.delenv("BACON_MISSING_VAR", raising=False)
    job = Job(command=["echo", "$BACON_MISSING_VAR"], extraneous_args=False)
    assert _mission(tmp_path, job).get_command().args == ["$BACON_MISSING_VAR"]


def test_expansion_can_be_disabled(tmp_path, monkeypatch):
    monkeypatch.setenv("BACON_TEST_VAR", "value")
    job = Job(command=["echo", "$BACON_TEST_VAR"], expand_env_vars=False, extraneous_args=False)
    assert _mission(tmp_path, job).get_command().args == ["$BACON_TEST_VAR"]


def test_empty_command_raises(tmp_path):
    with pytest.raises(EmptyCommandError, match="Empty command in job check"):
        _mission(tmp_path, Job()).get_command()


def test_cargo_test_scoped_to_first_test(tmp_path):
    ref = ConcreteJobRef(NameOrAlias("test"), Scope(("t1", "t2")))
    job = Job(command=["cargo", "test", "--quiet"], extraneous_args=False)
    spec = _mission(tmp_path, job, job_ref=ref).get_command()
    assert spec.args == ["test", "--quiet", "t1"]


def test_other_command_gets_all_tests(tmp_path):
    ref = ConcreteJobRef(NameOrAlias("nextest"), Scope(("t1", "t2")))
    job = Job(command=["cargo", "nextest", "run"], extraneous_args=False)
    spec = _mission(tmp_path, job, job_ref=ref).get_command()
    assert spec.args == ["nextest", "run", "t1", "t2"]


def test_short_command_gets_no_tests(tmp_path):
    ref = ConcreteJobRef(NameOrAlias("test"), Scope(("t1",)))
    job = Job(command=["cargo", "test"], extraneous_args=False)
    assert _mission(tmp_path, job, job_ref=ref).get_command().args == ["test"]


def test_env_and_directory(tmp_path):
    settings = _Settings(all_jobs=Job(env={"A": "1", "B": "1"}))
    job = Job(command=["cargo", "check"], env={"B": "2"}, need_stdout=True)
    spec = _mission(tmp_path, job, settings).get_command()
    assert spec.env == {"A": "1", "B": "2"}
    assert spec.current_dir == tmp_path
    assert spec.with_stdout is True


def test_without_extraneous_args_settings_are_ignored(tmp_path):
    settings = _Settings(all_features=True, additional_job_args=["--release"])
    job = Job(command=["cargo", "check"], extraneous_args=False)
    assert _mission(tmp_path, job, settings).get_command().args == ["check"]


def test_features_are_merged(tmp_path):
    settings = _Settings(features="b,c")
    job = Job(command=["cargo", "check", "--features", "a,b"])
    args = _mission(tmp_path, job, settings).get_command().args
    assert args[:2] == ["check", "--features"]
    assert len(args) == 3
    assert set(args[2].split(",")) == {"a", "b", "c"}


def test_no_default_features_replaces_job_features(tmp_path):
    settings = _Settings(features="c", no_default_features=True)
    job = Job(command=["cargo", "check", "--features", "a"])
    args = _mission(tmp_path, job, settings).get_command().args
    assert args == ["check", "--features", "c", "--no-default-features"]


def test_no_default_features_without_features_drops_job_features(tmp_path):
    settings = _Settings(no_default_features=True)
    job = Job(command=["cargo", "check", "--features", "a"])
    args = _mission(tmp_path, job, settings).get_command().args
    assert args == ["check", "--no-default-features"]


def test_no_default_features_not_duplicated(tmp_path):
    settings = _Settings(no_default_features=True)
    job = Job(command=["cargo", "check", "--no-default-features"])
    args = _mission(tmp_path, job, settings).get_command().args
    assert args.count("--no-default-features") == 1


def test_all_features_drops_features(tmp_path):
    settings = _Settings(features="x", all_features=True)
    job = Job(command=["cargo", "check", "--features", "a"])
    args = _mission(tmp_path, job, settings).get_command().args
    assert args == ["check", "--all-features"]


def test_settings_features_added(tmp_path):
    settings = _Settings(features="x")
    job = Job(command=["cargo", "check"])
    args = _mission(tmp_path, job, settings).get_command().args
    assert args == ["check", "--features", "x"]


def test_features_go_before_double_dash(tmp_path):
    settings = _Settings(features="f", additional_job_args=["y"])
    job = Job(command=["cargo", "run", "--", "x"])
    args = _mission(tmp_path, job, settings).get_command().args
    assert args == ["run", "--features", "f", "--", "x", "y"]


def test_make_absolute_keeps_absolute(tmp_path):
    mission = _mission(tmp_path, Job(command=["cargo"]))
    assert mission.make_absolute(tmp_path / "a.rs") == tmp_path / "a.rs"


def test_make_absolute_prefers_existing_workspace_path(tmp_path):
    workspace = tmp_path / "ws"
    (workspace / "src").mkdir(parents=True)
    (workspace / "src" / "lib.rs").write_text("")
    mission = _mission(tmp_path, Job(command=["cargo"]), workspace=workspace)
    assert mission.make_absolute(Path("src/lib.rs")) == workspace / "src" / "lib.rs"
    assert mission.make_absolute(Path("src/main.rs")) == tmp_path / "pkg" / "src" / "main.rs"


def test_need_stdout_falls_back_to_all_jobs(tmp_path):
    settings = _Settings(all_jobs=Job(need_stdout=True))
    assert _mission(tmp_path, Job(), settings).need_stdout() is True
    assert _mission(tmp_path, Job(need_stdout=False), settings).need_stdout() is False
    assert _mission(tmp_path, Job()).need_stdout() is False


def test_ignored_lines_patterns(tmp_path):
    general = [LinePattern.parse("general")]
    settings = _Settings(all_jobs=Job(ignored_lines=general))
    assert _mission(tmp_path, Job(), settings).ignored_lines_patterns() == general
    specific = [LinePattern.parse("specific")]
    job = Job(ignored_lines=specific)
    assert _mission(tmp_path, job, settings).ignored_lines_patterns() == specific
    assert _mission(tmp_path, Job(ignored_lines=[]), settings).ignored_lines_patterns() is None


def test_is_success_passes_job_allowances(tmp_path):
    calls = []

    class _Report:
        def is_success(self, allow_warnings, allow_failures):
            calls.append((allow_warnings, allow_failures))
            return True

    mission = _mission(tmp_path, Job(allow_warnings=True))
    assert mission.is_success(_Report()) is True
    assert calls == [(True, False)]


def test_kill_command_is_a_copy(tmp_path):
    job = Job(kill=["die"])
    mission = _mission(tmp_path, job)
    kill = mission.kill_command()
    assert kill == ["die"]
    kill.append("now")
    assert job.kill == ["die"]
    assert _mission(tmp_path, Job()).kill_command() is None


def test_analyzer_comes_from_job(tmp_path):
    assert _mission(tmp_path, Job(analyzer="nextest")).analyzer() == "nextest"
    assert _mission(tmp_path, Job()).analyzer() is None