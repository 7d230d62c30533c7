"""Unit tests for the CLI."""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterator
from pathlib import Path

import pytest

from dividend_orchestrator.cli import build_parser, main
from dividend_orchestrator.job import Job, JobStore, Requirement
from dividend_orchestrator.kinds import GmxCommandKind
from dividend_orchestrator.operators import build_report
from dividend_orchestrator.operators.gmx_command import GmxCommandOutput


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Run in tmp_path with state under it, and restore root logging afterwards."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("DIVIDEND_RUNNER_REPORT_DIR", str(tmp_path / "reports"))
    monkeypatch.setenv("DIVIDEND_RUNNER_JOB_STATE_PATH", str(tmp_path / "state" / "jobs.json"))
    monkeypatch.setenv("DIVIDEND_GROMACS_WORK_DIR", str(tmp_path / "gromacs"))

    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def test_parser_gmx_run_keeps_argument_order() -> None:
    argv = ["gmx", "run", "--simulation-id", "s1", "--sub-command", "grompp"]
    argv += ["--arg=-f", "--arg", "md.mdp", "--prompt", "1", "--prompt", "0"]

    args = build_parser().parse_args(argv)

    assert args.arguments == ["-f", "md.mdp"]
    assert args.prompts == ["1", "0"]


def test_parser_rejects_unknown_dataset() -> None:
    with pytest.raises(SystemExit):
        build_parser().parse_args(["ob", "ss", "--dataset", "zinc", "--smarts", "C"])


def test_examples_are_valid_requirements(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["ob", "examples"]) == 0

    out = capsys.readouterr().out
    lines = [line for line in out.splitlines() if line.startswith('{"input"')]
    requirements = [Requirement.model_validate_json(line) for line in lines]
    assert len(requirements) == 3
    assert requirements[1] == Requirement.default()


def test_report_command_renders_saved_report(
    tmp_path: Path, gmx_requirement: Requirement, capsys: pytest.CaptureFixture[str]
) -> None:
    path = tmp_path / "report.json"
    build_report(
        "job-1",
        gmx_requirement.computing_unit_kind(),
        gmx_requirement.input,
        [GmxCommandOutput(success=True, stdout="hello").model_dump_json()],
    ).save(path)

    assert main(["report", str(path)]) == 0
    assert "stdout: hello" in capsys.readouterr().out


def test_report_command_missing_file(tmp_path: Path) -> None:
    assert main(["report", str(tmp_path / "missing.json")]) == 1


def test_invalid_fingerprint_fails(capsys: pytest.CaptureFixture[str]) -> None:
    code = main(["ob", "sim", "--dataset", "dummy", "--smiles", "C", "--fingerprint", "ob_x"])

    assert code == 1
    assert "shall be in format" in capsys.readouterr().err


def test_jobs_command_lists_persisted_jobs(
    tmp_path: Path, gmx_requirement: Requirement, capsys: pytest.CaptureFixture[str]
) -> None:
    job = Job.create(gmx_requirement, 1)
    JobStore(tmp_path / "state" / "jobs.json").upsert(job)

    assert main(["jobs"]) == 0
    assert job.id in capsys.readouterr().out


def test_datasets_command(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["datasets"]) == 0

    out = capsys.readouterr().out
    assert "pub_chem" in out
    assert "missing" in out


@pytest.mark.skipif(sys.platform == "win32", reason="uses a POSIX shell script")
def test_gmx_run_command(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    script = tmp_path / "fake_gmx"
    script.write_text('#!/bin/sh\necho "ran $*"\n', encoding="utf-8")
    script.chmod(0o755)
    (tmp_path / "gromacs" / "s1").mkdir(parents=True)
    monkeypatch.setenv("DIVIDEND_GROMACS_EXECUTABLE", str(script))

    code = main(["gmx", "run", "--simulation-id", "s1", "--sub-command", "mdrun", "--arg=-v"])

    assert code == 0
    out = capsys.readouterr().out
    assert "ran mdrun -v" in out
    assert str(GmxCommandKind()) in out
    assert len(list((tmp_path / "reports").glob("*.json"))) == 1
