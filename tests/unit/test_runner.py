"""Unit tests for the local job runner.

Most tests use an in-process executor so they run without Open Babel or
GROMACS installed.
"""

from __future__ import annotations

import gzip
import sys
import threading
from datetime import UTC, datetime
from pathlib import Path

import pytest

from dividend_orchestrator.config import OrchestratorSettings
from dividend_orchestrator.dividend import DividendIndex
from dividend_orchestrator.errors import DatasetUnavailableError, IllegalTransitionError
from dividend_orchestrator.job import BlockProgress, JobStore, Requirement, Status, TaskResult
from dividend_orchestrator.kinds import DatasetKind, SubstructureMatchKind
from dividend_orchestrator.operators import load_report
from dividend_orchestrator.operators.similarity import SimilarityOutput, SimilarityReport
from dividend_orchestrator.runner import JobRunner


class FakeExecutor:
    """Returns one hit per dividend; fails or blocks on request."""

    def __init__(
        self,
        fail_index: int | None = None,
        crash: bool = False,
        release: threading.Event | None = None,
    ) -> None:
        self.fail_index = fail_index
        self.crash = crash
        self.release = release
        self.started = threading.Event()
        self.calls: list[DividendIndex] = []
        self._lock = threading.Lock()

    def run(self, requirement: Requirement, dividend: DividendIndex) -> TaskResult:
        with self._lock:
            self.calls.append(dividend)
        self.started.set()
        if self.release is not None:
            self.release.wait(5)
        if self.crash:
            raise RuntimeError("worker lost")

        now = datetime.now(tz=UTC)
        if dividend.index == self.fail_index:
            return TaskResult.failure(f"dividend {dividend} failed", now, now, cost=1.0)
        output = SimilarityOutput(results=[(0.5, f"label_{dividend.index}")])
        return TaskResult.success(output.model_dump_json(), now, now, cost=1.0)


def test_successful_job_saves_report(
    settings: OrchestratorSettings, similarity_requirement: Requirement
) -> None:
    with JobRunner(settings, executor=FakeExecutor()) as runner:
        submitted = runner.submit(similarity_requirement)
        assert submitted.divisor == 4

        job = runner.wait(submitted.id, timeout=10)
        report_path = runner.report_path(job.id)

    assert job.status is Status.COMPLETED_SUCCESS
    assert isinstance(job.progress, BlockProgress)
    assert job.progress.as_tuple() == (0, 0, 4)
    assert job.cost == pytest.approx(4.0)
    assert report_path == settings.runner.report_dir / f"{job.id}.json"

    report = load_report(report_path.read_text(encoding="utf-8"))
    assert isinstance(report, SimilarityReport)
    assert [entry_id for _, entry_id in report.output.results] == [
        "label_0",
        "label_1",
        "label_2",
        "label_3",
    ]

    stored = JobStore(settings.runner.job_state_path).get(job.id)
    assert stored is not None
    assert stored.status is Status.COMPLETED_SUCCESS


def test_one_failed_dividend_fails_the_job(
    settings: OrchestratorSettings, similarity_requirement: Requirement
) -> None:
    with JobRunner(settings, executor=FakeExecutor(fail_index=2)) as runner:
        job = runner.wait(runner.submit(similarity_requirement).id, timeout=10)
        report_path = runner.report_path(job.id)

    assert job.status is Status.COMPLETED_ERROR
    assert job.get_result().outputs == []
    assert job.get_result().error == "dividend 2/4 failed"
    assert report_path is None
    assert not settings.runner.report_dir.exists()


def test_crashing_executor_fails_the_job(
    settings: OrchestratorSettings, similarity_requirement: Requirement
) -> None:
    with JobRunner(settings, executor=FakeExecutor(crash=True)) as runner:
        job = runner.wait(runner.submit(similarity_requirement).id, timeout=10)

    assert job.status is Status.COMPLETED_ERROR
    assert job.error == "worker lost"


def test_cancel_drops_late_results(
    settings: OrchestratorSettings, similarity_requirement: Requirement
) -> None:
    release = threading.Event()
    executor = FakeExecutor(release=release)

    with JobRunner(settings, executor=executor) as runner:
        submitted = runner.submit(similarity_requirement)
        assert executor.started.wait(5)

        cancelled = runner.cancel(submitted.id)
        release.set()
        job = runner.wait(submitted.id, timeout=10)

        with pytest.raises(IllegalTransitionError):
            runner.cancel(submitted.id)

    assert cancelled.status is Status.CANCELLED
    assert job.status is Status.CANCELLED
    assert job.outputs == [None, None, None, None]
    assert job.get_result().outputs == []
    # Two workers: at most the two dividends already running were started.
    assert len(executor.calls) <= settings.runner.max_workers


def test_unavailable_dataset_creates_no_job(settings: OrchestratorSettings) -> None:
    requirement = Requirement(
        input='{"smarts":"C"}', operator=SubstructureMatchKind(), dataset=DatasetKind.CHEMBL30
    )

    with JobRunner(settings, executor=FakeExecutor()) as runner:
        with pytest.raises(DatasetUnavailableError):
            runner.submit(requirement)
        assert runner.jobs() == []


def test_divisor_follows_loaded_entries(settings: OrchestratorSettings) -> None:
    with gzip.open(settings.data.data_dir / "CID-SMILES.gz", mode="wt", encoding="utf-8") as f:
        f.write("1 C\n2 CC\n3 CCC\n4 CCCC\n")
    settings.data.pubchem_limit = 3
    settings.data.entries_per_dividend = 2
    requirement = Requirement(
        input='{"smarts":"C"}', operator=SubstructureMatchKind(), dataset=DatasetKind.PUB_CHEM
    )

    with JobRunner(settings, executor=FakeExecutor()) as runner:
        submitted = runner.submit(requirement)
        assert submitted.divisor == 2
        job = runner.wait(submitted.id, timeout=10)

    assert job.status is Status.COMPLETED_SUCCESS

    settings.data.entries_per_dividend = 100_000
    with JobRunner(settings, executor=FakeExecutor()) as runner:
        assert runner.submit(requirement).divisor == 1


def test_unknown_job_id(settings: OrchestratorSettings) -> None:
    with JobRunner(settings, executor=FakeExecutor()) as runner:
        with pytest.raises(KeyError):
            runner.get("missing")


@pytest.mark.skipif(sys.platform == "win32", reason="uses a POSIX shell script")
def test_gmx_job_end_to_end(
    settings: OrchestratorSettings, gmx_requirement: Requirement, tmp_path: Path
) -> None:
    script = tmp_path / "fake_gmx"
    script.write_text('#!/bin/sh\necho "ran $1"\n', encoding="utf-8")
    script.chmod(0o755)
    (settings.gromacs.work_dir / "lysozyme").mkdir()
    settings.gromacs.executable = str(script)

    with JobRunner(settings) as runner:
        job = runner.wait(runner.submit(gmx_requirement).id, timeout=10)
        report_path = runner.report_path(job.id)

    assert job.status is Status.COMPLETED_SUCCESS
    assert report_path is not None
    rendered = load_report(report_path.read_text(encoding="utf-8")).render()
    assert "ran pdb2gmx" in rendered


def test_gmx_job_missing_directory_fails(
    settings: OrchestratorSettings, gmx_requirement: Requirement
) -> None:
    with JobRunner(settings) as runner:
        job = runner.wait(runner.submit(gmx_requirement).id, timeout=10)

    assert job.status is Status.COMPLETED_ERROR
    assert job.error is not None
    assert "does not exist" in job.error


def test_similarity_job_end_to_end(
    settings: OrchestratorSettings, similarity_requirement: Requirement
) -> None:
    pytest.importorskip("openbabel")

    with JobRunner(settings) as runner:
        submitted = runner.submit(similarity_requirement)
        assert submitted.divisor == 4
        job = runner.wait(submitted.id, timeout=30)
        report_path = runner.report_path(job.id)

    assert job.status is Status.COMPLETED_SUCCESS
    assert report_path is not None
    report = load_report(report_path.read_text(encoding="utf-8"))
    assert isinstance(report, SimilarityReport)
    assert report.output.count() == 2
    assert all(coeff > 0.045 for coeff, _ in report.output.results)
