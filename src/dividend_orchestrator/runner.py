"""Local job runner.

The runner is the single owner of every Job and Result it creates. Dividends
run on a thread pool; each worker asks the runner to assign its dividend
before computing and hands the `TaskResult` back afterwards. All Job and
Result transitions happen under one lock, so progress counters and output
slots are never updated concurrently.

Cancellation is cooperative: a cancelled job's queued dividends never start,
and dividends already running finish but their results are dropped.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path
from typing import Protocol

from dividend_orchestrator.computing_unit import ComputingUnit
from dividend_orchestrator.config import OrchestratorSettings
from dividend_orchestrator.data import InMemoryDatasetStore
from dividend_orchestrator.dividend import DividendIndex
from dividend_orchestrator.job import Job, JobStore, Requirement, Result, Status, TaskResult
from dividend_orchestrator.kinds import plan_divisor

logger = logging.getLogger(__name__)


class DividendExecutor(Protocol):
    def run(self, requirement: Requirement, dividend: DividendIndex) -> TaskResult: ...


@dataclass
class _Tracked:
    job: Job
    result: Result
    cancelled: threading.Event = field(default_factory=threading.Event)
    finished: threading.Event = field(default_factory=threading.Event)
    futures: list[Future[None]] = field(default_factory=list)
    report_path: Path | None = None


class JobRunner:
    """Runs jobs on a local thread pool.

    Args:
        settings: Data, GROMACS and runner configuration.
        store: Dataset store shared by all workers. Defaults to an in-memory
            store reading from ``settings.data.data_dir``.
        executor: Runs one dividend. Defaults to a `ComputingUnit` over `store`.
    """

    def __init__(
        self,
        settings: OrchestratorSettings,
        *,
        store: InMemoryDatasetStore | None = None,
        executor: DividendExecutor | None = None,
    ) -> None:
        self.settings = settings
        self.store = store or InMemoryDatasetStore(settings.data)
        self.executor = executor or ComputingUnit(self.store, settings.gromacs)
        self.job_store = JobStore(settings.runner.job_state_path)

        self._lock = threading.Lock()
        self._jobs: dict[str, _Tracked] = {}
        self._pool = ThreadPoolExecutor(
            max_workers=settings.runner.max_workers,
            thread_name_prefix="dividend",
        )

    def __enter__(self) -> JobRunner:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.shutdown()

    def shutdown(self, wait: bool = True) -> None:
        self._pool.shutdown(wait=wait)

    def submit(self, requirement: Requirement) -> Job:
        """Plan and start a job.

        Raises:
            DatasetUnavailableError: If the dataset cannot be loaded; no job is
                created in that case.
        """

        document = self.store.load(requirement.dataset)
        divisor = plan_divisor(
            requirement.operator,
            len(document),
            self.settings.data.entries_per_dividend,
        )

        job = Job.create(requirement, divisor)
        job.submit()
        tracked = _Tracked(job=job, result=Result.create(requirement, divisor))

        with self._lock:
            self._jobs[job.id] = tracked
            self._persist(job)
            for index in range(divisor):
                dividend = DividendIndex(index, divisor)
                tracked.futures.append(self._pool.submit(self._run_dividend, tracked, dividend))
            snapshot = job.model_copy(deep=True)

        logger.info(
            "Job submitted",
            extra={
                "job_id": job.id,
                "cuk": str(requirement.computing_unit_kind()),
                "divisor": divisor,
            },
        )
        return snapshot

    def get(self, job_id: str) -> Job:
        """Snapshot of a job; raises KeyError for an unknown id."""
        with self._lock:
            return self._jobs[job_id].job.model_copy(deep=True)

    def jobs(self) -> list[Job]:
        with self._lock:
            return [t.job.model_copy(deep=True) for t in self._jobs.values()]

    def report_path(self, job_id: str) -> Path | None:
        with self._lock:
            return self._jobs[job_id].report_path

    def wait(self, job_id: str, timeout: float | None = None) -> Job:
        """Block until the job is terminal (or `timeout` expires) and return it."""
        with self._lock:
            tracked = self._jobs[job_id]
        tracked.finished.wait(timeout)
        return self.get(job_id)

    def cancel(self, job_id: str) -> Job:
        """Cancel a created or processing job.

        Raises:
            KeyError: Unknown job id.
            IllegalTransitionError: The job is already terminal.
        """
        with self._lock:
            tracked = self._jobs[job_id]
            tracked.job.cancel()
            tracked.cancelled.set()
            for future in tracked.futures:
                future.cancel()
            self._persist(tracked.job)
            snapshot = tracked.job.model_copy(deep=True)
        tracked.finished.set()
        return snapshot

    def _run_dividend(self, tracked: _Tracked, dividend: DividendIndex) -> None:
        job_id = tracked.job.id
        with self._lock:
            if tracked.cancelled.is_set() or tracked.job.is_terminal:
                logger.debug(
                    "Skipping dividend of finished job",
                    extra={"job_id": job_id, "dividend": str(dividend)},
                )
                return
            tracked.job.assign_task()
            self._persist(tracked.job)

        try:
            task = self.executor.run(tracked.job.requirement, dividend)
        except Exception as e:
            logger.exception(
                "Dividend crashed", extra={"job_id": job_id, "dividend": str(dividend)}
            )
            now = datetime.now(tz=UTC)
            task = TaskResult.failure(str(e) or type(e).__name__, now, now)

        self._record(tracked, dividend, task)

    def _record(self, tracked: _Tracked, dividend: DividendIndex, task: TaskResult) -> None:
        job = tracked.job
        with self._lock:
            if job.is_terminal:
                logger.warning(
                    "Dropping late dividend result",
                    extra={"job_id": job.id, "dividend": str(dividend), "status": job.status.value},
                )
                return

            tracked.result.set(dividend.index, task)
            if task.output is not None:
                job.complete_task_with_success(dividend.index, task.output, task.cost)
            else:
                job.complete_task_with_error(task.error or "", task.cost)
            self._persist(job)
            if not job.is_terminal:
                return
            for future in tracked.futures:
                future.cancel()

        if job.status is Status.COMPLETED_SUCCESS:
            tracked.report_path = self._save_report(tracked)
        tracked.finished.set()

    def _save_report(self, tracked: _Tracked) -> Path | None:
        report_dir = self.settings.runner.report_dir
        path = report_dir / f"{tracked.job.id}.json"
        try:
            report_dir.mkdir(parents=True, exist_ok=True)
            tracked.result.save_report(tracked.job.id, path)
        except OSError:
            logger.exception("Failed to save report", extra={"job_id": tracked.job.id})
            return None
        return path

    def _persist(self, job: Job) -> None:
        self.job_store.upsert(job)
