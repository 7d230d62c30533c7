"""Job: the mutable lifecycle aggregate of one requirement.

A job is split into `divisor` dividends. Workers report back through
`assign_task` / `complete_task_with_success` / `complete_task_with_error`;
those read-modify-write the progress counters and the output slots, so they
must be applied by a single owner under mutual exclusion (see
`dividend_orchestrator.runner.JobRunner`).

Policy: any single dividend failure finalizes the whole job as
`COMPLETED_ERROR` and the job then only exposes that error.
"""

from __future__ import annotations

import logging
import uuid
from datetime import UTC, datetime, timedelta

from pydantic import BaseModel, Field

from dividend_orchestrator.errors import (
    DividendAlreadyCompletedError,
    DividendIndexError,
    IllegalTransitionError,
)
from dividend_orchestrator.job.requirement import Requirement
from dividend_orchestrator.job.status import (
    BlockProgress,
    PercentageProgress,
    Progress,
    Status,
    check_transition,
)
from dividend_orchestrator.kinds import ComputationKind

logger = logging.getLogger(__name__)


def generate_job_id() -> str:
    return uuid.uuid4().hex


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


class JobOutcome(BaseModel):
    """What a finished job exposes: all outputs, or only the error."""

    outputs: list[str] = Field(default_factory=list)
    error: str | None = None


class Job(BaseModel):
    id: str = Field(default_factory=generate_job_id)
    requirement: Requirement
    status: Status = Status.UNKNOWN
    progress: Progress
    outputs: list[str | None]
    error: str | None = None

    time_submitted: datetime | None = None
    time_start: datetime | None = None
    time_completed: datetime | None = None
    cost: float = 0.0

    @classmethod
    def create(cls, requirement: Requirement, divisor: int) -> Job:
        """Create a job split into `divisor` dividends.

        The progress kind follows the operator's computation kind and is never
        switched afterwards.
        """
        if divisor <= 0:
            raise ValueError(f"divisor must be positive, got {divisor}")

        progress: PercentageProgress | BlockProgress
        if requirement.operator.computation_kind is ComputationKind.SIMULATION:
            progress = PercentageProgress()
        else:
            progress = BlockProgress(waiting=divisor)

        job = cls(requirement=requirement, progress=progress, outputs=[None] * divisor)
        check_transition(job.status, Status.CREATED)
        job.status = Status.CREATED
        job.time_submitted = _utc_now()
        return job

    @property
    def divisor(self) -> int:
        return len(self.outputs)

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal

    @property
    def duration(self) -> timedelta | None:
        if self.time_start is None or self.time_completed is None:
            return None
        return self.time_completed - self.time_start

    def count_completed(self) -> tuple[int, int]:
        """(filled slots, divisor)."""
        return (sum(1 for o in self.outputs if o is not None), self.divisor)

    def submit(self) -> None:
        """Record the submission time; the job stays CREATED."""
        check_transition(self.status, Status.CREATED)
        self.time_submitted = _utc_now()

    def assign_task(self) -> None:
        """Hand one waiting dividend to a worker."""
        check_transition(self.status, Status.PROCESSING)

        if isinstance(self.progress, BlockProgress):
            if self.progress.waiting == 0:
                raise IllegalTransitionError(f"Job {self.id} has no waiting dividend to assign")
            self.progress = BlockProgress(
                waiting=self.progress.waiting - 1,
                processing=self.progress.processing + 1,
                completed=self.progress.completed,
            )

        if self.status is Status.CREATED:
            self.time_start = _utc_now()
            logger.info("Job started", extra={"job_id": self.id})
        self.status = Status.PROCESSING

    def reset_task(self) -> None:
        """Return an assigned dividend to the waiting pool (e.g. its worker was lost)."""
        self._require_processing("reset a task")

        if isinstance(self.progress, BlockProgress):
            if self.progress.processing == 0:
                raise IllegalTransitionError(f"Job {self.id} has no processing dividend to reset")
            self.progress = BlockProgress(
                waiting=self.progress.waiting + 1,
                processing=self.progress.processing - 1,
                completed=self.progress.completed,
            )

    def complete_task_with_success(self, index: int, output: str, cost: float) -> None:
        """Fill slot `index`; the job completes once every slot is filled."""
        self._require_processing("complete a task")
        if not 0 <= index < self.divisor:
            raise DividendIndexError(index, self.divisor)
        if self.outputs[index] is not None:
            raise DividendAlreadyCompletedError(index)
        if isinstance(self.progress, BlockProgress) and self.progress.processing == 0:
            raise IllegalTransitionError(
                f"Job {self.id} has no processing dividend to complete"
            )

        self.cost += cost
        self.outputs[index] = output

        filled, total = self.count_completed()
        if isinstance(self.progress, BlockProgress):
            self.progress = BlockProgress(
                waiting=self.progress.waiting,
                processing=self.progress.processing - 1,
                completed=self.progress.completed + 1,
            )
        else:
            self.progress = PercentageProgress(value=100.0 * filled / total)

        if filled == total:
            self.status = Status.COMPLETED_SUCCESS
            self.time_completed = _utc_now()
            logger.info("Job completed", extra={"job_id": self.id, "cost": self.cost})

    def complete_task_with_error(self, error: str, cost: float) -> None:
        """Finalize the job as failed; outputs collected so far are discarded."""
        self._require_processing("complete a task")

        self.cost += cost
        if isinstance(self.progress, BlockProgress) and self.progress.processing > 0:
            self.progress = BlockProgress(
                waiting=self.progress.waiting,
                processing=self.progress.processing - 1,
                completed=self.progress.completed + 1,
            )
        self.error = error
        self.status = Status.COMPLETED_ERROR
        self.time_completed = _utc_now()
        logger.warning("Job failed", extra={"job_id": self.id, "error": error})

    def cancel(self) -> None:
        check_transition(self.status, Status.CANCELLED)
        self.status = Status.CANCELLED
        logger.info("Job cancelled", extra={"job_id": self.id})

    def get_result(self) -> JobOutcome:
        """Outputs of a successful job, or only the error of a failed one.

        Any other status yields an empty outcome; a processing job never
        exposes a partial view.
        """
        if self.status is Status.COMPLETED_SUCCESS:
            return JobOutcome(outputs=[o for o in self.outputs if o is not None])
        if self.status is Status.COMPLETED_ERROR:
            return JobOutcome(outputs=[], error=self.error)
        return JobOutcome()

    def _require_processing(self, action: str) -> None:
        if self.status is not Status.PROCESSING:
            raise IllegalTransitionError(
                f"Cannot {action} of job {self.id} in status {self.status.value}"
            )

    def __str__(self) -> str:
        started = self.time_start.strftime("%Y-%m-%d %H:%M:%S") if self.time_start else "-"
        seconds = self.duration.total_seconds() if self.duration else 0.0
        cuk = self.requirement.computing_unit_kind()
        return (
            f"{self.id} {self.status}\t{str(cuk.operator):20}\t{str(cuk.dataset):15}"
            f"\t{started}\t{seconds:.2f}\t{self.progress}"
        )
