"""Per-dividend task results and their aggregation into a report."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from pathlib import Path

from pydantic import BaseModel, model_validator

from dividend_orchestrator.errors import DividendAlreadyCompletedError, DividendIndexError
from dividend_orchestrator.job.requirement import Requirement

logger = logging.getLogger(__name__)


class TaskResult(BaseModel):
    """Outcome of one dividend: an encoded output or an error message."""

    output: str | None = None
    error: str | None = None
    time_start: datetime
    time_end: datetime
    cost: float = 0.0

    @model_validator(mode="after")
    def _exactly_one_outcome(self) -> TaskResult:
        if (self.output is None) == (self.error is None):
            raise ValueError("TaskResult needs exactly one of output or error")
        return self

    @classmethod
    def success(
        cls, output: str, time_start: datetime, time_end: datetime, cost: float = 0.0
    ) -> TaskResult:
        return cls(output=output, time_start=time_start, time_end=time_end, cost=cost)

    @classmethod
    def failure(
        cls, error: str, time_start: datetime, time_end: datetime, cost: float = 0.0
    ) -> TaskResult:
        return cls(error=error, time_start=time_start, time_end=time_end, cost=cost)

    @property
    def is_success(self) -> bool:
        return self.output is not None

    @property
    def duration(self) -> timedelta:
        return self.time_end - self.time_start


class Result(BaseModel):
    """The task results of one job, one slot per dividend."""

    requirement: Requirement
    tasks: list[TaskResult | None]

    @classmethod
    def create(cls, requirement: Requirement, divisor: int) -> Result:
        if divisor <= 0:
            raise ValueError(f"divisor must be positive, got {divisor}")
        return cls(requirement=requirement, tasks=[None] * divisor)

    @property
    def divisor(self) -> int:
        return len(self.tasks)

    def set(self, index: int, task: TaskResult) -> None:
        """Record the result of dividend `index`; each slot is written once."""
        if not 0 <= index < self.divisor:
            raise DividendIndexError(index, self.divisor)
        if self.tasks[index] is not None:
            raise DividendAlreadyCompletedError(index)
        self.tasks[index] = task

    def count_completed_tasks(self) -> int:
        return sum(1 for task in self.tasks if task is not None)

    def outputs(self) -> list[str]:
        """Successful outputs in dividend order."""
        return [task.output for task in self.tasks if task is not None and task.output is not None]

    def save_report(self, job_id: str, path: Path) -> int:
        """Assemble the kind-specific report and write it to `path`.

        Returns:
            Number of bytes written.

        Raises:
            OSError: If the file cannot be written.
        """
        from dividend_orchestrator.operators import build_report

        report = build_report(
            job_id,
            self.requirement.computing_unit_kind(),
            self.requirement.input,
            self.outputs(),
        )
        return report.save(path)
