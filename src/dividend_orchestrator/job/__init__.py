"""Job lifecycle: requirement, state machine, per-dividend results."""

from dividend_orchestrator.job.job import Job, JobOutcome, generate_job_id
from dividend_orchestrator.job.requirement import Requirement
from dividend_orchestrator.job.result import Result, TaskResult
from dividend_orchestrator.job.status import (
    ALLOWED_TRANSITIONS,
    TERMINAL_STATUSES,
    BlockProgress,
    PercentageProgress,
    Progress,
    Status,
    check_transition,
)
from dividend_orchestrator.job.store import JobStore

__all__ = [
    "ALLOWED_TRANSITIONS",
    "TERMINAL_STATUSES",
    "BlockProgress",
    "Job",
    "JobOutcome",
    "JobStore",
    "PercentageProgress",
    "Progress",
    "Requirement",
    "Result",
    "Status",
    "TaskResult",
    "check_transition",
    "generate_job_id",
]
