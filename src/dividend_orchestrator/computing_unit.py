"""Execution of a single dividend.

A computing unit turns (requirement, dividend) into a `TaskResult`. It knows
nothing about jobs; recording the result is the runner's business.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime

from pydantic import ValidationError

from dividend_orchestrator.config import GromacsConfig
from dividend_orchestrator.data import DatasetStore
from dividend_orchestrator.dividend import DividendIndex
from dividend_orchestrator.errors import ComputeError
from dividend_orchestrator.job.requirement import Requirement
from dividend_orchestrator.job.result import TaskResult
from dividend_orchestrator.operators import create_operator

logger = logging.getLogger(__name__)


class ComputingUnit:
    """Runs one dividend of a requirement against a dataset store.

    The reported cost is the wall clock time spent, in seconds.
    """

    def __init__(self, store: DatasetStore, gromacs: GromacsConfig | None = None) -> None:
        self.store = store
        self.gromacs = gromacs

    def run(self, requirement: Requirement, dividend: DividendIndex) -> TaskResult:
        operator = create_operator(requirement.operator, gromacs=self.gromacs)
        time_start = datetime.now(tz=UTC)

        try:
            input = operator.decode_input(requirement.input)
            data = operator.prepare_data(requirement.dataset, dividend, self.store)
            if data is None:
                output = operator.blank_output()
            else:
                output = operator.compute(input, data, dividend)
        except ValidationError as e:
            return self._failure(f"Invalid input: {e}", time_start, dividend)
        except ComputeError as e:
            return self._failure(str(e), time_start, dividend)

        time_end = datetime.now(tz=UTC)
        return TaskResult.success(
            output.model_dump_json(),
            time_start,
            time_end,
            cost=(time_end - time_start).total_seconds(),
        )

    def _failure(self, error: str, time_start: datetime, dividend: DividendIndex) -> TaskResult:
        time_end = datetime.now(tz=UTC)
        logger.warning("Dividend failed", extra={"dividend": str(dividend), "error": error})
        return TaskResult.failure(
            error,
            time_start,
            time_end,
            cost=(time_end - time_start).total_seconds(),
        )
