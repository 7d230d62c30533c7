#!/usr/bin/env python3
"""Programmatic job example.

This demonstrates using the orchestrator components directly:

* load settings from `.env`
* run a substructure match over the in-memory dummy dataset
* print the rendered report saved under `reports/`

Dataset and pattern are passed as arguments (not read from `.env`).
"""

from __future__ import annotations

import argparse
from typing import Sequence

from dividend_orchestrator.config import OrchestratorSettings
from dividend_orchestrator.job import Requirement, Status
from dividend_orchestrator.kinds import DatasetKind, SubstructureMatchKind
from dividend_orchestrator.logging import configure_logging
from dividend_orchestrator.operators import load_report
from dividend_orchestrator.operators.substructure import SubstructureInput
from dividend_orchestrator.runner import JobRunner


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run a substructure match (programmatic example).")
    parser.add_argument("--smarts", default="c1ccccc1", help="SMARTS pattern")
    parser.add_argument(
        "--dataset",
        default="dummy",
        choices=[kind.value for kind in DatasetKind],
        help="Dataset to search (default: the 4-entry dummy dataset)",
    )
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)

    settings = OrchestratorSettings()
    configure_logging(settings.log_level)

    requirement = Requirement(
        input=SubstructureInput(smarts=args.smarts).model_dump_json(),
        operator=SubstructureMatchKind(),
        dataset=DatasetKind(args.dataset),
    )

    with JobRunner(settings) as runner:
        job = runner.wait(runner.submit(requirement).id)
        report_path = runner.report_path(job.id)

    if job.status is not Status.COMPLETED_SUCCESS or report_path is None:
        print(f"Job {job.id} ended {job.status}: {job.error}")
        return 1

    print(load_report(report_path.read_text(encoding="utf-8")).render())
    print(f"Persisted to: {report_path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
