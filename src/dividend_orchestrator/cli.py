"""CLI entrypoint.

Settings are read from the environment (and `.env`) here and nowhere else.
Job commands submit one requirement to a local `JobRunner`, wait for it and
print the rendered report.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from dividend_orchestrator import __version__
from dividend_orchestrator.config import OrchestratorSettings
from dividend_orchestrator.data import InMemoryDatasetStore
from dividend_orchestrator.errors import OrchestratorError
from dividend_orchestrator.job import JobStore, Requirement, Status
from dividend_orchestrator.kinds import (
    DatasetKind,
    FingerprintKind,
    GmxCommandKind,
    SimilaritySearchKind,
    SubstructureMatchKind,
)
from dividend_orchestrator.operators import load_report
from dividend_orchestrator.operators.gmx_command import GmxCommandInput
from dividend_orchestrator.operators.similarity import SimilarityInput
from dividend_orchestrator.operators.substructure import SubstructureInput
from dividend_orchestrator.runner import JobRunner

logger = logging.getLogger(__name__)

_DATASET_CHOICES = [kind.value for kind in DatasetKind]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dividend-orchestrator",
        description="Run chemistry computations split into dividends",
    )
    parser.add_argument(
        "--version", action="version", version=f"dividend-orchestrator {__version__}"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    ob = subparsers.add_parser("ob", help="Open Babel computations")
    ob_commands = ob.add_subparsers(dest="ob_command", required=True)

    ob_commands.add_parser("examples", help="Print example requirements")

    sim = ob_commands.add_parser("sim", help="Fingerprint similarity search")
    sim.add_argument("--dataset", choices=_DATASET_CHOICES, default="test_chembl")
    sim.add_argument("--smiles", required=True, help="Query molecule")
    sim.add_argument(
        "--fingerprint",
        default="ob_ecfp4_2048",
        help="Fingerprint kind as <package>_<type>_<nbits>",
    )
    sim.add_argument(
        "--threshold",
        type=float,
        default=0.1,
        help="Keep entries whose Tanimoto coefficient exceeds this value",
    )

    ss = ob_commands.add_parser("ss", help="SMARTS substructure match")
    ss.add_argument("--dataset", choices=_DATASET_CHOICES, default="test_chembl")
    ss.add_argument("--smarts", required=True, help="SMARTS pattern")

    gmx = subparsers.add_parser("gmx", help="GROMACS commands")
    gmx_commands = gmx.add_subparsers(dest="gmx_command", required=True)
    run = gmx_commands.add_parser("run", help="Run one gmx sub-command in a simulation dir")
    run.add_argument("--simulation-id", required=True, help="Directory under the work dir")
    run.add_argument("--sub-command", required=True, help="e.g. pdb2gmx, grompp, mdrun")
    run.add_argument(
        "--arg",
        dest="arguments",
        action="append",
        default=[],
        help="Argument for the sub-command, repeatable, kept in order (--arg=-f for flags)",
    )
    run.add_argument(
        "--prompt",
        dest="prompts",
        action="append",
        default=[],
        help="Answer to an interactive prompt (repeatable, kept in order)",
    )

    subparsers.add_parser("datasets", help="List datasets and whether their files are present")
    subparsers.add_parser("jobs", help="List persisted jobs")

    report = subparsers.add_parser("report", help="Render a saved report")
    report.add_argument("path", type=Path, help="Report JSON file")

    return parser


def _example_requirements() -> list[Requirement]:
    return [
        Requirement(
            input=SimilarityInput(smiles="CC(=O)Nc1ccc(O)cc1", threshold=0.25).model_dump_json(),
            operator=SimilaritySearchKind(),
            dataset=DatasetKind.TEST_CHEMBL,
        ),
        Requirement.default(),
        Requirement(
            input=GmxCommandInput.default().model_dump_json(),
            operator=GmxCommandKind(),
            dataset=DatasetKind.EMPTY,
        ),
    ]


def _build_requirement(args: argparse.Namespace) -> Requirement:
    if args.command == "ob" and args.ob_command == "sim":
        return Requirement(
            input=SimilarityInput(smiles=args.smiles, threshold=args.threshold).model_dump_json(),
            operator=SimilaritySearchKind(fingerprint=FingerprintKind.parse(args.fingerprint)),
            dataset=DatasetKind(args.dataset),
        )
    if args.command == "ob" and args.ob_command == "ss":
        return Requirement(
            input=SubstructureInput(smarts=args.smarts).model_dump_json(),
            operator=SubstructureMatchKind(),
            dataset=DatasetKind(args.dataset),
        )
    if args.command == "gmx" and args.gmx_command == "run":
        gmx_input = GmxCommandInput(
            simulation_id=args.simulation_id,
            sub_command=args.sub_command,
            arguments=args.arguments,
            prompts=args.prompts,
        )
        return Requirement(
            input=gmx_input.model_dump_json(),
            operator=GmxCommandKind(),
            dataset=DatasetKind.EMPTY,
        )
    raise ValueError(f"Not a job command: {args.command}")


def _run_job(settings: OrchestratorSettings, requirement: Requirement) -> int:
    with JobRunner(settings) as runner:
        job = runner.submit(requirement)
        print(f"Submitted job {job.id} ({job.divisor} dividends)")
        job = runner.wait(job.id)
        report_path = runner.report_path(job.id)

    if job.status is not Status.COMPLETED_SUCCESS:
        print(f"Job {job.id} ended {job.status}: {job.error}", file=sys.stderr)
        return 1

    if report_path is None:
        print(f"Job {job.id} succeeded but its report could not be saved", file=sys.stderr)
        return 1

    print(load_report(report_path.read_text(encoding="utf-8")).render())
    print(f"Report saved to {report_path}")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = OrchestratorSettings()
    except ValidationError as e:
        # Logging isn't configured yet; keep it simple and actionable.
        print("Configuration error (check your .env):", file=sys.stderr)
        print(e, file=sys.stderr)
        return 2

    settings.setup_logging()

    try:
        if args.command == "ob" and args.ob_command == "examples":
            for requirement in _example_requirements():
                print(requirement.model_dump_json())
            return 0

        if args.command in ("ob", "gmx"):
            return _run_job(settings, _build_requirement(args))

        if args.command == "datasets":
            print(InMemoryDatasetStore(settings.data).info())
            return 0

        if args.command == "jobs":
            for job in JobStore(settings.runner.job_state_path).list():
                print(job)
            return 0

        if args.command == "report":
            print(load_report(args.path.read_text(encoding="utf-8")).render())
            return 0

        parser.error(f"Unknown command: {args.command}")
        return 2
    except (OrchestratorError, ValidationError, OSError, json.JSONDecodeError) as e:
        logger.error("Command failed", extra={"command": args.command, "error": str(e)})
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
