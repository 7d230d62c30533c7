"""Running one ``gmx`` sub-command inside a simulation directory."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from pydantic import BaseModel, Field

from dividend_orchestrator.chem.gromacs import run_gmx_command
from dividend_orchestrator.config import GromacsConfig
from dividend_orchestrator.data import DatasetStore
from dividend_orchestrator.dividend import DividendIndex
from dividend_orchestrator.errors import (
    ComputeError,
    OperatorKindMismatchError,
    OutputKindMismatchError,
)
from dividend_orchestrator.kinds import (
    ComputingUnitKind,
    DatasetKind,
    GmxCommandKind,
    OperatorKind,
)
from dividend_orchestrator.operators.base import Operator
from dividend_orchestrator.report import OperatorOutput, Report

logger = logging.getLogger(__name__)


class GmxCommandInput(BaseModel):
    """One ``gmx`` invocation.

    Attributes:
        simulation_id: Directory under the GROMACS work dir the command runs in.
        sub_command: e.g. ``pdb2gmx``, ``grompp``, ``mdrun``.
        arguments: Passed in order after the sub-command.
        prompts: Answers to interactive prompts, fed to stdin in order.
        files_dir: Sub directory holding the files below.
        files_input: Files the command reads.
        files_output: Files the command is expected to produce.
    """

    simulation_id: str
    sub_command: str
    arguments: list[str] = Field(default_factory=list)
    prompts: list[str] = Field(default_factory=list)
    files_dir: str = ""
    files_input: list[str] = Field(default_factory=list)
    files_output: list[str] = Field(default_factory=list)

    @classmethod
    def default(cls) -> GmxCommandInput:
        return cls(
            simulation_id="lysozyme",
            sub_command="pdb2gmx",
            arguments=["-f", "1AKI_clean.pdb", "-o", "1AKI_processed.gro", "-water", "spce"],
            prompts=["15"],
            files_input=["1AKI_clean.pdb"],
            files_output=["1AKI_processed.gro", "topol.top", "posre.itp"],
        )


class GmxCommandOutput(OperatorOutput):
    success: bool = False
    stdout: str = ""
    stderr: str = ""

    def count(self) -> int:
        return int(self.success)

    def extend(self, other: OperatorOutput) -> None:
        if not isinstance(other, GmxCommandOutput):
            raise OutputKindMismatchError(
                f"Cannot extend GmxCommandOutput with {type(other).__name__}"
            )
        self.success = other.success
        self.stdout += other.stdout
        self.stderr += other.stderr


class GmxCommandReport(Report[GmxCommandInput, GmxCommandOutput]):
    title = "Report of GROMACS Command"

    def _output_lines(self) -> list[str]:
        return [
            f"success: {self.output.success}",
            f"stdout: {self.output.stdout}",
            f"stderr: {self.output.stderr}",
        ]


@dataclass
class GmxCommandData:
    """Nothing is staged; the command works on files in its directory."""


class GmxCommandOperator(
    Operator[GmxCommandInput, GmxCommandData, GmxCommandOutput, GmxCommandReport]
):
    input_type = GmxCommandInput
    output_type = GmxCommandOutput
    report_type = GmxCommandReport

    def __init__(self, kind: OperatorKind, config: GromacsConfig) -> None:
        if not isinstance(kind, GmxCommandKind):
            raise OperatorKindMismatchError(f"GmxCommandOperator cannot run {kind}")
        self._kind = kind
        self.config = config

    def get_kind(self) -> GmxCommandKind:
        return self._kind

    def simulation_dir(self, input: GmxCommandInput) -> Path:
        return self.config.work_dir / input.simulation_id

    def prepare_data(
        self, dataset: DatasetKind, dividend: DividendIndex, store: DatasetStore
    ) -> GmxCommandData:
        return GmxCommandData()

    def compute(
        self, input: GmxCommandInput, data: GmxCommandData, dividend: DividendIndex
    ) -> GmxCommandOutput:
        work_dir = self.simulation_dir(input)
        if not work_dir.is_dir():
            raise ComputeError(f"Simulation directory does not exist: {work_dir}")

        result = run_gmx_command(
            input.sub_command,
            input.arguments,
            work_dir,
            input.prompts,
            executable=self.config.executable,
        )
        if not result.is_success:
            raise ComputeError(result.stderr)

        return GmxCommandOutput(success=True, stdout=result.stdout, stderr=result.stderr)

    def report(
        self,
        job_id: str,
        input: GmxCommandInput,
        data: GmxCommandData,
        output: GmxCommandOutput,
    ) -> GmxCommandReport:
        return GmxCommandReport(
            job_id=job_id,
            cuk=ComputingUnitKind(operator=self.get_kind(), dataset=DatasetKind.EMPTY),
            input=input,
            output=output,
        )
