"""SMARTS substructure match over a dataset."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from pydantic import BaseModel, Field

from dividend_orchestrator.chem.openbabel_engine import (
    MatchResult,
    Molecule,
    SmartsMatcher,
    parse_smiles,
)
from dividend_orchestrator.data import DatasetStore
from dividend_orchestrator.dividend import DividendIndex
from dividend_orchestrator.errors import OperatorKindMismatchError, OutputKindMismatchError
from dividend_orchestrator.kinds import (
    ComputingUnitKind,
    DatasetKind,
    OperatorKind,
    SubstructureMatchKind,
)
from dividend_orchestrator.operators.base import Operator
from dividend_orchestrator.report import OperatorOutput, Report

logger = logging.getLogger(__name__)


class SubstructureInput(BaseModel):
    smarts: str = "c1ccccc1N=O"


class SubstructureOutput(OperatorOutput):
    results: list[tuple[MatchResult, str]] = Field(default_factory=list)

    def count(self) -> int:
        return len(self.results)

    def extend(self, other: OperatorOutput) -> None:
        if not isinstance(other, SubstructureOutput):
            raise OutputKindMismatchError(
                f"Cannot extend SubstructureOutput with {type(other).__name__}"
            )
        self.results.extend(other.results)


class SubstructureReport(Report[SubstructureInput, SubstructureOutput]):
    title = "Report of OpenBabel Substructure Match"

    def _output_lines(self) -> list[str]:
        lines = [f"{entry_id}\t {matches}" for matches, entry_id in self.output.results]
        return [*lines, f"Count: {self.output.count()}"]


@dataclass
class SubstructureData:
    dataset: DatasetKind
    ids: list[str] = field(default_factory=list)
    # None for entries Open Babel could not parse.
    molecules: list[Molecule | None] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.ids)


class SubstructureOperator(
    Operator[SubstructureInput, SubstructureData, SubstructureOutput, SubstructureReport]
):
    input_type = SubstructureInput
    output_type = SubstructureOutput
    report_type = SubstructureReport

    def __init__(self, kind: OperatorKind) -> None:
        if not isinstance(kind, SubstructureMatchKind):
            raise OperatorKindMismatchError(f"SubstructureOperator cannot run {kind}")
        self._kind = kind

    def get_kind(self) -> SubstructureMatchKind:
        return self._kind

    def prepare_data(
        self, dataset: DatasetKind, dividend: DividendIndex, store: DatasetStore
    ) -> SubstructureData | None:
        pairs = store.get_slice(dataset, dividend)
        if pairs is None:
            return None
        ids, smiles = pairs
        return SubstructureData(
            dataset=dataset, ids=ids, molecules=[parse_smiles(s) for s in smiles]
        )

    def compute(
        self, input: SubstructureInput, data: SubstructureData, dividend: DividendIndex
    ) -> SubstructureOutput:
        matcher = SmartsMatcher(input.smarts)

        results: list[tuple[MatchResult, str]] = []
        for mol, entry_id in zip(data.molecules, data.ids):
            if mol is None:
                continue
            matches = matcher.find_match(mol)
            if matches:
                results.append((matches, entry_id))

        logger.debug(
            "Substructure match done",
            extra={"dividend": str(dividend), "entries": len(data), "hits": len(results)},
        )
        return SubstructureOutput(results=results)

    def report(
        self,
        job_id: str,
        input: SubstructureInput,
        data: SubstructureData,
        output: SubstructureOutput,
    ) -> SubstructureReport:
        return SubstructureReport(
            job_id=job_id,
            cuk=ComputingUnitKind(operator=self.get_kind(), dataset=data.dataset),
            input=input,
            output=output,
        )
