"""Fingerprint similarity search.

Every dataset entry whose Tanimoto coefficient against the query exceeds the
threshold is retained.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from functools import cached_property

from pydantic import BaseModel, Field

from dividend_orchestrator.chem.openbabel_engine import (
    FingerprintData,
    FingerprintGenerator,
    parse_smiles,
)
from dividend_orchestrator.data import DatasetStore, IdSmilesPairs
from dividend_orchestrator.dividend import DividendIndex
from dividend_orchestrator.errors import (
    ComputeError,
    OperatorKindMismatchError,
    OutputKindMismatchError,
)
from dividend_orchestrator.kinds import (
    ComputingUnitKind,
    DatasetKind,
    OperatorKind,
    SimilaritySearchKind,
)
from dividend_orchestrator.operators.base import Operator
from dividend_orchestrator.report import OperatorOutput, Report

logger = logging.getLogger(__name__)


def similarity_tanimoto(fp_1: Sequence[int], fp_2: Sequence[int]) -> float:
    """|A AND B| / |A OR B| over fingerprints packed into words.

    Exactly 0.0 when neither fingerprint has a bit set.
    """
    if len(fp_1) != len(fp_2):
        raise ValueError(f"Fingerprint lengths differ: {len(fp_1)} != {len(fp_2)}")

    and_bits = 0
    or_bits = 0
    for word_1, word_2 in zip(fp_1, fp_2):
        and_bits += (word_1 & word_2).bit_count()
        or_bits += (word_1 | word_2).bit_count()

    if or_bits == 0:
        return 0.0
    return and_bits / or_bits


class SimilarityInput(BaseModel):
    smiles: str = "c1ccccc1N=O"
    threshold: float = 0.1


class SimilarityOutput(OperatorOutput):
    results: list[tuple[float, str]] = Field(default_factory=list)

    def count(self) -> int:
        return len(self.results)

    def extend(self, other: OperatorOutput) -> None:
        if not isinstance(other, SimilarityOutput):
            raise OutputKindMismatchError(
                f"Cannot extend SimilarityOutput with {type(other).__name__}"
            )
        self.results.extend(other.results)


class SimilarityReport(Report[SimilarityInput, SimilarityOutput]):
    title = "Report of OpenBabel Similarity Search"

    def _input_lines(self) -> list[str]:
        lines = [f"smiles: {self.input.smiles}", f"threshold: {self.input.threshold:.2f}"]
        if isinstance(self.cuk.operator, SimilaritySearchKind):
            lines.append(f"fingerprint kind: {self.cuk.operator.fingerprint}")
        return lines

    def _output_lines(self) -> list[str]:
        lines = [f"{entry_id}\t {coeff:.3f}" for coeff, entry_id in self.output.results]
        return [*lines, f"Count: {self.output.count()}"]


@dataclass
class SimilarityData:
    dataset: DatasetKind
    ids: list[str] = field(default_factory=list)
    fingerprints: list[FingerprintData] = field(default_factory=list)

    @classmethod
    def build(
        cls, dataset: DatasetKind, pairs: IdSmilesPairs, generator: FingerprintGenerator
    ) -> SimilarityData:
        ids, smiles = pairs
        return cls(dataset=dataset, ids=ids, fingerprints=generator.fingerprints_for_smiles(smiles))

    def __len__(self) -> int:
        return len(self.ids)


class SimilarityOperator(
    Operator[SimilarityInput, SimilarityData, SimilarityOutput, SimilarityReport]
):
    input_type = SimilarityInput
    output_type = SimilarityOutput
    report_type = SimilarityReport

    def __init__(self, kind: OperatorKind) -> None:
        if not isinstance(kind, SimilaritySearchKind):
            raise OperatorKindMismatchError(f"SimilarityOperator cannot run {kind}")
        self._kind = kind

    @cached_property
    def generator(self) -> FingerprintGenerator:
        return FingerprintGenerator(self._kind.fingerprint)

    def get_kind(self) -> SimilaritySearchKind:
        return self._kind

    def prepare_data(
        self, dataset: DatasetKind, dividend: DividendIndex, store: DatasetStore
    ) -> SimilarityData | None:
        pairs = store.get_slice(dataset, dividend)
        if pairs is None:
            return None
        return SimilarityData.build(dataset, pairs, self.generator)

    def compute(
        self, input: SimilarityInput, data: SimilarityData, dividend: DividendIndex
    ) -> SimilarityOutput:
        mol = parse_smiles(input.smiles)
        if mol is None:
            raise ComputeError(f"Failed to parse SMILES: {input.smiles}")
        target = self.generator.fingerprint(mol)

        results: list[tuple[float, str]] = []
        for fingerprint, entry_id in zip(data.fingerprints, data.ids):
            coeff = similarity_tanimoto(fingerprint, target)
            if coeff > input.threshold:
                results.append((coeff, entry_id))

        logger.debug(
            "Similarity search done",
            extra={"dividend": str(dividend), "entries": len(data), "hits": len(results)},
        )
        return SimilarityOutput(results=results)

    def report(
        self, job_id: str, input: SimilarityInput, data: SimilarityData, output: SimilarityOutput
    ) -> SimilarityReport:
        return SimilarityReport(
            job_id=job_id,
            cuk=ComputingUnitKind(operator=self.get_kind(), dataset=data.dataset),
            input=input,
            output=output,
        )
