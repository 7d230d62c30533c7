"""Requirement: the canonical, immutable specification of one job."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from dividend_orchestrator.kinds import (
    ComputingUnitKind,
    DatasetKind,
    OperatorKind,
    SubstructureMatchKind,
)


class Requirement(BaseModel):
    """(serialized input, operator kind, dataset kind).

    Two equal requirements denote the same computation, so a requirement can
    be used directly as a dict key for caching or deduplication.
    """

    model_config = ConfigDict(frozen=True)

    input: str
    operator: OperatorKind
    dataset: DatasetKind

    @classmethod
    def default(cls) -> Requirement:
        """Substructure matching of nitrosobenzene on the ChEMBL test set."""
        return cls(
            input='{"smarts":"c1ccccc1N=O"}',
            operator=SubstructureMatchKind(),
            dataset=DatasetKind.TEST_CHEMBL,
        )

    def computing_unit_kind(self) -> ComputingUnitKind:
        return ComputingUnitKind(operator=self.operator, dataset=self.dataset)
