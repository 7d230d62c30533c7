"""Computing unit kind: one operator applied to one dataset."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from dividend_orchestrator.kinds.dataset import DatasetKind
from dividend_orchestrator.kinds.operator import OperatorKind, SubstructureMatchKind


class ComputingUnitKind(BaseModel):
    """Report identity and cache key for identical requests."""

    model_config = ConfigDict(frozen=True)

    operator: OperatorKind
    dataset: DatasetKind

    @classmethod
    def default(cls) -> ComputingUnitKind:
        return cls(operator=SubstructureMatchKind(), dataset=DatasetKind.TEST_CHEMBL)

    def __str__(self) -> str:
        return f"{self.operator} x {self.dataset}"
