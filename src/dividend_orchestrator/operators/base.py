"""Abstract base class for operators.

One operator is implemented per operator kind. The interface keeps data
preparation (slicing the dataset for one dividend) apart from computation, so
the expensive part can run on any worker once the data is in memory.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, ClassVar, Generic, TypeVar

from pydantic import BaseModel

from dividend_orchestrator.data import DatasetStore
from dividend_orchestrator.dividend import DividendIndex
from dividend_orchestrator.kinds import DatasetKind, OperatorKind
from dividend_orchestrator.report import OperatorOutput, Report

InputT = TypeVar("InputT", bound=BaseModel)
DataT = TypeVar("DataT")
OutputT = TypeVar("OutputT", bound=OperatorOutput)
ReportT = TypeVar("ReportT", bound=Report)


class Operator(ABC, Generic[InputT, DataT, OutputT, ReportT]):
    """Uniform interface of one computation kind.

    Subclasses raise `OperatorKindMismatchError` from ``__init__`` when given a
    kind they do not implement.
    """

    input_type: ClassVar[type[BaseModel]]
    output_type: ClassVar[type[OperatorOutput]]
    report_type: ClassVar[type[Report[Any, Any]]]

    @abstractmethod
    def get_kind(self) -> OperatorKind:
        """Return the kind this operator was constructed with."""
        pass

    @abstractmethod
    def prepare_data(
        self, dataset: DatasetKind, dividend: DividendIndex, store: DatasetStore
    ) -> DataT | None:
        """Fetch exactly the data one dividend needs.

        Returns:
            The data, or None if the dividend contributes nothing.
        """
        pass

    @abstractmethod
    def compute(self, input: InputT, data: DataT, dividend: DividendIndex) -> OutputT:
        """Run the computation of one dividend.

        Raises:
            ComputeError: On a recoverable failure; its message is recorded as
                the job error.
        """
        pass

    @abstractmethod
    def report(self, job_id: str, input: InputT, data: DataT, output: OutputT) -> ReportT:
        """Wrap one dividend's output into this kind's report."""
        pass

    def decode_input(self, text: str) -> InputT:
        return self.input_type.model_validate_json(text)  # type: ignore[return-value]

    def blank_output(self) -> OutputT:
        return self.output_type.blank()  # type: ignore[return-value]
