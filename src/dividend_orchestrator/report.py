"""Operator outputs and the reports assembled from them."""

from __future__ import annotations

import logging
from abc import abstractmethod
from pathlib import Path
from typing import ClassVar, Generic, TypeVar

from pydantic import BaseModel

from dividend_orchestrator.kinds import ComputingUnitKind

logger = logging.getLogger(__name__)


class OperatorOutput(BaseModel):
    """Output of one dividend; outputs of several dividends merge with `extend`."""

    @classmethod
    def blank(cls) -> OperatorOutput:
        return cls()

    @abstractmethod
    def count(self) -> int:
        """Number of hits, the size used for logging and rendering."""

    @abstractmethod
    def extend(self, other: OperatorOutput) -> None:
        """Append `other` in place.

        Raises:
            OutputKindMismatchError: If `other` belongs to another operator kind.
        """


InputT = TypeVar("InputT", bound=BaseModel)
OutputT = TypeVar("OutputT", bound=OperatorOutput)


class Report(BaseModel, Generic[InputT, OutputT]):
    """Echoed input + computing unit identity + merged output."""

    title: ClassVar[str] = "Report"

    job_id: str
    cuk: ComputingUnitKind
    input: InputT
    output: OutputT

    def render(self) -> str:
        """Human readable dump."""
        lines = [f" {self.title}", "", " Input"]
        lines += [f"\t {line}" for line in self._input_lines()]
        lines += [" Operator", f"\t kind: {self.cuk.operator}"]
        lines += [" Dataset", f"\t kind: {self.cuk.dataset}"]
        lines += [" Output"]
        lines += [f"\t {line}" for line in self._output_lines()]
        return "\n".join(lines) + "\n"

    def save(self, path: Path) -> int:
        """Write the canonical encoding to `path` (created or truncated).

        Returns:
            Number of bytes written.
        """
        written = path.write_bytes(self.model_dump_json().encode("utf-8"))
        logger.info("Report saved", extra={"job_id": self.job_id, "path": str(path)})
        return written

    def _input_lines(self) -> list[str]:
        return [f"{key}: {value}" for key, value in self.input.model_dump().items()]

    def _output_lines(self) -> list[str]:
        return [f"Count: {self.output.count()}"]
