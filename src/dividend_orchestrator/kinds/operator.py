"""Operator kinds: the closed set of computations a job can request.

`OperatorKind` is a discriminated union over the ``kind`` field, so a
serialized requirement always decodes back to the exact variant it was built
from. Adding a variant means adding it to the union and to every dispatch over
it (`create_operator`, `build_report`), which `typing.assert_never` enforces
for type checkers.
"""

from __future__ import annotations

import math
from enum import Enum
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

from dividend_orchestrator.kinds.fingerprint import FingerprintKind


class ComputationKind(str, Enum):
    """How a computation is executed and how its progress is tracked.

    Simulations run on a single machine and report a percentage. Data
    processing is spread over many dividends and reports block counts.
    """

    SIMULATION = "simulation"
    DATA_PROCESSING = "data_processing"


class SimilaritySearchKind(BaseModel):
    """Fingerprint based similarity search (Tanimoto coefficient)."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["ob_sim"] = "ob_sim"
    fingerprint: FingerprintKind = Field(default_factory=FingerprintKind)

    @property
    def computation_kind(self) -> ComputationKind:
        return ComputationKind.DATA_PROCESSING

    @property
    def app_name(self) -> str:
        return "openbabel"

    def __str__(self) -> str:
        return self.kind


class SubstructureMatchKind(BaseModel):
    """SMARTS substructure matching."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["ob_ss"] = "ob_ss"

    @property
    def computation_kind(self) -> ComputationKind:
        return ComputationKind.DATA_PROCESSING

    @property
    def app_name(self) -> str:
        return "openbabel"

    def __str__(self) -> str:
        return self.kind


class GmxCommandKind(BaseModel):
    """A single GROMACS ``gmx`` sub-command run inside a simulation directory."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["gromacs_run_gmx_command"] = "gromacs_run_gmx_command"

    @property
    def computation_kind(self) -> ComputationKind:
        return ComputationKind.SIMULATION

    @property
    def app_name(self) -> str:
        return "gromacs"

    def __str__(self) -> str:
        return self.kind


OperatorKind = Annotated[
    SimilaritySearchKind | SubstructureMatchKind | GmxCommandKind,
    Field(discriminator="kind"),
]

OPERATOR_NAMES: tuple[str, ...] = ("ob_sim", "ob_ss", "gromacs_run_gmx_command")


def parse_operator_kind(
    name: str, fingerprint: FingerprintKind | None = None
) -> OperatorKind:
    """Build an operator kind from its short name.

    ``fingerprint`` only applies to ``ob_sim``; it defaults to ECFP4/2048.
    """

    if name == "ob_sim":
        return SimilaritySearchKind(fingerprint=fingerprint or FingerprintKind())
    if name == "ob_ss":
        return SubstructureMatchKind()
    if name == "gromacs_run_gmx_command":
        return GmxCommandKind()
    raise ValueError(f"Unknown operator kind: {name!r} (expected one of {OPERATOR_NAMES})")


def is_openbabel(kind: OperatorKind) -> bool:
    return kind.app_name == "openbabel"


def plan_divisor(
    operator: OperatorKind,
    entries: int,
    entries_per_dividend: int,
) -> int:
    """Number of dividends a job is split into.

    Simulations always run as one dividend. Data processing cuts the `entries`
    actually loaded for the dataset into slices of `entries_per_dividend`.
    """

    if entries_per_dividend <= 0:
        raise ValueError("entries_per_dividend must be positive")
    if operator.computation_kind is ComputationKind.SIMULATION:
        return 1
    return max(1, math.ceil(entries / entries_per_dividend))
