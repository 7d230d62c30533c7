"""Operators: one implementation per operator kind.

`operator_class` is the single exhaustive dispatch from kind to
implementation; everything else (construction, report assembly, report
decoding) goes through it.
"""

from __future__ import annotations

import json
from collections.abc import Iterable
from typing import Any, assert_never

from dividend_orchestrator.config import GromacsConfig
from dividend_orchestrator.kinds import (
    ComputingUnitKind,
    GmxCommandKind,
    OperatorKind,
    SimilaritySearchKind,
    SubstructureMatchKind,
)
from dividend_orchestrator.operators.base import Operator
from dividend_orchestrator.operators.gmx_command import GmxCommandOperator
from dividend_orchestrator.operators.similarity import SimilarityOperator
from dividend_orchestrator.operators.substructure import SubstructureOperator
from dividend_orchestrator.report import Report

AnyOperator = Operator[Any, Any, Any, Any]


def operator_class(kind: OperatorKind) -> type[AnyOperator]:
    if isinstance(kind, SimilaritySearchKind):
        return SimilarityOperator
    elif isinstance(kind, SubstructureMatchKind):
        return SubstructureOperator
    elif isinstance(kind, GmxCommandKind):
        return GmxCommandOperator
    else:
        assert_never(kind)


def create_operator(kind: OperatorKind, *, gromacs: GromacsConfig | None = None) -> AnyOperator:
    """Instantiate the operator implementing `kind`.

    Raises:
        ValueError: If `kind` is a GROMACS command and no configuration is given.
    """

    if isinstance(kind, SimilaritySearchKind):
        return SimilarityOperator(kind)
    elif isinstance(kind, SubstructureMatchKind):
        return SubstructureOperator(kind)
    elif isinstance(kind, GmxCommandKind):
        if gromacs is None:
            raise ValueError("GROMACS configuration is required to run gmx commands")
        return GmxCommandOperator(kind, gromacs)
    else:
        assert_never(kind)


def build_report(
    job_id: str,
    cuk: ComputingUnitKind,
    input_text: str,
    output_texts: Iterable[str],
) -> Report[Any, Any]:
    """Decode the echoed input and merge per-dividend outputs, in order.

    Raises:
        pydantic.ValidationError: If the input or an output does not decode.
    """

    cls = operator_class(cuk.operator)
    output = cls.output_type.blank()
    for text in output_texts:
        output.extend(cls.output_type.model_validate_json(text))

    return cls.report_type(
        job_id=job_id,
        cuk=cuk,
        input=cls.input_type.model_validate_json(input_text),
        output=output,
    )


def load_report(text: str) -> Report[Any, Any]:
    """Decode a saved report into its kind-specific model."""

    cuk = ComputingUnitKind.model_validate(json.loads(text)["cuk"])
    return operator_class(cuk.operator).report_type.model_validate_json(text)


__all__ = [
    "AnyOperator",
    "GmxCommandOperator",
    "Operator",
    "SimilarityOperator",
    "SubstructureOperator",
    "build_report",
    "create_operator",
    "load_report",
    "operator_class",
]
