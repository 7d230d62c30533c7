"""Closed registries of what to compute and over which corpus."""

from dividend_orchestrator.kinds.computing_unit import ComputingUnitKind
from dividend_orchestrator.kinds.dataset import DatasetKind
from dividend_orchestrator.kinds.fingerprint import FingerprintKind, FingerprintType
from dividend_orchestrator.kinds.operator import (
    OPERATOR_NAMES,
    ComputationKind,
    GmxCommandKind,
    OperatorKind,
    SimilaritySearchKind,
    SubstructureMatchKind,
    is_openbabel,
    parse_operator_kind,
    plan_divisor,
)

__all__ = [
    "OPERATOR_NAMES",
    "ComputationKind",
    "ComputingUnitKind",
    "DatasetKind",
    "FingerprintKind",
    "FingerprintType",
    "GmxCommandKind",
    "OperatorKind",
    "SimilaritySearchKind",
    "SubstructureMatchKind",
    "is_openbabel",
    "parse_operator_kind",
    "plan_divisor",
]
