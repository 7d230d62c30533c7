"""Open Babel backed molecule parsing, fingerprints and SMARTS matching.

Requires the Open Babel Python bindings:
    pip install openbabel-wheel

The bindings are imported on first use so that the job lifecycle code can be
used (and tested) without them.
"""

from __future__ import annotations

import logging
from functools import cache
from types import ModuleType
from typing import Any

from dividend_orchestrator.errors import ComputeError
from dividend_orchestrator.kinds import FingerprintKind

logger = logging.getLogger(__name__)

# An OBMol; the bindings ship no type information.
Molecule = Any
FingerprintData = list[int]
MatchResult = list[list[int]]


@cache
def _openbabel() -> ModuleType:
    try:
        from openbabel import openbabel as ob
    except ImportError as e:
        raise ImportError(
            "Open Babel bindings are required for chemistry operators. "
            "Install them with: pip install openbabel-wheel"
        ) from e

    # Parse failures are reported through return values, keep stderr quiet.
    ob.obErrorLog.SetOutputLevel(ob.obError)
    return ob


def parse_smiles(smiles: str) -> Molecule | None:
    """Parse a SMILES string; None if Open Babel rejects it."""

    ob = _openbabel()
    conversion = ob.OBConversion()
    conversion.SetInFormat("smi")
    mol = ob.OBMol()
    if not conversion.ReadString(mol, smiles) or mol.NumAtoms() == 0:
        return None
    return mol


class FingerprintGenerator:
    """Folded fingerprints as lists of 32-bit words."""

    def __init__(self, kind: FingerprintKind) -> None:
        ob = _openbabel()
        self.kind = kind
        self._fingerprinter = ob.OBFingerprint.FindFingerprint(kind.fingerprint.value.upper())
        if self._fingerprinter is None:
            raise ValueError(f"Open Babel has no fingerprint {kind.fingerprint.value}")

    def fingerprint(self, mol: Molecule) -> FingerprintData:
        ob = _openbabel()
        words = ob.vectorUnsignedInt()
        self._fingerprinter.GetFingerprint(mol, words, self.kind.nbits)
        return list(words)

    def fingerprint_for_smiles(self, smiles: str) -> FingerprintData:
        """Fingerprint of `smiles`; an unparsable entry gets the empty molecule's."""

        mol = parse_smiles(smiles)
        if mol is None:
            logger.debug("Unparsable SMILES in dataset", extra={"smiles": smiles})
            mol = _openbabel().OBMol()
        return self.fingerprint(mol)

    def fingerprints_for_smiles(self, smiles_list: list[str]) -> list[FingerprintData]:
        return [self.fingerprint_for_smiles(smiles) for smiles in smiles_list]


class SmartsMatcher:
    """A compiled SMARTS query."""

    def __init__(self, smarts: str) -> None:
        ob = _openbabel()
        self.smarts = smarts
        self._pattern = ob.OBSmartsPattern()
        if not self._pattern.Init(smarts):
            raise ComputeError(f"Invalid SMARTS pattern: {smarts}")

    def find_match(self, mol: Molecule) -> MatchResult:
        """Every embedding of the pattern as 1-based atom indices.

        Symmetric patterns yield one embedding per automorphism, in the order
        Open Babel reports them.
        """
        if not self._pattern.Match(mol):
            return []
        return [list(mapping) for mapping in self._pattern.GetMapList()]
