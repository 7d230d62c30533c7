"""Readers for the raw dataset dumps.

- ChEMBL chemreps: tab separated ``chembl_id, canonical_smiles, standard_inchi,
  standard_inchi_key`` with a header row. Tabs matter, some InChI fields are
  blank.
- PubChem ``CID-SMILES.gz``: gzip'ed ``cid smiles`` lines.
"""

from __future__ import annotations

import gzip
import logging
from pathlib import Path

from dividend_orchestrator.data.document import SmilesDocument
from dividend_orchestrator.errors import DatasetUnavailableError

logger = logging.getLogger(__name__)

CHEMBL_HEADER_ID = "chembl_id"


def read_chembl_chemreps(path: Path) -> SmilesDocument:
    if not path.exists():
        raise DatasetUnavailableError(f"ChEMBL file not found: {path}")

    entries: dict[str, str] = {}
    with open(path, encoding="utf-8") as f:
        for line in f:
            parts = line.rstrip("\r\n").split("\t")
            if len(parts) < 2:
                continue
            entries[parts[0]] = parts[1]
    entries.pop(CHEMBL_HEADER_ID, None)

    logger.info(f"Loaded {len(entries)} ChEMBL entries from {path}")
    return SmilesDocument.from_pairs(list(entries), list(entries.values()))


def read_pubchem_smiles(path: Path, limit: int) -> SmilesDocument:
    """Read at most `limit` entries from the PubChem dump."""

    if not path.exists():
        raise DatasetUnavailableError(f"PubChem file not found: {path}")

    ids: list[str] = []
    smiles: list[str] = []
    with gzip.open(path, mode="rt", encoding="utf-8") as f:
        for line in f:
            parts = line.split()
            if len(parts) != 2:
                logger.error(f"PubChem read line error: {line.rstrip()}")
                continue
            ids.append(parts[0])
            smiles.append(parts[1])
            if len(ids) == limit:
                break

    logger.info(f"Loaded {len(ids)} PubChem entries from {path}")
    return SmilesDocument.from_pairs(ids, smiles)
