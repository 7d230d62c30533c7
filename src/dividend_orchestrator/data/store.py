"""Dataset slice store.

The store is shared by every worker, so each call is serialized with a lock;
a slicing query never observes a document half way through being loaded.
"""

from __future__ import annotations

import logging
import threading
from typing import Protocol

from dividend_orchestrator.config import DataConfig
from dividend_orchestrator.data.document import IdSmilesPairs, SmilesDocument
from dividend_orchestrator.data.sources import read_chembl_chemreps, read_pubchem_smiles
from dividend_orchestrator.dividend import DividendIndex
from dividend_orchestrator.errors import DatasetUnavailableError
from dividend_orchestrator.kinds import DatasetKind

logger = logging.getLogger(__name__)


class DatasetStore(Protocol):
    def get_slice(self, dataset: DatasetKind, dividend: DividendIndex) -> IdSmilesPairs | None:
        """Ids and SMILES of one dividend, None if it has no entries."""
        ...


class InMemoryDatasetStore:
    """One `SmilesDocument` per dataset kind, loaded on first use."""

    def __init__(
        self,
        config: DataConfig,
        documents: dict[DatasetKind, SmilesDocument] | None = None,
    ) -> None:
        self.config = config
        self._lock = threading.Lock()
        self._documents: dict[DatasetKind, SmilesDocument] = dict(documents or {})

    def _load_unlocked(self, dataset: DatasetKind) -> SmilesDocument:
        document = self._documents.get(dataset)
        if document is not None:
            return document

        if dataset is DatasetKind.EMPTY:
            document = SmilesDocument.empty()
        elif dataset is DatasetKind.DUMMY:
            document = SmilesDocument.dummy()
        elif dataset.is_chembl:
            document = read_chembl_chemreps(self.config.data_dir / dataset.filename)
        elif dataset is DatasetKind.PUB_CHEM:
            document = read_pubchem_smiles(
                self.config.data_dir / dataset.filename, self.config.pubchem_limit
            )
        else:
            raise DatasetUnavailableError(f"No loader for dataset {dataset}")

        self._documents[dataset] = document
        return document

    def add(self, dataset: DatasetKind, document: SmilesDocument) -> None:
        with self._lock:
            self._documents[dataset] = document

    def load(self, dataset: DatasetKind) -> SmilesDocument:
        """Make sure `dataset` is in memory.

        Raises:
            DatasetUnavailableError: If its file is missing.
        """
        with self._lock:
            return self._load_unlocked(dataset)

    def get_slice(self, dataset: DatasetKind, dividend: DividendIndex) -> IdSmilesPairs | None:
        with self._lock:
            return self._load_unlocked(dataset).slice_for(dividend)

    def info(self) -> str:
        """Table of every dataset kind with its entry count and file.

        Loaded datasets show their actual length, the others their nominal
        size.
        """
        with self._lock:
            loaded = {kind: len(doc) for kind, doc in self._documents.items()}

        rows = [f"{'name':15} {'entries':>15}  file", "=" * 50]
        for kind in DatasetKind:
            if kind.has_source:
                path = self.config.data_dir / kind.filename
                location = f"{path} ({'present' if path.exists() else 'missing'})"
            else:
                location = "(in memory)"
            entries = loaded.get(kind, kind.size)
            rows.append(f"{kind.value:15} {entries:15}  {location}")
        return "\n".join(rows)
