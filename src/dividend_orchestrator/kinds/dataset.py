"""Dataset kinds: the corpora a job can run over."""

from __future__ import annotations

from enum import Enum

from dividend_orchestrator.errors import DatasetUnavailableError

_SIZES: dict[str, int] = {
    "empty": 0,
    "dummy": 4,
    "test_chembl": 10_000,
    "chembl30": 2_136_187,
    # Rough figure; PubChem is not versioned.
    "pub_chem": 160_000_000,
}

_SOURCE_URLS: dict[str, str] = {
    "test_chembl": (
        "https://github.com/chiral-data/chiral-db-example-data/blob/main/"
        "ChEMBL/chembl_30_chemreps_10k.txt?raw=true"
    ),
    "chembl30": (
        "https://ftp.ebi.ac.uk/pub/databases/chembl/ChEMBLdb/releases/chembl_30/"
        "chembl_30_chemreps.txt.gz"
    ),
    "pub_chem": "https://ftp.ncbi.nlm.nih.gov/pubchem/Compound/Extras/CID-SMILES.gz",
}

_FILENAMES: dict[str, str] = {
    "test_chembl": "chembl_30_chemreps_10k.txt",
    "chembl30": "chembl_30_chemreps.txt",
    "pub_chem": "CID-SMILES.gz",
}


class DatasetKind(str, Enum):
    EMPTY = "empty"
    DUMMY = "dummy"
    TEST_CHEMBL = "test_chembl"
    CHEMBL30 = "chembl30"
    PUB_CHEM = "pub_chem"

    @property
    def size(self) -> int:
        """Number of entries in the dataset."""
        return _SIZES[self.value]

    @property
    def has_source(self) -> bool:
        return self.value in _FILENAMES

    @property
    def source_url(self) -> str:
        try:
            return _SOURCE_URLS[self.value]
        except KeyError:
            raise DatasetUnavailableError(f"Dataset {self.value} has no source") from None

    @property
    def filename(self) -> str:
        try:
            return _FILENAMES[self.value]
        except KeyError:
            raise DatasetUnavailableError(f"Dataset {self.value} has no file") from None

    @property
    def is_chembl(self) -> bool:
        return self in (DatasetKind.TEST_CHEMBL, DatasetKind.CHEMBL30)

    def __str__(self) -> str:
        return self.value
