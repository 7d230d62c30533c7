"""Unit tests for dividend slicing, SMILES documents and the dataset store."""

from __future__ import annotations

import gzip
from pathlib import Path

import pytest

from dividend_orchestrator.config import DataConfig
from dividend_orchestrator.data import InMemoryDatasetStore, SmilesDocument
from dividend_orchestrator.data.sources import read_chembl_chemreps, read_pubchem_smiles
from dividend_orchestrator.dividend import DividendIndex
from dividend_orchestrator.errors import DatasetUnavailableError
from dividend_orchestrator.kinds import DatasetKind


def test_dividend_bounds_cover_every_entry_once() -> None:
    covered = [i for index in range(3) for i in DividendIndex(index, 3).bounds(10)]

    assert covered == list(range(10))
    assert DividendIndex(2, 3).bounds(10) == range(8, 10)


def test_dividend_bounds_past_the_data_are_empty() -> None:
    assert len(DividendIndex(3, 4).bounds(2)) == 0


def test_dividend_bounds_reject_invalid_index() -> None:
    with pytest.raises(ValueError):
        DividendIndex(4, 4).bounds(10)


def test_document_is_sorted_by_id() -> None:
    document = SmilesDocument.dummy()

    assert document.ids == ("label_1", "label_2", "label_3", "label_4")
    assert document.get_smiles("label_4") == "CC(=O)Nc1ccc(O)cc1"
    assert document.get_smiles("label_9") is None
    assert len(document) == 4


def test_document_rejects_mismatched_lengths() -> None:
    with pytest.raises(ValueError):
        SmilesDocument.from_pairs(["a", "b"], ["C"])


def test_document_slice_for_dividend() -> None:
    document = SmilesDocument.dummy()

    assert document.slice_for(DividendIndex(1, 2)) == (
        ["label_3", "label_4"],
        [document.smiles[2], document.smiles[3]],
    )
    assert SmilesDocument.empty().slice_for(DividendIndex(0, 1)) is None


def test_read_chembl_chemreps(tmp_path: Path) -> None:
    path = tmp_path / "chemreps.txt"
    path.write_text(
        "chembl_id\tcanonical_smiles\tstandard_inchi\tstandard_inchi_key\n"
        "CHEMBL2\tCCO\tInChI=1S\tKEY2\n"
        "CHEMBL1\tc1ccccc1\t\t\n",
        encoding="utf-8",
    )

    document = read_chembl_chemreps(path)

    assert document.ids == ("CHEMBL1", "CHEMBL2")
    assert document.smiles == ("c1ccccc1", "CCO")


def test_read_pubchem_smiles_respects_limit(tmp_path: Path) -> None:
    path = tmp_path / "CID-SMILES.gz"
    with gzip.open(path, mode="wt", encoding="utf-8") as f:
        f.write("1\tCCO\n")
        f.write("broken line with many fields\n")
        f.write("2\tCCN\n")
        f.write("3\tCCC\n")

    document = read_pubchem_smiles(path, limit=2)

    assert document.ids == ("1", "2")


def test_missing_dataset_file(tmp_path: Path) -> None:
    with pytest.raises(DatasetUnavailableError):
        read_chembl_chemreps(tmp_path / "missing.txt")


def test_store_loads_chembl_from_data_dir(data_config: DataConfig) -> None:
    (data_config.data_dir / DatasetKind.TEST_CHEMBL.filename).write_text(
        "chembl_id\tcanonical_smiles\nCHEMBL1\tCCO\nCHEMBL2\tCCN\n", encoding="utf-8"
    )
    store = InMemoryDatasetStore(data_config)

    assert store.get_slice(DatasetKind.TEST_CHEMBL, DividendIndex(1, 2)) == (["CHEMBL2"], ["CCN"])
    assert store.get_slice(DatasetKind.TEST_CHEMBL, DividendIndex(2, 3)) is None
    info = store.info().splitlines()
    chembl_row = next(row for row in info if row.startswith("test_chembl "))
    assert chembl_row.split()[1] == "2"
    assert chembl_row.endswith("(present)")


def test_store_info_lists_every_dataset(dataset_store: InMemoryDatasetStore) -> None:
    rows = dataset_store.info().splitlines()[2:]

    assert [row.split()[0] for row in rows] == [kind.value for kind in DatasetKind]
    pubchem_row = next(row for row in rows if row.startswith("pub_chem "))
    assert pubchem_row.split()[1] == str(DatasetKind.PUB_CHEM.size)
    assert pubchem_row.endswith("(missing)")
    dummy_row = next(row for row in rows if row.startswith("dummy "))
    assert dummy_row.endswith("(in memory)")


def test_store_missing_dataset(dataset_store: InMemoryDatasetStore) -> None:
    with pytest.raises(DatasetUnavailableError):
        dataset_store.load(DatasetKind.CHEMBL30)


def test_store_builtin_datasets(dataset_store: InMemoryDatasetStore) -> None:
    assert len(dataset_store.load(DatasetKind.DUMMY)) == 4
    assert dataset_store.get_slice(DatasetKind.EMPTY, DividendIndex(0, 1)) is None
