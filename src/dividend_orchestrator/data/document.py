"""SMILES documents: id/SMILES pairs kept sorted by entry id."""

from __future__ import annotations

import bisect
from dataclasses import dataclass

from dividend_orchestrator.dividend import DividendIndex

IdSmilesPairs = tuple[list[str], list[str]]


@dataclass(frozen=True, slots=True)
class SmilesDocument:
    ids: tuple[str, ...]
    smiles: tuple[str, ...]

    @classmethod
    def from_pairs(cls, ids: list[str], smiles: list[str]) -> SmilesDocument:
        """Build a document, sorting entries by id and permuting SMILES alongside."""
        if len(ids) != len(smiles):
            raise ValueError(f"{len(ids)} ids for {len(smiles)} SMILES")
        order = sorted(range(len(ids)), key=lambda i: ids[i])
        return cls(
            ids=tuple(ids[i] for i in order),
            smiles=tuple(smiles[i] for i in order),
        )

    @classmethod
    def empty(cls) -> SmilesDocument:
        return cls(ids=(), smiles=())

    @classmethod
    def dummy(cls) -> SmilesDocument:
        """Four well known drugs; the in-memory test dataset."""
        return cls.from_pairs(
            ["label_1", "label_3", "label_2", "label_4"],
            [
                "O=C(C)Oc1ccccc1C(=O)O",
                "N1=C(c3c(Sc2c1cccc2)cccc3)N4CCN(CCOCCO)CC4",
                "O=C(O)C[C@H](O)C[C@H](O)CCn2c(c(c(c2c1ccc(F)cc1)c3ccccc3)C(=O)Nc4ccccc4)C(C)C",
                "CC(=O)Nc1ccc(O)cc1",
            ],
        )

    def __len__(self) -> int:
        return len(self.ids)

    def get_smiles(self, entry_id: str) -> str | None:
        pos = bisect.bisect_left(self.ids, entry_id)
        if pos < len(self.ids) and self.ids[pos] == entry_id:
            return self.smiles[pos]
        return None

    def extract(self, entries: range) -> IdSmilesPairs:
        window = slice(entries.start, entries.stop)
        return (list(self.ids[window]), list(self.smiles[window]))

    def slice_for(self, dividend: DividendIndex) -> IdSmilesPairs | None:
        """The entries of one dividend, or None when it falls past the data."""
        entries = dividend.bounds(len(self))
        if len(entries) == 0:
            return None
        return self.extract(entries)
