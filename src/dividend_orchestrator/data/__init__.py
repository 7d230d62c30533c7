"""Datasets and the shared slice store."""

from dividend_orchestrator.data.document import IdSmilesPairs, SmilesDocument
from dividend_orchestrator.data.store import DatasetStore, InMemoryDatasetStore

__all__ = ["DatasetStore", "IdSmilesPairs", "InMemoryDatasetStore", "SmilesDocument"]
