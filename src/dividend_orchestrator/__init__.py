"""Dividend orchestrator.

Splits chemistry computations (similarity search, substructure matching,
GROMACS commands) into independent dividends, tracks each job through its
lifecycle and aggregates per-dividend outputs into a report.
"""

__version__ = "0.1.0"

from dividend_orchestrator.config import OrchestratorSettings

__all__ = ["__version__", "OrchestratorSettings"]
