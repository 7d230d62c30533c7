"""Exception hierarchy for the orchestrator.

Compute failures are recoverable at the Job level and end up recorded as the
job's terminal error. Kind mismatches are programmer errors and are never
caught by the library.
"""

from __future__ import annotations


class OrchestratorError(Exception):
    """Base class for all orchestrator errors."""


class IllegalTransitionError(OrchestratorError, ValueError):
    """A Job transition that the state machine does not allow."""


class DividendAlreadyCompletedError(IllegalTransitionError):
    """A dividend index was completed (or recorded) a second time."""

    def __init__(self, index: int) -> None:
        super().__init__(f"Dividend {index} has already been completed")
        self.index = index


class DividendIndexError(OrchestratorError, IndexError):
    """A dividend index outside ``[0, divisor)``."""

    def __init__(self, index: int, divisor: int) -> None:
        super().__init__(f"Dividend index {index} out of range for divisor {divisor}")
        self.index = index
        self.divisor = divisor


class OperatorKindMismatchError(OrchestratorError, TypeError):
    """An operator was constructed with a kind it does not implement."""


class OutputKindMismatchError(OrchestratorError, TypeError):
    """Outputs of different operator kinds were merged."""


class ComputeError(OrchestratorError):
    """A compute step failed; the message is the failure payload."""


class ProcessInvocationError(ComputeError):
    """The external executable could not be launched."""


class FingerprintParseError(OrchestratorError, ValueError):
    """A fingerprint kind string could not be parsed."""


class DatasetUnavailableError(OrchestratorError):
    """A dataset has no source or its file cannot be read."""
