from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal

from pydantic import BaseModel, Field

from dividend_orchestrator.errors import IllegalTransitionError


class Status(str, Enum):
    CREATED = "created"
    PROCESSING = "processing"
    COMPLETED_SUCCESS = "completed_success"
    COMPLETED_ERROR = "completed_error"
    CANCELLED = "cancelled"
    UNKNOWN = "unknown"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATUSES

    @property
    def is_completed(self) -> bool:
        return self in (Status.COMPLETED_SUCCESS, Status.COMPLETED_ERROR)

    def __str__(self) -> str:
        return self.value.upper()


TERMINAL_STATUSES: frozenset[Status] = frozenset(
    {Status.COMPLETED_SUCCESS, Status.COMPLETED_ERROR, Status.CANCELLED}
)

# Self loops are the transitions that only touch counters or timestamps
# (submit while created, further assignments/completions while processing).
ALLOWED_TRANSITIONS: dict[Status, set[Status]] = {
    Status.UNKNOWN: {Status.CREATED, Status.CANCELLED},
    Status.CREATED: {Status.CREATED, Status.PROCESSING, Status.CANCELLED},
    Status.PROCESSING: {
        Status.PROCESSING,
        Status.COMPLETED_SUCCESS,
        Status.COMPLETED_ERROR,
        Status.CANCELLED,
    },
    Status.COMPLETED_SUCCESS: set(),
    Status.COMPLETED_ERROR: set(),
    Status.CANCELLED: set(),
}


def check_transition(current: Status, to: Status) -> None:
    allowed = ALLOWED_TRANSITIONS.get(current, set())
    if to not in allowed:
        raise IllegalTransitionError(f"Illegal transition: {current.value} -> {to.value}")


class PercentageProgress(BaseModel):
    """Progress of a single-machine computation, 0 to 100."""

    kind: Literal["percentage"] = "percentage"
    value: float = Field(default=0.0, ge=0.0, le=100.0)

    def __str__(self) -> str:
        return f"{self.value:.1f}%"


class BlockProgress(BaseModel):
    """Progress of a multi-machine computation in dividend counts.

    ``waiting + processing + completed`` always equals the divisor.
    """

    kind: Literal["blocks"] = "blocks"
    waiting: int = Field(ge=0)
    processing: int = Field(default=0, ge=0)
    completed: int = Field(default=0, ge=0)

    @property
    def total(self) -> int:
        return self.waiting + self.processing + self.completed

    def as_tuple(self) -> tuple[int, int, int]:
        return (self.waiting, self.processing, self.completed)

    def __str__(self) -> str:
        return (
            f"waiting: {self.waiting}, processing: {self.processing}, "
            f"completed: {self.completed}"
        )


Progress = Annotated[PercentageProgress | BlockProgress, Field(discriminator="kind")]
