"""Dividend addressing: which unit of a split job a worker is handling."""

from __future__ import annotations

import math
from typing import NamedTuple


class DividendIndex(NamedTuple):
    """`index` among `divisor` independent units of one job."""

    index: int
    divisor: int

    def bounds(self, length: int) -> range:
        """Entries of a `length`-long dataset that belong to this dividend.

        Entries are cut into `divisor` contiguous chunks of equal size (the
        last one may be shorter or empty).
        """
        if self.divisor <= 0 or not 0 <= self.index < self.divisor:
            raise ValueError(f"Invalid dividend {self.index}/{self.divisor}")
        chunk = math.ceil(length / self.divisor)
        start = min(self.index * chunk, length)
        return range(start, min(start + chunk, length))

    def __str__(self) -> str:
        return f"{self.index}/{self.divisor}"
