"""Reference distributions used to express metrics in sigma units."""

from __future__ import annotations

import statistics
from collections.abc import Iterable


class NormalDistribution:
    """Mean and population standard deviation of a set of values."""

    def __init__(self, values: Iterable[float]):
        data = list(values)
        self.n = len(data)
        self.mean = statistics.fmean(data) if data else 0.0
        self.stddev = statistics.pstdev(data, self.mean) if data else 0.0

    def to_sigma(self, x: float) -> float:
        if self.stddev == 0:
            return 0.0
        return (x - self.mean) / self.stddev

    def to_sigma10x(self, x: float) -> int:
        """Deviation of ``x`` from the mean in tenths of a standard deviation."""
        return round(self.to_sigma(x) * 10)

    def __repr__(self) -> str:
        return f"NormalDistribution(n={self.n}, mean={self.mean:.2f}, stddev={self.stddev:.2f})"
