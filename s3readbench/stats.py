"""Latency statistics.

:class:`StatsAccumulator` collects one duration sample (milliseconds)
per completed read. :class:`StatsSnapshot` is its frozen copy, handed
to callers inside an :class:`~s3readbench.result.OperationResult`.

Percentiles use linear interpolation between the closest ranks, the
same estimator as numpy's default.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass

NAN = float("nan")


class _Summary:
    """Aggregates over ``self._samples()``."""

    def _samples(self) -> Sequence[float]:
        raise NotImplementedError

    @property
    def count(self) -> int:
        return len(self._samples())

    @property
    def sum(self) -> float:
        return math.fsum(self._samples())

    @property
    def min(self) -> float:
        values = self._samples()
        return min(values) if values else NAN

    @property
    def max(self) -> float:
        values = self._samples()
        return max(values) if values else NAN

    @property
    def mean(self) -> float:
        values = self._samples()
        return self.sum / len(values) if values else NAN

    @property
    def stddev(self) -> float:
        """Sample standard deviation (0.0 below two samples)."""
        values = self._samples()
        n = len(values)
        if n < 2:
            return 0.0
        mean = self.mean
        return math.sqrt(
            math.fsum((v - mean) ** 2 for v in values) / (n - 1)
        )

    def percentile(self, p: float) -> float:
        """Estimate the ``p``-th percentile, ``0 < p <= 100``.

        Raises:
            ValueError: If ``p`` is out of range.
        """
        if not 0 < p <= 100:
            raise ValueError(f"Percentile must be in (0, 100]: {p}")
        values = sorted(self._samples())
        if not values:
            return NAN
        rank = (len(values) - 1) * p / 100
        lo = math.floor(rank)
        hi = min(lo + 1, len(values) - 1)
        return values[lo] + (values[hi] - values[lo]) * (rank - lo)

    def percentiles(self) -> dict[str, float]:
        """p50/p95/p99/max/count, the shape used in summary lines."""
        return {
            "p50": self.percentile(50),
            "p95": self.percentile(95),
            "p99": self.percentile(99),
            "max": self.max,
            "count": self.count,
        }


class StatsAccumulator(_Summary):
    """Append-only collection of duration samples.

    Single writer; not thread-safe. Parallel runners should keep one
    accumulator per worker and :meth:`merge` them at the end.
    """

    def __init__(self) -> None:
        self._values: list[float] = []

    def _samples(self) -> Sequence[float]:
        return self._values

    def add_value(self, value: float) -> None:
        """Record one sample.

        Raises:
            ValueError: If ``value`` is negative or NaN.
        """
        if math.isnan(value) or value < 0:
            raise ValueError(f"Duration sample must be >= 0: {value}")
        self._values.append(float(value))

    def merge(self, other: _Summary) -> None:
        """Append every sample of ``other``."""
        self._values.extend(other._samples())

    def snapshot(self) -> StatsSnapshot:
        """Frozen copy of the current samples."""
        return StatsSnapshot(values=tuple(self._values))

    def __repr__(self) -> str:
        return f"StatsAccumulator(count={self.count})"


@dataclass(frozen=True)
class StatsSnapshot(_Summary):
    """Immutable copy of an accumulator's samples."""

    values: tuple[float, ...] = ()

    def _samples(self) -> Sequence[float]:
        return self.values
