"""Result of a completed benchmark operation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from s3readbench.stats import StatsSnapshot


@dataclass(frozen=True)
class OperationResult:
    """Immutable binding of an operation to its final statistics.

    Only completed iterations are represented, so ``count`` may be
    lower than the requested iteration count.
    """

    operation: str
    stats: StatsSnapshot

    @property
    def count(self) -> int:
        return self.stats.count

    def to_dict(self) -> dict[str, Any]:
        """Summary aggregates as plain values (ms)."""
        stats = self.stats
        return {
            "operation": self.operation,
            "count": stats.count,
            "min_ms": stats.min,
            "max_ms": stats.max,
            "mean_ms": stats.mean,
            "stddev_ms": stats.stddev,
            "p50_ms": stats.percentile(50),
            "p95_ms": stats.percentile(95),
            "p99_ms": stats.percentile(99),
        }
