from __future__ import annotations

# Benchmark operations

from s3readbench.operations.base import Operation
from s3readbench.operations.random_read import RandomRead

__all__ = [
    "Operation",
    "RandomRead",
]
