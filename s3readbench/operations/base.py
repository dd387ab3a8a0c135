"""Base class for benchmark operations.

All operations inherit from Operation which provides:
- A fresh stats accumulator per run
- Logging with operation context (injectable logger)
- The ``call()`` entry point returning an OperationResult
"""

from __future__ import annotations

import logging

from s3readbench.logging_setup import get_logger
from s3readbench.result import OperationResult
from s3readbench.stats import StatsAccumulator


class Operation:
    """Base class for benchmark operations."""

    name = "operation"

    def __init__(
        self,
        logger: logging.Logger | logging.LoggerAdapter | None = None,
    ) -> None:
        """Initialize operation.

        Args:
            logger: Logger to report warnings and progress to. Defaults
                to the package logger tagged with the operation name.
        """
        self.logger = logger if logger is not None else get_logger(
            operation=self.name,
        )
        self._stats = StatsAccumulator()

    def log(self, msg: str, level: str = "info", **extra: object) -> None:
        """Log message with operation context."""
        log_func = getattr(self.logger, level.lower(), self.logger.info)
        log_func(msg, extra=extra)

    def get_stats(self) -> StatsAccumulator:
        """Accumulator of the current (or most recent) run."""
        return self._stats

    def reset_stats(self) -> StatsAccumulator:
        """Start a new accumulator for a fresh run."""
        self._stats = StatsAccumulator()
        return self._stats

    def result(self) -> OperationResult:
        """Freeze the current accumulator into an OperationResult."""
        return OperationResult(
            operation=self.name, stats=self._stats.snapshot(),
        )

    def call(self) -> OperationResult:
        """Override this method to implement the operation."""
        raise NotImplementedError("Subclasses must implement call()")
