"""Error taxonomy for read benchmarks.

Fatal errors (:class:`ProviderError`, :class:`EmptyKeySpaceError`) abort
a run and propagate to the caller. :class:`IoFailure` and
:class:`TransferIntegrityWarning` are per-iteration conditions that the
measurement loop absorbs and only reports through logging.
"""

from __future__ import annotations

__all__ = [
    "S3ReadBenchError",
    "ProviderError",
    "EmptyKeySpaceError",
    "IoFailure",
    "TransferIntegrityWarning",
]


class S3ReadBenchError(Exception):
    """Base class for all s3readbench errors."""


class ProviderError(S3ReadBenchError):
    """The key source is empty or could not be read."""


class EmptyKeySpaceError(S3ReadBenchError):
    """A random key was requested from an empty key space."""


class IoFailure(S3ReadBenchError):
    """A single read failed during fetch or drain."""

    def __init__(self, key: str, cause: BaseException) -> None:
        self.key = key
        self.cause = cause
        super().__init__(
            f"Read failed for key {key}: "
            f"{type(cause).__name__}: {cause}"
        )


class TransferIntegrityWarning(UserWarning):
    """Bytes transferred differ from the object's declared length."""

    def __init__(self, key: str, declared: int, actual: int) -> None:
        self.key = key
        self.declared = declared
        self.actual = actual
        super().__init__(
            f"Upload/read size mismatch for key {key}: "
            f"declared={declared} bytes, read={actual} bytes"
        )
