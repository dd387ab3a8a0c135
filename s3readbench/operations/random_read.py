"""Random Read: timed GETs of uniformly random keys.

Each iteration draws a key (with replacement) from the run's key space,
then times the full fetch: open the object, look up its declared
length, drain the body into a reused buffer, close. Only the fetch is
inside the timed window; key selection and progress logging are not.

Note that the metadata lookup is a separate round trip inside the timed
window, so a sample measures "HEAD + GET of N bytes", not the GET alone.
"""

from __future__ import annotations

import logging
import os
import random
import time
from dataclasses import dataclass
from typing import Any, BinaryIO

from s3readbench.backends import TRANSFER_ERRORS
from s3readbench.config import PROGRESS_EVERY, READ_BUFFER_SIZE
from s3readbench.exceptions import IoFailure, TransferIntegrityWarning
from s3readbench.operations.base import Operation
from s3readbench.providers import KeySpaceProvider, select_provider
from s3readbench.result import OperationResult
from s3readbench.utils import (
    format_bytes,
    format_duration,
    is_not_found_error,
)


@dataclass(frozen=True)
class ReadOutcome:
    """Result of one timed fetch; ``failure`` is set when it did not complete."""

    key: str
    elapsed_ms: float = 0.0
    content_length: int = 0
    bytes_read: int = 0
    failure: IoFailure | None = None

    @property
    def length_matches(self) -> bool:
        return self.bytes_read == self.content_length


def drain(stream: BinaryIO, buffer: bytearray) -> int:
    """Read ``stream`` to EOF through ``buffer``, return the byte count."""
    total = 0
    readinto = getattr(stream, "readinto", None)
    if readinto is not None:
        view = memoryview(buffer)
        while True:
            nread = readinto(view)
            if not nread:
                break
            total += nread
        return total

    size = len(buffer)
    while True:
        chunk = stream.read(size)
        if not chunk:
            break
        total += len(chunk)
    return total


def format_latency_line(percentiles: dict[str, float]) -> str:
    """Format GET latency percentiles into a compact log fragment."""
    if not percentiles.get("count"):
        return ""
    return (
        f"GET p50={percentiles['p50']:.1f}ms "
        f"p95={percentiles['p95']:.1f}ms "
        f"p99={percentiles['p99']:.1f}ms "
        f"max={percentiles['max']:.1f}ms"
    )


class RandomRead(Operation):
    """Timed reads of random keys from a bucket.

    The key space comes from ``key_file`` when given, otherwise from
    listing ``prefix`` in ``bucket``. It is loaded once, before the
    first timed iteration.

    A read that raises an I/O error is logged and skipped (no sample).
    A read whose byte count differs from the declared length is logged
    but still recorded, since the transfer completed.
    """

    name = "random-read"

    def __init__(
        self,
        client: Any,
        bucket: str,
        prefix: str | None = None,
        n: int = 1000,
        key_file: str | os.PathLike[str] | None = None,
        *,
        seed: int | None = None,
        rng: random.Random | None = None,
        logger: logging.Logger | logging.LoggerAdapter | None = None,
        buffer_size: int = READ_BUFFER_SIZE,
        progress_every: int = PROGRESS_EVERY,
    ) -> None:
        if n < 1:
            raise ValueError(f"Iteration count must be positive: {n}")
        if buffer_size < 1:
            raise ValueError(f"Buffer size must be positive: {buffer_size}")
        if progress_every < 1:
            raise ValueError(
                f"Progress interval must be positive: {progress_every}"
            )
        super().__init__(logger)
        self.client = client
        self.bucket = bucket
        self.prefix = prefix
        self.n = n
        self.key_file = key_file
        self.seed = seed
        self._rng = rng
        self.buffer_size = buffer_size
        self.progress_every = progress_every

        # Per-run counters, reset by call()
        self.failures = 0
        self.mismatches = 0
        self.bytes_read = 0

    def provider(self) -> KeySpaceProvider:
        """Key space provider for this run's configuration."""
        return select_provider(
            self.client,
            self.bucket,
            self.prefix,
            self.key_file,
            logger=self.logger,
        )

    def _make_rng(self) -> random.Random | None:
        if self._rng is not None:
            return self._rng
        if self.seed is not None:
            return random.Random(self.seed)
        return None

    def _timed_fetch(self, key: str, buffer: bytearray) -> ReadOutcome:
        """Fetch and drain one object inside the timed window."""
        client = self.client
        bucket = self.bucket

        start = time.perf_counter()
        try:
            with client.open_object(bucket, key) as stream:
                content_length = int(
                    client.head_object(bucket, key)["ContentLength"]
                )
                bytes_read = drain(stream, buffer)
        except TRANSFER_ERRORS as exc:
            return ReadOutcome(key=key, failure=IoFailure(key, exc))
        elapsed_ms = (time.perf_counter() - start) * 1000

        return ReadOutcome(
            key=key,
            elapsed_ms=elapsed_ms,
            content_length=content_length,
            bytes_read=bytes_read,
        )

    def _report_failure(self, failure: IoFailure) -> None:
        if is_not_found_error(failure.cause):
            msg = f"Object not found while reading with key: {failure.key}"
        else:
            msg = (
                f"An exception occurred while reading with key: "
                f"{failure.key} ({type(failure.cause).__name__}: "
                f"{failure.cause})"
            )
        self.log(msg, level="warning", op_type="GET")

    def call(self) -> OperationResult:
        """Run ``n`` timed reads.

        Returns:
            OperationResult over the completed reads; its count is
            ``n`` minus the number of I/O failures.

        Raises:
            ProviderError: If the key space cannot be loaded. No
                iteration runs in that case.
        """
        self.log(f"Random read: n={self.n}")
        stats = self.reset_stats()
        self.failures = 0
        self.mismatches = 0
        self.bytes_read = 0

        key_space = self.provider().get()
        self.log(f"Loaded {key_space.size()} keys")

        rng = self._make_rng()
        buffer = bytearray(self.buffer_size)
        started = time.monotonic()

        for i in range(self.n):
            key = key_space.random_key(rng)
            outcome = self._timed_fetch(key, buffer)

            if outcome.failure is not None:
                self.failures += 1
                self._report_failure(outcome.failure)
            else:
                stats.add_value(outcome.elapsed_ms)
                self.bytes_read += outcome.bytes_read
                if not outcome.length_matches:
                    self.mismatches += 1
                    warning = TransferIntegrityWarning(
                        key, outcome.content_length, outcome.bytes_read,
                    )
                    self.log(str(warning), level="warning", op_type="GET")

            if i > 0 and i % self.progress_every == 0:
                self.log(f"Progress: {i} of {self.n}", op_type="PROGRESS")

        elapsed = time.monotonic() - started
        result = self.result()

        msg = (
            f"FINAL: samples={result.count:,}, "
            f"failures={self.failures}, "
            f"mismatches={self.mismatches}, "
            f"bytes={format_bytes(self.bytes_read)}, "
            f"elapsed={format_duration(int(elapsed))}"
        )
        lat_line = format_latency_line(result.stats.percentiles())
        if lat_line:
            msg += f" | {lat_line}"
        self.log(msg, op_type="FINAL")
        return result
