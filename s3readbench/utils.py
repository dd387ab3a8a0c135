"""Backoff for untimed store calls, plus formatting helpers."""

from __future__ import annotations

import logging
import random
import time
from collections.abc import Callable
from typing import TypeVar

from botocore.exceptions import (
    ClientError,
    ConnectTimeoutError,
    ReadTimeoutError,
)

from s3readbench.config import (
    RETRY_BASE_DELAY,
    RETRY_MAX_ATTEMPTS,
    RETRY_MAX_DELAY,
)

T = TypeVar("T")

RETRYABLE_CODES = frozenset({
    "RequestTimeout",
    "RequestTimeoutException",
    "PriorRequestNotComplete",
    "SlowDown",
    "ServiceUnavailable",
    "InternalError",
})
RETRYABLE_STATUSES = frozenset({429, 500, 502, 503, 504})
TIMEOUT_ERRORS = (ConnectTimeoutError, ReadTimeoutError, TimeoutError)


def _error_code(exc: ClientError) -> tuple[str, int]:
    code = exc.response.get("Error", {}).get("Code", "")
    status = exc.response.get("ResponseMetadata", {}).get("HTTPStatusCode", 0)
    return code, status


def is_not_found_error(exc: BaseException) -> bool:
    """True if ``exc`` means the object does not exist."""
    if isinstance(exc, ClientError):
        return _error_code(exc)[0] in ("NoSuchKey", "404", "NotFound")
    return "NoSuchKey" in str(exc) or "404" in str(exc)


def is_retryable(exc: BaseException) -> bool:
    """Throttling, server-side failures and timeouts are worth retrying.

    Refused or reset connections are not, so a dead endpoint fails fast.
    """
    if isinstance(exc, ClientError):
        code, status = _error_code(exc)
        return code in RETRYABLE_CODES or status in RETRYABLE_STATUSES
    return isinstance(exc, TIMEOUT_ERRORS)


def _backoff(attempt: int, base_delay: float, max_delay: float) -> float:
    delay = min(base_delay * (2 ** attempt), max_delay)
    return delay + random.uniform(0, delay * 0.3)


def retry_with_backoff(
    func: Callable[[], T],
    *,
    max_retries: int = RETRY_MAX_ATTEMPTS,
    base_delay: float = RETRY_BASE_DELAY,
    max_delay: float = RETRY_MAX_DELAY,
    logger: logging.Logger | logging.LoggerAdapter | None = None,
) -> T:
    """Call ``func`` until it succeeds, with jittered exponential backoff.

    Gives up after ``max_retries`` retries, or at once when the error is
    not :func:`is_retryable`; the last error is re-raised either way.
    """
    attempt = 0
    while True:
        try:
            return func()
        except Exception as exc:
            if not is_retryable(exc):
                raise
            if attempt >= max_retries:
                if logger:
                    logger.warning(f"Giving up after {attempt} retries: {exc}")
                raise
            delay = _backoff(attempt, base_delay, max_delay)
            attempt += 1
            if logger:
                logger.debug(
                    f"Retry {attempt}/{max_retries} after "
                    f"{type(exc).__name__}, backoff {delay:.2f}s"
                )
            time.sleep(delay)


def format_duration(seconds: int) -> str:
    """Coarse duration: ``45s``, ``12m``, ``3h`` or ``2d``."""
    for unit, size in (("d", 86400), ("h", 3600), ("m", 60)):
        if seconds >= size:
            return f"{seconds // size}{unit}"
    return f"{seconds}s"


def format_bytes(size: float) -> str:
    """Human-readable size, e.g. ``512B`` or ``1.5MB``."""
    if size < 1024:
        return f"{size}B"
    for unit, scale in (("KB", 1024), ("MB", 1024**2)):
        if size < scale * 1024:
            return f"{size / scale:.1f}{unit}"
    return f"{size / 1024**3:.1f}GB"
