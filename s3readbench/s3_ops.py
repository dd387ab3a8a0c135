"""Store calls made outside the timed window, with backoff.

The timed read path calls the client directly so that no sample ever
contains a backoff sleep.
"""

from __future__ import annotations

import logging
from typing import Any

from s3readbench.utils import retry_with_backoff

__all__ = ["s3_list"]


def s3_list(
    client: Any,
    bucket: str,
    prefix: str = "",
    max_keys: int = 1000,
    continuation_token: str | None = None,
    logger: logging.Logger | logging.LoggerAdapter | None = None,
) -> dict:
    """One ListObjectsV2-shaped page, retried on transient errors."""
    return retry_with_backoff(
        lambda: client.list_objects(
            bucket, prefix, max_keys, continuation_token,
        ),
        logger=logger,
    )
