"""Key space providers.

A provider builds the :class:`~s3readbench.keyspace.KeySpace` for a run.
It is called once, before any timed iteration, so listing or file
loading cost never shows up in latency samples.

Two implementations:
    S3ObjectKeysProvider    - lists every key under a bucket prefix
    FileObjectKeysProvider  - loads a newline-delimited key file
"""

from __future__ import annotations

import logging
import os
from typing import Any

from s3readbench.backends import TRANSFER_ERRORS
from s3readbench.config import LIST_PAGE_SIZE
from s3readbench.exceptions import ProviderError
from s3readbench.keyfiles import read_key_file
from s3readbench.keyspace import KeySpace
from s3readbench.s3_ops import s3_list


class KeySpaceProvider:
    """Base class for key space providers."""

    def get(self) -> KeySpace:
        """Load the key space.

        Raises:
            ProviderError: If no keys are available or loading fails.
        """
        raise NotImplementedError("Subclasses must implement get()")


class S3ObjectKeysProvider(KeySpaceProvider):
    """Enumerate all object keys under ``prefix`` in ``bucket``."""

    def __init__(
        self,
        client: Any,
        bucket: str,
        prefix: str = "",
        *,
        page_size: int = LIST_PAGE_SIZE,
        logger: logging.Logger | logging.LoggerAdapter | None = None,
    ) -> None:
        self.client = client
        self.bucket = bucket
        self.prefix = prefix or ""
        self.page_size = page_size
        self.logger = logger

    def list_keys(self) -> list[str]:
        """Page through ListObjectsV2 and collect every key."""
        keys: list[str] = []
        continuation_token = None
        pages = 0

        while True:
            try:
                result = s3_list(
                    self.client,
                    self.bucket,
                    prefix=self.prefix,
                    max_keys=self.page_size,
                    continuation_token=continuation_token,
                    logger=self.logger,
                )
            except TRANSFER_ERRORS as exc:
                raise ProviderError(
                    f"Listing s3://{self.bucket}/{self.prefix} failed "
                    f"after {pages} pages: {exc}"
                ) from exc
            pages += 1
            keys.extend(obj["Key"] for obj in result.get("Contents") or [])

            if not result.get("IsTruncated"):
                break
            continuation_token = result.get("NextContinuationToken")
            if not continuation_token:
                break

        if self.logger:
            self.logger.debug(
                f"Listed {len(keys)} keys in {pages} pages",
                extra={"op_type": "LIST"},
            )
        return keys

    def get(self) -> KeySpace:
        keys = self.list_keys()
        if not keys:
            raise ProviderError(
                f"No objects found under s3://{self.bucket}/{self.prefix}"
            )
        return KeySpace(keys)


class FileObjectKeysProvider(KeySpaceProvider):
    """Load keys from a local file, one key per line."""

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self.path = os.fspath(path)

    def get(self) -> KeySpace:
        try:
            keys = read_key_file(self.path)
        except (OSError, UnicodeDecodeError) as exc:
            raise ProviderError(
                f"Cannot read key file {self.path}: {exc}"
            ) from exc
        if not keys:
            raise ProviderError(f"Key file {self.path} contains no keys")
        return KeySpace(keys)


def select_provider(
    client: Any,
    bucket: str,
    prefix: str | None = None,
    key_file: str | os.PathLike[str] | None = None,
    logger: logging.Logger | logging.LoggerAdapter | None = None,
) -> KeySpaceProvider:
    """Pick the file provider when a key file is given, else listing."""
    if key_file is not None:
        return FileObjectKeysProvider(key_file)
    return S3ObjectKeysProvider(client, bucket, prefix or "", logger=logger)
