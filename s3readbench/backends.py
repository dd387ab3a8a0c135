"""Object store backends.

Two interchangeable clients are provided: ``S3ClientBoto3`` (the
default) and ``S3ClientMinio`` (needs the ``minio`` extra). Both offer:

* ``open_object(bucket, key)``: context manager over the body stream,
  released on exit whatever happens inside the block.
* ``head_object(bucket, key)``: dict carrying ``ContentLength``.
* ``list_objects(bucket, prefix, max_keys, continuation_token)``:
  a ListObjectsV2-shaped page.

Construction does all the connection setup, so nothing but the request
itself runs while a read is being timed.
"""

from __future__ import annotations

import itertools
import random
import urllib.parse
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any, BinaryIO

import boto3
import urllib3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from s3readbench.config import (
    S3_CONNECT_TIMEOUT,
    S3_READ_TIMEOUT,
    S3_VERIFY_SSL,
)

# Self-signed endpoints are common on test clusters
urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)

# Anything a backend may raise while fetching or draining an object.
# Non-boto backends translate their own errors to OSError.
TRANSFER_ERRORS: tuple[type[BaseException], ...] = (
    OSError,
    BotoCoreError,
    ClientError,
    urllib3.exceptions.HTTPError,
)


class S3ClientBoto3:
    """boto3 client spread over one or more endpoints.

    One botocore client per endpoint is created up front. Each
    ``open_object`` takes the next endpoint in turn, and a
    ``head_object`` issued while that stream is open goes to the same
    endpoint, so a fetch never straddles two servers.
    """

    def __init__(
        self,
        *,
        endpoints: list[str],
        access_key_id: str,
        secret_access_key: str,
        region: str,
    ) -> None:
        if not endpoints:
            raise RuntimeError("No S3 endpoints configured")
        self.endpoints = list(endpoints)
        config = Config(
            retries={"max_attempts": 3},
            connect_timeout=S3_CONNECT_TIMEOUT,
            read_timeout=S3_READ_TIMEOUT,
        )
        self.clients = [
            boto3.client(
                "s3",
                endpoint_url=endpoint,
                aws_access_key_id=access_key_id,
                aws_secret_access_key=secret_access_key,
                region_name=region,
                verify=S3_VERIFY_SSL,
                config=config,
            )
            for endpoint in self.endpoints
        ]
        self._turn = itertools.count()
        self._bound: Any = None

    def _next_client(self) -> Any:
        return self.clients[next(self._turn) % len(self.clients)]

    @contextmanager
    def open_object(self, bucket: str, key: str) -> Iterator[BinaryIO]:
        """Stream an object body from the next endpoint."""
        client = self._next_client()
        body = client.get_object(Bucket=bucket, Key=key)["Body"]
        self._bound = client
        try:
            yield body
        finally:
            self._bound = None
            body.close()

    def head_object(self, bucket: str, key: str) -> dict:
        """Object metadata, from the endpoint of the open stream if any."""
        client = self._bound
        if client is None:
            client = self._next_client()
        return client.head_object(Bucket=bucket, Key=key)

    def list_objects(
        self,
        bucket: str,
        prefix: str = "",
        max_keys: int = 1000,
        continuation_token: str | None = None,
    ) -> dict:
        """One ListObjectsV2 page."""
        params: dict[str, Any] = {
            "Bucket": bucket,
            "Prefix": prefix,
            "MaxKeys": max_keys,
        }
        if continuation_token:
            params["ContinuationToken"] = continuation_token
        return self._next_client().list_objects_v2(**params)

    def close(self) -> None:
        for client in self.clients:
            client.close()


class S3ClientMinio:
    """minio-py client bound to a single, randomly picked endpoint.

    ``MinioException`` is re-raised as ``OSError`` so that callers
    only need to know :data:`TRANSFER_ERRORS`.
    """

    def __init__(
        self,
        *,
        endpoints: list[str],
        access_key_id: str,
        secret_access_key: str,
        region: str,
    ) -> None:
        try:
            from minio import Minio
        except ImportError as exc:
            raise ImportError(
                "minio package not installed. "
                "Run: pip install s3readbench[minio]"
            ) from exc

        if not endpoints:
            raise RuntimeError("No S3 endpoints configured")

        parsed = urllib.parse.urlparse(random.choice(endpoints))
        self.client = Minio(
            parsed.netloc,
            access_key=access_key_id,
            secret_key=secret_access_key,
            region=region,
            secure=parsed.scheme == "https",
            http_client=urllib3.PoolManager(
                timeout=S3_READ_TIMEOUT,
                cert_reqs="CERT_REQUIRED" if S3_VERIFY_SSL else "CERT_NONE",
                retries=3,
            ),
        )

    @staticmethod
    @contextmanager
    def _translate_errors(op: str, key: str) -> Iterator[None]:
        from minio.error import MinioException

        try:
            yield
        except MinioException as exc:
            raise OSError(f"{op} {key} failed: {exc}") from exc

    @contextmanager
    def open_object(self, bucket: str, key: str) -> Iterator[BinaryIO]:
        with self._translate_errors("GET", key):
            response = self.client.get_object(bucket, key)
        try:
            yield response
        finally:
            response.close()
            response.release_conn()

    def head_object(self, bucket: str, key: str) -> dict:
        with self._translate_errors("HEAD", key):
            stat = self.client.stat_object(bucket, key)
        return {"ContentLength": stat.size}

    def list_objects(
        self,
        bucket: str,
        prefix: str = "",
        max_keys: int = 1000,
        continuation_token: str | None = None,
    ) -> dict:
        """Emulate a ListObjectsV2 page; the token is the last key seen."""
        keys: list[str] = []
        truncated = False
        with self._translate_errors("LIST", prefix):
            for obj in self.client.list_objects(
                bucket,
                prefix=prefix,
                recursive=True,
                start_after=continuation_token or None,
            ):
                if len(keys) == max_keys:
                    truncated = True
                    break
                keys.append(obj.object_name)

        page: dict[str, Any] = {
            "Contents": [{"Key": key} for key in keys],
            "IsTruncated": truncated,
            "KeyCount": len(keys),
        }
        if truncated and keys:
            page["NextContinuationToken"] = keys[-1]
        return page

    def close(self) -> None:
        """Nothing to release; the pool manager is garbage collected."""
