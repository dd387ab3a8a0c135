"""Build a store client from configuration.

Usage::

    from s3readbench.s3_client import S3Client

    client = S3Client()                  # S3READBENCH_BACKEND, boto3 by default
    client = S3Client(backend="minio")   # needs the minio extra
"""

from __future__ import annotations

from typing import Any

from s3readbench.backends import S3ClientBoto3, S3ClientMinio
from s3readbench.config import (
    S3_ACCESS_KEY_ID,
    S3_BACKEND,
    S3_ENDPOINTS,
    S3_REGION,
    S3_SECRET_ACCESS_KEY,
)

BACKENDS: dict[str, type] = {
    "boto3": S3ClientBoto3,
    "minio": S3ClientMinio,
}


def backend_class(backend: str | None = None) -> type:
    """Client class for ``backend``, or for the configured default.

    Raises:
        ValueError: If the name is not one of :data:`BACKENDS`.
    """
    name = (backend or S3_BACKEND).lower()
    try:
        return BACKENDS[name]
    except KeyError:
        raise ValueError(
            f"Unknown S3 backend '{name}'. Available: {', '.join(BACKENDS)}"
        ) from None


def S3Client(
    *,
    backend: str | None = None,
    endpoints: list[str] | None = None,
) -> Any:
    """Client for ``backend`` with credentials and endpoints from config."""
    return backend_class(backend)(
        endpoints=S3_ENDPOINTS if endpoints is None else endpoints,
        access_key_id=S3_ACCESS_KEY_ID,
        secret_access_key=S3_SECRET_ACCESS_KEY,
        region=S3_REGION,
    )


def get_client_backend_name(backend: str | None = None) -> str:
    return backend_class(backend).__name__
