"""List-keys command — Freeze a bucket listing into a key file.

A key file lets repeated benchmark runs skip the listing round trips
and sample the exact same key space.
"""

from __future__ import annotations

from s3readbench.config import S3_BUCKET
from s3readbench.exceptions import ProviderError
from s3readbench.keyfiles import write_key_file
from s3readbench.logging_setup import get_logger, setup_logging
from s3readbench.providers import S3ObjectKeysProvider
from s3readbench.s3_client import S3Client


def cmd_list_keys(args: object) -> int:
    """List ``prefix`` in ``bucket`` and write the keys to ``output``."""
    setup_logging(level=getattr(args, "log_level", None))
    logger = get_logger(operation="list-keys")

    bucket = getattr(args, "bucket", None) or S3_BUCKET
    output = getattr(args, "output", None)
    if not bucket or not output:
        logger.error("list-keys needs --bucket (or S3_BUCKET) and --output")
        return 1

    try:
        client = S3Client(backend=getattr(args, "backend", None))
    except (ValueError, ImportError, RuntimeError) as exc:
        logger.error(str(exc))
        return 1

    prefix = getattr(args, "prefix", None) or ""
    provider = S3ObjectKeysProvider(client, bucket, prefix, logger=logger)
    try:
        key_space = provider.get()
    except ProviderError as exc:
        logger.error(str(exc))
        return 1
    finally:
        client.close()

    try:
        written = write_key_file(output, key_space)
    except OSError as exc:
        logger.error(f"Cannot write key file {output}: {exc}")
        return 1
    logger.info(f"Wrote {written:,} keys to {output}")
    return 0
