"""Random-read command — Run the random read benchmark locally.

Loads the key space (key file or bucket listing), runs the timed loop
and logs a FINAL summary line.
"""

from __future__ import annotations

import json

from s3readbench.config import DEFAULT_ITERATIONS, S3_BUCKET
from s3readbench.exceptions import ProviderError
from s3readbench.logging_setup import get_logger, setup_logging
from s3readbench.operations import RandomRead
from s3readbench.s3_client import S3Client, get_client_backend_name


def cmd_random_read(args: object) -> int:
    """Run the random read benchmark.

    Args:
        args: Parsed CLI arguments with ``bucket``, ``prefix``,
            ``iterations``, ``key_file``, ``seed``, ``backend``,
            ``json`` and ``log_level`` attributes.

    Returns:
        Exit code (0 for success, 1 for error).
    """
    setup_logging(level=getattr(args, "log_level", None))
    logger = get_logger(operation=RandomRead.name)

    bucket = getattr(args, "bucket", None) or S3_BUCKET
    if not bucket:
        logger.error("No bucket given (use --bucket or S3_BUCKET)")
        return 1

    backend = getattr(args, "backend", None)
    try:
        client = S3Client(backend=backend)
    except (ValueError, ImportError, RuntimeError) as exc:
        logger.error(str(exc))
        return 1
    logger.info(f"Using {get_client_backend_name(backend)}")

    operation = RandomRead(
        client,
        bucket,
        getattr(args, "prefix", None),
        getattr(args, "iterations", DEFAULT_ITERATIONS),
        getattr(args, "key_file", None),
        seed=getattr(args, "seed", None),
        logger=logger,
    )

    try:
        result = operation.call()
    except ProviderError as exc:
        logger.error(f"Cannot load key space: {exc}")
        return 1
    finally:
        client.close()

    if getattr(args, "json", False):
        print(json.dumps(result.to_dict()))
    return 0
