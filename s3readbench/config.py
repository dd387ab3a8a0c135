"""Configuration — All tunables in one place.

Configuration is loaded from these sources (in priority order):
    1. Environment variables (highest priority)
    2. ``.env`` file in current working directory
    3. ``.env`` file in ``~/.s3readbench/``
    4. Built-in defaults
"""

from __future__ import annotations

import os
from pathlib import Path


# ---------------------------------------------------------------------------
# Stdlib .env file loader (no external dependency)
# ---------------------------------------------------------------------------

def _load_dotenv() -> None:
    """Load KEY=VALUE pairs from a .env file into ``os.environ``.

    Searches the current working directory first, then
    ``~/.s3readbench/``. Only sets variables that are not already
    present in the environment (env vars take priority).
    """
    candidates = [
        Path.cwd() / ".env",
        Path.home() / ".s3readbench" / ".env",
    ]
    for env_path in candidates:
        if env_path.is_file():
            _parse_env_file(env_path)
            return


def _parse_env_file(path: Path) -> None:
    """Parse a .env file and inject into ``os.environ``."""
    try:
        with open(path, encoding="utf-8") as f:
            for line in f:
                line = line.strip()
                if not line or line.startswith("#"):
                    continue
                if "=" not in line:
                    continue
                key, _, value = line.partition("=")
                key = key.strip()
                value = value.strip()
                # Strip surrounding quotes
                if (
                    len(value) >= 2
                    and value[0] == value[-1]
                    and value[0] in ('"', "'")
                ):
                    value = value[1:-1]
                if key not in os.environ:
                    os.environ[key] = value
    except OSError:
        # An unreadable .env falls back to built-in defaults
        return


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "")
    try:
        return int(raw) if raw else default
    except ValueError:
        return default


# Load .env before reading any configuration
_load_dotenv()


# ---------------------------------------------------------------------------
# Logging Configuration
# ---------------------------------------------------------------------------
DEFAULT_LOG_LEVEL = "INFO"

# ---------------------------------------------------------------------------
# S3 Connection
# ---------------------------------------------------------------------------
_s3_pool_str = os.environ.get("S3_POOL") or os.environ.get(
    "S3_ENDPOINTS", ""
)
S3_ENDPOINTS: list[str] = [
    ep.strip() for ep in _s3_pool_str.split(",") if ep.strip()
]

S3_ACCESS_KEY_ID = os.environ.get("AWS_ACCESS_KEY_ID", "")
S3_SECRET_ACCESS_KEY = os.environ.get("AWS_SECRET_ACCESS_KEY", "")
S3_BUCKET = os.environ.get("S3_BUCKET", "")
S3_REGION = os.environ.get("AWS_REGION", "us-east-1")
S3_VERIFY_SSL = os.environ.get("S3_VERIFY_SSL", "false").lower() in (
    "true",
    "1",
    "yes",
)

# Client-side timeouts; a timeout surfaces as a per-iteration I/O failure
S3_CONNECT_TIMEOUT = 10
S3_READ_TIMEOUT = 300

# ---------------------------------------------------------------------------
# S3 Client Backend
# ---------------------------------------------------------------------------
S3_BACKEND = os.environ.get("S3READBENCH_BACKEND", "boto3")

# ---------------------------------------------------------------------------
# Random Read Measurement
# ---------------------------------------------------------------------------
DEFAULT_ITERATIONS = _env_int("S3READBENCH_ITERATIONS", 1000)

# Drain buffer, allocated once per run and reused by every iteration
READ_BUFFER_SIZE = _env_int("S3READBENCH_READ_BUFFER", 4096)

# Progress line every N iterations (never on iteration 0)
PROGRESS_EVERY = 1000

# Page size for ListObjectsV2 when building the key space
LIST_PAGE_SIZE = 1000

# ---------------------------------------------------------------------------
# Retry configuration (listing only; timed reads are never retried)
# ---------------------------------------------------------------------------
RETRY_MAX_ATTEMPTS = 5
RETRY_BASE_DELAY = 0.1  # seconds
RETRY_MAX_DELAY = 30  # seconds
