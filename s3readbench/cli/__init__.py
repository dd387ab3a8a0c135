"""CLI commands for s3readbench."""

from __future__ import annotations

from s3readbench.cli.list_keys import cmd_list_keys
from s3readbench.cli.random_read import cmd_random_read

__all__ = [
    "cmd_list_keys",
    "cmd_random_read",
]
