#!/usr/bin/env python3
"""Entry point for s3readbench package.

Usage::

    s3readbench random-read --bucket data -n 10000
    s3readbench random-read --bucket data --key-file keys.txt --seed 7
    s3readbench list-keys --bucket data --prefix img/ --output keys.txt
"""

from __future__ import annotations

import argparse
import sys

from s3readbench import __version__
from s3readbench.config import DEFAULT_ITERATIONS


def build_parser() -> argparse.ArgumentParser:
    """Build the command line parser."""
    parser = argparse.ArgumentParser(
        prog="s3readbench",
        description="Object storage read latency benchmark",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Commands:
  random-read  Time GETs of uniformly random keys
  list-keys    Write a bucket listing to a key file

Examples:
  s3readbench random-read --bucket data -n 10000
  s3readbench random-read --bucket data --key-file keys.txt --seed 7
  s3readbench list-keys --bucket data --prefix img/ --output keys.txt
""",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "command",
        nargs="?",
        choices=["random-read", "list-keys"],
        help="Command to execute",
    )
    parser.add_argument(
        "--bucket",
        type=str,
        default=None,
        help="Bucket to read from (default: S3_BUCKET)",
    )
    parser.add_argument(
        "--prefix",
        type=str,
        default=None,
        help="Key prefix to list when no key file is given",
    )
    parser.add_argument(
        "-n",
        "--iterations",
        type=int,
        default=DEFAULT_ITERATIONS,
        help=f"Number of reads (default: {DEFAULT_ITERATIONS})",
    )
    parser.add_argument(
        "--key-file",
        type=str,
        default=None,
        help="Read keys from this file instead of listing the bucket",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Seed for reproducible key selection",
    )
    parser.add_argument(
        "--backend",
        type=str,
        default=None,
        choices=["boto3", "minio"],
        help="S3 client backend (default: S3READBENCH_BACKEND or boto3)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Key file to write (for list-keys)",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the result summary as JSON on stdout",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Parse CLI arguments and dispatch to the appropriate command."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0
    if args.iterations < 1:
        parser.error("--iterations must be positive")

    from s3readbench.cli import cmd_list_keys, cmd_random_read

    commands = {
        "random-read": cmd_random_read,
        "list-keys": cmd_list_keys,
    }

    try:
        return commands[args.command](args) or 0
    except KeyboardInterrupt:
        print("\nInterrupted")
        return 130


if __name__ == "__main__":
    sys.exit(main())
