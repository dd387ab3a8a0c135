from __future__ import annotations

# s3readbench - Object storage read latency benchmark
"""
Usage:
    python -m s3readbench random-read --bucket data -n 10000
    python -m s3readbench list-keys --bucket data --prefix img/ --output keys.txt
"""

__version__ = "1.0.0"
