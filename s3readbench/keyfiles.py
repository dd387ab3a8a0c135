"""Key File I/O — newline-delimited object key lists.

A key file holds one object key per line, UTF-8 encoded. Writes go
through a temp file and an atomic rename, so a key file can be
refreshed while other runs are reading it::

    from s3readbench.keyfiles import read_key_file, write_key_file

    write_key_file("keys.txt", ["data/0001", "data/0002"])
    keys = read_key_file("keys.txt")
"""

from __future__ import annotations

import os
import tempfile as _tempfile
from collections.abc import Iterable


def read_key_file(path: str | os.PathLike[str]) -> list[str]:
    """Read all keys from a key file.

    Only the line terminator is removed; any other whitespace is part
    of the key. Empty lines are skipped.

    Raises:
        OSError: If the file cannot be opened or read.
        UnicodeDecodeError: If the file is not valid UTF-8.
    """
    with open(path, encoding="utf-8") as f:
        keys = (line.rstrip("\r\n") for line in f)
        return [key for key in keys if key]


def write_key_file(
    path: str | os.PathLike[str],
    keys: Iterable[str],
) -> int:
    """Atomically replace ``path`` with the given keys.

    Returns:
        Number of keys written.
    """
    filepath = os.fspath(path)
    dir_path = os.path.dirname(os.path.abspath(filepath))
    fd, temp_path = _tempfile.mkstemp(
        dir=dir_path, prefix=".keys-",
    )
    written = 0
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as tf:
            for key in keys:
                tf.write(f"{key}\n")
                written += 1
        os.replace(temp_path, filepath)
    except BaseException:
        try:
            os.unlink(temp_path)
        except OSError:
            pass
        raise
    return written
