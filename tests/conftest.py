"""Shared fixtures: an in-memory store client and an injectable logger."""

from __future__ import annotations

import io
import logging
from contextlib import contextmanager

import pytest


class FakeStoreClient:
    """In-memory object store with the backend capability set.

    Args:
        objects: Key to body mapping.
        declared: Optional key to declared-length overrides.
        fail_calls: 0-based ``open_object`` call indices that raise
            a connection reset.
        fail_keys: Keys whose ``open_object`` always fails.
    """

    def __init__(
        self,
        objects: dict[str, bytes],
        *,
        declared: dict[str, int] | None = None,
        fail_calls: set[int] | None = None,
        fail_keys: set[str] | None = None,
    ) -> None:
        self.objects = objects
        self.declared = declared or {}
        self.fail_calls = fail_calls or set()
        self.fail_keys = fail_keys or set()
        self.opened: list[str] = []
        self.calls: list[str] = []
        self.closed = 0
        self.list_calls = 0
        self.client_closed = False

    @contextmanager
    def open_object(self, bucket, key):
        call = len(self.opened)
        self.opened.append(key)
        self.calls.append("open")
        if call in self.fail_calls or key in self.fail_keys:
            raise ConnectionResetError("connection reset by peer")
        stream = io.BytesIO(self.objects[key])
        try:
            yield stream
        finally:
            self.closed += 1

    def head_object(self, bucket, key):
        self.calls.append("head")
        return {
            "ContentLength": self.declared.get(key, len(self.objects[key])),
        }

    def list_objects(self, bucket, prefix="", max_keys=1000, continuation_token=None):
        self.list_calls += 1
        keys = sorted(k for k in self.objects if k.startswith(prefix))
        start = int(continuation_token) if continuation_token else 0
        page = keys[start:start + max_keys]
        end = start + len(page)
        response = {
            "Contents": [{"Key": k, "Size": len(self.objects[k])} for k in page],
            "IsTruncated": end < len(keys),
            "KeyCount": len(page),
        }
        if end < len(keys):
            response["NextContinuationToken"] = str(end)
        return response

    def close(self):
        self.client_closed = True


@pytest.fixture
def make_client():
    return FakeStoreClient


@pytest.fixture
def store():
    """Five small objects under ``data/``."""
    return FakeStoreClient(
        {f"data/{i:04d}": b"x" * (100 + i) for i in range(5)}
    )


@pytest.fixture
def key_file(tmp_path):
    path = tmp_path / "keys.txt"
    path.write_text(
        "".join(f"data/{i:04d}\n" for i in range(5)), encoding="utf-8",
    )
    return path


@pytest.fixture
def bench_logger(caplog):
    """Propagating logger whose records land in ``caplog``."""
    caplog.set_level(logging.DEBUG, logger="tests.bench")
    return logging.getLogger("tests.bench")
