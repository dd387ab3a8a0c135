"""Tests for the command line entry point."""

import json
import logging

import pytest

from s3readbench.__main__ import build_parser, main
from s3readbench.logging_setup import LOGGER_NAME


@pytest.fixture(autouse=True)
def _reset_package_logger():
    yield
    logger = logging.getLogger(LOGGER_NAME)
    logger.handlers.clear()
    logger.propagate = True


@pytest.fixture
def fake_factory(monkeypatch, store):
    """Route the CLI's client factory to the in-memory store."""
    for module in ("s3readbench.cli.random_read", "s3readbench.cli.list_keys"):
        monkeypatch.setattr(f"{module}.S3Client", lambda backend=None: store)
    return store


class TestParser:

    def test_defaults(self):
        args = build_parser().parse_args(["random-read", "--bucket", "b"])
        assert args.command == "random-read"
        assert args.iterations == 1000
        assert args.key_file is None
        assert args.seed is None

    def test_no_command_prints_help(self, capsys):
        assert main([]) == 0
        assert "random-read" in capsys.readouterr().out

    def test_rejects_non_positive_iterations(self):
        with pytest.raises(SystemExit):
            main(["random-read", "--bucket", "b", "-n", "0"])


class TestRandomReadCommand:

    def test_runs_and_prints_json(self, fake_factory, key_file, capsys):
        code = main([
            "random-read", "--bucket", "b", "-n", "25",
            "--key-file", str(key_file), "--seed", "3", "--json",
        ])
        assert code == 0
        summary = json.loads(capsys.readouterr().out)
        assert summary["count"] == 25
        assert summary["operation"] == "random-read"
        assert fake_factory.client_closed

    def test_provider_error_exits_1(self, fake_factory, tmp_path):
        code = main([
            "random-read", "--bucket", "b",
            "--key-file", str(tmp_path / "missing.txt"),
        ])
        assert code == 1
        assert fake_factory.opened == []

    def test_missing_bucket_exits_1(self, fake_factory, monkeypatch):
        monkeypatch.setattr("s3readbench.cli.random_read.S3_BUCKET", "")
        assert main(["random-read"]) == 1


class TestListKeysCommand:

    def test_writes_listing_to_key_file(self, fake_factory, tmp_path):
        output = tmp_path / "keys.txt"
        code = main([
            "list-keys", "--bucket", "b", "--prefix", "data/",
            "--output", str(output),
        ])
        assert code == 0
        assert output.read_text(encoding="utf-8").splitlines() == sorted(
            fake_factory.objects
        )

    def test_empty_prefix_exits_1(self, fake_factory, tmp_path):
        output = tmp_path / "keys.txt"
        code = main([
            "list-keys", "--bucket", "b", "--prefix", "nothing/",
            "--output", str(output),
        ])
        assert code == 1
        assert not output.exists()

    def test_unwritable_output_exits_1(self, fake_factory, tmp_path):
        output = tmp_path / "missing-dir" / "keys.txt"
        code = main([
            "list-keys", "--bucket", "b", "--prefix", "data/",
            "--output", str(output),
        ])
        assert code == 1
        assert fake_factory.client_closed
        assert not output.parent.exists()
