"""Tests for the boto3 backend and client factory, using botocore's Stubber."""

import io

import boto3
import pytest
from botocore.response import StreamingBody
from botocore.stub import Stubber

from s3readbench.backends import S3ClientBoto3
from s3readbench.operations.random_read import RandomRead, drain
from s3readbench.s3_client import S3Client, get_client_backend_name


@pytest.fixture
def boto_backend():
    backend = S3ClientBoto3(
        endpoints=["http://localhost:9000"],
        access_key_id="test",
        secret_access_key="test",
        region="us-east-1",
    )
    stubber = Stubber(backend.clients[0])
    with stubber:
        yield backend, stubber
    backend.close()


def _add_get(stubber, key, data):
    stubber.add_response(
        "get_object",
        {
            "Body": StreamingBody(io.BytesIO(data), len(data)),
            "ContentLength": len(data),
        },
        {"Bucket": "bucket", "Key": key},
    )


def _add_head(stubber, key, length):
    stubber.add_response(
        "head_object",
        {"ContentLength": length},
        {"Bucket": "bucket", "Key": key},
    )


class TestS3ClientBoto3:

    def test_open_and_head(self, boto_backend):
        backend, stubber = boto_backend
        _add_get(stubber, "k", b"hello world")
        _add_head(stubber, "k", 11)

        with backend.open_object("bucket", "k") as stream:
            length = backend.head_object("bucket", "k")["ContentLength"]
            assert drain(stream, bytearray(4)) == 11
        assert length == 11
        stubber.assert_no_pending_responses()

    def test_list_objects_passes_pagination(self, boto_backend):
        backend, stubber = boto_backend
        stubber.add_response(
            "list_objects_v2",
            {"Contents": [{"Key": "p/a"}], "IsTruncated": False, "KeyCount": 1},
            {
                "Bucket": "bucket",
                "Prefix": "p/",
                "MaxKeys": 10,
                "ContinuationToken": "tok",
            },
        )
        response = backend.list_objects("bucket", "p/", 10, "tok")
        assert response["Contents"][0]["Key"] == "p/a"

    def test_random_read_end_to_end(self, boto_backend, tmp_path, bench_logger):
        backend, stubber = boto_backend
        for _ in range(3):
            _add_get(stubber, "only", b"0123456789")
            _add_head(stubber, "only", 10)
        key_file = tmp_path / "keys.txt"
        key_file.write_text("only\n", encoding="utf-8")

        op = RandomRead(backend, "bucket", None, 3, str(key_file), logger=bench_logger)
        result = op.call()

        assert result.count == 3
        assert op.bytes_read == 30
        assert op.mismatches == 0
        stubber.assert_no_pending_responses()

    def test_client_error_is_a_skipped_iteration(self, boto_backend, tmp_path, bench_logger):
        backend, stubber = boto_backend
        stubber.add_client_error(
            "get_object",
            service_error_code="InternalError",
            http_status_code=500,
        )
        _add_get(stubber, "only", b"abc")
        _add_head(stubber, "only", 3)
        key_file = tmp_path / "keys.txt"
        key_file.write_text("only\n", encoding="utf-8")

        op = RandomRead(backend, "bucket", None, 2, str(key_file), logger=bench_logger)
        result = op.call()

        assert result.count == 1
        assert op.failures == 1

    def test_requires_endpoints(self):
        with pytest.raises(RuntimeError):
            S3ClientBoto3(
                endpoints=[],
                access_key_id="a",
                secret_access_key="b",
                region="us-east-1",
            )


class TestEndpointBinding:

    ENDPOINTS = ["http://a:9000", "http://b:9000"]

    def _backend(self):
        return S3ClientBoto3(
            endpoints=self.ENDPOINTS,
            access_key_id="test",
            secret_access_key="test",
            region="us-east-1",
        )

    def test_no_client_is_built_inside_a_timed_fetch(
        self, monkeypatch, tmp_path, bench_logger,
    ):
        built = []
        timing = {"active": False}
        real_client = boto3.client
        real_fetch = RandomRead._timed_fetch

        def spy_client(*args, **kwargs):
            built.append((kwargs.get("endpoint_url"), timing["active"]))
            return real_client(*args, **kwargs)

        def flagged_fetch(self, key, buffer):
            timing["active"] = True
            try:
                return real_fetch(self, key, buffer)
            finally:
                timing["active"] = False

        monkeypatch.setattr(boto3, "client", spy_client)
        monkeypatch.setattr(RandomRead, "_timed_fetch", flagged_fetch)

        backend = self._backend()
        stubbers = [Stubber(client) for client in backend.clients]
        for stubber in stubbers:
            _add_get(stubber, "only", b"abcd")
            _add_head(stubber, "only", 4)
            stubber.activate()
        key_file = tmp_path / "keys.txt"
        key_file.write_text("only\n", encoding="utf-8")

        op = RandomRead(backend, "bucket", None, 2, str(key_file), logger=bench_logger)
        result = op.call()

        assert result.count == 2
        assert op.failures == 0
        assert built == [(endpoint, False) for endpoint in self.ENDPOINTS]
        for stubber in stubbers:
            stubber.assert_no_pending_responses()
            stubber.deactivate()

    def test_head_goes_to_the_endpoint_of_the_open_stream(self):
        backend = self._backend()
        first, second = (Stubber(client) for client in backend.clients)
        _add_get(first, "k", b"xy")
        _add_head(first, "k", 2)
        _add_get(second, "k", b"xy")
        _add_head(second, "k", 2)

        with first, second:
            for _ in range(2):
                with backend.open_object("bucket", "k") as stream:
                    backend.head_object("bucket", "k")
                    stream.read()
            first.assert_no_pending_responses()
            second.assert_no_pending_responses()
        backend.close()


class TestClientFactory:

    def test_unknown_backend(self):
        with pytest.raises(ValueError, match="Unknown S3 backend"):
            S3Client(backend="ftp")

    def test_backend_name_resolution(self):
        assert get_client_backend_name("boto3") == "S3ClientBoto3"
        assert get_client_backend_name("MINIO") == "S3ClientMinio"

    def test_factory_builds_boto3_client(self):
        client = S3Client(backend="boto3", endpoints=["http://localhost:9000"])
        assert isinstance(client, S3ClientBoto3)
        assert client.endpoints == ["http://localhost:9000"]
