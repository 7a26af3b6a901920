# -*- coding: utf-8 -*-
"""MinioBlobBackend 단위 테스트 (Minio 클라이언트 Mock 사용 - 실제 원격 저장소 사용 안함)"""
import pytest
from datetime import timedelta
from unittest.mock import MagicMock

from minio.error import InvalidResponseError, S3Error, ServerError
from urllib3.exceptions import ProtocolError

from src.core.exception import (
    BackendFatalError,
    BackendTransientError,
    BlobNotFoundError,
)
from src.core.storage import StorageKind, StorageLocator


def make_s3_error(code: str) -> S3Error:
    return S3Error(
        code=code,
        message=f"{code} 테스트",
        resource="/bucket/key",
        request_id="req-1",
        host_id="host-1",
        response=MagicMock(),
    )


@pytest.fixture
def backend(remote_backend):
    return remote_backend


@pytest.fixture
def remote_locator():
    return StorageLocator(StorageKind.REMOTE, "documents/1/abc.pdf")


class TestMinioPut:

    def test_put_uploads_with_generated_key(self, backend, mock_minio_client):
        locator = backend.put(b"%PDF", "transcript.pdf", "application/pdf", "documents/7")

        assert locator.kind == StorageKind.REMOTE
        assert locator.key.startswith("documents/7/")
        kwargs = mock_minio_client.put_object.call_args.kwargs
        assert kwargs["bucket_name"] == "portal-docs"
        assert kwargs["object_name"] == locator.key
        assert kwargs["length"] == 4
        assert kwargs["content_type"] == "application/pdf"

    def test_put_transient_error(self, backend, mock_minio_client):
        mock_minio_client.put_object.side_effect = make_s3_error("SlowDown")

        with pytest.raises(BackendTransientError):
            backend.put(b"data", "a.pdf")


class TestMinioOpenStream:

    def test_open_stream_reads_chunks_and_releases(self, backend, mock_minio_client, remote_locator):
        response = MagicMock()
        response.headers = {"Content-Length": "6"}
        response.stream.return_value = iter([b"abc", b"def"])
        mock_minio_client.get_object.return_value = response

        stream = backend.open_stream(remote_locator)

        assert stream.size == 6
        assert stream.read() == b"abcdef"
        response.close.assert_called_once()
        response.release_conn.assert_called_once()

    def test_open_missing_object(self, backend, mock_minio_client, remote_locator):
        mock_minio_client.get_object.side_effect = make_s3_error("NoSuchKey")

        with pytest.raises(BlobNotFoundError):
            backend.open_stream(remote_locator)

    def test_open_connection_error_is_transient(self, backend, mock_minio_client, remote_locator):
        mock_minio_client.get_object.side_effect = ProtocolError("connection reset")

        with pytest.raises(BackendTransientError):
            backend.open_stream(remote_locator)

    def test_open_server_error_is_transient(self, backend, mock_minio_client, remote_locator):
        mock_minio_client.get_object.side_effect = ServerError("busy", 503)

        with pytest.raises(BackendTransientError):
            backend.open_stream(remote_locator)

    def test_open_html_throttling_page_is_transient(self, backend, mock_minio_client, remote_locator):
        """게이트웨이가 XML이 아닌 429 페이지를 돌려줘도 일시 오류로 처리"""
        mock_minio_client.get_object.side_effect = InvalidResponseError(429, "text/html", "Too Many Requests")

        with pytest.raises(BackendTransientError):
            backend.open_stream(remote_locator)

    def test_open_html_forbidden_page_is_fatal(self, backend, mock_minio_client, remote_locator):
        mock_minio_client.get_object.side_effect = InvalidResponseError(403, "text/html", "Forbidden")

        with pytest.raises(BackendFatalError):
            backend.open_stream(remote_locator)

    def test_open_access_denied_is_fatal(self, backend, mock_minio_client, remote_locator):
        mock_minio_client.get_object.side_effect = make_s3_error("AccessDenied")

        with pytest.raises(BackendFatalError):
            backend.open_stream(remote_locator)

    def test_open_local_locator_not_found(self, backend, mock_minio_client):
        with pytest.raises(BlobNotFoundError):
            backend.open_stream(StorageLocator(StorageKind.LOCAL, "documents/1/abc.pdf"))
        mock_minio_client.get_object.assert_not_called()


class TestMinioSignedAccess:

    def test_signed_url_uses_ttl_and_response_headers(self, backend, mock_minio_client, remote_locator):
        url = backend.get_signed_access(
            remote_locator,
            300,
            {"response-content-type": "application/pdf"},
        )

        assert url.startswith("https://")
        kwargs = mock_minio_client.presigned_get_object.call_args.kwargs
        assert kwargs["expires"] == timedelta(seconds=300)
        assert kwargs["response_headers"] == {"response-content-type": "application/pdf"}
        assert backend.supports_signed_access is True


class TestMinioDelete:

    def test_delete_existing(self, backend, mock_minio_client, remote_locator):
        assert backend.delete(remote_locator) is True
        mock_minio_client.remove_object.assert_called_once()

    def test_delete_missing_returns_false(self, backend, mock_minio_client, remote_locator):
        mock_minio_client.stat_object.side_effect = make_s3_error("NoSuchKey")

        assert backend.delete(remote_locator) is False
        mock_minio_client.remove_object.assert_not_called()

    def test_delete_html_throttling_page_is_transient(self, backend, mock_minio_client, remote_locator):
        mock_minio_client.stat_object.side_effect = InvalidResponseError(429, "text/html", "Too Many Requests")

        with pytest.raises(BackendTransientError):
            backend.delete(remote_locator)
        mock_minio_client.remove_object.assert_not_called()

    def test_remove_server_error_is_transient(self, backend, mock_minio_client, remote_locator):
        mock_minio_client.remove_object.side_effect = InvalidResponseError(503, "text/html", "Service Unavailable")

        with pytest.raises(BackendTransientError):
            backend.delete(remote_locator)

    def test_list_keys(self, backend, mock_minio_client):
        first, second = MagicMock(), MagicMock()
        first.object_name = "documents/1/b.pdf"
        second.object_name = "documents/1/a.pdf"
        mock_minio_client.list_objects.return_value = [first, second]

        assert backend.list_keys("documents/1/") == ["documents/1/a.pdf", "documents/1/b.pdf"]
