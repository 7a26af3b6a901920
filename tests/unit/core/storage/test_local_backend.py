# -*- coding: utf-8 -*-
"""LocalBlobBackend 단위 테스트 (tmp_path 사용)"""
import pytest

from src.core.exception import BackendFatalError, BlobNotFoundError, SignedAccessUnsupportedError
from src.core.storage import LocalBlobBackend, StorageKind, StorageLocator


class TestLocalBlobBackendPut:
    """파일 저장 테스트"""

    def test_put_then_open_returns_same_bytes(self, local_backend):
        """저장한 내용을 그대로 읽을 수 있음"""
        locator = local_backend.put(b"hello world", "report.pdf", "application/pdf", "documents/1")

        assert locator.kind == StorageKind.LOCAL
        assert locator.key.startswith("documents/1/")
        assert locator.key.endswith(".pdf")

        with local_backend.open_stream(locator) as stream:
            assert stream.size == 11
            assert stream.read() == b"hello world"

    def test_put_never_reuses_key(self, local_backend):
        """같은 파일명으로 두 번 저장해도 키가 다름"""
        first = local_backend.put(b"a", "same.txt")
        second = local_backend.put(b"b", "same.txt")

        assert first.key != second.key
        assert len(local_backend.list_keys()) == 2

    def test_put_does_not_leave_temp_files(self, local_backend):
        """임시 파일은 목록에 남지 않음"""
        local_backend.put(b"data", "a.txt", prefix="x")

        keys = local_backend.list_keys()
        assert len(keys) == 1
        assert not any(".tmp-" in key for key in keys)

    def test_original_filename_is_not_used_as_path(self, local_backend):
        """원본 파일명의 경로 구성요소는 키에 들어가지 않음"""
        locator = local_backend.put(b"data", "../../etc/passwd.txt", prefix="documents/1")

        assert ".." not in locator.key
        assert locator.key.startswith("documents/1/")


class TestLocalBlobBackendOpen:
    """파일 열기 테스트"""

    def test_open_missing_key_raises_not_found(self, local_backend):
        with pytest.raises(BlobNotFoundError):
            local_backend.open_stream(StorageLocator(StorageKind.LOCAL, "documents/1/missing.pdf"))

    def test_open_remote_locator_raises_not_found(self, local_backend):
        """원격 저장소에 기록된 파일은 로컬에서 찾을 수 없음"""
        with pytest.raises(BlobNotFoundError):
            local_backend.open_stream(StorageLocator(StorageKind.REMOTE, "documents/1/a.pdf"))

    def test_key_outside_root_is_rejected(self, local_backend):
        with pytest.raises(BackendFatalError):
            local_backend.open_stream(StorageLocator(StorageKind.LOCAL, "../outside.txt"))

    def test_stream_in_chunks_and_close_releases_file(self, local_backend):
        """청크 단위로 읽고, 다 읽으면 스트림이 닫힘"""
        data = b"x" * 10
        locator = local_backend.put(data, "big.txt")

        stream = local_backend.open_stream(locator, chunk_size=4)
        chunks = list(stream)

        assert chunks == [b"xxxx", b"xxxx", b"xx"]
        assert stream.closed

    def test_close_is_idempotent(self, local_backend):
        locator = local_backend.put(b"abc", "a.txt")
        stream = local_backend.open_stream(locator)

        stream.close()
        stream.close()

        assert stream.closed


class TestLocalBlobBackendDelete:
    """파일 삭제 테스트"""

    def test_delete_existing_then_missing(self, local_backend):
        """두 번째 삭제는 False (오류 아님)"""
        locator = local_backend.put(b"abc", "a.txt")

        assert local_backend.delete(locator) is True
        assert local_backend.exists(locator) is False
        assert local_backend.delete(locator) is False

    def test_signed_access_not_supported(self, local_backend):
        locator = local_backend.put(b"abc", "a.txt")

        assert local_backend.supports_signed_access is False
        with pytest.raises(SignedAccessUnsupportedError):
            local_backend.get_signed_access(locator, 300)

    def test_list_keys_with_prefix(self, local_backend):
        local_backend.put(b"1", "a.txt", prefix="documents/1")
        local_backend.put(b"2", "b.txt", prefix="documents/2")

        keys = local_backend.list_keys("documents/1/")
        assert len(keys) == 1
        assert keys[0].startswith("documents/1/")


def test_root_is_created(tmp_path):
    root = tmp_path / "nested" / "root"

    LocalBlobBackend(str(root))

    assert root.is_dir()
