# -*- coding: utf-8 -*-
"""로컬 파일시스템 Blob Backend"""
import logging
import os
import tempfile
from pathlib import Path
from typing import List

from src.core.exception import BackendFatalError, BlobNotFoundError
from src.core.storage.base import (
    DEFAULT_CHUNK_SIZE,
    BlobBackend,
    BlobStream,
    StorageKind,
    StorageLocator,
    generate_key,
)

logger = logging.getLogger(__name__)


class LocalBlobBackend(BlobBackend):
    """관리 루트 디렉터리 아래에 파일을 저장하는 백엔드 (개발 환경용)"""

    kind = StorageKind.LOCAL

    def __init__(self, root: str):
        """
        LocalBlobBackend 초기화

        Args:
            root: 저장 루트 디렉터리 (없으면 생성)
        """
        self.root = Path(root).resolve()
        try:
            self.root.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise BackendFatalError(f"로컬 저장소 디렉터리를 만들 수 없습니다: {self.root}") from e
        logger.info(f"로컬 저장소 사용: {self.root}")

    def _resolve(self, key: str) -> Path:
        path = (self.root / key).resolve()
        # 루트 밖을 가리키는 키는 거부
        if path != self.root and self.root not in path.parents:
            raise BackendFatalError(f"저장소 루트를 벗어나는 경로입니다: {key}")
        return path

    def put(
        self,
        data: bytes,
        filename: str,
        content_type: str = "application/octet-stream",
        prefix: str = "uploads",
    ) -> StorageLocator:
        key = generate_key(filename, prefix)
        path = self._resolve(key)

        tmp_path = None
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            # 임시 파일에 모두 기록하고 닫은 뒤에 최종 경로로 이동
            fd, tmp_path = tempfile.mkstemp(dir=path.parent, prefix=".tmp-")
            with os.fdopen(fd, "wb") as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, path)
            tmp_path = None
        except OSError as e:
            logger.error(f"로컬 파일 저장 실패: {key}, 오류: {e}")
            raise BackendFatalError("파일을 저장하는 중 오류가 발생했습니다.") from e
        finally:
            if tmp_path and os.path.exists(tmp_path):
                os.remove(tmp_path)

        logger.info(f"로컬 파일 저장 성공: {key} ({len(data)} bytes)")
        return StorageLocator(kind=self.kind, key=key)

    def open_stream(self, locator: StorageLocator, chunk_size: int = DEFAULT_CHUNK_SIZE) -> BlobStream:
        self._check_kind(locator)
        path = self._resolve(locator.key)

        try:
            f = open(path, "rb")
        except (FileNotFoundError, IsADirectoryError) as e:
            raise BlobNotFoundError() from e
        except OSError as e:
            logger.error(f"로컬 파일 열기 실패: {locator.key}, 오류: {e}")
            raise BackendFatalError() from e

        size = os.fstat(f.fileno()).st_size
        chunks = iter(lambda: f.read(chunk_size), b"")
        return BlobStream(chunks, release=f.close, size=size)

    def delete(self, locator: StorageLocator) -> bool:
        self._check_kind(locator)
        path = self._resolve(locator.key)

        try:
            path.unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            logger.error(f"로컬 파일 삭제 실패: {locator.key}, 오류: {e}")
            raise BackendFatalError("파일을 삭제하는 중 오류가 발생했습니다.") from e

        logger.info(f"로컬 파일 삭제 성공: {locator.key}")
        return True

    def exists(self, locator: StorageLocator) -> bool:
        if locator.kind != self.kind:
            return False
        return self._resolve(locator.key).is_file()

    def list_keys(self, prefix: str = "") -> List[str]:
        keys = [
            path.relative_to(self.root).as_posix()
            for path in self.root.rglob("*")
            if path.is_file() and not path.name.startswith(".tmp-")
        ]
        return sorted(key for key in keys if key.startswith(prefix))
