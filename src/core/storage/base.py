# -*- coding: utf-8 -*-
"""Blob Backend 공통 인터페이스"""
import enum
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Callable, Dict, Iterator, List, Optional

from src.core.exception import BlobNotFoundError, SignedAccessUnsupportedError

# 스트리밍 청크 크기
DEFAULT_CHUNK_SIZE = 64 * 1024


class StorageKind(str, enum.Enum):
    """저장소 종류"""
    REMOTE = "remote"
    LOCAL = "local"


@dataclass(frozen=True)
class StorageLocator:
    """
    저장 위치 (종류 + 키)

    키는 Blob Backend 밖에서는 해석하지 않는다.
    """
    kind: StorageKind
    key: str


class BlobStream:
    """
    저장소에서 연 바이트 스트림

    with 문 또는 close()로 반드시 해제한다. close()는 여러 번 호출해도 안전하다.
    """

    def __init__(
        self,
        chunks: Iterator[bytes],
        release: Callable[[], None],
        size: Optional[int] = None,
    ):
        self._chunks = chunks
        self._release = release
        self._closed = False
        self.size = size

    def __iter__(self) -> Iterator[bytes]:
        try:
            for chunk in self._chunks:
                if chunk:
                    yield chunk
        finally:
            self.close()

    def read(self) -> bytes:
        """남은 내용을 모두 읽는다 (작은 파일/테스트용)"""
        return b"".join(self)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._release()

    @property
    def closed(self) -> bool:
        return self._closed

    def __enter__(self) -> "BlobStream":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class BlobBackend(ABC):
    """원격 오브젝트 스토리지와 로컬 파일시스템을 같은 방식으로 다루는 인터페이스"""

    kind: StorageKind

    @property
    def supports_signed_access(self) -> bool:
        return False

    @abstractmethod
    def put(
        self,
        data: bytes,
        filename: str,
        content_type: str = "application/octet-stream",
        prefix: str = "uploads",
    ) -> StorageLocator:
        """
        파일 저장

        Args:
            data: 저장할 바이트
            filename: 원본 파일명 (확장자만 사용)
            content_type: 저장소에 기록할 MIME 타입
            prefix: 키 앞에 붙일 경로

        Returns:
            새로 생성된 StorageLocator (기존 키를 덮어쓰지 않음)
        """

    @abstractmethod
    def open_stream(self, locator: StorageLocator, chunk_size: int = DEFAULT_CHUNK_SIZE) -> BlobStream:
        """
        파일 스트림 열기 (요청은 즉시 수행되어 오류가 응답 전에 드러남)

        Raises:
            BlobNotFoundError: 파일 없음
            BackendTransientError: 일시적인 원격 저장소 오류
            BackendFatalError: 그 밖의 저장소 오류
        """

    def get_signed_access(
        self,
        locator: StorageLocator,
        ttl_seconds: int,
        response_headers: Optional[Dict[str, str]] = None,
    ) -> str:
        """서명 URL 생성 (원격 저장소만 지원)"""
        raise SignedAccessUnsupportedError()

    @abstractmethod
    def delete(self, locator: StorageLocator) -> bool:
        """
        파일 삭제 (멱등)

        Returns:
            삭제했으면 True, 원래 없었으면 False
        """

    @abstractmethod
    def exists(self, locator: StorageLocator) -> bool:
        """파일 존재 여부"""

    @abstractmethod
    def list_keys(self, prefix: str = "") -> List[str]:
        """저장된 키 목록"""

    def _check_kind(self, locator: StorageLocator) -> None:
        # 다른 종류의 저장소에 기록된 파일은 이 백엔드에서 찾을 수 없음
        if locator.kind != self.kind:
            raise BlobNotFoundError(
                f"다른 저장소({locator.kind.value})에 저장된 파일입니다."
            )


def generate_key(filename: str, prefix: str = "uploads") -> str:
    """<prefix>/<uuid><확장자> 형식의 고유 키 생성"""
    extension = PurePosixPath(filename or "").suffix.lower()
    unique_name = f"{uuid.uuid4()}{extension}"
    prefix = prefix.strip("/")
    return f"{prefix}/{unique_name}" if prefix else unique_name
