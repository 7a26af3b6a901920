# -*- coding: utf-8 -*-
"""S3 호환 오브젝트 스토리지 Blob Backend (MinIO SDK 사용)"""
import io
import logging
from datetime import timedelta
from typing import Dict, List, Optional

from minio import Minio
from minio.error import InvalidResponseError, MinioException, S3Error, ServerError
from urllib3.exceptions import HTTPError

from src.core.exception import (
    BackendFatalError,
    BackendTransientError,
    BlobNotFoundError,
    BlobStorageError,
)
from src.core.storage.base import (
    DEFAULT_CHUNK_SIZE,
    BlobBackend,
    BlobStream,
    StorageKind,
    StorageLocator,
    generate_key,
)

logger = logging.getLogger(__name__)

# 파일 없음으로 취급하는 S3 오류 코드
NOT_FOUND_CODES = {"NoSuchKey", "NoSuchObject", "NoSuchVersion"}

# 재시도하면 성공할 수 있는 S3 오류 코드 (요청 제한, 일시 장애)
TRANSIENT_CODES = {
    "SlowDown",
    "RequestTimeout",
    "ServiceUnavailable",
    "InternalError",
    "TooManyRequests",
    "RequestTimeTooSkewed",
}


class MinioBlobBackend(BlobBackend):
    """원격 오브젝트 스토리지 백엔드"""

    kind = StorageKind.REMOTE

    def __init__(
        self,
        endpoint: str,
        access_key: str,
        secret_key: str,
        bucket_name: str,
        region: Optional[str] = None,
        secure: bool = True,
        client: Optional[Minio] = None,
    ):
        """
        MinioBlobBackend 초기화

        Args:
            endpoint: S3 엔드포인트 (예: s3.amazonaws.com, localhost:9000)
            access_key: 액세스 키
            secret_key: 시크릿 키
            bucket_name: 버킷 이름
            region: 리전
            secure: HTTPS 사용 여부
            client: 미리 생성한 Minio 클라이언트 (테스트용)
        """
        self.bucket_name = bucket_name
        self.client = client or Minio(
            endpoint,
            access_key=access_key,
            secret_key=secret_key,
            region=region or None,
            secure=secure,
        )
        logger.info(f"원격 저장소 사용: endpoint={endpoint}, bucket={bucket_name}, region={region}")

    @property
    def supports_signed_access(self) -> bool:
        return True

    def _translate(self, error: Exception, key: str) -> BlobStorageError:
        """SDK 예외를 저장소 예외로 변환"""
        if isinstance(error, S3Error):
            if error.code in NOT_FOUND_CODES:
                return BlobNotFoundError()
            if error.code in TRANSIENT_CODES:
                logger.warning(f"원격 저장소 일시 오류: key={key}, code={error.code}")
                return BackendTransientError()
            logger.error(f"원격 저장소 오류: key={key}, code={error.code}, message={error.message}")
            return BackendFatalError()
        if isinstance(error, InvalidResponseError):
            # XML이 아닌 오류 응답 (프록시/게이트웨이의 HTML 429, 5xx 페이지 등)
            status_code = _response_status(error)
            if status_code is not None and (status_code == 429 or status_code >= 500):
                logger.warning(f"원격 저장소 비정상 응답: key={key}, status={status_code}")
                return BackendTransientError()
            logger.error(f"원격 저장소 비정상 응답: key={key}, 오류: {error}")
            return BackendFatalError()
        if isinstance(error, (ServerError, HTTPError)):
            logger.warning(f"원격 저장소 연결 오류: key={key}, 오류: {error}")
            return BackendTransientError()
        logger.error(f"원격 저장소 알 수 없는 오류: key={key}, 오류: {error}", exc_info=True)
        return BackendFatalError()

    def put(
        self,
        data: bytes,
        filename: str,
        content_type: str = "application/octet-stream",
        prefix: str = "uploads",
    ) -> StorageLocator:
        key = generate_key(filename, prefix)

        try:
            self.client.put_object(
                bucket_name=self.bucket_name,
                object_name=key,
                data=io.BytesIO(data),
                length=len(data),
                content_type=content_type,
            )
        except (MinioException, HTTPError) as e:
            raise self._translate(e, key) from e

        logger.info(f"원격 저장소 업로드 성공: {key} ({len(data)} bytes)")
        return StorageLocator(kind=self.kind, key=key)

    def open_stream(self, locator: StorageLocator, chunk_size: int = DEFAULT_CHUNK_SIZE) -> BlobStream:
        self._check_kind(locator)

        try:
            response = self.client.get_object(
                bucket_name=self.bucket_name,
                object_name=locator.key,
            )
        except (MinioException, HTTPError) as e:
            raise self._translate(e, locator.key) from e

        def release() -> None:
            response.close()
            response.release_conn()

        def chunks():
            try:
                yield from response.stream(chunk_size)
            except HTTPError as e:
                # 응답 헤더가 이미 나간 뒤라 대체 경로 없이 연결만 끊김
                logger.error(f"원격 저장소 스트리밍 중단: key={locator.key}, 오류: {e}")
                raise BackendTransientError() from e

        length = response.headers.get("Content-Length")
        return BlobStream(chunks(), release=release, size=int(length) if length else None)

    def get_signed_access(
        self,
        locator: StorageLocator,
        ttl_seconds: int,
        response_headers: Optional[Dict[str, str]] = None,
    ) -> str:
        self._check_kind(locator)

        try:
            url = self.client.presigned_get_object(
                bucket_name=self.bucket_name,
                object_name=locator.key,
                expires=timedelta(seconds=ttl_seconds),
                response_headers=response_headers,
            )
        except (MinioException, HTTPError) as e:
            raise self._translate(e, locator.key) from e

        logger.info(f"서명 URL 생성: key={locator.key}, ttl={ttl_seconds}s")
        return url

    def delete(self, locator: StorageLocator) -> bool:
        self._check_kind(locator)

        # S3 DeleteObject는 없는 키에도 성공을 반환하므로 먼저 존재 여부를 확인
        if not self.exists(locator):
            return False

        try:
            self.client.remove_object(
                bucket_name=self.bucket_name,
                object_name=locator.key,
            )
        except (MinioException, HTTPError) as e:
            raise self._translate(e, locator.key) from e

        logger.info(f"원격 저장소 파일 삭제 성공: {locator.key}")
        return True

    def exists(self, locator: StorageLocator) -> bool:
        if locator.kind != self.kind:
            return False

        try:
            self.client.stat_object(
                bucket_name=self.bucket_name,
                object_name=locator.key,
            )
        except S3Error as e:
            if e.code in NOT_FOUND_CODES:
                return False
            raise self._translate(e, locator.key) from e
        except (MinioException, HTTPError) as e:
            raise self._translate(e, locator.key) from e
        return True

    def list_keys(self, prefix: str = "") -> List[str]:
        try:
            objects = self.client.list_objects(
                bucket_name=self.bucket_name,
                prefix=prefix or None,
                recursive=True,
            )
            return sorted(obj.object_name for obj in objects)
        except (MinioException, HTTPError) as e:
            raise self._translate(e, prefix) from e


def _response_status(error: InvalidResponseError) -> Optional[int]:
    # SDK가 상태 코드를 공개 속성으로 노출하지 않음
    code = getattr(error, "_code", None)
    try:
        return int(code)
    except (TypeError, ValueError):
        return None
