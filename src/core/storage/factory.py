# -*- coding: utf-8 -*-
"""기동 시 저장소 설정으로부터 Blob Backend 선택"""
import logging
from dataclasses import dataclass
from typing import List

from fastapi import Request

from src.core.config import Settings
from src.core.exception import StorageConfigurationError
from src.core.storage.base import BlobBackend
from src.core.storage.local_backend import LocalBlobBackend
from src.core.storage.minio_backend import MinioBlobBackend

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StorageSettings:
    """Blob Backend 선택에 필요한 설정 (기동 시 한 번 생성)"""
    endpoint: str = "s3.amazonaws.com"
    access_key: str = ""
    secret_key: str = ""
    region: str = ""
    bucket_name: str = ""
    secure: bool = True
    local_root: str = "uploads"

    @classmethod
    def from_settings(cls, settings: Settings) -> "StorageSettings":
        return cls(
            endpoint=settings.S3_ENDPOINT,
            access_key=settings.S3_ACCESS_KEY,
            secret_key=settings.S3_SECRET_KEY,
            region=settings.S3_REGION,
            bucket_name=settings.S3_BUCKET_NAME,
            secure=settings.S3_SECURE,
            local_root=settings.LOCAL_STORAGE_ROOT,
        )

    @property
    def missing_remote_fields(self) -> List[str]:
        """원격 저장소 사용에 필요하지만 비어 있는 설정 이름"""
        required = {
            "S3_ACCESS_KEY": self.access_key,
            "S3_SECRET_KEY": self.secret_key,
            "S3_REGION": self.region,
            "S3_BUCKET_NAME": self.bucket_name,
        }
        return [name for name, value in required.items() if not value]

    @property
    def remote_configured(self) -> bool:
        return not self.missing_remote_fields and bool(self.endpoint)


def build_blob_backend(storage_settings: StorageSettings) -> BlobBackend:
    """
    설정 완성도에 따라 원격/로컬 백엔드를 생성

    Args:
        storage_settings: 저장소 설정

    Returns:
        BlobBackend 인스턴스

    Raises:
        StorageConfigurationError: 원격 설정도 로컬 루트도 없을 때
    """
    if storage_settings.remote_configured:
        return MinioBlobBackend(
            endpoint=storage_settings.endpoint,
            access_key=storage_settings.access_key,
            secret_key=storage_settings.secret_key,
            bucket_name=storage_settings.bucket_name,
            region=storage_settings.region,
            secure=storage_settings.secure,
        )

    missing = storage_settings.missing_remote_fields
    if len(missing) < 4:
        logger.warning(f"원격 저장소 설정 누락: {', '.join(missing)}")

    if not storage_settings.local_root:
        raise StorageConfigurationError(
            "원격 저장소 설정이 없고 LOCAL_STORAGE_ROOT도 비어 있습니다."
        )

    logger.warning("원격 저장소 설정이 없어 로컬 저장소를 사용합니다. (개발 환경 전용)")
    return LocalBlobBackend(storage_settings.local_root)


def get_blob_backend(request: Request) -> BlobBackend:
    """기동 시 생성한 Blob Backend 의존성"""
    return request.app.state.blob_backend
