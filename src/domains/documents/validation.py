# -*- coding: utf-8 -*-
"""업로드 파일 검증 (저장소에 쓰기 전에 수행)"""
from dataclasses import dataclass
from typing import FrozenSet, Iterable

from fastapi import UploadFile

from src.core.config import Settings
from src.core.exception import ValidationException
from src.domains.documents.media_types import CONTENT_TYPES, DEFAULT_CONTENT_TYPE, get_extension


@dataclass(frozen=True)
class UploadLimits:
    """업로드 크기/형식 제한"""
    max_size_bytes: int
    allowed_extensions: FrozenSet[str]

    @classmethod
    def create(cls, max_size_bytes: int, allowed_extensions: Iterable[str]) -> "UploadLimits":
        return cls(
            max_size_bytes=max_size_bytes,
            allowed_extensions=frozenset(ext.lower().lstrip(".") for ext in allowed_extensions),
        )

    @classmethod
    def for_documents(cls, settings: Settings) -> "UploadLimits":
        return cls.create(settings.MAX_UPLOAD_SIZE_BYTES, settings.UPLOAD_EXTENSIONS)

    @classmethod
    def for_avatars(cls, settings: Settings) -> "UploadLimits":
        return cls.create(settings.MAX_UPLOAD_SIZE_BYTES, settings.AVATAR_UPLOAD_EXTENSIONS)

    @property
    def allowed_mime_types(self) -> FrozenSet[str]:
        types = {CONTENT_TYPES[ext] for ext in self.allowed_extensions if ext in CONTENT_TYPES}
        if "image/jpeg" in types:
            types.add("image/pjpeg")
        # 일부 클라이언트는 Office 문서를 octet-stream으로 전송
        types.add(DEFAULT_CONTENT_TYPE)
        return frozenset(types)


async def read_validated_upload(file: UploadFile, limits: UploadLimits) -> bytes:
    """
    파일 형식과 크기를 검증하고 내용을 읽는다

    Args:
        file: 업로드된 파일
        limits: 업로드 제한

    Returns:
        파일 내용

    Raises:
        ValidationException: 파일 없음, 허용되지 않은 형식, 용량 초과, 빈 파일
    """
    if file is None or not file.filename:
        raise ValidationException("업로드된 파일이 없습니다.")

    extension = get_extension(file.filename)
    if extension not in limits.allowed_extensions:
        allowed = ", ".join(sorted(limits.allowed_extensions))
        raise ValidationException(f"지원하지 않는 파일 형식입니다: {file.filename}. 허용 형식: {allowed}")

    content_type = (file.content_type or DEFAULT_CONTENT_TYPE).split(";")[0].strip().lower()
    if content_type not in limits.allowed_mime_types:
        raise ValidationException(f"지원하지 않는 파일 형식입니다: {content_type}")

    # 제한보다 1바이트 더 읽어서 초과 여부 판단 (대용량 파일을 끝까지 읽지 않음)
    data = await file.read(limits.max_size_bytes + 1)
    if len(data) > limits.max_size_bytes:
        max_mb = limits.max_size_bytes / (1024 * 1024)
        raise ValidationException(f"파일 크기는 {max_mb:g}MB를 초과할 수 없습니다.")
    if not data:
        raise ValidationException("빈 파일은 업로드할 수 없습니다.")

    return data
