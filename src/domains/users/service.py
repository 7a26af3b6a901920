# -*- coding: utf-8 -*-
"""User 도메인 Service (아바타 관리)"""
from typing import Optional
from fastapi import UploadFile
from starlette.concurrency import run_in_threadpool
from starlette.responses import Response
from src.core.config import settings
from src.core.exception import (
    BlobNotFoundError,
    BlobStorageError,
    ForbiddenException,
    MetadataPersistenceException,
    ProfileNotFoundException,
    UserNotFoundException,
)
from src.core.storage import BlobBackend, StorageLocator
from src.domains.access.context import RequestContext, Role
from src.domains.documents.delivery import DEFAULT_SIGNED_URL_TTL, Disposition, stream_blob_response
from src.domains.documents.media_types import DEFAULT_CONTENT_TYPE, build_content_disposition, get_extension, resolve_content_type
from src.domains.documents.validation import UploadLimits, read_validated_upload
from src.domains.users.models import User
from src.domains.users.repository import UserRepository
from src.domains.students.repository import StudentRepository
import logging

logger = logging.getLogger(__name__)


class UserService:
    """User 비즈니스 로직 처리 계층"""

    def __init__(
        self,
        user_repository: UserRepository,
        blob_backend: BlobBackend,
        upload_limits: Optional[UploadLimits] = None,
        signed_url_ttl: int = DEFAULT_SIGNED_URL_TTL,
        student_repository: Optional[StudentRepository] = None,
    ):
        """
        UserService 초기화

        Args:
            user_repository: UserRepository 인스턴스
            blob_backend: 기동 시 선택된 Blob Backend
            upload_limits: 아바타 업로드 제한 (이미지 형식만)
            signed_url_ttl: 서명 URL 유효 시간 (초)
            student_repository: 학생 ID로 아바타를 찾을 때 사용하는 StudentRepository
        """
        self.user_repository = user_repository
        self.blob_backend = blob_backend
        self.upload_limits = upload_limits or UploadLimits.for_avatars(settings)
        self.signed_url_ttl = signed_url_ttl
        self.student_repository = student_repository

    async def get_user(self, user_id: int) -> User:
        user = await self.user_repository.find_by_user_id(user_id)
        if not user:
            raise UserNotFoundException()
        return user

    async def replace_avatar(self, ctx: RequestContext, user_id: int, file: UploadFile) -> User:
        """
        아바타 교체 (새 파일 저장 → 위치 저장 → 이전 파일 삭제)

        Args:
            ctx: 요청 컨텍스트
            user_id: 대상 사용자 ID
            file: 업로드된 이미지 파일

        Returns:
            갱신된 User 객체

        Raises:
            ForbiddenException: 본인이 아니고 관리자도 아닌 경우
            UserNotFoundException: 사용자 없음
            ValidationException: 허용되지 않은 형식, 용량 초과
            MetadataPersistenceException: 위치 저장 실패 (이전 아바타 유지)
        """
        if ctx.role != Role.ADMIN and ctx.user_id != user_id:
            raise ForbiddenException("본인의 아바타만 변경할 수 있습니다.")

        user = await self.get_user(user_id)
        file_data = await read_validated_upload(file, self.upload_limits)
        previous = user.avatar_locator

        locator = await run_in_threadpool(
            self.blob_backend.put,
            file_data,
            file.filename,
            file.content_type or DEFAULT_CONTENT_TYPE,
            f"avatars/{user_id}",
        )

        try:
            user = await self.user_repository.update_avatar(user, locator)
        except Exception as e:
            logger.error(f"아바타 위치 저장 실패: user_id={user_id}, 오류: {e}", exc_info=True)
            try:
                await self.user_repository.rollback()
            except Exception as rollback_error:
                logger.error(f"DB 롤백 실패: {rollback_error}")
            await self._discard_blob(locator)
            raise MetadataPersistenceException("아바타 정보를 저장하는 중 오류가 발생했습니다.") from e

        if previous is not None and previous != locator:
            await self._discard_blob(previous)

        logger.info(f"아바타 변경 완료: user_id={user_id}, changed_by={ctx.user_id}")
        return user

    async def open_avatar(self, ctx: RequestContext, user_id: int) -> Response:
        """
        아바타 이미지를 inline 응답으로 전달

        Raises:
            UserNotFoundException: 사용자 없음
            BlobNotFoundError: 등록된 아바타가 없거나 저장소에 파일이 없음
        """
        user = await self.get_user(user_id)
        locator = user.avatar_locator
        if locator is None:
            raise BlobNotFoundError("등록된 아바타가 없습니다.")

        logger.info(f"아바타 조회: user_id={user_id}, requested_by={ctx.user_id}")
        return await stream_blob_response(
            self.blob_backend,
            locator,
            resolve_content_type(None, locator.key),
            build_content_disposition(Disposition.INLINE.value, f"avatar-{user_id}.{get_extension(locator.key)}"),
            self.signed_url_ttl,
        )

    async def open_student_avatar(self, ctx: RequestContext, student_id: int) -> Response:
        """
        학생 ID로 연결된 계정의 아바타 전달

        Raises:
            ProfileNotFoundException: 학생 프로필 없음
            BlobNotFoundError: 연결된 계정이 없거나 아바타가 없음
        """
        student = await self.student_repository.find_by_id(student_id)
        if student is None:
            raise ProfileNotFoundException()
        if student.user_id is None:
            raise BlobNotFoundError("등록된 아바타가 없습니다.")

        return await self.open_avatar(ctx, student.user_id)

    async def _discard_blob(self, locator: StorageLocator) -> None:
        """저장소 파일 삭제 (실패해도 예외를 전파하지 않음)"""
        try:
            await run_in_threadpool(self.blob_backend.delete, locator)
        except BlobStorageError as e:
            logger.error(f"아바타 파일 삭제 실패 (수동 정리 필요): {locator.key}, 오류: {e}")
