# -*- coding: utf-8 -*-
"""User 도메인 컨트롤러 (API 엔드포인트)"""
from fastapi import APIRouter, Depends, status, UploadFile, File
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.config import settings
from src.core.storage import BlobBackend, get_blob_backend
from src.db.session import get_db
from src.domains.access.context import RequestContext
from src.domains.access.resolver import get_request_context
from src.domains.documents.validation import UploadLimits
from src.domains.students.repository import StudentRepository
from src.domains.users.repository import UserRepository
from src.domains.users.service import UserService
from src.domains.users.schema import AvatarResponse
import logging

logger = logging.getLogger(__name__)
router = APIRouter()


def get_user_service(
    db: AsyncSession = Depends(get_db),
    blob_backend: BlobBackend = Depends(get_blob_backend),
) -> UserService:
    """UserService 의존성 주입"""
    return UserService(
        user_repository=UserRepository(db),
        blob_backend=blob_backend,
        upload_limits=UploadLimits.for_avatars(settings),
        signed_url_ttl=settings.SIGNED_URL_TTL_SECONDS,
        student_repository=StudentRepository(db),
    )


@router.post(
    "/{user_id}/avatar",
    response_model=AvatarResponse,
    status_code=status.HTTP_200_OK,
    summary="아바타 업로드/변경"
)
async def upload_avatar(
    user_id: int,
    file: UploadFile = File(...),
    ctx: RequestContext = Depends(get_request_context),
    user_service: UserService = Depends(get_user_service)
):
    """
    아바타 이미지를 업로드합니다. (jpg, jpeg, png, gif)

    본인 아바타만 변경할 수 있으며, 관리자는 모든 사용자의 아바타를 변경할 수 있습니다.

    Args:
        user_id: 대상 사용자 ID
        file: 업로드할 이미지 파일
        ctx: 요청 컨텍스트
        user_service: UserService 의존성 주입

    Returns:
        AvatarResponse: 처리 결과와 아바타 조회 경로
    """
    logger.info(f"아바타 업로드 요청: user_id={user_id}, requested_by={ctx.user_id}, filename={file.filename}")

    await user_service.replace_avatar(ctx, user_id, file)

    return AvatarResponse(
        user_id=user_id,
        message="아바타가 변경되었습니다.",
        avatar_url=f"/api/v1/users/{user_id}/avatar",
    )


@router.get(
    "/{user_id}/avatar",
    summary="아바타 조회"
)
async def get_avatar(
    user_id: int,
    ctx: RequestContext = Depends(get_request_context),
    user_service: UserService = Depends(get_user_service)
):
    """아바타 이미지를 inline으로 전달합니다."""
    return await user_service.open_avatar(ctx, user_id)


@router.get(
    "/student/{student_id}/avatar",
    summary="학생 아바타 조회"
)
async def get_student_avatar(
    student_id: int,
    ctx: RequestContext = Depends(get_request_context),
    user_service: UserService = Depends(get_user_service)
):
    """학생 프로필에 연결된 계정의 아바타 이미지를 inline으로 전달합니다."""
    return await user_service.open_student_avatar(ctx, student_id)
