# -*- coding: utf-8 -*-
"""Document 도메인 컨트롤러 (API 엔드포인트)"""
from typing import List, Optional
from fastapi import APIRouter, Depends, status, UploadFile, File, Form
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.config import settings
from src.core.storage import BlobBackend, get_blob_backend
from src.db.session import get_db
from src.domains.access.context import RequestContext
from src.domains.access.resolver import get_request_context
from src.domains.documents.delivery import Disposition, DocumentDeliveryService
from src.domains.documents.repository import DocumentRepository
from src.domains.documents.service import DocumentService
from src.domains.documents.schema import DocumentResponse, DocumentDeleteResponse
from src.domains.documents.validation import UploadLimits
from src.domains.students.repository import StudentRepository
import logging

logger = logging.getLogger(__name__)
router = APIRouter()


def get_document_service(
    db: AsyncSession = Depends(get_db),
    blob_backend: BlobBackend = Depends(get_blob_backend),
) -> DocumentService:
    """DocumentService 의존성 주입"""
    return DocumentService(
        document_repository=DocumentRepository(db),
        blob_backend=blob_backend,
        student_repository=StudentRepository(db),
        upload_limits=UploadLimits.for_documents(settings),
    )


def get_delivery_service(
    document_service: DocumentService = Depends(get_document_service),
    blob_backend: BlobBackend = Depends(get_blob_backend),
) -> DocumentDeliveryService:
    """DocumentDeliveryService 의존성 주입"""
    return DocumentDeliveryService(
        document_service=document_service,
        blob_backend=blob_backend,
        signed_url_ttl=settings.SIGNED_URL_TTL_SECONDS,
    )


@router.get(
    "",
    response_model=List[DocumentResponse],
    summary="전체 문서 목록 조회 (관리자/어드바이저)"
)
async def get_all_documents(
    ctx: RequestContext = Depends(get_request_context),
    document_service: DocumentService = Depends(get_document_service)
):
    """
    모든 학생의 문서 목록을 최신순으로 조회합니다.

    Args:
        ctx: 요청 컨텍스트
        document_service: DocumentService 의존성 주입

    Returns:
        List[DocumentResponse]: 문서 메타데이터 목록
    """
    documents = await document_service.list_all_documents(ctx)
    return [DocumentResponse.model_validate(doc) for doc in documents]


@router.get(
    "/my-documents",
    response_model=List[DocumentResponse],
    summary="내 문서 목록 조회 (학생)"
)
async def get_my_documents(
    ctx: RequestContext = Depends(get_request_context),
    document_service: DocumentService = Depends(get_document_service)
):
    """
    로그인한 학생 본인의 문서 목록을 조회합니다.

    Returns:
        List[DocumentResponse]: 문서 메타데이터 목록

    Raises:
        ForbiddenException: 학생이 아닌 경우
        ProfileNotFoundException: 학생 프로필이 없는 경우
    """
    documents = await document_service.list_my_documents(ctx)
    logger.info(f"내 문서 목록 조회: user_id={ctx.user_id}, 문서 {len(documents)}개")
    return [DocumentResponse.model_validate(doc) for doc in documents]


@router.get(
    "/student/{student_id}",
    response_model=List[DocumentResponse],
    summary="학생별 문서 목록 조회"
)
async def get_student_documents(
    student_id: int,
    ctx: RequestContext = Depends(get_request_context),
    document_service: DocumentService = Depends(get_document_service)
):
    """
    특정 학생의 문서 목록을 조회합니다. (학생은 본인 것만 조회 가능)

    Args:
        student_id: 대상 학생 ID
        ctx: 요청 컨텍스트
        document_service: DocumentService 의존성 주입

    Returns:
        List[DocumentResponse]: 문서 메타데이터 목록
    """
    documents = await document_service.list_by_owner(ctx, student_id)
    return [DocumentResponse.model_validate(doc) for doc in documents]


@router.post(
    "/upload",
    response_model=DocumentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="문서 업로드"
)
async def upload_document(
    file: UploadFile = File(...),
    student_id: Optional[int] = Form(None),
    media_kind: Optional[str] = Form(None, alias="type"),
    ctx: RequestContext = Depends(get_request_context),
    document_service: DocumentService = Depends(get_document_service)
):
    """
    문서를 업로드합니다.

    학생은 본인 문서로 저장되고, 관리자/어드바이저는 student_id로 대상 학생을 지정해야 합니다.

    Args:
        file: 업로드할 파일 (multipart/form-data)
        student_id: 대상 학생 ID (관리자/어드바이저 필수)
        media_kind: 문서 유형 (form 필드명 type, 없으면 확장자)
        ctx: 요청 컨텍스트
        document_service: DocumentService 의존성 주입

    Returns:
        DocumentResponse: 업로드된 문서의 메타데이터
    """
    logger.info(f"문서 업로드 요청: user_id={ctx.user_id}, role={ctx.role.value}, filename={file.filename}, student_id={student_id}")

    document = await document_service.upload_document(
        ctx=ctx,
        file=file,
        owner_id_override=student_id,
        media_kind=media_kind,
    )

    return DocumentResponse.model_validate(document)


@router.get(
    "/{document_id}",
    response_model=DocumentResponse,
    summary="문서 상세 조회"
)
async def get_document(
    document_id: int,
    ctx: RequestContext = Depends(get_request_context),
    document_service: DocumentService = Depends(get_document_service)
):
    """
    특정 문서의 메타데이터를 조회합니다. (권한 검증 포함)

    Raises:
        DocumentNotFoundException: 문서를 찾을 수 없는 경우
        ForbiddenException: 다른 학생의 문서인 경우
    """
    document = await document_service.get_document(ctx, document_id)
    return DocumentResponse.model_validate(document)


@router.get(
    "/{document_id}/download",
    summary="문서 다운로드"
)
async def download_document(
    document_id: int,
    ctx: RequestContext = Depends(get_request_context),
    delivery_service: DocumentDeliveryService = Depends(get_delivery_service)
):
    """
    문서 파일을 첨부 파일(attachment)로 내려받습니다.

    원격 저장소 스트리밍이 일시적으로 실패하면 5분짜리 서명 URL로 리다이렉트합니다.
    """
    return await delivery_service.deliver(ctx, document_id, Disposition.ATTACHMENT)


@router.get(
    "/{document_id}/view",
    summary="문서 보기"
)
async def view_document(
    document_id: int,
    ctx: RequestContext = Depends(get_request_context),
    delivery_service: DocumentDeliveryService = Depends(get_delivery_service)
):
    """문서 파일을 브라우저에서 바로 볼 수 있도록(inline) 전달합니다."""
    return await delivery_service.deliver(ctx, document_id, Disposition.INLINE)


@router.delete(
    "/{document_id}",
    response_model=DocumentDeleteResponse,
    summary="문서 삭제"
)
async def delete_document(
    document_id: int,
    ctx: RequestContext = Depends(get_request_context),
    document_service: DocumentService = Depends(get_document_service)
):
    """
    특정 문서를 삭제합니다. (DB 메타데이터 + 저장소 파일)

    Args:
        document_id: 삭제할 문서 ID
        ctx: 요청 컨텍스트
        document_service: DocumentService 의존성 주입

    Returns:
        DocumentDeleteResponse: 삭제 성공 메시지
    """
    logger.info(f"문서 삭제 요청: document_id={document_id}, user_id={ctx.user_id}")

    await document_service.delete_document(ctx, document_id)

    return DocumentDeleteResponse(
        message="문서가 성공적으로 삭제되었습니다.",
        document_id=document_id
    )
