# -*- coding: utf-8 -*-
"""Document 도메인 Service (Document Registry)"""
from typing import List, Optional
from fastapi import UploadFile
from starlette.concurrency import run_in_threadpool
from src.core.config import settings
from src.core.exception import (
    BlobStorageError,
    DocumentNotFoundException,
    ForbiddenException,
    MetadataPersistenceException,
    ValidationException,
)
from src.core.storage import BlobBackend, StorageLocator
from src.domains.access.context import RequestContext
from src.domains.access.policy import Operation, authorize_context
from src.domains.documents.media_types import DEFAULT_CONTENT_TYPE, get_extension
from src.domains.documents.models import Document
from src.domains.documents.repository import DocumentRepository
from src.domains.documents.validation import UploadLimits, read_validated_upload
from src.domains.students.repository import StudentRepository
import logging

logger = logging.getLogger(__name__)


class DocumentService:
    """Document 비즈니스 로직 처리 계층"""

    def __init__(
        self,
        document_repository: DocumentRepository,
        blob_backend: BlobBackend,
        student_repository: Optional[StudentRepository] = None,
        upload_limits: Optional[UploadLimits] = None,
    ):
        """
        DocumentService 초기화

        Args:
            document_repository: DocumentRepository 인스턴스
            blob_backend: 기동 시 선택된 Blob Backend
            student_repository: 대상 학생 존재 확인용 StudentRepository
            upload_limits: 업로드 크기/형식 제한
        """
        self.document_repository = document_repository
        self.blob_backend = blob_backend
        self.student_repository = student_repository
        self.upload_limits = upload_limits or UploadLimits.for_documents(settings)

    async def upload_document(
        self,
        ctx: RequestContext,
        file: UploadFile,
        owner_id_override: Optional[int] = None,
        media_kind: Optional[str] = None,
    ) -> Document:
        """
        문서 업로드 (소유자 결정 → 권한 확인 → 파일 검증 → 저장소 저장 → 메타데이터 저장)

        Args:
            ctx: 요청 컨텍스트
            file: 업로드된 파일
            owner_id_override: 관리자/어드바이저가 지정한 대상 학생 ID
            media_kind: 선언된 문서 유형 (없으면 확장자)

        Returns:
            생성된 Document 객체

        Raises:
            ValidationException: 대상 학생 누락, 허용되지 않은 형식, 용량 초과
            ForbiddenException / ProfileNotFoundException: 권한 없음
            BlobStorageError: 저장소 쓰기 실패 (메타데이터는 생성되지 않음)
            MetadataPersistenceException: 메타데이터 저장 실패 (저장한 파일은 삭제 시도)
        """
        # 1. 소유 학생 결정 + 권한 확인
        owner_id = await self._resolve_upload_owner(ctx, owner_id_override)
        authorize_context(ctx, Operation.UPLOAD, owner_id).raise_if_denied()

        # 2. 파일 검증 (저장소에 쓰기 전)
        file_data = await read_validated_upload(file, self.upload_limits)
        content_type = file.content_type or DEFAULT_CONTENT_TYPE

        # 3. 저장소에 파일 저장 (실패 시 메타데이터를 만들지 않음)
        locator = await run_in_threadpool(
            self.blob_backend.put,
            file_data,
            file.filename,
            content_type,
            f"documents/{owner_id}",
        )
        logger.info(f"파일 저장 성공: owner_id={owner_id}, kind={locator.kind.value}")

        # 4. 메타데이터 저장 (실패 시 방금 저장한 파일 삭제)
        try:
            document = await self.document_repository.create(
                name=file.filename,
                locator=locator,
                media_kind=(media_kind or get_extension(file.filename) or "unknown").strip(),
                content_type=content_type,
                file_size_kb=len(file_data) // 1024,
                owner_id=owner_id,
                uploaded_by=ctx.user_id,
            )
        except Exception as e:
            logger.error(f"문서 메타데이터 저장 실패: {e}", exc_info=True)
            await self._rollback()
            await self._discard_blob(locator)
            raise MetadataPersistenceException() from e

        logger.info(f"문서 업로드 완료: document_id={document.document_id}, owner_id={owner_id}, uploaded_by={ctx.user_id}")
        return document

    async def get_document(
        self,
        ctx: RequestContext,
        document_id: int,
        operation: Operation = Operation.READ,
    ) -> Document:
        """
        문서 조회 (권한 검증 포함)

        Args:
            ctx: 요청 컨텍스트
            document_id: 문서 ID
            operation: 권한 확인에 사용할 작업 (조회/다운로드/보기/삭제)

        Returns:
            Document 객체

        Raises:
            DocumentNotFoundException: 문서 없음
            ForbiddenException / ProfileNotFoundException: 권한 없음
        """
        document = await self.document_repository.find_by_id(document_id)

        if not document:
            logger.warning(f"문서 찾을 수 없음: document_id={document_id}, user_id={ctx.user_id}")
            raise DocumentNotFoundException()

        authorize_context(ctx, operation, document.owner_id).raise_if_denied()
        return document

    async def delete_document(self, ctx: RequestContext, document_id: int) -> bool:
        """
        문서 삭제 (메타데이터 삭제 → 저장소 파일 삭제)

        메타데이터 삭제 실패는 오류로 보고하고, 파일 삭제 실패는 로그만 남긴다.

        Raises:
            DocumentNotFoundException: 문서 없음 (이미 삭제된 경우 포함)
            MetadataPersistenceException: 메타데이터 삭제 실패
        """
        document = await self.get_document(ctx, document_id, Operation.DELETE)
        locator = document.storage_locator

        success = await self.document_repository.delete(document)
        if not success:
            raise MetadataPersistenceException("문서 삭제 중 오류가 발생했습니다.")

        await self._discard_blob(locator)
        logger.info(f"문서 삭제 완료: document_id={document_id}, user_id={ctx.user_id}")
        return True

    async def list_by_owner(self, ctx: RequestContext, owner_id: int) -> List[Document]:
        """
        학생별 문서 목록 조회 (학생은 본인 것만)

        Args:
            ctx: 요청 컨텍스트
            owner_id: 대상 학생 ID

        Returns:
            Document 객체 리스트 (최신순)
        """
        authorize_context(ctx, Operation.LIST, owner_id).raise_if_denied()
        return await self.document_repository.find_all_by_owner_id(owner_id)

    async def list_my_documents(self, ctx: RequestContext) -> List[Document]:
        """로그인한 학생 본인의 문서 목록"""
        if not ctx.is_student:
            raise ForbiddenException("학생만 본인 문서 목록을 조회할 수 있습니다.")

        owner_id = ctx.require_owner_id()
        return await self.document_repository.find_all_by_owner_id(owner_id)

    async def list_all_documents(self, ctx: RequestContext) -> List[Document]:
        """전체 문서 목록 (관리자/어드바이저)"""
        if not ctx.is_staff:
            raise ForbiddenException()

        return await self.document_repository.find_all()

    async def _resolve_upload_owner(
        self,
        ctx: RequestContext,
        owner_id_override: Optional[int],
    ) -> Optional[int]:
        """업로드 대상 학생 ID 결정"""
        if ctx.is_student:
            own_id = ctx.require_owner_id()
            # 다른 학생 ID를 지정하면 정책에서 거부됨
            return owner_id_override if owner_id_override is not None else own_id

        if ctx.is_staff:
            if owner_id_override is None:
                raise ValidationException("대상 학생 ID(student_id)가 필요합니다.")
            if self.student_repository is not None:
                student = await self.student_repository.find_by_id(owner_id_override)
                if student is None:
                    raise ValidationException(f"존재하지 않는 학생입니다: student_id={owner_id_override}")

        return owner_id_override

    async def _rollback(self) -> None:
        try:
            await self.document_repository.rollback()
        except Exception as e:
            logger.error(f"DB 롤백 실패: {e}")

    async def _discard_blob(self, locator: StorageLocator) -> None:
        """저장소 파일 삭제 (실패해도 예외를 전파하지 않음)"""
        try:
            deleted = await run_in_threadpool(self.blob_backend.delete, locator)
        except BlobStorageError as e:
            logger.error(f"저장소 파일 삭제 실패 (수동 정리 필요): {locator.key}, 오류: {e}")
            return

        if deleted:
            logger.info(f"저장소 파일 삭제 완료: {locator.key}")
        else:
            logger.info(f"저장소에 이미 파일 없음: {locator.key}")
