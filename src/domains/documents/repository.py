# -*- coding: utf-8 -*-
"""Document 도메인 Repository"""
from typing import Optional, List
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from src.core.storage import StorageLocator
from src.domains.documents.models import Document
import logging

logger = logging.getLogger(__name__)


class DocumentRepository:
    """Document 엔티티 데이터 접근 계층"""

    def __init__(self, db: AsyncSession):
        """
        DocumentRepository 초기화

        Args:
            db: SQLAlchemy AsyncSession
        """
        self.db = db

    async def create(
        self,
        name: str,
        locator: StorageLocator,
        media_kind: str,
        content_type: Optional[str],
        file_size_kb: int,
        owner_id: int,
        uploaded_by: int,
    ) -> Document:
        """
        신규 문서 메타데이터 생성 (commit 포함)

        Args:
            name: 원본 파일 이름
            locator: 저장 위치
            media_kind: 선언된 문서 유형/확장자
            content_type: 업로드 시 전달된 MIME 타입
            file_size_kb: 파일 크기 (KB)
            owner_id: 소유 학생 ID
            uploaded_by: 업로드한 사용자 ID

        Returns:
            생성된 Document 객체
        """
        document = Document(
            name=name,
            storage_kind=locator.kind.value,
            storage_key=locator.key,
            media_kind=media_kind,
            content_type=content_type,
            file_size_kb=file_size_kb,
            owner_id=owner_id,
            uploaded_by=uploaded_by,
        )
        self.db.add(document)
        await self.db.commit()
        await self.db.refresh(document)
        return document

    async def find_by_id(self, document_id: int) -> Optional[Document]:
        """
        문서 ID로 문서 조회

        Args:
            document_id: 문서 고유 ID

        Returns:
            Document 객체 또는 None
        """
        result = await self.db.execute(
            select(Document).where(Document.document_id == document_id)
        )
        return result.scalar_one_or_none()

    async def find_all_by_owner_id(self, owner_id: int) -> List[Document]:
        """
        학생 ID로 모든 문서 조회 (최신순)

        Args:
            owner_id: 소유 학생 ID

        Returns:
            Document 객체 리스트
        """
        result = await self.db.execute(
            select(Document)
            .where(Document.owner_id == owner_id)
            .order_by(Document.created_at.desc())
        )
        return list(result.scalars().all())

    async def find_all(self) -> List[Document]:
        """전체 문서 조회 (최신순)"""
        result = await self.db.execute(
            select(Document).order_by(Document.created_at.desc())
        )
        return list(result.scalars().all())

    async def delete(self, document: Document) -> bool:
        """
        문서 삭제

        Args:
            document: 삭제할 Document 객체

        Returns:
            삭제 성공 여부
        """
        try:
            await self.db.delete(document)
            await self.db.commit()
            return True
        except Exception as e:
            logger.error(f"문서 메타데이터 삭제 실패: document_id={document.document_id}, 오류: {e}", exc_info=True)
            await self.db.rollback()
            return False

    async def rollback(self) -> None:
        """진행 중인 트랜잭션 롤백"""
        await self.db.rollback()
