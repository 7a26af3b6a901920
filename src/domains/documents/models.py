# -*- coding: utf-8 -*-
from sqlalchemy import Column, BigInteger, String, Integer, TIMESTAMP, ForeignKey, UniqueConstraint
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship, validates
from src.db.session import Base
from src.core.storage import StorageKind, StorageLocator
from src.domains.students.models import Student
from src.domains.users.models import User


class Document(Base):
    """학생 지원 서류 파일 모델"""

    __tablename__ = "documents"

    document_id = Column(BigInteger, primary_key=True, autoincrement=True)  # 문서 고유 ID
    name = Column(String(255), nullable=False)  # 원본 파일 이름 (표시용, 저장 경로로 사용하지 않음)
    storage_kind = Column(String(10), nullable=False)  # 저장소 종류 ('remote' | 'local')
    storage_key = Column(String(1024), nullable=False)  # 저장소 키 (한 번 기록 후 변경 불가)
    media_kind = Column(String(100), nullable=False)  # 선언된 문서 유형/확장자 (Content-Type 추론용)
    content_type = Column(String(100), nullable=True)  # 업로드 시 전달된 MIME 타입
    file_size_kb = Column(Integer)  # 파일 크기 (KB)
    owner_id = Column(BigInteger, ForeignKey("students.student_id", ondelete="CASCADE"), nullable=False, index=True)  # 소유 학생 ID
    uploaded_by = Column(BigInteger, ForeignKey("users.user_id", ondelete="SET NULL"), nullable=True)  # 업로드한 사용자 ID
    created_at = Column(TIMESTAMP, nullable=False, server_default=func.now())  # 업로드 일시

    __table_args__ = (
        UniqueConstraint("storage_kind", "storage_key", name="uq_documents_storage"),
    )

    # 관계 설정
    owner = relationship(Student, back_populates="documents")
    uploader = relationship(User)

    @validates("storage_kind", "storage_key")
    def _validate_write_once(self, field, value):
        # 저장 위치는 한 번 기록되면 바뀌지 않음 (재업로드는 새 문서로 생성)
        current = getattr(self, field)
        if current is not None and current != value:
            raise ValueError(f"{field}는 변경할 수 없습니다.")
        return value

    @property
    def storage_locator(self) -> StorageLocator:
        """저장 위치 (종류 + 키)"""
        return StorageLocator(kind=StorageKind(self.storage_kind), key=self.storage_key)

    def __repr__(self):
        return f"<Document(document_id={self.document_id}, name={self.name})>"
