# -*- coding: utf-8 -*-
"""Document 도메인 스키마"""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field


class DocumentResponse(BaseModel):
    """문서 메타데이터 응답 스키마 (저장소 키는 노출하지 않음)"""
    document_id: int = Field(..., description="문서 고유 ID")
    name: str = Field(..., description="원본 파일 이름")
    media_kind: str = Field(..., description="문서 유형/확장자")
    content_type: Optional[str] = Field(None, description="업로드 시 MIME 타입")
    file_size_kb: Optional[int] = Field(None, description="파일 크기 (KB)")
    owner_id: int = Field(..., description="소유 학생 ID")
    uploaded_by: Optional[int] = Field(None, description="업로드한 사용자 ID")
    created_at: datetime = Field(..., description="업로드 일시")

    class Config:
        from_attributes = True  # ORM 모델 → Pydantic 변환 지원


class DocumentDeleteResponse(BaseModel):
    """문서 삭제 응답 스키마"""
    message: str = Field(..., description="삭제 결과 메시지")
    document_id: int = Field(..., description="삭제된 문서 ID")
