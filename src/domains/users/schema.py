# -*- coding: utf-8 -*-
"""User 도메인 스키마"""
from pydantic import BaseModel, Field


class AvatarResponse(BaseModel):
    """아바타 업로드 응답 스키마"""
    user_id: int = Field(..., description="사용자 고유 ID")
    message: str = Field(..., description="처리 결과 메시지")
    avatar_url: str = Field(..., description="아바타 조회 경로", example="/api/v1/users/1/avatar")
