# -*- coding: utf-8 -*-
"""세션 기반 인증 의존성 (세션 발급은 인증 서비스 담당)"""
import json
import logging
from typing import Any, Dict, Optional

from fastapi import Cookie, Depends

from src.core.config import settings
from src.core.exception import NotAuthenticatedException
from src.core.redis import get_redis
from src.domains.access.context import Principal, Role

logger = logging.getLogger(__name__)


async def get_current_session_data(
    session_id: Optional[str] = Cookie(None, alias=settings.SESSION_COOKIE_NAME),
) -> Dict[str, Any]:
    """
    쿠키의 세션 ID로 Redis에서 세션 데이터 조회

    Returns:
        {"user_id": 1, "role": "student", "student_id": 10} 형식의 세션 데이터

    Raises:
        NotAuthenticatedException: 세션이 없거나 만료된 경우
    """
    if not session_id:
        raise NotAuthenticatedException()

    raw = await get_redis().get(f"{settings.SESSION_KEY_PREFIX}{session_id}")
    if not raw:
        logger.info("만료되었거나 존재하지 않는 세션")
        raise NotAuthenticatedException("세션이 만료되었습니다. 다시 로그인해주세요.")

    try:
        return json.loads(raw)
    except ValueError as e:
        logger.warning(f"세션 데이터 파싱 실패: {e}")
        raise NotAuthenticatedException() from e


async def get_current_principal(
    session_data: Dict[str, Any] = Depends(get_current_session_data),
) -> Principal:
    """세션 데이터 → Principal"""
    try:
        return Principal(
            user_id=int(session_data["user_id"]),
            role=Role(session_data.get("role", Role.USER.value)),
            student_id=int(session_data["student_id"]) if session_data.get("student_id") else None,
        )
    except (KeyError, ValueError, TypeError) as e:
        logger.warning(f"세션 데이터 형식 오류: {e}")
        raise NotAuthenticatedException() from e
