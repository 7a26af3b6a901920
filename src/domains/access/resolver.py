# -*- coding: utf-8 -*-
"""Identity Resolver: 인증 주체 → 요청 컨텍스트"""
import logging
from typing import Optional, Protocol

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.security import get_current_principal
from src.db.session import get_db
from src.domains.access.context import Principal, RequestContext, Role
from src.domains.students.repository import StudentRepository

logger = logging.getLogger(__name__)


class ProfileLookup(Protocol):
    """학생 프로필 조회 협력자"""

    async def find_by_user_id(self, user_id: int) -> Optional[object]:
        ...


class IdentityResolver:
    """인증 주체가 대리할 수 있는 학생 ID를 결정"""

    def __init__(self, profile_lookup: ProfileLookup):
        """
        IdentityResolver 초기화

        Args:
            profile_lookup: user_id로 학생 프로필을 찾는 저장소 (StudentRepository)
        """
        self.profile_lookup = profile_lookup

    async def resolve(self, principal: Principal) -> RequestContext:
        """
        요청 컨텍스트 생성 (학생 프로필 조회는 최대 한 번)

        Args:
            principal: 인증된 호출자

        Returns:
            RequestContext (학생이 아니면 owner_id=None)
        """
        if principal.role != Role.STUDENT:
            return RequestContext(principal=principal)

        # 세션에 학생 ID가 이미 있으면 조회 생략
        if principal.student_id is not None:
            return RequestContext(principal=principal, owner_id=principal.student_id)

        logger.info(f"세션에 학생 ID 없음, 프로필 조회: user_id={principal.user_id}")
        student = await self.profile_lookup.find_by_user_id(principal.user_id)

        if student is None:
            logger.warning(f"학생 프로필 없음: user_id={principal.user_id}")
            return RequestContext(principal=principal, profile_missing=True)

        return RequestContext(principal=principal, owner_id=student.student_id)


async def get_request_context(
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
) -> RequestContext:
    """요청 컨텍스트 의존성 (FastAPI가 요청마다 한 번만 실행)"""
    resolver = IdentityResolver(StudentRepository(db))
    return await resolver.resolve(principal)
