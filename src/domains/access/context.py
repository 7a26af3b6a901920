# -*- coding: utf-8 -*-
"""인증 주체(Principal)와 요청 단위 컨텍스트"""
import enum
from dataclasses import dataclass
from typing import Optional

from src.core.exception import ForbiddenException, ProfileNotFoundException


class Role(str, enum.Enum):
    """사용자 역할"""
    ADMIN = "admin"
    ADVISOR = "advisor"
    STUDENT = "student"
    USER = "user"


@dataclass(frozen=True)
class Principal:
    """
    인증된 호출자

    Attributes:
        user_id: 사용자 ID
        role: 역할
        student_id: 세션에 이미 연결된 학생 프로필 ID (있으면 조회 생략)
    """
    user_id: int
    role: Role
    student_id: Optional[int] = None


@dataclass(frozen=True)
class RequestContext:
    """
    요청 하나 동안만 유지되는 불변 컨텍스트 (Identity Resolver가 한 번 생성)

    Attributes:
        principal: 인증된 호출자
        owner_id: 호출자가 대리할 수 있는 학생 ID (학생 역할만 해당)
        profile_missing: 학생인데 연결된 프로필을 찾지 못한 경우 True
    """
    principal: Principal
    owner_id: Optional[int] = None
    profile_missing: bool = False

    @property
    def role(self) -> Role:
        return self.principal.role

    @property
    def user_id(self) -> int:
        return self.principal.user_id

    @property
    def is_student(self) -> bool:
        return self.principal.role == Role.STUDENT

    @property
    def is_staff(self) -> bool:
        """관리자 또는 어드바이저"""
        return self.principal.role in (Role.ADMIN, Role.ADVISOR)

    def require_owner_id(self) -> int:
        """
        학생 ID 반환

        Raises:
            ProfileNotFoundException: 학생 계정에 연결된 프로필이 없는 경우
            ForbiddenException: 학생 ID를 대리할 수 없는 호출자
        """
        if self.profile_missing:
            raise ProfileNotFoundException()
        if self.owner_id is None:
            raise ForbiddenException("학생 계정만 사용할 수 있습니다.")
        return self.owner_id
