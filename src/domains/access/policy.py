# -*- coding: utf-8 -*-
"""Access Policy: 문서 작업 허용 여부 판단 (순수 함수)"""
import enum
from dataclasses import dataclass
from typing import Optional

from src.core.exception import (
    ForbiddenException,
    NotAuthenticatedException,
    ProfileNotFoundException,
)
from src.domains.access.context import RequestContext, Role


class Operation(str, enum.Enum):
    """문서 작업 종류"""
    READ = "read"
    LIST = "list"
    DOWNLOAD = "download"
    VIEW = "view"
    UPLOAD = "upload"
    DELETE = "delete"


class DenyReason(str, enum.Enum):
    """거부 사유"""
    NOT_AUTHENTICATED = "not_authenticated"
    PROFILE_NOT_FOUND = "profile_not_found"
    FORBIDDEN = "forbidden"


# 어드바이저가 소유자와 무관하게 수행할 수 있는 작업
ADVISOR_OPERATIONS = {
    Operation.READ,
    Operation.LIST,
    Operation.DOWNLOAD,
    Operation.VIEW,
    Operation.DELETE,
}


@dataclass(frozen=True)
class AccessDecision:
    allowed: bool
    reason: Optional[DenyReason] = None

    def raise_if_denied(self) -> None:
        """거부 사유에 맞는 예외 발생"""
        if self.allowed:
            return
        if self.reason == DenyReason.NOT_AUTHENTICATED:
            raise NotAuthenticatedException()
        if self.reason == DenyReason.PROFILE_NOT_FOUND:
            raise ProfileNotFoundException()
        raise ForbiddenException()


ALLOW = AccessDecision(allowed=True)


def deny(reason: DenyReason) -> AccessDecision:
    return AccessDecision(allowed=False, reason=reason)


def authorize(
    operation: Operation,
    principal_role: Optional[Role],
    resolved_owner_id: Optional[int],
    document_owner_id: Optional[int],
) -> AccessDecision:
    """
    작업 허용 여부 판단

    Args:
        operation: 수행할 작업
        principal_role: 호출자 역할 (인증 안 됨이면 None)
        resolved_owner_id: 호출자가 대리하는 학생 ID (학생만 해당)
        document_owner_id: 대상 문서의 소유 학생 ID (업로드는 대상 학생 ID)

    Returns:
        AccessDecision
    """
    if principal_role is None:
        return deny(DenyReason.NOT_AUTHENTICATED)

    if principal_role == Role.ADMIN:
        return ALLOW

    if principal_role == Role.ADVISOR:
        if operation == Operation.UPLOAD:
            # 어드바이저는 대상 학생을 명시한 경우에만 업로드 가능
            return ALLOW if document_owner_id is not None else deny(DenyReason.FORBIDDEN)
        return ALLOW if operation in ADVISOR_OPERATIONS else deny(DenyReason.FORBIDDEN)

    if principal_role == Role.STUDENT:
        if resolved_owner_id is None:
            return deny(DenyReason.PROFILE_NOT_FOUND)
        if document_owner_id is not None and resolved_owner_id == document_owner_id:
            return ALLOW
        return deny(DenyReason.FORBIDDEN)

    return deny(DenyReason.FORBIDDEN)


def authorize_context(
    ctx: Optional[RequestContext],
    operation: Operation,
    document_owner_id: Optional[int],
) -> AccessDecision:
    """RequestContext로 authorize 호출"""
    if ctx is None:
        return deny(DenyReason.NOT_AUTHENTICATED)
    return authorize(operation, ctx.role, ctx.owner_id, document_owner_id)
