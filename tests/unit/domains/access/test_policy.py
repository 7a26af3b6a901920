# -*- coding: utf-8 -*-
"""Access Policy 단위 테스트"""
import pytest

from src.core.exception import ForbiddenException, NotAuthenticatedException, ProfileNotFoundException
from src.domains.access.context import Role
from src.domains.access.policy import DenyReason, Operation, authorize, authorize_context


class TestAuthorizeRoles:
    """역할별 허용 여부"""

    @pytest.mark.parametrize("operation", list(Operation))
    def test_admin_allowed_everything(self, operation):
        assert authorize(operation, Role.ADMIN, None, 99).allowed

    @pytest.mark.parametrize(
        "operation",
        [Operation.READ, Operation.LIST, Operation.DOWNLOAD, Operation.VIEW, Operation.DELETE],
    )
    def test_advisor_allowed_for_any_owner(self, operation):
        assert authorize(operation, Role.ADVISOR, None, 42).allowed

    def test_advisor_upload_requires_target_student(self):
        assert authorize(Operation.UPLOAD, Role.ADVISOR, None, 5).allowed
        assert authorize(Operation.UPLOAD, Role.ADVISOR, None, None).reason == DenyReason.FORBIDDEN

    def test_student_own_document_allowed(self):
        assert authorize(Operation.DOWNLOAD, Role.STUDENT, 1, 1).allowed

    def test_student_other_document_forbidden(self):
        decision = authorize(Operation.READ, Role.STUDENT, 1, 2)

        assert not decision.allowed
        assert decision.reason == DenyReason.FORBIDDEN

    def test_student_without_profile(self):
        decision = authorize(Operation.READ, Role.STUDENT, None, 1)

        assert decision.reason == DenyReason.PROFILE_NOT_FOUND

    def test_plain_user_forbidden(self):
        assert authorize(Operation.READ, Role.USER, None, 1).reason == DenyReason.FORBIDDEN

    def test_unauthenticated(self):
        assert authorize(Operation.READ, None, None, 1).reason == DenyReason.NOT_AUTHENTICATED


class TestRaiseIfDenied:
    """거부 사유 → 예외 변환"""

    def test_forbidden(self, student_a_ctx):
        with pytest.raises(ForbiddenException):
            authorize_context(student_a_ctx, Operation.READ, 2).raise_if_denied()

    def test_profile_not_found(self, orphan_student_ctx):
        with pytest.raises(ProfileNotFoundException):
            authorize_context(orphan_student_ctx, Operation.READ, 1).raise_if_denied()

    def test_no_context(self):
        with pytest.raises(NotAuthenticatedException):
            authorize_context(None, Operation.READ, 1).raise_if_denied()

    def test_allowed_does_not_raise(self, student_a_ctx):
        authorize_context(student_a_ctx, Operation.VIEW, 1).raise_if_denied()
