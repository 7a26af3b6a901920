# -*- coding: utf-8 -*-
"""애플리케이션 공통 예외 및 FastAPI 예외 핸들러"""
import logging

from fastapi import Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class CustomException(Exception):
    """
    모든 도메인 예외의 기반 클래스

    Attributes:
        status_code: 응답 HTTP 상태 코드
        error_code: 클라이언트가 분기할 수 있는 고정 오류 코드
        detail: 사용자에게 전달되는 메시지
    """

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code: str = "INTERNAL_ERROR"
    default_detail: str = "서버 내부 오류가 발생했습니다."

    def __init__(self, detail: str = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


# ============================================
# 요청/권한 오류
# ============================================

class ValidationException(CustomException):
    """잘못된 입력 (허용되지 않은 파일 형식, 용량 초과, 대상 학생 누락 등)"""
    status_code = status.HTTP_400_BAD_REQUEST
    error_code = "VALIDATION_ERROR"
    default_detail = "잘못된 요청입니다."


class NotAuthenticatedException(CustomException):
    """인증 정보 없음"""
    status_code = status.HTTP_401_UNAUTHORIZED
    error_code = "NOT_AUTHENTICATED"
    default_detail = "로그인이 필요합니다."


class ForbiddenException(CustomException):
    """정책에 의한 접근 거부 (문서 존재 여부는 노출하지 않음)"""
    status_code = status.HTTP_403_FORBIDDEN
    error_code = "FORBIDDEN"
    default_detail = "접근 권한이 없습니다."


class DocumentNotFoundException(CustomException):
    """문서 메타데이터 없음"""
    status_code = status.HTTP_404_NOT_FOUND
    error_code = "DOCUMENT_NOT_FOUND"
    default_detail = "문서를 찾을 수 없습니다."


class ProfileNotFoundException(CustomException):
    """학생 계정에 연결된 학생 프로필 없음 (문서 404와 구분)"""
    status_code = status.HTTP_404_NOT_FOUND
    error_code = "PROFILE_NOT_FOUND"
    default_detail = "학생 프로필을 찾을 수 없습니다."


class UserNotFoundException(CustomException):
    """사용자 없음"""
    status_code = status.HTTP_404_NOT_FOUND
    error_code = "USER_NOT_FOUND"
    default_detail = "사용자를 찾을 수 없습니다."


class MetadataPersistenceException(CustomException):
    """메타데이터 저장/삭제 실패"""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code = "METADATA_PERSISTENCE_ERROR"
    default_detail = "문서 정보를 저장하는 중 오류가 발생했습니다."


# ============================================
# 저장소 오류 (Blob Backend에서 타입을 유지한 채 전파)
# ============================================

class BlobStorageError(CustomException):
    """저장소 오류 기반 클래스"""
    error_code = "STORAGE_ERROR"
    default_detail = "파일 저장소 오류가 발생했습니다."


class BlobNotFoundError(BlobStorageError):
    """저장소에 파일이 없음"""
    status_code = status.HTTP_404_NOT_FOUND
    error_code = "FILE_NOT_FOUND"
    default_detail = "서버에서 파일을 찾을 수 없습니다."


class BackendTransientError(BlobStorageError):
    """네트워크 오류, 요청 제한 등 일시적인 원격 저장소 오류"""
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    error_code = "STORAGE_UNAVAILABLE"
    default_detail = "저장소에 일시적으로 접근할 수 없습니다."


class BackendFatalError(BlobStorageError):
    """로컬 디스크 I/O 오류, 잘못된 저장소 설정 등"""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code = "STORAGE_ERROR"
    default_detail = "파일 저장소 오류가 발생했습니다."


class SignedAccessUnsupportedError(BlobStorageError):
    """서명 URL을 지원하지 않는 저장소"""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code = "SIGNED_ACCESS_UNSUPPORTED"
    default_detail = "이 저장소는 서명 URL을 지원하지 않습니다."


class StorageConfigurationError(RuntimeError):
    """기동 시점의 저장소 설정 오류 (요청 단위가 아닌 프로세스 단위 치명 오류)"""


# ============================================
# 예외 핸들러
# ============================================

async def custom_exception_handler(request: Request, exc: CustomException) -> JSONResponse:
    """CustomException → JSON 응답"""
    if exc.status_code >= 500:
        logger.error(f"서버 오류: {request.method} {request.url.path} - {exc.error_code}: {exc.detail}")
    else:
        logger.info(f"요청 오류: {request.method} {request.url.path} - {exc.error_code}: {exc.detail}")

    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "error_code": exc.error_code},
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """HTTPException → JSON 응답"""
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "error_code": "HTTP_ERROR"},
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """요청 본문/파라미터 검증 실패 → 400 응답"""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "detail": jsonable_encoder(exc.errors()),
            "error_code": "VALIDATION_ERROR",
        },
    )
