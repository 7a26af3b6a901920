import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from src.core.config import settings
from src.core.exception import (
    CustomException,
    custom_exception_handler,
    http_exception_handler,
    validation_exception_handler,
)
from src.core.storage import StorageSettings, build_blob_backend

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

# FastAPI 앱 초기화
app = FastAPI(
    title="Study Abroad Portal Backend API",
    description="유학 지원 포털 문서 저장 및 접근 관리 시스템",
    version="1.0.0",
    debug=settings.DEBUG,
)

# CORS 설정
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# 예외 핸들러 등록
app.add_exception_handler(CustomException, custom_exception_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)


@app.on_event("startup")
async def startup_event():
    """애플리케이션 시작 시 저장소 백엔드 선택 (설정 오류면 기동 실패)"""
    app.state.blob_backend = build_blob_backend(StorageSettings.from_settings(settings))
    logger.info(f"저장소 백엔드 준비 완료: kind={app.state.blob_backend.kind.value}")


@app.on_event("shutdown")
async def shutdown_event():
    """애플리케이션 종료 시 Redis 연결 종료"""
    await close_redis()


@app.get("/")
async def root():
    """루트 엔드포인트 (헬스 체크)"""
    return {
        "message": "Study Abroad Portal Backend API에 오신 것을 환영합니다",
        "status": "running",
        "environment": settings.APP_ENV,
    }


@app.get("/health")
async def health_check():
    """모니터링용 헬스 체크 엔드포인트"""
    return {"status": "healthy"}


# 도메인 라우터 포함
from src.domains.documents.controller import router as documents_router
from src.domains.users.controller import router as users_router
from src.core.redis import close_redis

app.include_router(documents_router, prefix="/api/v1/documents", tags=["Documents"])
app.include_router(users_router, prefix="/api/v1/users", tags=["Users"])


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "src.main:app",
        host=settings.APP_HOST,
        port=settings.APP_PORT,
        reload=settings.DEBUG,
    )
