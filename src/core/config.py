from pydantic_settings import BaseSettings
from typing import List, Tuple


class Settings(BaseSettings):
    """환경 변수에서 로드되는 애플리케이션 설정"""

    # 데이터베이스 설정
    DB_HOST: str = "localhost"
    DB_PORT: int = 5432
    DB_USER: str = "postgres"
    DB_PASSWORD: str = ""
    DB_NAME: str = "study_abroad"

    # Redis 설정 (세션 저장소)
    REDIS_HOST: str = "localhost"
    REDIS_PORT: int = 6379
    REDIS_PASSWORD: str = ""

    # 애플리케이션 설정
    APP_ENV: str = "development"
    APP_HOST: str = "0.0.0.0"
    APP_PORT: int = 8000
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"

    # 세션 설정
    SESSION_COOKIE_NAME: str = "session_id"
    SESSION_KEY_PREFIX: str = "session:"

    # CORS 설정
    ALLOWED_ORIGINS: str = "http://localhost:5173"

    # S3 호환 오브젝트 스토리지 설정 (모두 채워져 있을 때만 원격 저장소 사용)
    S3_ENDPOINT: str = "s3.amazonaws.com"
    S3_ACCESS_KEY: str = ""
    S3_SECRET_KEY: str = ""
    S3_REGION: str = ""
    S3_BUCKET_NAME: str = ""
    S3_SECURE: bool = True

    # 로컬 저장소 설정 (원격 저장소 설정이 없을 때 사용)
    LOCAL_STORAGE_ROOT: str = "uploads"

    # 업로드 제한
    MAX_UPLOAD_SIZE_BYTES: int = 10 * 1024 * 1024  # 10 MiB
    ALLOWED_UPLOAD_EXTENSIONS: str = "jpeg,jpg,png,gif,pdf,doc,docx,xls,xlsx,ppt,pptx,txt"
    AVATAR_EXTENSIONS: str = "jpeg,jpg,png,gif"

    # 서명 URL 유효 시간 (초)
    SIGNED_URL_TTL_SECONDS: int = 300

    @property
    def DATABASE_URL(self) -> str:
        """PostgreSQL 데이터베이스 URL 생성"""
        return f"postgresql://{self.DB_USER}:{self.DB_PASSWORD}@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"

    @property
    def ASYNC_DATABASE_URL(self) -> str:
        """비동기 PostgreSQL 데이터베이스 URL 생성"""
        return f"postgresql+asyncpg://{self.DB_USER}:{self.DB_PASSWORD}@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"

    @property
    def REDIS_URL(self) -> str:
        """Redis URL 생성"""
        if self.REDIS_PASSWORD:
            return f"redis://:{self.REDIS_PASSWORD}@{self.REDIS_HOST}:{self.REDIS_PORT}"
        return f"redis://{self.REDIS_HOST}:{self.REDIS_PORT}"

    @property
    def CORS_ORIGINS(self) -> List[str]:
        """쉼표로 구분된 문자열에서 CORS origin 목록 파싱"""
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",")]

    @property
    def UPLOAD_EXTENSIONS(self) -> Tuple[str, ...]:
        """허용 확장자 목록 (소문자, 점 없이)"""
        return _parse_extensions(self.ALLOWED_UPLOAD_EXTENSIONS)

    @property
    def AVATAR_UPLOAD_EXTENSIONS(self) -> Tuple[str, ...]:
        """아바타 허용 확장자 목록"""
        return _parse_extensions(self.AVATAR_EXTENSIONS)

    class Config:
        env_file = ".env"
        case_sensitive = True


def _parse_extensions(raw: str) -> Tuple[str, ...]:
    return tuple(ext.strip().lower().lstrip(".") for ext in raw.split(",") if ext.strip())


# 전역 설정 인스턴스
settings = Settings()
