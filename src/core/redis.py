# -*- coding: utf-8 -*-
"""Redis 클라이언트 (세션 저장소)"""
import logging
from typing import Optional

from redis.asyncio import Redis

from src.core.config import settings

logger = logging.getLogger(__name__)

_redis_client: Optional[Redis] = None


def get_redis() -> Redis:
    """Redis 클라이언트 반환 (최초 호출 시 생성)"""
    global _redis_client
    if _redis_client is None:
        _redis_client = Redis.from_url(settings.REDIS_URL, decode_responses=True)
        logger.info(f"Redis 클라이언트 생성: {settings.REDIS_HOST}:{settings.REDIS_PORT}")
    return _redis_client


async def close_redis() -> None:
    """Redis 연결 종료"""
    global _redis_client
    if _redis_client is not None:
        await _redis_client.aclose()
        _redis_client = None
        logger.info("Redis 연결 종료")
