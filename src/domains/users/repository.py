# -*- coding: utf-8 -*-
"""User 도메인 Repository"""
from typing import Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from src.core.storage import StorageLocator
from src.domains.users.models import User


class UserRepository:
    """User 엔티티 데이터 접근 계층"""

    def __init__(self, db: AsyncSession):
        """
        UserRepository 초기화

        Args:
            db: SQLAlchemy AsyncSession
        """
        self.db = db

    async def find_by_user_id(self, user_id: int) -> Optional[User]:
        """
        사용자 ID로 사용자 조회

        Args:
            user_id: 사용자 고유 ID

        Returns:
            User 객체 또는 None
        """
        result = await self.db.execute(
            select(User).where(User.user_id == user_id)
        )
        return result.scalar_one_or_none()

    async def update_avatar(self, user: User, locator: StorageLocator) -> User:
        """
        아바타 저장 위치 갱신 (commit 포함)

        Args:
            user: 대상 User 객체
            locator: 새 아바타 저장 위치

        Returns:
            갱신된 User 객체
        """
        user.avatar_storage_kind = locator.kind.value
        user.avatar_storage_key = locator.key
        await self.db.commit()
        await self.db.refresh(user)
        return user

    async def rollback(self) -> None:
        """진행 중인 트랜잭션 롤백"""
        await self.db.rollback()
