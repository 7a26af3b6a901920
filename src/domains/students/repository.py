# -*- coding: utf-8 -*-
"""Student 도메인 Repository (학생 프로필 조회)"""
from typing import Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from src.domains.students.models import Student


class StudentRepository:
    """Student 엔티티 데이터 접근 계층"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_by_id(self, student_id: int) -> Optional[Student]:
        """
        학생 ID로 학생 프로필 조회

        Args:
            student_id: 학생 고유 ID

        Returns:
            Student 객체 또는 None
        """
        result = await self.db.execute(
            select(Student).where(Student.student_id == student_id)
        )
        return result.scalar_one_or_none()

    async def find_by_user_id(self, user_id: int) -> Optional[Student]:
        """
        로그인 계정 ID로 학생 프로필 조회

        Args:
            user_id: 사용자 고유 ID

        Returns:
            Student 객체 또는 None
        """
        result = await self.db.execute(
            select(Student).where(Student.user_id == user_id)
        )
        return result.scalar_one_or_none()
