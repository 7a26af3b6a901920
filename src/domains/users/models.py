# -*- coding: utf-8 -*-
from sqlalchemy import Column, BigInteger, String, TIMESTAMP
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from src.db.session import Base
from src.core.storage import StorageKind, StorageLocator


class User(Base):
    """로그인 계정 모델 (관리자, 어드바이저, 학생, 일반 사용자)"""

    __tablename__ = "users"

    user_id = Column(BigInteger, primary_key=True, autoincrement=True)  # 사용자 고유 ID
    email = Column(String(255), unique=True, nullable=False, index=True)  # 이메일 (로그인 ID)
    name = Column(String(255), nullable=False)  # 이름
    role = Column(String(20), nullable=False, server_default="user")  # 'admin' | 'advisor' | 'student' | 'user'
    avatar_storage_kind = Column(String(10), nullable=True)  # 아바타 저장소 종류 ('remote' | 'local')
    avatar_storage_key = Column(String(1024), nullable=True)  # 아바타 저장 키
    created_at = Column(TIMESTAMP, nullable=False, server_default=func.now())  # 가입 일시

    # 관계 설정
    student_profile = relationship("Student", back_populates="user", uselist=False)

    @property
    def avatar_locator(self):
        """아바타 저장 위치 (없으면 None)"""
        if not self.avatar_storage_kind or not self.avatar_storage_key:
            return None
        return StorageLocator(kind=StorageKind(self.avatar_storage_kind), key=self.avatar_storage_key)

    def __repr__(self):
        return f"<User(user_id={self.user_id}, email={self.email}, role={self.role})>"
