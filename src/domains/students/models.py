# -*- coding: utf-8 -*-
from sqlalchemy import Column, BigInteger, String, TIMESTAMP, ForeignKey
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from src.db.session import Base


class Student(Base):
    """학생 프로필 모델 (문서 소유 주체)"""

    __tablename__ = "students"

    student_id = Column(BigInteger, primary_key=True, autoincrement=True)  # 학생 고유 ID
    user_id = Column(BigInteger, ForeignKey("users.user_id", ondelete="SET NULL"), unique=True, nullable=True, index=True)  # 연결된 로그인 계정
    first_name = Column(String(100), nullable=False)  # 이름
    last_name = Column(String(100), nullable=False)  # 성
    created_at = Column(TIMESTAMP, nullable=False, server_default=func.now())  # 생성 일시

    # 관계 설정
    user = relationship("User", back_populates="student_profile")
    documents = relationship("Document", back_populates="owner", passive_deletes=True)

    def __repr__(self):
        return f"<Student(student_id={self.student_id}, user_id={self.user_id})>"
