"""
사용자 모델 (데이터베이스 테이블)
"""
import uuid
from sqlalchemy import Column, String, BigInteger
from app.database import Base
from app.utils.timestamps import now_epoch


class User(Base):
    """사용자 테이블"""
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    username = Column(String(100), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False, default="")  # OTP 로그인 사용자는 빈 값
    created_at = Column(BigInteger, default=now_epoch, nullable=False)

    def __repr__(self):
        return f"<User(id={self.id}, username={self.username})>"
