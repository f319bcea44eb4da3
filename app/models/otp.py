"""
OTP 인증 요청 모델 (데이터베이스 테이블)
"""
from sqlalchemy import Column, Integer, String, BigInteger, Boolean
from app.database import Base
from app.utils.timestamps import now_epoch


class Otp(Base):
    """OTP 테이블 (1회용)"""
    __tablename__ = "otps"

    id = Column(Integer, primary_key=True, autoincrement=True)  # 같은 초에 발급된 코드의 순서
    phone = Column(String(20), nullable=False, index=True)
    code = Column(String(6), nullable=False)
    expires_at = Column(BigInteger, nullable=False)
    used = Column(Boolean, default=False, nullable=False)
    created_at = Column(BigInteger, default=now_epoch, nullable=False)

    def __repr__(self):
        return f"<Otp(id={self.id}, phone={self.phone}, used={self.used})>"
