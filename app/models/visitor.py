"""
방문자 모델 (데이터베이스 테이블)
체크인 1건 = 방문자 레코드 1건
"""
import uuid
from sqlalchemy import Column, String, Text, BigInteger, ForeignKey
from app.database import Base
from app.utils.timestamps import normalize_timestamp


class Visitor(Base):
    """방문자 테이블"""
    __tablename__ = "visitors"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(Text, nullable=False)
    phone = Column(Text, default="")
    address = Column(Text, default="")
    purpose = Column(Text, default="")
    company = Column(Text, default="")
    person_to_meet = Column("personToMeet", Text, default="")
    photo = Column(Text, nullable=True)  # 저장된 사진 참조 (/uploads/...)
    checkin_time = Column(BigInteger, nullable=False, index=True)  # epoch seconds
    checkout_time = Column(BigInteger, nullable=True)  # 체크아웃 전에는 NULL
    created_by = Column(String(36), ForeignKey("users.id"), nullable=True)

    @property
    def is_checked_out(self) -> bool:
        # 레거시 빈 문자열 등은 체크아웃 전으로 취급
        return normalize_timestamp(self.checkout_time) is not None

    def __repr__(self):
        return f"<Visitor(id={self.id}, name={self.name}, checkin_time={self.checkin_time})>"
