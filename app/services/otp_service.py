"""
OTP 로그인 서비스
- 전화번호별 6자리 코드를 발급하고, 가장 최근 코드 1건만 1회 검증 가능
"""
import secrets
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from app.config import settings
from app.models.otp import Otp
from app.models.user import User
from app.services.user_service import UserService
from app.utils.exceptions import UnauthorizedException, StorageException
from app.utils.logger import get_logger
from app.utils.timestamps import now_epoch

logger = get_logger(__name__)


def generate_code() -> str:
    return str(100000 + secrets.randbelow(900000))


class OtpService:
    """OTP 발급/검증"""

    @staticmethod
    def send_otp(db: Session, phone: str) -> Otp:
        """OTP 발급 (실제 SMS 발송은 하지 않음)"""
        now = now_epoch()
        otp = Otp(
            phone=phone,
            code=generate_code(),
            expires_at=now + settings.otp_ttl_seconds,
            used=False,
            created_at=now,
        )
        db.add(otp)
        try:
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            logger.error(f"[OTP] Failed to store OTP for {phone}: {exc}")
            raise StorageException(detail="Failed to create OTP") from exc
        db.refresh(otp)
        logger.info(f"[OTP] Issued for {phone}, expires_at={otp.expires_at}")
        return otp

    @staticmethod
    def verify_otp(db: Session, phone: str, code: str) -> User:
        """
        OTP 검증 후 로그인 사용자 반환
        - 코드 없음 / 이미 사용 / 만료 / 불일치 는 모두 인증 실패
        - 성공 시 코드를 사용 처리하고, 전화번호를 username 으로 하는 사용자를 조회/생성
        """
        otp = (
            db.query(Otp)
            .filter(Otp.phone == phone)
            .order_by(Otp.created_at.desc(), Otp.id.desc())
            .first()
        )

        if not otp:
            raise UnauthorizedException(detail="No OTP found")
        if otp.used:
            raise UnauthorizedException(detail="OTP already used")
        if now_epoch() > otp.expires_at:
            raise UnauthorizedException(detail="OTP expired")
        if otp.code != str(code).strip():
            raise UnauthorizedException(detail="Invalid OTP")

        otp.used = True
        try:
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            logger.error(f"[OTP] Failed to consume OTP {otp.id}: {exc}")
            raise StorageException(detail="Failed to verify OTP") from exc

        return UserService.get_or_create_by_username(db, phone)
