"""
사용자 관리 서비스
비즈니스 로직 계층
"""
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from app.models.user import User
from app.schemas.user import UserCreate, UserLogin
from app.security.auth import hash_password, verify_password
from app.utils.exceptions import NotFoundException, DuplicateException, UnauthorizedException, StorageException
from app.utils.logger import get_logger

logger = get_logger(__name__)


class UserService:
    """사용자 관리 서비스"""

    @staticmethod
    def _commit(db: Session, action: str) -> None:
        try:
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            logger.error(f"[USER] {action} failed: {exc}")
            raise StorageException(detail=f"Failed to {action}") from exc

    @staticmethod
    def create_user(db: Session, user_data: UserCreate) -> User:
        """사용자 생성 (회원가입)"""
        existing_user = db.query(User).filter(User.username == user_data.username).first()
        if existing_user:
            raise DuplicateException(detail="Username already exists")

        user = User(
            username=user_data.username,
            password_hash=hash_password(user_data.password),
        )

        db.add(user)
        UserService._commit(db, "create user")
        db.refresh(user)
        logger.info(f"[USER] Registered {user.username}")
        return user

    @staticmethod
    def authenticate_user(db: Session, user_login: UserLogin) -> User:
        """사용자 인증 (로그인 로직)"""
        user = db.query(User).filter(User.username == user_login.username).first()

        # 유저 미존재 또는 비밀번호 불일치
        if not user or not verify_password(user_login.password, user.password_hash):
            raise UnauthorizedException(detail="Invalid username or password")

        return user

    @staticmethod
    def get_user_by_id(db: Session, user_id: str) -> User:
        """ID로 사용자 조회"""
        user = db.query(User).filter(User.id == user_id).first()
        if not user:
            raise NotFoundException(detail=f"User with ID {user_id} not found")
        return user

    @staticmethod
    def get_or_create_by_username(db: Session, username: str) -> User:
        """사용자명으로 조회, 없으면 비밀번호 없는 계정 생성 (OTP 로그인용)"""
        user = db.query(User).filter(User.username == username).first()
        if user:
            return user

        user = User(username=username, password_hash="")
        db.add(user)
        UserService._commit(db, "create user")
        db.refresh(user)
        logger.info(f"[USER] Created OTP user {username}")
        return user

    @staticmethod
    def reset_password(db: Session, username: str, new_password: str) -> User:
        """비밀번호 재설정"""
        user = db.query(User).filter(User.username == username).first()
        if not user:
            raise NotFoundException(detail=f"User with username {username} not found")

        user.password_hash = hash_password(new_password)
        UserService._commit(db, "reset password")
        db.refresh(user)
        return user
