"""
인증 의존성
FastAPI 의존성 주입 패턴 사용 - 자격 증명은 항상 요청 헤더로 명시적으로 전달됨
"""
from fastapi import Depends, Header
from sqlalchemy.orm import Session
from typing import Optional
from app.database import get_db
from app.security.auth import verify_token
from app.models.user import User
from app.utils.exceptions import UnauthorizedException


def _extract_bearer_token(authorization: Optional[str]) -> str:
    if not authorization:
        raise UnauthorizedException(detail="Missing authorization header")

    # Bearer 토큰 형식 추출 (Scheme과 Token 분리)
    try:
        scheme, token = authorization.split()
    except ValueError:
        raise UnauthorizedException(detail="Invalid authorization header format")
    if scheme.lower() != "bearer":
        raise UnauthorizedException(detail="Invalid authentication scheme")
    return token


def _resolve_user(db: Session, authorization: Optional[str]) -> User:
    token = _extract_bearer_token(authorization)

    token_payload = verify_token(token)
    if not token_payload:
        raise UnauthorizedException(detail="Invalid or expired token")

    user = db.query(User).filter(User.id == token_payload.sub).first()
    if not user:
        raise UnauthorizedException(detail="User no longer exists")
    return user


async def get_current_user(
        db: Session = Depends(get_db),
        authorization: Optional[str] = Header(None)
) -> User:
    """
    현재 인증된 사용자 가져오기
    - Authorization 헤더에서 Bearer 토큰을 추출하고 검증합니다.
    """
    return _resolve_user(db, authorization)


async def get_optional_user(
        db: Session = Depends(get_db),
        authorization: Optional[str] = Header(None)
) -> Optional[User]:
    """
    인증이 선택인 엔드포인트용 (방문자 체크인)
    - 헤더가 없거나 토큰이 유효하지 않으면 None
    """
    if not authorization:
        return None
    try:
        return _resolve_user(db, authorization)
    except UnauthorizedException:
        return None
