"""
사용자 관리 및 인증 API 라우트
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from app.config import settings
from app.database import get_db
from app.schemas.user import (
    UserCreate,
    UserLogin,
    UserResponse,
    TokenResponse,
    OtpSendRequest,
    OtpSendResponse,
    OtpVerifyRequest
)
from app.services.user_service import UserService
from app.services.otp_service import OtpService
from app.security.auth import create_access_token
from app.dependencies import get_current_user
from app.models.user import User

router = APIRouter(
    prefix="/auth",
    tags=["Authentication"]
)


def _token_response(user: User) -> dict:
    return {
        "id": user.id,
        "username": user.username,
        "token": create_access_token(user.id, user.username)
    }


@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
async def register(
        user_data: UserCreate,
        db: Session = Depends(get_db)
):
    """사용자 회원가입 (가입 즉시 토큰 발급)"""
    user = UserService.create_user(db, user_data)
    return _token_response(user)


@router.post("/login", response_model=TokenResponse)
async def login(
        user_login: UserLogin,
        db: Session = Depends(get_db)
):
    """사용자 로그인 및 토큰 발급"""
    user = UserService.authenticate_user(db, user_login)
    return _token_response(user)


@router.post("/send-otp", response_model=OtpSendResponse)
async def send_otp(
        otp_request: OtpSendRequest,
        db: Session = Depends(get_db)
):
    """OTP 발급 (개발 모드에서는 응답에 코드 포함)"""
    otp = OtpService.send_otp(db, otp_request.phone)
    if settings.otp_dev_mode:
        return {"message": "OTP generated (DEV)", "otp": otp.code, "expires_at": otp.expires_at}
    return {"message": "OTP generated", "expires_at": otp.expires_at}


@router.post("/verify-otp", response_model=TokenResponse)
async def verify_otp(
        otp_verify: OtpVerifyRequest,
        db: Session = Depends(get_db)
):
    """OTP 검증 및 토큰 발급"""
    user = OtpService.verify_otp(db, otp_verify.phone, otp_verify.otp)
    return _token_response(user)


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(
        current_user: User = Depends(get_current_user)
):
    """현재 로그인한 사용자 정보 조회 (토큰 기반)"""
    return current_user
