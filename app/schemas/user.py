"""
사용자/인증 관련 Pydantic 스키마 (API 요청/응답)
"""
from pydantic import BaseModel, Field, field_validator
from typing import Optional


class UserCreate(BaseModel):
    """사용자 생성 요청"""
    username: str = Field(..., min_length=1, max_length=100)
    password: str = Field(..., min_length=1)


class UserLogin(BaseModel):
    """사용자 로그인 요청"""
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class UserResponse(BaseModel):
    """사용자 응답"""
    id: str
    username: str
    created_at: int

    class Config:
        from_attributes = True


class TokenResponse(BaseModel):
    """토큰 응답"""
    id: str
    username: str
    token: str


class TokenPayload(BaseModel):
    """토큰 페이로드"""
    sub: str
    username: str
    exp: int
    iat: int


class OtpSendRequest(BaseModel):
    """OTP 발송 요청"""
    phone: str = Field(..., min_length=1, max_length=20)


class OtpSendResponse(BaseModel):
    """OTP 발송 응답 (개발 모드에서만 otp 포함)"""
    message: str
    otp: Optional[str] = None
    expires_at: int


class OtpVerifyRequest(BaseModel):
    """OTP 검증 요청"""
    phone: str = Field(..., min_length=1, max_length=20)
    otp: str = Field(..., min_length=1)

    @field_validator("otp", mode="before")
    @classmethod
    def coerce_code(cls, v):
        # 클라이언트가 숫자로 보내는 경우
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v
