"""
애플리케이션 설정 파일
환경 변수를 통해 설정 관리
"""
from pydantic_settings import BaseSettings
from typing import Optional
from pathlib import Path


class Settings(BaseSettings):
    """애플리케이션 설정"""

    # 데이터베이스 설정
    database_url: str = "sqlite:///./vms.db"

    # JWT 설정
    secret_key: str = "dev_secret-change-in-production"
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24 * 7

    # OTP 설정
    otp_ttl_seconds: int = 300
    otp_dev_mode: bool = True  # 개발 모드에서는 응답에 OTP 코드를 포함

    # 방문자 사진 저장 설정
    upload_dir: str = "uploads"
    max_photo_bytes: int = 314572
    public_base_url: Optional[str] = None  # 미설정 시 요청 URL 기준으로 절대 경로 생성

    # 애플리케이션 설정
    app_name: str = "Visitor Management System"
    app_version: str = "1.0.0"
    debug: bool = False

    # CORS 설정
    allowed_origins: list[str] = ["http://localhost:3000", "http://localhost:5173"]

    # 로깅 설정
    log_level: str = "INFO"
    log_file: Optional[str] = None

    class Config:
        env_file = str(Path(__file__).resolve().parents[1] / ".env")
        case_sensitive = False
        extra = "ignore"


settings = Settings()
