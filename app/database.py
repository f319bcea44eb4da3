"""
데이터베이스 연결 설정
SQLAlchemy를 사용한 데이터베이스 관리
"""
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from app.config import settings

# SQLite 여부에 따라 엔진 옵션 분기
_connect_args = {}
if settings.database_url.startswith("sqlite"):
    _connect_args = {"check_same_thread": False}

# 데이터베이스 엔진 생성
engine = create_engine(
    settings.database_url,
    pool_pre_ping=True,   # 연결 검사
    connect_args=_connect_args,
)

# 세션 팩토리 생성
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# 모델 기본 클래스
Base = declarative_base()


def get_db():
    """데이터베이스 세션 의존성"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def create_tables():
    """
    모든 테이블 생성 (이미 존재하면 건너뜀)
    - 모델을 먼저 import 해야 metadata 에 등록됩니다.
    """
    from app.models.user import User  # noqa
    from app.models.otp import Otp  # noqa
    from app.models.visitor import Visitor  # noqa

    Base.metadata.create_all(bind=engine)
