import os
import time
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from starlette.staticfiles import StaticFiles
from app.config import settings
from app.database import create_tables
from app.routes.users import router as users_router
from app.routes.visitors import router as visitors_router
from app.routes.reports import router as reports_router
from app.services.photo_service import UPLOAD_URL_PREFIX
from app.utils.exceptions import AppException, ValidationException, format_validation_errors
from app.utils.logger import get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """애플리케이션 라이프사이클 관리"""
    # 시작: 데이터베이스 테이블 생성
    create_tables()
    logger.info(f"Database initialized ({settings.database_url})")
    yield
    logger.info("Application shutdown")


app = FastAPI(
    title=settings.app_name,
    description="방문자 체크인/체크아웃 관리 API",
    version=settings.app_version,
    lifespan=lifespan
)

# CORS 미들웨어 설정
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# 업로드된 방문자 사진 제공
os.makedirs(settings.upload_dir, exist_ok=True)
app.mount(UPLOAD_URL_PREFIX, StaticFiles(directory=settings.upload_dir), name="uploads")


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.time()
    response = await call_next(request)
    duration = round((time.time() - start) * 1000, 2)
    logger.debug(f"{request.method} {request.url.path} -> {response.status_code} ({duration}ms)")
    return response


@app.exception_handler(AppException)
async def app_exception_handler(request: Request, exc: AppException):
    """애플리케이션 예외 -> {error, detail}"""
    if exc.status_code >= 500:
        logger.error(f"{exc.kind} on {request.url.path}: {exc.detail}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.kind, "detail": exc.detail},
        headers=exc.headers,
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """쿼리/본문 검증 실패도 {error, detail} 형식으로"""
    return JSONResponse(
        status_code=422,
        content={"error": ValidationException.kind, "detail": format_validation_errors(exc.errors())},
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "internal_error", "detail": "Internal server error"},
    )


# 헬스체크 엔드포인트
@app.get("/health")
async def health_check():
    """애플리케이션 상태 확인"""
    return {
        "status": "ok",
        "app_name": settings.app_name,
        "version": settings.app_version
    }


# 라우터 등록
app.include_router(users_router)
app.include_router(visitors_router)
app.include_router(reports_router)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=int(os.getenv("PORT", "4000")),
        reload=settings.debug
    )
