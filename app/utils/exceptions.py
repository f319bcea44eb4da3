"""
사용자 정의 예외 클래스
모든 예외는 error 종류(kind)와 사람이 읽을 수 있는 메시지(detail)를 가짐
"""
from typing import Iterable, Optional
from fastapi import HTTPException, status


def format_validation_errors(errors: Iterable[dict]) -> str:
    """pydantic/FastAPI 검증 오류 목록 -> 'loc: msg; ...' 문자열"""
    return "; ".join(
        f"{'.'.join(str(p) for p in e.get('loc', ()))}: {e.get('msg', 'invalid value')}" for e in errors
    )


class AppException(HTTPException):
    """기본 애플리케이션 예외"""
    kind = "app_error"

    def __init__(self, status_code: int, detail: str, headers: Optional[dict] = None):
        super().__init__(status_code=status_code, detail=detail, headers=headers)


class NotFoundException(AppException):
    """리소스를 찾을 수 없을 때 발생"""
    kind = "not_found"

    def __init__(self, detail: str = "Resource not found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class UnauthorizedException(AppException):
    """인증이 필요하거나 인증이 실패했을 때 발생"""
    kind = "auth_error"

    def __init__(self, detail: str = "Not authenticated"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"}
        )


class ValidationException(AppException):
    """입력 데이터 검증 실패"""
    kind = "validation_error"

    def __init__(self, detail: str = "Validation error"):
        super().__init__(status_code=422, detail=detail)


class DuplicateException(AppException):
    """중복된 리소스"""
    kind = "duplicate"

    def __init__(self, detail: str = "Resource already exists"):
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class StorageException(AppException):
    """데이터베이스 저장 실패 (재시도하지 않음)"""
    kind = "storage_error"

    def __init__(self, detail: str = "Storage error"):
        super().__init__(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail)
