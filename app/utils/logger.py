"""
로깅 설정
콘솔 출력 + (선택) 로테이팅 파일 로그
"""
import logging
import os
from logging.handlers import RotatingFileHandler

from app.config import settings

_configured = False


def _configure_root_logger():
    global _configured
    if _configured:
        return
    _configured = True

    level = settings.log_level.upper()
    fmt = logging.Formatter(
        fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console = logging.StreamHandler()
    console.setLevel(level)
    console.setFormatter(fmt)

    root = logging.getLogger()
    root.setLevel(level)
    root.addHandler(console)

    # 파일 로그는 LOG_FILE 이 설정된 경우에만 (최근 10 × 5MB 유지)
    if settings.log_file:
        log_dir = os.path.dirname(settings.log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        file_handler = RotatingFileHandler(
            filename=settings.log_file,
            maxBytes=5 * 1024 * 1024,
            backupCount=10,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(fmt)
        root.addHandler(file_handler)


def get_logger(name: str) -> logging.Logger:
    """모듈 상단에서 호출하여 이름 있는 로거를 가져옴"""
    _configure_root_logger()
    return logging.getLogger(name)
