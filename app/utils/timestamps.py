"""
타임스탬프 정규화

저장소와 클라이언트에는 초(epoch seconds), 밀리초, 날짜 문자열이 섞여 있을 수 있다.
쓰기 경로(조회 범위, 저장 값)와 읽기 경로(반환되는 모든 방문자)는 반드시
normalize_timestamp() 하나만 사용해서 초 단위 정수로 맞춘다.
"""
import math
import time
from datetime import datetime, date
from typing import Optional, Union

# 이 값보다 큰 숫자는 밀리초로 간주 (초 단위라면 서기 2286년 이후)
MILLISECONDS_THRESHOLD = 10_000_000_000

TimestampLike = Union[int, float, str, datetime, date, None]


def now_epoch() -> int:
    """현재 서버 시각 (epoch seconds)"""
    return int(time.time())


def _from_number(value: float) -> int:
    if value > MILLISECONDS_THRESHOLD:
        return math.floor(value / 1000)
    return math.floor(value)


def _parse_datetime_text(text: str) -> Optional[int]:
    # 'Z' 접미사는 fromisoformat 이 3.11 미만에서 처리하지 못함
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    # naive 값은 서버 로컬 시간으로 해석
    return math.floor(parsed.timestamp())


def normalize_timestamp(value: TimestampLike) -> Optional[int]:
    """
    임의 표현의 타임스탬프를 epoch seconds 로 변환

    - None / 빈 문자열 -> None
    - 숫자(또는 숫자만으로 된 문자열): 10,000,000,000 초과면 밀리초로 보고 1000 으로 나눈 뒤 내림
    - 그 외 문자열: ISO 8601 날짜/시각으로 파싱 (naive 는 로컬 시간)
    - 파싱 불가 -> None

    이미 정규화된 값에 다시 적용해도 같은 값을 돌려준다.
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, (int, float)):
        if isinstance(value, float) and not math.isfinite(value):
            return None
        return _from_number(value)

    if isinstance(value, datetime):
        return math.floor(value.timestamp())

    if isinstance(value, date):
        return math.floor(datetime(value.year, value.month, value.day).timestamp())

    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return _parse_datetime_text(text)
        if not math.isfinite(number):
            return None
        return _from_number(number)

    return None
