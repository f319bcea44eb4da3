"""
리포트 집계 서비스
- 일별(최근 N일) / 월별(최근 N개월) 방문자 수, 대시보드 요약
- 모든 구간은 서버 로컬 달력 기준의 [시작, 끝] (초 단위, 양끝 포함)
- 정규화된 checkin_time 을 한 번 읽어 정렬한 뒤 구간별로 이분 탐색
"""
import calendar
from bisect import bisect_left, bisect_right
from datetime import date, datetime, timedelta
from typing import List, Optional, Sequence, Tuple
from sqlalchemy.orm import Session
from app.schemas.report import DailyCount, MonthlyCount, VisitorSummary
from app.services.visitor_service import VisitorService

MAX_DAYS = 30
MAX_MONTHS = 24
DEFAULT_DAYS = 7
DEFAULT_MONTHS = 6

Window = Tuple[str, int, int]  # (label, start, end)


def clamp(value: Optional[int], lower: int, upper: int, default: int) -> int:
    """범위를 벗어난 요청은 거부하지 않고 잘라냄"""
    if value is None:
        return default
    return min(upper, max(lower, int(value)))


def _local_epoch(dt: datetime) -> int:
    return int(dt.timestamp())


def day_window(day: date) -> Tuple[int, int]:
    start = datetime(day.year, day.month, day.day, 0, 0, 0)
    end = datetime(day.year, day.month, day.day, 23, 59, 59)
    return _local_epoch(start), _local_epoch(end)


def day_windows(days: int, today: date) -> List[Window]:
    """오늘을 포함한 최근 days 일, 오래된 날짜부터"""
    windows = []
    for offset in range(days - 1, -1, -1):
        day = today - timedelta(days=offset)
        start, end = day_window(day)
        windows.append((day.strftime("%Y-%m-%d"), start, end))
    return windows


def month_windows(months: int, today: date) -> List[Window]:
    """이번 달을 포함한 최근 months 개월, 오래된 달부터"""
    windows = []
    current = today.year * 12 + (today.month - 1)
    for offset in range(months - 1, -1, -1):
        year, month_index = divmod(current - offset, 12)
        month = month_index + 1
        last_day = calendar.monthrange(year, month)[1]
        start = _local_epoch(datetime(year, month, 1, 0, 0, 0))
        end = _local_epoch(datetime(year, month, last_day, 23, 59, 59))
        windows.append((f"{year:04d}-{month:02d}", start, end))
    return windows


def count_in_windows(times: Sequence[int], windows: Sequence[Window]) -> List[int]:
    """각 구간 [start, end] 에 포함되는 시각의 개수"""
    ordered = sorted(times)
    return [bisect_right(ordered, end) - bisect_left(ordered, start) for _, start, end in windows]


class ReportService:
    """리포트 집계 (읽기 전용)"""

    @staticmethod
    def _checkin_times(db: Session) -> List[int]:
        return [record.checkin_time for record in VisitorService.all_records(db)]

    @staticmethod
    def daily_counts(db: Session, days: Optional[int] = DEFAULT_DAYS, today: Optional[date] = None) -> List[DailyCount]:
        """일별 방문자 수 (days 는 1..30 으로 보정)"""
        days = clamp(days, 1, MAX_DAYS, DEFAULT_DAYS)
        windows = day_windows(days, today or date.today())
        counts = count_in_windows(ReportService._checkin_times(db), windows)
        return [DailyCount(date=label, count=count) for (label, _, _), count in zip(windows, counts)]

    @staticmethod
    def monthly_counts(db: Session, months: Optional[int] = DEFAULT_MONTHS, today: Optional[date] = None) -> List[MonthlyCount]:
        """월별 방문자 수 (months 는 1..24 로 보정)"""
        months = clamp(months, 1, MAX_MONTHS, DEFAULT_MONTHS)
        windows = month_windows(months, today or date.today())
        counts = count_in_windows(ReportService._checkin_times(db), windows)
        return [MonthlyCount(month=label, count=count) for (label, _, _), count in zip(windows, counts)]

    @staticmethod
    def summary(db: Session, today: Optional[date] = None) -> VisitorSummary:
        """오늘 방문자 수, 체크인 중 / 체크아웃 완료 인원"""
        records = VisitorService.all_records(db)
        start, end = day_window(today or date.today())
        checked_in = sum(1 for r in records if r.checkout_time is None)
        return VisitorSummary(
            today=sum(1 for r in records if start <= r.checkin_time <= end),
            checked_in=checked_in,
            checked_out=len(records) - checked_in,
            total=len(records),
        )
