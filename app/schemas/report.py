"""
리포트 응답 스키마
"""
from pydantic import BaseModel


class DailyCount(BaseModel):
    """일별 방문자 수"""
    date: str  # YYYY-MM-DD
    count: int


class MonthlyCount(BaseModel):
    """월별 방문자 수"""
    month: str  # YYYY-MM
    count: int


class VisitorSummary(BaseModel):
    """대시보드 요약"""
    today: int
    checked_in: int
    checked_out: int
    total: int
