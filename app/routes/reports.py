"""
리포트 API 라우트
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List
from app.database import get_db
from app.dependencies import get_current_user
from app.models.user import User
from app.schemas.report import DailyCount, MonthlyCount, VisitorSummary
from app.services.report_service import ReportService, DEFAULT_DAYS, DEFAULT_MONTHS

router = APIRouter(
    prefix="/reports",
    tags=["Reports"]
)


@router.get("/daily", response_model=List[DailyCount])
async def daily_report(
        days: int = Query(DEFAULT_DAYS),
        db: Session = Depends(get_db),
        current_user: User = Depends(get_current_user)
):
    """최근 N일 일별 방문자 수 (N 은 1..30 으로 보정)"""
    return ReportService.daily_counts(db, days)


@router.get("/monthly", response_model=List[MonthlyCount])
async def monthly_report(
        months: int = Query(DEFAULT_MONTHS),
        db: Session = Depends(get_db),
        current_user: User = Depends(get_current_user)
):
    """최근 N개월 월별 방문자 수 (N 은 1..24 로 보정)"""
    return ReportService.monthly_counts(db, months)


@router.get("/summary", response_model=VisitorSummary)
async def summary_report(
        db: Session = Depends(get_db),
        current_user: User = Depends(get_current_user)
):
    """오늘 방문자 / 체크인 중 / 체크아웃 완료 인원"""
    return ReportService.summary(db)
