from datetime import datetime

from fastapi import APIRouter, Depends, Query

from frontdesk.core.deps import get_reporting_engine
from frontdesk.schemas.report import ShiftReportOut, TodaySummaryOut
from frontdesk.services.reporting import ReportingEngine

router = APIRouter()


@router.get("/today", response_model=TodaySummaryOut)
def get_today_shifts_summary(engine: ReportingEngine = Depends(get_reporting_engine)):
    return engine.get_today_shifts_summary()


@router.get("/shifts", response_model=ShiftReportOut)
def get_shift_report(
    start_date: datetime = Query(...),
    end_date: datetime = Query(...),
    engine: ReportingEngine = Depends(get_reporting_engine),
):
    return engine.get_shift_report(start_date, end_date)
